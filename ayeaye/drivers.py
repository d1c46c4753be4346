"""
Driver interface for handing transport events to the dispatcher.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .models import Environment, HTTPMethod, Request, Response

logger = logging.getLogger(__name__)


class Driver(ABC):
    """Adapts one transport to the Api.

    A driver turns a transport event into a Request, hands it to ``Api.go()`` and
    turns the prepared Response back into whatever the transport expects.
    """

    @abstractmethod
    def handle_event(self, event: Any, context: Optional[Any] = None) -> Any:
        """Dispatch one transport event and return the transport's reply."""

    @abstractmethod
    def convert_to_request(self, event: Any, context: Optional[Any] = None) -> Request:
        """Build a Request from a transport event."""

    @abstractmethod
    def convert_from_response(self, response: Response, event: Any, context: Optional[Any] = None) -> Any:
        """Translate a prepared Response for the transport that sent ``event``."""


class WSGIDriver(Driver):
    """Serves an Api as a WSGI application.

    Example:
        api = Api(RootController())
        wsgiref.simple_server.make_server("", 8000, WSGIDriver(api)).serve_forever()
    """

    def __init__(self, api):
        """
        Initialize the driver with an Api instance.

        Args:
            api: The Api instance to dispatch requests to
        """
        self.api = api

    def __call__(self, environ: Dict[str, Any], start_response: Callable) -> Iterable[bytes]:
        return self.handle_event(environ, start_response)

    def handle_event(self, event: Dict[str, Any], context: Optional[Any] = None) -> List[bytes]:
        """
        Handle one WSGI call.

        Args:
            event: WSGI environ
            context: WSGI start_response callable

        Returns:
            The response body as a list of byte strings
        """
        request = self.convert_to_request(event, context)
        logger.debug(f"Dispatching {request!r}")
        response = self.api.go(request)
        status_line, headers, body = self.convert_from_response(response, event, context)
        if context is not None:
            context(status_line, headers)
        return body

    def convert_to_request(self, event: Dict[str, Any], context: Optional[Any] = None) -> Request:
        """
        Convert a WSGI environ to a Request object.

        Args:
            event: WSGI environ
            context: Unused

        Returns:
            Request built from a snapshot of the environ
        """
        return Request(environment=Environment.from_wsgi(event), config=self.api.config)

    def convert_from_response(
        self, response: Response, event: Dict[str, Any], context: Optional[Any] = None
    ) -> Tuple[str, List[Tuple[str, str]], List[bytes]]:
        """
        Convert a prepared Response into WSGI status, headers and body.

        HEAD requests keep their headers but get an empty body.

        Args:
            response: Prepared response from the Api
            event: Original WSGI environ
            context: Unused

        Returns:
            Tuple of (status line, header list, body chunks)
        """
        headers = [(name, value) for name, value in response.headers.items()]
        body = (response.content or "").encode("utf-8")
        if event.get("REQUEST_METHOD", "").upper() == HTTPMethod.HEAD.value:
            body = b""
        return response.status_line, headers, [body]
