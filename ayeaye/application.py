"""
Top-level orchestrator: turns one request into one prepared response.
"""

import logging
from typing import Any, Dict, Optional

from .config import ApiConfig
from .content_renderers import ContentRenderer, JSONRenderer, default_renderers
from .controller import Controller
from .error_models import ErrorResponse
from .exceptions import ApiError
from .models import Request, Response
from .router import Router
from .status import Status

# Set up logger for this module
logger = logging.getLogger(__name__)


class Api:
    """Wires a request, the router, a response and a logger together.

    ``go()`` never raises. Dispatcher errors become responses carrying their status
    code and public message, anything unexpected becomes a 500, and a failure while
    preparing the response itself falls back to a bare JSON 500 response.

    Args:
        controller: Root of the controller tree
        router: Router to resolve requests with; a new one is created when omitted
        logger: Logger for request errors; defaults to this module's logger
        config: Default format and allowed methods; read from the environment when omitted
    """

    def __init__(
        self,
        controller: Controller,
        router: Optional[Router] = None,
        logger: Optional[logging.Logger] = None,
        config: Optional[ApiConfig] = None,
    ):
        self.controller = controller
        self.router = router
        self.logger = logger
        self.config = config or ApiConfig.from_env()
        self.request: Optional[Request] = None
        self.response: Optional[Response] = None
        self.renderers: Dict[str, ContentRenderer] = default_renderers()

    def set_initial_controller(self, controller: Controller) -> "Api":
        self.controller = controller
        return self

    def get_initial_controller(self) -> Controller:
        return self.controller

    def set_router(self, router: Router) -> "Api":
        self.router = router
        return self

    def get_router(self) -> Router:
        if self.router is None:
            self.router = Router()
        return self.router

    def set_logger(self, logger: logging.Logger) -> "Api":
        self.logger = logger
        return self

    def set_request(self, request: Request) -> "Api":
        self.request = request
        return self

    def get_request(self) -> Request:
        """The request set with set_request, or one built from an empty environment."""
        if self.request is None:
            return Request(config=self.config)
        return self.request

    def set_response(self, response: Response) -> "Api":
        self.response = response
        return self

    def get_response(self) -> Response:
        """The response set with set_response, or a new one for each call to go()."""
        if self.response is None:
            return Response()
        return self.response

    def add_content_renderer(self, renderer: ContentRenderer) -> "Api":
        """Add or replace the renderer for a format."""
        self.renderers[renderer.format] = renderer
        return self

    def log(self, level: int, message: str, **kwargs: Any) -> "Api":
        (self.logger or logger).log(level, message, **kwargs)
        return self

    def go(self, request: Optional[Request] = None) -> Response:
        """Process the request and return a prepared response.

        Args:
            request: Request to process; defaults to the one set with set_request

        Returns:
            The response, rendered in the requested format
        """
        try:
            if request is None:
                request = self.get_request()
            response = self.get_response()
            response.request = request

            try:
                data, status = self.get_router().process_request(request, self.controller)
                response.status = status
                response.data = data
            except ApiError as e:
                self.log(logging.INFO, e.get_public_message())
                self.log(logging.ERROR, str(e), exc_info=e)
                response.status = Status(e.code)
                response.data = ErrorResponse.from_error(e)
            except Exception as e:
                self.log(logging.CRITICAL, str(e), exc_info=e)
                response.status = Status(500)
                response.data = ErrorResponse.from_status(500)

            return response.prepare(self.renderers, self.config.default_format)
        except Exception as e:
            self.log(logging.CRITICAL, f"Failed to prepare response: {e}", exc_info=e)
            return self.create_fail_safe_response()

    def create_fail_safe_response(self) -> Response:
        """A JSON 500 response built without the configured collaborators."""
        response = Response(status=Status(500), data=Status.get_message_for_code(500))
        return response.prepare({"json": JSONRenderer()}, "json")
