"""
Route resolution: walks a request chain through a tree of controllers.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .binding import call_with_parameters
from .controller import Controller, EndpointHandle
from .documentation import describe
from .exceptions import NotFound
from .models import HTTPMethod, Request
from .naming import display_name, to_controller_name, to_endpoint_name
from .status import Status

logger = logging.getLogger(__name__)


class Router:
    """Resolves a request to a nested controller, an endpoint or self-documentation.

    Resolution is a fresh walk for every request; nothing is precomputed. Each path
    segment is first tried as a nested controller (``<name>Controller``) and then as
    an endpoint for the request verb (``<verb><Name>Endpoint``). When the chain runs
    out, the controller's index endpoint is called, or, if it has none, a listing of
    its controllers and endpoints is returned.
    """

    def __init__(self):
        self._status = Status(200)

    def get_status(self) -> Status:
        """The status of the last resolved request, 200 OK by default."""
        return self._status

    def set_status(self, status: Union[Status, int]) -> "Router":
        if not isinstance(status, Status):
            status = Status(status)
        self._status = status
        return self

    def process_request(
        self,
        request: Request,
        controller: Controller,
        chain: Optional[Sequence[str]] = None,
    ) -> Tuple[Any, Status]:
        """Resolve a request against a root controller and run the matching endpoint.

        Args:
            request: The normalized request
            controller: Root of the controller tree
            chain: Path segments to resolve instead of ``request.request_chain``; an
                empty sequence resolves the root controller itself

        Returns:
            Tuple of (result, status). The result is the endpoint return value or the
            self-documentation structure.

        Raises:
            NotFound: If a segment matches neither a controller nor an endpoint
            MissingParameter: If the endpoint needs a parameter the request lacks
        """
        if not isinstance(controller, Controller):
            raise TypeError(f"Requests can only be routed to controllers, not {type(controller).__name__}")

        remaining: List[str] = list(request.request_chain if chain is None else chain)
        current = controller
        last_segment = ""
        while remaining:
            segment = remaining.pop(0)
            if not segment:
                # Trailing slash or bare format suffix
                break
            last_segment = segment

            child = self._find_controller(current, segment)
            if child is not None:
                logger.debug(f"Segment '{segment}' resolved to {type(child).__name__}")
                current = child
                continue

            handle = self._find_endpoint(current, segment, request.method)
            if handle is not None:
                if remaining:
                    logger.debug(f"Ignoring segments {remaining} after endpoint {handle.name}")
                return self._invoke(request, current, handle)

            raise NotFound(segment)

        handle = self._find_endpoint(current, "", request.method)
        if handle is not None:
            return self._invoke(request, current, handle)

        if not current.list_sub_controllers() and not current.list_endpoints():
            raise NotFound(last_segment)

        logger.debug(f"No index endpoint on {type(current).__name__}, returning documentation")
        status = Status(200)
        self.set_status(status)
        return self.document_controller(current), status

    def _find_controller(self, current: Controller, segment: str) -> Optional[Controller]:
        ref = current.list_sub_controllers().get(to_controller_name(segment))
        if ref is None:
            return None
        child = ref.resolve()
        if not isinstance(child, Controller):
            logger.warning(f"{ref.name} on {type(current).__name__} did not return a controller")
            return None
        return child

    def _find_endpoint(self, current: Controller, segment: str, method: HTTPMethod) -> Optional[EndpointHandle]:
        return current.list_endpoints().get(to_endpoint_name(segment, method))

    def _invoke(self, request: Request, owner: Controller, handle: EndpointHandle) -> Tuple[Any, Status]:
        logger.debug(f"Calling {type(owner).__name__}.{handle.attribute} for {handle.name}")
        # Status belongs to this call only
        owner.set_status(Status(200))
        result = call_with_parameters(request, handle.function)
        status = owner.get_status()
        self.set_status(status)
        return result, status

    def document_controller(self, controller: Controller) -> Dict[str, Any]:
        """List the nested controllers and endpoints of a controller with their documentation.

        Returns:
            ``{"controllers": {name: documentation}, "endpoints": {verb: {name: documentation}}}``
            with hyphenated display names
        """
        controllers: Dict[str, Any] = {}
        for name in controller.list_sub_controllers():
            controllers[display_name(name)] = describe(controller, name)

        endpoints: Dict[str, Dict[str, Any]] = {}
        for name, handle in controller.list_endpoints().items():
            verb = handle.method.value.lower()
            endpoints.setdefault(verb, {})[display_name(name, handle.method)] = describe(controller, name)

        return {"controllers": controllers, "endpoints": endpoints}
