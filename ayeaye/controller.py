"""
Controller base class and the decorators that register its routes.

A controller is a node in the routing tree. It exposes nested controllers and
endpoints under canonical names produced by :mod:`ayeaye.naming`::

    class UserController(Controller):

        @endpoint("GET")
        def get_index(self):
            '''List users.'''
            return list(USERS)

        @endpoint("PUT", "camel-case")
        def rename(self, name: str):
            ...

        @controller("self-reference")
        def self_reference(self):
            return self

Here ``list_endpoints()`` holds ``getIndexEndpoint`` and ``putCamelCaseEndpoint``,
and ``list_sub_controllers()`` holds ``selfReferenceController``.
"""

import inspect
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Union

from .models import HTTPMethod
from .naming import to_controller_name, to_endpoint_name
from .status import Status

logger = logging.getLogger(__name__)

ENDPOINTS_ATTRIBUTE = "__ayeaye_endpoints__"
CONTROLLER_ATTRIBUTE = "__ayeaye_controller__"


@dataclass(frozen=True)
class Metadata:
    """Documentation supplied when a route is registered.

    Attributes:
        summary: One line summary
        description: Longer description
        parameters: Parameter name to description
        returns: Description of the return value
    """

    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: Dict[str, str] = field(default_factory=dict)
    returns: Optional[str] = None


@dataclass(frozen=True)
class _EndpointRegistration:
    method: HTTPMethod
    segment: str
    metadata: Metadata


@dataclass(frozen=True)
class _ControllerRegistration:
    segment: str
    metadata: Metadata


@dataclass(frozen=True)
class EndpointHandle:
    """A registered endpoint: one verb and one path segment mapped to a method.

    Handles listed by :meth:`Controller.list_endpoints` are bound to their controller.
    """

    name: str
    method: HTTPMethod
    segment: str
    attribute: str
    metadata: Metadata = field(default_factory=Metadata)
    owner: Any = None

    def bound_to(self, owner: "Controller") -> "EndpointHandle":
        return replace(self, owner=owner)

    @property
    def function(self) -> Callable:
        """The endpoint callable, bound to its owner when there is one."""
        if self.owner is not None:
            return getattr(self.owner, self.attribute)
        raise LookupError(f"Endpoint {self.name} is not bound to a controller")

    @property
    def declared_parameters(self) -> List[inspect.Parameter]:
        """Formal parameters of the endpoint, in declaration order, without ``self``."""
        return list(inspect.signature(self.function).parameters.values())

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.function(*args, **kwargs)


@dataclass(frozen=True)
class ControllerRef:
    """A registered nested controller, resolved lazily.

    Either an accessor method on the owner (``attribute``) or an instance mounted at
    runtime (``instance``).
    """

    name: str
    segment: str
    attribute: Optional[str] = None
    instance: Any = None
    metadata: Metadata = field(default_factory=Metadata)
    owner: Any = None

    def bound_to(self, owner: "Controller") -> "ControllerRef":
        return replace(self, owner=owner)

    @property
    def function(self) -> Optional[Callable]:
        """The accessor method, if this controller is reached through one."""
        if self.attribute is not None and self.owner is not None:
            return getattr(self.owner, self.attribute)
        return None

    def resolve(self) -> Any:
        """Get the nested controller object."""
        if self.instance is not None:
            return self.instance
        accessor = self.function
        if accessor is None:
            raise LookupError(f"Controller {self.name} is not bound to a controller")
        return accessor()


def _segment_from_function_name(name: str, method: HTTPMethod) -> str:
    verb = method.value.lower()
    if name == verb:
        return ""
    if name.startswith(verb + "_"):
        name = name[len(verb) + 1:]
    return name.strip("_").replace("_", "-")


def _to_method(method: Union[str, HTTPMethod]) -> HTTPMethod:
    if isinstance(method, HTTPMethod):
        return method
    return HTTPMethod(method.upper())


def endpoint(
    method: Union[str, HTTPMethod] = HTTPMethod.GET,
    segment: Optional[str] = None,
    *,
    summary: Optional[str] = None,
    description: Optional[str] = None,
    parameters: Optional[Dict[str, str]] = None,
    returns: Optional[str] = None,
):
    """Register a controller method as an endpoint.

    The decorator can be stacked to serve one method under several verbs.

    Args:
        method: HTTP verb the endpoint answers
        segment: Path segment; derived from the function name when omitted
            (``get_camel_case`` -> ``camel-case``, ``get_index`` -> ``index``)
        summary: One line summary for self-documentation
        description: Longer description for self-documentation
        parameters: Parameter name to description
        returns: Description of the return value

    When no documentation is given here, it is read from the method docstring.
    """
    verb = _to_method(method)

    def decorator(func: Callable) -> Callable:
        name_segment = segment if segment is not None else _segment_from_function_name(func.__name__, verb)
        registration = _EndpointRegistration(
            method=verb,
            segment=name_segment,
            metadata=Metadata(summary, description, dict(parameters or {}), returns),
        )
        registrations = list(getattr(func, ENDPOINTS_ATTRIBUTE, ()))
        registrations.append(registration)
        setattr(func, ENDPOINTS_ATTRIBUTE, tuple(registrations))
        return func

    return decorator


def controller(
    segment: Union[str, Callable, None] = None,
    *,
    summary: Optional[str] = None,
    description: Optional[str] = None,
):
    """Register a zero-argument accessor that returns a nested controller.

    Usable bare (``@controller``) or with a segment (``@controller("self-reference")``).
    Without a segment, the accessor name is used with underscores turned into hyphens.
    """

    def decorator(func: Callable) -> Callable:
        name_segment = segment if isinstance(segment, str) else func.__name__.strip("_").replace("_", "-")
        registration = _ControllerRegistration(
            segment=name_segment,
            metadata=Metadata(summary, description),
        )
        setattr(func, CONTROLLER_ATTRIBUTE, registration)
        return func

    if callable(segment):
        return decorator(segment)
    return decorator


class Controller:
    """Base class for every node in the routing tree.

    Subclasses register endpoints with :func:`endpoint` and nested controllers with
    :func:`controller` or :meth:`mount`. A controller also carries the status the
    router reports once one of its endpoints has run.
    """

    _endpoint_handles: Dict[str, EndpointHandle] = {}
    _controller_refs: Dict[str, ControllerRef] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        endpoints: Dict[str, EndpointHandle] = {}
        controllers: Dict[str, ControllerRef] = {}

        # Base classes first so subclasses override
        for klass in reversed(cls.__mro__):
            for attribute, value in vars(klass).items():
                for registration in getattr(value, ENDPOINTS_ATTRIBUTE, ()):
                    name = to_endpoint_name(registration.segment, registration.method)
                    endpoints[name] = EndpointHandle(
                        name=name,
                        method=registration.method,
                        segment=registration.segment,
                        attribute=attribute,
                        metadata=registration.metadata,
                    )
                registration = getattr(value, CONTROLLER_ATTRIBUTE, None)
                if registration is not None:
                    name = to_controller_name(registration.segment)
                    controllers[name] = ControllerRef(
                        name=name,
                        segment=registration.segment,
                        attribute=attribute,
                        metadata=registration.metadata,
                    )

        cls._endpoint_handles = endpoints
        cls._controller_refs = controllers

    def list_endpoints(self) -> Dict[str, EndpointHandle]:
        """Endpoints of this controller, keyed by canonical name (``getIndexEndpoint``)."""
        return {name: handle.bound_to(self) for name, handle in self._endpoint_handles.items()}

    def list_sub_controllers(self) -> Dict[str, ControllerRef]:
        """Nested controllers, keyed by canonical name (``selfReferenceController``)."""
        refs = {name: ref.bound_to(self) for name, ref in self._controller_refs.items()}
        refs.update(self.__dict__.get("_mounted_controllers", {}))
        return refs

    def mount(
        self,
        segment: str,
        child: "Controller",
        summary: Optional[str] = None,
        description: Optional[str] = None,
    ) -> "Controller":
        """Register a controller instance under a path segment at runtime.

        Returns:
            self, so calls can be chained
        """
        if not isinstance(child, Controller):
            raise TypeError(f"Only controllers can be mounted, not {type(child).__name__}")
        name = to_controller_name(segment)
        mounted = self.__dict__.setdefault("_mounted_controllers", {})
        mounted[name] = ControllerRef(
            name=name,
            segment=segment,
            instance=child,
            metadata=Metadata(summary, description),
            owner=self,
        )
        logger.debug(f"Mounted {type(child).__name__} as {name} on {type(self).__name__}")
        return self

    def get_status(self) -> Status:
        """The status this controller wants reported, 200 OK unless set."""
        status = self.__dict__.get("_status")
        return status if status is not None else Status(200)

    def set_status(self, status: Union[Status, int]) -> "Controller":
        if not isinstance(status, Status):
            status = Status(status)
        self.__dict__["_status"] = status
        return self
