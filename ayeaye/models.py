"""
Core data models for the request dispatcher.
"""

import logging
import re
import urllib.parse
from dataclasses import dataclass, field
from enum import Enum
from http.cookies import CookieError, SimpleCookie
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple, Union

from .config import DEFAULT_FORMAT, ApiConfig
from .exceptions import InvalidArgument
from .parsing import parse_headers, string_to_object
from .status import Status

if TYPE_CHECKING:
    from .content_renderers import ContentRenderer

logger = logging.getLogger(__name__)


class HTTPMethod(Enum):
    """Enumeration of supported HTTP methods."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    TRACE = "TRACE"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"
    PATCH = "PATCH"


# Everything from the first query separator or format dot onwards
_CHAIN_PATTERN = re.compile(r"[^?.]*")


def _flatten_query(parsed: Dict[str, List[str]]) -> Dict[str, Any]:
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


@dataclass(frozen=True)
class Environment:
    """Immutable snapshot of the transport request a Request is built from.

    Attributes:
        method: Transport HTTP method, e.g. "POST"
        uri: Request target, including any query string
        meta: CGI/WSGI style metadata (``HTTP_*`` keys, ``CONTENT_TYPE``...)
        parameters: Query, form and cookie parameters already merged by the transport
        body: Raw request body text
    """

    method: Optional[str] = None
    uri: Optional[str] = None
    meta: Mapping[str, Any] = field(default_factory=dict)
    parameters: Mapping[str, Any] = field(default_factory=dict)
    body: str = ""

    @classmethod
    def from_wsgi(cls, environ: Mapping[str, Any]) -> "Environment":
        """Snapshot a WSGI environ.

        Query string, urlencoded form body and cookies are merged into ``parameters``
        in that order. The body is read once from ``wsgi.input``.
        """
        query_string = environ.get("QUERY_STRING", "")

        uri = environ.get("REQUEST_URI") or environ.get("RAW_URI")
        if not uri:
            uri = urllib.parse.quote(environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", ""))
            if query_string:
                uri = f"{uri}?{query_string}"

        body = cls._read_wsgi_body(environ)

        parameters: Dict[str, Any] = {}
        parameters.update(_flatten_query(urllib.parse.parse_qs(query_string, keep_blank_values=True)))

        content_type = environ.get("CONTENT_TYPE", "") or ""
        if content_type.split(";")[0].strip().lower() == "application/x-www-form-urlencoded":
            parameters.update(_flatten_query(urllib.parse.parse_qs(body, keep_blank_values=True)))

        cookie_header = environ.get("HTTP_COOKIE")
        if cookie_header:
            cookies: SimpleCookie = SimpleCookie()
            try:
                cookies.load(cookie_header)
            except CookieError:
                logger.warning("Ignoring malformed Cookie header")
            else:
                parameters.update({name: morsel.value for name, morsel in cookies.items()})

        meta = {key: value for key, value in environ.items() if isinstance(value, str)}

        return cls(
            method=environ.get("REQUEST_METHOD"),
            uri=uri,
            meta=meta,
            parameters=parameters,
            body=body,
        )

    @staticmethod
    def _read_wsgi_body(environ: Mapping[str, Any]) -> str:
        stream = environ.get("wsgi.input")
        if stream is None:
            return ""
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        if length <= 0:
            return ""
        return stream.read(length).decode("utf-8", errors="replace")


class Request:
    """Describes every detail of a request to the dispatcher.

    A Request is built once per inbound call. Its method, uri and parameters are fixed
    at construction; the request chain and format are derived from the uri on first
    use and cached.

    Args:
        method: Optional method override. Ignored unless it is one of the allowed verbs.
        uri: Optional request target override.
        *parameter_groups: Any number of mappings (or strings of JSON/XML data) merged in
            order. If they yield no parameters, the environment's query/form/cookie
            parameters, headers and body are merged instead, in that order.
        environment: Transport snapshot used for anything not overridden.
        config: Allowed methods and default format.

    Raises:
        InvalidArgument: If a parameter group is a non-string scalar
    """

    def __init__(
        self,
        method: Union[str, HTTPMethod, None] = None,
        uri: Optional[str] = None,
        *parameter_groups: Any,
        environment: Optional[Environment] = None,
        config: Optional[ApiConfig] = None,
    ):
        self.config = config or ApiConfig()
        self.environment = environment or Environment()
        self._parameters: Dict[Any, Any] = {}
        self._request_chain: Optional[Tuple[str, ...]] = None
        self._format: Optional[str] = None

        for group in parameter_groups:
            self._set_parameters(group)

        self._method = self._resolve_method(method)
        self._uri = self._resolve_uri(uri)

        if not self._parameters:
            self._use_ambient_parameters()

    @property
    def allowed_methods(self) -> Tuple[str, ...]:
        return self.config.allowed_methods

    @property
    def method(self) -> HTTPMethod:
        """The HTTP method for this request."""
        return self._method

    @property
    def uri(self) -> str:
        """The raw request target."""
        return self._uri

    @property
    def parameters(self) -> Mapping[Any, Any]:
        """Read-only view of every parameter sent with the request."""
        return MappingProxyType(self._parameters)

    @property
    def request_chain(self) -> List[str]:
        """The requested path as a list of segments."""
        if self._request_chain is None:
            self._request_chain = self.get_request_chain_from_uri(self._uri)
        return list(self._request_chain)

    @property
    def format(self) -> str:
        """The output format requested through the path suffix, e.g. ``/users.xml``."""
        if self._format is None:
            self._format = self.get_format_from_uri(self._uri) or self.config.default_format
        return self._format

    def get_parameter(self, key: Any, default: Any = None) -> Any:
        """Look for the given parameter anywhere in the request."""
        return self._parameters.get(key, default)

    def _resolve_method(self, override: Union[str, HTTPMethod, None]) -> HTTPMethod:
        if isinstance(override, HTTPMethod):
            override = override.value
        if override and override in self.allowed_methods:
            return HTTPMethod(override)
        ambient = self.environment.method
        if ambient and ambient in self.allowed_methods:
            return HTTPMethod(ambient)
        return HTTPMethod.GET

    def _resolve_uri(self, override: Optional[str]) -> str:
        if override:
            return override
        return self.environment.uri or ""

    def _use_ambient_parameters(self) -> None:
        self._set_parameters(dict(self.environment.parameters))
        self._set_parameters(parse_headers(self.environment.meta))
        self._set_parameters(string_to_object(self.environment.body))

    @staticmethod
    def get_format_from_uri(uri: str) -> Optional[str]:
        """Get the format suffix from a uri, ignoring any query string.

        Returns:
            The text after the last dot, or None if the path has no dot
        """
        path = uri.split("?", 1)[0]
        parts = path.split(".")
        if len(parts) >= 2:
            return parts[-1]
        return None

    @staticmethod
    def get_request_chain_from_uri(uri: str) -> Tuple[str, ...]:
        """Break a uri into path segments.

        Query string and format suffix are trimmed first, eg:
        ``/requested/uri.format?get=variables`` -> ``("requested", "uri")``
        """
        path = _CHAIN_PATTERN.match(uri).group(0)
        chain = path.split("/")
        if not chain[0]:
            chain = chain[1:]
        return tuple(chain)

    def _set_parameters(self, new_parameters: Any) -> "Request":
        """Merge a group of parameters, later values winning."""
        if isinstance(new_parameters, str):
            new_parameters = string_to_object(new_parameters)
        elif new_parameters is None or isinstance(new_parameters, (int, float, complex, bool, bytes)):
            raise InvalidArgument(
                f"Parameter groups must be mappings or strings, not {type(new_parameters).__name__}"
            )

        if isinstance(new_parameters, Mapping):
            items = new_parameters.items()
        elif isinstance(new_parameters, (list, tuple)):
            items = enumerate(new_parameters)
        else:
            raise InvalidArgument(
                f"Parameter groups must be mappings or strings, not {type(new_parameters).__name__}"
            )

        for name, value in items:
            self._set_parameter(name, value)
        return self

    def _set_parameter(self, name: Any, value: Any) -> bool:
        if not isinstance(name, (str, int, float, bool)):
            raise InvalidArgument(f"Parameter name must be scalar, not {type(name).__name__}")
        self._parameters[name] = value
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self._method.value,
            "uri": self._uri,
            "parameters": dict(self._parameters),
        }

    def __repr__(self) -> str:
        return f"Request({self._method.value} {self._uri!r})"


@dataclass
class Response:
    """Represents an HTTP response before it is handed to a transport driver.

    ``data`` is the raw result; the rendered body wraps it as ``{"data": data}``.
    """

    status: Status = field(default_factory=Status)
    data: Any = None
    request: Optional[Request] = None
    headers: Dict[str, str] = field(default_factory=dict)
    content_type: Optional[str] = None
    content: Optional[str] = None

    @property
    def status_code(self) -> int:
        return self.status.code

    @property
    def status_line(self) -> str:
        return str(self.status)

    def set_status_code(self, code: int) -> "Response":
        self.status = Status(code)
        return self

    def get_body(self) -> Dict[str, Any]:
        return {"data": self.data}

    def prepare(self, renderers: Mapping[str, "ContentRenderer"], default_format: str = "json") -> "Response":
        """Render the body with the renderer matching the request format.

        Unknown formats fall back to ``default_format``, and a default format with no
        renderer falls back to JSON.

        Args:
            renderers: Format name to renderer
            default_format: Format used when the request asks for one that is not registered

        Returns:
            self, with content, content type and length headers set
        """
        requested = self.request.format if self.request is not None else default_format
        renderer = renderers.get(requested) or renderers.get(default_format)
        if renderer is None:
            logger.warning(f"No renderer for default format '{default_format}', using {DEFAULT_FORMAT}")
            renderer = renderers[DEFAULT_FORMAT]

        self.content = renderer.render(self.get_body(), self.request)
        self.content_type = renderer.media_type
        self.headers["Content-Type"] = f"{renderer.media_type}; charset=utf-8"
        self.headers["Content-Length"] = str(len(self.content.encode("utf-8")))
        return self
