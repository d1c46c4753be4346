"""
Self-documentation for controllers and endpoints.

Documentation comes from the metadata given when a route is registered and, for
anything not given there, from the Google-style docstring of the method.
"""

import inspect
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .controller import Controller, ControllerRef, EndpointHandle, Metadata
from .exceptions import NotFound

_SECTION_HEADER = re.compile(r"^(?P<name>[A-Z][A-Za-z ]*):\s*$")
_ARGUMENT_LINE = re.compile(r"^\*{0,2}(?P<name>\w+)\s*(?:\((?P<type>[^)]*)\))?\s*:\s*(?P<description>.*)$")

_ARGS_SECTIONS = {"Args", "Arguments", "Parameters", "Params"}
_RETURNS_SECTIONS = {"Returns", "Return"}


class ParameterDocumentation(BaseModel):
    """Documentation for one endpoint parameter."""

    type: Optional[str] = None
    description: Optional[str] = None
    required: bool = True
    default: Any = None


class ReturnDocumentation(BaseModel):
    """Documentation for an endpoint return value."""

    type: Optional[str] = None
    description: Optional[str] = None


class Documentation(BaseModel):
    """Documentation for a controller or an endpoint."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "description": "Find a user Looks the user up by id.",
                "parameters": {
                    "id": {"type": "int", "description": "The user id", "required": True},
                },
                "returns": {"type": "dict", "description": "The user record"},
            }
        }
    )

    description: str = Field(
        "",
        description="Summary and longer description joined with a space"
    )

    parameters: Optional[Dict[str, ParameterDocumentation]] = Field(
        None,
        description="Parameter name to its documentation, in declaration order"
    )

    returns: Optional[ReturnDocumentation] = Field(
        None,
        description="Return value documentation"
    )


@dataclass
class Docstring:
    """The parts of a Google-style docstring used for documentation."""

    summary: str = ""
    description: str = ""
    parameters: Dict[str, Tuple[Optional[str], str]] = field(default_factory=dict)
    returns: Optional[str] = None


def parse_docstring(doc: Optional[str]) -> Docstring:
    """Split a Google-style docstring into summary, description, arguments and return.

    The first paragraph is the summary, the following paragraphs up to the first
    section header are the description. ``Args:`` entries of the form
    ``name (type): description`` become parameters and the ``Returns:`` section becomes
    the return description. Other sections are ignored.
    """
    if not doc:
        return Docstring()

    lines = inspect.cleandoc(doc).splitlines()
    paragraphs: List[List[str]] = [[]]
    parameters: Dict[str, Tuple[Optional[str], str]] = {}
    returns: List[str] = []
    section: Optional[str] = None
    current_argument: Optional[str] = None

    for line in lines:
        header = _SECTION_HEADER.match(line)
        if header:
            section = header.group("name")
            current_argument = None
            continue

        if section is None:
            if line.strip():
                paragraphs[-1].append(line.strip())
            elif paragraphs[-1]:
                paragraphs.append([])
        elif section in _ARGS_SECTIONS:
            if not line.strip():
                continue
            argument = _ARGUMENT_LINE.match(line.strip())
            if argument and _indent(line) <= _min_indent(lines, section):
                current_argument = argument.group("name")
                parameters[current_argument] = (argument.group("type"), argument.group("description").strip())
            elif current_argument is not None:
                type_name, description = parameters[current_argument]
                parameters[current_argument] = (type_name, f"{description} {line.strip()}".strip())
        elif section in _RETURNS_SECTIONS:
            if line.strip():
                returns.append(line.strip())

    paragraphs = [paragraph for paragraph in paragraphs if paragraph]
    summary = " ".join(paragraphs[0]) if paragraphs else ""
    description = " ".join(" ".join(paragraph) for paragraph in paragraphs[1:])

    return Docstring(
        summary=summary,
        description=description,
        parameters=parameters,
        returns=" ".join(returns) or None,
    )


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def _min_indent(lines: List[str], section: str) -> int:
    # Smallest indentation of the non-blank lines inside the named section
    indents = []
    inside = False
    for line in lines:
        header = _SECTION_HEADER.match(line)
        if header:
            inside = header.group("name") == section
            continue
        if inside and line.strip():
            indents.append(_indent(line))
    return min(indents) if indents else 0


def type_name(annotation: Any) -> Optional[str]:
    """Readable name for a type annotation, None when there is no annotation."""
    if annotation is inspect.Parameter.empty or annotation is inspect.Signature.empty:
        return None
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace("typing.", "")


def document_callable(func: Optional[Callable], metadata: Metadata, with_signature: bool = True) -> Documentation:
    """Build documentation for a callable, preferring registered metadata over its docstring.

    Args:
        func: The documented callable; may be None for mounted controllers
        metadata: Documentation given at registration
        with_signature: Whether parameters and return type should be documented

    Returns:
        Documentation model
    """
    parsed = parse_docstring(inspect.getdoc(func) if func is not None else None)

    summary = metadata.summary or parsed.summary
    description = metadata.description or parsed.description
    documentation = Documentation(description=" ".join(part for part in (summary, description) if part))

    if func is None or not with_signature:
        return documentation

    sig = inspect.signature(func)
    parameters: Dict[str, ParameterDocumentation] = {}
    for name, param in sig.parameters.items():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        parsed_type, parsed_description = parsed.parameters.get(name, (None, None))
        required = param.default is inspect.Parameter.empty
        parameters[name] = ParameterDocumentation(
            type=type_name(param.annotation) or parsed_type,
            description=metadata.parameters.get(name) or parsed_description or None,
            required=required,
            default=None if required else param.default,
        )
    if parameters:
        documentation.parameters = parameters

    return_type = type_name(sig.return_annotation)
    return_description = metadata.returns or parsed.returns
    if return_type or return_description:
        documentation.returns = ReturnDocumentation(type=return_type, description=return_description)

    return documentation


def describe(controller: Controller, handler_name: str) -> Dict[str, Any]:
    """Describe an endpoint or nested controller of a controller.

    Args:
        controller: The controller owning the handler
        handler_name: Canonical name (``getDocumentedEndpoint``, ``selfReferenceController``)
            or the Python attribute name of the method

    Returns:
        A mapping with at least a ``description`` key, plus ``parameters`` and
        ``returns`` when known

    Raises:
        NotFound: If the controller has no such endpoint or controller
    """
    entry = _find_entry(controller, handler_name)
    if isinstance(entry, EndpointHandle):
        documentation = document_callable(entry.function, entry.metadata)
    else:
        func = entry.function
        if func is None:
            # Mounted instance: fall back to the class docstring
            func = type(entry.resolve())
        documentation = document_callable(func, entry.metadata, with_signature=False)
    return documentation.model_dump(exclude_none=True)


def _find_entry(controller: Controller, handler_name: str):
    endpoints = controller.list_endpoints()
    if handler_name in endpoints:
        return endpoints[handler_name]
    controllers = controller.list_sub_controllers()
    if handler_name in controllers:
        return controllers[handler_name]

    entry: Any
    for entry in list(endpoints.values()) + list(controllers.values()):
        if isinstance(entry, (EndpointHandle, ControllerRef)) and entry.attribute == handler_name:
            return entry
    raise NotFound(handler_name)
