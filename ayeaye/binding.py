"""
Binding of request parameters onto endpoint arguments.
"""

import inspect
from typing import Any, Callable, Dict, List, Tuple

from .exceptions import MissingParameter
from .models import Request

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def bind_parameters(request: Request, handler: Callable) -> List[Any]:
    """Map a handler's formal parameters to values from the request.

    Parameters are looked up by name in ``request.parameters``. A missing parameter
    takes its declared default; a missing parameter without a default is an error.
    Values are passed through as they are, without type coercion.

    Args:
        request: The request holding the merged parameters
        handler: The endpoint callable, bound to its controller

    Returns:
        Argument values in declaration order

    Raises:
        MissingParameter: If a required parameter is absent from the request
    """
    return [value for _, value in _bind(request, handler)]


def call_with_parameters(request: Request, handler: Callable) -> Any:
    """Call a handler with arguments bound from the request."""
    args: List[Any] = []
    kwargs: Dict[str, Any] = {}
    for param, value in _bind(request, handler):
        if param.kind == inspect.Parameter.KEYWORD_ONLY:
            kwargs[param.name] = value
        else:
            args.append(value)
    return handler(*args, **kwargs)


def _bind(request: Request, handler: Callable) -> List[Tuple[inspect.Parameter, Any]]:
    sig = inspect.signature(handler)
    bound = []

    for name, param in sig.parameters.items():
        if param.kind in _SKIPPED_KINDS:
            continue
        if name in request.parameters:
            value = request.parameters[name]
        elif param.default is not inspect.Parameter.empty:
            value = param.default
        else:
            raise MissingParameter(name)
        bound.append((param, value))

    return bound
