"""
Naming conventions that map url path segments onto controller surfaces.

A segment such as ``camel-case`` is probed as ``camelCaseController`` (a nested
controller) and ``<verb>CamelCaseEndpoint`` (a terminal endpoint).
"""

import re
import urllib.parse
from typing import List, Union

CONTROLLER_SUFFIX = "Controller"
ENDPOINT_SUFFIX = "Endpoint"
INDEX_WORD = "Index"

_WORD_BOUNDARY = re.compile(r"[-\s]+")
_UPPERCASE = re.compile(r"(?<!^)([A-Z])")


def _segment_words(segment: str) -> List[str]:
    decoded = urllib.parse.unquote_plus(segment)
    return [word for word in _WORD_BOUNDARY.split(decoded) if word]


def _capitalize_first(word: str) -> str:
    # Only the first letter changes; "camelCase" stays "CamelCase"
    return word[:1].upper() + word[1:]


def to_controller_name(segment: str) -> str:
    """Convert a path segment into the name a nested controller is registered under.

    Examples:
        to_controller_name("camel-case") -> "camelCaseController"
        to_controller_name("camel+case") -> "camelCaseController"
        to_controller_name("") -> "Controller"
    """
    body = "".join(_capitalize_first(word) for word in _segment_words(segment))
    body = body[:1].lower() + body[1:]
    return body + CONTROLLER_SUFFIX


def to_endpoint_name(segment: str, method: Union[str, object] = "get") -> str:
    """Convert a path segment and HTTP verb into the name an endpoint is registered under.

    An empty segment addresses the index endpoint.

    Args:
        segment: Url path segment, possibly url-encoded
        method: HTTP verb, as a string or an ``HTTPMethod`` member

    Examples:
        to_endpoint_name("camel-case", "put") -> "putCamelCaseEndpoint"
        to_endpoint_name("", "get") -> "getIndexEndpoint"
    """
    verb = getattr(method, "value", method)
    words = _segment_words(segment) or [INDEX_WORD]
    body = "".join(_capitalize_first(word) for word in words)
    return str(verb).lower() + body + ENDPOINT_SUFFIX


def to_hyphenated(identifier: str) -> str:
    """Convert a camelCase identifier to hyphenated lower case, for display.

    Examples:
        to_hyphenated("camelcaseToHyphenated") -> "camelcase-to-hyphenated"
    """
    return _UPPERCASE.sub(r"-\1", identifier).lower()


def display_name(name: str, method: Union[str, object, None] = None) -> str:
    """Hyphenated display form of a registered controller or endpoint name.

    Examples:
        display_name("selfReferenceController") -> "self-reference"
        display_name("getCamelCaseEndpoint", "GET") -> "camel-case"
        display_name("getIndexEndpoint", "GET") -> "index"
    """
    if name.endswith(CONTROLLER_SUFFIX):
        name = name[: -len(CONTROLLER_SUFFIX)]
    elif name.endswith(ENDPOINT_SUFFIX):
        name = name[: -len(ENDPOINT_SUFFIX)]
        if method is not None:
            verb = str(getattr(method, "value", method)).lower()
            if name.startswith(verb):
                name = name[len(verb):]
    return to_hyphenated(name)
