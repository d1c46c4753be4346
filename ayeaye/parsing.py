"""
Helpers that turn raw transport data into request parameters.
"""

import ast
import json
import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)

HEADER_PREFIX = "HTTP_"

# Metadata keys that carry headers without the HTTP_ prefix
SPECIAL_HEADERS = {
    "CONTENT_TYPE": "Content-Type",
    "CONTENT_LENGTH": "Content-Length",
}


def string_to_object(text: str) -> Any:
    """Best-effort conversion of a string of data into a structured value.

    Tries, in order, JSON, XML and a Python literal (the serialized form of a Python
    dict or list). Only container results count as a successful parse; an empty JSON
    object counts, an empty list does not. When nothing matches, the raw string is
    wrapped as ``{"text": text}``.

    Args:
        text: Raw data, typically a request body

    Returns:
        A dict or list; an empty dict for empty input

    Examples:
        string_to_object('{"a": 1}') -> {"a": 1}
        string_to_object('<r><a>1</a></r>') -> {"a": "1"}
        string_to_object('fail') -> {"text": "fail"}
    """
    if not text:
        return {}

    parsed = _parse_json(text)
    if parsed is None:
        parsed = _parse_xml(text)
    if parsed is None:
        parsed = _parse_python_literal(text)
    if parsed is None:
        logger.debug("Body is not JSON, XML or a Python literal, keeping it as text")
        return {"text": text}
    return parsed


def _parse_json(text: str) -> Any:
    try:
        value = json.loads(text)
    except ValueError:
        return None
    # An empty object is still data; an empty list is not
    if isinstance(value, dict) or (isinstance(value, list) and value):
        return value
    return None


def _parse_xml(text: str) -> Any:
    try:
        root = ET.fromstring(text)
    except ET.ParseError:
        return None
    value = element_to_object(root)
    if not isinstance(value, dict):
        # A single leaf element, e.g. <name>value</name>
        value = {root.tag: value}
    return value


def _parse_python_literal(text: str) -> Any:
    try:
        value = ast.literal_eval(text)
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError):
        return None
    return value if isinstance(value, (dict, list)) and value else None


def element_to_object(element: ET.Element) -> Any:
    """Convert an XML element into nested dicts.

    Child elements become keys (repeated tags are collected into a list), attributes
    are kept under ``@name`` keys and leaf elements collapse to their text.
    """
    children = list(element)
    if not children and not element.attrib:
        return (element.text or "").strip()

    result: Dict[str, Any] = {f"@{name}": value for name, value in element.attrib.items()}
    for child in children:
        value = element_to_object(child)
        if child.tag in result:
            existing = result[child.tag]
            if not isinstance(existing, list):
                result[child.tag] = [existing]
            result[child.tag].append(value)
        else:
            result[child.tag] = value

    text = (element.text or "").strip()
    if text and not children:
        result["text"] = text
    return result


def parse_headers(meta: Mapping[str, Any]) -> Dict[str, Any]:
    """Extract HTTP headers from CGI/WSGI style metadata.

    ``HTTP_X_FORWARDED_FOR`` becomes ``X-Forwarded-For``; ``CONTENT_TYPE`` and
    ``CONTENT_LENGTH`` are mapped explicitly since they carry no prefix.

    Args:
        meta: Transport metadata, e.g. a WSGI environ

    Returns:
        Header name to value, names in canonical ``Header-Name`` form
    """
    headers: Dict[str, Any] = {}
    for key, value in meta.items():
        if not isinstance(key, str):
            continue
        if key.startswith(HEADER_PREFIX):
            words = key[len(HEADER_PREFIX):].replace("_", " ").lower().split(" ")
            name = "-".join(word.capitalize() for word in words)
            headers[name] = value
        elif key in SPECIAL_HEADERS:
            headers[SPECIAL_HEADERS[key]] = value
    return headers
