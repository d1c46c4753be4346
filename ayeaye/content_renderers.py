"""
Content renderers for the output formats a request can ask for.
"""

import json
import xml.etree.ElementTree as ET
from typing import Any, List, Optional

from jinja2 import Environment, select_autoescape

from .models import Request


class ContentRenderer:
    """Base class for content renderers.

    A renderer is chosen by the request format, the suffix of the request path
    (``/users.xml`` -> ``xml``).
    """

    def __init__(self, format: str, media_type: str):
        self.format = format
        self.media_type = media_type

    def render(self, data: Any, request: Optional[Request]) -> str:
        """Render the data as this content type."""
        raise NotImplementedError

    def _serialize_pydantic(self, data: Any) -> Any:
        """Convert Pydantic models to plain data, recursively."""
        if hasattr(data, "model_dump"):
            return data.model_dump(exclude_none=True)
        elif isinstance(data, (list, tuple)):
            return [self._serialize_pydantic(item) for item in data]
        elif isinstance(data, dict):
            return {key: self._serialize_pydantic(value) for key, value in data.items()}
        else:
            return data


class JSONRenderer(ContentRenderer):
    """JSON content renderer."""

    def __init__(self):
        super().__init__("json", "application/json")

    def render(self, data: Any, request: Optional[Request]) -> str:
        """Render data as JSON."""
        data = self._serialize_pydantic(data)

        try:
            return json.dumps(data, indent=2)
        except (TypeError, ValueError):
            return json.dumps(data, indent=2, default=str)


XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


class XMLRenderer(ContentRenderer):
    """XML content renderer.

    Mappings become child elements and sequences repeat an ``<item>`` element.
    Keys that are not valid tag names are kept in a ``key`` attribute.
    """

    root_tag = "response"

    def __init__(self):
        super().__init__("xml", "application/xml")

    def render(self, data: Any, request: Optional[Request]) -> str:
        """Render data as XML."""
        root = ET.Element(self.root_tag)
        self._append(root, self._serialize_pydantic(data))
        return XML_DECLARATION + ET.tostring(root, encoding="unicode")

    def _append(self, element: ET.Element, data: Any) -> None:
        if isinstance(data, dict):
            for key, value in data.items():
                self._append(self._child(element, str(key)), value)
        elif isinstance(data, (list, tuple, set)):
            for value in data:
                self._append(ET.SubElement(element, "item"), value)
        elif isinstance(data, bool):
            element.text = "true" if data else "false"
        elif data is not None:
            element.text = str(data)

    def _child(self, parent: ET.Element, key: str) -> ET.Element:
        if key and (key[0].isalpha() or key[0] == "_") and all(c.isalnum() or c in "-_." for c in key):
            return ET.SubElement(parent, key)
        return ET.SubElement(parent, "item", {"key": key})


_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <title>{{ title }}</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 40px; }
        .key { font-weight: bold; color: #333; }
        .value { margin-left: 20px; color: #666; }
        ul { list-style-type: none; padding-left: 20px; }
        li { margin: 5px 0; }
    </style>
</head>
<body>
    <h1>{{ title }}</h1>
    {%- macro show(value) -%}
        {%- if value is mapping -%}
            <ul>{% for key, item in value.items() %}<li><span class="key">{{ key }}:</span> {{ show(item) }}</li>{% endfor %}</ul>
        {%- elif value is iterable and value is not string -%}
            <ul>{% for item in value %}<li>{{ show(item) }}</li>{% endfor %}</ul>
        {%- else -%}
            <span class="value">{{ value }}</span>
        {%- endif -%}
    {%- endmacro %}
    {{ show(data) }}
</body>
</html>"""


class HTMLRenderer(ContentRenderer):
    """HTML content renderer."""

    title = "API Response"

    def __init__(self):
        super().__init__("html", "text/html")
        self._environment = Environment(autoescape=select_autoescape(default_for_string=True))
        self._template = self._environment.from_string(_HTML_TEMPLATE)

    def render(self, data: Any, request: Optional[Request]) -> str:
        """Render data as an HTML page."""
        return self._template.render(title=self.title, data=self._serialize_pydantic(data))


class PlainTextRenderer(ContentRenderer):
    """Plain text renderer.

    Nested mappings and sequences are written one value per line, indented two
    spaces per level::

        data:
          name: Ada
          tags:
            - x
    """

    indent = "  "

    def __init__(self):
        super().__init__("txt", "text/plain")

    def render(self, data: Any, request: Optional[Request]) -> str:
        return "\n".join(self._lines(self._serialize_pydantic(data), 0))

    def _lines(self, data: Any, depth: int) -> List[str]:
        prefix = self.indent * depth
        if isinstance(data, dict):
            lines = []
            for key, value in data.items():
                if isinstance(value, (dict, list, tuple)) and value:
                    lines.append(f"{prefix}{key}:")
                    lines.extend(self._lines(value, depth + 1))
                else:
                    lines.append(f"{prefix}{key}: {self._scalar(value)}")
            return lines
        if isinstance(data, (list, tuple)):
            if depth == 0:
                return [self._scalar(item) for item in data]
            return [f"{prefix}- {self._scalar(item)}" for item in data]
        return [f"{prefix}{self._scalar(data)}"]

    @staticmethod
    def _scalar(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


def default_renderers() -> dict:
    """Renderers registered on a new Api, keyed by format."""
    renderers = [JSONRenderer(), XMLRenderer(), HTMLRenderer(), PlainTextRenderer()]
    return {renderer.format: renderer for renderer in renderers}
