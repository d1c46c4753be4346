"""
Tests for binding request parameters to endpoint arguments.
"""

import pytest

from ayeaye import MissingParameter, Request
from ayeaye.binding import bind_parameters, call_with_parameters


def greet(name, greeting="Hello", *args, punctuation="!", **kwargs):
    return f"{greeting} {name}{punctuation}"


class TestBindParameters:
    """Test mapping parameters by name."""

    def test_values_in_declaration_order(self):
        request = Request("GET", "/", {"greeting": "Hi", "name": "Ada"})
        assert bind_parameters(request, greet) == ["Ada", "Hi", "!"]

    def test_defaults_fill_missing_values(self):
        request = Request("GET", "/", {"name": "Ada"})
        assert bind_parameters(request, greet) == ["Ada", "Hello", "!"]

    def test_missing_required_parameter(self):
        request = Request("GET", "/", {"greeting": "Hi"})

        with pytest.raises(MissingParameter) as exc_info:
            bind_parameters(request, greet)

        assert exc_info.value.name == "name"
        assert exc_info.value.code == 400
        assert exc_info.value.get_public_message() == "Missing required parameter 'name'"

    def test_values_are_not_coerced(self):
        def count(number: int):
            return number

        request = Request("GET", "/", {"number": "3"})
        assert bind_parameters(request, count) == ["3"]

    def test_no_parameters(self):
        assert bind_parameters(Request("GET", "/", {"a": 1}), lambda: None) == []


class TestCallWithParameters:
    """Test calling a handler with bound arguments."""

    def test_keyword_only_parameters(self):
        request = Request("GET", "/", {"name": "Ada", "punctuation": "?"})
        assert call_with_parameters(request, greet) == "Hello Ada?"

    def test_extra_parameters_are_ignored(self):
        request = Request("GET", "/", {"name": "Ada", "unused": 1})
        assert call_with_parameters(request, greet) == "Hello Ada!"
