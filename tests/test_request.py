"""
Tests for request normalization.
"""

import io

import pytest

from ayeaye import ApiConfig, Environment, HTTPMethod, InvalidArgument, Request


class TestRequestMethod:
    """Test how the request method is chosen."""

    def test_valid_override_is_used(self):
        request = Request("POST")
        assert request.method == HTTPMethod.POST

    def test_enum_override_is_used(self):
        request = Request(HTTPMethod.DELETE)
        assert request.method == HTTPMethod.DELETE

    def test_invalid_override_falls_back_to_ambient(self):
        """An unknown verb is ignored in favour of the transport method."""
        request = Request("BREW", environment=Environment(method="PUT"))
        assert request.method == HTTPMethod.PUT

    def test_defaults_to_get(self):
        assert Request().method == HTTPMethod.GET
        assert Request("BREW").method == HTTPMethod.GET

    def test_disallowed_override_is_ignored(self):
        config = ApiConfig(allowed_methods=("GET", "PUT"))
        request = Request("POST", config=config)
        assert request.method == HTTPMethod.GET
        assert request.allowed_methods == ("GET", "PUT")

    def test_disallowed_ambient_method_is_ignored(self):
        config = ApiConfig(allowed_methods=("GET",))
        request = Request(environment=Environment(method="DELETE"), config=config)
        assert request.method == HTTPMethod.GET


class TestRequestChain:
    """Test splitting the uri into path segments."""

    def test_chain_from_path(self):
        request = Request("GET", "/requested/uri")
        assert request.request_chain == ["requested", "uri"]

    def test_query_and_format_are_trimmed(self):
        request = Request("GET", "/requested/uri.format?get=variables")
        assert request.request_chain == ["requested", "uri"]

    def test_bare_format_suffix(self):
        assert Request.get_request_chain_from_uri("/.json") == ("",)

    def test_trailing_slash_keeps_empty_segment(self):
        assert Request("GET", "/indexed/").request_chain == ["indexed", ""]

    def test_empty_uri(self):
        assert Request("GET", "").request_chain == []

    def test_chain_is_a_copy(self):
        request = Request("GET", "/a/b")
        request.request_chain.append("c")
        assert request.request_chain == ["a", "b"]

    def test_uri_falls_back_to_environment(self):
        request = Request(environment=Environment(uri="/from/env"))
        assert request.uri == "/from/env"
        assert request.request_chain == ["from", "env"]


class TestRequestFormat:
    """Test output format detection."""

    def test_format_from_suffix(self):
        assert Request("GET", "/users/find.xml").format == "xml"

    def test_query_string_does_not_count(self):
        assert Request("GET", "/users/find?version=1.5").format == "json"

    def test_format_before_query(self):
        assert Request("GET", "/users/find.html?version=1.5").format == "html"

    def test_default_format_from_config(self):
        request = Request("GET", "/users", config=ApiConfig(default_format="xml"))
        assert request.format == "xml"

    def test_get_format_from_uri(self):
        assert Request.get_format_from_uri("/a.b.txt") == "txt"
        assert Request.get_format_from_uri("/a/b") is None


class TestRequestParameters:
    """Test merging parameter groups."""

    def test_groups_are_merged_in_order(self):
        request = Request("GET", "/", {"a": 1, "b": 1}, {"b": 2})
        assert dict(request.parameters) == {"a": 1, "b": 2}

    def test_string_groups_are_parsed(self):
        request = Request("GET", "/", '{"json": true}', "<root><xml>yes</xml></root>")
        assert request.get_parameter("json") is True
        assert request.get_parameter("xml") == "yes"

    def test_unparseable_string_becomes_text(self):
        request = Request("GET", "/", "fail")
        assert dict(request.parameters) == {"text": "fail"}

    def test_list_group_is_indexed(self):
        request = Request("GET", "/", ["x", "y"])
        assert request.get_parameter(0) == "x"
        assert request.get_parameter(1) == "y"

    def test_get_parameter_default(self):
        assert Request("GET", "/", {"a": 1}).get_parameter("missing", "default") == "default"

    @pytest.mark.parametrize("group", [None, 5, 1.5, True, b"bytes"])
    def test_scalar_groups_are_rejected(self, group):
        with pytest.raises(InvalidArgument):
            Request("GET", "/", group)

    def test_non_scalar_parameter_name_is_rejected(self):
        with pytest.raises(InvalidArgument):
            Request("GET", "/", {(1, 2): "x"})

    def test_invalid_argument_is_a_type_error(self):
        with pytest.raises(TypeError):
            Request("GET", "/", 5)

    def test_parameters_are_read_only(self):
        request = Request("GET", "/", {"a": 1})
        with pytest.raises(TypeError):
            request.parameters["a"] = 2

    def test_ambient_parameters_when_no_groups(self):
        environment = Environment(
            parameters={"q": "1"},
            meta={"HTTP_X_TOKEN": "abc"},
            body='{"c": 3}',
        )
        request = Request(environment=environment)
        assert request.get_parameter("q") == "1"
        assert request.get_parameter("X-Token") == "abc"
        assert request.get_parameter("c") == 3

    def test_ambient_precedence_body_over_headers_over_query(self):
        environment = Environment(
            parameters={"X": "query", "only-query": "q"},
            meta={"HTTP_X": "header"},
            body='{"X": "body"}',
        )
        request = Request(environment=environment)
        assert request.get_parameter("X") == "body"
        assert request.get_parameter("only-query") == "q"

    def test_headers_win_over_query(self):
        environment = Environment(parameters={"X": "query"}, meta={"HTTP_X": "header"})
        assert Request(environment=environment).get_parameter("X") == "header"

    def test_explicit_groups_replace_ambient_parameters(self):
        environment = Environment(parameters={"q": "1"}, body='{"c": 3}')
        request = Request("GET", "/", {"a": 1}, environment=environment)
        assert dict(request.parameters) == {"a": 1}

    def test_to_dict(self):
        request = Request("PUT", "/a", {"a": 1})
        assert request.to_dict() == {"method": "PUT", "uri": "/a", "parameters": {"a": 1}}


class TestEnvironmentFromWsgi:
    """Test snapshotting a WSGI environ."""

    def setup_method(self):
        """Set up test fixtures."""
        body = b"age=3"
        self.environ = {
            "REQUEST_METHOD": "POST",
            "SCRIPT_NAME": "",
            "PATH_INFO": "/users/find.xml",
            "QUERY_STRING": "name=ada&tag=a&tag=b",
            "CONTENT_TYPE": "application/x-www-form-urlencoded",
            "CONTENT_LENGTH": str(len(body)),
            "HTTP_COOKIE": "session=xyz",
            "HTTP_X_TOKEN": "abc",
            "wsgi.input": io.BytesIO(body),
        }

    def test_snapshot(self):
        environment = Environment.from_wsgi(self.environ)

        assert environment.method == "POST"
        assert environment.uri == "/users/find.xml?name=ada&tag=a&tag=b"
        assert environment.body == "age=3"
        assert environment.parameters["name"] == "ada"
        assert environment.parameters["tag"] == ["a", "b"]
        assert environment.parameters["age"] == "3"
        assert environment.parameters["session"] == "xyz"
        assert environment.meta["HTTP_X_TOKEN"] == "abc"
        assert "wsgi.input" not in environment.meta

    def test_request_uri_is_preferred(self):
        self.environ["REQUEST_URI"] = "/raw/target?x=1"
        assert Environment.from_wsgi(self.environ).uri == "/raw/target?x=1"

    def test_request_from_snapshot(self):
        request = Request(environment=Environment.from_wsgi(self.environ))

        assert request.method == HTTPMethod.POST
        assert request.request_chain == ["users", "find"]
        assert request.format == "xml"
        assert request.get_parameter("name") == "ada"
        assert request.get_parameter("X-Token") == "abc"
        assert request.get_parameter("Content-Type") == "application/x-www-form-urlencoded"

    def test_missing_body(self):
        del self.environ["wsgi.input"]
        assert Environment.from_wsgi(self.environ).body == ""

    def test_snapshot_is_frozen(self):
        environment = Environment.from_wsgi(self.environ)
        with pytest.raises(AttributeError):
            environment.method = "GET"
