"""
Tests for driver functionality.
"""

import io
import json
from unittest.mock import Mock

import pytest

from ayeaye import Api, ApiConfig, Driver, HTTPMethod, Response, Status, WSGIDriver

from tests.controllers import RootController


def make_environ(method="GET", path="/", query="", body=b"", content_type=""):
    return {
        "REQUEST_METHOD": method,
        "SCRIPT_NAME": "",
        "PATH_INFO": path,
        "QUERY_STRING": query,
        "CONTENT_TYPE": content_type,
        "CONTENT_LENGTH": str(len(body)),
        "wsgi.input": io.BytesIO(body),
    }


class TestDriverInterface:
    """Test the abstract driver interface."""

    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            Driver()


class TestWSGIDriver:
    """Test serving an Api over WSGI."""

    def setup_method(self):
        """Set up test fixtures."""
        self.api = Api(RootController(), config=ApiConfig())
        self.driver = WSGIDriver(self.api)
        self.start_response = Mock()

    def test_convert_to_request(self):
        environ = make_environ("PUT", "/indexed.xml", query="a=1")

        request = self.driver.convert_to_request(environ)

        assert request.method == HTTPMethod.PUT
        assert request.request_chain == ["indexed"]
        assert request.format == "xml"
        assert request.get_parameter("a") == "1"

    def test_get(self):
        body = self.driver(make_environ("GET", "/parameters/greet", query="name=Ada"), self.start_response)

        assert json.loads(b"".join(body)) == {"data": "Hello Ada"}
        status, headers = self.start_response.call_args.args
        assert status == "200 OK"
        assert ("Content-Type", "application/json; charset=utf-8") in headers

    def test_json_body(self):
        payload = json.dumps({"name": "record"}).encode("utf-8")
        environ = make_environ("POST", "/parameters/create", body=payload, content_type="application/json")

        body = self.driver(environ, self.start_response)

        assert json.loads(b"".join(body)) == {"data": {"name": "record"}}
        assert self.start_response.call_args.args[0] == "201 Created"

    def test_form_body(self):
        environ = make_environ(
            "POST",
            "/parameters/create",
            body=b"name=record",
            content_type="application/x-www-form-urlencoded",
        )

        body = self.driver(environ, self.start_response)

        assert json.loads(b"".join(body)) == {"data": {"name": "record"}}

    def test_not_found(self):
        body = self.driver(make_environ("GET", "/nonsense"), self.start_response)

        assert self.start_response.call_args.args[0] == "404 Not Found"
        assert json.loads(b"".join(body))["data"]["code"] == 404

    def test_head_has_no_body(self):
        response = Response(status=Status(200), data="x").prepare({"json": self.api.renderers["json"]})

        status, headers, body = self.driver.convert_from_response(response, make_environ("HEAD"))

        assert status == "200 OK"
        assert body == [b""]
        assert dict(headers)["Content-Length"] == response.headers["Content-Length"]
