"""
A convention-driven HTTP request dispatcher.

Url path segments are resolved against a tree of controller objects by naming
convention: ``/users/camel-case`` walks to the ``usersController`` of the root
controller and calls its ``getCamelCaseEndpoint`` for a GET request. Endpoint
arguments are bound by name from the merged request parameters, and a controller
without an index endpoint documents itself.
"""

from .application import Api
from .config import ApiConfig
from .content_renderers import (
    ContentRenderer,
    HTMLRenderer,
    JSONRenderer,
    PlainTextRenderer,
    XMLRenderer,
)
from .controller import Controller, controller, endpoint
from .documentation import describe
from .drivers import Driver, WSGIDriver
from .error_models import ErrorResponse
from .exceptions import ApiError, InvalidArgument, MissingParameter, NotFound
from .models import Environment, HTTPMethod, Request, Response
from .router import Router
from .status import Status

__version__ = "0.1.0"
__author__ = "AyeAye Contributors"
__license__ = "MIT"

__all__ = [
    "Api",
    "ApiConfig",
    "Router",
    "Controller",
    "controller",
    "endpoint",
    "describe",
    "Request",
    "Response",
    "Environment",
    "HTTPMethod",
    "Status",
    "JSONRenderer",
    "XMLRenderer",
    "HTMLRenderer",
    "PlainTextRenderer",
    "ContentRenderer",
    "ErrorResponse",
    "ApiError",
    "NotFound",
    "MissingParameter",
    "InvalidArgument",
    "Driver",
    "WSGIDriver",
]
