"""
Tests for error response models and dispatcher exceptions.
"""

from ayeaye import ApiError, ErrorResponse, MissingParameter, NotFound


class TestApiError:
    """Test the public and private sides of dispatcher errors."""

    def test_defaults(self):
        error = ApiError("database password rejected")

        assert error.code == 500
        assert str(error) == "database password rejected"
        assert error.get_public_message() == "Internal Server Error"

    def test_explicit_public_message(self):
        error = ApiError("private", code=403, public_message="Not yours")
        assert error.code == 403
        assert error.get_public_message() == "Not yours"

    def test_subclass_codes(self):
        assert NotFound("x").code == 404
        assert MissingParameter("x").code == 400


class TestErrorResponse:
    """Test building error bodies."""

    def test_from_error(self):
        response = ErrorResponse.from_error(NotFound("nonsense"))

        assert response.model_dump() == {
            "message": "Could not find controller or endpoint matching 'nonsense'",
            "code": 404,
            "reason": "Not Found",
        }

    def test_private_message_is_hidden(self):
        response = ErrorResponse.from_error(ApiError("secret detail", code=503))

        assert response.message == "Service Unavailable"
        assert "secret" not in response.model_dump_json()

    def test_from_status(self):
        assert ErrorResponse.from_status(500).model_dump() == {
            "message": "Internal Server Error",
            "code": 500,
            "reason": "Internal Server Error",
        }

    def test_none_fields_are_excluded(self):
        assert ErrorResponse(message="Gone", code=410).model_dump() == {"message": "Gone", "code": 410}
