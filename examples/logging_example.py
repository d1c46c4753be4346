#!/usr/bin/env python3
"""
Example demonstrating logging in AyeAye.

This example shows what each log level carries:
- DEBUG: Route resolution steps
- INFO: Public message of a handled error
- ERROR: Private message of a handled error, with its traceback
- CRITICAL: Unexpected exceptions
"""

import logging

from ayeaye import Api, ApiError, Controller, Request, endpoint


def setup_logging():
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


class RootController(Controller):
    """Logging demo."""

    @endpoint("GET")
    def get_index(self):
        return {"message": "Welcome to the logging example!"}

    @endpoint("GET", "denied")
    def denied(self):
        """Fails with a private reason and a public one."""
        raise ApiError("token for user 42 expired at 12:00", code=403, public_message="Access denied")

    @endpoint("GET", "error")
    def error(self):
        """Endpoint that generates an unexpected error."""
        raise ValueError("Intentional error for logging demonstration")


if __name__ == "__main__":
    # Set up logging to see all messages
    setup_logging()

    api = Api(RootController())

    print("=== Logging Example for AyeAye ===\n")

    print("1. Normal request - shows DEBUG route resolution:")
    response = api.go(Request("GET", "/"))
    print(f"   Response: {response.status_line}\n")

    print("2. Handled error - shows INFO and ERROR logs:")
    response = api.go(Request("GET", "/denied"))
    print(f"   Response: {response.status_line} {response.content}\n")

    print("3. Unexpected error - shows CRITICAL logs:")
    response = api.go(Request("GET", "/error"))
    print(f"   Response: {response.status_line}\n")

    print("4. Unknown path - shows the not found error:")
    response = api.go(Request("GET", "/nonsense"))
    print(f"   Response: {response.status_line}\n")
