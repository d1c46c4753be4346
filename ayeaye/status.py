"""
HTTP status codes paired with their canonical reason phrases.
"""

from http import HTTPStatus
from typing import Any


class Status:
    """An HTTP status code and its reason phrase.

    The phrase always comes from the standard table, so a Status can only be built
    for codes that table knows about.
    """

    def __init__(self, code: int = 200):
        self.code = int(code)
        self.message = self.get_message_for_code(self.code)

    @staticmethod
    def get_message_for_code(code: int) -> str:
        """Get the canonical reason phrase for a status code.

        Args:
            code: HTTP status code

        Returns:
            The reason phrase, e.g. "Not Found" for 404

        Raises:
            ValueError: If the code is not a known HTTP status
        """
        try:
            return HTTPStatus(int(code)).phrase
        except ValueError:
            raise ValueError(f"Unknown HTTP status code: {code}")

    def get_code(self) -> int:
        return self.code

    def get_message(self) -> str:
        return self.message

    def __str__(self) -> str:
        return f"{self.code} {self.message}"

    def __repr__(self) -> str:
        return f"Status({self.code})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Status):
            return NotImplemented
        return self.code == other.code and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.code, self.message))

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}
