"""
Domain errors raised by the chat services.

Each error carries the HTTP status it maps to; main.py registers a single
handler for ChatError that renders {"detail": message}.
"""

from fastapi import status


class ChatError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Bad request"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(ChatError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class Forbidden(ChatError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFound(ChatError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Conflict(ChatError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class InvalidArgument(ChatError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid argument"
