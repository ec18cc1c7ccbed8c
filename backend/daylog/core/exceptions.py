"""
Domain errors raised by services and mapped to HTTP responses in main.py.
"""
from fastapi import status


class AppError(Exception):
    """Base class for errors that carry a client-safe message."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed required input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class AuthenticationError(AppError):
    """Missing, invalid or expired token, or bad credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials."


class NotFoundError(AppError):
    """
    Row absent or owned by another user.

    Both cases share one message so callers cannot probe for the existence
    of other users' records.
    """
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found or unauthorized."


class ConflictError(AppError):
    """Uniqueness violation."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists."
