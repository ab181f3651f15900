"""Exceptions raised by the stores and rendered by the API error handlers."""


class ScrapConnectError(Exception):
    """Base exception for all Scrap Connect errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ScrapConnectError):
    """A required field is missing or malformed."""

    status_code = 400


class FormatError(ScrapConnectError):
    """A mobile number does not match the expected pattern."""

    status_code = 400


class ConflictError(ScrapConnectError):
    status_code = 409


class AuthError(ScrapConnectError):
    status_code = 401


class NotFoundError(ScrapConnectError):
    status_code = 404
