"""Exceptions raised by snoots."""

from __future__ import annotations

from typing import Any


class SnootsError(Exception):
    """Base exception for snoots errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class AuthError(SnootsError):
    """A grant exchange was rejected by Reddit."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code


class ConfigError(AuthError):
    """Credentials are required but missing, or the client is misconfigured."""

    pass


class ApiError(SnootsError):
    """Reddit answered, but marked the response as a failure."""

    def __init__(
        self,
        error: Any,
        description: str | None = None,
        status_code: int | None = None,
    ):
        message = f"Reddit returned an error: {error}"
        if description:
            message += f": {description}"
        super().__init__(message)
        self.error = error
        self.description = description
        self.status_code = status_code


class TransportError(SnootsError):
    """The request failed before a usable response was obtained."""

    pass
