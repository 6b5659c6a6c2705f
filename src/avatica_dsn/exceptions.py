"""
Avatica DSN Exceptions.

Custom exception hierarchy for DSN parsing.
"""

from typing import Any


class AvaticaDSNError(Exception):
    """Base exception for all DSN parsing errors."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class MalformedDSNError(AvaticaDSNError):
    """Raised when the DSN is not a parseable absolute URI."""

    pass


class InvalidFieldError(AvaticaDSNError):
    """Raised when a query parameter fails its type, range or set constraint."""

    def __init__(self, message: str, field: str, value: Any = None):
        self.value = value
        super().__init__(message, field)


class MissingFieldError(AvaticaDSNError):
    """Raised when a parameter required by another one is absent or empty.

    For example ``authentication=BASIC`` without ``avaticaUser``.
    """

    pass


DSNError = AvaticaDSNError


__all__ = [
    "AvaticaDSNError",
    "DSNError",
    "MalformedDSNError",
    "InvalidFieldError",
    "MissingFieldError",
]
