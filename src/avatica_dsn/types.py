"""
Type definitions for Avatica DSN configuration.

Closed enumerations for the settings that Avatica encodes as integers or
keywords on the wire. Every use site matches on the members exhaustively so
that an unmapped value can never slip through as a bare int or string.
"""

from enum import IntEnum, StrEnum

from .exceptions import InvalidFieldError


class Authentication(StrEnum):
    """
    Protocol-level authentication mode requested by the DSN.

    - NONE: No Avatica-level authentication (default)
    - BASIC: HTTP Basic authentication with avaticaUser/avaticaPassword
    - DIGEST: HTTP Digest authentication with avaticaUser/avaticaPassword
    """

    NONE = "none"
    BASIC = "basic"
    DIGEST = "digest"

    @classmethod
    def from_dsn(cls, value: str) -> "Authentication":
        """
        Resolve the ``authentication`` query parameter.

        Matching is case-insensitive. Only BASIC and DIGEST may be requested
        explicitly; leaving the parameter out is how NONE is selected.

        Raises:
            InvalidFieldError: If the value is not BASIC or DIGEST
        """
        match value.upper():
            case "BASIC":
                return cls.BASIC
            case "DIGEST":
                return cls.DIGEST
            case _:
                raise InvalidFieldError(
                    "authentication must be either BASIC or DIGEST",
                    field="authentication",
                    value=value,
                )

    @property
    def requires_credentials(self) -> bool:
        """Whether avaticaUser and avaticaPassword must be supplied."""
        match self:
            case Authentication.NONE:
                return False
            case Authentication.BASIC | Authentication.DIGEST:
                return True


class TransactionIsolation(IntEnum):
    """
    Transaction isolation level, using the JDBC ``Connection`` constants.

    The values are powers of two (or zero), so a valid level always
    satisfies ``v & (v - 1) == 0``.
    """

    NONE = 0
    READ_UNCOMMITTED = 1
    READ_COMMITTED = 2
    REPEATABLE_READ = 4
    SERIALIZABLE = 8

    @classmethod
    def from_value(cls, value: int) -> "TransactionIsolation":
        """
        Validate an integer isolation level.

        Raises:
            InvalidFieldError: If value is not one of 0, 1, 2, 4 or 8
        """
        if value < 0 or value > 8 or value & (value - 1) != 0:
            raise InvalidFieldError(
                f"transactionIsolation must be 0, 1, 2, 4 or 8, {value} given",
                field="transactionIsolation",
                value=value,
            )
        return cls(value)

    @property
    def level_name(self) -> str:
        """SQL name of the isolation level."""
        match self:
            case TransactionIsolation.NONE:
                return "NONE"
            case TransactionIsolation.READ_UNCOMMITTED:
                return "READ UNCOMMITTED"
            case TransactionIsolation.READ_COMMITTED:
                return "READ COMMITTED"
            case TransactionIsolation.REPEATABLE_READ:
                return "REPEATABLE READ"
            case TransactionIsolation.SERIALIZABLE:
                return "SERIALIZABLE"


__all__ = ["Authentication", "TransactionIsolation"]
