"""
Connection configuration for an Avatica query endpoint.

Provides the immutable configuration container produced by
``avatica_dsn.parse_dsn`` and handed to the driver's connection layer.
"""

from __future__ import annotations

import dataclasses
from datetime import timezone, tzinfo
from typing import Self
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

from pydantic import ConfigDict, Field, model_validator
from pydantic.dataclasses import dataclass

from .types import Authentication, TransactionIsolation

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Sentinel used on the wire for "no limit"
UNBOUNDED = -1


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class Config:
    """
    Immutable configuration for an Avatica connection.

    Build it with ``parse_dsn()``; direct construction is validated too and
    raises ``pydantic.ValidationError`` if an invariant does not hold.

    Attributes:
        endpoint: Server URL without credentials, query string or fragment.
        max_rows_total: Row cap per query, -1 for unbounded.
        frame_max_size: Byte cap per result frame, -1 for unbounded.
        location: Time zone used to interpret temporal values.
        schema: Default schema, taken from the DSN path.
        transaction_isolation: Requested isolation level.
        user: Transport-level user from the DSN user-info.
        password: Transport-level password from the DSN user-info.
        authentication: Avatica-level authentication mode.
        avatica_user: Avatica-level user, required unless authentication is NONE.
        avatica_password: Avatica-level password, required unless authentication is NONE.
    """

    endpoint: str
    max_rows_total: int = Field(default=UNBOUNDED, ge=INT64_MIN, le=INT64_MAX)
    frame_max_size: int = Field(default=UNBOUNDED, ge=INT32_MIN, le=INT32_MAX)
    location: tzinfo = timezone.utc
    schema: str = ""
    transaction_isolation: TransactionIsolation = TransactionIsolation.NONE

    user: str = ""
    password: str = dataclasses.field(default="", repr=False)

    authentication: Authentication = Authentication.NONE
    avatica_user: str = ""
    avatica_password: str = dataclasses.field(default="", repr=False)

    @model_validator(mode="after")
    def check_invariants(self) -> Self:
        """
        Check the cross-field invariants.
        """
        parts = urlsplit(self.endpoint)
        if "@" in parts.netloc or parts.query or parts.fragment:
            raise ValueError("endpoint must not carry credentials, a query string or a fragment")
        if self.authentication.requires_credentials:
            if not self.avatica_user:
                raise ValueError(f"authentication is set to {self.authentication.name}, but avatica_user is empty")
            if not self.avatica_password:
                raise ValueError(
                    f"authentication is set to {self.authentication.name}, but avatica_password is empty"
                )
        return self

    @property
    def row_limit(self) -> int | None:
        """Row cap per query, or None when unbounded."""
        return None if self.max_rows_total < 0 else self.max_rows_total

    @property
    def frame_limit(self) -> int | None:
        """Byte cap per frame, or None when unbounded."""
        return None if self.frame_max_size < 0 else self.frame_max_size

    def to_dsn(self) -> str:
        """
        Serialize back to a DSN string.

        Only parameters that differ from their defaults are written, so
        ``parse_dsn(config.to_dsn()) == config``.
        """
        from .dsn import (
            AUTHENTICATION,
            AVATICA_PASSWORD,
            AVATICA_USER,
            FRAME_MAX_SIZE,
            LOCATION,
            MAX_ROWS_TOTAL,
            TRANSACTION_ISOLATION,
        )

        params: list[tuple[str, str]] = []
        if self.max_rows_total != UNBOUNDED:
            params.append((MAX_ROWS_TOTAL, str(self.max_rows_total)))
        if self.frame_max_size != UNBOUNDED:
            params.append((FRAME_MAX_SIZE, str(self.frame_max_size)))
        if self.location is not timezone.utc:
            params.append((LOCATION, getattr(self.location, "key", None) or str(self.location)))
        if self.transaction_isolation is not TransactionIsolation.NONE:
            params.append((TRANSACTION_ISOLATION, str(self.transaction_isolation.value)))
        if self.authentication.requires_credentials:
            params.append((AUTHENTICATION, self.authentication.name))
            params.append((AVATICA_USER, self.avatica_user))
            params.append((AVATICA_PASSWORD, self.avatica_password))

        parts = urlsplit(self.endpoint)
        netloc = parts.netloc
        if self.password:
            netloc = f"{quote(self.user, safe='')}:{quote(self.password, safe='')}@{netloc}"
        elif self.user:
            netloc = f"{quote(self.user, safe='')}@{netloc}"

        return urlunsplit((parts.scheme, netloc, parts.path, urlencode(params), ""))


__all__ = ["Config", "UNBOUNDED"]
