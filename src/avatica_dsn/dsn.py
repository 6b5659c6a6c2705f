"""
DSN parsing for Avatica connections.

A DSN has the form::

    scheme://[user[:password]@]host[:port][/schema][?param=value&...]

Recognized query parameters are listed in ``DSN_PARAMETERS``; anything else
is ignored. Parsing is all-or-nothing: either a fully validated ``Config`` is
returned or an ``AvaticaDSNError`` is raised.
"""

import logging
import re
from datetime import timezone, tzinfo
from typing import Any
from urllib.parse import parse_qsl, unquote, urlsplit, urlunsplit
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from .config import INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN, Config
from .exceptions import AvaticaDSNError, InvalidFieldError, MalformedDSNError, MissingFieldError
from .types import Authentication, TransactionIsolation

logger = logging.getLogger(__name__)

MAX_ROWS_TOTAL = "maxRowsTotal"
FRAME_MAX_SIZE = "frameMaxSize"
LOCATION = "location"
TRANSACTION_ISOLATION = "transactionIsolation"
AUTHENTICATION = "authentication"
AVATICA_USER = "avaticaUser"
AVATICA_PASSWORD = "avaticaPassword"

DSN_PARAMETERS = frozenset(
    {
        MAX_ROWS_TOTAL,
        FRAME_MAX_SIZE,
        LOCATION,
        TRANSACTION_ISOLATION,
        AUTHENTICATION,
        AVATICA_USER,
        AVATICA_PASSWORD,
    }
)

# Optional sign, ASCII digits
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_int(field: str, value: str, low: int, high: int) -> int:
    if not _INTEGER.fullmatch(value):
        raise InvalidFieldError(f"Invalid value for {field}: {value!r} is not a decimal integer", field, value)
    try:
        number = int(value)
    except ValueError as e:
        raise InvalidFieldError(
            f"Invalid value for {field}: {len(value)}-digit integer is out of range", field, value
        ) from e
    if number < low or number > high:
        raise InvalidFieldError(f"Invalid value for {field}: {value} is out of range [{low}, {high}]", field, value)
    return number


def _parse_location(value: str) -> tzinfo:
    if value == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise InvalidFieldError(f"Invalid value for location: unknown time zone {value!r}", LOCATION, value) from e


def _query_params(query: str) -> dict[str, str]:
    """Decode the query string, keeping the first value of each key."""
    params: dict[str, str] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        params.setdefault(key, value)
    return params


def parse_dsn(dsn: str) -> Config:
    """
    Parse a DSN string into a Config.

    Args:
        dsn: Absolute URI describing the Avatica endpoint

    Returns:
        The validated configuration

    Raises:
        MalformedDSNError: If dsn is not an absolute URI with a host
        InvalidFieldError: If a recognized parameter has an invalid value
        MissingFieldError: If authentication is set without avatica credentials
    """
    if not isinstance(dsn, str):
        raise MalformedDSNError(f"Unable to parse DSN: expected a string, got {type(dsn).__name__}")

    try:
        parts = urlsplit(dsn)
        # urllib only validates the port when it is read
        _ = parts.port
    except ValueError as e:
        raise MalformedDSNError(f"Unable to parse DSN: {e}") from e

    if not parts.scheme:
        raise MalformedDSNError(f"Unable to parse DSN: {dsn!r} has no scheme")
    if not parts.hostname:
        raise MalformedDSNError(f"Unable to parse DSN: {dsn!r} has no host")

    fields: dict[str, Any] = {}

    _, _, hostport = parts.netloc.rpartition("@")
    if parts.username:
        fields["user"] = unquote(parts.username)
    if parts.password is not None:
        fields["password"] = unquote(parts.password)

    params = _query_params(parts.query)

    if value := params.get(MAX_ROWS_TOTAL):
        fields["max_rows_total"] = _parse_int(MAX_ROWS_TOTAL, value, INT64_MIN, INT64_MAX)

    if value := params.get(FRAME_MAX_SIZE):
        fields["frame_max_size"] = _parse_int(FRAME_MAX_SIZE, value, INT32_MIN, INT32_MAX)

    if value := params.get(LOCATION):
        fields["location"] = _parse_location(value)

    if value := params.get(TRANSACTION_ISOLATION):
        isolation = _parse_int(TRANSACTION_ISOLATION, value, INT64_MIN, INT64_MAX)
        fields["transaction_isolation"] = TransactionIsolation.from_value(isolation)

    if value := params.get(AUTHENTICATION):
        fields["authentication"] = Authentication.from_dsn(value)

        user = params.get(AVATICA_USER)
        if not user:
            raise MissingFieldError(f"authentication is set to {value}, but avaticaUser is empty", AVATICA_USER)
        fields["avatica_user"] = user

        password = params.get(AVATICA_PASSWORD)
        if not password:
            raise MissingFieldError(f"authentication is set to {value}, but avaticaPassword is empty", AVATICA_PASSWORD)
        fields["avatica_password"] = password

    if parts.path:
        fields["schema"] = unquote(parts.path).removeprefix("/")

    ignored = sorted(params.keys() - DSN_PARAMETERS)
    if ignored:
        logger.debug(f"Ignoring unrecognized DSN parameters: {', '.join(ignored)}")

    endpoint = urlunsplit((parts.scheme, hostport, parts.path, "", ""))

    try:
        return Config(endpoint=endpoint, **fields)
    except ValidationError as e:
        raise AvaticaDSNError(f"Invalid DSN configuration: {e}") from e


__all__ = [
    "parse_dsn",
    "DSN_PARAMETERS",
    "MAX_ROWS_TOTAL",
    "FRAME_MAX_SIZE",
    "LOCATION",
    "TRANSACTION_ISOLATION",
    "AUTHENTICATION",
    "AVATICA_USER",
    "AVATICA_PASSWORD",
]
