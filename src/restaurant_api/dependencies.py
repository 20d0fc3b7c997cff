"""Request parsing helpers shared by the route modules."""

import math
from uuid import UUID

from restaurant_api.config import settings
from restaurant_api.errors import InvalidIdentifier


def parse_id(value: str, message: str = "Invalid id") -> UUID:
    """Parse a path identifier before any database access.

    Raises InvalidIdentifier for anything that is not a UUID.
    """
    try:
        return UUID(value)
    except (TypeError, ValueError):
        raise InvalidIdentifier(message) from None


def _parse_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def parse_pagination(page: str | None, limit: str | None) -> tuple[int, int]:
    """Normalize page/limit query values.

    page defaults to 1 and is floored at 1; limit defaults to the configured
    page size and is clamped to [1, max_page_size]. Unparseable values fall
    back to the defaults.
    """
    page_number = max(_parse_int(page, 1), 1)
    page_size = min(max(_parse_int(limit, settings.default_page_size), 1), settings.max_page_size)
    return page_number, page_size


def parse_limit(limit: str | None, default: int, maximum: int) -> int:
    """Clamp a result limit to [1, maximum]."""
    return min(max(_parse_int(limit, default), 1), maximum)


def parse_optional_float(value: str | None) -> float | None:
    """Parse an optional numeric filter; blank or non-numeric values are ignored."""
    if value is None or not value.strip():
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None
