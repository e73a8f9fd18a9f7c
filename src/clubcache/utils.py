"""
Identity and timestamp helpers shared by every cached structure.

Ids arrive from the gateway as strings or ints; :func:`snowflake` normalizes
them to ``int`` so registry keys and cross references compare equal no matter
which form a payload used. Creation times are decoded from the id itself
through :func:`discord.utils.snowflake_time`.
"""

from __future__ import annotations

import datetime
from typing import Any, Iterable, List

from discord import utils as discord_utils


def snowflake(value: Any) -> int | None:
    """Return ``value`` as an ``int`` id, keeping ``None`` as ``None``."""

    if value is None:
        return None
    return int(value)


def snowflakes(values: Iterable[Any] | None) -> List[int]:
    return [int(v) for v in values or ()]


def created_at(entity_id: int) -> datetime.datetime:
    """Return the UTC creation time embedded in ``entity_id``."""

    return discord_utils.snowflake_time(int(entity_id))


def parse_timestamp(value: Any) -> datetime.datetime | None:
    """Parse an ISO-8601 gateway timestamp (or epoch milliseconds)."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.datetime.fromtimestamp(value / 1000, tz=datetime.timezone.utc)
    return discord_utils.parse_time(value)


__all__ = ["snowflake", "snowflakes", "created_at", "parse_timestamp"]
