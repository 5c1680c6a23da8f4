"""Date utilities."""

from __future__ import annotations

import numbers
from datetime import datetime, timezone
from typing import Optional, Union

import pandas as pd

TimestampLike = Union[datetime, pd.Timestamp, str, int, float]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: TimestampLike) -> datetime:
    """Return ``value`` as a timezone-aware UTC datetime.

    Naive datetimes are assumed to already be in UTC. Numbers are read as
    epoch seconds and strings as ISO 8601.
    """
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    stamp = pd.Timestamp(value)
    if stamp.tzinfo is None:
        stamp = stamp.tz_localize("UTC")
    return stamp.tz_convert("UTC").to_pydatetime()


def to_iso8601(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")
