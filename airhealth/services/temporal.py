"""Reduce timestamped readings to one representative concentration per pollutant."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Mapping, Optional, Sequence

import pandas as pd

from ..data.breakpoints import POLLUTANTS
from ..data.readings import PollutantReading, readings_to_frame
from ..utils.dates import TimestampLike, ensure_utc, utcnow

LOGGER = logging.getLogger(__name__)

INSTANT = "instant"
SMOOTHED = "smoothed"
MODES = (INSTANT, SMOOTHED)

AVERAGING_WINDOWS: Mapping[str, timedelta] = {
    "pm25": timedelta(hours=24),
    "pm10": timedelta(hours=24),
    "no2": timedelta(hours=24),
    "so2": timedelta(hours=24),
    "o3": timedelta(hours=8),
    "co": timedelta(hours=8),
}


@dataclass(frozen=True)
class AggregatedConcentrations:
    concentrations: Dict[str, float]
    timestamp: datetime
    reading_counts: Dict[str, int] = field(default_factory=dict)


def _select(
    frame: pd.DataFrame,
    pollutant: str,
    window_end: datetime,
    mode: str,
) -> pd.DataFrame:
    end = pd.Timestamp(window_end)
    subset = frame[(frame["pollutant"] == pollutant) & (frame["timestamp"] <= end)]
    if mode == INSTANT:
        return subset.tail(1)
    start = end - pd.Timedelta(AVERAGING_WINDOWS[pollutant])
    return subset[subset["timestamp"] >= start]


def _check_mode(mode: str) -> str:
    if mode not in MODES:
        raise ValueError(f"Unknown aggregation mode {mode!r}; expected one of {MODES}")
    return mode


def aggregate(
    readings: Sequence[PollutantReading],
    pollutant: str,
    window_end: Optional[TimestampLike] = None,
    mode: str = SMOOTHED,
) -> float:
    """Representative concentration of ``pollutant`` at ``window_end``.

    Smoothed mode averages readings in ``[window_end - window, window_end]``;
    instant mode takes the latest reading at or before ``window_end``. An
    empty selection yields 0.
    """
    _check_mode(mode)
    if pollutant not in AVERAGING_WINDOWS:
        raise KeyError(f"Unsupported pollutant {pollutant}")
    window_end = ensure_utc(window_end) if window_end is not None else utcnow()
    selected = _select(readings_to_frame(readings), pollutant, window_end, mode)
    if selected.empty:
        return 0.0
    return float(selected["concentration"].mean())


def aggregate_readings(
    readings: Sequence[PollutantReading],
    mode: str = SMOOTHED,
    window_end: Optional[TimestampLike] = None,
) -> AggregatedConcentrations:
    """Aggregate every pollutant at once.

    The result timestamp is the latest reading used for any pollutant, or
    ``window_end`` (now, by default) when nothing was selected.
    """
    _check_mode(mode)
    window_end = ensure_utc(window_end) if window_end is not None else utcnow()
    frame = readings_to_frame(readings)

    concentrations: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    latest: Optional[pd.Timestamp] = None
    for pollutant in POLLUTANTS:
        selected = _select(frame, pollutant, window_end, mode)
        counts[pollutant] = int(len(selected))
        if selected.empty:
            concentrations[pollutant] = 0.0
            continue
        concentrations[pollutant] = float(selected["concentration"].mean())
        newest = selected["timestamp"].max()
        if latest is None or newest > latest:
            latest = newest

    LOGGER.debug("Aggregated %d readings in %s mode: %s", len(readings), mode, counts)
    timestamp = latest.to_pydatetime() if latest is not None else window_end
    return AggregatedConcentrations(concentrations, timestamp, counts)
