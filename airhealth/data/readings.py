"""Pollutant readings and their conversion from component records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Mapping

import pandas as pd

from ..utils.dates import TimestampLike, ensure_utc
from .breakpoints import POLLUTANTS

LOGGER = logging.getLogger(__name__)

# Component names as providers report them, mapped to pollutant keys.
COMPONENT_ALIASES: Dict[str, str] = {
    "pm2_5": "pm25",
    "pm25": "pm25",
    "pm10": "pm10",
    "no2": "no2",
    "so2": "so2",
    "o3": "o3",
    "co": "co",
}

UG_PER_MG = 1000.0

READING_COLUMNS = ["timestamp", "pollutant", "concentration"]


@dataclass(frozen=True)
class PollutantReading:
    """A single concentration, in the unit its breakpoint table expects."""

    pollutant: str
    concentration: float
    timestamp: datetime

    def __post_init__(self) -> None:
        if self.pollutant not in POLLUTANTS:
            raise KeyError(f"Unsupported pollutant {self.pollutant}")
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))
        object.__setattr__(self, "concentration", max(0.0, float(self.concentration)))


def readings_from_components(
    components: Mapping[str, object],
    timestamp: TimestampLike,
) -> List[PollutantReading]:
    """Turn one record of µg/m³ components into readings.

    CO is converted to mg/m³ here. Missing or null components are skipped
    rather than zero-filled so they do not drag a window average down.
    """
    when = ensure_utc(timestamp)
    readings = []
    for name, raw_value in components.items():
        pollutant = COMPONENT_ALIASES.get(str(name).lower())
        if pollutant is None or raw_value is None or pd.isna(raw_value):
            continue
        value = float(raw_value)
        if pollutant == "co":
            value = value / UG_PER_MG
        readings.append(PollutantReading(pollutant, value, when))
    return readings


def readings_from_frame(frame: pd.DataFrame, time_column: str = "time") -> List[PollutantReading]:
    """Convert a wide frame (one row per timestamp, one column per component)."""
    if time_column not in frame.columns:
        raise KeyError(f"Readings frame has no {time_column!r} column")
    readings: List[PollutantReading] = []
    component_columns = [column for column in frame.columns if column != time_column]
    for _, row in frame.iterrows():
        stamp = row[time_column]
        if isinstance(stamp, str) and stamp.strip().isdigit():
            stamp = int(stamp)
        readings.extend(readings_from_components(row[component_columns].to_dict(), stamp))
    LOGGER.debug("Parsed %d readings from %d rows", len(readings), len(frame))
    return readings


def readings_to_frame(readings: Iterable[PollutantReading]) -> pd.DataFrame:
    rows = [
        {
            "timestamp": reading.timestamp,
            "pollutant": reading.pollutant,
            "concentration": reading.concentration,
        }
        for reading in readings
    ]
    if not rows:
        frame = pd.DataFrame(columns=READING_COLUMNS)
        frame["timestamp"] = pd.to_datetime(frame["timestamp"], utc=True)
        frame["concentration"] = frame["concentration"].astype(float)
        return frame
    frame = pd.DataFrame(rows, columns=READING_COLUMNS)
    frame["timestamp"] = pd.to_datetime(frame["timestamp"], utc=True)
    return frame.sort_values("timestamp", kind="stable").reset_index(drop=True)

