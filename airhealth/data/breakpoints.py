"""CPCB (India National AQI) breakpoint tables."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Sequence, Tuple

from ..errors import ConfigError

LOGGER = logging.getLogger(__name__)

# Evaluation order; also the tie-break priority for the dominant pollutant.
POLLUTANTS: Tuple[str, ...] = ("pm25", "pm10", "no2", "so2", "o3", "co")

INDEX_BANDS: Tuple[Tuple[int, int], ...] = (
    (0, 50),
    (51, 100),
    (101, 200),
    (201, 300),
    (301, 400),
    (401, 500),
)


@dataclass(frozen=True)
class Breakpoint:
    """One concentration band and the index band it maps onto."""

    low: float
    high: float
    index_low: float
    index_high: float


def _bands(bounds: Sequence[Tuple[float, float]]) -> Tuple[Breakpoint, ...]:
    return tuple(
        Breakpoint(low, high, index_low, index_high)
        for (low, high), (index_low, index_high) in zip(bounds, INDEX_BANDS)
    )


# Concentrations in µg/m³, except CO in mg/m³. The top band's ``high`` is the
# published sentinel; sub-index calculation treats that band as open-ended.
_CPCB_BOUNDS: Dict[str, Sequence[Tuple[float, float]]] = {
    "pm25": [(0, 30), (31, 60), (61, 90), (91, 120), (121, 250), (251, 9999)],
    "pm10": [(0, 50), (51, 100), (101, 250), (251, 350), (351, 430), (431, 9999)],
    "no2": [(0, 40), (41, 80), (81, 180), (181, 280), (281, 400), (401, 9999)],
    "so2": [(0, 40), (41, 80), (81, 380), (381, 800), (801, 1600), (1601, 999999)],
    "o3": [(0, 50), (51, 100), (101, 168), (169, 208), (209, 748), (749, 999999)],
    "co": [(0, 1.0), (1.1, 2.0), (2.1, 10.0), (10.1, 17.0), (17.1, 34.0), (34.1, 9999)],
}


def validate_table(pollutant: str, table: Sequence[Breakpoint]) -> Tuple[Breakpoint, ...]:
    """Check a band list is non-empty, ascending and non-overlapping.

    Gaps between consecutive bands are allowed; the published tables use
    integer bounds (``[0, 30]`` then ``[31, 60]``).
    """
    if not table:
        raise ConfigError(f"{pollutant}: breakpoint table is empty")
    if table[0].low != 0:
        raise ConfigError(f"{pollutant}: lowest band must start at 0, got {table[0].low}")

    previous = None
    for position, band in enumerate(table):
        if band.low > band.high:
            raise ConfigError(f"{pollutant}: band {position} has low {band.low} > high {band.high}")
        if band.index_low > band.index_high:
            raise ConfigError(
                f"{pollutant}: band {position} has index_low {band.index_low} > index_high {band.index_high}"
            )
        if previous is not None:
            if band.low <= previous.high:
                raise ConfigError(
                    f"{pollutant}: band {position} starts at {band.low}, overlapping previous high {previous.high}"
                )
            if band.index_low <= previous.index_high:
                raise ConfigError(f"{pollutant}: index bands are not ascending at band {position}")
        previous = band
    return tuple(table)


def load_breakpoint_tables(
    bounds: Mapping[str, Sequence[Tuple[float, float]]] | None = None,
) -> Mapping[str, Tuple[Breakpoint, ...]]:
    """Build and validate the per-pollutant tables as a read-only mapping."""
    bounds = _CPCB_BOUNDS if bounds is None else bounds
    missing = [pollutant for pollutant in POLLUTANTS if pollutant not in bounds]
    if missing:
        raise ConfigError(f"Missing breakpoint tables for {', '.join(missing)}")

    tables = {}
    for pollutant in POLLUTANTS:
        if len(bounds[pollutant]) != len(INDEX_BANDS):
            raise ConfigError(
                f"{pollutant}: expected {len(INDEX_BANDS)} bands, got {len(bounds[pollutant])}"
            )
        tables[pollutant] = validate_table(pollutant, _bands(bounds[pollutant]))
    LOGGER.debug("Loaded %d breakpoint tables", len(tables))
    return MappingProxyType(tables)


CPCB_BREAKPOINTS: Mapping[str, Tuple[Breakpoint, ...]] = load_breakpoint_tables()
