"""Overall AQI from per-pollutant sub-indices."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from ..data.breakpoints import CPCB_BREAKPOINTS, POLLUTANTS, Breakpoint
from ..data.readings import PollutantReading
from ..utils.dates import TimestampLike, ensure_utc, to_iso8601, utcnow
from ..utils.numbers import round_half_away_from_zero
from .subindex import sub_indices as compute_sub_indices
from .temporal import SMOOTHED, aggregate_readings

LOGGER = logging.getLogger(__name__)

SOURCE = "cpcb"


@dataclass(frozen=True)
class AQICategory:
    name: str
    upper: Optional[int]
    description: str


AQI_CATEGORIES: List[AQICategory] = [
    AQICategory("Good", 50, "Air quality is satisfactory."),
    AQICategory("Moderate", 100, "Acceptable; sensitive groups should take care."),
    AQICategory("Poor", 200, "Health effects possible for sensitive people."),
    AQICategory("Very Poor", 300, "Increased health risk for everyone."),
    AQICategory("Severe", None, "Serious health effects. Avoid outdoor activity."),
]


@dataclass(frozen=True)
class OverallIndex:
    value: int
    dominant_pollutant: Optional[str]
    timestamp: datetime
    raw_value: float = 0.0
    sub_indices: Dict[str, float] = field(default_factory=dict)
    concentrations: Dict[str, float] = field(default_factory=dict)

    def to_response(self) -> Dict[str, object]:
        """Shape the index the way the HTTP layer returns it."""
        components = {pollutant: self.concentrations.get(pollutant, 0.0) for pollutant in POLLUTANTS}
        components["co_mg_m3"] = components.pop("co")
        time = to_iso8601(self.timestamp)
        return {
            "source": SOURCE,
            "aqi": self.value,
            "components": components,
            "subIndices": {pollutant: self.sub_indices.get(pollutant, 0.0) for pollutant in POLLUTANTS},
            "dominantPollutant": self.dominant_pollutant,
            "time": time,
            "updatedAt": time,
        }


@dataclass(frozen=True)
class IndexReconciliation:
    value: int
    source: str
    computed: int
    provider: Optional[float]
    difference: Optional[float]
    agrees: bool

    def to_dict(self) -> Dict[str, object]:
        return {
            "value": self.value,
            "source": self.source,
            "computed": self.computed,
            "provider": self.provider,
            "difference": self.difference,
            "agrees": self.agrees,
        }


def aggregate_sub_indices(
    sub_indices: Mapping[str, float],
    timestamp: Optional[TimestampLike] = None,
) -> OverallIndex:
    """Combine sub-indices with the worst-pollutant rule.

    Ties resolve to the earliest pollutant in ``POLLUTANTS``. An empty mapping
    gives an index of 0 with no dominant pollutant.
    """
    when = ensure_utc(timestamp) if timestamp is not None else utcnow()
    present = [pollutant for pollutant in POLLUTANTS if pollutant in sub_indices]
    if not present:
        return OverallIndex(0, None, when)

    raw_value = max(sub_indices[pollutant] for pollutant in present)
    dominant = next(pollutant for pollutant in present if sub_indices[pollutant] == raw_value)
    LOGGER.debug("Overall index %.2f dominated by %s", raw_value, dominant)
    return OverallIndex(
        value=round_half_away_from_zero(raw_value),
        dominant_pollutant=dominant,
        timestamp=when,
        raw_value=float(raw_value),
        sub_indices={pollutant: float(sub_indices[pollutant]) for pollutant in present},
    )


def compute_overall_index(
    readings: Sequence[PollutantReading],
    mode: str = SMOOTHED,
    window_end: Optional[TimestampLike] = None,
    tables: Mapping[str, Sequence[Breakpoint]] = CPCB_BREAKPOINTS,
) -> OverallIndex:
    """Readings to overall index: aggregate, sub-index, then take the worst."""
    aggregated = aggregate_readings(readings, mode=mode, window_end=window_end)
    values = compute_sub_indices(aggregated.concentrations, tables)
    overall = aggregate_sub_indices(values, aggregated.timestamp)
    return OverallIndex(
        value=overall.value,
        dominant_pollutant=overall.dominant_pollutant,
        timestamp=overall.timestamp,
        raw_value=overall.raw_value,
        sub_indices=overall.sub_indices,
        concentrations=dict(aggregated.concentrations),
    )


def aqi_category(value: float) -> AQICategory:
    for category in AQI_CATEGORIES:
        if category.upper is None or value <= category.upper:
            return category
    return AQI_CATEGORIES[-1]


def reconcile_with_provider(
    computed: OverallIndex,
    provider_value: Optional[float],
    tolerance: float = 50.0,
) -> IndexReconciliation:
    """Pick the index to publish, preferring a provider-reported value.

    Without a provider value the computed index is used and counts as agreeing.
    """
    if provider_value is None:
        return IndexReconciliation(computed.value, SOURCE, computed.value, None, None, True)

    provider = float(provider_value)
    difference = abs(provider - computed.value)
    agrees = difference <= tolerance
    if not agrees:
        LOGGER.warning(
            "Provider AQI %.0f differs from computed %d by %.0f (tolerance %.0f)",
            provider,
            computed.value,
            difference,
            tolerance,
        )
    return IndexReconciliation(
        value=round_half_away_from_zero(provider),
        source="provider",
        computed=computed.value,
        provider=provider,
        difference=difference,
        agrees=agrees,
    )
