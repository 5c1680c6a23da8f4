"""Piecewise-linear sub-index calculation."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Sequence

from ..data.breakpoints import CPCB_BREAKPOINTS, POLLUTANTS, Breakpoint

LOGGER = logging.getLogger(__name__)


def _interpolate(concentration: float, band: Breakpoint) -> float:
    if band.high == band.low:
        return float(band.index_high)
    slope = (band.index_high - band.index_low) / (band.high - band.low)
    return band.index_low + slope * (concentration - band.low)


def sub_index(concentration: float, table: Sequence[Breakpoint]) -> float:
    """Map one concentration onto the index scale of ``table``.

    Negative concentrations are clamped to 0. A concentration in the gap
    between two bands is raised to the next band's ``low``. Above the top
    band the top band's slope is extended, so the result can exceed its
    ``index_high``. The result is not rounded.
    """
    concentration = max(0.0, float(concentration))
    for band in table:
        if concentration <= band.high:
            return _interpolate(max(concentration, band.low), band)
    top = table[-1]
    LOGGER.debug("Concentration %.3f above top band %s; extrapolating", concentration, top)
    return _interpolate(concentration, top)


def sub_indices(
    concentrations: Mapping[str, float],
    tables: Mapping[str, Sequence[Breakpoint]] = CPCB_BREAKPOINTS,
) -> Dict[str, float]:
    """Compute the sub-index of every pollutant present in ``concentrations``."""
    return {
        pollutant: sub_index(concentrations[pollutant], tables[pollutant])
        for pollutant in POLLUTANTS
        if pollutant in concentrations
    }
