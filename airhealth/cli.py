"""Command-line entry point: compute the AQI and an optional health risk."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .data.readings import readings_from_frame
from .errors import AirHealthError
from .services.health import UserProfile, compute_health_risk
from .services.index import aqi_category, compute_overall_index, reconcile_with_provider
from .services.temporal import MODES
from .utils.config import load_settings
from .utils.logging import configure_logging

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="airhealth", description="Compute CPCB AQI and personal health risk")
    p.add_argument("readings", type=Path, help="CSV with a 'time' column and pollutant columns in ug/m3")
    p.add_argument("--mode", choices=MODES, default=None, help="Aggregation mode (default from settings)")
    p.add_argument("--window-end", default=None, help="ISO 8601 end of the averaging window (default: now)")
    p.add_argument("--profile", type=Path, default=None, help="JSON user profile for health-risk scoring")
    p.add_argument("--provider-aqi", type=float, default=None, help="Provider-reported AQI to cross-check")
    p.add_argument("--env-file", type=Path, default=None, help="Path to a .env file")
    p.add_argument("--log-level", default=None, help="Logging level (default from settings)")
    return p.parse_args(argv)


def run(args: argparse.Namespace) -> Dict[str, object]:
    settings = load_settings(args.env_file)
    configure_logging(args.log_level or settings.log_level)

    frame = pd.read_csv(args.readings)
    readings = readings_from_frame(frame)
    mode = args.mode or settings.aqi_mode
    LOGGER.info("Computing AQI from %d readings in %s mode", len(readings), mode)

    overall = compute_overall_index(readings, mode=mode, window_end=args.window_end)
    category = aqi_category(overall.value)
    reconciliation = reconcile_with_provider(overall, args.provider_aqi, settings.provider_tolerance)
    result: Dict[str, object] = {
        "index": overall.to_response(),
        "category": {"name": category.name, "description": category.description},
        "reconciliation": reconciliation.to_dict(),
    }

    if args.profile is not None:
        profile = UserProfile.from_mapping(json.loads(args.profile.read_text(encoding="utf-8")))
        result["healthRisk"] = compute_health_risk(reconciliation.value, profile).to_dict()
    return result


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        result = run(args)
    except AirHealthError as exc:
        LOGGER.error("%s", exc)
        return 1
    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0
