from datetime import datetime, timedelta, timezone

import pytest

from airhealth.data.readings import PollutantReading

WINDOW_END = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def window_end():
    return WINDOW_END


@pytest.fixture
def reading():
    """Factory for a reading ``hours_ago`` before the window end."""

    def make(pollutant, concentration, hours_ago=1.0):
        return PollutantReading(pollutant, concentration, WINDOW_END - timedelta(hours=hours_ago))

    return make


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    for key in ("AIRHEALTH_AQI_MODE", "AIRHEALTH_LOG_LEVEL", "AIRHEALTH_PROVIDER_TOLERANCE"):
        monkeypatch.delenv(key, raising=False)
