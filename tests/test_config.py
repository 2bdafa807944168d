"""Tests for settings loading and timezone helpers."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from escrow_notifications import config as config_module  # noqa: E402
from escrow_notifications.config import Settings, get_settings, reset_settings_cache  # noqa: E402
from escrow_notifications.utils import datetime as datetime_module  # noqa: E402
from escrow_notifications.utils import parse_event_timestamp  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    datetime_module.get_app_timezone.cache_clear()
    yield
    reset_settings_cache()
    datetime_module.get_app_timezone.cache_clear()


def test_defaults():
    settings = Settings()

    assert settings.notification_duplicate_policy == "allow"
    assert settings.payment_currency == "KES"
    assert settings.cors_allow_origins == ["*"]
    assert settings.subscribe_extended_events is False


@pytest.mark.parametrize("value", ["REPLACE", " ignore ", "allow"])
def test_duplicate_policy_is_normalized(value):
    settings = Settings(notification_duplicate_policy=value)

    assert settings.notification_duplicate_policy == value.strip().lower()


def test_unknown_duplicate_policy_is_rejected():
    with pytest.raises(ValidationError):
        Settings(notification_duplicate_policy="merge")


def test_settings_are_read_from_the_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PAYMENT_CURRENCY", "UGX")
    monkeypatch.setenv("NOTIFICATION_DUPLICATE_POLICY", "ignore")
    monkeypatch.setenv("SUBSCRIBE_EXTENDED_EVENTS", "true")

    settings = get_settings()

    assert settings.payment_currency == "UGX"
    assert settings.notification_duplicate_policy == "ignore"
    assert settings.subscribe_extended_events is True
    assert get_settings() is settings


def test_offset_timezones_are_supported(monkeypatch: pytest.MonkeyPatch):
    class DummySettings:
        app_timezone = "UTC+03:00"

    monkeypatch.setattr(datetime_module, "get_settings", lambda: DummySettings())

    assert datetime_module.get_app_timezone() == timezone(timedelta(hours=3))


def test_unknown_timezone_falls_back_to_utc(monkeypatch: pytest.MonkeyPatch):
    class DummySettings:
        app_timezone = "Mars/Olympus"

    monkeypatch.setattr(datetime_module, "get_settings", lambda: DummySettings())

    assert datetime_module.get_app_timezone() == timezone.utc


@pytest.mark.parametrize("value", [None, "", "yesterday", True, {"at": 1}])
def test_unparseable_timestamps_return_none(value):
    assert parse_event_timestamp(value) is None


def test_naive_timestamps_take_the_app_timezone():
    parsed = parse_event_timestamp("2024-01-01T12:00:00")

    assert parsed == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


def test_settings_module_exports():
    assert set(config_module.DUPLICATE_POLICIES) == {"allow", "replace", "ignore"}
