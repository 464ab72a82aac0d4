"""Tests for ReaderConfig loading and serialization."""

from __future__ import annotations

import dataclasses
import json

import pytest

from qreview_reader.models.config import ReaderConfig


def test_defaults() -> None:
    cfg = ReaderConfig()
    assert cfg.date_time_formats == ()
    assert cfg.time_formats == ()
    assert cfg.grades == {}
    assert cfg.encoding == "cp1252"
    assert cfg.ignore_measurement_id is False


def test_from_settings_lists_and_maps() -> None:
    cfg = ReaderConfig.from_settings({
        "DateTimeFormats": "%d.%m.%Y %H:%M:%S,, ,%Y-%m-%d %H:%M:%S",
        "TimeFormats": "%H:%M:%S",
        "Grades": "Good:GOOD,Fair:20,broken entry",
        "LocationIdentifierSeparator": "-",
        "LocationIdentifierZeroPaddedDigits": "6",
        "IgnoreMeasurementId": "True",
    })
    assert cfg.date_time_formats == ("%d.%m.%Y %H:%M:%S", "%Y-%m-%d %H:%M:%S")
    assert cfg.time_formats == ("%H:%M:%S",)
    assert cfg.grades == {"Good": "GOOD", "Fair": "20"}
    assert cfg.location_identifier_separator == "-"
    assert cfg.location_identifier_zero_padded_digits == 6
    assert cfg.ignore_measurement_id is True


def test_from_settings_bad_values_keep_defaults() -> None:
    cfg = ReaderConfig.from_settings({
        "LocationIdentifierZeroPaddedDigits": "six",
        "IgnoreMeasurementId": "maybe",
        "DateTimeFormats": "  ",
    })
    assert cfg.location_identifier_zero_padded_digits == 0
    assert cfg.ignore_measurement_id is False
    assert cfg.date_time_formats == ()


def test_from_settings_none() -> None:
    assert ReaderConfig.from_settings(None) == ReaderConfig()


def test_grade_lookup_ignores_case() -> None:
    cfg = ReaderConfig(grades={"Good": "GOOD"})
    assert cfg.lookup_grade("good") == "GOOD"
    assert cfg.lookup_grade("Poor") is None


def test_dict_roundtrip_through_json() -> None:
    cfg = ReaderConfig(date_time_formats=("%Y",), grades={"A": "1"}, ignore_measurement_id=True)
    restored = ReaderConfig.from_dict(json.loads(json.dumps(cfg.to_dict())))
    assert restored == cfg


def test_config_is_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        ReaderConfig().encoding = "utf-8"  # type: ignore[misc]
