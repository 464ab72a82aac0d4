"""Tests for the mapping layer and the file-level entry point."""

from __future__ import annotations

import io
from datetime import datetime, timedelta

import pytest

from qreview_reader.exceptions import QReviewMappingError
from qreview_reader.mapping.field_visit import (
    map_discharge_activity,
    map_field_visit,
    map_meter_calibration,
    map_readings,
)
from qreview_reader.mapping.location import location_identifier
from qreview_reader.mapping.plugin import parse_file
from qreview_reader.mapping.units import IMPERIAL, METRIC, unit_system_for
from qreview_reader.mapping.verticals import map_verticals
from qreview_reader.models.config import ReaderConfig
from qreview_reader.models.summary import MeasurementSummary, Vertical


def _summary(**overrides) -> MeasurementSummary:
    s = MeasurementSummary(
        station_name="0512_Upper Bridge",
        measurement_number="17",
        start_time=datetime(2023, 6, 1, 8, 0),
        end_time=datetime(2023, 6, 1, 9, 15),
        operator="J. Doe",
        instrument="MF pro",
        serial_number="123456",
        software_version="1.2.3",
        units="Metric",
        discharge_measurement_method="MID",
        start_edge="right",
        averaging_time=45.0,
        gage_start=1.2,
        gage_end=1.22,
        discharge=2.142,
        mean_temp=14.5,
        quality="Good",
        uncertainty_percentage=5.0,
        notes="Windy morning",
    )
    s.verticals.extend([
        Vertical(number=1, time=datetime(2023, 6, 1, 7, 55), points=3, position=1.5, depth=1.0,
                 mean_velocity=0.4, area=1.4, discharge=0.56, discharge_portion=26.2,
                 quality_issues=["Velocity angle too high"]),
        Vertical(number=2, time=datetime(2023, 6, 1, 8, 5), points=1, position=3.0, depth=2.0,
                 mean_velocity=0.5, area=1.5, discharge=0.75, discharge_portion=35.0,
                 warnings=["Low SNR", "Spike"]),
        Vertical(number=3, time=datetime(2023, 6, 1, 8, 10), points=1, position=4.5, depth=0.9),
    ])
    for key, value in overrides.items():
        setattr(s, key, value)
    return s


# -----------------------------------------------------------------------
# Units and location
# -----------------------------------------------------------------------


def test_unit_system_follows_units_text() -> None:
    assert unit_system_for(MeasurementSummary(units="metric")) is METRIC
    assert unit_system_for(MeasurementSummary(units="English")) is IMPERIAL
    assert unit_system_for(MeasurementSummary()) is IMPERIAL


@pytest.mark.parametrize(
    "name, sep, digits, expected",
    [
        ("0512_Upper Bridge", "_", 6, "000512"),
        ("0512_Upper Bridge", "_", 0, "0512"),
        ("RIVER-01", "_", 6, "RIVER-01"),
        ("RIVER-01", "-", 0, "RIVER"),
        ("  ", "_", 0, None),
        (None, "_", 0, None),
    ],
)
def test_location_identifier(name, sep, digits, expected) -> None:
    assert location_identifier(name, sep, digits) == expected


# -----------------------------------------------------------------------
# Field visit / activity
# -----------------------------------------------------------------------


def test_visit_spans_all_timestamps_with_offset() -> None:
    visit = map_field_visit(_summary(), timedelta(hours=-7), ReaderConfig(location_identifier_zero_padded_digits=6))
    assert visit.start == datetime(2023, 6, 1, 7, 55).replace(tzinfo=visit.start.tzinfo)
    assert visit.end.hour == 9 and visit.end.minute == 15
    assert visit.start.utcoffset() == timedelta(hours=-7)
    assert visit.location_identifier == "000512"


def test_visit_without_timestamps_fails() -> None:
    with pytest.raises(QReviewMappingError):
        map_field_visit(MeasurementSummary())


def test_discharge_activity() -> None:
    s = _summary()
    visit = map_field_visit(s)
    activity = map_discharge_activity(s, visit, ReaderConfig(grades={"good": "GOOD"}))

    assert activity.discharge == pytest.approx(2.142)
    assert activity.unit_system is METRIC
    assert activity.party == "J. Doe"
    assert activity.comments == "Windy morning"
    assert activity.measurement_id == "17"
    assert activity.active_uncertainty_type == "Quantitative"
    assert activity.quality_assurance_comments == "Vertical 1 at 1.5 m: Velocity angle too high"
    assert activity.grade_name == "GOOD"
    assert activity.grade_code is None
    assert [g.value for g in activity.gage_heights] == [1.2, 1.22]
    assert activity.gage_heights[0].time == visit.start

    section = activity.sections[0]
    assert section.discharge_method == "MidSection"
    assert section.start_point == "RightEdgeOfWater"
    assert section.number_of_verticals is None
    assert len(section.verticals) == 3
    assert section.velocity_observation_method == "OneAtPointSix"


def test_numeric_grade_and_ignored_measurement_id() -> None:
    s = _summary(quality="Fair", uncertainty_percentage=None, discharge_measurement_method="Mean")
    cfg = ReaderConfig(grades={"Fair": "20"}, ignore_measurement_id=True)
    activity = map_discharge_activity(s, map_field_visit(s), cfg)
    assert activity.grade_code == 20
    assert activity.measurement_id is None
    assert activity.active_uncertainty_type == "None"
    assert activity.sections[0].discharge_method == "MeanSection"


def test_grade_untouched_without_configured_grades() -> None:
    s = _summary()
    activity = map_discharge_activity(s, map_field_visit(s), ReaderConfig())
    assert activity.grade_code is None and activity.grade_name is None


def test_missing_discharge_fails() -> None:
    s = _summary(discharge=None)
    with pytest.raises(QReviewMappingError, match="total discharge"):
        map_discharge_activity(s, map_field_visit(s))


def test_meter_calibration() -> None:
    cal = map_meter_calibration(_summary())
    assert cal.manufacturer == "OTT"
    assert cal.configuration == "OTT/MF pro/123456"
    assert cal.meter_type == "Adcp"


def test_vertical_observations() -> None:
    s = _summary()
    cal = map_meter_calibration(s)
    verticals = map_verticals(s, cal)

    v1 = verticals[0]
    assert v1.velocity_observation.method == "OneAtPointTwoPointSixAndPointEight"
    assert [o.depth for o in v1.velocity_observation.observations] == pytest.approx([0.2, 0.6, 0.8])
    assert all(o.observation_interval == 45.0 for o in v1.velocity_observation.observations)
    assert v1.segment.width == pytest.approx(1.4)

    v2 = verticals[1]
    assert v2.comments == "Low SNR\nSpike"

    v3 = verticals[2]
    assert v3.segment.width == 0.0
    assert v3.segment.discharge == 0.0


def test_default_observation_interval() -> None:
    s = _summary(averaging_time=None)
    verticals = map_verticals(s, map_meter_calibration(s))
    assert verticals[0].velocity_observation.observations[0].observation_interval == 20.0


def test_unsupported_point_count() -> None:
    s = _summary()
    s.verticals[0].points = 5
    with pytest.raises(QReviewMappingError, match="point count of 5"):
        map_verticals(s, map_meter_calibration(s))


def test_readings_always_celsius() -> None:
    s = _summary(units="English")
    readings = map_readings(s)
    assert len(readings) == 1
    assert readings[0].unit == "degC"
    assert readings[0].value == 14.5
    assert map_readings(_summary(mean_temp=None)) == []


# -----------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------

_EXPORT = [
    "Discharge Measurement Summary",
    "0512_Upper Bridge",
    "Station Nr.\t0512\tMeasurement Nr\t17",
    "Date/Time\t2023-06-01 08:00:00 > 09:15:00\tOperator:\tJ. Doe",
    "Units\tMetric\tDischarge(m³/s)\t2.142 +/- 0.107",
    "Quality\tGood",
    "Time Series",
    "08:30:00\t1\t1\t2.0\t0.5\t0.3\t0.4\t0.12\t100",
]


def _stream(lines):
    return io.BytesIO("\r\n".join(lines).encode("cp1252"))


def test_parse_file_valid() -> None:
    result = parse_file(_stream(_EXPORT), {"LocationIdentifierZeroPaddedDigits": "6", "Grades": "Good:GOOD"})
    assert result.ok
    assert result.visit.location_identifier == "000512"
    assert result.activity.grade_name == "GOOD"
    assert len(result.activity.sections[0].verticals) == 1
    assert result.readings == ()


def test_parse_file_not_recognized() -> None:
    result = parse_file(_stream(["Notes", "just a note"]))
    assert result.status == "CannotParse"
    assert result.summary is None


def test_parse_file_malformed_cannot_parse() -> None:
    lines = list(_EXPORT)
    lines[-1] = "08:30:00\t1\t1\tx\t0.5\t0.3\t0.4\t0.12\t100"
    result = parse_file(_stream(lines))
    assert result.status == "CannotParse"


def test_parse_file_missing_station_name() -> None:
    lines = [line for line in _EXPORT if line != "0512_Upper Bridge"]
    result = parse_file(_stream(lines))
    assert result.status == "SuccessfullyParsedButDataInvalid"
    assert result.message == "Missing station name"

    result = parse_file(_stream(lines), location_identifier="LOC1")
    assert result.ok
    assert result.visit.location_identifier == "LOC1"


def test_parse_file_mapping_error_is_invalid() -> None:
    lines = list(_EXPORT)
    lines[-1] = "08:30:00\t1\t4\t2.0\t0.5\t0.3\t0.4\t0.12\t100"
    result = parse_file(_stream(lines))
    assert result.status == "SuccessfullyParsedButDataInvalid"
    assert "point count of 4" in result.message


def test_parse_file_unknown_encoding_cannot_parse() -> None:
    stream = _stream(_EXPORT)
    result = parse_file(stream, {"Encoding": "no-such-codepage"}, location_identifier="L")
    assert result.status == "CannotParse"
    assert stream.closed
