"""
Field-visit mapping
===================

Turns a parsed :class:`~qreview_reader.models.summary.MeasurementSummary` into the
entities an external field-data store expects: one field visit, one discharge
activity holding one manual-gauging discharge section, and water-temperature readings.

The summary's local times are anchored to the location's UTC offset here; the
reader itself never attaches a time zone.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from qreview_reader.exceptions import QReviewMappingError
from qreview_reader.mapping.location import location_identifier
from qreview_reader.mapping.units import CELSIUS, unit_system_for
from qreview_reader.mapping.verticals import dominant_observation_method, map_verticals
from qreview_reader.models.activity import (
    DischargeActivity,
    DischargeSection,
    FieldVisit,
    GageHeightMeasurement,
    MeterCalibration,
    Reading,
    UnitSystem,
)
from qreview_reader.models.config import ReaderConfig
from qreview_reader.models.summary import MeasurementSummary

logger = logging.getLogger(__name__)

MANUFACTURER = "OTT"
WATER_TEMP = "TW"


def map_field_visit(
    summary: MeasurementSummary,
    utc_offset: timedelta = timedelta(0),
    config: Optional[ReaderConfig] = None,
) -> FieldVisit:
    """Visit spans the earliest to the latest of start, end and every vertical time."""
    config = config or ReaderConfig()
    tz = timezone(utc_offset)
    times = [summary.start_time, summary.end_time] + [v.time for v in summary.verticals]
    times = sorted(t for t in times if t is not None)
    if not times:
        raise QReviewMappingError("Can't parse any timestamps")
    return FieldVisit(
        start=times[0].replace(tzinfo=tz),
        end=times[-1].replace(tzinfo=tz),
        location_identifier=location_identifier(
            summary.station_name,
            config.location_identifier_separator,
            config.location_identifier_zero_padded_digits,
        ),
    )


def map_meter_calibration(summary: MeasurementSummary) -> MeterCalibration:
    return MeterCalibration(
        manufacturer=MANUFACTURER,
        model=summary.instrument,
        serial_number=summary.serial_number,
        firmware_version=summary.software_version,
        software_version=summary.software_version,
        meter_type="Adcp",
        configuration=f"{MANUFACTURER}/{summary.instrument}/{summary.serial_number}",
    )


def _quality_assurance_comments(summary: MeasurementSummary, units: UnitSystem) -> str:
    lines = [
        f"Vertical {v.number} at {v.position} {units.distance}: {issue}"
        for v in summary.verticals
        for issue in v.quality_issues
    ]
    return "\n".join(lines)


def _apply_grade(activity: DischargeActivity, summary: MeasurementSummary, config: ReaderConfig) -> None:
    if not summary.quality or not config.grades:
        return
    grade_text = config.lookup_grade(summary.quality) or summary.quality
    try:
        activity.grade_code = int(grade_text)
    except ValueError:
        activity.grade_name = grade_text


def _map_section(
    summary: MeasurementSummary,
    activity: DischargeActivity,
    units: UnitSystem,
) -> DischargeSection:
    calibration = map_meter_calibration(summary)
    method = (summary.discharge_measurement_method or "").casefold()
    edge = (summary.start_edge or "").casefold()
    section = DischargeSection(
        start=activity.start,
        end=activity.end,
        discharge=activity.discharge,
        unit_system=units,
        discharge_method="MidSection" if method == "mid" else "MeanSection",
        start_point="RightEdgeOfWater" if edge == "right" else "LeftEdgeOfWater",
        meter_calibration=calibration,
        party=activity.party,
        comments=activity.comments,
        area=summary.area,
        width=summary.width,
        mean_velocity=summary.mean_velocity,
        # Only reported when no verticals are available to count.
        number_of_verticals=None if summary.verticals else summary.number_of_verticals,
    )
    section.verticals = map_verticals(summary, calibration, activity.start.tzinfo)
    section.velocity_observation_method = dominant_observation_method(section.verticals)
    return section


def map_discharge_activity(
    summary: MeasurementSummary,
    visit: FieldVisit,
    config: Optional[ReaderConfig] = None,
) -> DischargeActivity:
    config = config or ReaderConfig()
    if summary.discharge is None:
        raise QReviewMappingError("No total discharge amount provided")

    units = unit_system_for(summary)
    activity = DischargeActivity(
        start=visit.start,
        end=visit.end,
        discharge=summary.discharge,
        unit_system=units,
        party=summary.operator,
        comments=summary.notes,
        measurement_id=None if config.ignore_measurement_id else summary.measurement_number,
        quantitative_uncertainty=summary.uncertainty_percentage,
        active_uncertainty_type="Quantitative" if summary.uncertainty_percentage is not None else "None",
        quality_assurance_comments=_quality_assurance_comments(summary, units),
    )
    _apply_grade(activity, summary, config)

    for stage, when in ((summary.gage_start, visit.start), (summary.gage_end, visit.end)):
        if stage is not None:
            activity.gage_heights.append(GageHeightMeasurement(value=stage, unit=units.distance, time=when))

    activity.sections.append(_map_section(summary, activity, units))
    logger.debug("mapped discharge activity %s - %s with %d verticals",
                 visit.start, visit.end, len(activity.sections[0].verticals))
    return activity


def map_readings(summary: MeasurementSummary, visit: Optional[FieldVisit] = None) -> List[Reading]:
    """Mean water temperature. QReview always reports it in degC, metric or not."""
    if summary.mean_temp is None:
        return []
    when: Optional[datetime] = visit.start if visit is not None else None
    return [Reading(parameter=WATER_TEMP, unit=CELSIUS, value=summary.mean_temp, time=when)]
