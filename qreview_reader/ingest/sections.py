"""
Section and field tables of the QReview tab-delimited export.

A QReview export is a flat run of lines split into named sections. A section starts
with a line holding exactly one field whose text is one of SECTION_HEADERS.
Key/value sections (Summary, Uncertainty) are described by FieldRule tables: the
field name (matched case-insensitively) selects the attribute of MeasurementSummary
to write and the extractor used to read the neighbouring value field.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Literal, Optional, Tuple


class SectionType(Enum):
    UNKNOWN = "unknown"
    SUMMARY = "summary"
    UNCERTAINTY = "uncertainty"
    DEPTH_SENSOR = "depth_sensor"
    QUALITY_SETTINGS = "quality_settings"
    FIELD_QUALITY_CHECK = "field_quality_check"
    NOTES = "notes"
    INSTRUMENT_WARNINGS = "instrument_warnings"
    QUALITY_ISSUES = "quality_issues"
    TIME_SERIES = "time_series"


def _folded(d: Dict[str, SectionType]) -> Dict[str, SectionType]:
    return {k.casefold(): v for k, v in d.items()}


SECTION_HEADERS: Dict[str, SectionType] = _folded({
    "Discharge Measurement Summary": SectionType.SUMMARY,
    "Uncertainty According to ISO 748": SectionType.UNCERTAINTY,
    "Depth Sensor": SectionType.DEPTH_SENSOR,
    "Quality Threshold Settings": SectionType.QUALITY_SETTINGS,
    "Field Quality Check": SectionType.FIELD_QUALITY_CHECK,
    "Notes": SectionType.NOTES,
    "ADC Warnings": SectionType.INSTRUMENT_WARNINGS,
    "Quality Issues": SectionType.QUALITY_ISSUES,
    "Time Series": SectionType.TIME_SERIES,
})


def match_section_header(text: str) -> Optional[SectionType]:
    return SECTION_HEADERS.get(text.casefold())


Extractor = Literal[
    "text",
    "float",
    "int",
    "discharge",
    "averaging_time",
    "percentage",
    "start_end_time",
]


@dataclass(frozen=True)
class FieldRule:
    """
    target: MeasurementSummary attribute written by this field
            ('start_end_time' rules write start_time and end_time together).
    extractor: how the raw value field is read.
    """
    target: str
    extractor: Extractor


def _rules(d: Dict[str, Tuple[str, Extractor]]) -> Dict[str, FieldRule]:
    return {name.casefold(): FieldRule(target, kind) for name, (target, kind) in d.items()}


SUMMARY_FIELDS: Dict[str, FieldRule] = _rules({
    "Station Nr.": ("station_number", "text"),
    "Measurement Nr": ("measurement_number", "text"),
    "Date/Time": ("start_time", "start_end_time"),
    "Operator:": ("operator", "text"),
    "Instrument": ("instrument", "text"),
    "Serial Nr.": ("serial_number", "text"),
    "Software version:": ("software_version", "text"),
    "Units": ("units", "text"),
    "Measurement method:": ("measurement_method", "text"),
    "Discharge measurement method:": ("discharge_measurement_method", "text"),
    "Averaging time:": ("averaging_time", "averaging_time"),
    "Start edge": ("start_edge", "text"),
    "Mean depth(m)": ("mean_depth", "float"),
    "Mean depth(ft)": ("mean_depth", "float"),
    "Rated Q(m³/s)": ("rated_discharge", "float"),
    "Rated Q(ft³/s)": ("rated_discharge", "float"),
    "Nr. of verticals": ("number_of_verticals", "int"),
    "Mean Velocity(m/s)": ("mean_velocity", "float"),
    "Mean Velocity(ft/s)": ("mean_velocity", "float"),
    "Gage Start:": ("gage_start", "float"),
    "Width(m)": ("width", "float"),
    "Width(ft)": ("width", "float"),
    "Mean SNR (dB)": ("mean_snr", "float"),
    "Gage End:": ("gage_end", "float"),
    "Area(m²)": ("area", "float"),
    "Area(ft²)": ("area", "float"),
    "Discharge(m³/s)": ("discharge", "discharge"),
    "Discharge(ft³/s)": ("discharge", "discharge"),
    # Reported in degC whatever the unit system.
    "Mean Temp. (°C)": ("mean_temp", "float"),
    "Quality": ("quality", "text"),
})

UNCERTAINTY_FIELDS: Dict[str, FieldRule] = _rules({
    "Overall": ("uncertainty_percentage", "percentage"),
})

# Sub-headers QReview writes inside the Notes section.
NOTE_MARKERS = frozenset(s.casefold() for s in ("_ General _", "_ Verticals _"))
