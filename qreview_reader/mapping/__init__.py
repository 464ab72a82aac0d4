"""Mapping package - parsed summary to field-data store entities.

Design principle:
  - Ingest produces a validated MeasurementSummary and knows nothing about the store.
  - Mapping consumes it: unit systems, location identifier, visit period, discharge
    activity, verticals and readings.
"""

from .field_visit import map_discharge_activity, map_field_visit, map_meter_calibration, map_readings
from .location import location_identifier
from .plugin import ParseFileResult, parse_file
from .units import IMPERIAL, METRIC, unit_system_for

__all__ = [
    "IMPERIAL",
    "METRIC",
    "ParseFileResult",
    "location_identifier",
    "map_discharge_activity",
    "map_field_visit",
    "map_meter_calibration",
    "map_readings",
    "parse_file",
    "unit_system_for",
]
