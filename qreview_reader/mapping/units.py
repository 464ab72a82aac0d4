from __future__ import annotations

from qreview_reader.models.activity import UnitSystem
from qreview_reader.models.summary import MeasurementSummary


CELSIUS = "degC"

METRIC = UnitSystem(distance="m", area="m^2", velocity="m/s", discharge="m^3/s")
IMPERIAL = UnitSystem(distance="ft", area="ft^2", velocity="ft/s", discharge="ft^3/s")


def unit_system_for(summary: MeasurementSummary) -> UnitSystem:
    """Anything other than 'Metric' in the Units field is treated as imperial."""
    return METRIC if summary.is_metric else IMPERIAL
