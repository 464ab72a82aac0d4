from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple


@dataclass
class Vertical:
    """
    One sampling station across the channel width.

    Notes
    - 'number' is the reconciliation key; it never changes once assigned.
    - A Vertical may exist with only 'number' set (created by a warning or quality-issue
      line). It only becomes meaningful once the time-series section fills it in.
    - quality_issues / warnings keep first-appearance order and never hold duplicates.
    """
    number: int
    time: Optional[datetime] = None
    points: int = 0
    position: Optional[float] = None
    depth: Optional[float] = None
    mean_velocity: Optional[float] = None
    area: Optional[float] = None
    discharge: Optional[float] = None
    discharge_portion: Optional[float] = None
    quality_issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_placeholder(self) -> bool:
        """True when the time-series section never described this vertical."""
        return self.points == 0 and self.position is None

    def add_quality_issue(self, issue: str) -> None:
        if issue not in self.quality_issues:
            self.quality_issues.append(issue)

    def add_warning(self, warning: str) -> None:
        if warning not in self.warnings:
            self.warnings.append(warning)


@dataclass
class MeasurementSummary:
    """
    Reconstructed record of one QReview discharge measurement session.

    Every scalar attribute stays None until a matching line is parsed; absent and zero
    are distinct (e.g. an unreported mean velocity vs. a measured still-water velocity).

    The unit system is not stored: 'is_metric' is derived from the raw 'units' text.
    Mean temperature is always reported by the instrument in degrees Celsius.
    """
    station_name: Optional[str] = None
    station_number: Optional[str] = None
    measurement_number: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    operator: Optional[str] = None
    instrument: Optional[str] = None
    serial_number: Optional[str] = None
    software_version: Optional[str] = None
    units: Optional[str] = None
    measurement_method: Optional[str] = None
    discharge_measurement_method: Optional[str] = None
    averaging_time: Optional[float] = None
    start_edge: Optional[str] = None
    mean_depth: Optional[float] = None
    rated_discharge: Optional[float] = None
    number_of_verticals: Optional[int] = None
    mean_velocity: Optional[float] = None
    gage_start: Optional[float] = None
    gage_end: Optional[float] = None
    width: Optional[float] = None
    mean_snr: Optional[float] = None
    area: Optional[float] = None
    discharge: Optional[float] = None
    mean_temp: Optional[float] = None
    quality: Optional[str] = None
    uncertainty_percentage: Optional[float] = None
    notes: Optional[str] = None
    verticals: List[Vertical] = field(default_factory=list)
    warnings: Tuple[str, ...] = ()

    @property
    def is_metric(self) -> bool:
        return (self.units or "").strip().casefold() == "metric"

    def add_note(self, note: str) -> None:
        if not self.notes:
            self.notes = note
        else:
            self.notes += "\n" + note
