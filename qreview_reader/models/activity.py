from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Literal, Optional


DischargeMethod = Literal["MidSection", "MeanSection"]
StartPoint = Literal["LeftEdgeOfWater", "RightEdgeOfWater"]
ObservationMethod = Literal[
    "OneAtPointSix",
    "OneAtPointTwoAndPointEight",
    "OneAtPointTwoPointSixAndPointEight",
]
UncertaintyType = Literal["None", "Quantitative"]


@dataclass(frozen=True)
class UnitSystem:
    distance: str
    area: str
    velocity: str
    discharge: str


@dataclass(frozen=True)
class FieldVisit:
    """Visit period; both ends carry the location's UTC offset."""
    start: datetime
    end: datetime
    location_identifier: Optional[str] = None


@dataclass(frozen=True)
class GageHeightMeasurement:
    value: float
    unit: str
    time: datetime


@dataclass(frozen=True)
class MeterCalibration:
    manufacturer: str
    model: Optional[str]
    serial_number: Optional[str]
    firmware_version: Optional[str]
    software_version: Optional[str]
    meter_type: str
    configuration: str


@dataclass(frozen=True)
class VelocityDepthObservation:
    depth: float
    observation_interval: float
    velocity: float
    revolution_count: int = 0


@dataclass
class VelocityObservation:
    method: ObservationMethod
    mean_velocity: float
    meter_calibration: MeterCalibration
    observations: List[VelocityDepthObservation] = field(default_factory=list)
    deployment_method: str = "Unspecified"


@dataclass(frozen=True)
class Segment:
    area: float
    discharge: float
    velocity: float
    width: float
    total_discharge_portion: float


@dataclass
class MappedVertical:
    """One vertical as handed to the external data store."""
    sequence_number: int
    tagline_position: Optional[float]
    measurement_time: Optional[datetime]
    effective_depth: Optional[float]
    segment: Segment
    velocity_observation: VelocityObservation
    comments: str = ""
    vertical_type: str = "MidRiver"
    flow_direction: str = "Normal"
    measurement_condition: str = "OpenWater"


@dataclass
class DischargeSection:
    start: datetime
    end: datetime
    discharge: float
    unit_system: UnitSystem
    discharge_method: DischargeMethod
    start_point: StartPoint
    meter_calibration: MeterCalibration
    party: Optional[str] = None
    comments: Optional[str] = None
    area: Optional[float] = None
    width: Optional[float] = None
    mean_velocity: Optional[float] = None
    number_of_verticals: Optional[int] = None
    velocity_observation_method: Optional[ObservationMethod] = None
    deployment_method: str = "Unspecified"
    verticals: List[MappedVertical] = field(default_factory=list)


@dataclass
class DischargeActivity:
    start: datetime
    end: datetime
    discharge: float
    unit_system: UnitSystem
    party: Optional[str] = None
    comments: Optional[str] = None
    measurement_id: Optional[str] = None
    quantitative_uncertainty: Optional[float] = None
    active_uncertainty_type: UncertaintyType = "None"
    quality_assurance_comments: str = ""
    grade_code: Optional[int] = None
    grade_name: Optional[str] = None
    gage_heights: List[GageHeightMeasurement] = field(default_factory=list)
    sections: List[DischargeSection] = field(default_factory=list)


@dataclass(frozen=True)
class Reading:
    parameter: str
    unit: str
    value: float
    time: Optional[datetime] = None
