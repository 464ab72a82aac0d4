"""Map parsed verticals onto point-velocity observations.

QReview reports, for each vertical, how many points were sampled. The point count
decides the velocity-observation method and the relative depths (percent of the
vertical's depth) at which the mean velocity is reported.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, tzinfo
from typing import Dict, List, Optional, Tuple

from qreview_reader.exceptions import QReviewMappingError
from qreview_reader.models.activity import (
    MappedVertical,
    MeterCalibration,
    ObservationMethod,
    Segment,
    VelocityDepthObservation,
    VelocityObservation,
)
from qreview_reader.models.summary import MeasurementSummary, Vertical


DEFAULT_OBSERVATION_SECONDS = 20.0

OBSERVATION_TYPES: Dict[int, Tuple[ObservationMethod, Tuple[int, ...]]] = {
    1: ("OneAtPointSix", (60,)),
    2: ("OneAtPointTwoAndPointEight", (20, 80)),
    3: ("OneAtPointTwoPointSixAndPointEight", (20, 60, 80)),
}


def _segment(v: Vertical) -> Segment:
    width = 0.0
    if v.area is not None and v.depth:
        width = v.area / v.depth
    return Segment(
        area=v.area or 0.0,
        discharge=v.discharge or 0.0,
        velocity=v.mean_velocity or 0.0,
        width=width,
        total_discharge_portion=v.discharge_portion or 0.0,
    )


def _velocity_observation(v: Vertical, calibration: MeterCalibration, seconds: float) -> VelocityObservation:
    if v.points not in OBSERVATION_TYPES:
        raise QReviewMappingError(f"A point count of {v.points} is not supported (vertical {v.number})")
    method, percentages = OBSERVATION_TYPES[v.points]
    velocity = v.mean_velocity or 0.0
    depth = v.depth or 0.0
    obs = VelocityObservation(method=method, mean_velocity=velocity, meter_calibration=calibration)
    for pct in percentages:
        obs.observations.append(
            VelocityDepthObservation(depth=depth * pct / 100.0, observation_interval=seconds, velocity=velocity)
        )
    return obs


def map_vertical(
    v: Vertical,
    calibration: MeterCalibration,
    observation_seconds: float = DEFAULT_OBSERVATION_SECONDS,
    tz: Optional[tzinfo] = None,
) -> MappedVertical:
    t: Optional[datetime] = v.time
    if t is not None and tz is not None:
        t = t.replace(tzinfo=tz)
    return MappedVertical(
        sequence_number=v.number,
        tagline_position=v.position,
        measurement_time=t,
        effective_depth=v.depth,
        segment=_segment(v),
        velocity_observation=_velocity_observation(v, calibration, observation_seconds),
        comments="\n".join(v.warnings),
    )


def map_verticals(
    summary: MeasurementSummary,
    calibration: MeterCalibration,
    tz: Optional[tzinfo] = None,
) -> List[MappedVertical]:
    if not summary.verticals:
        return []
    seconds = summary.averaging_time if summary.averaging_time is not None else DEFAULT_OBSERVATION_SECONDS
    return [map_vertical(v, calibration, seconds, tz) for v in summary.verticals]


def dominant_observation_method(verticals: List[MappedVertical]) -> Optional[ObservationMethod]:
    """Most frequent method; ties go to the method seen first."""
    counts = Counter(v.velocity_observation.method for v in verticals)
    if not counts:
        return None
    return counts.most_common(1)[0][0]
