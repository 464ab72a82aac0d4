"""File-level entry point with the three outcomes a field-data host expects.

- CannotParse: not a QReview export, the export is malformed, or it cannot be decoded.
- SuccessfullyParsedButDataInvalid: a QReview export whose content cannot be mapped.
- SuccessfullyParsedAndDataValid: summary, visit, discharge activity and readings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import timedelta
from pathlib import Path
from typing import BinaryIO, Literal, Mapping, Optional, Tuple, Union

from qreview_reader.exceptions import QReviewError
from qreview_reader.ingest.tsv_reader import QReviewTsvReader
from qreview_reader.mapping.field_visit import map_discharge_activity, map_field_visit, map_readings
from qreview_reader.models.activity import DischargeActivity, FieldVisit, Reading
from qreview_reader.models.config import ReaderConfig
from qreview_reader.models.summary import MeasurementSummary

logger = logging.getLogger(__name__)

ParseStatus = Literal[
    "CannotParse",
    "SuccessfullyParsedButDataInvalid",
    "SuccessfullyParsedAndDataValid",
]


@dataclass(frozen=True)
class ParseFileResult:
    status: ParseStatus
    message: Optional[str] = None
    summary: Optional[MeasurementSummary] = None
    visit: Optional[FieldVisit] = None
    activity: Optional[DischargeActivity] = None
    readings: Tuple[Reading, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status == "SuccessfullyParsedAndDataValid"


def _load_summary(source: Union[str, Path, BinaryIO], config: ReaderConfig) -> Optional[MeasurementSummary]:
    reader = QReviewTsvReader(config)
    try:
        if isinstance(source, (str, Path)):
            return reader.read(source)
        return reader.load(source)
    except QReviewError as e:
        logger.error(str(e))
        return None


def parse_file(
    source: Union[str, Path, BinaryIO],
    settings: Optional[Mapping[str, str]] = None,
    *,
    config: Optional[ReaderConfig] = None,
    location_identifier: Optional[str] = None,
    utc_offset: timedelta = timedelta(0),
) -> ParseFileResult:
    """
    Read and map one QReview export.

    Parameters
    ----------
    source : path or binary stream
        The export. Streams are closed once read.
    settings : mapping of str, optional
        Host plugin settings, see :meth:`ReaderConfig.from_settings`. Ignored when
        'config' is given.
    location_identifier : str, optional
        Target location chosen by the host. When omitted the location is derived from
        the station name, which must then be present.
    utc_offset : timedelta
        UTC offset of the location; attached to every mapped timestamp.
    """
    config = config or ReaderConfig.from_settings(settings)

    summary = _load_summary(source, config)
    if summary is None:
        return ParseFileResult(status="CannotParse")

    if location_identifier is None and not summary.station_name:
        return ParseFileResult(status="SuccessfullyParsedButDataInvalid", message="Missing station name", summary=summary)

    try:
        visit = map_field_visit(summary, utc_offset, config)
        if location_identifier is not None:
            visit = replace(visit, location_identifier=location_identifier)
        activity = map_discharge_activity(summary, visit, config)
        readings = tuple(map_readings(summary, visit))
    except QReviewError as e:
        logger.error(str(e))
        return ParseFileResult(status="SuccessfullyParsedButDataInvalid", message=str(e), summary=summary)

    logger.info("Successfully parsed one visit '%s - %s' for location '%s'",
                visit.start, visit.end, visit.location_identifier)
    return ParseFileResult(
        status="SuccessfullyParsedAndDataValid",
        summary=summary,
        visit=visit,
        activity=activity,
        readings=readings,
    )
