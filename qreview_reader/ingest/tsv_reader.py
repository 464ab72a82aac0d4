from __future__ import annotations

import codecs
import io
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, Optional, Tuple

from qreview_reader.exceptions import QReviewError, QReviewParseError
from qreview_reader.ingest import extractors as ex
from qreview_reader.ingest.sections import (
    NOTE_MARKERS,
    SUMMARY_FIELDS,
    UNCERTAINTY_FIELDS,
    FieldRule,
    SectionType,
    match_section_header,
)
from qreview_reader.ingest.verticals import VerticalReconciler
from qreview_reader.models.config import ReaderConfig
from qreview_reader.models.summary import MeasurementSummary

logger = logging.getLogger(__name__)


def _undefined_bytes_passthrough(exc: UnicodeError):
    # cp1252 leaves 0x81, 0x8D, 0x8F, 0x90 and 0x9D undefined; map them to the
    # same-valued code points so every byte of the export survives decoding.
    if isinstance(exc, UnicodeDecodeError):
        return exc.object[exc.start:exc.end].decode("latin-1"), exc.end
    raise exc


_DECODE_ERRORS = "qreview-passthrough"
codecs.register_error(_DECODE_ERRORS, _undefined_bytes_passthrough)


def split_fields(line: str) -> List[str]:
    """
    Tab-split one physical line. Fields are trimmed, quotes are literal, trailing
    blank fields are dropped (the first field always stays). A blank line gives [].
    """
    if not line.strip():
        return []
    fields = [f.strip() for f in line.rstrip("\r\n").split("\t")]
    while len(fields) > 1 and not fields[-1]:
        fields.pop()
    return fields


@dataclass
class _ParseState:
    """Everything one parse mutates. Never shared between parses."""
    summary: MeasurementSummary
    reconciler: VerticalReconciler
    section: SectionType = SectionType.UNKNOWN
    line_number: int = 0
    fields: List[str] = field(default_factory=list)
    current_vertical: int = 0
    sections_parsed: Dict[SectionType, int] = field(default_factory=dict)
    fields_parsed: int = 0


_Action = Callable[[_ParseState], None]


class QReviewTsvReader:
    """
    STRICT reader for QReview discharge-measurement exports (tab-delimited, Windows-1252).

    Contract:
      - Returns a MeasurementSummary for a recognized file.
      - Returns None when the file is not a QReview export: fewer than 5 recognized
        key/value fields, or fewer than 2 distinct sections with content.
      - Raises QReviewParseError (line number + offending text) on malformed content.
        No partial result is ever returned.
    """

    _MIN_FIELDS = 5
    _MIN_SECTIONS = 2

    _VERTICAL_HEADER = re.compile(r"^\s*Vertical (?P<vertical>\d+) at [0-9.\-+]+\s*:\s*$")
    _QUALITY_ISSUE = re.compile(r"^\s*Vertical (?P<vertical>\d+) at [0-9.\-+]+\s*:\s*(?P<issue>.*)$")

    def __init__(self, config: Optional[ReaderConfig] = None):
        self.config = config or ReaderConfig()
        self._handlers: Dict[SectionType, Tuple[Optional[Dict[str, FieldRule]], Optional[_Action]]] = {
            SectionType.SUMMARY: (SUMMARY_FIELDS, self._parse_summary),
            SectionType.UNCERTAINTY: (UNCERTAINTY_FIELDS, None),
            SectionType.DEPTH_SENSOR: (None, None),
            SectionType.QUALITY_SETTINGS: (None, None),
            SectionType.FIELD_QUALITY_CHECK: (None, None),
            SectionType.NOTES: (None, self._parse_notes),
            SectionType.INSTRUMENT_WARNINGS: (None, self._parse_instrument_warnings),
            SectionType.QUALITY_ISSUES: (None, self._parse_quality_issues),
            SectionType.TIME_SERIES: (None, self._parse_time_series),
        }

    def read(self, path: str | Path) -> Optional[MeasurementSummary]:
        p = Path(path).expanduser().resolve()
        with open(p, "rb") as stream:
            return self.load(stream)

    def load(self, stream: BinaryIO) -> Optional[MeasurementSummary]:
        """Parse a byte stream positioned at the start of the export. The stream is closed on return."""
        try:
            codecs.lookup(self.config.encoding)
        except LookupError:
            stream.close()
            raise QReviewError(f"Unknown encoding '{self.config.encoding}'") from None

        with io.TextIOWrapper(stream, encoding=self.config.encoding, errors=_DECODE_ERRORS) as text:
            summary = MeasurementSummary()
            state = _ParseState(summary=summary, reconciler=VerticalReconciler(summary.verticals))

            for line_number, line in enumerate(text, start=1):
                fields = split_fields(line)
                if not fields:
                    continue
                state.line_number = line_number
                state.fields = fields
                self._dispatch(state)

        notes = state.reconciler.finalize()

        if state.fields_parsed < self._MIN_FIELDS or len(state.sections_parsed) < self._MIN_SECTIONS:
            logger.warning(
                "not a QReview export: %d fields in %d sections",
                state.fields_parsed,
                len(state.sections_parsed),
            )
            return None

        summary.warnings = tuple(notes)
        logger.info(
            "parsed QReview summary for station '%s' with %d verticals",
            summary.station_name,
            len(summary.verticals),
        )
        return summary

    # ------------------------------------------------------------------
    # Section state machine
    # ------------------------------------------------------------------

    def _dispatch(self, state: _ParseState) -> None:
        fields = state.fields
        if len(fields) == 1:
            section = match_section_header(fields[0])
            if section is not None:
                logger.debug("line %d: entering section %s", state.line_number, section.name)
                state.section = section
                return

        handler = self._handlers.get(state.section)
        if handler is None:
            raw = ",".join(fields)
            raise QReviewParseError(
                f"Don't know how to parse line {state.line_number} ({state.section.name}): {raw}",
                state.line_number,
                raw,
            )

        state.sections_parsed[state.section] = state.sections_parsed.get(state.section, 0) + 1

        rules, action = handler
        if rules is not None:
            self._apply_field_rules(state, rules)
        if action is not None:
            action(state)

    def _apply_field_rules(self, state: _ParseState, rules: Dict[str, FieldRule]) -> None:
        fields = state.fields
        if not fields[0]:
            return
        i = 0
        while i < len(fields) - 1:
            rule = rules.get(fields[i].casefold())
            if rule is None:
                i += 1
                continue
            self._write_field(state, rule, fields[i + 1])
            state.fields_parsed += 1
            i += 2

    def _write_field(self, state: _ParseState, rule: FieldRule, text: str) -> None:
        n = state.line_number
        summary = state.summary
        kind = rule.extractor

        if kind == "start_end_time":
            summary.start_time, summary.end_time = ex.parse_start_end_time(
                text, n, self.config.date_time_formats, self.config.time_formats
            )
            return

        if kind == "text":
            value = text or None
        elif kind == "float":
            value = ex.parse_nullable_float(text, n)
        elif kind == "int":
            value = ex.parse_nullable_int(text, n)
        elif kind == "discharge":
            value = ex.parse_discharge(text, n)
        elif kind == "averaging_time":
            value = ex.parse_averaging_time(text, n)
        elif kind == "percentage":
            value = ex.parse_percentage(text, n)
        else:
            raise ValueError(f"unknown extractor '{kind}' for {rule.target}")
        setattr(summary, rule.target, value)

    # ------------------------------------------------------------------
    # Section handlers
    # ------------------------------------------------------------------

    def _parse_summary(self, state: _ParseState) -> None:
        # The station name is the only summary value written without a label.
        fields = state.fields
        if len(fields) == 1 and fields[0] and not state.summary.station_name:
            state.summary.station_name = fields[0]

    def _parse_notes(self, state: _ParseState) -> None:
        note = " ".join(state.fields).strip()
        if not note or note.casefold() in NOTE_MARKERS:
            return
        state.summary.add_note(note)

    def _parse_instrument_warnings(self, state: _ParseState) -> None:
        text = state.fields[0]
        m = self._VERTICAL_HEADER.match(text)
        if m:
            state.current_vertical = ex.parse_int(m.group("vertical"), state.line_number)
            return
        vertical = state.reconciler.fetch_or_create(state.current_vertical)
        vertical.add_warning(text.strip())

    def _parse_quality_issues(self, state: _ParseState) -> None:
        m = self._QUALITY_ISSUE.match(state.fields[0])
        if not m:
            return
        vertical = state.reconciler.fetch_or_create(ex.parse_int(m.group("vertical"), state.line_number))
        vertical.add_quality_issue(m.group("issue").strip())

    def _parse_time_series(self, state: _ParseState) -> None:
        fields = state.fields
        if fields[0].startswith("Time") or not fields[0]:
            return
        # ragged trailing rows
        if len(fields) < 9:
            return

        n = state.line_number
        start = state.summary.start_time
        if start is None:
            raise QReviewParseError(f"Line {n}: No start time context available", n, fields[0])
        t = ex.combine_with_start(start, fields[0], n, self.config.time_formats)

        vertical = state.reconciler.fetch_or_create(ex.parse_int(fields[1], n))
        vertical.time = t
        vertical.points = ex.parse_int(fields[2], n)
        vertical.position = ex.parse_float(fields[3], n)
        vertical.depth = ex.parse_float(fields[4], n)
        vertical.mean_velocity = ex.parse_nullable_float(fields[5], n)
        vertical.area = ex.parse_nullable_float(fields[6], n)
        vertical.discharge = ex.parse_nullable_float(fields[7], n)
        vertical.discharge_portion = ex.parse_nullable_float(fields[8].replace("*", ""), n)


def read_qreview(path: str | Path, config: Optional[ReaderConfig] = None) -> Optional[MeasurementSummary]:
    """Read one QReview export; None when the file is not recognized."""
    return QReviewTsvReader(config).read(path)
