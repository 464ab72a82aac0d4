"""
Primitive extractors for QReview field values.

Every extractor takes the already-trimmed field text plus the 1-based line number.
Blank text means "absent" (None). Non-blank text that does not parse is a hard
failure: a QReviewParseError naming the line and the offending text.

Numbers are read with a fixed grammar (optional sign, digits, '.', optional exponent)
so that the result never depends on the machine locale and typos such as '12,,3'
are rejected instead of being read as something else.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Optional, Sequence, Tuple
import re

import pandas as pd

from qreview_reader.exceptions import QReviewParseError


_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INT = re.compile(r"^[+-]?\d+$")

# Behavioural contracts: anchoring and whitespace tolerance matter.
_PERCENTAGE = re.compile(r"\s*(?P<number>[+\-.0-9]+)\s*%")
_DISCHARGE = re.compile(r"^\s*(?P<discharge>\S+)\s+\+/-\s*\S+\s*$")
_AVERAGING_TIME = re.compile(r"^\s*(?P<seconds>\S+)\s+Seconds$")


def _is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def parse_nullable_float(text: Optional[str], line_number: int) -> Optional[float]:
    if _is_blank(text):
        return None
    if _FLOAT.match(text.strip()):
        return float(text)
    raise QReviewParseError(f"Line {line_number}: '{text}' is not a valid number", line_number, text)


def parse_float(text: Optional[str], line_number: int) -> float:
    value = parse_nullable_float(text, line_number)
    if value is None:
        raise QReviewParseError(f"Line {line_number}: '{text}' is not a valid number", line_number, text)
    return value


def parse_nullable_int(text: Optional[str], line_number: int) -> Optional[int]:
    if _is_blank(text):
        return None
    if _INT.match(text.strip()):
        return int(text)
    raise QReviewParseError(f"Line {line_number}: '{text}' is not a valid integer", line_number, text)


def parse_int(text: Optional[str], line_number: int) -> int:
    value = parse_nullable_int(text, line_number)
    if value is None:
        raise QReviewParseError(f"Line {line_number}: '{text}' is not a valid integer", line_number, text)
    return value


def parse_percentage(text: str, line_number: int) -> Optional[float]:
    """'  7.25 %' -> 7.25. None when no '<number>%' appears anywhere in the text."""
    m = _PERCENTAGE.search(text)
    if not m:
        return None
    number = m.group("number")
    if _FLOAT.match(number):
        return float(number)
    raise QReviewParseError(f"Line {line_number}: '{text}' is not a valid percentage", line_number, text)


def parse_discharge(text: str, line_number: int) -> Optional[float]:
    """'12.3 +/- 0.5' -> 12.3. The uncertainty part is dropped."""
    m = _DISCHARGE.match(text)
    if not m:
        return None
    return parse_nullable_float(m.group("discharge"), line_number)


def parse_averaging_time(text: str, line_number: int) -> Optional[float]:
    """'45 Seconds' -> 45.0."""
    m = _AVERAGING_TIME.match(text)
    if not m:
        return None
    return parse_nullable_float(m.group("seconds"), line_number)


# --------------------------------------------------------------------------------------
# Dates and times
# --------------------------------------------------------------------------------------

# A free-form value needs at least one numeric date or time separator pair.
# Keeps pandas from reading keywords such as "now"/"today" or a bare year.
_DATE_TIME_SHAPE = re.compile(r"\d{1,4}\s*[-/.:]\s*\d{1,2}")


def _free_form(text: str) -> Optional[datetime]:
    if not _DATE_TIME_SHAPE.search(text):
        return None
    try:
        ts = pd.Timestamp(text)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts.to_pydatetime()


def try_parse_datetime(text: str, formats: Sequence[str] = ()) -> Optional[datetime]:
    """
    Try each exact strptime pattern in order; with no patterns, fall back to
    pandas' free-form parser. Returns None when nothing matches.
    """
    if not formats:
        return _free_form(text)
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_datetime(text: str, line_number: int, formats: Sequence[str] = ()) -> datetime:
    value = try_parse_datetime(text, formats)
    if value is None:
        raise QReviewParseError(f"Line {line_number}: '{text}' is not a valid datetime.", line_number, text)
    return value


def parse_time_of_day(text: str, line_number: int, formats: Sequence[str] = ()) -> time:
    value = try_parse_datetime(text, formats)
    if value is None:
        raise QReviewParseError(f"Line {line_number}: '{text}' is not a valid time.", line_number, text)
    return value.time()


def combine_with_start(start: datetime, text: str, line_number: int, formats: Sequence[str] = ()) -> datetime:
    """
    Attach a bare time of day to the start date.

    A time of day earlier than the start's time of day belongs to the next day
    (sessions crossing midnight).
    """
    tod = parse_time_of_day(text, line_number, formats)
    day = start.date()
    if tod < start.time():
        day = day + timedelta(days=1)
    return datetime.combine(day, tod)


def parse_start_end_time(
    text: str,
    line_number: int,
    date_time_formats: Sequence[str] = (),
    time_formats: Sequence[str] = (),
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """'2023-06-01 08:00:00 > 09:15:00' -> (start, end)."""
    if _is_blank(text):
        return None, None

    parts = [s.strip() for s in text.split(">")]
    parts = [s for s in parts if s]
    if len(parts) != 2:
        raise QReviewParseError(f"Line {line_number}: '{text}' is not a valid start & end time", line_number, text)

    start_text, end_text = parts
    start = parse_datetime(start_text, line_number, date_time_formats)
    return start, combine_with_start(start, end_text, line_number, time_formats)
