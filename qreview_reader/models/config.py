"""Reader configuration -- every setting that changes how a QReview file is read or mapped.

A ReaderConfig is a frozen dataclass. It can be:

- Constructed directly with keyword overrides
- Loaded from the host's string settings via :meth:`ReaderConfig.from_settings`
- Serialized to/from a dict for JSON provenance
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


_BOOL_TRUE = {"true"}
_BOOL_FALSE = {"false"}


def _get_int(settings: Mapping[str, str], key: str) -> Optional[int]:
    text = settings.get(key)
    if text is None:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


def _get_bool(settings: Mapping[str, str], key: str) -> Optional[bool]:
    text = settings.get(key)
    if text is None:
        return None
    vv = text.strip().lower()
    if vv in _BOOL_TRUE:
        return True
    if vv in _BOOL_FALSE:
        return False
    return None


def _get_strings(settings: Mapping[str, str], key: str) -> Tuple[str, ...]:
    text = settings.get(key)
    if text is None or not text.strip():
        return ()
    return tuple(s for s in text.split(",") if s.strip())


def _get_map(settings: Mapping[str, str], key: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for entry in _get_strings(settings, key):
        parts = entry.split(":", 1)
        if len(parts) == 2:
            out[parts[0]] = parts[1]
    return out


@dataclass(frozen=True)
class ReaderConfig:
    """Frozen configuration for reading and mapping one QReview export.

    Parsing fields
    --------------
    date_time_formats : tuple of str
        ``strptime`` patterns tried in order for the summary start date/time.
        Empty means free-form parsing.
    time_formats : tuple of str
        ``strptime`` patterns tried in order for bare times of day.
        Empty means free-form parsing.
    encoding : str
        Single-byte code page of the export (QReview writes Windows-1252).

    Mapping fields
    --------------
    grades : dict
        Quality display name -> grade code or grade name. Lookup is case-insensitive.
    location_identifier_separator : str
        Station names are cut at the first occurrence of this text.
    location_identifier_zero_padded_digits : int
        Numeric location identifiers are left-padded with zeros to this width (0 = off).
    ignore_measurement_id : bool
        Drop the QReview measurement number instead of using it as the measurement id.
    """

    date_time_formats: Tuple[str, ...] = ()
    time_formats: Tuple[str, ...] = ()
    encoding: str = "cp1252"

    grades: Dict[str, str] = field(default_factory=dict)
    location_identifier_separator: str = "_"
    location_identifier_zero_padded_digits: int = 0
    ignore_measurement_id: bool = False

    def lookup_grade(self, quality: str) -> Optional[str]:
        """Translate a quality display name, or None when no mapping matches."""
        key = quality.casefold()
        for name, value in self.grades.items():
            if name.casefold() == key:
                return value
        return None

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def from_settings(cls, settings: Optional[Mapping[str, str]]) -> ReaderConfig:
        """Build a config from host plugin settings (all values are strings).

        List settings are comma-separated; map settings are comma-separated
        ``name:value`` pairs. Settings that are missing or do not parse keep
        their defaults.
        """
        settings = settings or {}
        base: Dict[str, Any] = dict(
            date_time_formats=_get_strings(settings, "DateTimeFormats"),
            time_formats=_get_strings(settings, "TimeFormats"),
            grades=_get_map(settings, "Grades"),
        )

        separator = settings.get("LocationIdentifierSeparator")
        if separator is not None:
            base["location_identifier_separator"] = separator
        digits = _get_int(settings, "LocationIdentifierZeroPaddedDigits")
        if digits is not None:
            base["location_identifier_zero_padded_digits"] = digits
        ignore = _get_bool(settings, "IgnoreMeasurementId")
        if ignore is not None:
            base["ignore_measurement_id"] = ignore
        encoding = settings.get("Encoding")
        if encoding:
            base["encoding"] = encoding.strip()
        return cls(**base)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict (tuples become lists)."""
        d = asdict(self)
        d["date_time_formats"] = list(d["date_time_formats"])
        d["time_formats"] = list(d["time_formats"])
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> ReaderConfig:
        """Reconstruct from a dict (e.g. loaded from JSON)."""
        d = dict(d)
        for key in ("date_time_formats", "time_formats"):
            if key in d and not isinstance(d[key], tuple):
                d[key] = tuple(d[key])
        if "grades" in d:
            d["grades"] = dict(d["grades"])
        return cls(**d)
