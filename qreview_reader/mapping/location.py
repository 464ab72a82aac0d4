from __future__ import annotations

from typing import Optional


def location_identifier(station_name: Optional[str], separator: str = "_", zero_padded_digits: int = 0) -> Optional[str]:
    """
    Derive the location identifier from a QReview station name.

    The identifier is the text before the first separator. A purely numeric
    identifier is left-padded with zeros to 'zero_padded_digits' (0 = no padding).

    Examples
    --------
    >>> location_identifier("0512_Bridge", "_", 6)
    '000512'
    >>> location_identifier("RIVER-01", "_", 6)
    'RIVER-01'
    """
    if station_name is None or not station_name.strip():
        return None
    name = station_name.strip()
    if separator and separator in name:
        name = name.split(separator, 1)[0].strip()
    if zero_padded_digits > 0 and name.isdigit():
        name = name.zfill(zero_padded_digits)
    return name or None
