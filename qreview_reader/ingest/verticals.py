from __future__ import annotations

import logging
from typing import Dict, List

from qreview_reader.models.summary import Vertical

logger = logging.getLogger(__name__)


class VerticalReconciler:
    """
    Unifies vertical fragments scattered over the ADC Warnings, Quality Issues and
    Time Series sections into one Vertical per number.

    Contract:
      - fetch_or_create(n) always returns the same object for the same n,
        whichever section asks first.
      - finalize() drops placeholders (never described by the time series) and
        stably sorts the rest by position.
    """

    def __init__(self, verticals: List[Vertical]):
        # 'verticals' is the summary's own list; new records are appended in encounter order.
        self._verticals = verticals
        self._by_number: Dict[int, Vertical] = {v.number: v for v in verticals}

    def fetch_or_create(self, number: int) -> Vertical:
        vertical = self._by_number.get(number)
        if vertical is not None:
            return vertical
        vertical = Vertical(number=number)
        self._by_number[number] = vertical
        self._verticals.append(vertical)
        logger.debug("created vertical %d", number)
        return vertical

    def finalize(self) -> List[str]:
        """Filter and sort in place. Returns notes about dropped placeholders."""
        notes: List[str] = []
        kept = []
        for v in self._verticals:
            if v.is_placeholder:
                notes.append(f"dropped vertical {v.number}: referenced but absent from the time series")
                continue
            kept.append(v)

        # Stable: equal positions keep encounter order. Missing positions sort first.
        kept.sort(key=lambda v: (v.position is not None, v.position if v.position is not None else 0.0))

        self._verticals[:] = kept
        self._by_number = {v.number: v for v in kept}
        return notes
