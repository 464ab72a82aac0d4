"""
Post-parse consistency checks for a MeasurementSummary.

The reader only rejects malformed text. These checks look at the numbers as a whole
and report disagreements between the summary block and the per-vertical table.
They are advisory by default: everything is a warning unless 'strict' is set.

Examples
--------
>>> from qreview_reader.models.summary import MeasurementSummary
>>> check_summary(MeasurementSummary()).ok
True
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

from qreview_reader.models.summary import MeasurementSummary


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of checking one summary.

    Attributes
    ----------
    ok:
        True if no errors were found.
    errors:
        Fatal issues; caller should not publish the measurement.
    warnings:
        Non-fatal issues; caller may continue but should review.

    Examples
    --------
    >>> ValidationResult(ok=True, errors=[], warnings=[]).ok
    True
    """
    ok: bool
    errors: List[str]
    warnings: List[str]

    def raise_if_errors(self) -> None:
        if self.errors:
            msg = "Validation failed:\n" + "\n".join(f"- {e}" for e in self.errors)
            raise ValueError(msg)


def _finite(values) -> np.ndarray:
    arr = np.array([np.nan if v is None else v for v in values], dtype=np.float64)
    return arr[np.isfinite(arr)]


def check_summary(
    summary: MeasurementSummary,
    *,
    portion_tol_pct: float = 1.0,
    discharge_rel_tol: float = 0.05,
    strict: bool = False,
) -> ValidationResult:
    """
    Compare the summary block with the per-vertical table.

    Parameters
    ----------
    portion_tol_pct:
        Allowed distance of the summed discharge portions from 100 %.
    discharge_rel_tol:
        Allowed relative difference between summed vertical discharge and total discharge.
    strict:
        If True, findings are errors; else warnings.
    """
    findings: List[str] = []
    verticals = summary.verticals

    if summary.number_of_verticals is not None and verticals and summary.number_of_verticals != len(verticals):
        findings.append(
            f"Summary declares {summary.number_of_verticals} verticals but the time series describes {len(verticals)}."
        )

    portions = _finite(v.discharge_portion for v in verticals)
    if portions.size:
        total_pct = float(np.sum(portions))
        if abs(total_pct - 100.0) > portion_tol_pct:
            findings.append(f"Discharge portions add up to {total_pct:.2f} %, expected 100 %.")

    discharges = _finite(v.discharge for v in verticals)
    if discharges.size and summary.discharge:
        q_sum = float(np.sum(discharges))
        rel = abs(q_sum - summary.discharge) / abs(summary.discharge)
        if rel > discharge_rel_tol:
            findings.append(
                f"Vertical discharges add up to {q_sum:.6g}, total discharge is {summary.discharge:.6g} "
                f"(relative difference {rel:.1%})."
            )

    if summary.start_time is not None and summary.end_time is not None:
        outside = [
            v.number for v in verticals
            if v.time is not None and not (summary.start_time <= v.time <= summary.end_time)
        ]
        if outside:
            findings.append(f"Verticals measured outside the session interval: {outside[:10]}")

    positions = _finite(v.position for v in verticals)
    if positions.size >= 2 and np.any(np.diff(positions) == 0):
        findings.append("Several verticals share the same position.")

    if strict:
        return ValidationResult(ok=not findings, errors=findings, warnings=[])
    return ValidationResult(ok=True, errors=[], warnings=findings)
