"""Tabular export of a parsed QReview summary.

One row per vertical, in the finalized (position) order. Quality issues and
warnings are newline-joined so the table stays flat.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from qreview_reader.models.summary import MeasurementSummary


VERTICAL_COLUMNS = [
    "number",
    "time",
    "points",
    "position",
    "depth",
    "mean_velocity",
    "area",
    "discharge",
    "discharge_portion",
    "quality_issues",
    "warnings",
]

_FLOAT_COLUMNS = ["position", "depth", "mean_velocity", "area", "discharge", "discharge_portion"]


def verticals_to_frame(summary: MeasurementSummary) -> pd.DataFrame:
    """Absent values become NaN / NaT; 'time' is a datetime64 column."""
    rows = []
    for v in summary.verticals:
        rows.append({
            "number": v.number,
            "time": v.time,
            "points": v.points,
            "position": v.position,
            "depth": v.depth,
            "mean_velocity": v.mean_velocity,
            "area": v.area,
            "discharge": v.discharge,
            "discharge_portion": v.discharge_portion,
            "quality_issues": "\n".join(v.quality_issues),
            "warnings": "\n".join(v.warnings),
        })
    df = pd.DataFrame(rows, columns=VERTICAL_COLUMNS)
    df["number"] = df["number"].astype(np.int64)
    df["points"] = df["points"].astype(np.int64)
    df["time"] = pd.to_datetime(df["time"])
    for c in _FLOAT_COLUMNS:
        df[c] = df[c].astype(np.float64)
    return df


def summary_to_dict(summary: MeasurementSummary) -> Dict[str, Any]:
    """Summary metadata without the verticals, JSON-friendly."""
    d = asdict(summary)
    d.pop("verticals")
    d["warnings"] = list(d["warnings"])
    d["is_metric"] = summary.is_metric
    d["n_verticals"] = len(summary.verticals)
    for key in ("start_time", "end_time"):
        if d[key] is not None:
            d[key] = d[key].isoformat()
    return d


def export_summary(
    summary: MeasurementSummary,
    output_path: Path,
    *,
    metadata: Optional[Dict[str, Any]] = None,
    write_sidecar_json: bool = True,
) -> Path:
    """Write the verticals table as tab-separated CSV, plus a JSON sidecar with summary metadata.

    Parameters
    ----------
    summary : MeasurementSummary
        Parsed summary
    output_path : Path
        Output file path
    metadata : Dict[str, Any], optional
        Extra provenance (e.g. source file, reader config) merged into the sidecar
    write_sidecar_json : bool
        If True, write metadata to a JSON sidecar file

    Returns
    -------
    Path
        Path to the written table
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    verticals_to_frame(summary).to_csv(output_path, sep="\t", index=False)

    if write_sidecar_json:
        sidecar = summary_to_dict(summary)
        if metadata:
            sidecar["provenance"] = metadata
        json_path = output_path.with_suffix(".json")
        with open(json_path, "w") as f:
            json.dump(sidecar, f, indent=2, default=str)

    return output_path
