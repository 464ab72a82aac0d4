"""
Cross-section plot of the measured verticals.

Depth is drawn downwards against the tagline position; mean velocity shares the
x axis on a twin y axis.
"""

from __future__ import annotations

import os
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from qreview_reader.mapping.units import unit_system_for
from qreview_reader.models.summary import MeasurementSummary


def _column(values) -> np.ndarray:
    return np.array([np.nan if v is None else v for v in values], dtype=np.float64)


def plot_cross_section(summary: MeasurementSummary, ax=None):
    """Returns the Figure. Verticals without a position are skipped."""
    units = unit_system_for(summary)
    verticals = [v for v in summary.verticals if v.position is not None]

    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 4))
    else:
        fig = ax.figure

    x = _column(v.position for v in verticals)
    depth = _column(v.depth for v in verticals)
    velocity = _column(v.mean_velocity for v in verticals)

    ax.fill_between(x, 0, depth, alpha=0.3)
    ax.plot(x, depth, marker="o", label="depth")
    ax.invert_yaxis()
    ax.set_xlabel(f"Position ({units.distance})")
    ax.set_ylabel(f"Depth ({units.distance})")
    ax.grid(True)

    ax_v = ax.twinx()
    ax_v.plot(x, velocity, marker="s", color="tab:red", label="mean velocity")
    ax_v.set_ylabel(f"Mean velocity ({units.velocity})")

    for v, xi, di in zip(verticals, x, depth):
        if np.isfinite(di):
            ax.annotate(str(v.number), (xi, di), textcoords="offset points", xytext=(0, 6), ha="center")

    ax.set_title(summary.station_name or "QReview measurement")
    return fig


def save_cross_section(summary: MeasurementSummary, output_path: str = "data/plots", fname: Optional[str] = None, format: str = "svg") -> str:
    os.makedirs(output_path, exist_ok=True)
    fname = (fname or summary.station_name or "qreview") + "." + format
    path = os.path.join(output_path, fname)
    fig = plot_cross_section(summary)
    fig.tight_layout()
    fig.savefig(path, format=format)
    plt.close(fig)
    return path
