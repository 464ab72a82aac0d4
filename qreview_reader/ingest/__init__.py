"""Ingest package - QReview export reading.

This package handles:
- Primitive extractors for numbers, percentages, discharge, averaging time and dates
- Section and field tables of the tab-delimited export
- Reconciliation of vertical fragments spread over several sections
- The section-driven reader and its completeness gate

Key classes:
- QReviewTsvReader: reads one export into a MeasurementSummary (or None)
- VerticalReconciler: fetch-or-create by vertical number, filter and sort at the end
"""
from .tsv_reader import QReviewTsvReader, read_qreview, split_fields
from .verticals import VerticalReconciler

__all__ = [
    "QReviewTsvReader",
    "VerticalReconciler",
    "read_qreview",
    "split_fields",
]
