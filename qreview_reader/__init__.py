"""QReview Reader -- Python tooling for OTT QReview discharge-measurement exports.

This package provides tools for:
- Reading the tab-delimited QReview export (Windows-1252) section by section
- Extracting numbers, percentages, discharge, averaging time and session times strictly
- Reconciling vertical data spread over the warnings, quality-issue and time-series sections
- Recognizing files that are not QReview exports without raising
- Mapping a parsed summary onto field-visit, discharge-activity and reading entities
- Checking summary/vertical consistency, exporting tables and plotting the cross-section

Key principles:
- Strict: malformed content raises with the 1-based line number and the offending text
- Absent is not zero: unreported values stay None
- No partial results: a file is either fully reconciled or rejected

Main subpackages:
- ingest: Extractors, section tables, vertical reconciler, TSV reader
- mapping: Units, location identifier, field-visit entities, file-level entry point
- models: Data models (MeasurementSummary, Vertical, ReaderConfig, mapped entities)
- validation: Post-parse consistency checks
- export / plotting: Verticals table and cross-section plot
"""

__all__ = []
