"""Validation utilities for parsed QReview summaries."""

from .consistency import ValidationResult, check_summary

__all__ = ["ValidationResult", "check_summary"]
