"""
Exceptions for QReview reading and mapping.
"""

from typing import Optional


class QReviewError(ValueError):
    """Base exception for QReview-related errors."""

    pass


class QReviewParseError(QReviewError):
    """Malformed content in a QReview export.

    Carries the 1-based source line and the offending raw text so the caller can
    report the problem without reopening the file.
    """

    def __init__(self, message: str, line_number: Optional[int] = None, text: Optional[str] = None):
        super().__init__(message)
        self.line_number = line_number
        self.text = text


class QReviewMappingError(QReviewError):
    """A parsed summary cannot be turned into field-visit entities."""

    pass
