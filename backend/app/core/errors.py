"""Exceptions raised by the ranking core. Missing data is never an exception."""
from __future__ import annotations


class RankingError(Exception):
    """Base class for ranking/feedback errors."""


class DimensionMismatchError(RankingError, ValueError):
    """Two vectors that must come from the same embedding model differ in length."""

    def __init__(self, expected: int, actual: int, context: str = "vector") -> None:
        super().__init__(f"{context}: expected dimension {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidFeedbackTypeError(RankingError, ValueError):
    """Feedback type is neither 'like' nor 'dislike'."""

    def __init__(self, feedback_type: object) -> None:
        super().__init__(f"Unknown feedback type: {feedback_type!r}")
        self.feedback_type = feedback_type


class UnsupportedDialectError(RankingError):
    """Storage backend has no atomic upsert we know how to issue."""

    def __init__(self, dialect: str) -> None:
        super().__init__(f"No atomic upsert available for dialect {dialect!r}")
        self.dialect = dialect
