"""
Result types shared by the outline transforms.

Every transform reports back through one of these plain data structures instead
of raising or logging. Callers (the pipeline, the CLI) decide what to print and
whether a failure should stop further processing.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable failure categories."""

    file_type_unsupported = "file_type_unsupported"
    processing_error = "processing_error"
    no_sections_found = "no_sections_found"
    invalid_argument = "invalid_argument"


@dataclass
class ErrorInfo:
    """A failure with a human-readable message."""

    code: ErrorCode
    message: str
    details: object | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class NumberingResult:
    """Result of fixing section and list numbering in a document."""

    success: bool

    lines_changed: int
    """Number of lines that differ between the input and the fixed text."""

    fixed_text: str | None = None
    error: ErrorInfo | None = None


@dataclass
class FootnoteResult:
    """Result of renumbering footnotes in a document."""

    success: bool
    new_text: str | None = None
    error: ErrorInfo | None = None

    footnotes_found: int = 0
    """Number of footnote declaration lines found."""

    references_updated: int = 0
    """Number of `[n]` tokens (declarations and references) whose number changed."""


@dataclass
class TocResult:
    """Result of generating or replacing a table of contents."""

    success: bool
    new_text: str | None = None
    error: ErrorInfo | None = None
    sections_found: int = 0


def count_changed_lines(original: Sequence[str], fixed: Sequence[str]) -> int:
    """
    Count lines that differ position by position, plus any difference in
    length between the two sequences.
    """
    changed = sum(1 for before, after in zip(original, fixed) if before != after)
    return changed + abs(len(original) - len(fixed))


def error_message(error: object, default: str = "An unknown error occurred") -> str:
    """Get a readable message from an `ErrorInfo`, an exception, or a string."""
    if isinstance(error, ErrorInfo):
        return error.message
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    if isinstance(error, str):
        return error
    return default
