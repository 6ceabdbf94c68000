"""Fatal error types. Any of these aborts the run before outputs are written."""

from __future__ import annotations


class TripSplitError(Exception):
    """Base class for fatal pipeline errors."""


class InputFileError(TripSplitError):
    """Input file is missing, unreadable or empty."""


class MissingColumnError(TripSplitError, ValueError):
    """A required logical column is absent from the header."""

    def __init__(self, missing: list[str], fieldnames: list[str]) -> None:
        self.missing = missing
        self.fieldnames = fieldnames
        super().__init__(f"CSV缺少必要字段：{', '.join(missing)}. 实际字段：{fieldnames}")


class OutputError(TripSplitError):
    """An output destination cannot be created or written."""
