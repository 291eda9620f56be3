"""Named failures raised while loading and summarising storm tracks."""

from __future__ import annotations


class StormDataError(Exception):
    """Base class for every storm EDA failure."""


class DataUnavailable(StormDataError):
    """The source file is missing, unreadable or lacks required columns."""


class EmptyInput(StormDataError):
    """An aggregation was left with no rows after filtering."""


class UndefinedRatio(StormDataError):
    """A percent change was requested against a previous value of zero."""


class InvalidDate(StormDataError, ValueError):
    """YEAR/MONTH/DAY do not form a calendar date."""
