"""
Exceptions raised by the analytics engine.

Only contract violations surface as exceptions. Malformed records are routine
data imperfection and are skipped, never raised.
"""


class AnalyticsError(Exception):
    """Base class for analytics engine failures."""


class InvalidReferenceTime(AnalyticsError, ValueError):
    """The reference time handed to the engine is not a usable timestamp."""


class InvalidRecordCollection(AnalyticsError, TypeError):
    """The record collection is not an iterable of records."""


class UnknownReportType(AnalyticsError, ValueError):
    """The requested report kind has no assembler."""
