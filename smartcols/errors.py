"""smartcols exception hierarchy.

Every rendering fault is reported as one of these; nothing is retried.
"""

from __future__ import annotations


class SmartcolsError(Exception):
    """Base class for rendering faults. CLI exit code 1."""

    exit_code = 1


class FormatError(SmartcolsError):
    """Invalid argument, e.g. a zero-width column that must emit data."""


class EncodingError(SmartcolsError):
    """Malformed text met while encoding or truncating a cell."""


class SessionError(SmartcolsError):
    """Print session used out of order or twice for the same table."""
