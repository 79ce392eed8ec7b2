"""Error taxonomy raised while evaluating a sensor log.

Every error aborts the whole evaluation. ``str(exc)`` is the message shown to
the end user.
"""

from __future__ import annotations


class LogEvaluationError(Exception):
    """Base error for all log evaluation failures."""


# ---- Structural errors ----
class FormatError(LogEvaluationError):
    """Raised when the document shape or a header line is malformed."""


class UnsupportedFormatError(FormatError):
    """Raised when the declared format is neither json nor txt."""


class ParseError(LogEvaluationError):
    """Raised when a JSON document cannot be decoded or has no valid reference."""


# ---- Value errors ----
class DataError(LogEvaluationError):
    """Raised when a value is present but not numeric where required."""


# ---- Per-sensor semantic errors ----
class UnrecognizedSensorError(LogEvaluationError):
    """Raised when a sensor declares a type outside the registry."""


class MissingReferenceError(LogEvaluationError):
    """Raised when the reference value a sensor needs is absent."""
