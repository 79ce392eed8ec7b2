"""Line grammars for the text log format.

The timestamp and reading patterns here are the only definitions used, both by
the up-front text validation and by the tolerant parser, so a log that passes
validation never loses readings during parsing.
"""

from __future__ import annotations

import re
from typing import List

from models.records import SensorType

TIMESTAMP_PATTERN = (
    r"\d{4}-(?:0[1-9]|1[0-2])-(?:0[1-9]|[12][0-9]|3[01])"
    r"T(?:[01][0-9]|2[0-3]):[0-5][0-9]"
)
NUMBER_PATTERN = r"\d+(?:\.\d+)?"
READING_VALUE_PATTERN = r"\d{1,2}(?:\.\d+)?"
_SENSOR_TYPES_PATTERN = "|".join(sensor_type.value for sensor_type in SensorType)

_TIMESTAMP_RE = re.compile(TIMESTAMP_PATTERN)
_NUMBER_RE = re.compile(NUMBER_PATTERN)
_READING_VALUE_RE = re.compile(READING_VALUE_PATTERN)
_REFERENCE_RE = re.compile(rf"reference(?:\s+{NUMBER_PATTERN}){{3}}")
_HEADER_RE = re.compile(rf"(?:{_SENSOR_TYPES_PATTERN})\s+\w+-\d+")
_READING_RE = re.compile(rf"{TIMESTAMP_PATTERN}\s+{READING_VALUE_PATTERN}")


def is_valid_timestamp(value: str) -> bool:
    """Return True for ``YYYY-MM-DDTHH:MM`` with plausible field ranges.

    Day is checked against 01-31 only, so ``2023-02-31T00:00`` passes.
    """
    return bool(_TIMESTAMP_RE.fullmatch(value))


def is_number(token: str) -> bool:
    return bool(_NUMBER_RE.fullmatch(token))


def is_reading_value(token: str) -> bool:
    """A 1-2 digit integer part with an optional fraction, e.g. ``9`` or ``72.4``."""
    return bool(_READING_VALUE_RE.fullmatch(token))


def is_reference_line(line: str) -> bool:
    return bool(_REFERENCE_RE.fullmatch(line))


def is_sensor_header(line: str) -> bool:
    return bool(_HEADER_RE.fullmatch(line))


def is_reading_line(line: str) -> bool:
    return bool(_READING_RE.fullmatch(line))


def split_lines(text: str) -> List[str]:
    """Split on any line ending, trim every line and drop blank ones."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def is_valid_text_format(text: str) -> bool:
    """Check that ``text`` follows the reference/header/reading layout.

    The first non-blank line must be a reference line. Every following block
    is a sensor header and zero or more reading lines.
    """
    lines = split_lines(text)
    if not lines or not is_reference_line(lines[0]):
        return False

    index = 1
    while index < len(lines):
        if not is_sensor_header(lines[index]):
            return False
        index += 1
        while index < len(lines) and is_reading_line(lines[index]):
            index += 1

    return index == len(lines)
