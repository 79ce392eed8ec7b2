"""Parsing of text and JSON sensor logs into ``LogContents``."""

from __future__ import annotations

import logging
import math
from typing import Any, List, Mapping, Optional, Sequence

from models.errors import DataError, FormatError, ParseError
from models.records import (
    LineDiagnostic,
    LogContents,
    ParsedLog,
    Reading,
    Reference,
    Sensor,
    SensorType,
)
from services.grammar import is_number, is_reading_value, is_valid_timestamp, split_lines

logger = logging.getLogger(__name__)

REFERENCE_FIELDS = ("temperature", "humidity", "monoxide")
_SENSOR_KEYWORDS = frozenset(sensor_type.value for sensor_type in SensorType)
_READING_PREFIX = "20"


def _record_skip(
    diagnostics: Optional[List[LineDiagnostic]],
    line_number: int,
    line: str,
    reason: str,
) -> None:
    logger.warning(
        "Skipping line %s: %s",
        line_number,
        reason,
        extra={"line_number": line_number, "reason": reason},
    )
    if diagnostics is not None:
        diagnostics.append(LineDiagnostic(line_number=line_number, line=line, reason=reason))


def _parse_float(token: str) -> float:
    if not is_number(token):
        raise ValueError(f"{token!r} is not a number")
    value = float(token)
    if not math.isfinite(value):
        raise ValueError(f"{token!r} is out of range")
    return value


def _json_float(value: Any) -> float:
    """Convert a decoded JSON number, raising ``ValueError`` when it does not fit a float."""
    try:
        return float(value)
    except OverflowError as exc:
        raise ValueError(f"{value!r} is out of range") from exc


def parse_reference(line: str) -> Reference:
    """Parse ``reference <temperature> <humidity> <monoxide>``.

    The token layout is checked before any number is converted.
    """
    parts = line.split()
    if len(parts) != 4 or parts[0] != "reference":
        raise FormatError("Invalid reference format")

    try:
        temperature, humidity, monoxide = (_parse_float(part) for part in parts[1:])
    except ValueError as exc:
        raise DataError("Invalid reference data: expected numeric values") from exc

    return Reference(temperature=temperature, humidity=humidity, monoxide=monoxide)


def parse_sensor(
    header_line: str,
    reading_lines: Sequence[str],
    diagnostics: Optional[List[LineDiagnostic]] = None,
    first_line_number: int = 1,
) -> Optional[Sensor]:
    """Build a sensor from its header and the lines collected beneath it.

    Malformed reading lines are dropped. Returns ``None`` when no reading
    survives, so a sensor is never represented without data.
    """
    parts = header_line.split()
    if len(parts) < 2:
        _record_skip(diagnostics, first_line_number, header_line, "missing sensor name")
        return None

    sensor_type = parts[0]
    sensor_name = parts[1].rstrip("\r")

    readings: List[Reading] = []
    for offset, reading_line in enumerate(reading_lines, start=1):
        line_number = first_line_number + offset
        tokens = reading_line.split()
        if len(tokens) != 2:
            _record_skip(diagnostics, line_number, reading_line, "unexpected token count")
            continue

        timestamp, value_raw = tokens
        if not is_valid_timestamp(timestamp):
            _record_skip(diagnostics, line_number, reading_line, "invalid timestamp")
            continue
        if not is_reading_value(value_raw):
            _record_skip(diagnostics, line_number, reading_line, "invalid numeric value")
            continue

        readings.append(Reading(timestamp=timestamp, value=float(value_raw)))

    if not readings:
        _record_skip(diagnostics, first_line_number, header_line, "sensor has no valid readings")
        return None

    return Sensor(type=sensor_type, name=sensor_name, readings=tuple(readings))


def parse_log_text_with_diagnostics(text: str) -> ParsedLog:
    """Parse a text log and report every line that was skipped.

    Garbage lines between sensor blocks are tolerated. A malformed reference
    line is not.
    """
    lines = split_lines(text)
    if not lines:
        raise FormatError("Invalid reference format")

    reference = parse_reference(lines[0])
    diagnostics: List[LineDiagnostic] = []
    sensors: List[Sensor] = []

    index = 1
    while index < len(lines):
        header_line = lines[index]
        tokens = header_line.split(maxsplit=1)
        if tokens[0] not in _SENSOR_KEYWORDS:
            _record_skip(diagnostics, index + 1, header_line, "unrecognized line")
            index += 1
            continue

        header_number = index + 1
        index += 1
        block_start = index
        while index < len(lines) and lines[index].startswith(_READING_PREFIX):
            index += 1

        sensor = parse_sensor(
            header_line,
            lines[block_start:index],
            diagnostics=diagnostics,
            first_line_number=header_number,
        )
        if sensor is not None:
            sensors.append(sensor)

    return ParsedLog(
        contents=LogContents(reference=reference, sensors=sensors),
        diagnostics=diagnostics,
    )


def parse_log_text(text: str) -> LogContents:
    return parse_log_text_with_diagnostics(text).contents


def _is_json_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_json_format(data: Any) -> bool:
    """True when ``data`` carries a reference with three numeric fields."""
    if not isinstance(data, Mapping):
        return False
    reference = data.get("reference")
    if not isinstance(reference, Mapping):
        return False
    return all(_is_json_number(reference.get(name)) for name in REFERENCE_FIELDS)


def _parse_json_reading(item: Any) -> tuple[Optional[Reading], str]:
    if not isinstance(item, Mapping):
        return None, "reading is not an object"
    timestamp = item.get("timestamp")
    value = item.get("value")
    if not isinstance(timestamp, str) or not is_valid_timestamp(timestamp):
        return None, "invalid timestamp"
    if not _is_json_number(value):
        return None, "invalid numeric value"
    try:
        return Reading(timestamp=timestamp, value=_json_float(value)), ""
    except ValueError:
        return None, "numeric value out of range"


def parse_json_sensor(
    entry: Any,
    position: int,
    diagnostics: Optional[List[LineDiagnostic]] = None,
) -> Optional[Sensor]:
    """Validate one item of the ``sensors`` array.

    ``position`` is 1-based. A malformed entry aborts parsing, while individual
    malformed readings are dropped. Unknown sensor types are kept so the
    registry can reject them.
    """
    if not isinstance(entry, Mapping):
        raise FormatError(f"Invalid sensor entry at index {position - 1}")

    sensor_type = entry.get("type")
    name = entry.get("name")
    raw_readings = entry.get("readings")
    if (
        not isinstance(sensor_type, str)
        or not isinstance(name, str)
        or not name.strip()
        or not isinstance(raw_readings, list)
    ):
        raise FormatError(f"Invalid sensor entry at index {position - 1}")

    readings: List[Reading] = []
    for item in raw_readings:
        reading, reason = _parse_json_reading(item)
        if reading is None:
            _record_skip(diagnostics, position, f"{name}: {item!r}", reason)
            continue
        readings.append(reading)

    if not readings:
        _record_skip(diagnostics, position, name, "sensor has no valid readings")
        return None

    return Sensor(type=sensor_type, name=name, readings=tuple(readings))


def parse_json_log(data: Mapping[str, Any]) -> ParsedLog:
    """Convert a decoded JSON document that passed ``is_valid_json_format``."""
    raw_reference = data["reference"]
    try:
        reference = Reference(
            temperature=_json_float(raw_reference["temperature"]),
            humidity=_json_float(raw_reference["humidity"]),
            monoxide=_json_float(raw_reference["monoxide"]),
        )
    except ValueError as exc:
        raise ParseError("Invalid JSON format") from exc

    raw_sensors = data.get("sensors", [])
    if not isinstance(raw_sensors, list):
        raise FormatError("Invalid sensors list")

    diagnostics: List[LineDiagnostic] = []
    sensors: List[Sensor] = []
    for position, entry in enumerate(raw_sensors, start=1):
        sensor = parse_json_sensor(entry, position, diagnostics=diagnostics)
        if sensor is not None:
            sensors.append(sensor)

    return ParsedLog(
        contents=LogContents(reference=reference, sensors=sensors),
        diagnostics=diagnostics,
    )
