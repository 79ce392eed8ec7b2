"""Top-level orchestration: decode, validate, parse and classify a log."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, List, Mapping, Union

from models.errors import FormatError, LogEvaluationError, ParseError, UnsupportedFormatError
from models.records import EvaluationResult, LineDiagnostic, LogFormat, ParsedLog
from services.grammar import is_valid_text_format
from services.parser import is_valid_json_format, parse_json_log, parse_log_text_with_diagnostics
from services.registry import get_definition, validate_sensor_type_and_reference

logger = logging.getLogger(__name__)

LogInput = Union[str, bytes, Mapping[str, Any]]


@dataclass
class EvaluationReport:
    """Classification mapping plus what was dropped on the way."""

    results: EvaluationResult = field(default_factory=dict)
    diagnostics: List[LineDiagnostic] = field(default_factory=list)
    sensor_count: int = 0
    processing_ms: float = 0.0


def detect_format(filename: str) -> str:
    """Return the declared format implied by a file name's extension."""
    return PurePath(filename).suffix.lstrip(".").lower()


def _decode(content: Union[str, bytes]) -> str:
    if isinstance(content, bytes):
        return content.decode("utf-8")
    return content


def _load_json(content: LogInput) -> ParsedLog:
    if isinstance(content, (str, bytes)):
        try:
            data = json.loads(content)
        except (ValueError, RecursionError) as exc:
            raise ParseError("Invalid JSON format") from exc
    else:
        data = content

    if not is_valid_json_format(data):
        raise ParseError("Invalid JSON format")
    return parse_json_log(data)


def _load_text(content: LogInput) -> ParsedLog:
    if not isinstance(content, (str, bytes)):
        raise FormatError("Invalid text format")
    try:
        text = _decode(content)
    except UnicodeDecodeError as exc:
        raise FormatError("Invalid text format") from exc

    if not is_valid_text_format(text):
        raise FormatError("Invalid text format")
    return parse_log_text_with_diagnostics(text)


def load_log(content: LogInput, declared_format: str) -> ParsedLog:
    """Validate and parse ``content`` according to ``declared_format``."""
    if declared_format == LogFormat.json.value:
        return _load_json(content)
    if declared_format == LogFormat.txt.value:
        return _load_text(content)
    raise UnsupportedFormatError("Unsupported file type")


def evaluate_log_file_with_report(content: LogInput, declared_format: str) -> EvaluationReport:
    """Evaluate every sensor in the log and keep the parse diagnostics.

    Any error aborts the whole evaluation; no partial mapping is returned.
    """
    start_time = time.perf_counter()
    try:
        parsed = load_log(content, declared_format)
        contents = parsed.contents
        diagnostics = list(parsed.diagnostics)
        results: EvaluationResult = {}

        for position, sensor in enumerate(contents.sensors, start=1):
            validate_sensor_type_and_reference(sensor.type, contents)
            definition = get_definition(sensor.type)
            reference_value = getattr(contents.reference, definition.reference_key)

            if sensor.name in results:
                logger.warning(
                    "Duplicate sensor name %r; later result replaces earlier one",
                    sensor.name,
                    extra={"sensor_name": sensor.name, "sensor_type": sensor.type},
                )
                diagnostics.append(
                    LineDiagnostic(
                        line_number=position,
                        line=sensor.name,
                        reason="duplicate sensor name",
                    )
                )

            results[sensor.name] = definition.evaluator(sensor.values, reference_value)
    except LogEvaluationError as exc:
        logger.warning(
            "Log evaluation aborted",
            extra={"file_format": declared_format, "error": str(exc)},
        )
        raise

    processing_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "Evaluated log",
        extra={
            "file_format": declared_format,
            "sensor_count": len(contents.sensors),
            "processing_ms": round(processing_ms, 3),
        },
    )
    return EvaluationReport(
        results=results,
        diagnostics=diagnostics,
        sensor_count=len(contents.sensors),
        processing_ms=processing_ms,
    )


def evaluate_log_file(content: LogInput, declared_format: str) -> EvaluationResult:
    """Classify each sensor of a JSON or text log by name."""
    return evaluate_log_file_with_report(content, declared_format).results
