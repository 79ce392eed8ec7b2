from __future__ import annotations

import json
import logging
import time
from pathlib import Path

import pytest

from models.errors import (
    FormatError,
    LogEvaluationError,
    ParseError,
    UnrecognizedSensorError,
    UnsupportedFormatError,
)
from models.records import LogFormat
from services.evaluation import (
    detect_format,
    evaluate_log_file,
    evaluate_log_file_with_report,
    load_log,
)

FIXTURES = Path(__file__).parent / "fixtures"

EXPECTED = {
    "temp-1": "precise",
    "temp-2": "ultra precise",
    "temp-3": "very precise",
    "hum-1": "keep",
    "hum-2": "discard",
    "mon-1": "keep",
    "mon-2": "discard",
}


@pytest.fixture()
def json_text() -> str:
    return (FIXTURES / "log.json").read_text(encoding="utf-8")


@pytest.fixture()
def txt_text() -> str:
    return (FIXTURES / "log.txt").read_text(encoding="utf-8")


def test_evaluate_json_string(json_text: str) -> None:
    assert evaluate_log_file(json_text, "json") == EXPECTED


def test_evaluate_json_object(json_text: str) -> None:
    assert evaluate_log_file(json.loads(json_text), "json") == EXPECTED


def test_evaluate_json_bytes(json_text: str) -> None:
    assert evaluate_log_file(json_text.encode("utf-8"), LogFormat.json) == EXPECTED


def test_evaluate_text(txt_text: str) -> None:
    assert evaluate_log_file(txt_text, "txt") == EXPECTED


def test_text_and_json_agree(json_text: str, txt_text: str) -> None:
    assert list(evaluate_log_file(txt_text, "txt")) == list(evaluate_log_file(json_text, "json"))


def test_evaluation_is_repeatable(txt_text: str) -> None:
    assert evaluate_log_file(txt_text, "txt") == evaluate_log_file(txt_text, "txt")


@pytest.mark.parametrize("declared", ["xml", "JSON", "", "csv"])
def test_unsupported_format(declared: str, json_text: str) -> None:
    with pytest.raises(UnsupportedFormatError, match="Unsupported file type"):
        evaluate_log_file(json_text, declared)


def test_unsupported_format_is_a_format_error() -> None:
    with pytest.raises(FormatError):
        evaluate_log_file("anything", "xml")


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"sensors": []}',
        '{"reference": {"temperature": "70", "humidity": 45, "monoxide": 6}}',
        b"\xff\xfe",
        {"reference": {"temperature": 70}},
        '{"reference": {"temperature": 1' + "0" * 400 + ', "humidity": 45, "monoxide": 6}}',
        '{"reference": {"temperature": 1' + "0" * 5000 + ', "humidity": 45, "monoxide": 6}}',
    ],
)
def test_invalid_json(content) -> None:
    with pytest.raises(ParseError, match="Invalid JSON format"):
        evaluate_log_file(content, "json")


@pytest.mark.parametrize(
    "content",
    [
        "thermometer temp-1\n2007-04-05T22:01 72.4",
        "reference 70 45 6\nthermometer temp-1\n2007-04-05T25:01 72.4",
        "",
        {"reference": {"temperature": 70, "humidity": 45, "monoxide": 6}},
        b"reference 70 45 6\xff",
        "reference 70 45 6\nmonoxide mon-1\n2007-04-05T22:04 106\n",
    ],
)
def test_invalid_text(content) -> None:
    with pytest.raises(FormatError, match="Invalid text format"):
        evaluate_log_file(content, "txt")


def test_unrecognized_sensor_aborts_whole_evaluation() -> None:
    data = {
        "reference": {"temperature": 70, "humidity": 45, "monoxide": 6},
        "sensors": [
            {"type": "humidity", "name": "hum-1", "readings": [
                {"timestamp": "2007-04-05T22:04", "value": 45.2},
            ]},
            {"type": "barometer", "name": "bar-1", "readings": [
                {"timestamp": "2007-04-05T22:04", "value": 1013},
            ]},
        ],
    }

    with pytest.raises(UnrecognizedSensorError, match="barometer"):
        evaluate_log_file(data, "json")


def test_malformed_json_sensor_entry_aborts() -> None:
    data = {
        "reference": {"temperature": 70, "humidity": 45, "monoxide": 6},
        "sensors": [{"type": "humidity", "name": "", "readings": []}],
    }

    with pytest.raises(FormatError, match="Invalid sensor entry at index 0"):
        evaluate_log_file(data, "json")


def test_log_without_sensors_yields_empty_mapping() -> None:
    assert evaluate_log_file("reference 70 45 6\n", "txt") == {}
    assert evaluate_log_file('{"reference": {"temperature": 70, "humidity": 45, "monoxide": 6}}', "json") == {}


def test_header_without_readings_is_dropped() -> None:
    report = evaluate_log_file_with_report(
        "reference 70 45 6\nthermometer temp-1\nhumidity hum-1\n2007-04-05T22:04 45.2\n",
        "txt",
    )

    assert report.results == {"hum-1": "keep"}
    assert report.sensor_count == 1
    assert [item.reason for item in report.diagnostics] == ["sensor has no valid readings"]


def test_json_reading_beyond_float_range_is_dropped() -> None:
    content = (
        '{"reference": {"temperature": 70, "humidity": 45, "monoxide": 6}, "sensors": ['
        '{"type": "monoxide", "name": "mon-1", "readings": ['
        '{"timestamp": "2007-04-05T22:04", "value": 1' + "0" * 400 + "},"
        '{"timestamp": "2007-04-05T22:05", "value": 6}]}]}'
    )

    report = evaluate_log_file_with_report(content, "json")

    assert report.results == {"mon-1": "keep"}
    assert [item.reason for item in report.diagnostics] == ["numeric value out of range"]


def test_duplicate_sensor_names_keep_last_result(caplog) -> None:
    text = (
        "reference 70 45 6\n"
        "humidity hum-1\n"
        "2007-04-05T22:04 45.2\n"
        "humidity hum-1\n"
        "2007-04-05T22:05 49\n"
    )

    with caplog.at_level(logging.WARNING, logger="services.evaluation"):
        report = evaluate_log_file_with_report(text, "txt")

    assert report.results == {"hum-1": "discard"}
    assert report.sensor_count == 2
    assert [item.reason for item in report.diagnostics] == ["duplicate sensor name"]
    assert any(getattr(record, "sensor_name", None) == "hum-1" for record in caplog.records)


def test_report_includes_processing_time(txt_text: str) -> None:
    report = evaluate_log_file_with_report(txt_text, "txt")

    assert report.results == EXPECTED
    assert report.sensor_count == len(EXPECTED)
    assert report.processing_ms >= 0
    assert report.diagnostics == []


def test_aborted_evaluation_is_logged(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="services.evaluation"):
        with pytest.raises(LogEvaluationError):
            evaluate_log_file("{", "json")

    assert any(getattr(record, "error", None) == "Invalid JSON format" for record in caplog.records)


def test_load_log_returns_parsed_contents(txt_text: str) -> None:
    parsed = load_log(txt_text, "txt")

    assert parsed.contents.reference.humidity == 45.0
    assert [sensor.name for sensor in parsed.contents.sensors] == list(EXPECTED)


@pytest.mark.parametrize(
    ("filename", "expected"),
    [("log.json", "json"), ("LOG.TXT", "txt"), ("archive.tar.xml", "xml"), ("README", "")],
)
def test_detect_format(filename: str, expected: str) -> None:
    assert detect_format(filename) == expected


def test_large_json_log_scales_linearly() -> None:
    sensor_count = 100_000
    data = {
        "reference": {"temperature": 70, "humidity": 45, "monoxide": 6},
        "sensors": [
            {
                "type": "thermometer",
                "name": f"temp-{index}",
                "readings": [{"timestamp": f"2007-04-05T22:{index % 60:02d}", "value": 70.1}],
            }
            for index in range(sensor_count)
        ],
    }

    start = time.perf_counter()
    result = evaluate_log_file(data, "json")
    elapsed = time.perf_counter() - start

    assert len(result) == sensor_count
    assert set(result.values()) == {"ultra precise"}
    assert elapsed < 10.0
