"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


class SensorType(str, Enum):
    """Sensor kinds a log may declare."""

    thermometer = "thermometer"
    humidity = "humidity"
    monoxide = "monoxide"


class LogFormat(str, Enum):
    """Encodings accepted for an uploaded log."""

    json = "json"
    txt = "txt"


class Classification(str, Enum):
    keep = "keep"
    discard = "discard"
    precise = "precise"
    very_precise = "very precise"
    ultra_precise = "ultra precise"


EvaluationResult = Dict[str, str]


@dataclass(frozen=True, slots=True)
class Reference:
    """Baseline environmental values declared at the top of a log."""

    temperature: float
    humidity: float
    monoxide: float


@dataclass(frozen=True, slots=True)
class Reading:
    """A single timestamped observation."""

    timestamp: str
    value: float


@dataclass(frozen=True, slots=True)
class Sensor:
    """A named sensor with at least one valid reading."""

    type: str
    name: str
    readings: Tuple[Reading, ...]

    @property
    def values(self) -> List[float]:
        return [reading.value for reading in self.readings]


@dataclass(slots=True)
class LogContents:
    reference: Reference
    sensors: List[Sensor] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class LineDiagnostic:
    """A line or entry that was skipped while parsing.

    ``line_number`` is 1-based over the non-blank lines of a text log, or the
    1-based position of the sensor entry in a JSON log.
    """

    line_number: int
    line: str
    reason: str


@dataclass(slots=True)
class ParsedLog:
    contents: LogContents
    diagnostics: List[LineDiagnostic] = field(default_factory=list)
