"""Static table mapping each sensor type to its evaluation rule."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from types import MappingProxyType
from typing import Callable, Mapping, Sequence

from models.errors import MissingReferenceError, UnrecognizedSensorError
from models.records import LogContents, SensorType
from services.evaluators import evaluate_readings_against_threshold, evaluate_thermometer

SensorEvaluator = Callable[[Sequence[float], float], str]

HUMIDITY_THRESHOLD = 1.0
MONOXIDE_THRESHOLD = 3.0


@dataclass(frozen=True)
class SensorDefinition:
    """How one sensor type is judged and which reference field it reads."""

    evaluator: SensorEvaluator
    reference_key: str


SENSORS: Mapping[SensorType, SensorDefinition] = MappingProxyType(
    {
        SensorType.thermometer: SensorDefinition(
            evaluator=evaluate_thermometer,
            reference_key="temperature",
        ),
        SensorType.humidity: SensorDefinition(
            evaluator=partial(evaluate_readings_against_threshold, threshold=HUMIDITY_THRESHOLD),
            reference_key="humidity",
        ),
        SensorType.monoxide: SensorDefinition(
            evaluator=partial(evaluate_readings_against_threshold, threshold=MONOXIDE_THRESHOLD),
            reference_key="monoxide",
        ),
    }
)

SENSOR_TYPES = tuple(sensor_type.value for sensor_type in SENSORS)


def is_sensor_type(value: str) -> bool:
    return value in SENSOR_TYPES


def get_definition(sensor_type: str) -> SensorDefinition:
    if not is_sensor_type(sensor_type):
        raise UnrecognizedSensorError(f"Unrecognized sensor type: '{sensor_type}'")
    return SENSORS[SensorType(sensor_type)]


def validate_sensor_type_and_reference(sensor_type: str, log: LogContents) -> None:
    """Ensure ``sensor_type`` is registered and ``log.reference`` carries its value.

    Only an absent value fails; ``0`` or ``nan`` are accepted as present.
    """
    definition = get_definition(sensor_type)
    if getattr(log.reference, definition.reference_key, None) is None:
        raise MissingReferenceError(
            f"Reference value not found for sensor type: '{sensor_type}'"
        )
