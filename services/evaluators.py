"""Classification rules applied to a sensor's reading values."""

from __future__ import annotations

import math
from typing import Sequence

from models.records import Classification

ULTRA_PRECISE_MAX_DEVIATION = 3.0
VERY_PRECISE_MAX_DEVIATION = 5.0
THERMOMETER_MAX_MEAN_OFFSET = 0.5


def evaluate_readings_against_threshold(
    readings: Sequence[float], reference: float, threshold: float
) -> str:
    """Return ``discard`` once any reading strays more than ``threshold`` from ``reference``."""
    for reading in readings:
        if abs(reading - reference) > threshold:
            return Classification.discard.value
    return Classification.keep.value


def _mean(readings: Sequence[float]) -> float:
    if not readings:
        raise ValueError("At least one reading is required.")
    return math.fsum(readings) / len(readings)


def compute_standard_deviation(readings: Sequence[float]) -> float:
    """Population standard deviation (divides by N)."""
    average = _mean(readings)
    variance = math.fsum((reading - average) ** 2 for reading in readings) / len(readings)
    return math.sqrt(variance)


def evaluate_thermometer(readings: Sequence[float], reference: float) -> str:
    magnitude = abs(_mean(readings) - reference)
    standard_deviation = compute_standard_deviation(readings)

    if magnitude <= THERMOMETER_MAX_MEAN_OFFSET:
        if standard_deviation < ULTRA_PRECISE_MAX_DEVIATION:
            return Classification.ultra_precise.value
        if standard_deviation < VERY_PRECISE_MAX_DEVIATION:
            return Classification.very_precise.value

    return Classification.precise.value
