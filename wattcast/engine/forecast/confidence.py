"""Heuristic confidence for hourly predictions."""

import numpy as np

from wattcast.engine.forecast.predictor import find_patterns
from wattcast.engine.forecast.rounding import round_half_up

NO_MATCH_CONFIDENCE = 0.6
FEW_MATCHES_CONFIDENCE = 0.65
MIN_MATCHES_FOR_CV = 3

# (cv_upper_bound, confidence), checked in order
CV_BANDS = [
    (0.1, 0.9),
    (0.2, 0.8),
    (0.3, 0.7),
]
HIGH_CV_CONFIDENCE = 0.6


def coefficient_of_variation(values):
    """Population stddev / mean; 1.0 when the mean is zero."""
    arr = np.asarray(values, dtype=float)
    mean = float(arr.mean())
    if mean == 0:
        return 1.0
    return float(arr.std()) / mean


def estimate_confidence(history, target_hour, target_day):
    """Confidence in [0, 1] from exact (hour, day) matches only."""
    patterns = find_patterns(history, target_hour, target_day)
    if not patterns:
        return NO_MATCH_CONFIDENCE
    if len(patterns) < MIN_MATCHES_FOR_CV:
        return FEW_MATCHES_CONFIDENCE

    cv = coefficient_of_variation([p.wattage for p in patterns])
    for upper, confidence in CV_BANDS:
        if cv < upper:
            return confidence
    return HIGH_CV_CONFIDENCE


def confidence_label(confidence):
    if confidence >= 0.7:
        return "high"
    if confidence >= 0.5:
        return "medium"
    return "low"


def confidence_bounds(predicted, confidence):
    """Band around a prediction that widens as confidence drops."""
    lower = predicted * confidence
    upper = predicted * (2 - confidence)
    return round_half_up(lower, 1), round_half_up(upper, 1)
