"""IQR-based outlier removal for normalized readings."""

import logging

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_MIN_SAMPLES = 5  # at or below this, the quartiles are too noisy to trust
DEFAULT_IQR_MULTIPLIER = 1.5


def calculate_quantile(values, q):
    """Quantile by linear interpolation between sorted order statistics.

    Raises:
        ValueError: if values is empty or q is outside [0, 1].
    """
    if len(values) == 0:
        raise ValueError("calculate_quantile() requires at least one value")
    if not 0.0 <= q <= 1.0:
        raise ValueError(f"Quantile must be within [0, 1], got {q}")
    return float(np.quantile(np.asarray(values, dtype=float), q, method="linear"))


def iqr_bounds(values, multiplier=DEFAULT_IQR_MULTIPLIER):
    """Return (lower, upper) acceptance bounds around the interquartile range."""
    q1 = calculate_quantile(values, 0.25)
    q3 = calculate_quantile(values, 0.75)
    iqr = q3 - q1
    return q1 - multiplier * iqr, q3 + multiplier * iqr


def filter_outliers(readings, min_samples=DEFAULT_MIN_SAMPLES, multiplier=DEFAULT_IQR_MULTIPLIER):
    """Drop readings whose wattage falls outside the IQR fences.

    Inputs with ``min_samples`` or fewer readings are returned unchanged.
    Surviving readings keep their original order.
    """
    readings = list(readings)
    if len(readings) <= min_samples:
        return readings

    lower, upper = iqr_bounds([r.wattage for r in readings], multiplier)
    kept = [r for r in readings if lower <= r.wattage <= upper]
    if len(kept) < len(readings):
        logger.debug(
            f"Removed {len(readings) - len(kept)} outliers outside [{lower:.1f}, {upper:.1f}] W"
        )
    return kept
