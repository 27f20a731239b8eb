"""Energy usage forecasting pipeline."""

from wattcast.engine.forecast.aggregator import (
    generate_forecast,
    generate_hourly_predictions,
    slice_window,
    summarize_daily,
)
from wattcast.engine.forecast.confidence import estimate_confidence
from wattcast.engine.forecast.normalizer import normalize_readings, readings_from_devices
from wattcast.engine.forecast.outliers import calculate_quantile, filter_outliers
from wattcast.engine.forecast.predictor import predict_wattage

__all__ = [
    "calculate_quantile",
    "estimate_confidence",
    "filter_outliers",
    "generate_forecast",
    "generate_hourly_predictions",
    "normalize_readings",
    "predict_wattage",
    "readings_from_devices",
    "slice_window",
    "summarize_daily",
]
