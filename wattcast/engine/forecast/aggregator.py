"""Forecast assembly: 24 hourly predictions and the daily summary.

Wires normalizer -> outlier filter -> predictor/confidence for each
hour-slot. Every stage degrades instead of raising, so any input (None,
[], malformed records) yields a complete forecast.
"""

import logging
import random
from datetime import datetime, timedelta

from wattcast.engine.config import ForecastConfig
from wattcast.engine.forecast.confidence import (
    confidence_bounds,
    confidence_label,
    estimate_confidence,
)
from wattcast.engine.forecast.normalizer import (
    as_record_list,
    day_of_week,
    normalize_readings,
    readings_from_devices,
    to_local_naive,
)
from wattcast.engine.forecast.outliers import filter_outliers
from wattcast.engine.forecast.predictor import predict_wattage
from wattcast.engine.forecast.rounding import round_half_up
from wattcast.engine.forecast.synthetic import generate_recent_history
from wattcast.engine.models import DailyForecastSummary, Forecast, HourlyPrediction

logger = logging.getLogger(__name__)

DEFAULT_DAILY_SUMMARY = DailyForecastSummary(total_kwh=19.2, peak_wattage=1800, average_confidence=0.6)

WINDOW_HOURS = {"6h": 6, "12h": 12, "24h": 24}


def generate_hourly_predictions(history, now=None, rng=None, hours=24):
    """Predict each of the next ``hours`` hour-slots, starting with the current hour.

    Args:
        history: Filtered NormalizedReading list (may be empty).
        now: Reference time; slot times are ``now`` truncated to the hour + i.
        rng: random.Random used for banded defaults.
        hours: Number of slots.
    """
    now = to_local_naive(now or datetime.now())
    rng = rng or random.Random()
    start = now.replace(minute=0, second=0, microsecond=0)
    current_hour = now.hour
    current_day = day_of_week(now)

    predictions = []
    for i in range(hours):
        target_hour = (current_hour + i) % 24
        target_day = (current_day + (current_hour + i) // 24) % 7

        predicted = round_half_up(predict_wattage(history, target_hour, target_day, rng), 1)
        confidence = estimate_confidence(history, target_hour, target_day)
        lower, upper = confidence_bounds(predicted, confidence)

        predictions.append(HourlyPrediction(
            time=start + timedelta(hours=i),
            hour=target_hour,
            day_of_week=target_day,
            predicted_wattage=predicted,
            confidence=confidence,
            lower_bound=lower,
            upper_bound=upper,
            confidence_label=confidence_label(confidence),
        ))
    return predictions


def summarize_daily(predictions):
    """Total energy, peak draw and mean confidence over hourly predictions."""
    if not predictions:
        logger.warning("No hourly predictions to summarize, returning default daily summary")
        return DEFAULT_DAILY_SUMMARY

    watts = [p.predicted_wattage for p in predictions]
    average_confidence = sum(p.confidence for p in predictions) / len(predictions)
    return DailyForecastSummary(
        total_kwh=round_half_up(sum(watts) / 1000, 2),
        peak_wattage=round_half_up(max(watts)),
        average_confidence=round_half_up(average_confidence, 2),
    )


def slice_window(predictions, window="24h"):
    """First 6, 12 or 24 predictions for a dashboard time frame."""
    return list(predictions[:WINDOW_HOURS.get(window, 24)])


def generate_forecast(readings, now=None, rng=None, config=None, devices=None, include_history=False):
    """Run the full forecast pipeline.

    Args:
        readings: Raw historical readings (dicts or objects), or None.
        now: Reference time (defaults to the current local time).
        rng: random.Random for synthetic values; seeded from config.seed when absent.
        config: ForecastConfig.
        devices: Optional device records, used only when readings are empty.
        include_history: Attach synthetic recent history for charting.

    Returns:
        Forecast with exactly ``config.horizon_hours`` hourly predictions.
    """
    config = config or ForecastConfig()
    now = to_local_naive(now or datetime.now())
    rng = rng or random.Random(config.seed)

    records = as_record_list(readings)
    data_points = len(records)
    if not records and devices:
        records = readings_from_devices(devices, now)
        logger.info(f"No readings supplied, using {len(records)} active device(s) as readings")

    normalized = normalize_readings(records, now)
    # device stand-ins never count as metered history
    is_real = data_points > config.real_data_threshold
    if not is_real:
        logger.info(
            f"Only {data_points} metered readings, falling back to synthetic load bands where unmatched"
        )

    history = filter_outliers(normalized, config.min_filter_samples, config.iqr_multiplier)
    logger.debug(f"Forecast pipeline: {data_points} raw, {len(normalized)} normalized, {len(history)} kept")

    predictions = generate_hourly_predictions(history, now, rng, config.horizon_hours)
    return Forecast(
        hourly_predictions=predictions,
        daily_summary=summarize_daily(predictions),
        is_based_on_real_data=is_real,
        data_points=data_points,
        generated_at=now,
        recent_history=generate_recent_history(now, config.history_hours, rng) if include_history else None,
    )
