"""Tests for forecast assembly: hourly slots, daily summary, full pipeline."""

import random
import time
from datetime import datetime, timedelta, timezone

import pytest

from wattcast.engine.config import ForecastConfig
from wattcast.engine.forecast import (
    generate_forecast,
    generate_hourly_predictions,
    slice_window,
    summarize_daily,
)
from wattcast.engine.forecast.aggregator import DEFAULT_DAILY_SUMMARY
from wattcast.engine.forecast.rounding import round_half_up
from wattcast.engine.forecast.synthetic import LOAD_BANDS, band_for_hour
from wattcast.engine.models import HourlyPrediction

ALLOWED_CONFIDENCES = {0.6, 0.65, 0.7, 0.8, 0.9}


def _prediction(watts, confidence, hour=0):
    return HourlyPrediction(
        time=datetime(2026, 2, 10, hour), hour=hour, day_of_week=2,
        predicted_wattage=watts, confidence=confidence,
    )


class TestHourlySlots:
    def test_slots_wrap_past_midnight(self):
        now = datetime(2026, 2, 10, 22, 15)  # Tuesday
        predictions = generate_hourly_predictions([], now, random.Random(0))
        assert len(predictions) == 24
        assert [p.hour for p in predictions[:4]] == [22, 23, 0, 1]
        assert [p.day_of_week for p in predictions[:4]] == [2, 2, 3, 3]
        assert predictions[0].time == datetime(2026, 2, 10, 22, 0)
        assert predictions[2].time == datetime(2026, 2, 11, 0, 0)

    def test_saturday_wraps_to_sunday(self):
        now = datetime(2026, 2, 14, 23, 0)  # Saturday
        predictions = generate_hourly_predictions([], now, random.Random(0))
        assert predictions[0].day_of_week == 6
        assert predictions[1].day_of_week == 0

    def test_aware_now_uses_local_wall_clock(self):
        local = datetime(2026, 2, 10, 14, 30)
        predictions = generate_hourly_predictions([], local.astimezone(timezone.utc), random.Random(0))
        assert predictions[0].hour == 14
        assert predictions[0].time == datetime(2026, 2, 10, 14, 0)
        assert predictions[0].time.tzinfo is None

    def test_time_advances_hourly(self):
        predictions = generate_hourly_predictions([], datetime(2026, 2, 10, 9, 30), random.Random(0))
        for i, p in enumerate(predictions):
            assert p.time == datetime(2026, 2, 10, 9) + timedelta(hours=i)


class TestSummarizeDaily:
    def test_totals(self):
        predictions = [_prediction(1000.0, 0.6), _prediction(1500.4, 0.9), _prediction(500.0, 0.65)]
        summary = summarize_daily(predictions)
        assert summary.total_kwh == 3.0
        assert summary.peak_wattage == 1500
        assert isinstance(summary.peak_wattage, int)
        assert summary.average_confidence == 0.72

    def test_peak_rounds_half_up(self):
        summary = summarize_daily([_prediction(1500.5, 0.6), _prediction(200.0, 0.6)])
        assert summary.peak_wattage == 1501

    def test_kwh_and_confidence_round_half_up(self):
        summary = summarize_daily([_prediction(1000.0, 0.625), _prediction(5.0, 0.625)])
        assert summary.total_kwh == 1.01
        assert summary.average_confidence == 0.63

    def test_empty_returns_default(self):
        summary = summarize_daily([])
        assert summary == DEFAULT_DAILY_SUMMARY
        assert (summary.total_kwh, summary.peak_wattage, summary.average_confidence) == (19.2, 1800, 0.6)


class TestGenerateForecast:
    @pytest.mark.parametrize("readings", [None, [], [{}], "garbage"])
    def test_always_24_predictions(self, readings, now, rng):
        forecast = generate_forecast(readings, now=now, rng=rng)
        assert len(forecast.hourly_predictions) == 24

    def test_large_history(self, now, make_reading):
        start = now - timedelta(days=42)
        readings = [make_reading(start + timedelta(hours=i), 300 + (i % 24) * 40) for i in range(1000)]
        forecast = generate_forecast(readings, now=now, rng=random.Random(1))
        assert len(forecast.hourly_predictions) == 24
        assert forecast.is_based_on_real_data
        assert forecast.data_points == 1000
        assert all(p.confidence in ALLOWED_CONFIDENCES for p in forecast.hourly_predictions)

    def test_empty_history_uses_load_bands(self, now, rng):
        forecast = generate_forecast([], now=now, rng=rng)
        assert forecast.is_based_on_real_data is False
        assert forecast.data_points == 0
        for p in forecast.hourly_predictions:
            _, _, base, spread = LOAD_BANDS[band_for_hour(p.hour)]
            assert base <= p.predicted_wattage <= base + spread
            assert p.confidence == 0.6

    def test_three_matching_readings(self, now, weekly_readings):
        readings = weekly_readings(now, 14, [500, 600, 700])
        forecast = generate_forecast(readings, now=now, rng=random.Random(0))
        slot = next(p for p in forecast.hourly_predictions if p.hour == 14)
        assert slot.day_of_week == 2
        assert slot.confidence == 0.8
        # (500*3 + 600*2 + 700*1) / 6
        assert slot.predicted_wattage == 566.7
        assert forecast.is_based_on_real_data is False
        assert forecast.data_points == 3

    def test_weighted_average_scenario(self, now, weekly_readings):
        readings = weekly_readings(now, 14, [100, 200, 300])
        forecast = generate_forecast(readings, now=now, rng=random.Random(0))
        slot = next(p for p in forecast.hourly_predictions if p.hour == 14)
        assert slot.predicted_wattage == 166.7

    def test_real_data_threshold(self, now, weekly_readings):
        five = weekly_readings(now, 10, [400] * 5)
        six = weekly_readings(now, 10, [400] * 6)
        assert generate_forecast(five, now=now).is_based_on_real_data is False
        assert generate_forecast(six, now=now).is_based_on_real_data is True

    def test_summary_matches_predictions(self, now, weekly_readings):
        readings = weekly_readings(now, 18, [1700, 1750, 1800, 1650, 1720, 1690, 9000])
        forecast = generate_forecast(readings, now=now, rng=random.Random(2))
        watts = [p.predicted_wattage for p in forecast.hourly_predictions]
        assert forecast.daily_summary.total_kwh == round_half_up(sum(watts) / 1000, 2)
        assert forecast.daily_summary.peak_wattage == round_half_up(max(watts))

    def test_outlier_excluded_from_prediction(self, now, weekly_readings):
        readings = weekly_readings(now, 18, [1700, 1700, 1700, 1700, 1700, 1700, 9000])
        forecast = generate_forecast(readings, now=now, rng=random.Random(2))
        slot = next(p for p in forecast.hourly_predictions if p.hour == 18)
        assert slot.predicted_wattage == 1700.0
        assert slot.confidence == 0.9

    def test_devices_stand_in_for_missing_readings(self, now):
        devices = [{"IsActive": True, "CurrentWattage": 250}, {"IsActive": False, "CurrentWattage": 4000}]
        forecast = generate_forecast([], now=now, rng=random.Random(0), devices=devices)
        first = forecast.hourly_predictions[0]
        assert first.hour == now.hour
        assert first.predicted_wattage == 250.0
        assert first.confidence == 0.65
        assert forecast.data_points == 0

    def test_predicted_wattage_rounds_half_up(self, now, weekly_readings):
        readings = weekly_readings(now, 14, [116.25])
        forecast = generate_forecast(readings, now=now, rng=random.Random(0))
        slot = next(p for p in forecast.hourly_predictions if p.hour == 14)
        assert slot.predicted_wattage == 116.3

    def test_aware_now_matches_local_history(self, now, weekly_readings):
        local_now = now.replace(hour=14)
        readings = weekly_readings(local_now, 14, [777])
        forecast = generate_forecast(readings, now=local_now.astimezone(timezone.utc), rng=random.Random(0))
        first = forecast.hourly_predictions[0]
        assert first.hour == 14
        assert first.predicted_wattage == 777.0
        assert first.time == datetime(2026, 2, 10, 14, 0)
        assert forecast.generated_at.tzinfo is None

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    def test_utc_now_in_new_york(self, new_york_tz):
        readings = [{"timestamp": "2026-02-03T14:00:00", "wattage": 777}]
        now = datetime(2026, 2, 10, 19, 0, tzinfo=timezone.utc)
        forecast = generate_forecast(readings, now=now, rng=random.Random(0))
        first = forecast.hourly_predictions[0]
        assert (first.hour, first.day_of_week) == (14, 2)
        assert first.predicted_wattage == 777.0

    def test_many_devices_are_not_real_data(self, now):
        devices = [{"IsActive": True, "CurrentWattage": 100 + i} for i in range(6)]
        forecast = generate_forecast([], now=now, rng=random.Random(0), devices=devices)
        assert forecast.data_points == 0
        assert forecast.is_based_on_real_data is False

    def test_seeded_config_is_reproducible(self, now):
        config = ForecastConfig(seed=99)
        a = generate_forecast(None, now=now, config=config)
        b = generate_forecast(None, now=now, config=config)
        assert [p.predicted_wattage for p in a.hourly_predictions] == [p.predicted_wattage for p in b.hourly_predictions]

    def test_include_history(self, now, rng):
        forecast = generate_forecast([], now=now, rng=rng, include_history=True)
        assert len(forecast.recent_history) == 12
        assert generate_forecast([], now=now, rng=rng).recent_history is None

    def test_to_dict_is_json_safe(self, now, rng):
        import json

        result = generate_forecast([], now=now, rng=rng, include_history=True).to_dict()
        decoded = json.loads(json.dumps(result))
        assert len(decoded["hourly_predictions"]) == 24
        assert decoded["daily_summary"]["peak_wattage"] > 0
        assert decoded["hourly_predictions"][0]["time"] == "2026-02-10T09:00:00"


class TestSliceWindow:
    def test_windows(self, now, rng):
        predictions = generate_forecast([], now=now, rng=rng).hourly_predictions
        assert len(slice_window(predictions, "6h")) == 6
        assert len(slice_window(predictions, "12h")) == 12
        assert len(slice_window(predictions, "24h")) == 24
        assert len(slice_window(predictions, "3d")) == 24
