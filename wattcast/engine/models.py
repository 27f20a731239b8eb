"""Data models for the energy forecasting pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class NormalizedReading:
    """One reading reduced to its time-of-week position and wattage."""

    hour: int  # 0-23, local time
    day_of_week: int  # 0-6, 0 = Sunday
    wattage: float
    timestamp: datetime | None = None
    device_is_on: bool | None = None


@dataclass(frozen=True)
class HourlyPrediction:
    """Predicted draw for one future hour-slot."""

    time: datetime
    hour: int
    day_of_week: int
    predicted_wattage: float  # rounded to 1 decimal
    confidence: float  # 0.0-1.0
    lower_bound: float = 0.0
    upper_bound: float = 0.0
    confidence_label: str = "low"

    def to_dict(self):
        return {
            "time": self.time.isoformat(),
            "hour": self.hour,
            "day_of_week": self.day_of_week,
            "predicted_wattage": self.predicted_wattage,
            "confidence": self.confidence,
            "confidence_label": self.confidence_label,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
        }


@dataclass(frozen=True)
class DailyForecastSummary:
    """Totals over a day of hourly predictions."""

    total_kwh: float
    peak_wattage: int
    average_confidence: float

    def to_dict(self):
        return {
            "total_kwh": self.total_kwh,
            "peak_wattage": self.peak_wattage,
            "average_confidence": self.average_confidence,
        }


@dataclass
class Forecast:
    """Result of a full forecast run."""

    hourly_predictions: list[HourlyPrediction]
    daily_summary: DailyForecastSummary
    is_based_on_real_data: bool
    data_points: int
    generated_at: datetime = field(default_factory=datetime.now)
    recent_history: list[dict] | None = None

    def to_dict(self):
        result = {
            "generated_at": self.generated_at.isoformat(),
            "is_based_on_real_data": self.is_based_on_real_data,
            "data_points": self.data_points,
            "daily_summary": self.daily_summary.to_dict(),
            "hourly_predictions": [p.to_dict() for p in self.hourly_predictions],
        }
        if self.recent_history is not None:
            result["recent_history"] = [
                {**point, "time": point["time"].isoformat()} for point in self.recent_history
            ]
        return result
