"""Synthetic household load used when metered history is missing.

Values follow a time-of-day banding (quiet nights, a morning peak, a
moderate day and the evening high) with uniform jitter inside each band.
"""

import random
from datetime import datetime, timedelta

from wattcast.engine.forecast.rounding import round_half_up

# (start_hour, end_hour, base_watts, spread_watts); night wraps midnight
LOAD_BANDS = {
    "night": (23, 5, 300.0, 200.0),
    "morning": (5, 9, 1200.0, 400.0),
    "day": (9, 17, 800.0, 300.0),
    "evening": (17, 23, 1500.0, 500.0),
}


def band_for_hour(hour):
    """Name of the load band containing ``hour``."""
    hour = int(hour) % 24
    for name, (start, end, _, _) in LOAD_BANDS.items():
        if start < end:
            if start <= hour < end:
                return name
        elif hour >= start or hour < end:
            return name
    return "day"


def banded_default_wattage(hour, rng=None):
    """Plausible draw for ``hour`` with no history: band base plus jitter."""
    rng = rng or random.Random()
    _, _, base, spread = LOAD_BANDS[band_for_hour(hour)]
    return base + rng.random() * spread


def generate_recent_history(now=None, hours=12, rng=None):
    """Synthesize the ``hours`` hourly readings preceding ``now``.

    Returns oldest-first dicts with time, hour and actual_wattage keys.
    """
    rng = rng or random.Random()
    now = (now or datetime.now()).replace(minute=0, second=0, microsecond=0)
    history = []
    for offset in range(hours, 0, -1):
        point_time = now - timedelta(hours=offset)
        history.append({
            "time": point_time,
            "hour": point_time.hour,
            "actual_wattage": round_half_up(banded_default_wattage(point_time.hour, rng), 1),
        })
    return history
