"""Pattern-matching wattage prediction over normalized history.

A target (hour, day_of_week) is matched against history in three tiers:
exact hour and day, then same hour on any day, then a banded default.

Matches are averaged with weight N - i for the i-th match in input order,
so the first match carries weight N and the last carries weight 1. With
chronological input this favours older readings. Dashboards built on these
numbers depend on that weighting; keep it unless they change too.
"""

from wattcast.engine.forecast.synthetic import banded_default_wattage


def find_patterns(history, hour, day=None):
    """Readings at ``hour`` (and ``day`` when given), in input order."""
    return [
        r for r in history
        if r.hour == hour and (day is None or r.day_of_week == day)
    ]


def weighted_average(values):
    n = len(values)
    total_weight = n * (n + 1) / 2
    weighted_sum = sum(value * (n - i) for i, value in enumerate(values))
    return weighted_sum / total_weight


def predict_wattage(history, target_hour, target_day, rng=None):
    """Expected wattage for one hour-slot. Never returns None."""
    patterns = find_patterns(history, target_hour, target_day)
    if not patterns:
        patterns = find_patterns(history, target_hour)
    if not patterns:
        return banded_default_wattage(target_hour, rng)
    return weighted_average([p.wattage for p in patterns])
