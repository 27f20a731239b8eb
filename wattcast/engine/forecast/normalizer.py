"""Reading normalization from raw records to (hour, day_of_week, wattage).

Raw readings arrive from several sources (database rows, dashboard device
cards, hand-written JSON) that disagree on field names. Each semantic field
has an ordered tuple of accepted names; the first one present wins.
Malformed records are defaulted field-by-field rather than rejected.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import datetime

from wattcast.engine.models import NormalizedReading

logger = logging.getLogger(__name__)

TIMESTAMP_FIELDS = ("timestamp", "Timestamp", "time", "ts", "datetime", "recorded_at", "ReadingTime")
WATTAGE_FIELDS = ("wattage", "WattageReading", "watts", "power_w", "power", "value", "CurrentWattage")
DEVICE_ON_FIELDS = ("deviceIsOn", "IsDeviceOn", "device_is_on", "is_on")

DEVICE_ACTIVE_FIELDS = ("IsActive", "is_active")
DEVICE_CURRENT_FIELDS = ("CurrentWattage", "current_wattage")
DEVICE_RATING_FIELDS = ("WattageRating", "wattage_rating")

EPOCH_MILLIS_CUTOFF = 1e11  # larger epoch numbers are milliseconds


def _get_field(record, names):
    """Return the value of the first present alias, or None."""
    for name in names:
        if isinstance(record, Mapping):
            if name in record and record[name] is not None:
                return record[name]
        else:
            value = getattr(record, name, None)
            if value is not None:
                return value
    return None


def to_local_naive(dt):
    """Convert an aware datetime to naive local time; naive ones pass through."""
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def parse_timestamp(value, now):
    """Coerce a timestamp-like value to a naive local datetime.

    Accepts datetimes, ISO-8601 strings and epoch numbers. Anything else
    (including None) yields ``now``.
    """
    if value is None:
        return now
    try:
        if isinstance(value, datetime):
            dt = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            seconds = value / 1000 if abs(value) > EPOCH_MILLIS_CUTOFF else value
            return datetime.fromtimestamp(seconds)
        elif isinstance(value, str):
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            dt = datetime.fromisoformat(text)
        else:
            logger.debug(f"Unsupported timestamp type {type(value).__name__}, using now")
            return now
    except (ValueError, OverflowError, OSError):
        logger.debug(f"Unparseable timestamp {value!r}, using now")
        return now

    return to_local_naive(dt)


def parse_wattage(value):
    """Coerce a wattage-like value to a non-negative float (0 when unusable)."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        watts = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(watts) or math.isinf(watts) or watts < 0:
        return 0.0
    return watts


def as_record_list(records):
    """Materialize a record sequence; None, strings and mappings become []."""
    if records is None or isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Iterable):
        return []
    return list(records)


def day_of_week(dt):
    """Day index with 0 = Sunday."""
    return dt.isoweekday() % 7


def normalize_reading(record, now):
    ts = parse_timestamp(_get_field(record, TIMESTAMP_FIELDS), now)
    device_on = _get_field(record, DEVICE_ON_FIELDS)
    return NormalizedReading(
        hour=ts.hour,
        day_of_week=day_of_week(ts),
        wattage=parse_wattage(_get_field(record, WATTAGE_FIELDS)),
        timestamp=ts,
        device_is_on=bool(device_on) if device_on is not None else None,
    )


def normalize_readings(readings, now=None):
    """Normalize raw readings, preserving length and order.

    Args:
        readings: Sequence of dicts or objects, or None.
        now: Fallback timestamp for records without a usable one.

    Returns:
        List of NormalizedReading. Empty for None, empty or non-sequence input.
    """
    records = as_record_list(readings)
    if not records:
        return []
    now = to_local_naive(now or datetime.now())
    return [normalize_reading(r, now) for r in records]


def readings_from_devices(devices, now=None):
    """Build one synthetic reading per active device.

    Used when no metered history exists: the current draw of each active
    device stands in for a reading taken now.
    """
    records = as_record_list(devices)
    if not records:
        return []
    now = to_local_naive(now or datetime.now())
    readings = []
    for device in records:
        if not _get_field(device, DEVICE_ACTIVE_FIELDS):
            continue
        readings.append({
            "timestamp": now,
            "wattage": parse_wattage(
                _get_field(device, DEVICE_CURRENT_FIELDS) or _get_field(device, DEVICE_RATING_FIELDS)
            ),
            "deviceIsOn": True,
        })
    return readings
