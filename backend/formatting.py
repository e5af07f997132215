import logging
from datetime import datetime, timedelta, timezone

from samples import MAX_DEVICE_ID, Sample
from schemas import CurrentReading

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

def round_significant(value: float, digits: int = 4) -> float:
    """Round to `digits` significant digits (1234.567 -> 1235.0, 0.0123456 -> 0.01235)."""
    return float(f"{value:.{digits}g}")

def format_device_id(device_id: int) -> str:
    """Render a device id as colon separated hex bytes, e.g. 255 -> 00:00:00:00:00:FF."""
    if device_id < 0 or device_id > MAX_DEVICE_ID:
        raise ValueError(f"device id {device_id} does not fit in 48 bits")
    digits = f"{device_id:012X}"
    return ":".join(digits[i:i + 2] for i in range(0, 12, 2))

def epoch_ms_to_datetime(time_ms: int) -> datetime:
    """UTC datetime for an epoch-ms value; raises OverflowError outside years 1..9999."""
    return EPOCH + timedelta(milliseconds=time_ms)

def format_point(point) -> dict:
    return {"time": point.time, "temperature": point.temperature, "humidity": point.humidity}

def format_current(device_id: int, sample: Sample) -> CurrentReading:
    """Public latest-reading shape; `date` is None when `time` has no calendar date."""
    try:
        date = epoch_ms_to_datetime(sample.time)
    except (OverflowError, ValueError):
        logger.warning("Device %s: time %s cannot be shown as a date", device_id, sample.time)
        date = None
    return CurrentReading(
        id=device_id,
        id_formatted=format_device_id(device_id),
        time=sample.time,
        date=date,
        temperature=sample.temperature,
        humidity=sample.humidity,
    )
