import logging
from typing import List, Optional

import config
from downsample import downsample, history_buckets
from errors import InvalidRangeError, StorageError
from formatting import format_point
from repository import SampleRepository
from samples import Sample
from smoothing import smooth_points

logger = logging.getLogger(__name__)

def fetch_range(repository: SampleRepository, device_id: int, range_start: int, range_end: int) -> List[Sample]:
    """
    Fetch a device's samples in [range_start, range_end], sorted by time.

    Raises:
        InvalidRangeError: range_start == range_end; the repository is not queried
        StorageError: the repository failed
    """
    if range_start == range_end:
        raise InvalidRangeError("rangeStart and rangeEnd must differ")

    try:
        samples = repository.fetch(device_id, range_start, range_end)
    except StorageError:
        raise
    except Exception as e:
        logger.exception("Repository raised while fetching device %s", device_id)
        raise StorageError("failed to fetch readings", cause=e) from e

    return sorted(samples or [], key=lambda s: s.time)

def load_history(
    repository: SampleRepository,
    device_id: int,
    range_start: int,
    range_end: int,
    smooth: bool = False,
    window_size: Optional[int] = None,
    polyorder: Optional[int] = None,
) -> List[dict]:
    """
    Run the history pipeline: fetch, downsample, optionally smooth, format.

    Args:
        repository: Source of samples
        device_id: Device to read
        range_start: Start of the range in epoch milliseconds
        range_end: End of the range in epoch milliseconds
        smooth: Apply the Savitzky-Golay filter to the downsampled series
        window_size: Filter window, defaults to config.SMOOTHING_WINDOW
        polyorder: Filter polynomial degree, defaults to config.SMOOTHING_POLYORDER

    Returns:
        list: Points as {time, temperature, humidity}
    """
    samples = fetch_range(repository, device_id, range_start, range_end)
    if not samples:
        return []

    buckets = history_buckets(len(samples), config.HISTORY_POINTS)
    points = downsample(samples, buckets)
    logger.debug("Device %s: %d samples reduced to %d points", device_id, len(samples), len(points))

    if smooth:
        outcome = smooth_points(
            points,
            window_size if window_size is not None else config.SMOOTHING_WINDOW,
            polyorder if polyorder is not None else config.SMOOTHING_POLYORDER,
        )
        if not outcome.smoothed:
            logger.info("Device %s: returning unsmoothed history (%s)", device_id, outcome.reason)
        points = outcome.points

    return [format_point(p) for p in points]
