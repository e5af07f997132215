import math
from typing import List, Sequence

from samples import AggregatePoint, Sample

def history_buckets(sample_count: int, points: int = 20) -> int:
    """
    Number of buckets the history endpoint asks for: `points`, capped at the
    number of samples so every chunk holds at least one sample.
    """
    return max(1, min(points, sample_count))

def _chunk_bounds(length: int, target_buckets: int):
    """
    Yield (start, end) slice bounds for each chunk.

    The cursor is a float stepped by length / target_buckets and floored at
    each step, so boundaries can drift by one element compared to an
    integer partition. When the float steps land just short of `length`, a
    final one-element chunk is produced.
    """
    chunk_size = length / target_buckets
    i = 0.0
    while math.floor(i) < length:
        yield math.floor(i), math.floor(i + chunk_size)
        i += chunk_size

def downsample(samples: Sequence[Sample], target_buckets: int) -> List[AggregatePoint]:
    """
    Reduce a time ordered sample sequence to about `target_buckets` points.

    Each point carries the time of the first sample of its chunk and the
    arithmetic mean temperature and humidity of the chunk.

    Args:
        samples: Samples ordered by time
        target_buckets: Number of chunks to split the samples into (>= 1)

    Returns:
        list: AggregatePoint per non-empty chunk, in order
    """
    if target_buckets < 1:
        raise ValueError(f"target_buckets must be >= 1, got {target_buckets}")
    if not samples:
        return []

    points = []
    for start, end in _chunk_bounds(len(samples), target_buckets):
        chunk = samples[start:end]
        # More buckets than samples gives fractional steps that can floor to an empty slice
        if not chunk:
            continue
        points.append(AggregatePoint(
            time=chunk[0].time,
            temperature=sum(s.temperature for s in chunk) / len(chunk),
            humidity=sum(s.humidity for s in chunk) / len(chunk),
        ))
    return points
