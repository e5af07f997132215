import math

import pytest

from downsample import _chunk_bounds, downsample, history_buckets
from samples import Sample

from conftest import ramp


class TestDownsample:

    def test_empty_input(self):
        assert downsample([], 5) == []

    @pytest.mark.parametrize("buckets", [0, -3])
    def test_rejects_non_positive_buckets(self, buckets):
        with pytest.raises(ValueError):
            downsample(ramp(10), buckets)

    def test_hundred_samples_into_twenty_points(self):
        points = downsample(ramp(100), 20)
        assert len(points) == 20
        for k, p in enumerate(points):
            assert p.time == 5 * k
            # mean of 5k .. 5k+4
            assert p.temperature == pytest.approx(5 * k + 2)
            assert p.humidity == pytest.approx(5 * k + 2)

    def test_time_taken_from_first_sample_not_averaged(self):
        samples = [Sample(time=t, temperature=1.0, humidity=2.0) for t in (10, 20, 90, 100)]
        points = downsample(samples, 2)
        assert [p.time for p in points] == [10, 90]

    def test_single_bucket_averages_everything(self):
        points = downsample(ramp(10), 1)
        assert len(points) == 1
        assert points[0].time == 0
        assert points[0].temperature == pytest.approx(4.5)

    def test_constant_channel_stays_constant(self):
        samples = [Sample(time=i, temperature=21.5, humidity=40.25) for i in range(57)]
        for p in downsample(samples, 7):
            assert p.temperature == 21.5
            assert p.humidity == 40.25

    @pytest.mark.parametrize("n", [1, 9, 10, 11, 33, 100, 137, 1001, 4999])
    def test_point_count_bounds_and_times(self, n):
        samples = ramp(n, start_time=1_700_000_000_000)
        buckets = max(1, math.floor(n / 20 + 0.5))
        points = downsample(samples, buckets)
        assert 1 <= len(points) <= buckets + 1
        input_times = {s.time for s in samples}
        assert all(p.time in input_times for p in points)
        assert [p.time for p in points] == sorted(p.time for p in points)

    def test_more_buckets_than_samples_skips_empty_chunks(self):
        points = downsample(ramp(3), 10)
        assert [p.time for p in points] == [0, 1, 2]

    def test_is_deterministic(self):
        samples = ramp(73)
        assert downsample(samples, 20) == downsample(samples, 20)


class TestChunkBounds:

    @pytest.mark.parametrize("length,buckets", [(100, 20), (33, 20), (100, 3), (7, 7), (1000, 17)])
    def test_chunks_are_contiguous_and_cover_input(self, length, buckets):
        bounds = list(_chunk_bounds(length, buckets))
        assert bounds[0][0] == 0
        for (_, prev_end), (start, _) in zip(bounds, bounds[1:]):
            assert start == prev_end
        assert bounds[-1][1] >= length

    def test_fractional_step_sizes(self):
        # 33 / 20 = 1.65: chunks alternate between one and two samples
        sizes = [end - start for start, end in _chunk_bounds(33, 20)]
        assert set(sizes) <= {1, 2}
        assert sum(min(end, 33) - start for start, end in _chunk_bounds(33, 20)) == 33


class TestHistoryBuckets:

    def test_default_is_twenty(self):
        assert history_buckets(1000) == 20

    def test_capped_by_sample_count(self):
        assert history_buckets(7) == 7

    def test_never_below_one(self):
        assert history_buckets(0) == 1
