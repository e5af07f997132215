"""Shared fixtures: an in-memory repository and API clients."""

import pytest
from fastapi.testclient import TestClient

import config
from errors import StorageError
from main import app
from repository import SampleRepository, get_repository
from samples import Sample


class FakeRepository(SampleRepository):
    """In-memory repository that records every call."""

    def __init__(self, readings=None, fail_with=None):
        # readings: {device_id: [Sample, ...]} in any order
        self.readings = readings or {}
        self.fail_with = fail_with
        self.calls = []

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def fetch(self, device_id, range_start, range_end):
        self.calls.append(("fetch", device_id, range_start, range_end))
        self._maybe_fail()
        return [s for s in self.readings.get(device_id, []) if range_start <= s.time <= range_end]

    def latest(self, device_id):
        self.calls.append(("latest", device_id))
        self._maybe_fail()
        samples = self.readings.get(device_id)
        return max(samples, key=lambda s: s.time) if samples else None

    def latest_all(self):
        self.calls.append(("latest_all",))
        self._maybe_fail()
        return {d: max(s, key=lambda x: x.time) for d, s in self.readings.items() if s}

    def stats(self):
        self.calls.append(("stats",))
        self._maybe_fail()
        times = [s.time for samples in self.readings.values() for s in samples]
        return {
            "count": len(times),
            "devices": sum(1 for s in self.readings.values() if s),
            "min_time": min(times) if times else None,
            "max_time": max(times) if times else None,
        }


def ramp(n, start_time=0):
    """n samples with time, temperature and humidity all equal to i."""
    return [Sample(time=start_time + i, temperature=float(i), humidity=float(i)) for i in range(n)]


@pytest.fixture
def fake_repo():
    return FakeRepository()


@pytest.fixture
def client(fake_repo, tmp_path, monkeypatch):
    """Test client whose routes read from `fake_repo`."""
    monkeypatch.setattr(config, "DATABASE_URL", str(tmp_path / "fake.db"))
    app.dependency_overrides[get_repository] = lambda: fake_repo
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def db_client(tmp_path, monkeypatch):
    """Test client backed by a temporary SQLite database."""
    monkeypatch.setattr(config, "DATABASE_URL", str(tmp_path / "sensors.db"))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def broken_repo():
    return FakeRepository(fail_with=StorageError("database is locked", cause=RuntimeError("locked")))
