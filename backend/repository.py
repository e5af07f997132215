import logging
import sqlite3
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from database import get_db
from errors import StorageError
from samples import Sample

logger = logging.getLogger(__name__)

class SampleRepository(ABC):
    """Read access to stored readings. Implementations raise StorageError on failure."""

    @abstractmethod
    def fetch(self, device_id: int, range_start: int, range_end: int) -> List[Sample]:
        """Samples of one device with range_start <= time <= range_end, in any order."""

    @abstractmethod
    def latest(self, device_id: int) -> Optional[Sample]:
        """Most recent sample of a device, or None if it has none."""

    @abstractmethod
    def latest_all(self) -> Dict[int, Sample]:
        """Most recent sample of every device, keyed by device id."""

    @abstractmethod
    def stats(self) -> dict:
        """count, devices, min_time and max_time over all readings."""

def _row_to_sample(row) -> Sample:
    return Sample(time=int(row["time"]), temperature=float(row["temperature"]), humidity=float(row["humidity"]))

class SqliteSampleRepository(SampleRepository):
    """Repository over the `readings` table, one connection per call."""

    def fetch(self, device_id, range_start, range_end):
        try:
            with get_db() as conn:
                cursor = conn.execute("""
                    SELECT time, temperature, humidity
                    FROM readings
                    WHERE device_id = ? AND time >= ? AND time <= ?
                    ORDER BY time
                """, (device_id, range_start, range_end))
                return [_row_to_sample(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            logger.exception("Range query failed for device %s", device_id)
            raise StorageError("failed to fetch readings", cause=e) from e

    def latest(self, device_id):
        try:
            with get_db() as conn:
                row = conn.execute("""
                    SELECT time, temperature, humidity
                    FROM readings
                    WHERE device_id = ?
                    ORDER BY time DESC, id DESC
                    LIMIT 1
                """, (device_id,)).fetchone()
        except sqlite3.Error as e:
            logger.exception("Latest reading query failed for device %s", device_id)
            raise StorageError("failed to fetch latest reading", cause=e) from e
        return _row_to_sample(row) if row else None

    def latest_all(self):
        try:
            with get_db() as conn:
                # Ties on the newest time resolve to the last inserted row
                rows = conn.execute("""
                    SELECT r.device_id, r.time, r.temperature, r.humidity
                    FROM readings r
                    WHERE r.id = (
                        SELECT id FROM readings
                        WHERE device_id = r.device_id
                        ORDER BY time DESC, id DESC
                        LIMIT 1
                    )
                    ORDER BY r.device_id
                """).fetchall()
        except sqlite3.Error as e:
            logger.exception("Latest readings query failed")
            raise StorageError("failed to fetch latest readings", cause=e) from e
        return {int(row["device_id"]): _row_to_sample(row) for row in rows}

    def stats(self):
        try:
            with get_db() as conn:
                row = conn.execute("""
                    SELECT
                        COUNT(*) as count,
                        COUNT(DISTINCT device_id) as devices,
                        MIN(time) as min_time,
                        MAX(time) as max_time
                    FROM readings
                """).fetchone()
        except sqlite3.Error as e:
            logger.exception("Stats query failed")
            raise StorageError("failed to compute stats", cause=e) from e
        return dict(row)

def get_repository() -> SampleRepository:
    """FastAPI dependency; tests override it with an in-memory repository."""
    return SqliteSampleRepository()
