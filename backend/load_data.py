import logging
import math
import sys
import time

import config
from database import get_db, init_db, insert_readings
from logging_config import configure_logging
from samples import MAX_DEVICE_ID, MAX_TIME_MS, MIN_TIME_MS

logger = logging.getLogger(__name__)

EXPECTED_HEADER = "device_id,time,temperature,humidity"

def parse_line(line):
    """
    Parse one CSV line into a (device_id, time, temperature, humidity) tuple.

    Raises:
        ValueError: wrong column count, unparsable numbers, non-finite
            values, or a device id / time outside the storable range
    """
    parts = line.strip().split(',')
    if len(parts) < 4:
        raise ValueError(f"expected 4 columns, got {len(parts)}")
    device_id, time_ms = int(parts[0]), int(parts[1])
    temperature, humidity = float(parts[2]), float(parts[3])
    if not 0 <= device_id <= MAX_DEVICE_ID:
        raise ValueError(f"device id {device_id} does not fit in 48 bits")
    if not MIN_TIME_MS <= time_ms <= MAX_TIME_MS:
        raise ValueError(f"time {time_ms} is outside the supported range")
    if not (math.isfinite(temperature) and math.isfinite(humidity)):
        raise ValueError("temperature and humidity must be finite")
    return device_id, time_ms, temperature, humidity

def load_data_from_csv(csv_file_path, batch_size=config.UPLOAD_BATCH_SIZE):
    """
    Load readings from a CSV file into the database.

    Args:
        csv_file_path: Path to the CSV file
        batch_size: Number of records to insert in a single batch

    Returns:
        int: Number of rows inserted
    """
    logger.info("Loading readings from %s", csv_file_path)
    start_time = time.time()

    init_db()

    total_rows = 0
    batch = []

    with open(csv_file_path, 'r') as file:
        header = file.readline()
        if not header.strip().startswith(EXPECTED_HEADER):
            logger.warning("CSV file does not have the expected header. Continuing anyway.")
            file.seek(0)

        with get_db() as conn:
            for line in file:
                if not line.strip():
                    continue
                try:
                    batch.append(parse_line(line))
                except ValueError as e:
                    logger.warning("Skipping line %r: %s", line.strip(), e)
                    continue

                if len(batch) >= batch_size:
                    insert_readings(conn, batch)
                    total_rows += len(batch)
                    logger.info("Inserted %d rows so far...", total_rows)
                    batch = []

            # Insert any remaining records
            if batch:
                insert_readings(conn, batch)
                total_rows += len(batch)

    logger.info("Loaded %d rows in %.2f seconds", total_rows, time.time() - start_time)

    with get_db() as conn:
        count, devices, min_time, max_time = conn.execute(
            "SELECT COUNT(*), COUNT(DISTINCT device_id), MIN(time), MAX(time) FROM readings"
        ).fetchone()
        logger.info("Database now holds %d readings from %d devices, time %s to %s",
                    count, devices, min_time, max_time)

    return total_rows

if __name__ == "__main__":
    configure_logging()
    load_data_from_csv(sys.argv[1] if len(sys.argv) > 1 else "../readings.csv")
