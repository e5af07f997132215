import sqlite3
from contextlib import contextmanager

import config

def get_connection():
    """Get a SQLite connection with appropriate settings."""
    conn = sqlite3.connect(config.DATABASE_URL)
    conn.row_factory = sqlite3.Row
    return conn

@contextmanager
def get_db():
    """Context manager for database connections."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    """Initialize the database with required tables."""
    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute('''
        CREATE TABLE IF NOT EXISTS readings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            device_id INTEGER NOT NULL,
            time INTEGER NOT NULL,
            temperature REAL NOT NULL,
            humidity REAL NOT NULL
        )
        ''')

        # Range queries are always per device and bounded by time
        cursor.execute('''
        CREATE INDEX IF NOT EXISTS idx_readings_device_time ON readings(device_id, time)
        ''')

        conn.commit()

def insert_readings(conn, rows):
    """Insert (device_id, time, temperature, humidity) tuples and commit."""
    conn.executemany(
        "INSERT INTO readings (device_id, time, temperature, humidity) VALUES (?, ?, ?, ?)",
        rows
    )
    conn.commit()
