import os

# SQLite database file holding the readings table
DATABASE_URL = os.environ.get("SENSOR_DB", "sensors.db")

# Number of points a history response is reduced to
HISTORY_POINTS = int(os.environ.get("HISTORY_POINTS", "20"))

# Savitzky-Golay settings used when ?smooth=true
SMOOTHING_WINDOW = int(os.environ.get("SMOOTHING_WINDOW", "5"))
SMOOTHING_POLYORDER = int(os.environ.get("SMOOTHING_POLYORDER", "2"))

UPLOAD_BATCH_SIZE = int(os.environ.get("UPLOAD_BATCH_SIZE", "100000"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def allowed_origins():
    """Parse ALLOWED_ORIGINS (comma separated) into a list for the CORS middleware."""
    raw = os.environ.get("ALLOWED_ORIGINS", "*")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]
