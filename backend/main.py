import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import Annotated, List, Optional
from fastapi import Depends, FastAPI, File, UploadFile, Path, Query, HTTPException
from fastapi.middleware.cors import CORSMiddleware

import config
from database import get_db, init_db, insert_readings
from errors import InvalidRangeError, StorageError
from formatting import format_current
from history import load_history
from load_data import parse_line
from logging_config import configure_logging
from repository import SampleRepository, get_repository
from samples import MAX_DEVICE_ID
from schemas import CurrentReading, HistoryPoint, ReadingIn, Stats, UploadResult

configure_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize the database
    init_db()
    yield

app = FastAPI(title="Sensor History API", lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

DeviceId = Annotated[int, Path(ge=0, le=MAX_DEVICE_ID, description="Integer device id (48 bit)")]

def _storage_failure(e: StorageError) -> HTTPException:
    return HTTPException(status_code=500, detail=e.detail())

@app.get("/")
async def root():
    """Root endpoint to check if the API is running."""
    return {"message": "Sensor history API is running"}

@app.get("/history/{device_id}", response_model=List[HistoryPoint])
def get_history(
    device_id: DeviceId,
    range_start: int = Query(..., alias="rangeStart", description="Epoch milliseconds"),
    range_end: int = Query(..., alias="rangeEnd", description="Epoch milliseconds"),
    smooth: bool = False,
    window: Optional[int] = Query(None, description="Smoothing window (odd); defaults to SMOOTHING_WINDOW"),
    repository: SampleRepository = Depends(get_repository),
):
    """
    Readings of one device between rangeStart and rangeEnd, downsampled to
    about 20 points. With smooth=true a Savitzky-Golay filter is applied to
    the downsampled series; if it cannot run the unsmoothed series is returned.
    """
    try:
        return load_history(repository, device_id, range_start, range_end, smooth=smooth, window_size=window)
    except InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise _storage_failure(e)

@app.get("/current", response_model=List[CurrentReading])
def get_current_all(repository: SampleRepository = Depends(get_repository)):
    """Latest reading of every device."""
    try:
        latest = repository.latest_all()
    except StorageError as e:
        raise _storage_failure(e)
    return [format_current(device_id, sample) for device_id, sample in sorted(latest.items())]

@app.get("/current/{device_id}", response_model=CurrentReading)
def get_current(device_id: DeviceId, repository: SampleRepository = Depends(get_repository)):
    """Latest reading of one device."""
    try:
        sample = repository.latest(device_id)
    except StorageError as e:
        raise _storage_failure(e)
    if sample is None:
        raise HTTPException(status_code=404, detail=f"No readings for device {device_id}")
    return format_current(device_id, sample)

@app.post("/readings", status_code=201)
def add_reading(reading: ReadingIn):
    """Store a single reading pushed by a device."""
    try:
        with get_db() as conn:
            insert_readings(conn, [(reading.device_id, reading.time, reading.temperature, reading.humidity)])
    except sqlite3.Error as e:
        logger.exception("Failed to store reading for device %s", reading.device_id)
        raise _storage_failure(StorageError("failed to store reading", cause=e))
    return {"status": "success"}

@app.post("/upload", response_model=UploadResult)
async def upload_data(file: UploadFile = File(...)):
    """
    Upload a CSV file with columns: device_id,time,temperature,humidity
    The file can be large, so rows are inserted in batches.
    """
    if not file.filename.endswith('.csv'):
        raise HTTPException(status_code=400, detail="Only CSV files are supported")

    content = await file.read()
    try:
        lines = content.decode('utf-8').splitlines()
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")

    # Skip header; line numbers reported in `skipped` count it
    first_line_no = 1
    if lines and lines[0].replace(" ", "").lower().startswith("device_id,time"):
        lines = lines[1:]
        first_line_no = 2

    batch = []
    inserted = 0
    skipped = []

    try:
        with get_db() as conn:
            for line_no, line in enumerate(lines, start=first_line_no):
                if not line.strip():
                    continue
                try:
                    batch.append(parse_line(line))
                except ValueError:
                    skipped.append(line_no)
                    continue

                if len(batch) >= config.UPLOAD_BATCH_SIZE:
                    insert_readings(conn, batch)
                    inserted += len(batch)
                    batch = []

            # Insert any remaining records
            if batch:
                insert_readings(conn, batch)
                inserted += len(batch)
    except sqlite3.Error as e:
        logger.exception("CSV upload failed after %d rows", inserted)
        raise _storage_failure(StorageError("failed to store uploaded readings", cause=e))

    if skipped:
        logger.warning("CSV upload %s: skipped %d malformed lines", file.filename, len(skipped))

    return UploadResult(
        status="success",
        message=f"File uploaded and processed. {inserted} records inserted.",
        inserted=inserted,
        skipped=skipped,
    )

@app.get("/stats", response_model=Stats)
def get_stats(repository: SampleRepository = Depends(get_repository)):
    """
    Get basic statistics about the dataset.
    """
    try:
        return Stats(**repository.stats())
    except StorageError as e:
        raise _storage_failure(e)

# Run: uvicorn main:app --app-dir backend --host 0.0.0.0 --port 9001
