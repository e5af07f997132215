from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from samples import MAX_DEVICE_ID, MAX_TIME_MS, MIN_TIME_MS

class HistoryPoint(BaseModel):
    """Schema for a single (possibly aggregated) history point."""
    time: int
    temperature: float
    humidity: float

class CurrentReading(BaseModel):
    """Schema for the latest reading of a device."""
    id: int
    id_formatted: str = Field(..., description="Device id as colon separated hex bytes")
    time: int
    date: Optional[datetime] = None
    temperature: float
    humidity: float

class ReadingIn(BaseModel):
    """Schema for a single reading pushed by a device."""
    device_id: int = Field(..., ge=0, le=MAX_DEVICE_ID)
    time: int = Field(..., ge=MIN_TIME_MS, le=MAX_TIME_MS, description="Epoch milliseconds")
    temperature: float = Field(..., allow_inf_nan=False)
    humidity: float = Field(..., allow_inf_nan=False)

class Stats(BaseModel):
    """Schema for dataset statistics."""
    count: int
    devices: int = 0
    min_time: Optional[int] = None
    max_time: Optional[int] = None

class UploadResult(BaseModel):
    status: str
    message: str
    inserted: int
    skipped: List[int] = []
