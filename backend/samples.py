from dataclasses import dataclass

@dataclass(frozen=True)
class Sample:
    time: int  # epoch milliseconds
    temperature: float
    humidity: float

@dataclass(frozen=True)
class AggregatePoint:
    time: int  # time of the first sample in the chunk
    temperature: float
    humidity: float

MAX_DEVICE_ID = 0xFFFFFFFFFFFF  # 48 bits, 12 hex digits

# Epoch milliseconds representable as a datetime: 0001-01-01 .. 9999-12-31T23:59:59.999 UTC
MIN_TIME_MS = -62_135_596_800_000
MAX_TIME_MS = 253_402_300_799_999
