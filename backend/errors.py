from typing import Optional


class SensorApiError(Exception):
    """Base class for errors raised by the history pipeline."""


class InvalidRangeError(SensorApiError):
    """The requested time range cannot be queried (client error)."""


class StorageError(SensorApiError):
    """The sample repository failed; the original exception is kept as `cause`."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def detail(self) -> dict:
        return {"message": self.message, "cause": repr(self.cause) if self.cause else None}


class SmoothingError(SensorApiError):
    """The smoothing filter cannot run on the given channel."""
