"""
Savitzky-Golay smoothing of downsampled history series.

The filter fits a polynomial of degree `polyorder` to every full window of
`window_size` consecutive values by least squares and keeps the fitted value
at the window centre. Only full windows are evaluated; the result is then
padded at the trailing edge with copies of its last value so it lines up
with the input length. The leading edge is not padded.

Because of that, output k is the fit centred on input k + window_size // 2:
the smoothed curve is shifted earlier by half a window (two points at
window 5), and its last window_size - 1 values repeat the final fit.
"""
import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

import numpy as np

from errors import SmoothingError
from formatting import round_significant
from samples import AggregatePoint

logger = logging.getLogger(__name__)

@dataclass
class SmoothingOutcome:
    """Result of smoothing a series: either smoothed, or the input with a reason."""
    points: List[AggregatePoint]
    smoothed: bool
    reason: Optional[str] = None

def _check_window(length: int, window_size: int, polyorder: int):
    if window_size < 1 or window_size % 2 == 0:
        raise SmoothingError(f"window size must be a positive odd integer, got {window_size}")
    if polyorder < 0:
        raise SmoothingError(f"polynomial order must be >= 0, got {polyorder}")
    if window_size <= polyorder:
        raise SmoothingError(
            f"window size {window_size} must be greater than polynomial order {polyorder}"
        )
    if window_size > length:
        raise SmoothingError(f"window size {window_size} exceeds series length {length}")

def savgol_coefficients(window_size: int, polyorder: int) -> np.ndarray:
    """Weights that evaluate the least-squares polynomial at the window centre."""
    half = window_size // 2
    offsets = np.arange(-half, half + 1, dtype=float)
    # Vandermonde matrix: one column per polynomial power
    design = np.vander(offsets, polyorder + 1, increasing=True)
    # Row 0 of the pseudo-inverse gives the constant term, i.e. derivative order 0
    return np.linalg.pinv(design)[0]

def savitzky_golay(channel: Sequence[float], window_size: int, polyorder: int = 2) -> List[float]:
    """
    Smooth one channel.

    Raises:
        SmoothingError: window is even, not larger than polyorder, or longer
            than the channel
    """
    values = np.asarray(channel, dtype=float)
    _check_window(len(values), window_size, polyorder)

    coeffs = savgol_coefficients(window_size, polyorder)
    fitted = np.correlate(values, coeffs, mode="valid")
    padded = np.pad(fitted, (0, len(values) - len(fitted)), mode="edge")
    return padded.tolist()

def smooth_points(points: Sequence[AggregatePoint], window_size: int, polyorder: int = 2) -> SmoothingOutcome:
    """
    Smooth temperature and humidity independently, rounding results to 4
    significant digits.

    Never raises for filter problems: the unsmoothed points come back with
    `smoothed=False` and the reason is logged.
    """
    points = list(points)
    try:
        temperatures = savitzky_golay([p.temperature for p in points], window_size, polyorder)
        humidities = savitzky_golay([p.humidity for p in points], window_size, polyorder)
    except SmoothingError as e:
        logger.warning("Smoothing skipped for %d points (window=%d, polyorder=%d): %s",
                       len(points), window_size, polyorder, e)
        return SmoothingOutcome(points=points, smoothed=False, reason=str(e))

    smoothed = [
        replace(p, temperature=round_significant(t), humidity=round_significant(h))
        for p, t, h in zip(points, temperatures, humidities)
    ]
    return SmoothingOutcome(points=smoothed, smoothed=True)
