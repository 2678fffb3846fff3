"""
Smoothing recurrences shared by the indicators.

All recurrences are seeded with the simple average of their first ``period``
inputs and run forward over the window handed to them. Simple averages use
``math.fsum``, which is exactly rounded and therefore independent of input
order and accumulated error.
"""

import math
from typing import Optional

import numpy as np


def simple_average(values: np.ndarray) -> float:
    """Exactly rounded arithmetic mean."""
    return math.fsum(values) / len(values)


def exponential_series(
    values: np.ndarray, period: int, alpha: Optional[float] = None
) -> np.ndarray:
    """
    Exponential moving average of ``values``.

    Args:
        values: Input series
        period: Seed length; also sets ``alpha = 2 / (period + 1)`` when
            ``alpha`` is not given
        alpha: Smoothing factor override

    Returns:
        Array aligned with ``values``; entries before ``period - 1`` are NaN
    """
    if alpha is None:
        alpha = 2.0 / (period + 1)
    result = np.full(len(values), np.nan)
    if len(values) < period:
        return result

    current = simple_average(values[:period])
    result[period - 1] = current
    for i in range(period, len(values)):
        current = alpha * values[i] + (1.0 - alpha) * current
        result[i] = current
    return result


def wilder_series(values: np.ndarray, period: int) -> np.ndarray:
    """Wilder's smoothing, an exponential average with ``alpha = 1 / period``."""
    return exponential_series(values, period, alpha=1.0 / period)


def true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """
    True range for every bar after the first.

    Returns:
        Array of length ``len(closes) - 1``
    """
    previous_close = closes[:-1]
    return np.maximum.reduce(
        [
            highs[1:] - lows[1:],
            np.abs(highs[1:] - previous_close),
            np.abs(lows[1:] - previous_close),
        ]
    )
