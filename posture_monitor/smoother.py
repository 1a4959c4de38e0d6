# posture_monitor/smoother.py

import numpy as np
from typing import Optional

DEFAULT_ALPHA = 0.35   # weight of the newest frame; lower = steadier, higher = snappier


class LandmarkSmoother:
    """
    Exponential moving average over successive landmark arrays.

    Every field (x, y, z, visibility) of every joint is blended:
        result = current * alpha + previous * (1 - alpha)

    The baseline is adopted verbatim (no blending) when there is no previous
    frame or the joint count changed, and dropped entirely when no person is
    detected, so a reacquired subject never inherits stale coordinates.
    """

    def __init__(self, alpha: float = DEFAULT_ALPHA):
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha!r}")
        self.alpha = float(alpha)
        self._last: Optional[np.ndarray] = None

    def smooth(self, current) -> Optional[np.ndarray]:
        """
        current : array-like [N, 4] or None.
        Returns the smoothed [N, 4] array, or None when current is None.
        """
        if current is None:
            self._last = None
            return None

        current = np.asarray(current, dtype=np.float64)

        if self._last is None or self._last.shape != current.shape:
            self._last = current.copy()
            return self._last.copy()

        result = current * self.alpha + self._last * (1.0 - self.alpha)
        self._last = result
        return result.copy()

    @property
    def baseline(self) -> Optional[np.ndarray]:
        return None if self._last is None else self._last.copy()

    def reset(self):
        self._last = None
