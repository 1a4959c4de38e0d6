# posture_monitor/sitting_monitor.py

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .posture_classifier import PostureLabel

logger = logging.getLogger(__name__)

SITTING_ALERT_MIN  = 45     # simulated minutes of continuous sitting before a reminder
NOTIFY_DISPLAY_SEC = 6.0    # wall-clock seconds a reminder stays on screen

WELLNESS_MESSAGE = (
    "You have been sitting for {minutes} minutes. "
    "Time to stand up and stretch."
)


@dataclass
class WellnessNotification:
    message        : str
    sitting_seconds: float   # simulated seconds of sitting when raised
    raised_at      : float   # wall clock (monotonic)
    expires_at     : float

    def is_active(self, now: float) -> bool:
        return now < self.expires_at


class SittingMonitor:
    """
    Accumulates continuous sitting time on the simulated clock.

    Call tick() once per whole video second while playing. Each second of
    sitting adds speed_factor * 60 simulated seconds; any other posture
    resets the streak. One reminder per streak once the threshold is reached.
    The reminder expires on wall-clock time, independently of the streak.
    """

    def __init__(
        self,
        alert_minutes: float = SITTING_ALERT_MIN,
        display_seconds: float = NOTIFY_DISPLAY_SEC,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.threshold_s     = float(alert_minutes) * 60.0
        self.display_seconds = float(display_seconds)
        self._clock          = clock

        self._sitting_s    = 0.0
        self._has_notified = False
        self._notification: Optional[WellnessNotification] = None

    # ── Public API ────────────────────────────────────────────────────────────

    def tick(
        self,
        posture: PostureLabel,
        speed_factor: float,
        seconds: int = 1,
    ) -> Optional[WellnessNotification]:
        """
        posture      : current confirmed posture
        speed_factor : simulated minutes per real second
        seconds      : whole video seconds elapsed since the previous tick
        Returns a freshly raised WellnessNotification, otherwise None.
        """
        if PostureLabel(posture) is not PostureLabel.SITTING:
            if self._sitting_s > 0 or self._has_notified:
                logger.debug("Sitting streak ended after %.0f simulated s", self._sitting_s)
            self.reset()
            return None

        self._sitting_s += seconds * speed_factor * 60.0

        if self._sitting_s >= self.threshold_s and not self._has_notified:
            self._has_notified = True
            now = self._clock()
            minutes = int(self._sitting_s // 60)
            self._notification = WellnessNotification(
                message         = WELLNESS_MESSAGE.format(minutes=minutes),
                sitting_seconds = self._sitting_s,
                raised_at       = now,
                expires_at      = now + self.display_seconds,
            )
            logger.info("Wellness reminder raised after %d simulated minutes of sitting", minutes)
            return self._notification

        return None

    def active_notification(self) -> Optional[WellnessNotification]:
        """The reminder currently on screen, or None once it has expired."""
        if self._notification is None:
            return None
        if not self._notification.is_active(self._clock()):
            self._notification = None
        return self._notification

    @property
    def sitting_seconds(self) -> float:
        return self._sitting_s

    @property
    def has_notified(self) -> bool:
        return self._has_notified

    def reset(self):
        self._sitting_s    = 0.0
        self._has_notified = False
        self._notification = None
