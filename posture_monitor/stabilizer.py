# posture_monitor/stabilizer.py

import logging
from collections import deque
from typing import List, Optional

from .posture_classifier import PostureLabel

logger = logging.getLogger(__name__)

STABLE_FRAMES = 3    # identical raw labels needed before a change is confirmed
HISTORY_SIZE  = 5    # rolling history capacity

_UPRIGHT = (PostureLabel.STANDING, PostureLabel.WALKING)


class PostureStabilizer:
    """
    Debounces raw per-frame labels into confirmed posture transitions.

    Ordinary labels must repeat for `stable_frames` consecutive frames before
    they replace the confirmed posture. A raw LAYING straight after a
    confirmed STANDING/WALKING is relabelled FALLING and confirmed on that
    same frame. SITTING → LAYING is always a plain LAYING.
    """

    def __init__(
        self,
        stable_frames: int = STABLE_FRAMES,
        history_size: int = HISTORY_SIZE,
        initial: PostureLabel = PostureLabel.STANDING,
    ):
        if stable_frames < 1:
            raise ValueError(f"stable_frames must be >= 1, got {stable_frames!r}")
        if stable_frames > history_size:
            raise ValueError(
                f"stable_frames ({stable_frames}) cannot exceed history_size ({history_size})"
            )
        self.stable_frames = stable_frames
        self._initial      = initial
        self._history      = deque(maxlen=history_size)
        self._confirmed    = initial

    # ── Public API ────────────────────────────────────────────────────────────

    def update(self, raw: PostureLabel) -> Optional[PostureLabel]:
        """
        Feed one raw classification.
        Returns the newly confirmed label on a transition, otherwise None.
        """
        raw = PostureLabel(raw)

        # The initial STANDING is assumed, not seen: a fall also needs an
        # upright frame in the history, so a subject first seen on the floor
        # is reported as laying.
        if (raw is PostureLabel.LAYING
                and self._confirmed in _UPRIGHT
                and any(p in _UPRIGHT for p in self._history)):
            candidate = PostureLabel.FALLING
        else:
            candidate = raw

        self._history.append(candidate)

        if candidate is PostureLabel.FALLING:
            stable = True
        else:
            recent = list(self._history)[-self.stable_frames:]
            stable = (len(recent) >= self.stable_frames
                      and all(p is raw for p in recent))

        if not stable or candidate is self._confirmed:
            return None

        logger.info("Posture confirmed: %s -> %s", self._confirmed.value, candidate.value)
        self._confirmed = candidate
        return candidate

    @property
    def confirmed(self) -> PostureLabel:
        return self._confirmed

    @property
    def history(self) -> List[PostureLabel]:
        return list(self._history)

    @property
    def capacity(self) -> int:
        return self._history.maxlen

    def reset(self):
        self._history.clear()
        self._confirmed = self._initial
