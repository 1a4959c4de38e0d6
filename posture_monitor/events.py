# posture_monitor/events.py

from __future__ import annotations

import base64
import logging
import uuid
from dataclasses import asdict, dataclass
from typing import Callable, Optional

import cv2
import numpy as np

from .posture_classifier import PostureLabel
from .sim_clock import SimulatedClock

logger = logging.getLogger(__name__)

SNAPSHOT_QUALITY = 50   # JPEG quality of the thumbnail attached to each event

DESCRIPTIONS = {
    PostureLabel.FALLING:  "Sudden postural collapse detected (Critical)",
    PostureLabel.STANDING: "Subject is in a stable upright position",
    PostureLabel.WALKING:  "Subject is moving in the supervised area",
    PostureLabel.SITTING:  "Subject is in a stable sitting posture",
    PostureLabel.LAYING:   "Subject is resting in a horizontal position",
}
DEFAULT_DESCRIPTION = "Activity pattern detected"


@dataclass(frozen=True)
class SimulationEvent:
    """
    One confirmed posture transition, stamped in simulated time.

    id           : uuid4 string
    type         : confirmed PostureLabel
    timestamp    : 'HH:MM' simulated clock
    date         : 'YYYY-MM-DD' simulated calendar date
    description  : fixed text for the label
    snapshot_url : JPEG data URL of the frame, '' if capture failed
    is_critical  : True only for falls
    duration     : optional human-readable duration, unset by the emitter
    """
    id           : str
    type         : PostureLabel
    timestamp    : str
    date         : str
    description  : str
    snapshot_url : str
    is_critical  : bool
    duration     : Optional[str] = None

    def to_dict(self) -> dict:
        """camelCase record as consumed by the dashboard / event log."""
        data = asdict(self)
        return {
            "id":          data["id"],
            "type":        self.type.value,
            "timestamp":   data["timestamp"],
            "date":        data["date"],
            "description": data["description"],
            "snapshotUrl": data["snapshot_url"],
            "isCritical":  data["is_critical"],
            "duration":    data["duration"],
        }


def describe(label: PostureLabel) -> str:
    return DESCRIPTIONS.get(label, DEFAULT_DESCRIPTION)


def capture_snapshot(frame: Optional[np.ndarray], quality: int = SNAPSHOT_QUALITY) -> str:
    """
    Encode a BGR frame as a base64 JPEG data URL.

    Best effort: a missing or undecodable frame gives '' and never raises,
    a missing thumbnail must not block the event.
    """
    if frame is None:
        return ""
    try:
        ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
        if not ok:
            logger.warning("Snapshot generation failed: encoder returned no data")
            return ""
        return "data:image/jpeg;base64," + base64.b64encode(buf.tobytes()).decode("ascii")
    except Exception as exc:
        logger.warning("Snapshot generation failed: %s", exc)
        return ""


class EventEmitter:
    """
    Turns confirmed transitions into SimulationEvent records and hands
    them to `sink` (append-only; no dedup, no overwrite).
    """

    def __init__(
        self,
        clock: SimulatedClock,
        sink: Callable[[SimulationEvent], None],
        snapshot_quality: int = SNAPSHOT_QUALITY,
    ):
        self.clock = clock
        self.sink = sink
        self.snapshot_quality = snapshot_quality

    def emit(
        self,
        label: PostureLabel,
        video_seconds: float,
        frame: Optional[np.ndarray] = None,
    ) -> SimulationEvent:
        label = PostureLabel(label)
        event = SimulationEvent(
            id           = str(uuid.uuid4()),
            type         = label,
            timestamp    = self.clock.timestamp(video_seconds),
            date         = self.clock.date(video_seconds),
            description  = describe(label),
            snapshot_url = capture_snapshot(frame, self.snapshot_quality),
            is_critical  = label is PostureLabel.FALLING,
        )

        if event.is_critical:
            logger.warning("FALL DETECTED | %s %s | video=%.2fs",
                           event.date, event.timestamp, video_seconds)
        else:
            logger.info("Event | %s | %s %s", label.value, event.date, event.timestamp)

        self.sink(event)
        return event
