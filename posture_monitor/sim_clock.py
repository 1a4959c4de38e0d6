# posture_monitor/sim_clock.py
"""
Simulated clock.

One real (video) second represents `speed_factor` simulated minutes:

    sim_time = start + t * speed_factor minutes

`start` is anchored once from VideoConfig when the clock is built and is
never re-derived, even if the caller later writes the running time back
into its own copy of the config.

All decomposition uses naive local calendar fields (no UTC conversion) so a
session that starts at 23:30 rolls over to the next local date, not to
whatever day UTC happens to be on.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from .config import VideoConfig

DURATION_UNIT = "hours"


class ClockAnchorError(ValueError):
    """startTime/date could not be parsed; the session cannot start."""


def parse_anchor(start_time: str, date: str) -> datetime:
    try:
        return datetime.strptime(f"{date.strip()} {start_time.strip()}", "%Y-%m-%d %H:%M")
    except (AttributeError, ValueError) as exc:
        raise ClockAnchorError(
            f"Cannot anchor simulation clock at date={date!r} startTime={start_time!r}: {exc}"
        ) from exc


def format_video_time(seconds: float) -> str:
    """Video position as MM:SS (minutes keep growing past 59)."""
    seconds = max(0.0, float(seconds))
    m = int(seconds // 60)
    s = int(seconds % 60)
    return f"{m:02d}:{s:02d}"


def playback_progress(elapsed: float, duration: float) -> float:
    """Percent played, clamped to 0–100. A zero duration counts as 1s."""
    return min(100.0, max(0.0, elapsed / (duration or 1) * 100.0))


class SimulatedClock:

    def __init__(self, config: VideoConfig):
        self.speed_factor = float(config.speed_factor)
        self.start = parse_anchor(config.start_time, config.date)

    def at(self, video_seconds: float) -> datetime:
        return self.start + timedelta(minutes=video_seconds * self.speed_factor)

    def timestamp(self, video_seconds: float) -> str:
        return self.at(video_seconds).strftime("%H:%M")

    def date(self, video_seconds: float) -> str:
        return self.at(video_seconds).strftime("%Y-%m-%d")

    def simulated_minutes(self, video_seconds: float) -> float:
        return video_seconds * self.speed_factor

    def duration_text(self, video_seconds: float) -> str:
        """Simulated elapsed time as 'H.MM hours'."""
        total = self.simulated_minutes(video_seconds)
        hours = math.floor(total / 60)
        minutes = math.floor(total % 60)
        return f"{hours}.{minutes:02d} {DURATION_UNIT}"

    def status(self, video_seconds: float) -> dict:
        """Payload pushed to the dashboard once per whole second."""
        return {
            "startTime":    self.timestamp(video_seconds),
            "date":         self.date(video_seconds),
            "durationText": self.duration_text(video_seconds),
        }
