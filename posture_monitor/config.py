# posture_monitor/config.py
"""
Session and tuning configuration.

VideoConfig      — what the playback layer hands us when a session starts
MonitorSettings  — every tunable threshold, overridable from a .env file

Environment variables (all optional)
------------------------------------
    POSTURE_SMOOTHING_ALPHA      EMA factor for landmark smoothing   (0.35)
    POSTURE_LAYING_ANGLE         torso angle below which = laying    (25)
    POSTURE_UPRIGHT_ANGLE        torso angle at/above which = upright (60)
    POSTURE_STRAIGHT_LEG         leg bend below which = standing     (25)
    POSTURE_WALKING_LEG          leg bend below which = walking      (65)
    POSTURE_FLAT_RATIO           bbox width/height ratio for flat    (1.4)
    POSTURE_STABLE_FRAMES        identical frames to confirm a label (3)
    POSTURE_HISTORY_SIZE         rolling history capacity            (5)
    POSTURE_SITTING_ALERT_MIN    simulated minutes before wellness   (45)
    POSTURE_NOTIFY_DISPLAY_SEC   wall-clock seconds a notice stays   (6)
    POSTURE_SNAPSHOT_QUALITY     JPEG quality of event snapshots     (50)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass
class VideoConfig:
    start_time: str          # "HH:MM", simulated wall clock at video time 0
    date: str                # "YYYY-MM-DD"
    speed_factor: float = 1  # simulated minutes per real/video second
    video_url: str | None = None
    camera_name: str = "Demo camera"
    id: str = ""
    duration_text: str | None = None

    def __post_init__(self):
        if self.speed_factor < 1:
            raise ValueError(
                f"speed_factor must be >= 1, got {self.speed_factor!r}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "VideoConfig":
        """Build from the camelCase record used by the dashboard."""
        for key in ("startTime", "date"):
            if data.get(key) is None:
                raise ValueError(f"video config is missing {key!r}")

        key = "speedFactor" if "speedFactor" in data else "speed"
        speed = data.get(key, 1)
        try:
            speed = float(speed)
        except (TypeError, ValueError):
            raise ValueError(f"{key}={speed!r} is not a number") from None

        return cls(
            start_time=data["startTime"],
            date=data["date"],
            speed_factor=speed,
            video_url=data.get("videoUrl"),
            camera_name=data.get("cameraName", "Demo camera"),
            id=data.get("id", ""),
            duration_text=data.get("durationText"),
        )


@dataclass
class MonitorSettings:
    smoothing_alpha: float = 0.35
    laying_angle: float = 25.0
    upright_angle: float = 60.0
    straight_leg: float = 25.0
    walking_leg: float = 65.0
    flat_ratio: float = 1.4
    stable_frames: int = 3
    history_size: int = 5
    sitting_alert_min: float = 45.0
    notify_display_sec: float = 6.0
    snapshot_quality: int = 50

    def __post_init__(self):
        if not 0.0 < self.smoothing_alpha <= 1.0:
            raise ValueError(
                f"smoothing_alpha must be in (0, 1], got {self.smoothing_alpha!r}"
            )
        if self.stable_frames > self.history_size:
            raise ValueError(
                "stable_frames cannot exceed history_size "
                f"({self.stable_frames} > {self.history_size})"
            )

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> "MonitorSettings":
        """
        Load overrides from the environment.

        Parameters
        ----------
        dotenv_path : str | None
            Optional explicit path to a .env file.
            If None, python-dotenv searches upward from the current directory.
        """
        load_dotenv(dotenv_path=dotenv_path, override=False)

        overrides = {}
        for f in fields(cls):
            raw = os.environ.get(f"POSTURE_{f.name.upper()}", "")
            if raw == "":
                continue
            cast = int if f.type in ("int", int) else float
            try:
                overrides[f.name] = cast(raw)
            except ValueError:
                raise ValueError(
                    f"POSTURE_{f.name.upper()}={raw!r} is not a valid {cast.__name__}"
                ) from None

        if overrides:
            logger.info("Settings overridden from environment: %s", overrides)
        return cls(**overrides)
