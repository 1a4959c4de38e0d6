# posture_monitor/session.py

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .config import MonitorSettings, VideoConfig
from .event_logger import EventLogger
from .events import EventEmitter, SimulationEvent
from .posture_classifier import PostureClassifier, PostureLabel, PostureSignals
from .sim_clock import SimulatedClock
from .sitting_monitor import SittingMonitor, WellnessNotification
from .smoother import LandmarkSmoother
from .stabilizer import PostureStabilizer

logger = logging.getLogger(__name__)


# ── Result dataclass ──────────────────────────────────────────────────────────

@dataclass
class TickResult:
    """
    Everything one process_tick() call produced.

    processed    : False when the tick was skipped (paused or ended)
    raw          : classifier output, None when no person was detected
    confirmed    : confirmed posture after this tick
    event        : SimulationEvent emitted on this tick, if any
    notification : wellness reminder raised on this tick, if any
    signals      : geometric signals behind `raw`, None when no person
    """
    processed    : bool
    raw          : Optional[PostureLabel]
    confirmed    : PostureLabel
    event        : Optional[SimulationEvent] = None
    notification : Optional[WellnessNotification] = None
    signals      : Optional[PostureSignals] = None


class MonitoringSession:
    """
    All mutable state for one camera / one playback.

    Per tick:
      • LandmarkSmoother   — EMA over the landmark array
      • PostureClassifier  — geometry → raw label
      • PostureStabilizer  — debounce + fast fall path
      • EventEmitter       — simulated timestamp + snapshot → event sink
      • SittingMonitor     — once per whole video second

    The scheduler (frame callback, timer, test loop) calls process_tick();
    calls are serialized so the order-sensitive history is never reordered.

    Usage
    -----
        session = MonitoringSession(VideoConfig(start_time='08:00', date='2021-12-19'))
        while playing:
            landmarks = estimator.process_frame(frame)
            result = session.process_tick(landmarks, video_seconds, frame)
        session.end()
    """

    def __init__(
        self,
        config: VideoConfig,
        settings: Optional[MonitorSettings] = None,
        event_sink: Optional[Callable[[SimulationEvent], None]] = None,
        on_posture_change: Optional[Callable[[PostureLabel], None]] = None,
        on_config_update: Optional[Callable[[dict], None]] = None,
        on_notification: Optional[Callable[[WellnessNotification], None]] = None,
    ):
        self.settings = settings or MonitorSettings()
        self.event_sink = event_sink if event_sink is not None else EventLogger()

        self._on_posture_change = on_posture_change
        self._on_config_update  = on_config_update
        self._on_notification   = on_notification

        s = self.settings
        self._classifier = PostureClassifier(
            laying_angle  = s.laying_angle,
            upright_angle = s.upright_angle,
            straight_leg  = s.straight_leg,
            walking_leg   = s.walking_leg,
            flat_ratio    = s.flat_ratio,
        )
        self._smoother   = LandmarkSmoother(alpha=s.smoothing_alpha)
        self._stabilizer = PostureStabilizer(
            stable_frames = s.stable_frames,
            history_size  = s.history_size,
        )
        self._sitting = SittingMonitor(
            alert_minutes   = s.sitting_alert_min,
            display_seconds = s.notify_display_sec,
        )

        self._lock = threading.Lock()
        self._start(config)

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def _start(self, config: VideoConfig):
        # Anchor first: a bad startTime/date must fail before any state changes.
        clock = SimulatedClock(config)

        self.config      = config
        self.clock       = clock
        self._emitter    = EventEmitter(clock, self.event_sink, self.settings.snapshot_quality)
        self._playing    = True
        self._ended      = False
        self._last_second: Optional[int] = 0
        self._last_status: Optional[dict] = None

        self._smoother.reset()
        self._stabilizer.reset()
        self._sitting.reset()

        logger.info(
            "Session started | camera=%s | start=%s %s | speed=%sx",
            config.camera_name, config.date, config.start_time, config.speed_factor,
        )

    def restart(self, config: VideoConfig):
        """Begin a new playback: re-anchor the clock and drop all posture state."""
        with self._lock:
            self._start(config)
            if isinstance(self.event_sink, EventLogger):
                self.event_sink.reset()

    def pause(self):
        self._playing = False
        logger.info("Session paused")

    def resume(self):
        with self._lock:
            if self._ended:
                return
            self._playing = True
            # Playback may resume elsewhere; the next tick re-syncs the second.
            self._last_second = None
        logger.info("Session resumed")

    def end(self):
        """No further events after this. Safe to call more than once."""
        with self._lock:
            if self._ended:
                return
            self._ended = True
            self._playing = False
        logger.info("Session ended | camera=%s", self.config.camera_name)

    @property
    def is_playing(self) -> bool:
        return self._playing and not self._ended

    @property
    def ended(self) -> bool:
        return self._ended

    # ── Main entry point ──────────────────────────────────────────────────────

    def process_tick(
        self,
        landmarks: Optional[np.ndarray],
        video_seconds: float,
        frame: Optional[np.ndarray] = None,
    ) -> TickResult:
        """
        Run one frame through the pipeline.

        landmarks     : [N, 4] array from the landmark source, None if no person
        video_seconds : elapsed video time, monotonic within the session
        frame         : BGR frame for the event snapshot (optional)
        """
        with self._lock:
            if not self.is_playing:
                return TickResult(processed=False, raw=None,
                                  confirmed=self._stabilizer.confirmed)

            result = self._detect(landmarks, video_seconds, frame)
            result.notification, status = self._clock_tick(video_seconds)

        # Hooks run unlocked so they may call end(), pause() or restart().
        self._dispatch(result, status)
        return result

    def set_video_duration(self, seconds: float):
        """Report total clip length as simulated duration text."""
        if self._on_config_update is not None:
            self._on_config_update({"durationText": self.clock.duration_text(seconds)})

    # ── Read-only state ───────────────────────────────────────────────────────

    @property
    def confirmed_posture(self) -> PostureLabel:
        return self._stabilizer.confirmed

    @property
    def posture_history(self):
        return self._stabilizer.history

    @property
    def sitting_seconds(self) -> float:
        return self._sitting.sitting_seconds

    def active_notification(self) -> Optional[WellnessNotification]:
        return self._sitting.active_notification()

    # ── Private helpers ───────────────────────────────────────────────────────

    def _detect(self, landmarks, video_seconds, frame) -> TickResult:
        smoothed = self._smoother.smooth(landmarks)
        if smoothed is None:
            return TickResult(processed=True, raw=None,
                              confirmed=self._stabilizer.confirmed)

        signals = self._classifier.signals(smoothed)
        raw = self._classifier.label_for(signals)
        logger.debug(
            "raw=%s torso=%.1f bend=%.1f flat=%s",
            raw.value, signals.torso_angle, signals.leg_bend, signals.flat,
        )

        event = None
        confirmed = self._stabilizer.update(raw)
        if confirmed is not None:
            event = self._emitter.emit(confirmed, video_seconds, frame)

        return TickResult(
            processed = True,
            raw       = raw,
            confirmed = self._stabilizer.confirmed,
            event     = event,
            signals   = signals,
        )

    def _clock_tick(self, video_seconds: float):
        """
        Sitting accounting and status, once per whole video second.

        Returns (notification, status) where status is the config update to
        push, or None when it did not change.
        """
        second = math.floor(video_seconds)
        last = self._last_second
        if second == last:
            return None, None
        self._last_second = second

        notification = None
        if last is not None and second > last:
            # One step per second change: a forward seek is not sitting time.
            notification = self._sitting.tick(
                self._stabilizer.confirmed, self.clock.speed_factor,
            )
        # else: first tick after resume, or a backwards seek; re-sync only.

        status = self.clock.status(video_seconds)
        if status == self._last_status:
            return notification, None
        self._last_status = status
        return notification, dict(status)

    def _dispatch(self, result: TickResult, status: Optional[dict]):
        if result.event is not None and self._on_posture_change is not None:
            self._on_posture_change(result.event.type)
        if result.notification is not None and self._on_notification is not None:
            self._on_notification(result.notification)
        if status is not None and self._on_config_update is not None:
            self._on_config_update(status)
