# posture_monitor/__init__.py
"""
posture_monitor
===============
Posture classification and event triggering for a senior-safety monitor.

Public API
----------
MonitoringSession   — main entry point; feed it landmarks + video time per tick
TickResult          — dataclass returned by MonitoringSession.process_tick()
VideoConfig         — start time / date / speed factor of one playback
MonitorSettings     — tunable thresholds (MonitorSettings.from_env() reads .env)
SimulationEvent     — one confirmed posture transition
PostureLabel        — standing | walking | sitting | laying | falling

Individual components (use directly only if you need fine-grained control):
LandmarkSmoother    — EMA jitter filter over landmark arrays
PostureClassifier   — geometric posture rules (never returns falling)
PostureStabilizer   — 3-frame debouncer with fast fall path
SimulatedClock      — video seconds → simulated wall clock
EventEmitter        — builds SimulationEvents and hands them to a sink
EventLogger         — append-only event log, optional JSON-lines file
SittingMonitor      — prolonged-sitting wellness reminder

The MediaPipe landmark source lives in posture_monitor.pose_estimator and is
imported on demand.

Typical usage
-------------
    from posture_monitor import MonitoringSession, VideoConfig
    from posture_monitor.pose_estimator import PoseEstimator
    import cv2

    session   = MonitoringSession(VideoConfig(start_time='08:00', date='2021-12-19'))
    estimator = PoseEstimator()
    cap = cv2.VideoCapture('clip.mp4')

    while True:
        ret, frame = cap.read()
        if not ret:
            break
        t = cap.get(cv2.CAP_PROP_POS_MSEC) / 1000.0
        result = session.process_tick(estimator.process_frame(frame), t, frame)
        if result.event:
            print(result.event.to_dict())

    session.end()
    estimator.close()
    cap.release()
"""

from .config             import MonitorSettings, VideoConfig
from .event_logger       import EventLogger
from .events             import EventEmitter, SimulationEvent, capture_snapshot
from .posture_classifier import PostureClassifier, PostureLabel, PostureSignals, classify
from .session            import MonitoringSession, TickResult
from .sim_clock          import ClockAnchorError, SimulatedClock
from .sitting_monitor    import SittingMonitor, WellnessNotification
from .smoother           import LandmarkSmoother
from .stabilizer         import PostureStabilizer

__all__ = [
    'MonitoringSession',
    'TickResult',
    'VideoConfig',
    'MonitorSettings',
    'SimulationEvent',
    'PostureLabel',
    'PostureSignals',
    'LandmarkSmoother',
    'PostureClassifier',
    'PostureStabilizer',
    'SimulatedClock',
    'ClockAnchorError',
    'EventEmitter',
    'EventLogger',
    'SittingMonitor',
    'WellnessNotification',
    'capture_snapshot',
    'classify',
]

__version__ = '0.1.0'
