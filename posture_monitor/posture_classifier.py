# posture_monitor/posture_classifier.py

import numpy as np
from dataclasses import dataclass
from enum import Enum
from math import acos, atan2, degrees
from typing import Optional


class PostureLabel(str, Enum):
    STANDING = 'standing'
    WALKING  = 'walking'
    SITTING  = 'sitting'
    LAYING   = 'laying'
    FALLING  = 'falling'   # only ever produced by PostureStabilizer

    def __str__(self):
        return self.value


# ── MediaPipe Pose topology ───────────────────────────────────────────────────
NUM_LANDMARKS = 33

NOSE           = 0
LEFT_SHOULDER  = 11
RIGHT_SHOULDER = 12
LEFT_HIP       = 23
RIGHT_HIP      = 24
LEFT_KNEE      = 25
RIGHT_KNEE     = 26
LEFT_ANKLE     = 27
RIGHT_ANKLE    = 28

# ── Thresholds (degrees unless noted) ────────────────────────────────────────
# torso angle: 90 = upright, 0 = horizontal
# leg bend   : 0 = straight leg, 180 = fully folded
LAYING_ANGLE   = 25.0
UPRIGHT_ANGLE  = 60.0
STRAIGHT_LEG   = 25.0
WALKING_LEG    = 65.0
FLAT_RATIO     = 1.4    # bbox width > height * FLAT_RATIO = horizontal silhouette

# Defaults used when the joints a signal depends on are missing.
# Both land in the "sitting" branch of classify().
MISSING_TORSO_ANGLE = 45.0
MISSING_LEG_BEND    = 180.0


@dataclass
class PostureSignals:
    torso_angle: float
    leg_bend:    float
    flat:        bool


# ── Geometry helpers ─────────────────────────────────────────────────────────

def _point(landmarks: np.ndarray, idx: int) -> Optional[np.ndarray]:
    """(x, y) of a joint, or None if the set is too short or the value is not finite."""
    if idx >= len(landmarks):
        return None
    xy = np.asarray(landmarks[idx, :2], dtype=np.float64)
    if not np.all(np.isfinite(xy)):
        return None
    return xy


def _midpoint(landmarks: np.ndarray, idx_a: int, idx_b: int) -> Optional[np.ndarray]:
    a = _point(landmarks, idx_a)
    b = _point(landmarks, idx_b)
    if a is None or b is None:
        return None
    return (a + b) / 2.0


def torso_angle(landmarks: np.ndarray) -> float:
    """Angle of the hip→shoulder vector above the horizontal axis, 0–90°."""
    shoulder = _midpoint(landmarks, LEFT_SHOULDER, RIGHT_SHOULDER)
    hip      = _midpoint(landmarks, LEFT_HIP, RIGHT_HIP)
    if shoulder is None or hip is None:
        return MISSING_TORSO_ANGLE

    dx, dy = shoulder - hip
    if dx == 0.0 and dy == 0.0:
        return MISSING_TORSO_ANGLE
    return degrees(atan2(abs(dy), abs(dx)))


def is_flat(landmarks: np.ndarray, ratio: float = FLAT_RATIO) -> bool:
    """
    True when the whole-body bounding box is much wider than tall.
    Catches sideways poses whose torso angle alone still looks upright.
    Not evaluated on a short (malformed) set.
    """
    if len(landmarks) < NUM_LANDMARKS:
        return False
    xy = np.asarray(landmarks[:, :2], dtype=np.float64)
    xy = xy[np.all(np.isfinite(xy), axis=1)]
    if len(xy) < 2:
        return False
    width  = float(xy[:, 0].max() - xy[:, 0].min())
    height = float(xy[:, 1].max() - xy[:, 1].min())
    return width > height * ratio


def knee_bend(landmarks: np.ndarray, hip_idx: int, knee_idx: int, ankle_idx: int) -> float:
    """
    How far one leg is from straight, in degrees.

    Interior knee angle from the law of cosines on the knee→hip and
    knee→ankle vectors; returned as 180 - interior so 0 = straight.
    """
    hip   = _point(landmarks, hip_idx)
    knee  = _point(landmarks, knee_idx)
    ankle = _point(landmarks, ankle_idx)
    if hip is None or knee is None or ankle is None:
        return MISSING_LEG_BEND

    thigh = hip - knee
    shin  = ankle - knee
    norm  = float(np.linalg.norm(thigh) * np.linalg.norm(shin))
    if norm == 0.0:
        return MISSING_LEG_BEND

    cos_interior = float(np.dot(thigh, shin)) / norm
    interior = degrees(acos(max(-1.0, min(1.0, cos_interior))))
    return 180.0 - interior


def leg_bend(landmarks: np.ndarray) -> float:
    """Bend of the straighter leg; one straight support leg is enough."""
    left  = knee_bend(landmarks, LEFT_HIP, LEFT_KNEE, LEFT_ANKLE)
    right = knee_bend(landmarks, RIGHT_HIP, RIGHT_KNEE, RIGHT_ANKLE)
    return min(left, right)


def compute_signals(landmarks: np.ndarray, flat_ratio: float = FLAT_RATIO) -> PostureSignals:
    landmarks = np.asarray(landmarks, dtype=np.float64)
    if landmarks.ndim != 2 or landmarks.shape[0] == 0:
        return PostureSignals(MISSING_TORSO_ANGLE, MISSING_LEG_BEND, False)
    return PostureSignals(
        torso_angle = torso_angle(landmarks),
        leg_bend    = leg_bend(landmarks),
        flat        = is_flat(landmarks, flat_ratio),
    )


# ── Classifier ───────────────────────────────────────────────────────────────

class PostureClassifier:
    """
    Stateless geometric posture classifier.

    Decision order (first match wins):
      1. torso < laying_angle  or flat silhouette      → laying
      2. torso ≥ upright_angle and bend < straight_leg  → standing
      3. torso ≥ upright_angle and bend < walking_leg   → walking
      4. anything else                                  → sitting
    """

    def __init__(
        self,
        laying_angle: float = LAYING_ANGLE,
        upright_angle: float = UPRIGHT_ANGLE,
        straight_leg: float = STRAIGHT_LEG,
        walking_leg: float = WALKING_LEG,
        flat_ratio: float = FLAT_RATIO,
    ):
        self.laying_angle  = laying_angle
        self.upright_angle = upright_angle
        self.straight_leg  = straight_leg
        self.walking_leg   = walking_leg
        self.flat_ratio    = flat_ratio

    def signals(self, landmarks) -> PostureSignals:
        return compute_signals(landmarks, self.flat_ratio)

    def label_for(self, signals: PostureSignals) -> PostureLabel:
        if signals.torso_angle < self.laying_angle or signals.flat:
            return PostureLabel.LAYING
        if signals.torso_angle >= self.upright_angle:
            if signals.leg_bend < self.straight_leg:
                return PostureLabel.STANDING
            if signals.leg_bend < self.walking_leg:
                return PostureLabel.WALKING
        return PostureLabel.SITTING

    def classify(self, landmarks) -> PostureLabel:
        return self.label_for(self.signals(landmarks))


_DEFAULT = PostureClassifier()


def classify(landmarks) -> PostureLabel:
    """Classify with the default thresholds. Never returns FALLING."""
    return _DEFAULT.classify(landmarks)
