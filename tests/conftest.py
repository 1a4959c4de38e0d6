# tests/conftest.py
"""Synthetic MediaPipe-shaped skeletons, [33, 4] with full visibility."""

import numpy as np
import pytest

from posture_monitor.posture_classifier import (
    LEFT_ANKLE, LEFT_HIP, LEFT_KNEE, LEFT_SHOULDER, NOSE, NUM_LANDMARKS,
    RIGHT_ANKLE, RIGHT_HIP, RIGHT_KNEE, RIGHT_SHOULDER,
)


def build(points, fill):
    """points: {joint_index: (x, y)}; every other joint sits at `fill`."""
    arr = np.zeros((NUM_LANDMARKS, 4))
    arr[:, 0], arr[:, 1], arr[:, 3] = fill[0], fill[1], 1.0
    for idx, (x, y) in points.items():
        arr[idx, 0] = x
        arr[idx, 1] = y
    return arr


def standing_pose():
    return build({
        NOSE:           (0.50, 0.10),
        LEFT_SHOULDER:  (0.45, 0.25), RIGHT_SHOULDER: (0.55, 0.25),
        LEFT_HIP:       (0.46, 0.50), RIGHT_HIP:      (0.54, 0.50),
        LEFT_KNEE:      (0.46, 0.70), RIGHT_KNEE:     (0.54, 0.70),
        LEFT_ANKLE:     (0.46, 0.90), RIGHT_ANKLE:    (0.54, 0.90),
    }, fill=(0.50, 0.35))


def walking_pose():
    # Both shins swung 40° off the thigh line.
    return build({
        NOSE:           (0.50, 0.10),
        LEFT_SHOULDER:  (0.45, 0.25), RIGHT_SHOULDER: (0.55, 0.25),
        LEFT_HIP:       (0.46, 0.50), RIGHT_HIP:      (0.54, 0.50),
        LEFT_KNEE:      (0.46, 0.70), RIGHT_KNEE:     (0.54, 0.70),
        LEFT_ANKLE:     (0.5886, 0.8532), RIGHT_ANKLE: (0.6686, 0.8532),
    }, fill=(0.50, 0.35))


def sitting_pose():
    # Side view on a chair: thighs horizontal, shins vertical.
    return build({
        NOSE:           (0.46, 0.10),
        LEFT_SHOULDER:  (0.45, 0.25), RIGHT_SHOULDER: (0.47, 0.25),
        LEFT_HIP:       (0.45, 0.50), RIGHT_HIP:      (0.47, 0.50),
        LEFT_KNEE:      (0.65, 0.50), RIGHT_KNEE:     (0.67, 0.50),
        LEFT_ANKLE:     (0.65, 0.70), RIGHT_ANKLE:    (0.67, 0.70),
    }, fill=(0.46, 0.35))


def laying_pose():
    return build({
        NOSE:           (0.10, 0.80),
        LEFT_SHOULDER:  (0.25, 0.78), RIGHT_SHOULDER: (0.25, 0.82),
        LEFT_HIP:       (0.50, 0.78), RIGHT_HIP:      (0.50, 0.82),
        LEFT_KNEE:      (0.70, 0.78), RIGHT_KNEE:     (0.70, 0.82),
        LEFT_ANKLE:     (0.90, 0.78), RIGHT_ANKLE:    (0.90, 0.82),
    }, fill=(0.30, 0.80))


@pytest.fixture
def standing():
    return standing_pose()


@pytest.fixture
def walking():
    return walking_pose()


@pytest.fixture
def sitting():
    return sitting_pose()


@pytest.fixture
def laying():
    return laying_pose()


@pytest.fixture
def poses():
    return {
        'standing': standing_pose,
        'walking':  walking_pose,
        'sitting':  sitting_pose,
        'laying':   laying_pose,
    }
