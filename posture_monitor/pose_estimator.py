# posture_monitor/pose_estimator.py

import cv2
import mediapipe as mp
import numpy as np


class PoseEstimator:
    """
    Landmark source: single-person MediaPipe Pose.

    process_frame() returns np.ndarray [33, 4] (x, y, z, visibility) in
    normalised [0,1] image coords, or None if nobody is in the frame.
    Unlike a fall model's input filter, low-visibility joints are passed
    through untouched; the posture classifier degrades on its own.
    """

    def __init__(self, model_complexity: int = 1, min_confidence: float = 0.5):
        self.mp_pose = mp.solutions.pose
        self.pose = self.mp_pose.Pose(
            static_image_mode=False,
            model_complexity=model_complexity,
            min_detection_confidence=min_confidence,
            min_tracking_confidence=min_confidence,
        )
        self._last_results = None

    def process_frame(self, frame_bgr):
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.pose.process(rgb)
        self._last_results = results

        if not results.pose_landmarks:
            return None

        lm = results.pose_landmarks.landmark
        return np.array([[p.x, p.y, p.z, p.visibility] for p in lm])

    def draw(self, frame_bgr):
        """Draw the skeleton from the last processed frame onto frame_bgr, in place."""
        results = self._last_results
        if results is None or not results.pose_landmarks:
            return
        mp.solutions.drawing_utils.draw_landmarks(
            frame_bgr,
            results.pose_landmarks,
            self.mp_pose.POSE_CONNECTIONS,
        )

    def close(self):
        self.pose.close()
