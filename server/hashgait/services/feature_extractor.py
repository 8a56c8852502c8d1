"""Feature extraction service for touch and motion captures."""

from typing import Sequence

import numpy as np

from hashgait.models import FeatureVector, MotionSample, TouchSample

# Order matters: hashing and CSV export both follow it
FEATURE_NAMES = [
    "avg_touch_pressure",
    "avg_touch_duration",
    "swipe_velocity",
    "tap_frequency",
    "device_motion_variance",
    "gesture_complexity",
]

DEFAULT_PRESSURE = 0.5
DEFAULT_DURATION_MS = 100.0
DEFAULT_COMPLEXITY = 1.0
MIN_SPAN_SECONDS = 1.0


class FeatureExtractor:
    """Reduce a capture window into a fixed six-dimensional feature vector."""

    def extract_features(
        self,
        touch_events: Sequence[TouchSample],
        accelerometer_data: Sequence[MotionSample],
        gyroscope_data: Sequence[MotionSample],
    ) -> FeatureVector:
        """
        Extract the feature vector for one capture.

        Pure function of its inputs. Sparse or empty streams fall back to
        neutral defaults so the result is always hashable.
        """
        touches = list(touch_events)

        return FeatureVector(
            avg_touch_pressure=self._avg_pressure(touches),
            avg_touch_duration=self._avg_duration(touches),
            swipe_velocity=self._swipe_velocity(touches),
            tap_frequency=self._tap_frequency(touches),
            device_motion_variance=self._motion_variance(accelerometer_data, gyroscope_data),
            gesture_complexity=self._gesture_complexity(touches),
        )

    def _avg_pressure(self, touches: list[TouchSample]) -> float:
        pressures = np.array([t.pressure for t in touches], dtype=np.float64)
        pressures = pressures[pressures > 0]
        if len(pressures) == 0:
            return DEFAULT_PRESSURE
        return float(np.mean(pressures))

    def _avg_duration(self, touches: list[TouchSample]) -> float:
        durations = np.array(
            [t.duration for t in touches if t.duration is not None], dtype=np.float64
        )
        durations = durations[durations > 0]
        if len(durations) == 0:
            return DEFAULT_DURATION_MS
        return float(np.mean(durations))

    def _swipe_velocity(self, touches: list[TouchSample]) -> float:
        """Mean pixel/ms speed over consecutive move-move segments."""
        if len(touches) < 2:
            return 0.0

        segments = self._segment_lengths(touches)
        elapsed = np.diff(np.array([t.timestamp for t in touches], dtype=np.float64))
        is_move = np.array([t.kind == "move" for t in touches])

        mask = is_move[:-1] & is_move[1:]
        # Zero or negative elapsed time cannot yield a speed
        mask &= elapsed > 0
        if not mask.any():
            return 0.0

        return float(np.mean(segments[mask] / elapsed[mask]))

    def _tap_frequency(self, touches: list[TouchSample]) -> float:
        taps = sum(1 for t in touches if t.kind == "start")
        if taps == 0:
            return 0.0
        span_seconds = (touches[-1].timestamp - touches[0].timestamp) / 1000.0
        return taps / max(span_seconds, MIN_SPAN_SECONDS)

    def _motion_variance(
        self,
        accelerometer_data: Sequence[MotionSample],
        gyroscope_data: Sequence[MotionSample],
    ) -> float:
        magnitudes = np.array(
            [s.magnitude for s in accelerometer_data] + [s.magnitude for s in gyroscope_data],
            dtype=np.float64,
        )
        if len(magnitudes) == 0:
            return 0.0

        with np.errstate(invalid="ignore", over="ignore"):
            variance = float(np.var(magnitudes))
        if not np.isfinite(variance):
            return 0.0
        return variance

    def _gesture_complexity(self, touches: list[TouchSample]) -> float:
        if len(touches) < 2:
            return DEFAULT_COMPLEXITY

        start, end = touches[0], touches[-1]
        direct_distance = float(np.hypot(end.x - start.x, end.y - start.y))
        if direct_distance <= 0:
            return DEFAULT_COMPLEXITY

        path_length = float(np.sum(self._segment_lengths(touches)))
        return path_length / direct_distance

    def _segment_lengths(self, touches: list[TouchSample]) -> np.ndarray:
        """Euclidean pixel distance between each consecutive pair of touches."""
        coords = np.array([[t.x, t.y] for t in touches], dtype=np.float64)
        deltas = np.diff(coords, axis=0)
        return np.hypot(deltas[:, 0], deltas[:, 1])

    def features_to_array(self, features: FeatureVector) -> np.ndarray:
        """Convert features to a numpy row in FEATURE_NAMES order."""
        row = [getattr(features, name) for name in FEATURE_NAMES]
        return np.array([row], dtype=np.float64)


# Singleton instance
feature_extractor = FeatureExtractor()
