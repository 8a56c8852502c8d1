"""Signal quality scoring for a single capture."""

from hashgait.models import FeatureVector
from hashgait.services.pattern_hasher import round_half_up


def _clamp(score: float) -> float:
    return max(0.0, min(100.0, score))


class ConfidenceScorer:
    """Map a feature vector to a 0-100 signal richness score.

    Independent of any stored reference; this is reported right after
    capture. High motion variance lowers the score.
    """

    def sub_scores(self, features: FeatureVector) -> dict[str, float]:
        return {
            "pressure": _clamp(features.avg_touch_pressure * 100),
            "duration": _clamp(features.avg_touch_duration / 5),
            "velocity": _clamp(features.swipe_velocity * 10),
            "tap_frequency": _clamp(features.tap_frequency * 20),
            "motion": _clamp(100 - features.device_motion_variance * 10),
            "complexity": _clamp(features.gesture_complexity * 20),
        }

    def calculate_confidence_score(self, features: FeatureVector) -> int:
        scores = self.sub_scores(features)
        return int(round_half_up(sum(scores.values()) / len(scores)))


# Singleton instance
confidence_scorer = ConfidenceScorer()
