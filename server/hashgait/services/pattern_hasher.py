"""Pattern fingerprinting for feature vectors.

Not a cryptographic digest. Features are scaled and rounded first so that
floating point noise collapses onto the same fingerprint.
"""

import math

from hashgait.models import FeatureVector

HASH_WIDTH = 8

# Duration is already in ms, everything else keeps three decimals
FEATURE_SCALES = {
    "avg_touch_pressure": 1000,
    "avg_touch_duration": 1,
    "swipe_velocity": 1000,
    "tap_frequency": 1000,
    "device_motion_variance": 1000,
    "gesture_complexity": 1000,
}


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves toward positive infinity."""
    if not math.isfinite(value):
        # Scaling a huge component can overflow to inf
        return 0
    return math.floor(value + 0.5)


def string_hash(text: str) -> int:
    """Polynomial rolling hash (multiplier 31) with signed 32-bit wraparound."""
    h = 0
    for char in text:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


class PatternHasher:
    """Digest a feature vector into a short hexadecimal fingerprint."""

    def normalize(self, features: FeatureVector) -> list[int]:
        """Scaled, rounded integer form of the features."""
        return [
            round_half_up(getattr(features, name) * scale)
            for name, scale in FEATURE_SCALES.items()
        ]

    def generate_pattern_hash(self, features: FeatureVector) -> str:
        canonical = "".join(str(n) for n in self.normalize(features))
        return format(abs(string_hash(canonical)), "x").zfill(HASH_WIDTH)


# Singleton instance
pattern_hasher = PatternHasher()
