"""Tests for pattern fingerprinting."""

import re
import sys
from pathlib import Path

# Add server to path
sys.path.insert(0, str(Path(__file__).parent))

from hashgait.models import FeatureVector, TouchSample
from hashgait.services.feature_extractor import feature_extractor
from hashgait.services.pattern_hasher import (
    HASH_WIDTH,
    pattern_hasher,
    round_half_up,
    string_hash,
)


def make_features(**overrides):
    """Create a feature vector with neutral values."""
    values = {
        "avg_touch_pressure": 0.5,
        "avg_touch_duration": 100.0,
        "swipe_velocity": 0.0,
        "tap_frequency": 0.0,
        "device_motion_variance": 0.0,
        "gesture_complexity": 1.0,
    }
    values.update(overrides)
    return FeatureVector(**values)


def test_string_hash_known_values():
    """Matches the classic 31-multiplier string hash with 32-bit wraparound."""
    assert string_hash("") == 0
    assert string_hash("hello") == 99162322
    # Wraps exactly onto the most negative 32-bit integer
    assert string_hash("polygenelubricants") == -(2**31)


def test_hash_format():
    digest = pattern_hasher.generate_pattern_hash(make_features())

    assert len(digest) >= HASH_WIDTH
    assert re.fullmatch(r"[0-9a-f]+", digest)


def test_hash_is_deterministic():
    features = make_features(swipe_velocity=0.734, tap_frequency=1.2)

    assert pattern_hasher.generate_pattern_hash(features) == pattern_hasher.generate_pattern_hash(features)


def test_rounding_noise_collapses_to_same_hash():
    a = make_features(avg_touch_pressure=0.50001)
    b = make_features(avg_touch_pressure=0.49999)

    assert pattern_hasher.normalize(a) == pattern_hasher.normalize(b)
    assert pattern_hasher.generate_pattern_hash(a) == pattern_hasher.generate_pattern_hash(b)


def test_normalize_scales_duration_by_one():
    features = make_features(avg_touch_duration=123.4, gesture_complexity=1.2346)

    assert pattern_hasher.normalize(features) == [500, 123, 0, 0, 0, 1235]


def test_distinct_features_hash_differently():
    a = make_features()
    b = make_features(avg_touch_duration=250.0, swipe_velocity=0.1)

    assert pattern_hasher.generate_pattern_hash(a) != pattern_hasher.generate_pattern_hash(b)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(499.99) == 500
    assert round_half_up(float("inf")) == 0


def test_scenario_hash_is_stable():
    touches = [
        TouchSample(timestamp=0, x=0, y=0, pressure=0.5, kind="start"),
        TouchSample(timestamp=100, x=10, y=0, pressure=0.5, kind="move"),
        TouchSample(timestamp=200, x=20, y=0, pressure=0.5, kind="end", duration=200),
    ]

    first = pattern_hasher.generate_pattern_hash(feature_extractor.extract_features(touches, [], []))
    second = pattern_hasher.generate_pattern_hash(feature_extractor.extract_features(touches, [], []))

    assert first == second
