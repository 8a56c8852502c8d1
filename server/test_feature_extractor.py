"""
Tests for touch/motion feature extraction.
Covers the per-feature algorithms and the defaults used for sparse captures.
"""

import math
import sys
from pathlib import Path

import pytest

# Add server to path
sys.path.insert(0, str(Path(__file__).parent))

from hashgait.models import FeatureVector, MotionSample, TouchSample
from hashgait.services.feature_extractor import FEATURE_NAMES, feature_extractor


def touch(t, x, y, kind, pressure=0.5, duration=None):
    """Create a touch sample."""
    return TouchSample(timestamp=t, x=x, y=y, pressure=pressure, kind=kind, duration=duration)


def motion(t, x, y, z):
    """Create a motion sample."""
    return MotionSample(timestamp=t, x=x, y=y, z=z)


def test_empty_capture_uses_defaults():
    """Three empty streams still yield a well-formed vector."""
    features = feature_extractor.extract_features([], [], [])

    assert features.avg_touch_pressure == 0.5
    assert features.avg_touch_duration == 100
    assert features.swipe_velocity == 0
    assert features.tap_frequency == 0
    assert features.device_motion_variance == 0
    assert features.gesture_complexity == 1


def test_short_swipe_scenario():
    """start -> move -> end along the x axis, no motion samples.

    A single move sample forms no move-move pair, so there is no swipe speed.
    """
    touches = [
        touch(0, 0, 0, "start"),
        touch(100, 10, 0, "move"),
        touch(200, 20, 0, "end", duration=200),
    ]

    features = feature_extractor.extract_features(touches, [], [])

    assert features.swipe_velocity == 0
    assert features.gesture_complexity == pytest.approx(1.0)
    assert features.tap_frequency == pytest.approx(1.0)
    assert features.avg_touch_pressure == pytest.approx(0.5)
    assert features.avg_touch_duration == pytest.approx(200)
    assert features.device_motion_variance == 0


def test_swipe_velocity_uses_move_move_pairs():
    """Only move-move segments count when the stroke has them."""
    touches = [
        touch(0, 0, 0, "start"),
        touch(100, 10, 0, "move"),
        touch(200, 30, 0, "move"),
        touch(300, 90, 0, "end", duration=300),
    ]

    features = feature_extractor.extract_features(touches, [], [])

    # Single move-move pair: 20px in 100ms
    assert features.swipe_velocity == pytest.approx(0.2)


def test_swipe_velocity_skips_zero_elapsed_pairs():
    touches = [
        touch(0, 0, 0, "move"),
        touch(0, 10, 0, "move"),
        touch(10, 20, 0, "move"),
    ]

    features = feature_extractor.extract_features(touches, [], [])

    assert features.swipe_velocity == pytest.approx(1.0)


def test_taps_without_moves_have_no_velocity():
    touches = [
        touch(0, 5, 5, "start"),
        touch(80, 5, 5, "end", duration=80),
        touch(500, 50, 50, "start"),
        touch(590, 50, 50, "end", duration=90),
    ]

    features = feature_extractor.extract_features(touches, [], [])

    assert features.swipe_velocity == 0
    assert features.avg_touch_duration == pytest.approx(85)


def test_pressure_ignores_zero_readings():
    touches = [
        touch(0, 0, 0, "start", pressure=0.0),
        touch(10, 1, 0, "move", pressure=0.4),
        touch(20, 2, 0, "end", pressure=0.8),
    ]

    features = feature_extractor.extract_features(touches, [], [])

    assert features.avg_touch_pressure == pytest.approx(0.6)


def test_all_zero_pressure_defaults_to_midpoint():
    touches = [touch(0, 0, 0, "start", pressure=0.0), touch(10, 0, 0, "end", pressure=0.0)]

    features = feature_extractor.extract_features(touches, [], [])

    assert features.avg_touch_pressure == 0.5


def test_tap_frequency_over_long_span():
    """Three taps across two seconds."""
    touches = [
        touch(0, 0, 0, "start"),
        touch(50, 0, 0, "end", duration=50),
        touch(1000, 0, 0, "start"),
        touch(1050, 0, 0, "end", duration=50),
        touch(1950, 0, 0, "start"),
        touch(2000, 0, 0, "end", duration=50),
    ]

    features = feature_extractor.extract_features(touches, [], [])

    assert features.tap_frequency == pytest.approx(1.5)


def test_motion_variance_pools_both_sensors():
    accel = [motion(0, 3, 4, 0), motion(100, 0, 0, 1)]  # magnitudes 5, 1
    gyro = [motion(0, 0, 0, 3)]  # magnitude 3

    only_accel = feature_extractor.extract_features([], accel, [])
    pooled = feature_extractor.extract_features([], accel, gyro)

    assert only_accel.device_motion_variance == pytest.approx(4.0)
    assert pooled.device_motion_variance == pytest.approx(8 / 3)


def test_single_motion_sample_has_zero_variance():
    features = feature_extractor.extract_features([], [motion(0, 1, 2, 3)], [])

    assert features.device_motion_variance == 0


def test_gesture_complexity_for_detour():
    """Three sides of a square: path 30, direct distance 10."""
    touches = [
        touch(0, 0, 0, "start"),
        touch(10, 10, 0, "move"),
        touch(20, 10, 10, "move"),
        touch(30, 0, 10, "end", duration=30),
    ]

    features = feature_extractor.extract_features(touches, [], [])

    assert features.gesture_complexity == pytest.approx(3.0)


def test_closed_loop_defaults_complexity():
    touches = [
        touch(0, 0, 0, "start"),
        touch(10, 10, 0, "move"),
        touch(20, 0, 0, "end", duration=20),
    ]

    features = feature_extractor.extract_features(touches, [], [])

    assert features.gesture_complexity == 1


def test_extraction_is_pure():
    touches = [touch(0, 0, 0, "start"), touch(100, 10, 0, "move"), touch(200, 20, 5, "move")]
    accel = [motion(0, 0.1, 0.2, 9.8), motion(100, 0.3, 0.1, 9.7)]
    before = list(touches)

    first = feature_extractor.extract_features(touches, accel, [])
    second = feature_extractor.extract_features(touches, accel, [])

    assert first == second
    assert touches == before


def test_feature_vector_normalizes_non_finite():
    features = FeatureVector(
        avg_touch_pressure=float("nan"),
        avg_touch_duration=100,
        swipe_velocity=float("inf"),
        tap_frequency=0,
        device_motion_variance=float("nan"),
        gesture_complexity=1,
    )

    for name in FEATURE_NAMES:
        assert math.isfinite(getattr(features, name)), name
    assert features.avg_touch_pressure == 0
    assert features.swipe_velocity == 0


def test_feature_vector_json_uses_camel_case():
    features = feature_extractor.extract_features([], [], [])

    raw = features.to_json()

    assert '"avgTouchPressure":0.5' in raw
    assert FeatureVector.from_json(raw) == features


def test_touch_sample_accepts_wire_type_key():
    sample = TouchSample.model_validate(
        {"timestamp": 1, "x": 2, "y": 3, "pressure": 0.2, "type": "end", "duration": 40}
    )

    assert sample.kind == "end"
    assert sample.duration == 40


def test_features_to_array_order():
    features = feature_extractor.extract_features([], [], [])

    row = feature_extractor.features_to_array(features)

    assert row.shape == (1, 6)
    assert list(row[0]) == [0.5, 100.0, 0.0, 0.0, 0.0, 1.0]


def test_single_move_stroke_has_no_velocity():
    touches = [
        touch(0, 0, 0, "start"),
        touch(50, 30, 40, "move"),
        touch(100, 30, 40, "end", duration=100),
    ]

    features = feature_extractor.extract_features(touches, [], [])

    assert features.swipe_velocity == 0
