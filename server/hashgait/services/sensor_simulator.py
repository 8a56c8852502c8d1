"""
Sensor Simulator for Touch and Motion Captures

Generates plausible capture windows for demos, load tests and synthetic
datasets:
- Accelerometer at 10 Hz around gravity (x, y in [-1, 1], z near 9.8)
- Gyroscope at 10 Hz in [-0.25, 0.25] on each axis
- Touch strokes: taps (start/end) and swipes (start, moves, end)
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import numpy as np

from hashgait.models import MotionSample, TouchSample
from hashgait.services.capture import CaptureSession, CaptureSnapshot

GRAVITY = 9.8


@dataclass(frozen=True)
class TouchProfile:
    """How a simulated user touches the screen."""

    name: str = "default"
    pressure_mean: float = 0.5
    pressure_std: float = 0.08
    tap_duration_ms: float = 120.0
    swipe_speed: float = 1.2  # px per ms
    swipe_points: int = 8
    strokes_per_second: float = 0.8
    swipe_ratio: float = 0.5
    motion_jitter: float = 1.0


PROFILES = {
    "calm": TouchProfile(name="calm", pressure_mean=0.45, swipe_speed=0.6, strokes_per_second=0.5, motion_jitter=0.4),
    "default": TouchProfile(),
    "energetic": TouchProfile(
        name="energetic",
        pressure_mean=0.7,
        tap_duration_ms=80.0,
        swipe_speed=2.5,
        strokes_per_second=1.6,
        swipe_ratio=0.7,
        motion_jitter=2.0,
    ),
}


def simulate_motion(
    rng: np.random.Generator,
    start_ms: int,
    duration_ms: int,
    rate_hz: float = 10.0,
    jitter: float = 1.0,
) -> tuple[list[MotionSample], list[MotionSample]]:
    """Accelerometer and gyroscope readings sampled on the same clock."""
    step = int(1000 / rate_hz)
    timestamps = np.arange(start_ms, start_ms + duration_ms, step, dtype=np.int64)
    n = len(timestamps)

    accel = (rng.random((n, 3)) - 0.5) * 2 * jitter
    accel[:, 2] += GRAVITY
    gyro = (rng.random((n, 3)) - 0.5) * 0.5 * jitter

    accelerometer = [
        MotionSample(timestamp=int(t), x=float(a[0]), y=float(a[1]), z=float(a[2]))
        for t, a in zip(timestamps, accel)
    ]
    gyroscope = [
        MotionSample(timestamp=int(t), x=float(g[0]), y=float(g[1]), z=float(g[2]))
        for t, g in zip(timestamps, gyro)
    ]
    return accelerometer, gyroscope


def _pressure(rng: np.random.Generator, profile: TouchProfile) -> float:
    return float(np.clip(rng.normal(profile.pressure_mean, profile.pressure_std), 0.01, 1.0))


def simulate_touches(
    rng: np.random.Generator,
    start_ms: int,
    duration_ms: int,
    profile: TouchProfile,
    width: float = 400.0,
    height: float = 800.0,
) -> list[TouchSample]:
    """Non-overlapping taps and swipes in chronological order."""
    samples: list[TouchSample] = []
    n_strokes = max(1, int(round(profile.strokes_per_second * duration_ms / 1000)))
    slot = duration_ms / n_strokes

    for i in range(n_strokes):
        t = int(start_ms + i * slot + rng.uniform(0, slot * 0.2))
        x, y = float(rng.uniform(0, width)), float(rng.uniform(0, height))
        is_swipe = rng.random() < profile.swipe_ratio

        stroke_start = t
        samples.append(TouchSample(timestamp=t, x=x, y=y, pressure=_pressure(rng, profile), kind="start"))

        if is_swipe:
            angle = rng.uniform(0, 2 * np.pi)
            step_ms = 16
            for _ in range(profile.swipe_points):
                t += step_ms
                # Small wobble around the swipe direction
                heading = angle + rng.normal(0, 0.15)
                dist = profile.swipe_speed * step_ms
                x = float(np.clip(x + dist * np.cos(heading), 0, width))
                y = float(np.clip(y + dist * np.sin(heading), 0, height))
                samples.append(TouchSample(timestamp=t, x=x, y=y, pressure=_pressure(rng, profile), kind="move"))
            t += step_ms
        else:
            t += int(max(20.0, rng.normal(profile.tap_duration_ms, 15)))

        samples.append(
            TouchSample(
                timestamp=t,
                x=x,
                y=y,
                pressure=_pressure(rng, profile),
                kind="end",
                duration=t - stroke_start,
            )
        )

    return samples


def simulate_capture(
    seed: Optional[int] = None,
    profile: TouchProfile = PROFILES["default"],
    window_seconds: float = 10.0,
    start_ms: int = 1_700_000_000_000,
) -> CaptureSnapshot:
    """A full simulated capture window."""
    rng = np.random.default_rng(seed)
    duration_ms = int(window_seconds * 1000)
    accelerometer, gyroscope = simulate_motion(rng, start_ms, duration_ms, jitter=profile.motion_jitter)
    touches = simulate_touches(rng, start_ms, duration_ms, profile)
    return CaptureSnapshot(
        touch_events=tuple(touches),
        accelerometer_data=tuple(accelerometer),
        gyroscope_data=tuple(gyroscope),
    )


async def produce(record: Callable[[object], bool], samples: Iterable, interval: float = 0.0) -> int:
    """Feed samples to one capture stream, as a sensor callback would."""
    accepted = 0
    for sample in samples:
        if record(sample):
            accepted += 1
        await asyncio.sleep(interval)
    return accepted


async def replay_into(session: CaptureSession, snapshot: CaptureSnapshot, interval: float = 0.0) -> dict[str, int]:
    """Run the three stream producers concurrently against an open session."""
    touch, accel, gyro = await asyncio.gather(
        produce(session.record_touch, snapshot.touch_events, interval),
        produce(session.record_accelerometer, snapshot.accelerometer_data, interval),
        produce(session.record_gyroscope, snapshot.gyroscope_data, interval),
    )
    return {"touchEvents": touch, "accelerometerData": accel, "gyroscopeData": gyro}
