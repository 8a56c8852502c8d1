"""Capture window accumulating touch and motion samples."""

import asyncio
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from hashgait.config import get_settings
from hashgait.exceptions import NoCaptureDataError
from hashgait.models import MotionSample, TouchSample


@dataclass(frozen=True)
class CaptureSnapshot:
    """Immutable copy of the three sample streams at window close."""

    touch_events: tuple[TouchSample, ...] = field(default_factory=tuple)
    accelerometer_data: tuple[MotionSample, ...] = field(default_factory=tuple)
    gyroscope_data: tuple[MotionSample, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not (self.touch_events or self.accelerometer_data or self.gyroscope_data)

    @property
    def counts(self) -> dict[str, int]:
        return {
            "touchEvents": len(self.touch_events),
            "accelerometerData": len(self.accelerometer_data),
            "gyroscopeData": len(self.gyroscope_data),
        }

    def require_data(self) -> "CaptureSnapshot":
        if self.is_empty:
            raise NoCaptureDataError()
        return self


class _Buffer:
    """Append-only sample buffer with its own lock."""

    def __init__(self):
        self._items: list = []
        self._lock = threading.Lock()

    def append(self, item, accept: Callable[[], bool]) -> bool:
        with self._lock:
            if not accept():
                return False
            self._items.append(item)
            return True

    def reset(self) -> None:
        with self._lock:
            self._items = []

    def freeze(self) -> tuple:
        with self._lock:
            return tuple(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class CaptureSession:
    """
    One fixed-length capture window.

    Each sensor stream is one producer writing to its own buffer. Samples that
    arrive while the window is closed are dropped. stop() freezes the buffers
    into a CaptureSnapshot, which is what feature extraction reads.
    """

    def __init__(
        self,
        window_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if window_seconds is None:
            window_seconds = get_settings().capture_window_seconds
        self.window_seconds = window_seconds
        self._clock = clock
        self._touch = _Buffer()
        self._accelerometer = _Buffer()
        self._gyroscope = _Buffer()
        self._capturing = False
        self._started_at: Optional[float] = None
        self._snapshot: Optional[CaptureSnapshot] = None

    @property
    def is_capturing(self) -> bool:
        return self._capturing

    @property
    def snapshot(self) -> Optional[CaptureSnapshot]:
        """Snapshot of the last closed window, if any."""
        return self._snapshot

    def start(self) -> None:
        for buffer in (self._touch, self._accelerometer, self._gyroscope):
            buffer.reset()
        self._snapshot = None
        self._started_at = self._clock()
        self._capturing = True

    def stop(self) -> CaptureSnapshot:
        if self._capturing or self._snapshot is None:
            self._capturing = False
            self._snapshot = CaptureSnapshot(
                touch_events=self._touch.freeze(),
                accelerometer_data=self._accelerometer.freeze(),
                gyroscope_data=self._gyroscope.freeze(),
            )
        return self._snapshot

    def _accepting(self) -> bool:
        return self._capturing

    def record_touch(self, sample: TouchSample) -> bool:
        return self._touch.append(sample, self._accepting)

    def record_accelerometer(self, sample: MotionSample) -> bool:
        return self._accelerometer.append(sample, self._accepting)

    def record_gyroscope(self, sample: MotionSample) -> bool:
        return self._gyroscope.append(sample, self._accepting)

    def counts(self) -> dict[str, int]:
        return {
            "touchEvents": len(self._touch),
            "accelerometerData": len(self._accelerometer),
            "gyroscopeData": len(self._gyroscope),
        }

    def progress(self) -> int:
        """Percent of the window elapsed, 0-100."""
        if self._started_at is None:
            return 0
        if not self._capturing:
            return 100
        if self.window_seconds <= 0:
            return 100
        elapsed = self._clock() - self._started_at
        return max(0, min(100, int(elapsed / self.window_seconds * 100)))

    async def run(self) -> CaptureSnapshot:
        """Open the window, wait it out, then freeze and return the samples."""
        self.start()
        try:
            await asyncio.sleep(self.window_seconds)
        finally:
            snapshot = self.stop()
        return snapshot
