"""Bounded history of generated payload hashes."""

import hashlib
import threading
import time
from collections import deque
from datetime import datetime, timezone

from hashgait.models import HistoryEntry


def iso_now() -> str:
    """UTC timestamp in ISO-8601 with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sha256_hex(data: str) -> str:
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


class HashHistory:
    """Keep the most recent hashes, newest first; the oldest is evicted."""

    def __init__(self, max_size: int = 5):
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._entries: deque[HistoryEntry] = deque(maxlen=max_size)
        self._total_generated = 0
        self._last_id = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def total_generated(self) -> int:
        """Hashes generated since startup, evicted ones included."""
        return self._total_generated

    def add(self, hash_value: str, gait_data: str) -> HistoryEntry:
        with self._lock:
            # Ids are epoch ms, bumped when two adds land in the same ms
            entry_id = max(int(time.time() * 1000), self._last_id + 1)
            self._last_id = entry_id

            entry = HistoryEntry(
                hash=hash_value,
                gait_data=gait_data,
                timestamp=iso_now(),
                id=entry_id,
            )
            # appendleft on a full deque drops the rightmost (oldest) entry
            self._entries.appendleft(entry)
            self._total_generated += 1
            return entry

    def record(self, gait_data: str) -> HistoryEntry:
        """Hash a payload with SHA-256 and add it."""
        return self.add(sha256_hex(gait_data), gait_data)

    def entries(self) -> list[HistoryEntry]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
