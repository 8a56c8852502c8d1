"""Process uptime and memory figures for the stats endpoints."""

import time
from typing import Any

import psutil


class RuntimeStats:
    """Uptime since construction plus current process memory."""

    def __init__(self):
        self._started = time.monotonic()
        self._process = psutil.Process()

    def uptime(self) -> float:
        return round(time.monotonic() - self._started, 3)

    def memory_usage(self) -> dict[str, Any]:
        info = self._process.memory_info()
        return {
            "rss": info.rss,
            "vms": info.vms,
            "percent": round(self._process.memory_percent(), 3),
        }
