"""Pydantic models for the hash backend HTTP surface."""

from typing import Any

from pydantic import Field

from hashgait.models.patterns import CamelModel


class HashResponse(CamelModel):
    """Response after hashing a gait payload."""

    success: bool = True
    hash: str
    original_data: str
    timestamp: str
    history_count: int
    message: str


class HistoryEntry(CamelModel):
    """One retained hash."""

    hash: str
    gait_data: str
    timestamp: str
    id: int


class HistoryResponse(CamelModel):
    """Most recent hashes, newest first."""

    success: bool = True
    history: list[HistoryEntry]
    count: int
    max_count: int


class BackendStats(CamelModel):
    """Backend statistics block."""

    total_hashes_generated: int
    max_history_size: int
    server_uptime: float = Field(..., description="Seconds since startup")
    memory_usage: dict[str, Any]
    timestamp: str


class StatsResponse(CamelModel):
    """Statistics envelope."""

    success: bool = True
    stats: BackendStats


class HealthResponse(CamelModel):
    """Health check response."""

    message: str
    status: str
    timestamp: str
    version: str
