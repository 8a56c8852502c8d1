"""Hash backend routes: health, payload hashing, history and stats."""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from hashgait.api.deps import get_hash_history, get_runtime_stats
from hashgait.config import get_settings
from hashgait.models import (
    BackendStats,
    HashResponse,
    HealthResponse,
    HistoryResponse,
    StatsResponse,
)
from hashgait.services.hash_history import HashHistory, iso_now
from hashgait.services.runtime_stats import RuntimeStats

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["backend"])

AVAILABLE_ENDPOINTS = {
    "GET /": "Health check",
    "POST /hash": "Generate hash from gaitData",
    "GET /history": "Get latest hash history",
    "GET /stats": "Get backend statistics",
    "POST /patterns": "Save a behavioral pattern",
    "GET /patterns/{user_id}": "List a user's behavioral patterns",
    "POST /patterns/verify": "Verify a pattern hash against stored patterns",
    "DELETE /patterns/{user_id}": "Clear a user's behavioral patterns",
    "GET /patterns/store/health": "Pattern store health check",
    "POST /patterns/analyze": "Extract features, hash and confidence from raw samples",
}


def _preview(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def _json_type(value: Any) -> str:
    """JSON type name of a decoded value."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return "object"


@router.get("/", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check."""
    return HealthResponse(
        message="HashGait Backend Running!",
        status="healthy",
        timestamp=iso_now(),
        version=get_settings().app_version,
    )


@router.post(
    "/hash",
    response_model=HashResponse,
    responses={400: {"description": "gaitData missing or not a string"}},
)
async def generate_hash(
    request: Request,
    history: HashHistory = Depends(get_hash_history),
) -> Any:
    """Generate the SHA-256 hash of a gait payload and keep it in history."""
    try:
        body = await request.json()
    except ValueError:
        body = None

    gait_data = body.get("gaitData") if isinstance(body, dict) else None

    if gait_data is None or gait_data == "":
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Missing gaitData in request body",
                "example": {"gaitData": "your-gait-data-string"},
            },
        )

    if not isinstance(gait_data, str):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "gaitData must be a string",
                "received": _json_type(gait_data),
            },
        )

    entry = history.record(gait_data)
    count = len(history)

    logger.info(
        "Hash generated",
        hash=entry.hash[:16] + "...",
        data=_preview(gait_data, 50),
    )

    return HashResponse(
        hash=entry.hash,
        original_data=gait_data,
        timestamp=entry.timestamp,
        history_count=count,
        message=f"Hash generated successfully. History contains {count} entries.",
    )


@router.get("/history", response_model=HistoryResponse)
async def get_history(history: HashHistory = Depends(get_hash_history)) -> HistoryResponse:
    """Latest hashes, newest first."""
    entries = history.entries()
    return HistoryResponse(history=entries, count=len(entries), max_count=history.max_size)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    history: HashHistory = Depends(get_hash_history),
    runtime: RuntimeStats = Depends(get_runtime_stats),
) -> StatsResponse:
    """Backend statistics."""
    return StatsResponse(
        stats=BackendStats(
            total_hashes_generated=history.total_generated,
            max_history_size=history.max_size,
            server_uptime=runtime.uptime(),
            memory_usage=runtime.memory_usage(),
            timestamp=iso_now(),
        )
    )
