"""Behavioral pattern API routes."""

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from hashgait.api.deps import get_pattern_store
from hashgait.models import (
    AnalyzeCaptureRequest,
    AnalyzeCaptureResponse,
    Err,
    PatternRecord,
    Result,
    SavePatternRequest,
    VerifyPatternRequest,
)
from hashgait.services.confidence_scorer import confidence_scorer
from hashgait.services.feature_extractor import feature_extractor
from hashgait.services.pattern_hasher import pattern_hasher
from hashgait.services.pattern_store import NOT_ENROLLED, PatternStore

router = APIRouter(prefix="/patterns", tags=["patterns"])


def _result_response(result: Result[Any, str], error_status: int) -> JSONResponse:
    """Render an Ok/Err value as {"ok": ...} or {"err": ...}."""
    if isinstance(result, Err):
        return JSONResponse(status_code=error_status, content=result.to_dict())
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=jsonable_encoder(result.to_dict(), by_alias=True),
    )


@router.post("/analyze", response_model=AnalyzeCaptureResponse)
async def analyze_capture(request: AnalyzeCaptureRequest) -> AnalyzeCaptureResponse:
    """Extract features, fingerprint and confidence from raw capture samples."""
    features = feature_extractor.extract_features(
        request.touch_events,
        request.accelerometer_data,
        request.gyroscope_data,
    )
    return AnalyzeCaptureResponse(
        features=features,
        pattern_hash=pattern_hasher.generate_pattern_hash(features),
        confidence_score=confidence_scorer.calculate_confidence_score(features),
    )


@router.post("", responses={500: {"description": "Storage fault"}})
async def save_pattern(
    request: SavePatternRequest,
    store: PatternStore = Depends(get_pattern_store),
) -> JSONResponse:
    """Store a behavioral pattern for a user."""
    result = store.save_behavioral_pattern(
        request.user_id,
        request.pattern_hash,
        request.features.to_json(),
        request.device_id,
    )
    return _result_response(result, status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.post(
    "/verify",
    responses={404: {"description": "User has no stored patterns"}},
)
async def verify_pattern(
    request: VerifyPatternRequest,
    store: PatternStore = Depends(get_pattern_store),
) -> JSONResponse:
    """Verify a fresh pattern hash against the user's stored patterns."""
    result = store.verify_behavioral_pattern(
        request.user_id,
        request.pattern_hash,
        request.device_id,
    )
    if isinstance(result, Err) and result.error == NOT_ENROLLED:
        return _result_response(result, status.HTTP_404_NOT_FOUND)
    return _result_response(result, status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/store/health")
async def patterns_health(store: PatternStore = Depends(get_pattern_store)) -> dict[str, Any]:
    """Check the pattern store."""
    return {"status": "ready", "message": store.health_check(), "total": len(store)}


@router.get("/{user_id}", response_model=list[PatternRecord])
async def list_patterns(
    user_id: str,
    store: PatternStore = Depends(get_pattern_store),
) -> list[PatternRecord]:
    """All stored patterns for a user, oldest first."""
    return store.get_behavioral_patterns(user_id)


@router.delete("/{user_id}", responses={500: {"description": "Storage fault"}})
async def clear_patterns(
    user_id: str,
    store: PatternStore = Depends(get_pattern_store),
) -> JSONResponse:
    """Remove every stored pattern for a user."""
    result = store.clear_user_patterns(user_id)
    return _result_response(result, status.HTTP_500_INTERNAL_SERVER_ERROR)
