"""Pydantic models for stored behavioral patterns and authentication outcomes."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hashgait.models.sensors import FeatureVector, MotionSample, TouchSample


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PatternRecord(CamelModel):
    """One enrollment event stored for a user."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    user_id: str
    pattern_hash: str
    confidence_score: int = Field(..., ge=0, le=100)
    features: str = Field(..., description="FeatureVector serialized as JSON")
    timestamp: int = Field(..., description="Epoch milliseconds")
    device_id: str


class MatchOutcome(CamelModel):
    """Best position-wise match of a candidate hash against stored hashes."""

    best_match_percent: int = Field(..., ge=0, le=100)
    success: bool


class AuthenticationResult(CamelModel):
    """Verification outcome reported to the caller."""

    success: bool
    confidence_score: int = Field(..., ge=0, le=100)
    message: str
    timestamp: int


class SavePatternRequest(CamelModel):
    """Request to store a pattern for a user."""

    user_id: str = Field(..., min_length=1)
    pattern_hash: str = Field(..., min_length=1)
    features: FeatureVector
    device_id: str = "device_001"


class VerifyPatternRequest(CamelModel):
    """Request to verify a fresh pattern hash."""

    user_id: str = Field(..., min_length=1)
    pattern_hash: str = Field(..., min_length=1)
    device_id: str = "device_001"


class AnalyzeCaptureRequest(CamelModel):
    """Raw samples from one capture window."""

    touch_events: list[TouchSample] = Field(default_factory=list)
    accelerometer_data: list[MotionSample] = Field(default_factory=list)
    gyroscope_data: list[MotionSample] = Field(default_factory=list)


class AnalyzeCaptureResponse(CamelModel):
    """Features, fingerprint and quality score for one capture."""

    features: FeatureVector
    pattern_hash: str
    confidence_score: int


class CaptureResult(CamelModel):
    """Everything produced by a finished capture, ready for submission."""

    username: str
    session_id: str
    pattern_hash: str
    gait_data_string: str
    features: FeatureVector
    confidence: int
    touch_events: int
    accelerometer_data: int
    gyroscope_data: int
    timestamp: str


class EnrollmentReport(CamelModel):
    """Outcome of submitting a capture to the backends."""

    capture: CaptureResult
    backend_hash: str
    backend_live: bool
    history_count: int
    saved_pattern_id: Optional[str] = None
    save_error: Optional[str] = None
    verification: Optional[AuthenticationResult] = None
    verification_error: Optional[str] = None
