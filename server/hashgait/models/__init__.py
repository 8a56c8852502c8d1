"""Models module."""

from hashgait.models.backend import (
    BackendStats,
    HashResponse,
    HealthResponse,
    HistoryEntry,
    HistoryResponse,
    StatsResponse,
)
from hashgait.models.patterns import (
    AnalyzeCaptureRequest,
    AnalyzeCaptureResponse,
    AuthenticationResult,
    CaptureResult,
    EnrollmentReport,
    MatchOutcome,
    PatternRecord,
    SavePatternRequest,
    VerifyPatternRequest,
)
from hashgait.models.result import Err, Ok, Result
from hashgait.models.sensors import FeatureVector, MotionSample, TouchSample

__all__ = [
    "AnalyzeCaptureRequest",
    "AnalyzeCaptureResponse",
    "AuthenticationResult",
    "BackendStats",
    "CaptureResult",
    "EnrollmentReport",
    "Err",
    "FeatureVector",
    "HashResponse",
    "HealthResponse",
    "HistoryEntry",
    "HistoryResponse",
    "MatchOutcome",
    "MotionSample",
    "Ok",
    "PatternRecord",
    "Result",
    "SavePatternRequest",
    "StatsResponse",
    "TouchSample",
    "VerifyPatternRequest",
]
