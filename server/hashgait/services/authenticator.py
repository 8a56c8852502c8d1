"""Client-side enrollment and authentication workflow."""

import json
import time
from typing import Optional

import structlog

from hashgait.config import Settings, get_settings
from hashgait.exceptions import BackendUnavailableError
from hashgait.models import (
    AuthenticationResult,
    CaptureResult,
    EnrollmentReport,
    Err,
    HashResponse,
    Result,
)
from hashgait.services.backend_client import BackendClient, LocalBackendClient, connect_backend
from hashgait.services.capture import CaptureSnapshot
from hashgait.services.confidence_scorer import confidence_scorer
from hashgait.services.feature_extractor import feature_extractor
from hashgait.services.hash_history import iso_now
from hashgait.services.pattern_hasher import pattern_hasher
from hashgait.services.pattern_store import PatternStore, pattern_store

logger = structlog.get_logger(__name__)


class BehavioralAuthenticator:
    """
    Turns a closed capture window into a fingerprint and submits it.

    The hash backend is optional: if it cannot be reached (at startup or
    mid-flight) the authenticator switches to the local client and carries on.
    """

    def __init__(
        self,
        backend: Optional[BackendClient] = None,
        store: Optional[PatternStore] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._backend = backend
        self._store = store if store is not None else pattern_store

    async def backend(self) -> BackendClient:
        if self._backend is None:
            self._backend = await connect_backend(self._settings)
        return self._backend

    def _fall_back(self, error: BackendUnavailableError) -> BackendClient:
        logger.warning(
            "Hash backend unavailable, continuing offline",
            operation=error.operation,
            reason=error.reason,
        )
        self._backend = LocalBackendClient(max_history=self._settings.history_max_size)
        return self._backend

    def build_capture_result(
        self,
        username: str,
        snapshot: CaptureSnapshot,
        session_id: Optional[str] = None,
    ) -> CaptureResult:
        """
        Extract, fingerprint and score a capture.

        Raises:
            NoCaptureDataError: if every stream of the snapshot is empty.
        """
        snapshot.require_data()
        session_id = session_id or f"session_{int(time.time() * 1000)}"

        features = feature_extractor.extract_features(
            snapshot.touch_events,
            snapshot.accelerometer_data,
            snapshot.gyroscope_data,
        )
        pattern_hash = pattern_hasher.generate_pattern_hash(features)
        confidence = confidence_scorer.calculate_confidence_score(features)
        timestamp = iso_now()

        gait_data = json.dumps(
            {
                "username": username,
                "sessionId": session_id,
                "features": features.model_dump(by_alias=True),
                "touchEventCount": len(snapshot.touch_events),
                "accelerometerCount": len(snapshot.accelerometer_data),
                "gyroscopeCount": len(snapshot.gyroscope_data),
                "timestamp": timestamp,
            },
            separators=(",", ":"),
        )

        return CaptureResult(
            username=username,
            session_id=session_id,
            pattern_hash=pattern_hash,
            gait_data_string=gait_data,
            features=features,
            confidence=confidence,
            touch_events=len(snapshot.touch_events),
            accelerometer_data=len(snapshot.accelerometer_data),
            gyroscope_data=len(snapshot.gyroscope_data),
            timestamp=timestamp,
        )

    async def submit_gait_data(self, gait_data: str) -> tuple[HashResponse, int, bool]:
        """Hash the payload on the backend; returns (response, history count, live)."""
        backend = await self.backend()
        try:
            response = await backend.generate_hash(gait_data)
            history = await backend.get_history()
        except BackendUnavailableError as e:
            backend = self._fall_back(e)
            response = await backend.generate_hash(gait_data)
            history = await backend.get_history()
        return response, history.count, backend.is_live

    async def enroll(
        self,
        username: str,
        snapshot: CaptureSnapshot,
        session_id: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> EnrollmentReport:
        """Submit a capture, store its pattern, and check it against the user's history."""
        device_id = device_id or self._settings.device_id
        capture = self.build_capture_result(username, snapshot, session_id)

        backend_hash, history_count, live = await self.submit_gait_data(capture.gait_data_string)

        report = EnrollmentReport(
            capture=capture,
            backend_hash=backend_hash.hash,
            backend_live=live,
            history_count=history_count,
        )

        saved = self._store.save(username, capture.pattern_hash, capture.features, device_id)
        if isinstance(saved, Err):
            report.save_error = saved.error
            return report
        report.saved_pattern_id = saved.value

        verified = self._store.verify(username, capture.pattern_hash, device_id)
        if isinstance(verified, Err):
            report.verification_error = verified.error
        else:
            report.verification = verified.value

        logger.info(
            "Enrollment complete",
            username=username,
            session_id=capture.session_id,
            pattern_hash=capture.pattern_hash,
            confidence=capture.confidence,
            backend_live=live,
        )
        return report

    def authenticate(
        self,
        username: str,
        snapshot: CaptureSnapshot,
        device_id: Optional[str] = None,
    ) -> Result[AuthenticationResult, str]:
        """Verify a fresh capture against the user's stored patterns."""
        device_id = device_id or self._settings.device_id
        capture = self.build_capture_result(username, snapshot)
        return self._store.verify(username, capture.pattern_hash, device_id)
