"""Per-user behavioral pattern store.

Records are kept by id, with a per-user list of ids as an index. Every
operation returns an Ok/Err value instead of raising, so storage faults stay
visible at the call site.
"""

import threading
import time
import uuid
from typing import MutableMapping, Optional

import structlog
from pydantic import ValidationError

from hashgait.exceptions import NotEnrolledError
from hashgait.models import AuthenticationResult, Err, FeatureVector, Ok, PatternRecord, Result
from hashgait.services.confidence_scorer import confidence_scorer
from hashgait.services.similarity_matcher import SimilarityMatcher, similarity_matcher

logger = structlog.get_logger(__name__)

NOT_ENROLLED = "No patterns found for user"


def _now_ms() -> int:
    return int(time.time() * 1000)


class PatternStore:
    """Append-only pattern records indexed by user."""

    def __init__(
        self,
        records: Optional[MutableMapping[str, PatternRecord]] = None,
        user_index: Optional[MutableMapping[str, list[str]]] = None,
        matcher: Optional[SimilarityMatcher] = None,
    ):
        self._records = records if records is not None else {}
        self._user_index = user_index if user_index is not None else {}
        self._matcher = matcher or similarity_matcher
        # Index read-modify-write must not interleave between saves
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._records)

    # ==================== CORE OPERATIONS ====================

    def save(
        self,
        user_id: str,
        pattern_hash: str,
        features: FeatureVector,
        device_id: str,
    ) -> Result[str, str]:
        """Store a new pattern record and return its id."""
        record = PatternRecord(
            id=str(uuid.uuid4()),
            user_id=user_id,
            pattern_hash=pattern_hash,
            confidence_score=confidence_scorer.calculate_confidence_score(features),
            features=features.to_json(),
            timestamp=_now_ms(),
            device_id=device_id,
        )

        with self._lock:
            try:
                self._records[record.id] = record
            except Exception as e:
                logger.error("Pattern write failed", user_id=user_id, error=str(e))
                return Err(f"Failed to save pattern: {e}")

            try:
                existing = list(self._user_index.get(user_id, []))
                existing.append(record.id)
                self._user_index[user_id] = existing
            except Exception as e:
                # Roll back so no record exists outside the index
                self._records.pop(record.id, None)
                logger.error("Pattern index update failed", user_id=user_id, error=str(e))
                return Err(f"Failed to save pattern: {e}")

        logger.info(
            "Pattern saved",
            user_id=user_id,
            pattern_id=record.id,
            pattern_hash=pattern_hash,
            device_id=device_id,
        )
        return Ok(record.id)

    def list_by_user(self, user_id: str) -> list[PatternRecord]:
        """Records for a user in insertion order."""
        with self._lock:
            ids = list(self._user_index.get(user_id, []))
            return [self._records[pid] for pid in ids if pid in self._records]

    def clear_user(self, user_id: str) -> Result[int, str]:
        """Remove every record for a user together with the index entry."""
        with self._lock:
            if user_id not in self._user_index:
                return Ok(0)
            ids = list(self._user_index[user_id])

            removed: dict[str, PatternRecord] = {}
            try:
                for pid in ids:
                    if pid in self._records:
                        removed[pid] = self._records.pop(pid)
                del self._user_index[user_id]
            except Exception as e:
                for pid, record in removed.items():
                    self._records[pid] = record
                self._user_index[user_id] = ids
                logger.error("Pattern clear failed", user_id=user_id, error=str(e))
                return Err(f"Failed to clear patterns: {e}")

        logger.info("Patterns cleared", user_id=user_id, count=len(removed))
        return Ok(len(removed))

    def verify(
        self,
        user_id: str,
        pattern_hash: str,
        device_id: str,
    ) -> Result[AuthenticationResult, str]:
        """Compare a fresh hash against the user's stored hashes."""
        stored = [r.pattern_hash for r in self.list_by_user(user_id)]

        try:
            outcome = self._matcher.verify(pattern_hash, stored)
        except NotEnrolledError:
            logger.info("Verification for user without patterns", user_id=user_id)
            return Err(NOT_ENROLLED)

        threshold = self._matcher.threshold
        best = outcome.best_match_percent
        if outcome.success:
            message = f"Authentication successful. Pattern matches with {best}% confidence."
        else:
            message = f"Authentication failed. Best match: {best}% (threshold: {threshold}%)"

        logger.info(
            "Pattern verified",
            user_id=user_id,
            device_id=device_id,
            best_match=best,
            success=outcome.success,
        )
        return Ok(
            AuthenticationResult(
                success=outcome.success,
                confidence_score=best,
                message=message,
                timestamp=_now_ms(),
            )
        )

    # ==================== RECORD-STORE SURFACE ====================

    def save_behavioral_pattern(
        self,
        user_id: str,
        pattern_hash: str,
        features_json: str,
        device_id: str,
    ) -> Result[str, str]:
        try:
            features = FeatureVector.from_json(features_json)
        except ValidationError as e:
            return Err(f"Failed to save pattern: invalid features ({e.error_count()} errors)")

        result = self.save(user_id, pattern_hash, features, device_id)
        if isinstance(result, Err):
            return result
        return Ok(f"Pattern saved successfully with ID: {result.value}")

    def get_behavioral_patterns(self, user_id: str) -> list[PatternRecord]:
        return self.list_by_user(user_id)

    def verify_behavioral_pattern(
        self,
        user_id: str,
        pattern_hash: str,
        device_id: str,
    ) -> Result[AuthenticationResult, str]:
        return self.verify(user_id, pattern_hash, device_id)

    def clear_user_patterns(self, user_id: str) -> Result[str, str]:
        result = self.clear_user(user_id)
        if isinstance(result, Err):
            return result
        if result.value == 0:
            return Ok("No patterns found to clear")
        return Ok(f"Cleared {result.value} patterns for user {user_id}")

    def health_check(self) -> str:
        return (
            "Behavioral Authentication store is running. "
            f"Total patterns stored: {len(self)}"
        )


# Singleton instance
pattern_store = PatternStore()
