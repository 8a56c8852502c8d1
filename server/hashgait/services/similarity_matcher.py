"""Similarity matching between pattern fingerprints.

The score is the share of character positions two equal-length hashes agree
on. This is a coarse placeholder for a real feature-distance comparison:
unrelated fingerprints can agree on many positions by coincidence. It is kept
as is for compatibility with fingerprints already stored.
"""

from typing import Iterable

from hashgait.exceptions import NotEnrolledError
from hashgait.models import MatchOutcome

MATCH_THRESHOLD = 70


def calculate_similarity(hash1: str, hash2: str) -> int:
    """Percentage (floored) of positions at which two hashes agree."""
    if len(hash1) != len(hash2):
        return 0
    if not hash1:
        return 100

    matches = sum(1 for a, b in zip(hash1, hash2) if a == b)
    return matches * 100 // len(hash1)


class SimilarityMatcher:
    """Best-match search of a candidate hash against a user's stored hashes."""

    def __init__(self, threshold: int = MATCH_THRESHOLD):
        self.threshold = threshold

    def best_match(self, candidate_hash: str, stored_hashes: Iterable[str]) -> int:
        """
        Highest similarity across stored hashes.

        Raises:
            NotEnrolledError: when there is nothing to compare against.
        """
        stored = list(stored_hashes)
        if not stored:
            raise NotEnrolledError()
        return max(calculate_similarity(candidate_hash, h) for h in stored)

    def verify(self, candidate_hash: str, stored_hashes: Iterable[str]) -> MatchOutcome:
        best = self.best_match(candidate_hash, stored_hashes)
        return MatchOutcome(best_match_percent=best, success=best >= self.threshold)


# Singleton instance
similarity_matcher = SimilarityMatcher()
