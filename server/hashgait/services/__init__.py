"""Services module."""

from hashgait.services.confidence_scorer import confidence_scorer
from hashgait.services.feature_extractor import feature_extractor
from hashgait.services.pattern_hasher import pattern_hasher
from hashgait.services.pattern_store import pattern_store
from hashgait.services.similarity_matcher import similarity_matcher

__all__ = [
    "confidence_scorer",
    "feature_extractor",
    "pattern_hasher",
    "pattern_store",
    "similarity_matcher",
]
