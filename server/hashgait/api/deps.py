"""Shared route dependencies backed by application state."""

from fastapi import Request

from hashgait.services.hash_history import HashHistory
from hashgait.services.pattern_store import PatternStore
from hashgait.services.runtime_stats import RuntimeStats


def get_hash_history(request: Request) -> HashHistory:
    return request.app.state.hash_history


def get_pattern_store(request: Request) -> PatternStore:
    return request.app.state.pattern_store


def get_runtime_stats(request: Request) -> RuntimeStats:
    return request.app.state.runtime_stats
