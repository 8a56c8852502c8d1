"""
Tests for the hash backend clients.
The live client runs against mocked transports and against the app itself.
"""

import sys
from pathlib import Path

import httpx
import pytest

# Add server to path
sys.path.insert(0, str(Path(__file__).parent))

from hashgait.config import Settings
from hashgait.exceptions import BackendUnavailableError
from hashgait.main import create_app
from hashgait.services.backend_client import (
    LiveBackendClient,
    LocalBackendClient,
    connect_backend,
)
from hashgait.services.hash_history import HashHistory, sha256_hex

BASE_URL = "http://backend.test"


def hash_payload(data):
    return {
        "success": True,
        "hash": sha256_hex(data),
        "originalData": data,
        "timestamp": "2024-01-01T00:00:00.000Z",
        "historyCount": 1,
        "message": "Hash generated successfully. History contains 1 entries.",
    }


def health_payload():
    return {
        "message": "HashGait Backend Running!",
        "status": "healthy",
        "timestamp": "2024-01-01T00:00:00.000Z",
        "version": "1.0.0",
    }


def failing_transport(exc_type):
    def handler(request):
        raise exc_type("boom", request=request)

    return httpx.MockTransport(handler)


async def test_live_generate_hash_posts_gait_data():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = request.content
        return httpx.Response(200, json=hash_payload("abc"))

    client = LiveBackendClient(BASE_URL, transport=httpx.MockTransport(handler))

    response = await client.generate_hash("abc")

    assert seen["path"] == "/hash"
    assert b'"gaitData"' in seen["body"]
    assert response.hash == sha256_hex("abc")
    assert response.history_count == 1


async def test_connect_error_becomes_backend_unavailable():
    client = LiveBackendClient(BASE_URL, transport=failing_transport(httpx.ConnectError))

    with pytest.raises(BackendUnavailableError) as exc_info:
        await client.generate_hash("abc")

    assert exc_info.value.reason.startswith("network error")
    assert not await client.test_connection()


async def test_timeout_becomes_backend_unavailable():
    client = LiveBackendClient(BASE_URL, transport=failing_transport(httpx.ReadTimeout))

    with pytest.raises(BackendUnavailableError) as exc_info:
        await client.get_history()

    assert exc_info.value.reason == "timeout"


async def test_http_error_carries_backend_message():
    def handler(request):
        return httpx.Response(400, json={"error": "gaitData must be a string", "received": "number"})

    client = LiveBackendClient(BASE_URL, transport=httpx.MockTransport(handler))

    with pytest.raises(BackendUnavailableError) as exc_info:
        await client.generate_hash("abc")

    assert exc_info.value.reason == "gaitData must be a string"


async def test_malformed_response_is_rejected():
    def handler(request):
        return httpx.Response(200, json={"unexpected": True})

    client = LiveBackendClient(BASE_URL, transport=httpx.MockTransport(handler))

    with pytest.raises(BackendUnavailableError) as exc_info:
        await client.get_stats()

    assert exc_info.value.reason.startswith("malformed response")


async def test_connect_backend_prefers_live():
    def handler(request):
        return httpx.Response(200, json=health_payload())

    client = await connect_backend(Settings(backend_url=BASE_URL), transport=httpx.MockTransport(handler))

    assert client.is_live


async def test_connect_backend_falls_back_to_local():
    client = await connect_backend(Settings(backend_url=BASE_URL), transport=failing_transport(httpx.ConnectError))

    assert not client.is_live
    assert isinstance(client, LocalBackendClient)


async def test_local_client_is_deterministic():
    local = LocalBackendClient(max_history=2)

    first = await local.generate_hash("payload")
    second = await local.generate_hash("payload")
    await local.generate_hash("other")

    history = await local.get_history()
    stats = await local.get_stats()
    health = await local.health_check()

    assert first.hash == second.hash == sha256_hex("payload")
    assert "backend offline" in first.message
    assert history.count == 2
    assert history.max_count == 2
    assert history.history[0].gait_data == "other"
    assert stats.stats.total_hashes_generated == 3
    assert health.status == "offline"


async def test_live_client_against_app():
    transport = httpx.ASGITransport(app=create_app())
    client = LiveBackendClient(BASE_URL, transport=transport)

    health = await client.health_check()
    response = await client.generate_hash("abc")
    history = await client.get_history()
    stats = await client.get_stats()

    assert health.status == "healthy"
    assert response.hash == sha256_hex("abc")
    assert history.count == 1
    assert history.history[0].hash == response.hash
    assert stats.stats.total_hashes_generated == 1


async def test_local_client_keeps_empty_history_passed_in():
    history = HashHistory(max_size=10)
    local = LocalBackendClient(history=history)

    await local.generate_hash("payload")

    assert local.history is history
    assert len(history) == 1
    assert (await local.get_history()).max_count == 10
