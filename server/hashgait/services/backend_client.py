"""Hash backend clients.

Two implementations share one interface: a live client talking to the hash
backend over HTTP, and a local client that computes the same SHA-256 payload
hash in-process when the backend cannot be reached.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from hashgait.config import Settings, get_settings
from hashgait.exceptions import BackendUnavailableError
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


class BackendClient(ABC):
    """Capability interface for the hash backend."""

    is_live: bool = False

    @abstractmethod
    async def health_check(self) -> HealthResponse: ...

    @abstractmethod
    async def generate_hash(self, gait_data: str) -> HashResponse: ...

    @abstractmethod
    async def get_history(self) -> HistoryResponse: ...

    @abstractmethod
    async def get_stats(self) -> StatsResponse: ...

    async def test_connection(self) -> bool:
        """True when the backend answers its health check."""
        try:
            await self.health_check()
            return True
        except BackendUnavailableError:
            return False


class LiveBackendClient(BackendClient):
    """Client for a running hash backend."""

    is_live = True

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _request(
        self,
        operation: str,
        method: str,
        endpoint: str,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Make an HTTP request, turning every transport failure into BackendUnavailableError."""
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(method, endpoint, json=json)
                response.raise_for_status()
                return response.json()
            except httpx.TimeoutException as e:
                logger.warning("Backend request timed out", operation=operation, error=str(e))
                raise BackendUnavailableError(operation, "timeout") from e
            except httpx.HTTPStatusError as e:
                detail = _error_detail(e.response)
                logger.warning(
                    "Backend returned an error",
                    operation=operation,
                    status=e.response.status_code,
                    error=detail,
                )
                raise BackendUnavailableError(operation, detail) from e
            except httpx.RequestError as e:
                logger.warning("Backend request failed", operation=operation, error=str(e))
                raise BackendUnavailableError(operation, f"network error: {e}") from e
            except ValueError as e:
                raise BackendUnavailableError(operation, "response was not JSON") from e

    def _parse(self, operation: str, model: type[BaseModel], payload: Any) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise BackendUnavailableError(operation, f"malformed response: {e.error_count()} errors") from e

    async def health_check(self) -> HealthResponse:
        payload = await self._request("Health check", "GET", "/")
        return self._parse("Health check", HealthResponse, payload)

    async def generate_hash(self, gait_data: str) -> HashResponse:
        payload = await self._request("Hash generation", "POST", "/hash", json={"gaitData": gait_data})
        return self._parse("Hash generation", HashResponse, payload)

    async def get_history(self) -> HistoryResponse:
        payload = await self._request("History fetch", "GET", "/history")
        return self._parse("History fetch", HistoryResponse, payload)

    async def get_stats(self) -> StatsResponse:
        payload = await self._request("Stats fetch", "GET", "/stats")
        return self._parse("Stats fetch", StatsResponse, payload)


class LocalBackendClient(BackendClient):
    """Deterministic in-process stand-in used while the backend is offline."""

    def __init__(self, history: Optional[HashHistory] = None, max_history: int = 5):
        self.history = history if history is not None else HashHistory(max_history)
        self._runtime = RuntimeStats()

    async def health_check(self) -> HealthResponse:
        return HealthResponse(
            message="HashGait local fallback active",
            status="offline",
            timestamp=iso_now(),
            version=get_settings().app_version,
        )

    async def generate_hash(self, gait_data: str) -> HashResponse:
        entry = self.history.record(gait_data)
        count = len(self.history)
        return HashResponse(
            hash=entry.hash,
            original_data=gait_data,
            timestamp=entry.timestamp,
            history_count=count,
            message=f"Hash generated locally (backend offline). History contains {count} entries.",
        )

    async def get_history(self) -> HistoryResponse:
        entries = self.history.entries()
        return HistoryResponse(
            history=entries,
            count=len(entries),
            max_count=self.history.max_size,
        )

    async def get_stats(self) -> StatsResponse:
        return StatsResponse(
            stats=BackendStats(
                total_hashes_generated=self.history.total_generated,
                max_history_size=self.history.max_size,
                server_uptime=self._runtime.uptime(),
                memory_usage=self._runtime.memory_usage(),
                timestamp=iso_now(),
            )
        )


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"


async def connect_backend(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> BackendClient:
    """Probe the live backend and return whichever client is usable."""
    settings = settings or get_settings()
    live = LiveBackendClient(
        settings.backend_url,
        timeout=settings.backend_timeout_seconds,
        transport=transport,
    )
    if await live.test_connection():
        logger.info("Hash backend reachable", url=settings.backend_url)
        return live

    logger.warning("Hash backend unreachable, using local fallback", url=settings.backend_url)
    return LocalBackendClient(max_history=settings.history_max_size)
