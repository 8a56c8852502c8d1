"""Main FastAPI application for the HashGait backend."""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hashgait.api import router
from hashgait.api.routes.backend import AVAILABLE_ENDPOINTS
from hashgait.config import Settings, get_settings
from hashgait.logging_config import setup_logging
from hashgait.services.hash_history import HashHistory
from hashgait.services.pattern_store import PatternStore
from hashgait.services.runtime_stats import RuntimeStats
from hashgait.services.similarity_matcher import SimilarityMatcher

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    settings: Settings = app.state.settings
    logger.info(
        "HashGait backend starting",
        host=settings.server_host,
        port=settings.server_port,
        version=settings.app_version,
        endpoints=list(AVAILABLE_ENDPOINTS),
        max_history=settings.history_max_size,
    )
    yield
    logger.info("HashGait backend stopped", hashes_generated=app.state.hash_history.total_generated)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with fresh in-memory state."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="HashGait Backend",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.hash_history = HashHistory(settings.history_max_size)
    app.state.pattern_store = PatternStore(matcher=SimilarityMatcher(settings.match_threshold))
    app.state.runtime_stats = RuntimeStats()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"error": "Endpoint not found", "availableEndpoints": AVAILABLE_ENDPOINTS},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error", path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "message": "Something went wrong!"},
        )

    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "hashgait.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
