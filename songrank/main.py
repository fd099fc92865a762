"""FastAPI application entry point.

Song Rank API - pairwise song voting with Elo ratings.
"""

import asyncio
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from songrank.routes import api_router
from songrank.services.catalog import ConfigurationError, SongCatalog, UnknownSongError, VoteCounter
from songrank.services.voting import InvalidVoteError, VoteProcessor
from songrank.settings import Settings, get_settings
from songrank.stores.postgres import init_db, close_db, ping_db
from songrank.stores.redis import init_redis, close_redis
from songrank.stores.repository import SongRepository

logger = logging.getLogger("uvicorn.error")


async def _load_voting_state(app: FastAPI, settings: Settings) -> None:
    """Connect to Postgres and load the catalog and vote counter onto app.state."""
    try:
        await init_db()
        await ping_db()
    except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
        raise ConfigurationError(f"Postgres unreachable: {e}") from e
    logger.info("Postgres connected")

    repository = SongRepository()
    catalog = await SongCatalog.load(repository, retry_waits=settings.persist_retry_waits)
    counter = await VoteCounter.load(
        repository,
        key=settings.vote_counter_key,
        retry_waits=settings.persist_retry_waits,
    )
    logger.info(f"Vote counter {counter.key}={counter.value}")

    app.state.catalog = catalog
    app.state.vote_counter = counter
    app.state.vote_processor = VoteProcessor(catalog, counter)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events. A ConfigurationError aborts startup
    so the server never serves without a catalog.
    """
    # Startup
    settings = get_settings()

    try:
        await _load_voting_state(app, settings)
    except ConfigurationError:
        logger.exception("Startup aborted")
        await close_db()
        raise

    # Redis only backs a cache; run without it if unavailable
    try:
        await init_redis()
    except Exception:
        logger.exception("Redis init failed")

    yield

    # Shutdown
    await close_redis()
    await close_db()


def _error(status_code: int, code: str, message: str, detail: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, "detail": detail}},
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Rank songs by pairwise voting with Elo ratings",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(UnknownSongError)
    async def unknown_song_handler(request: Request, exc: UnknownSongError) -> JSONResponse:
        return _error(404, "UNKNOWN_SONG", str(exc), {"song": exc.song_id})

    @app.exception_handler(InvalidVoteError)
    async def invalid_vote_handler(request: Request, exc: InvalidVoteError) -> JSONResponse:
        return _error(422, "VALIDATION_ERROR", str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(
            422,
            "VALIDATION_ERROR",
            "Invalid request",
            {"errors": jsonable_encoder(exc.errors())},
        )

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "INTERNAL_ERROR", str(exc) if settings.debug else "Internal server error")

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "songrank.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
