"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.config import Config
from generation.factory import create_synthesizer_from_config
from generation.synthesizer import ContentSynthesizer
from research.aggregator import ResearchAggregator
from research.factory import create_aggregator_from_config
from server.database import HistoryStore
from server.errors import register_exception_handlers
from server.middleware import RequestIDMiddleware
from server.routes import ads, books, generate, health, research
from server.routes import history as history_routes
from utils.logger import get_logger
from utils.rate_limiter import FixedWindowRateLimiter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup/shutdown logic."""
    logger.info("FastAPI server starting up")

    store = app.state.history
    if store is not None:
        store.init_db()

    missing = app.state.config.missing_credentials()
    if missing:
        logger.warning(f"Missing provider credentials (sources/backends skipped): {missing}")
    if not app.state.config.API_KEYS:
        logger.warning("API_KEYS not set; protected routes will answer 500")

    yield

    logger.info("FastAPI server shutting down")


def create_app(
    config: Config | None = None,
    *,
    rate_limiter: FixedWindowRateLimiter | None = None,
    aggregator: ResearchAggregator | None = None,
    synthesizer: ContentSynthesizer | None = None,
    history: HistoryStore | None = None,
) -> FastAPI:
    """
    Factory function to create FastAPI application.

    Collaborators default to ones built from ``config``; tests pass fakes.
    The rate limiter is created here, once per app, and reached by handlers
    through ``app.state``.
    """
    config = config or Config()

    app = FastAPI(
        title="ContentForge API",
        description="Multi-source research and grounded content generation",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.rate_limiter = rate_limiter or FixedWindowRateLimiter(
        max_keys=config.RATE_LIMIT_MAX_KEYS
    )
    app.state.aggregator = aggregator or create_aggregator_from_config(config)
    app.state.synthesizer = synthesizer or create_synthesizer_from_config(config)
    if history is None and config.HISTORY_ENABLED:
        history = HistoryStore(config.HISTORY_DB_PATH)
    app.state.history = history

    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(research.router)
    app.include_router(generate.router)
    app.include_router(ads.router)
    app.include_router(books.router)
    app.include_router(history_routes.router)

    return app
