"""FastAPI application entry point for BaseProof.

The reader is built in the lifespan (or injected by the caller) and kept
on app.state.reader. Tests pass a reader wired to the in-memory stub.

Usage:
    uvicorn baseproof.api.main:app
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from baseproof import __version__
from baseproof.api.errors import install_error_handlers
from baseproof.api.middleware.logging_middleware import LoggingMiddleware
from baseproof.api.routes import health_router, proofs_router, stats_router, verify_router
from baseproof.application.services.proof_registry_reader import ProofRegistryReader
from baseproof.bootstrap.logging import configure_logging
from baseproof.bootstrap.reader import build_reader
from baseproof.config.reader_config import load_environment

logger = structlog.get_logger(__name__)


def create_app(reader: ProofRegistryReader | None = None) -> FastAPI:
    """Build the API.

    Args:
        reader: Reader to serve. When omitted, one is built from the
            environment at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = reader is None
        if owned:
            load_environment()
            configure_logging()
            app.state.reader = build_reader()
        log = logger.bind(component="api")
        log.info(
            "api_started",
            network=app.state.reader.config.network.name,
            configured=app.state.reader.is_configured,
        )
        try:
            yield
        finally:
            if owned:
                await app.state.reader.close()
            log.info("api_stopped")

    app = FastAPI(
        title="BaseProof Registry API",
        description="Read model over the on-chain ProofRegistry",
        version=__version__,
        lifespan=lifespan,
    )
    if reader is not None:
        app.state.reader = reader

    app.add_middleware(LoggingMiddleware)
    install_error_handlers(app)

    app.include_router(health_router)
    app.include_router(proofs_router)
    app.include_router(stats_router)
    app.include_router(verify_router)
    return app


app = create_app()
