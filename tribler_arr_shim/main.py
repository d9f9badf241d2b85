"""
Main FastAPI application for tribler-arr-shim.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from loguru import logger
from sqlalchemy.ext.asyncio import async_sessionmaker

from tribler_arr_shim import __version__
from tribler_arr_shim.config import settings, TriblerConfig
from tribler_arr_shim.middleware.correlation import CorrelationIdMiddleware
from tribler_arr_shim.database import init_db, close_db, AsyncSessionLocal
from tribler_arr_shim.clients import TriblerClient
from tribler_arr_shim.exceptions import ConfigurationError, ShimError
from tribler_arr_shim.services import AssociationStore, ReconciliationEngine, StateMapper
from tribler_arr_shim.utils import setup_logger, register_exception_handlers
from tribler_arr_shim.api import application, auth, shim, torrents
from tribler_arr_shim.api.shim import reconcile_default_category


def attach_services(app: FastAPI, config: TriblerConfig, session_factory: async_sessionmaker):
    """Wire the translation layer into app.state for the request handlers."""
    store = AssociationStore(session_factory)
    tribler = TriblerClient(config)

    app.state.config = config
    app.state.store = store
    app.state.tribler = tribler
    app.state.mapper = StateMapper(config)
    app.state.reconciliation = ReconciliationEngine(store, tribler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    # Startup
    setup_logger(settings)
    logger.info(f"Starting tribler-arr-shim {__version__}...")

    await init_db()
    logger.info(f"Database initialized ({settings.get_database_url()})")

    config = settings.tribler_config()
    attach_services(app, config, AsyncSessionLocal)

    if not config.download_dir:
        logger.warning("TRIBLER_DOWNLOAD_DIR is not set - Tribler will use its own default destination")

    if settings.reconcile_on_startup:
        try:
            result = await reconcile_default_category(app.state)
            logger.info(f"Startup reconciliation: {result.as_dict()}")
        except ConfigurationError as e:
            logger.error(f"Tribler is not configured, only local endpoints will work: {e}")
        except ShimError as e:
            logger.warning(f"Startup reconciliation skipped: {type(e).__name__}: {e}")
    elif await app.state.tribler.test_connection():
        logger.info(f"Connected to Tribler at {config.api_endpoint}")

    logger.info(f"Listening for qBittorrent clients on {settings.host}:{settings.port}")

    yield

    # Shutdown
    logger.info("Shutting down tribler-arr-shim...")
    await app.state.tribler.close()
    await close_db()
    logger.info("tribler-arr-shim shut down complete")


# Create FastAPI app
app = FastAPI(
    title="tribler-arr-shim",
    description="qBittorrent Web API for Sonarr/Radarr on top of Tribler",
    version=__version__,
    lifespan=lifespan
)

# Correlation ID middleware (first, to capture all requests)
app.add_middleware(CorrelationIdMiddleware)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router)
app.include_router(application.router)
app.include_router(torrents.router)
app.include_router(shim.router)


@app.get("/api/status/health")
async def health_check():
    """Liveness check endpoint (no Tribler call)."""
    return {
        "status": "healthy",
        "version": __version__
    }


def run():
    """Console entry point."""
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
