"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mindwell.api.routes import router
from mindwell.api.middleware import setup_cors, setup_rate_limiting
from mindwell.config import DATA_PATH, DEFAULT_TIMEZONE, LOG_LEVEL, PERSIST_PROGRESS
from mindwell.db.store import ProgressStore
from mindwell.exceptions import (
    InvalidActivityDateError,
    MindwellError,
    RecordNotFoundError,
    UnknownExerciseError,
    ValidationError,
)
from mindwell.services import init_container, reset_container

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


def status_for_error(exc: MindwellError) -> int:
    """HTTP status for a domain error"""
    if isinstance(exc, (UnknownExerciseError, RecordNotFoundError)):
        return 404
    if isinstance(exc, (InvalidActivityDateError, ValidationError)):
        return 422
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application"""
    # Startup
    logger.info("Starting API server...")
    store = ProgressStore(
        data_path=DATA_PATH if PERSIST_PROGRESS else None,
        default_timezone=DEFAULT_TIMEZONE
    )
    store.load()
    init_container(store)
    logger.info("Progress store loaded")

    yield

    # Shutdown
    logger.info("Shutting down API server...")
    reset_container()


def create_api_application() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Mindwell API",
        description="REST API for mood tracking and wellness progression",
        version="1.0.0",
        lifespan=lifespan
    )

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)

    # Include routes
    app.include_router(router)

    @app.exception_handler(MindwellError)
    async def mindwell_exception_handler(request: Request, exc: MindwellError):
        return JSONResponse(
            status_code=status_for_error(exc),
            content=exc.to_dict()
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created")

    return app


app = create_api_application()
