from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from jobmatch.routers import resumes, recommendations, simple, health, seed

from jobmatch.config import is_simple_mode, missing_full_mode_settings
from jobmatch.utils.logging_config import configure_for_environment, get_logger
from jobmatch.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
    register_exception_handlers,
)

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("JobMatch API starting up...")

    if is_simple_mode():
        logger.info("Running in SIMPLE mode: database-backed endpoints are disabled")
    else:
        missing = missing_full_mode_settings()
        if missing:
            logger.warning(f"Missing settings for FULL mode: {', '.join(missing)}")
        try:
            from jobmatch.services.db import init_indexes
            await init_indexes()
            logger.info("Database indexes initialized successfully")
        except Exception as e:
            logger.warning(f"Database index initialization had issues: {e}")
            logger.info("Application will continue - some operations may be slower without indexes")

    logger.info("JobMatch API startup completed")

    yield

    logger.info("JobMatch API shutting down...")


app = FastAPI(title="JobMatch API", version=VERSION, lifespan=lifespan)

# Middleware runs LIFO; the exception handler is outermost
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(PerformanceMiddleware, slow_request_threshold=2.0)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/")
@app.head("/")
async def root():
    logger.debug("Root endpoint accessed")
    return {
        "message": "Welcome to the JobMatch API",
        "version": VERSION,
        "mode": "SIMPLE" if is_simple_mode() else "FULL",
        "status": "ok",
    }


app.include_router(resumes.router)
app.include_router(recommendations.router)
app.include_router(simple.router)
app.include_router(health.router)
app.include_router(seed.router)

logger.info("JobMatch API initialized successfully")
