# growth_garden/core/main.py

import logging
import os
import sys

from growth_garden.core.logging_tracking import log_once_per_session, setup_global_rotating_error_log

# Configure basic logging first
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# --- FastAPI Imports ---
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from growth_garden import __version__
from growth_garden.config.settings import settings
from growth_garden.core.containers import init_container

# --------------------------------------------------------------------------
# Sentry Initialization
# --------------------------------------------------------------------------
if settings.SENTRY_DSN:
    try:
        sentry_logging = LoggingIntegration(
            level=logging.INFO,
            event_level=logging.ERROR
        )
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            integrations=[sentry_logging],
            environment=settings.APP_ENV,
            release=settings.APP_RELEASE_VERSION,
        )
        logger.info("Sentry SDK initialized.")
    except Exception as sentry_init_e:
        logger.exception("Failed to initialize Sentry SDK: %s", sentry_init_e)
else:
    log_once_per_session('warning', "SENTRY_DSN not set. Sentry integration skipped.")

# --- Initialize Container ---
container = init_container()

# --------------------------------------------------------------------------
# FastAPI Application Instance Creation
# --------------------------------------------------------------------------
logger.info("Creating FastAPI application instance...")
app = FastAPI(
    title="Growth Garden API",
    version=__version__,
    description="Garden health, growth analytics and report exports for Growth Garden goals.",
)

# --- Store container on app.state ---
app.state.container = container
logger.info("DI Container instance stored in app.state.")

# --- Configure CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Adjust in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Import and Include Routers ---
try:
    from growth_garden.routers import garden, reports

    routers = [
        (garden.router, "/garden", ["garden"]),
        (reports.router, "/reports", ["reports"]),
    ]
    for router, prefix, tags in routers:
        app.include_router(router, prefix=prefix, tags=tags)
        logger.debug("Successfully included router at %s", prefix)
    logger.info("All routers included successfully.")
except ImportError as import_err:
    logger.critical("Failed to import routers: %s", import_err)
    sys.exit(f"CRITICAL: Router imports failed: {import_err}")

# --------------------------------------------------------------------------
# Startup / Shutdown Events
# --------------------------------------------------------------------------
@app.on_event("startup")
async def startup_event():
    logger.info("Application startup event executing...")
    logger.info("Garden API: %s | timezone: %s | cache TTL: %ss",
                settings.GARDEN_API_URL, settings.GARDEN_TIMEZONE, settings.CACHE_TTL_SECONDS)
    # Set up global rotating error log for the entire app
    setup_global_rotating_error_log(settings.ERROR_LOG_FILE)
    logger.info("Startup event complete.")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown event executing...")
    container.session_manager().end_all_sessions()
    container.http_session().close()
    logger.info("Shutdown event complete.")


# --------------------------------------------------------------------------
# Root Endpoint
# --------------------------------------------------------------------------
@app.get("/", tags=["Status"], include_in_schema=False)
async def read_root():
    """ Basic status endpoint """
    return {"message": f"Welcome to the Growth Garden API (Version {app.version})"}

# --------------------------------------------------------------------------
# Local Development Run Hook
# --------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Uvicorn development server directly via __main__...")
    reload_flag = settings.APP_ENV == "development" and \
                 os.getenv("UVICORN_RELOAD", "True").lower() in ("true", "1")

    uvicorn.run(
        "growth_garden.core.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=reload_flag,
        log_level=os.getenv("UVICORN_LOG_LEVEL", "info").lower(),
    )
