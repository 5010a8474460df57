"""Main application entry point."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request

from .core.config import settings
from .core.config_validation import run_config_checks
from .api.routes import router
from .services.discovery_service import discovery_service
from .services.store_service import get_store

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


async def _discover_local_hardware() -> None:
    """Store this machine's hardware under settings.node_id."""
    node_id = settings.node_id
    try:
        result = await asyncio.to_thread(discovery_service.discover, node_id)
    except Exception:
        logger.exception("Startup hardware discovery failed for node %s", node_id)
        raise
    logger.info("Startup discovery stored %d disks for node %s", len(result.disks), node_id)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting %s", settings.app_name)
    logger.info("Version: %s", settings.app_version)
    logger.info("Debug mode: %s", settings.debug)
    logger.info("Store backend: %s", settings.store_backend)

    config_result = run_config_checks()

    if config_result.has_errors:
        for issue in config_result.errors:
            logger.error("Configuration error: %s", issue.message)
            if issue.hint:
                logger.error("Hint: %s", issue.hint)

    if config_result.has_warnings:
        for issue in config_result.warnings:
            logger.warning("Configuration warning: %s", issue.message)
            if issue.hint:
                logger.warning("Hint: %s", issue.hint)

    if not config_result.has_errors:
        get_store()
        if settings.discover_on_startup:
            await _discover_local_hardware()
    else:
        logger.error(
            "Skipping store initialisation and discovery because configuration errors were detected."
        )

    try:
        yield
    finally:
        logger.info("Application stopped")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Cluster node hardware inventory backed by a hierarchical key-value store",
    lifespan=lifespan,
)


@app.middleware("http")
async def audit_middleware(request: Request, call_next):
    """Log every request with its outcome and duration."""
    start_time = time.time()
    client_ip = request.client.host if request.client else "unknown"

    logger.info("Request started: %s %s from %s", request.method, request.url.path, client_ip)

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(
            "Request failed: %s %s Error: %s Time: %.4fs",
            request.method,
            request.url.path,
            str(e)[:200],
            process_time,
        )
        raise

    process_time = time.time() - start_time
    logger.info(
        "Request completed: %s %s Status: %d Time: %.4fs",
        request.method,
        request.url.path,
        response.status_code,
        process_time,
    )
    return response


app.include_router(router)


def main():
    """Run the application."""
    uvicorn.run(
        "nodeinventory.main:app",
        host="0.0.0.0",
        port=8000,
        log_level="debug" if settings.debug else "info",
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
