"""
Shopify Group Sync - Main Application
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings, validate_settings
from .dependencies import init_dependencies, close_dependencies
from .errors import ErrorKind, GroupSyncError
from .routes import auth_router, groups_router, products_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.REMOTE_STORE: 502,
    ErrorKind.DOMAIN_RESOLUTION: 400,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting Shopify Group Sync...")
    for problem in validate_settings(settings):
        logger.warning(f"Configuration: {problem}")
    await init_dependencies()
    logger.info("Application ready")
    yield
    logger.info("Shutting down...")
    await close_dependencies()


# Create app
app = FastAPI(
    title="Shopify Group Sync",
    description="Share and mirror product catalogs across groups of Shopify stores",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(GroupSyncError)
async def group_sync_error_handler(request: Request, exc: GroupSyncError):
    """Map error kinds to HTTP responses."""
    status_code = ERROR_STATUS.get(exc.kind, 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "kind": exc.kind.value},
    )


# Include routers
app.include_router(auth_router)
app.include_router(groups_router)
app.include_router(products_router)


@app.get("/health")
async def health():
    """Health check endpoint (no auth required)."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "groupsync.main:app",
        host=settings.host,
        port=settings.port,
        reload=True
    )
