"""FastAPI application entry point for the Atlas Generator queue."""

import logging

from fastapi import FastAPI

from . import __version__
from .config import settings
from .routes import api_router
from .services import JobManager

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("atlasgen")

# Create FastAPI app
app = FastAPI(
    title="Atlas Generator Queue API",
    description="Serialised image-to-3D conversion jobs for the Atlas Generator worker",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Include API routes
app.include_router(api_router)


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info(f"Starting Atlas Generator Queue API v{__version__}")
    logger.info(f"Worker executable: {settings.worker_path}")
    logger.info(f"Source images: {settings.source_dir}, output: {settings.generated_dir}")

    settings.ensure_dirs()
    app.state.job_manager = JobManager.from_settings(settings)

    if not settings.worker_path.is_file():
        logger.warning("Worker executable not found - jobs will fail at launch")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    logger.info("Shutting down Atlas Generator Queue API")
    manager = getattr(app.state, "job_manager", None)
    if manager is not None:
        await manager.shutdown()


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Atlas Generator Queue API",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    manager = getattr(app.state, "job_manager", None)
    return {
        "status": "healthy",
        "version": __version__,
        "queue_length": len(manager.queue) if manager is not None else 0,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "atlasgen.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
