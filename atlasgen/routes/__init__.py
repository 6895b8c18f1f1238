"""API route handlers."""

from fastapi import APIRouter

from .jobs import router as jobs_router
from .pipelines import router as pipelines_router
from .queue import router as queue_router

# Combine all routers
api_router = APIRouter()
api_router.include_router(jobs_router, tags=["jobs"])
api_router.include_router(queue_router, tags=["queue"])
api_router.include_router(pipelines_router, tags=["pipelines"])

__all__ = ["api_router"]
