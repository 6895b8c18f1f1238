"""Shared route dependencies."""

from fastapi import Request

from ..services import JobManager


def get_job_manager(request: Request) -> JobManager:
    """JobManager created at application startup."""
    return request.app.state.job_manager
