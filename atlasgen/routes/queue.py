"""Queue endpoint: live jobs in ticket order."""

from fastapi import APIRouter, Depends

from ..models import QueueEntry, QueueResponse
from ..services import JobManager
from .deps import get_job_manager

router = APIRouter()


@router.get("/queue", response_model=QueueResponse)
async def get_queue(manager: JobManager = Depends(get_job_manager)):
    entries = [
        QueueEntry(ticket=job.ticket, job_id=job.job_id, state=job.state)
        for job in manager.queue.snapshot()
    ]
    return QueueResponse(entries=entries, length=len(entries))
