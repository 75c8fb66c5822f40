"""Job endpoints - Browse active postings."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.core.deps import get_job_service
from app.schemas.job import JobPostingResponse
from app.services.job_service import JobPostingService

router = APIRouter()


@router.get("/", response_model=List[JobPostingResponse])
async def list_jobs(
    search: Optional[str] = Query(None, description="Match on title, department or location"),
    jobs: JobPostingService = Depends(get_job_service),
):
    """Open postings (no expiry, or expiry in the future), newest first."""
    return [JobPostingResponse(**p.model_dump()) for p in await jobs.list_active(search)]


@router.get("/{job_id}", response_model=JobPostingResponse)
async def get_job(job_id: str, jobs: JobPostingService = Depends(get_job_service)):
    """Posting detail; expired postings are not found."""
    posting = await jobs.get_active(job_id)
    return JobPostingResponse(**posting.model_dump())
