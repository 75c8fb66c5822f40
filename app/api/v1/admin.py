"""Admin endpoints - job postings and departments."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.deps import get_job_service
from app.core.security import require_admin
from app.models.job import Department
from app.schemas.job import (
    DepartmentCreate,
    JobPostingCreate,
    JobPostingResponse,
    JobPostingUpdate,
)
from app.services.job_service import JobPostingService

router = APIRouter(dependencies=[Depends(require_admin)])


def _with_state(jobs: JobPostingService, posting) -> JobPostingResponse:
    return JobPostingResponse(**posting.model_dump(), expired=jobs.is_expired(posting))


@router.get("/jobs", response_model=List[JobPostingResponse])
async def list_jobs(
    state: Literal["active", "expired", "all"] = Query("all", description="Filter by expiry state"),
    search: Optional[str] = Query(None, description="Match on title, department or location"),
    jobs: JobPostingService = Depends(get_job_service),
):
    """All postings newest first, optionally only active or expired ones."""
    return [_with_state(jobs, p) for p in await jobs.list_postings(state, search)]


@router.post("/jobs", response_model=JobPostingResponse, status_code=status.HTTP_201_CREATED)
async def create_job(request: JobPostingCreate, jobs: JobPostingService = Depends(get_job_service)):
    """Create job posting."""
    return _with_state(jobs, await jobs.create(request.to_model()))


@router.get("/jobs/{job_id}", response_model=JobPostingResponse)
async def get_job(job_id: str, jobs: JobPostingService = Depends(get_job_service)):
    return _with_state(jobs, await jobs.get(job_id))


@router.put("/jobs/{job_id}", response_model=JobPostingResponse)
async def update_job(
    job_id: str,
    request: JobPostingUpdate,
    jobs: JobPostingService = Depends(get_job_service),
):
    """Update job posting; only fields present in the body change."""
    posting = await jobs.update(job_id, request.model_dump(exclude_unset=True))
    return _with_state(jobs, posting)


@router.delete("/jobs/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(job_id: str, jobs: JobPostingService = Depends(get_job_service)):
    await jobs.delete(job_id)


@router.get("/departments", response_model=List[Department])
async def list_departments(jobs: JobPostingService = Depends(get_job_service)):
    """Departments ordered by name."""
    return await jobs.list_departments()


@router.post("/departments", response_model=Department, status_code=status.HTTP_201_CREATED)
async def create_department(request: DepartmentCreate, jobs: JobPostingService = Depends(get_job_service)):
    return await jobs.create_department(request.name, request.description)


@router.delete("/departments/{department_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_department(department_id: str, jobs: JobPostingService = Depends(get_job_service)):
    await jobs.delete_department(department_id)
