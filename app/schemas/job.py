"""Job posting and department schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.job import JobPosting
from app.schemas.base import ApiModel


class JobPostingCreate(ApiModel):
    """Create job posting request."""

    job_title: str = Field(..., min_length=1, max_length=200)
    department: str = ""
    employment_type: str = ""
    location: str = ""
    job_description: str = ""
    experience: str = ""
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    requirements: List[str] = Field(default_factory=list)
    expiry_date_time: Optional[datetime] = None

    def to_model(self) -> JobPosting:
        return JobPosting(**self.model_dump())


class JobPostingUpdate(ApiModel):
    """Partial update; only fields sent by the client change."""

    job_title: Optional[str] = Field(None, min_length=1, max_length=200)
    department: Optional[str] = None
    employment_type: Optional[str] = None
    location: Optional[str] = None
    job_description: Optional[str] = None
    experience: Optional[str] = None
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    requirements: Optional[List[str]] = None
    expiry_date_time: Optional[datetime] = None


class JobPostingResponse(JobPosting):
    """Posting with its computed expiry state."""

    expired: bool = False


class DepartmentCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
