"""Job posting and department documents."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.base import Document
from app.utils.helpers import as_utc


class JobPosting(Document):
    """Job posting model."""

    job_title: str
    department: str = ""
    employment_type: str = ""  # Full-time, Part-time, Contract, Internship
    location: str = ""
    job_description: str = ""
    experience: str = ""  # "2-5 years"
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    requirements: List[str] = Field(default_factory=list)
    posted_date: Optional[datetime] = None
    expiry_date_time: Optional[datetime] = None  # None never expires

    def is_expired(self, now: datetime) -> bool:
        """A posting expires once its expiry time is reached."""
        if self.expiry_date_time is None:
            return False
        return as_utc(self.expiry_date_time) <= now

    def __repr__(self):
        return f"<JobPosting {self.job_title} ({self.department})>"


class Department(Document):
    name: str
    description: str = ""
    created_at: Optional[datetime] = None
