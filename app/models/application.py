"""Job application document."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.base import Document, Embedded
from app.models.status import ApplicationStatus, InterviewMode


class PersonalDetails(Embedded):
    full_name: str
    email: str
    phone: str = ""
    address: str = ""


class EducationEntry(Embedded):
    degree_level: str
    institution: str
    field_of_study: str = ""
    year_of_completion: str = ""
    grade: str = ""


class WorkExperience(Embedded):
    company: str = ""
    position: str = ""
    duration: str = ""
    description: str = ""


class InterviewDetails(Embedded):
    """Interview scheduled when an application is shortlisted."""

    date: str  # YYYY-MM-DD as entered by the admin
    time: str  # HH:MM
    mode: InterviewMode = InterviewMode.ONLINE
    meeting_link: str = ""
    location: str = ""
    scheduled_at: Optional[datetime] = None


class Evaluation(Embedded):
    """Post-interview scores, 1-5 each."""

    technical_skills: int = Field(ge=1, le=5)
    communication: int = Field(ge=1, le=5)
    fit: int = Field(ge=1, le=5)
    notes: str = ""
    evaluated_by: str = ""
    evaluated_at: Optional[datetime] = None


class JobApplication(Document):
    """Job application model."""

    job_id: str
    job_title: str = ""
    department: str = ""
    applicant_uid: Optional[str] = None
    personal_details: PersonalDetails
    education: List[EducationEntry] = Field(default_factory=list)
    experience: List[WorkExperience] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    resume_url: str = ""
    cover_letter: str = ""
    portfolio_link: Optional[str] = None

    status: Optional[ApplicationStatus] = ApplicationStatus.PENDING
    applied_at: Optional[datetime] = None
    interview: Optional[InterviewDetails] = None
    evaluation: Optional[Evaluation] = None

    # Stamped on entering each status
    on_hold_at: Optional[datetime] = None
    shortlisted_at: Optional[datetime] = None
    selected_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None

    @property
    def current_status(self) -> ApplicationStatus:
        return ApplicationStatus.parse(self.status)

    def __repr__(self):
        return f"<JobApplication {self.personal_details.email} -> {self.job_id} ({self.current_status.value})>"
