"""Job application and screening schemas."""

from typing import List, Optional

from pydantic import Field

from app.models.application import (
    EducationEntry,
    Evaluation,
    InterviewDetails,
    JobApplication,
    PersonalDetails,
    WorkExperience,
)
from app.models.status import InterviewMode, allowed_actions
from app.schemas.base import ApiModel


class ApplicationCreate(ApiModel):
    """Application form submitted by a signed-in applicant."""

    job_id: str = Field(..., min_length=1)
    personal_details: PersonalDetails
    education: List[EducationEntry] = Field(default_factory=list)
    experience: List[WorkExperience] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    resume_url: str = ""
    cover_letter: str = ""
    portfolio_link: Optional[str] = None

    def to_model(self) -> JobApplication:
        return JobApplication(**self.model_dump())


class InterviewRequest(ApiModel):
    """Interview scheduled on shortlist."""

    date: str = Field("", description="YYYY-MM-DD")
    time: str = Field("", description="HH:MM")
    mode: InterviewMode = InterviewMode.ONLINE
    meeting_link: str = ""
    location: str = ""

    def to_model(self) -> InterviewDetails:
        return InterviewDetails(**self.model_dump())


class EvaluationRequest(ApiModel):
    """Post-interview scores, 1-5 each."""

    technical_skills: int = Field(..., ge=1, le=5)
    communication: int = Field(..., ge=1, le=5)
    fit: int = Field(..., ge=1, le=5)
    notes: str = ""

    def to_model(self) -> Evaluation:
        return Evaluation(**self.model_dump())


class NotificationResponse(ApiModel):
    """Outcome of the email sent after a committed change."""

    delivered: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    detail: Optional[str] = None


class ApplicationResponse(JobApplication):
    allowed_actions: List[str] = Field(default_factory=list)

    @classmethod
    def from_model(cls, application: JobApplication) -> "ApplicationResponse":
        return cls(
            **application.model_dump(),
            allowed_actions=[a.value for a in allowed_actions(application.current_status)],
        )


class TransitionResponse(ApiModel):
    application: ApplicationResponse
    notification: NotificationResponse


class SubmissionResponse(ApiModel):
    application: ApplicationResponse
    notification: NotificationResponse
