"""Document models."""

from app.models.application import (
    Evaluation,
    EducationEntry,
    InterviewDetails,
    JobApplication,
    PersonalDetails,
    WorkExperience,
)
from app.models.job import Department, JobPosting
from app.models.offer import OfferLetter
from app.models.status import (
    Action,
    ApplicationStatus,
    InterviewMode,
    OfferStatus,
    Role,
)
from app.models.user import UserProfile
from app.models.verification import PendingVerification

# Export all models
__all__ = [
    "Action",
    "ApplicationStatus",
    "Department",
    "Evaluation",
    "EducationEntry",
    "InterviewDetails",
    "InterviewMode",
    "JobApplication",
    "JobPosting",
    "OfferLetter",
    "OfferStatus",
    "PendingVerification",
    "PersonalDetails",
    "Role",
    "UserProfile",
    "WorkExperience",
]
