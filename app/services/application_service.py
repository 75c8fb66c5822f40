"""
Application Service
Applicant submissions and the admin screening queue.
"""

from datetime import datetime
from typing import Callable, List, Optional, Tuple

import structlog

from app.config import settings
from app.core.errors import InvalidArgument, NotFound, ServiceError
from app.db.store import DESCENDING, JOB_APPLICATIONS, DocumentStore
from app.models.application import JobApplication
from app.models.status import ApplicationStatus
from app.services.email.dispatcher import EmailDispatcher
from app.services.email.templates import render_application_received
from app.services.job_service import JobPostingService
from app.services.lifecycle_service import Notification
from app.utils.constants import DEGREE_LEVELS, SCREENING_TABS
from app.utils.helpers import normalize_email, normalize_text, utc_now
from app.utils.validators import missing_fields, validate_email, validate_phone, validate_url

logger = structlog.get_logger(__name__)


class ApplicationService:
    """Service for submitting and reviewing job applications"""

    def __init__(
        self,
        store: DocumentStore,
        email: EmailDispatcher,
        jobs: JobPostingService,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.email = email
        self.jobs = jobs
        self.clock = clock

    async def submit(self, application: JobApplication, applicant_uid: str) -> Tuple[JobApplication, Notification]:
        """
        Store a new application and send the confirmation email

        The posting must exist and be active. Job title and department are
        copied from the posting. The confirmation email is best-effort: a
        failure is reported but the application is kept.

        Returns:
            (stored application, confirmation email result)
        """
        self._validate(application)
        posting = await self.jobs.get_active(application.job_id)

        now = self.clock()
        details = application.personal_details
        application = application.model_copy(update={
            "id": None,
            "applicant_uid": applicant_uid,
            "job_title": posting.job_title,
            "department": posting.department,
            "personal_details": details.model_copy(update={"email": normalize_email(details.email)}),
            "status": ApplicationStatus.PENDING.value,
            "applied_at": now,
            "interview": None,
            "evaluation": None,
            "on_hold_at": None,
            "shortlisted_at": None,
            "selected_at": None,
            "rejected_at": None,
        })

        application_id = await self.store.insert(JOB_APPLICATIONS, application.to_document())
        application = application.model_copy(update={"id": application_id})
        logger.info("application_submitted", application_id=application_id, job_id=posting.id, uid=applicant_uid)

        return application, await self._confirm(application)

    async def get(self, application_id: str) -> JobApplication:
        data = await self.store.get(JOB_APPLICATIONS, application_id)
        if data is None:
            raise NotFound("Application not found", details={"application_id": application_id})
        return JobApplication.from_document(data)

    async def list_for_applicant(self, applicant_uid: str) -> List[JobApplication]:
        """The caller's own applications, newest first."""
        documents = await self.store.find(
            JOB_APPLICATIONS,
            {"applicantUid": applicant_uid},
            sort=[("appliedAt", DESCENDING)],
        )
        return [JobApplication.from_document(d) for d in documents]

    async def list_for_review(
        self,
        tab: Optional[str] = None,
        job_id: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[JobApplication]:
        """
        Admin screening queue, newest first

        Args:
            tab: "pending" (pending, on hold or unset), "shortlisted" or "processed" (selected/rejected)
            job_id: restrict to one posting
            search: case-insensitive match on applicant name, email or job title
            limit: page size, capped at MAX_PAGE_SIZE
        """
        filters = {}
        if tab:
            if tab not in SCREENING_TABS:
                raise InvalidArgument(f"Unknown tab: {tab}", details={"tabs": list(SCREENING_TABS)})
            filters["status"] = SCREENING_TABS[tab]
        if job_id:
            filters["jobId"] = job_id

        limit = min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
        # Text search runs after the query, so fetch unbounded in that case
        documents = await self.store.find(
            JOB_APPLICATIONS,
            filters,
            sort=[("appliedAt", DESCENDING)],
            limit=None if search else limit,
        )
        applications = [JobApplication.from_document(d) for d in documents]

        if search:
            needle = normalize_text(search)
            applications = [
                a for a in applications
                if needle in normalize_text(
                    f"{a.personal_details.full_name} {a.personal_details.email} {a.job_title}"
                )
            ][:limit]
        return applications

    async def _confirm(self, application: JobApplication) -> Notification:
        details = application.personal_details
        try:
            message = render_application_received(details.full_name, application.job_title)
            message_id = await self.email.send(details.email, details.full_name, message.subject, message.html)
        except ServiceError as e:
            logger.warning("confirmation_email_failed", application_id=application.id, error=e.kind.value)
            return Notification(delivered=False, error=e.kind.value, detail=e.message)
        return Notification(delivered=True, message_id=message_id)

    @staticmethod
    def _validate(application: JobApplication) -> None:
        details = application.personal_details
        missing = missing_fields(
            {
                "fullName": details.full_name,
                "email": details.email,
                "phone": details.phone,
                "address": details.address,
                "resumeUrl": application.resume_url,
                "coverLetter": application.cover_letter,
            },
            ["fullName", "email", "phone", "address", "resumeUrl", "coverLetter"],
        )
        if missing:
            raise InvalidArgument(f"Missing required fields: {', '.join(missing)}", details={"missing": missing})

        if not validate_email(details.email.strip()):
            raise InvalidArgument("Invalid email address")
        if not validate_phone(details.phone.strip()):
            raise InvalidArgument("Invalid phone number")
        if not validate_url(application.resume_url.strip()):
            raise InvalidArgument("Resume URL must be a valid http(s) URL")
        if application.portfolio_link and not validate_url(application.portfolio_link.strip()):
            raise InvalidArgument("Portfolio link must be a valid http(s) URL")

        if not application.education:
            raise InvalidArgument("At least one education entry is required")
        for entry in application.education:
            if not entry.degree_level.strip() or not entry.institution.strip():
                raise InvalidArgument("Each education entry needs a degree level and institution")
            if entry.degree_level not in DEGREE_LEVELS:
                raise InvalidArgument(f"Unknown degree level: {entry.degree_level}")

        if not [s for s in application.skills if s.strip()]:
            raise InvalidArgument("At least one skill is required")
