"""
Application Lifecycle Manager
Enforces legal status transitions for job applications and sends the matching
status email.

A transition is committed once its data write succeeds. The email is sent
afterwards; a delivery failure is reported in the outcome and never rolls the
status back. Use resend_notification to retry only the email.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional

import structlog

from app.core.errors import FailedPrecondition, InvalidArgument, NotFound, ServiceError
from app.db.store import JOB_APPLICATIONS, DocumentStore
from app.models.application import Evaluation, InterviewDetails, JobApplication
from app.models.status import (
    Action,
    ApplicationStatus,
    InterviewMode,
    transition_for,
)
from app.services.email.dispatcher import EmailDispatcher
from app.services.email.templates import render_status_email
from app.utils.helpers import utc_now
from app.utils.validators import validate_interview_date, validate_interview_time, validate_url

logger = structlog.get_logger(__name__)


@dataclass
class Notification:
    """Result of the best-effort email that follows a transition."""

    delivered: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    detail: Optional[str] = None


@dataclass
class TransitionOutcome:
    application: JobApplication
    notification: Notification = field(default_factory=lambda: Notification(delivered=False))


class ApplicationLifecycleManager:
    """Admin-driven status transitions on job applications"""

    def __init__(
        self,
        store: DocumentStore,
        email: EmailDispatcher,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.email = email
        self.clock = clock

    async def shortlist(self, application_id: str, interview: InterviewDetails) -> TransitionOutcome:
        """pending/on_hold -> shortlisted, scheduling an interview."""
        self.validate_interview(interview)
        now = self.clock()
        interview = interview.model_copy(update={"scheduled_at": now})
        return await self._transition(
            application_id,
            Action.SHORTLIST,
            {"interview": interview.model_dump(by_alias=True)},
            now=now,
        )

    async def hold(self, application_id: str) -> TransitionOutcome:
        """pending -> on_hold."""
        return await self._transition(application_id, Action.HOLD, {})

    async def reject(self, application_id: str) -> TransitionOutcome:
        """pending -> rejected, without an interview."""
        return await self._transition(application_id, Action.REJECT, {})

    async def select(self, application_id: str, evaluation: Evaluation, evaluated_by: str = "") -> TransitionOutcome:
        """shortlisted -> selected, recording the interview evaluation."""
        return await self._evaluate(application_id, Action.SELECT, evaluation, evaluated_by)

    async def reject_after_interview(
        self, application_id: str, evaluation: Evaluation, evaluated_by: str = ""
    ) -> TransitionOutcome:
        """shortlisted -> rejected, recording the interview evaluation."""
        return await self._evaluate(application_id, Action.REJECT_AFTER_INTERVIEW, evaluation, evaluated_by)

    async def resend_notification(self, application_id: str) -> TransitionOutcome:
        """
        Re-send the email for the application's current status

        Raises:
            NotFound: application missing
            InvalidArgument: the current status has no email (pending)
        """
        application = await self.get(application_id)
        # Render first so an unsupported status fails as a caller error
        render_status_email(
            application.current_status,
            application.personal_details.full_name,
            application.job_title,
            application.interview,
        )
        notification = await self._notify(application, application.current_status)
        return TransitionOutcome(application=application, notification=notification)

    async def get(self, application_id: str) -> JobApplication:
        data = await self.store.get(JOB_APPLICATIONS, application_id)
        if data is None:
            raise NotFound("Application not found", details={"application_id": application_id})
        return JobApplication.from_document(data)

    @staticmethod
    def validate_interview(interview: InterviewDetails) -> None:
        """
        Reject incomplete interview details before anything is written.

        Raises:
            InvalidArgument: date/time missing or malformed, or the link/location
                required by the interview mode is missing
        """
        if not interview.date or not interview.date.strip():
            raise InvalidArgument("Interview date is required")
        if not interview.time or not interview.time.strip():
            raise InvalidArgument("Interview time is required")
        if not validate_interview_date(interview.date.strip()):
            raise InvalidArgument("Interview date must be YYYY-MM-DD")
        if not validate_interview_time(interview.time.strip()):
            raise InvalidArgument("Interview time must be HH:MM")

        mode = InterviewMode(interview.mode)
        if mode == InterviewMode.ONLINE:
            if not interview.meeting_link or not interview.meeting_link.strip():
                raise InvalidArgument("Meeting link is required for online interviews")
            if not validate_url(interview.meeting_link.strip()):
                raise InvalidArgument("Meeting link must be a valid http(s) URL")
        elif not interview.location or not interview.location.strip():
            raise InvalidArgument("Location is required for in-person interviews")

    async def _evaluate(
        self, application_id: str, action: Action, evaluation: Evaluation, evaluated_by: str
    ) -> TransitionOutcome:
        now = self.clock()
        evaluation = evaluation.model_copy(update={"evaluated_at": now, "evaluated_by": evaluated_by})
        return await self._transition(
            application_id,
            action,
            {"evaluation": evaluation.model_dump(by_alias=True)},
            now=now,
        )

    async def _transition(
        self,
        application_id: str,
        action: Action,
        changes: Dict[str, Any],
        now: Optional[datetime] = None,
    ) -> TransitionOutcome:
        application = await self.get(application_id)
        current = application.current_status

        transition = transition_for(action, current)
        if transition is None:
            raise FailedPrecondition(
                f"Cannot {action.value.replace('_', ' ')} an application that is {current.value}",
                details={"status": current.value, "action": action.value},
            )

        now = now or self.clock()
        target = transition.target
        changes = {
            **changes,
            "status": target.value,
            target.timestamp_field: now,
        }

        # Guard on the status we validated against; an unset status counts as pending
        allowed = [s.value for s in transition.sources]
        if ApplicationStatus.PENDING in transition.sources:
            allowed.append(None)

        matched = await self.store.update(JOB_APPLICATIONS, application_id, changes, where={"status": allowed})
        if not matched:
            latest = await self.store.get(JOB_APPLICATIONS, application_id)
            if latest is None:
                raise NotFound("Application not found", details={"application_id": application_id})
            raise FailedPrecondition(
                "Application was updated by someone else. Reload and try again.",
                details={"status": latest.get("status")},
            )

        logger.info(
            "application_status_changed",
            application_id=application_id,
            action=action.value,
            from_status=current.value,
            to_status=target.value,
        )

        application = await self.get(application_id)
        notification = await self._notify(application, target)
        return TransitionOutcome(application=application, notification=notification)

    async def _notify(self, application: JobApplication, status: ApplicationStatus) -> Notification:
        details = application.personal_details
        try:
            message = render_status_email(status, details.full_name, application.job_title, application.interview)
            message_id = await self.email.send(details.email, details.full_name, message.subject, message.html)
        except ServiceError as e:
            logger.warning(
                "status_email_failed",
                application_id=application.id,
                status=status.value,
                error=e.kind.value,
                detail=e.message,
            )
            return Notification(delivered=False, error=e.kind.value, detail=e.message)

        return Notification(delivered=True, message_id=message_id)
