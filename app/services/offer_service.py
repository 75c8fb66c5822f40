"""
Offer Letter Service
Drafts and sends offer letters for selected applications.

One letter per application, stored under the application id. A letter can be
saved as a draft any number of times; sending stamps it `sent` and emails the
formatted letter to the candidate.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

import structlog

from app.core.errors import FailedPrecondition, InvalidArgument, NotFound, ServiceError
from app.db.store import JOB_APPLICATIONS, OFFER_LETTERS, DocumentStore
from app.models.application import JobApplication
from app.models.offer import OfferLetter
from app.models.status import ApplicationStatus, OfferStatus
from app.services.email.dispatcher import EmailDispatcher
from app.services.email.templates import render_offer_email
from app.services.lifecycle_service import Notification
from app.utils.helpers import utc_now

logger = structlog.get_logger(__name__)

# Fields an admin may edit on a letter
EDITABLE_FIELDS = ("role", "department", "salary", "joining_date", "location", "additional_terms")


@dataclass
class OfferOutcome:
    """Sent letter plus the delivery result of its email."""

    offer: OfferLetter
    notification: Notification


class OfferLetterService:
    """Offer letter drafting and dispatch"""

    def __init__(
        self,
        store: DocumentStore,
        email: EmailDispatcher,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.email = email
        self.clock = clock

    async def get_or_prefill(self, application_id: str) -> OfferLetter:
        """
        Return the stored letter, or a new unsaved draft prefilled from the application.

        Raises:
            NotFound: application missing
            FailedPrecondition: application is not selected
        """
        application = await self._selected_application(application_id)
        existing = await self._get(application_id)
        if existing is not None:
            return existing
        return self._prefill(application)

    async def save_draft(self, application_id: str, changes: Dict[str, Any]) -> OfferLetter:
        """Merge edits into the letter and store it as a draft."""
        application = await self._selected_application(application_id)
        offer = self._merge(await self._get(application_id) or self._prefill(application), changes)

        now = self.clock()
        offer = offer.model_copy(update={
            "status": OfferStatus.DRAFT.value,
            "created_at": offer.created_at or now,
            "updated_at": now,
        })
        await self.store.set(OFFER_LETTERS, application_id, offer.to_document())
        logger.info("offer_draft_saved", application_id=application_id)
        return offer.model_copy(update={"id": application_id})

    async def send(self, application_id: str, changes: Optional[Dict[str, Any]] = None) -> OfferOutcome:
        """
        Finalize the letter and email it to the candidate.

        Role and department fall back to the application's job title and
        department when left blank.

        Raises:
            InvalidArgument: salary or joining date missing
            NotFound: application missing
            FailedPrecondition: application is not selected
        """
        application = await self._selected_application(application_id)
        offer = self._merge(await self._get(application_id) or self._prefill(application), changes or {})

        offer = offer.model_copy(update={
            "role": offer.role or application.job_title,
            "department": offer.department or application.department,
        })

        missing = []
        if not offer.salary:
            missing.append("salary")
        if offer.joining_date is None:
            missing.append("joiningDate")
        if not offer.role:
            missing.append("role")
        if missing:
            raise InvalidArgument(
                f"Missing required fields: {', '.join(missing)}",
                details={"missing": missing},
            )

        now = self.clock()
        offer = offer.model_copy(update={
            "status": OfferStatus.SENT.value,
            "created_at": offer.created_at or now,
            "updated_at": now,
            "sent_at": now,
        })
        await self.store.set(OFFER_LETTERS, application_id, offer.to_document())
        logger.info("offer_sent", application_id=application_id, candidate=offer.candidate_email)

        try:
            message = render_offer_email(offer, now.date())
            message_id = await self.email.send(offer.candidate_email, offer.candidate_name, message.subject, message.html)
            notification = Notification(delivered=True, message_id=message_id)
        except ServiceError as e:
            logger.warning("offer_email_failed", application_id=application_id, error=e.kind.value, detail=e.message)
            notification = Notification(delivered=False, error=e.kind.value, detail=e.message)

        return OfferOutcome(offer=offer.model_copy(update={"id": application_id}), notification=notification)

    async def _selected_application(self, application_id: str) -> JobApplication:
        data = await self.store.get(JOB_APPLICATIONS, application_id)
        if data is None:
            raise NotFound("Application not found", details={"application_id": application_id})
        application = JobApplication.from_document(data)
        if application.current_status != ApplicationStatus.SELECTED:
            raise FailedPrecondition(
                "Offer letters can only be created for selected applications",
                details={"status": application.current_status.value},
            )
        return application

    async def _get(self, application_id: str) -> Optional[OfferLetter]:
        data = await self.store.get(OFFER_LETTERS, application_id)
        if data is None:
            return None
        return OfferLetter.from_document(data)

    @staticmethod
    def _prefill(application: JobApplication) -> OfferLetter:
        return OfferLetter(
            id=application.id,
            application_id=application.id,
            candidate_name=application.personal_details.full_name,
            candidate_email=application.personal_details.email,
            role=application.job_title,
            department=application.department,
        )

    @staticmethod
    def _merge(offer: OfferLetter, changes: Dict[str, Any]) -> OfferLetter:
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise InvalidArgument(f"Unknown offer fields: {', '.join(sorted(unknown))}")
        merged = offer.model_dump()
        merged.update(changes)
        return OfferLetter.model_validate(merged)
