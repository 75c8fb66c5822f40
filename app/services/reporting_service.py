"""Recruitment dashboard figures."""

from datetime import datetime
from typing import Any, Callable, Dict, List

import structlog

from app.db.store import JOB_APPLICATIONS, JOB_POSTINGS, OFFER_LETTERS, USERS, DocumentStore
from app.models.job import JobPosting
from app.models.status import ApplicationStatus, OfferStatus
from app.utils.helpers import utc_now

logger = structlog.get_logger(__name__)

# Breakdown order and labels as shown on the dashboard
STATUS_LABELS = [
    (ApplicationStatus.PENDING, "Pending"),
    (ApplicationStatus.SHORTLISTED, "Shortlisted"),
    (ApplicationStatus.SELECTED, "Selected"),
    (ApplicationStatus.REJECTED, "Rejected"),
    (ApplicationStatus.ON_HOLD, "On Hold"),
]


class ReportingService:
    def __init__(self, store: DocumentStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    async def summary(self) -> Dict[str, Any]:
        """Totals, per-status breakdown (empty buckets omitted) and job counts."""
        by_status = {}
        for status, _ in STATUS_LABELS:
            values = [status.value, None] if status == ApplicationStatus.PENDING else [status.value]
            by_status[status] = await self.store.count(JOB_APPLICATIONS, {"status": values})

        breakdown: List[Dict[str, Any]] = [
            {"status": status.value, "name": label, "value": by_status[status]}
            for status, label in STATUS_LABELS
            if by_status[status] > 0
        ]

        now = self.clock()
        postings = [JobPosting.from_document(d) for d in await self.store.find(JOB_POSTINGS)]
        expired = sum(1 for p in postings if p.is_expired(now))

        report = {
            "totals": {
                "applications": await self.store.count(JOB_APPLICATIONS),
                "shortlisted": by_status[ApplicationStatus.SHORTLISTED],
                "selected": by_status[ApplicationStatus.SELECTED],
                "offer_letters": await self.store.count(OFFER_LETTERS),
                "offers_sent": await self.store.count(OFFER_LETTERS, {"status": OfferStatus.SENT.value}),
                "users": await self.store.count(USERS),
            },
            "status_breakdown": breakdown,
            "jobs": {
                "total": len(postings),
                "active": len(postings) - expired,
                "expired": expired,
            },
            "generated_at": now,
        }
        logger.debug("report_generated", applications=report["totals"]["applications"])
        return report
