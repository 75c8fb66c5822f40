"""Offer letter document."""

from datetime import date, datetime
from typing import Optional

from pydantic import field_serializer

from app.models.base import Document
from app.models.status import OfferStatus


class OfferLetter(Document):
    """Offer letter, one per application (keyed by application id)."""

    application_id: str
    candidate_name: str
    candidate_email: str
    role: str = ""
    department: str = ""
    salary: Optional[int] = None  # Annual, whole currency units
    joining_date: Optional[date] = None
    location: str = ""
    additional_terms: str = ""
    status: OfferStatus = OfferStatus.DRAFT
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None

    @field_serializer("joining_date")
    def serialize_joining_date(self, value: Optional[date]) -> Optional[str]:
        # BSON has no date-only type
        return value.isoformat() if value else None
