"""Offer letter schemas."""

from datetime import date
from typing import Optional

from pydantic import Field

from app.models.offer import OfferLetter
from app.schemas.application import NotificationResponse
from app.schemas.base import ApiModel


class OfferLetterRequest(ApiModel):
    """Editable offer terms; omitted fields keep their stored value."""

    role: Optional[str] = None
    department: Optional[str] = None
    salary: Optional[int] = Field(None, gt=0, description="Annual salary, whole currency units")
    joining_date: Optional[date] = None
    location: Optional[str] = None
    additional_terms: Optional[str] = None


class OfferSendResponse(ApiModel):
    offer: OfferLetter
    notification: NotificationResponse
