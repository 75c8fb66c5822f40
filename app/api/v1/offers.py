"""Admin endpoints - offer letters."""

from typing import Optional

from fastapi import APIRouter, Depends

from app.core.deps import get_offer_service
from app.core.security import require_admin
from app.models.offer import OfferLetter
from app.schemas.application import NotificationResponse
from app.schemas.offer import OfferLetterRequest, OfferSendResponse
from app.services.offer_service import OfferLetterService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/{application_id}", response_model=OfferLetter)
async def get_offer(application_id: str, offers: OfferLetterService = Depends(get_offer_service)):
    """Stored letter, or an unsaved draft prefilled from the selected application."""
    return await offers.get_or_prefill(application_id)


@router.put("/{application_id}", response_model=OfferLetter)
async def save_draft(
    application_id: str,
    request: OfferLetterRequest,
    offers: OfferLetterService = Depends(get_offer_service),
):
    """Save offer letter as draft."""
    return await offers.save_draft(application_id, request.model_dump(exclude_unset=True))


@router.post("/{application_id}/send", response_model=OfferSendResponse)
async def send_offer(
    application_id: str,
    request: Optional[OfferLetterRequest] = None,
    offers: OfferLetterService = Depends(get_offer_service),
):
    """
    Mark the letter sent and email it to the candidate.

    Salary and joining date are required, either stored on the draft or in the body.
    """
    changes = request.model_dump(exclude_unset=True) if request else {}
    outcome = await offers.send(application_id, changes)
    return OfferSendResponse(
        offer=outcome.offer,
        notification=NotificationResponse.model_validate(outcome.notification),
    )
