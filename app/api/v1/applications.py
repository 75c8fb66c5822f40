"""Applicant endpoints - submit and track applications."""

from typing import List

from fastapi import APIRouter, Depends, status

from app.core.deps import get_application_service
from app.core.security import CurrentUser, get_current_user
from app.schemas.application import (
    ApplicationCreate,
    ApplicationResponse,
    NotificationResponse,
    SubmissionResponse,
)
from app.services.application_service import ApplicationService

router = APIRouter()


@router.post("/", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(
    request: ApplicationCreate,
    current_user: CurrentUser = Depends(get_current_user),
    applications: ApplicationService = Depends(get_application_service),
):
    """
    Apply to an open posting.

    A confirmation email is sent afterwards; if it fails the application is
    still stored and `notification.delivered` is false.
    """
    application, notification = await applications.submit(request.to_model(), current_user.uid)
    return SubmissionResponse(
        application=ApplicationResponse.from_model(application),
        notification=NotificationResponse.model_validate(notification),
    )


@router.get("/me", response_model=List[ApplicationResponse])
async def my_applications(
    current_user: CurrentUser = Depends(get_current_user),
    applications: ApplicationService = Depends(get_application_service),
):
    """Applications submitted by the current user, newest first."""
    return [
        ApplicationResponse.from_model(a)
        for a in await applications.list_for_applicant(current_user.uid)
    ]
