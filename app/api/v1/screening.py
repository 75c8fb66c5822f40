"""Admin endpoints - screening queue and application status transitions."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from app.core.deps import get_application_service, get_lifecycle_manager
from app.core.security import CurrentUser, require_admin
from app.schemas.application import (
    ApplicationResponse,
    EvaluationRequest,
    InterviewRequest,
    NotificationResponse,
    TransitionResponse,
)
from app.services.application_service import ApplicationService
from app.services.lifecycle_service import ApplicationLifecycleManager, TransitionOutcome

router = APIRouter(dependencies=[Depends(require_admin)])


def _transition_response(outcome: TransitionOutcome) -> TransitionResponse:
    return TransitionResponse(
        application=ApplicationResponse.from_model(outcome.application),
        notification=NotificationResponse.model_validate(outcome.notification),
    )


@router.get("/", response_model=List[ApplicationResponse])
async def list_applications(
    tab: Optional[Literal["pending", "shortlisted", "processed"]] = Query(None, description="Screening tab"),
    job_id: Optional[str] = Query(None, description="Filter by job posting"),
    search: Optional[str] = Query(None, description="Match on applicant name, email or job title"),
    limit: Optional[int] = Query(None, ge=1, le=200),
    applications: ApplicationService = Depends(get_application_service),
):
    """
    Screening queue, newest first.

    **Tabs:**
    - `pending`: pending or on hold
    - `shortlisted`: interview scheduled
    - `processed`: selected or rejected
    """
    results = await applications.list_for_review(tab=tab, job_id=job_id, search=search, limit=limit)
    return [ApplicationResponse.from_model(a) for a in results]


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: str,
    applications: ApplicationService = Depends(get_application_service),
):
    return ApplicationResponse.from_model(await applications.get(application_id))


@router.post("/{application_id}/shortlist", response_model=TransitionResponse)
async def shortlist(
    application_id: str,
    request: InterviewRequest,
    lifecycle: ApplicationLifecycleManager = Depends(get_lifecycle_manager),
):
    """Shortlist and schedule an interview (online needs a meeting link, offline a location)."""
    return _transition_response(await lifecycle.shortlist(application_id, request.to_model()))


@router.post("/{application_id}/hold", response_model=TransitionResponse)
async def hold(application_id: str, lifecycle: ApplicationLifecycleManager = Depends(get_lifecycle_manager)):
    return _transition_response(await lifecycle.hold(application_id))


@router.post("/{application_id}/reject", response_model=TransitionResponse)
async def reject(application_id: str, lifecycle: ApplicationLifecycleManager = Depends(get_lifecycle_manager)):
    """Reject a pending application without an interview."""
    return _transition_response(await lifecycle.reject(application_id))


@router.post("/{application_id}/select", response_model=TransitionResponse)
async def select(
    application_id: str,
    request: EvaluationRequest,
    admin: CurrentUser = Depends(require_admin),
    lifecycle: ApplicationLifecycleManager = Depends(get_lifecycle_manager),
):
    """Record the interview evaluation and select the candidate."""
    outcome = await lifecycle.select(application_id, request.to_model(), evaluated_by=admin.email)
    return _transition_response(outcome)


@router.post("/{application_id}/reject-after-interview", response_model=TransitionResponse)
async def reject_after_interview(
    application_id: str,
    request: EvaluationRequest,
    admin: CurrentUser = Depends(require_admin),
    lifecycle: ApplicationLifecycleManager = Depends(get_lifecycle_manager),
):
    """Record the interview evaluation and reject the candidate."""
    outcome = await lifecycle.reject_after_interview(application_id, request.to_model(), evaluated_by=admin.email)
    return _transition_response(outcome)


@router.post("/{application_id}/notify", response_model=TransitionResponse)
async def resend_notification(
    application_id: str,
    lifecycle: ApplicationLifecycleManager = Depends(get_lifecycle_manager),
):
    """Re-send the email for the application's current status."""
    return _transition_response(await lifecycle.resend_notification(application_id))
