"""Authentication endpoints: OTP-gated signup and the current profile."""

from fastapi import APIRouter, Depends, status

from app.core.deps import get_otp_service
from app.core.errors import NotFound
from app.core.security import CurrentUser, get_current_user
from app.models.user import UserProfile
from app.schemas.auth import (
    IssueCodeRequest,
    IssueCodeResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)
from app.services.otp_service import OTPVerificationService

router = APIRouter()


@router.post("/otp", response_model=IssueCodeResponse)
async def issue_code(
    request: IssueCodeRequest,
    otp_service: OTPVerificationService = Depends(get_otp_service),
):
    """
    Start signup: email a 6-digit verification code.

    Calling again for the same email replaces the previous code.
    """
    expires_in = await otp_service.issue_code(request.email, request.password)
    return IssueCodeResponse(expires_in=expires_in)


@router.post("/otp/verify", response_model=VerifyCodeResponse, status_code=status.HTTP_201_CREATED)
async def verify_code(
    request: VerifyCodeRequest,
    otp_service: OTPVerificationService = Depends(get_otp_service),
):
    """
    Finish signup: check the code and create the account.

    The password must match the one given when the code was requested.
    """
    uid = await otp_service.verify_code(request.email, request.otp, request.password)
    return VerifyCodeResponse(uid=uid)


@router.get("/me", response_model=UserProfile)
async def get_me(current_user: CurrentUser = Depends(get_current_user)):
    """Get current user profile."""
    if current_user.profile is None:
        raise NotFound("User profile not found")
    return current_user.profile
