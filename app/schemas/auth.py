"""Authentication schemas."""

from pydantic import EmailStr, Field

from app.schemas.base import ApiModel


class IssueCodeRequest(ApiModel):
    """Signup step 1: request a verification code."""

    email: EmailStr
    password: str = Field(..., min_length=6, description="Password the account will be created with")


class IssueCodeResponse(ApiModel):
    message: str = "Verification code sent to your email"
    expires_in: int


class VerifyCodeRequest(ApiModel):
    """Signup step 2: confirm the code and create the account."""

    email: EmailStr
    otp: str = Field(..., min_length=1, max_length=12)
    password: str = Field(..., min_length=1)


class VerifyCodeResponse(ApiModel):
    message: str = "Account created successfully"
    uid: str
