"""
OTP Verification Service
Gates identity-provider account creation behind proof of email ownership

Flow:
- issue_code: store digests of a fresh 6-digit code and the intended password,
  then email the plaintext code
- verify_code: check expiry, attempt budget, code, password (in that order),
  then create the real account and its profile

Neither the code nor the password is ever persisted in plaintext. The password
digest is only a consistency check; real credential storage belongs to the
identity provider.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

import structlog

from app.config import Settings
from app.core.errors import (
    DeadlineExceeded,
    InternalError,
    InvalidArgument,
    NotFound,
    ResourceExhausted,
    ServiceError,
)
from app.db.store import PENDING_VERIFICATIONS, USERS, DocumentStore
from app.models.status import Role
from app.models.user import UserProfile
from app.models.verification import PendingVerification
from app.services.email.dispatcher import EmailDispatcher
from app.services.email.templates import render_otp_email
from app.services.identity import IdentityProvider
from app.utils.helpers import generate_hash, generate_otp, normalize_email, utc_now

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


class OTPVerificationService:
    """Signup verification by emailed one-time code"""

    def __init__(
        self,
        store: DocumentStore,
        email: EmailDispatcher,
        identity: IdentityProvider,
        settings: Settings,
        clock: Clock = utc_now,
        code_generator: Callable[[], str] = generate_otp,
    ):
        self.store = store
        self.email = email
        self.identity = identity
        self.ttl_seconds = settings.OTP_TTL_SECONDS
        self.max_attempts = settings.OTP_MAX_ATTEMPTS
        self.clock = clock
        self.code_generator = code_generator

    async def issue_code(self, email: str, candidate_password: str) -> int:
        """
        Start (or restart) a signup for `email`

        Overwrites any pending verification for the same email, so only the
        most recently issued code is valid.

        Args:
            email: Address to verify
            candidate_password: Password the user intends to set

        Returns:
            Seconds until the code expires

        Raises:
            InvalidArgument: email or password missing
            InternalError: email service not configured (nothing is stored), or
                the email could not be sent (the pending record is kept)
        """
        if not email or not email.strip() or not candidate_password:
            raise InvalidArgument("Email and password are required")

        email = normalize_email(email)
        if not self.email.is_configured:
            logger.error("otp_email_not_configured", email=email)
            raise InternalError("Email service configuration error")

        code = self.code_generator()
        now = self.clock()

        pending = PendingVerification(
            email=email,
            otp_hash=generate_hash(code),
            password_hash=generate_hash(candidate_password),
            created_at=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
            attempts=0,
        )
        await self.store.set(PENDING_VERIFICATIONS, email, pending.to_document())
        logger.info("otp_issued", email=email, expires_at=pending.expires_at.isoformat())

        message = render_otp_email(code, self.ttl_seconds)
        try:
            await self.email.send(email, email, message.subject, message.html)
        except InternalError:
            raise
        except ServiceError as e:
            raise InternalError(
                "Failed to send verification email",
                details={"provider_error": e.kind.value},
            )

        return self.ttl_seconds

    async def verify_code(self, email: str, submitted_code: str, submitted_password: str) -> str:
        """
        Complete a signup

        Checks, in order: pending record exists, not expired, attempts left,
        code matches, password matches. Only a wrong code consumes an attempt.

        Returns:
            uid of the newly created account

        Raises:
            NotFound: no pending verification
            DeadlineExceeded: code expired (record removed)
            ResourceExhausted: attempt budget spent (record removed)
            InvalidArgument: wrong code or mismatched password
            AlreadyExists: the identity provider already has this email
        """
        if not email or not submitted_code or not submitted_password:
            raise InvalidArgument("Email, verification code and password are required")

        email = normalize_email(email)
        pending = await self._get_pending(email)
        if pending is None:
            raise NotFound("No verification request found. Please sign up again.")

        now = self.clock()
        if pending.is_expired(now):
            await self.store.delete(PENDING_VERIFICATIONS, email)
            logger.info("otp_expired", email=email)
            raise DeadlineExceeded("Verification code has expired. Please request a new one.")

        if pending.attempts >= self.max_attempts:
            await self.store.delete(PENDING_VERIFICATIONS, email)
            logger.info("otp_attempts_exhausted", email=email)
            raise ResourceExhausted("Too many failed attempts. Please sign up again.")

        if generate_hash(submitted_code.strip()) != pending.otp_hash:
            # Remaining attempts come from the post-increment stored value
            attempts = await self.store.increment(PENDING_VERIFICATIONS, email, "attempts")
            if attempts is None:
                raise NotFound("No verification request found. Please sign up again.")
            remaining = self.max_attempts - attempts
            logger.info("otp_mismatch", email=email, remaining=remaining)
            if remaining <= 0:
                await self.store.delete(PENDING_VERIFICATIONS, email)
                raise ResourceExhausted("Too many failed attempts. Please sign up again.")
            raise InvalidArgument(
                f"Invalid verification code. {remaining} attempt(s) remaining.",
                details={"remaining_attempts": remaining},
            )

        if generate_hash(submitted_password) != pending.password_hash:
            raise InvalidArgument(
                "Password does not match. Please use the same password you entered during signup."
            )

        uid = await self.identity.create_account(email, submitted_password, email_verified=True)

        profile = UserProfile(
            uid=uid,
            email=email,
            display_name="",
            role=Role.USER,
            email_verified=True,
            created_at=now,
            updated_at=now,
        )
        await self.store.set(USERS, uid, profile.to_document())
        await self.store.delete(PENDING_VERIFICATIONS, email)

        logger.info("signup_verified", uid=uid, email=email)
        return uid

    async def _get_pending(self, email: str) -> Optional[PendingVerification]:
        data = await self.store.get(PENDING_VERIFICATIONS, email)
        if data is None:
            return None
        return PendingVerification.from_document(data)
