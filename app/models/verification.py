"""Pending signup verification document."""

from datetime import datetime

from app.models.base import Document
from app.utils.helpers import as_utc


class PendingVerification(Document):
    """In-flight signup awaiting OTP confirmation, keyed by email."""

    email: str
    otp_hash: str  # sha256 of the code, never the code itself
    password_hash: str  # sha256 of the intended password, only for the mismatch check
    created_at: datetime
    expires_at: datetime
    attempts: int = 0

    def is_expired(self, now: datetime) -> bool:
        return as_utc(self.expires_at) < now
