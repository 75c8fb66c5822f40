"""User profile document."""

from datetime import datetime
from typing import Optional

from app.models.base import Document
from app.models.status import Role


class UserProfile(Document):
    """Profile companion to an identity-provider account, keyed by uid."""

    uid: str
    email: str
    display_name: str = ""
    role: Role = Role.USER
    email_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def __repr__(self):
        return f"<UserProfile {self.email} ({self.role})>"
