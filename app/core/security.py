"""Authentication and admin authorization."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import structlog

from app.config import Settings
from app.core.deps import get_identity_provider, get_settings, get_store
from app.core.errors import PermissionDenied, Unauthenticated
from app.db.store import USERS, DocumentStore
from app.models.user import UserProfile
from app.services.identity import IdentityProvider
from app.utils.helpers import normalize_email

logger = structlog.get_logger(__name__)

# HTTPBearer for simple token authentication in Swagger (just paste the ID token)
security = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """Verified caller: token claims plus the stored profile, if any."""

    uid: str
    email: str
    claims: Dict[str, Any] = field(default_factory=dict)
    profile: Optional[UserProfile] = None


def is_admin(user: CurrentUser, app_settings: Settings) -> bool:
    """Admin via custom claim, profile role, or the configured allow-list."""
    if user.claims.get("admin") is True:
        return True
    if user.profile is not None and user.profile.is_admin:
        return True
    return user.email in app_settings.ADMIN_EMAILS


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identity: IdentityProvider = Depends(get_identity_provider),
    store: DocumentStore = Depends(get_store),
) -> CurrentUser:
    """Get current authenticated user from Bearer token."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Not authenticated")

    claims = await identity.verify_token(credentials.credentials)
    uid = claims.get("uid")
    if not uid:
        raise Unauthenticated("Could not validate credentials")

    data = await store.get(USERS, uid)
    profile = UserProfile.from_document(data) if data else None

    return CurrentUser(
        uid=uid,
        email=normalize_email(claims.get("email") or (profile.email if profile else "")),
        claims=claims,
        profile=profile,
    )


async def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
    app_settings: Settings = Depends(get_settings),
) -> CurrentUser:
    """Dependency restricting a route to admins."""
    if not is_admin(current_user, app_settings):
        logger.info("admin_access_denied", uid=current_user.uid, email=current_user.email)
        raise PermissionDenied("Admin access required")
    return current_user
