"""
Identity provider interface and its Firebase implementation.

Credential storage is delegated entirely to the provider; this service only
creates accounts after email ownership is proven and verifies ID tokens.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import firebase_admin
import structlog
from firebase_admin import auth, credentials, exceptions

from app.config import Settings
from app.core.errors import AlreadyExists, InternalError, Unauthenticated

logger = structlog.get_logger(__name__)


class IdentityProvider(ABC):
    """Base class for identity providers"""

    @abstractmethod
    async def create_account(self, email: str, password: str, email_verified: bool = True) -> str:
        """
        Create a real account

        Returns:
            The new account's uid

        Raises:
            AlreadyExists: an account with this email exists
        """
        pass

    @abstractmethod
    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a bearer ID token

        Returns:
            Decoded claims, at least {"uid", "email"}

        Raises:
            Unauthenticated: token missing, expired or invalid
        """
        pass


class FirebaseIdentityProvider(IdentityProvider):
    """Firebase Authentication via the Admin SDK.

    The SDK is synchronous, so calls run in a worker thread.
    """

    def __init__(self, app: firebase_admin.App):
        self.app = app

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirebaseIdentityProvider":
        """Initialize the Admin SDK from a service account file, or application default credentials."""
        if settings.FIREBASE_CREDENTIALS:
            cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS)
        else:
            logger.warning("firebase_default_credentials", reason="FIREBASE_CREDENTIALS not set")
            cred = credentials.ApplicationDefault()

        options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
        try:
            app = firebase_admin.get_app()
        except ValueError:
            app = firebase_admin.initialize_app(cred, options)
        logger.info("firebase_initialized", project_id=app.project_id)
        return cls(app)

    async def create_account(self, email: str, password: str, email_verified: bool = True) -> str:
        try:
            user = await asyncio.to_thread(
                auth.create_user,
                email=email,
                password=password,
                email_verified=email_verified,
                app=self.app,
            )
        except auth.EmailAlreadyExistsError:
            raise AlreadyExists("This email is already registered. Please sign in instead.")
        except ValueError as e:
            # SDK-side argument validation, e.g. password shorter than 6 characters
            raise InternalError(str(e))
        except exceptions.FirebaseError as e:
            logger.error("firebase_create_user_failed", email=email, code=e.code, error=str(e))
            raise InternalError("Failed to create account")

        logger.info("firebase_user_created", uid=user.uid, email=email)
        return user.uid

    async def verify_token(self, token: str) -> Dict[str, Any]:
        if not token:
            raise Unauthenticated("Missing authentication token")
        try:
            claims = await asyncio.to_thread(auth.verify_id_token, token, app=self.app)
        except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError) as e:
            logger.info("firebase_token_rejected", error=str(e))
            raise Unauthenticated("Could not validate credentials")
        except auth.CertificateFetchError as e:
            logger.error("firebase_certificate_fetch_failed", error=str(e))
            raise InternalError("Failed to verify credentials")
        except ValueError as e:
            raise Unauthenticated(str(e))
        claims.setdefault("uid", claims.get("sub"))
        return claims

    async def grant_admin(self, uid: str) -> None:
        """Attach the admin custom claim to an account."""
        await asyncio.to_thread(auth.set_custom_user_claims, uid, {"admin": True}, app=self.app)
        logger.info("firebase_admin_claim_set", uid=uid)

    async def get_uid_by_email(self, email: str) -> Optional[str]:
        try:
            user = await asyncio.to_thread(auth.get_user_by_email, email, app=self.app)
        except auth.UserNotFoundError:
            return None
        return user.uid
