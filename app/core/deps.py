"""Dependency functions for FastAPI routes.

Collaborators are created once by the application lifespan and kept on
`app.state`; services are cheap and built per request from them.
"""
from datetime import datetime
from typing import Callable

from fastapi import Depends, Request

from app.config import Settings, settings
from app.db.store import DocumentStore
from app.services.application_service import ApplicationService
from app.services.email.dispatcher import EmailDispatcher
from app.services.identity import IdentityProvider
from app.services.job_service import JobPostingService
from app.services.lifecycle_service import ApplicationLifecycleManager
from app.services.offer_service import OfferLetterService
from app.services.otp_service import OTPVerificationService
from app.services.reporting_service import ReportingService
from app.utils.helpers import utc_now

Clock = Callable[[], datetime]


def get_settings() -> Settings:
    return settings


def get_clock() -> Clock:
    return utc_now


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_email_dispatcher(request: Request) -> EmailDispatcher:
    return request.app.state.email


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity


def get_otp_service(
    store: DocumentStore = Depends(get_store),
    email: EmailDispatcher = Depends(get_email_dispatcher),
    identity: IdentityProvider = Depends(get_identity_provider),
    app_settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
) -> OTPVerificationService:
    return OTPVerificationService(store, email, identity, app_settings, clock=clock)


def get_job_service(
    store: DocumentStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> JobPostingService:
    return JobPostingService(store, clock=clock)


def get_application_service(
    store: DocumentStore = Depends(get_store),
    email: EmailDispatcher = Depends(get_email_dispatcher),
    jobs: JobPostingService = Depends(get_job_service),
    clock: Clock = Depends(get_clock),
) -> ApplicationService:
    return ApplicationService(store, email, jobs, clock=clock)


def get_lifecycle_manager(
    store: DocumentStore = Depends(get_store),
    email: EmailDispatcher = Depends(get_email_dispatcher),
    clock: Clock = Depends(get_clock),
) -> ApplicationLifecycleManager:
    return ApplicationLifecycleManager(store, email, clock=clock)


def get_offer_service(
    store: DocumentStore = Depends(get_store),
    email: EmailDispatcher = Depends(get_email_dispatcher),
    clock: Clock = Depends(get_clock),
) -> OfferLetterService:
    return OfferLetterService(store, email, clock=clock)


def get_reporting_service(
    store: DocumentStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> ReportingService:
    return ReportingService(store, clock=clock)
