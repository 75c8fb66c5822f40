"""Main FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import httpx
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
import structlog

from app.api.v1 import api_router
from app.config import settings
from app.core.errors import register_error_handlers
from app.core.logging import setup_logging
from app.db.mongo import MongoDocumentStore
from app.services.email.dispatcher import BrevoEmailDispatcher
from app.services.identity import FirebaseIdentityProvider

# Setup logging
setup_logging()
logger = structlog.get_logger(__name__)

# Initialize Sentry for error tracking (only if DSN is properly configured)
if settings.SENTRY_DSN and settings.SENTRY_DSN.startswith('https://'):
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(
                level=None,  # Capture all logs
                event_level="ERROR",  # Only send ERROR and above as events
            ),
        ],
        release=settings.APP_VERSION,
        attach_stacktrace=True,
        send_default_pii=False,  # Applicant emails stay out of Sentry
    )
else:
    logger.info("sentry_disabled", reason="SENTRY_DSN not configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build collaborators on startup and release them on shutdown."""
    # Startup
    store = MongoDocumentStore.from_settings(settings)
    await store.create_indexes()
    http_client = httpx.AsyncClient(timeout=settings.EMAIL_TIMEOUT_SECONDS)

    app.state.store = store
    app.state.email = BrevoEmailDispatcher(http_client, settings)
    app.state.identity = FirebaseIdentityProvider.from_settings(settings)
    logger.info("startup_complete", environment=settings.ENVIRONMENT, database=settings.MONGODB_DATABASE)
    yield
    # Shutdown
    await http_client.aclose()
    await store.close()


def create_app(use_lifespan: bool = True) -> FastAPI:
    """
    Build the application.

    Args:
        use_lifespan: tests pass False and supply collaborators through
            dependency overrides instead
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Recruitment API: OTP signup, job postings, application screening and offer letters",
        lifespan=lifespan if use_lifespan else None,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        swagger_ui_parameters={
            "persistAuthorization": True,  # Persist authorization after page refresh
        },
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Include API router
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint."""
        return {
            "message": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "operational",
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint with document store status."""
        store = getattr(request.app.state, "store", None)
        database_ok = await store.ping() if store is not None else False
        return {
            "status": "healthy" if database_ok else "degraded",
            "environment": settings.ENVIRONMENT,
            "database": "connected" if database_ok else "unavailable",
        }

    return app


app = create_app()
