"""Application configuration using Pydantic Settings."""

from typing import List, Union
from urllib.parse import quote_plus

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "HRMS Recruitment API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: Union[str, List[str]] = ["*"]

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = True

    # MongoDB (document store for jobs, applications, users, offers)
    MONGODB_URI_OVERRIDE: str = Field(default="", alias="MONGODB_URI")
    MONGODB_USERNAME: str = ""
    MONGODB_PASSWORD: str = ""
    MONGODB_CLUSTER: str = "localhost:27017"
    MONGODB_DATABASE: str = "hrms"
    MONGODB_MAX_POOL_SIZE: int = 10
    MONGODB_TIMEOUT_MS: int = 5000

    @property
    def MONGODB_URI(self) -> str:
        """Construct MongoDB connection URI"""
        if self.MONGODB_URI_OVERRIDE:
            return self.MONGODB_URI_OVERRIDE
        if self.MONGODB_USERNAME and self.MONGODB_PASSWORD:
            username = quote_plus(self.MONGODB_USERNAME)
            password = quote_plus(self.MONGODB_PASSWORD)
            return f"mongodb+srv://{username}:{password}@{self.MONGODB_CLUSTER}/?retryWrites=true&w=majority"
        return f"mongodb://{self.MONGODB_CLUSTER}/"

    # Transactional email (Brevo)
    BREVO_API_KEY: str = ""
    BREVO_API_URL: str = "https://api.brevo.com/v3/smtp/email"
    SENDER_EMAIL: str = "no-reply@hrms.local"
    SENDER_NAME: str = "HRMS Recruitment"
    COMPANY_NAME: str = "HRMS Portal"
    EMAIL_TIMEOUT_SECONDS: float = 10.0
    OFFER_CURRENCY_SYMBOL: str = "₹"

    # Identity provider (Firebase)
    FIREBASE_CREDENTIALS: str = ""  # Path to service account JSON
    FIREBASE_PROJECT_ID: str = ""

    # Admin access: emails granted the admin role in addition to role claims
    ADMIN_EMAILS: Union[str, List[str]] = []

    # Signup verification
    OTP_TTL_SECONDS: int = 600  # 10 minutes
    OTP_MAX_ATTEMPTS: int = 3

    # Pagination
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 200

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # Monitoring
    SENTRY_DSN: str = ""
    SENTRY_ENVIRONMENT: str = "production"
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    @field_validator("ADMIN_EMAILS", mode="before")
    @classmethod
    def parse_admin_emails(cls, v):
        """Parse comma-separated admin emails."""
        if isinstance(v, str):
            return [email.strip().lower() for email in v.split(",") if email.strip()]
        return [email.lower() for email in v]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_origins(cls, v):
        """Parse comma-separated origins."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


# Create global settings instance
settings = Settings()
