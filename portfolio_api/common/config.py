# portfolio_api/common/config.py

import os
from typing import Annotated, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode

env_file = ".env.production" if os.getenv("APP_ENV") == "production" else ".env"
load_dotenv(env_file)

DEFAULT_CONTACT_RECIPIENT = "subash.93450@gmail.com"


class Settings(BaseSettings):
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "info"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = [
        "https://subash-s-66.github.io",
        "https://subash-portfolio.zeabur.app",
    ]

    # Number of reverse proxies in front of the app whose X-Forwarded-For
    # entries are trusted when deriving the client address.
    TRUSTED_PROXY_HOPS: int = 1

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    API_RATE_LIMIT: int = 100
    API_RATE_WINDOW_SECONDS: int = 15 * 60
    CONTACT_RATE_LIMIT: int = 5
    CONTACT_RATE_WINDOW_SECONDS: int = 15 * 60

    # SMTP settings
    EMAIL_HOST: str = ""
    EMAIL_PORT: int = 587
    EMAIL_USER: str = ""
    EMAIL_PASSWORD: str = ""
    EMAIL_FROM: str = ""

    # Resend settings
    RESEND_API_KEY: str = ""
    RESEND_FROM: str = "Portfolio Contact <onboarding@resend.dev>"

    # Contact form
    EMAIL_TO: str = ""
    NOTIFICATION_EMAIL: str = ""
    EMAIL_SEND_TIMEOUT: float = 10.0
    # IANA zone the "Received" time is shown in, e.g. "Asia/Kolkata".
    DISPLAY_TIMEZONE: str = "UTC"
    CONTACT_OWNER_NAME: str = "Subash S"
    CONTACT_OWNER_TAGLINE: str = "Full Stack Developer | B.Tech Computer Science Student"
    GITHUB_URL: str = "https://github.com/Subash-S-66"
    LINKEDIN_URL: str = "https://www.linkedin.com/in/subash-s-514aa9373"

    @field_validator("ALLOWED_ORIGINS", mode="before")
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("EMAIL_PORT", mode="before")
    def default_port(cls, value):
        # An empty EMAIL_PORT in .env means "use the submission port".
        if value in ("", None):
            return 587
        return value

    @field_validator("DISPLAY_TIMEZONE")
    def known_timezone(cls, value):
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @model_validator(mode="after")
    def validate_limits(self):
        if self.TRUSTED_PROXY_HOPS < 0:
            raise ValueError("TRUSTED_PROXY_HOPS must be zero or positive")
        if self.EMAIL_SEND_TIMEOUT <= 0:
            raise ValueError("EMAIL_SEND_TIMEOUT must be positive")
        return self

    @property
    def contact_recipient(self) -> str:
        return self.EMAIL_TO or self.NOTIFICATION_EMAIL or DEFAULT_CONTACT_RECIPIENT

    @property
    def display_timezone(self) -> ZoneInfo:
        return ZoneInfo(self.DISPLAY_TIMEZONE)

    @property
    def smtp_sender(self) -> Optional[str]:
        return self.EMAIL_FROM or self.EMAIL_USER or None


settings = Settings()
