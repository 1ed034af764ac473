"""
Application settings.

Values are read from environment variables once, at import time.  Every
field has a default suitable for local development.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Events API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./events.db")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    events_cache_ttl: int = int(os.getenv("EVENTS_CACHE_TTL", "60"))
    events_per_page: int = int(os.getenv("EVENTS_PER_PAGE", "15"))
    attendees_per_page: int = int(os.getenv("ATTENDEES_PER_PAGE", "5"))

    # throttle for PUT /events/{id}: attempts per window, per user
    update_rate_limit: int = int(os.getenv("UPDATE_RATE_LIMIT", "3"))
    update_rate_window: int = int(os.getenv("UPDATE_RATE_WINDOW", "60"))

    cors_origins: str = os.getenv("CORS_ORIGINS", "*")


settings = Settings()
