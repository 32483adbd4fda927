"""Application configuration.

Environment variables override all defaults. A `.env` file next to the
backend directory is loaded for local development.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

_BACKEND_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=_BACKEND_DIR / ".env", override=False)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./pharmacy_system.db")

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "3000"))

    # Sessions: opaque random token stored server-side
    SESSION_TTL_HOURS: int = int(os.getenv("SESSION_TTL_HOURS", "24"))
    SESSION_SWEEP_INTERVAL_SECONDS: int = int(os.getenv("SESSION_SWEEP_INTERVAL_SECONDS", "3600"))
    SESSION_SWEEP_ENABLED: bool = _env_bool("SESSION_SWEEP_ENABLED", True)
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "sessionId")
    SESSION_HEADER_NAME: str = os.getenv("SESSION_HEADER_NAME", "x-session-id")

    # Cookies
    SECURE_COOKIES: bool = ENVIRONMENT == "production"
    SAME_SITE_COOKIE: str = "strict"  # Prevent CSRF
    HTTP_ONLY_COOKIE: bool = True  # Prevent XSS token theft

    # CORS (specific origins only, no wildcards)
    CORS_ORIGINS: List[str] = _env_list(
        "CORS_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
    )

    # Password Policy
    MIN_PASSWORD_LENGTH: int = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))

    # Starter medicine catalogue for an empty database
    SEED_DEMO_DATA: bool = _env_bool("SEED_DEMO_DATA", False)


settings = Settings()
