# backend/stockledger/config.py
from __future__ import annotations
import os
from datetime import timedelta


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Flask session/CSRF secret; unrelated to bearer token signing
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Symmetric secret for HS256 bearer tokens. Read once when the app is built.
    JWT_SECRET = os.environ.get("JWT_SECRET", "dev-jwt-secret-change-me-0123456789abcdef")
    TOKEN_TTL = timedelta(days=int(os.environ.get("TOKEN_TTL_DAYS", "180")))  # ~6 months

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",  # optional alternative location
        "sqlite:///stockledger.sqlite3",  # default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Stock policy: False rejects sales/returns that would leave stock below zero
    ALLOW_NEGATIVE_STOCK = _env_flag("ALLOW_NEGATIVE_STOCK", False)

    # Status policy: False accepts any status after any other (transitions are still logged)
    ENFORCE_STATUS_TRANSITIONS = _env_flag("ENFORCE_STATUS_TRANSITIONS", False)

    DEFAULT_PAGE_SIZE = 1000
    MAX_PAGE_SIZE = int(os.environ.get("MAX_PAGE_SIZE", "1000"))

    # Unclassified errors echo their raw message unless this is turned off
    EXPOSE_INTERNAL_ERRORS = _env_flag("EXPOSE_INTERNAL_ERRORS", True)

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    CORS_ORIGINS = {
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173",
        ).split(",")
        if origin.strip()
    }


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET = "test-jwt-secret-0123456789abcdef0123456789"
    ALLOW_NEGATIVE_STOCK = False
    ENFORCE_STATUS_TRANSITIONS = False
    LOG_LEVEL = "DEBUG"
    BCRYPT_ROUNDS = 4  # bcrypt minimum; keeps fixtures fast
