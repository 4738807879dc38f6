# Overview: Issues and checks signed, time-limited bearer tokens.

"""
Bearer Token Service

Tokens are HS256 JWTs carrying the user's email as `sub` plus `iat`/`exp`.
There is no server-side session table: a token is valid while its signature
verifies, its subject still resolves to a user and `exp` is in the future.

The signer is built once in create_app() from JWT_SECRET / TOKEN_TTL and
stored in app.extensions["token_signer"]. It is a frozen dataclass, so the
key cannot be swapped while the process runs.

validate() and extract_subject() never raise: callers treat any non-true /
None result as "unauthenticated".
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from flask import current_app
from jose import JWTError, jwt

from stockledger.time_utils import to_epoch_seconds, utcnow


ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenSigner:
    secret: str
    ttl: timedelta

    def __post_init__(self):
        if not self.secret:
            raise ValueError("JWT secret must not be empty")
        if self.ttl <= timedelta(0):
            raise ValueError("token TTL must be positive")

    def issue(self, subject: str, *, now: datetime | None = None) -> str:
        """Sign a token for `subject` expiring `ttl` after `now`."""
        issued_at = now or utcnow()
        claims = {
            "sub": subject,
            "iat": to_epoch_seconds(issued_at),
            "exp": to_epoch_seconds(issued_at + self.ttl),
        }
        return jwt.encode(claims, self.secret, algorithm=ALGORITHM)

    def expires_at(self, *, now: datetime | None = None) -> datetime:
        return (now or utcnow()) + self.ttl

    def _claims(self, token: str) -> dict | None:
        # Signature is always verified; expiry is checked by the caller
        # against its own clock so tests can pin "now".
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError:
            return None

    def extract_subject(self, token: str) -> str | None:
        """Subject of a correctly signed token, fresh or not."""
        claims = self._claims(token)
        if not claims:
            return None
        subject = claims.get("sub")
        return subject if isinstance(subject, str) and subject else None

    def validate(self, token: str, expected_subject: str, *, now: datetime | None = None) -> bool:
        """True only for a correctly signed, unexpired token issued to expected_subject."""
        claims = self._claims(token)
        if not claims:
            return False
        if claims.get("sub") != expected_subject:
            return False
        exp = claims.get("exp")
        if not isinstance(exp, (int, float)):
            return False
        return exp > to_epoch_seconds(now or utcnow())


def build_signer(config) -> TokenSigner:
    return TokenSigner(secret=config["JWT_SECRET"], ttl=config["TOKEN_TTL"])


def get_signer() -> TokenSigner:
    return current_app.extensions["token_signer"]
