# Overview: Per-request identity resolution from the bearer token.

"""
Auth Gate

Runs before every request (registered in create_app). It only ever
*establishes* identity; it never rejects a request. Routes that need an
identity say so with @require_auth / @require_role, which read what the
gate left in flask.g.

Outcome per request:
    g.current_user = User | None
    g.current_role = "ADMIN" | "MANAGER" | None
"""

from __future__ import annotations

from flask import current_app, g, request

from .services.token_service import get_signer
from .services.user_service import find_user_by_email


def _bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    return token or None


def resolve_identity() -> None:
    g.current_user = None
    g.current_role = None

    token = _bearer_token()
    if token is None:
        return

    signer = get_signer()
    subject = signer.extract_subject(token)
    if subject is None:
        current_app.logger.debug("Ignoring bearer token with bad signature or shape on %s", request.path)
        return

    user = find_user_by_email(subject)
    if user is None:
        current_app.logger.warning("Bearer token subject has no matching user on %s", request.path)
        return

    if not signer.validate(token, user.email):
        current_app.logger.debug("Ignoring expired bearer token for user id=%s", user.id)
        return

    g.current_user = user
    g.current_role = user.role
