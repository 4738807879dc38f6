# Overview: Credential store and login; encapsulates user persistence and password checks.

"""
User / Credential Service

WHY: Every ledger row must be attributable to a user, and the bearer token
subject (email) must resolve back to exactly one user record.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Unknown email on login -> NotFoundError (404), wrong password ->
  InvalidCredentialsError (400). Both mirror the existing client contract.
- password_hash never leaves this module in serialized form
"""

from __future__ import annotations

import bcrypt
from flask import current_app

from ..extensions import db
from ..errors import InvalidCredentialsError, NotFoundError
from ..models import Transaction, User, VALID_ROLES
from ..validation import ConflictError, ValidationError
from .token_service import get_signer


MIN_PASSWORD_LENGTH = 8
USER_MUTABLE_FIELDS = {"name", "email", "phone_number", "role"}


def _require_text(label: str, value) -> str:
    # JSON bodies can carry numbers, lists or objects where text is expected
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required and must be a string")
    return value


def validate_password_strength(password: str | None) -> None:
    if not isinstance(password, str) or not password.strip():
        raise ValidationError("password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters long")


def hash_password(password: str) -> str:
    """Validate and bcrypt-hash a password. Returns the hash as text."""
    validate_password_strength(password)
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds))
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() is constant-time; a malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def _normalize_email(email: str | None) -> str:
    if not isinstance(email, str):
        raise ValidationError("email must be a string")
    return email.strip().lower()


def _validate_role(role: str | None) -> str:
    if role is None:
        return "MANAGER"
    role = str(role).strip().upper()
    if role not in VALID_ROLES:
        raise ValidationError(f"role must be one of: {', '.join(sorted(VALID_ROLES))}")
    return role


# ---------------------------------------------------------------------------
# Credential store contract: find_user_by_email / find_user_by_id / save_user
# ---------------------------------------------------------------------------

def find_user_by_email(email: str) -> User | None:
    return db.session.query(User).filter_by(email=_normalize_email(email)).first()


def find_user_by_id(user_id: int) -> User | None:
    return db.session.get(User, user_id)


def save_user(user: User) -> User:
    db.session.add(user)
    db.session.commit()
    return user


def get_user(user_id: int) -> User:
    user = find_user_by_id(user_id)
    if user is None:
        raise NotFoundError("User Not Found")
    return user


# ---------------------------------------------------------------------------
# Registration / login
# ---------------------------------------------------------------------------

def register_user(
    *,
    name: str,
    email: str,
    password: str,
    phone_number: str,
    role: str | None = None,
) -> User:
    """
    Create a user. Role defaults to MANAGER when not supplied.

    Raises:
        ValidationError: blank fields, weak password or unknown role
        ConflictError: email already registered
    """
    name = _require_text("name", name)
    email = _normalize_email(_require_text("email", email))
    phone_number = _require_text("phoneNumber", phone_number)
    validate_password_strength(password)

    if find_user_by_email(email) is not None:
        raise ConflictError("Email already registered")

    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        phone_number=phone_number.strip(),
        role=_validate_role(role),
    )
    save_user(user)
    current_app.logger.info("Registered user id=%s role=%s", user.id, user.role)
    return user


def login(*, email: str, password: str) -> tuple[User, str]:
    """
    Check credentials and issue a bearer token for the user's email.

    Returns (user, token).
    """
    user = find_user_by_email(_require_text("email", email))
    if user is None:
        raise NotFoundError("Email not Found")

    if not verify_password(_require_text("password", password), user.password_hash):
        current_app.logger.info("Rejected login for user id=%s: password mismatch", user.id)
        raise InvalidCredentialsError("password does not match")

    token = get_signer().issue(user.email)
    return user, token


# ---------------------------------------------------------------------------
# Administration
# ---------------------------------------------------------------------------

def list_users() -> list[User]:
    return db.session.query(User).order_by(User.id.desc()).all()


def update_user(user_id: int, patch: dict, password: str | None = None) -> User:
    """Apply a partial update. A supplied password is validated and re-hashed."""
    user = get_user(user_id)

    if "email" in patch and patch["email"] is not None:
        new_email = _normalize_email(patch["email"])
        existing = find_user_by_email(new_email)
        if existing is not None and existing.id != user.id:
            raise ConflictError("Email already registered")
        patch["email"] = new_email

    if "role" in patch and patch["role"] is not None:
        patch["role"] = _validate_role(patch["role"])

    for key, value in patch.items():
        if key in USER_MUTABLE_FIELDS and value is not None:
            setattr(user, key, value)

    if password is not None:
        user.password_hash = hash_password(password)

    db.session.commit()
    return user


def delete_user(user_id: int) -> None:
    user = get_user(user_id)
    has_ledger_rows = db.session.query(Transaction.id).filter_by(user_id=user.id).first() is not None
    if has_ledger_rows:
        raise ConflictError("User has recorded transactions and cannot be deleted")
    db.session.delete(user)
    db.session.commit()
