# Overview: Flask API routes for registration and login; parses input and returns envelopes.

from flask import Blueprint, current_app, request

from ..responses import ok
from ..services import user_service
from ..validation import ValidationError


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _expiration_label(ttl) -> str:
    # 180 days -> "6 month"
    days = ttl.days
    if days and days % 30 == 0:
        return f"{days // 30} month"
    return f"{days} days"


@auth_bp.post("/register")
def register_route():
    """
    Self-registration. Role defaults to MANAGER when omitted.

    Body: {name, email, password, phoneNumber, role?}
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    user_service.register_user(
        name=data.get("name"),
        email=data.get("email"),
        password=data.get("password"),
        phone_number=data.get("phoneNumber"),
        role=data.get("role"),
    )
    return ok("user created successfully")


@auth_bp.post("/login")
def login_route():
    """
    Exchange email + password for a bearer token.

    The token must be sent as `Authorization: Bearer <token>` on protected routes.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    email = data.get("email")
    password = data.get("password")
    if not email or not password:
        raise ValidationError("email and password required")

    user, token = user_service.login(email=email, password=password)
    return ok(
        token=token,
        role=user.role,
        expirationTime=_expiration_label(current_app.config["TOKEN_TTL"]),
    )
