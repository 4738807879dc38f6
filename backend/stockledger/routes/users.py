# Overview: Flask API routes for user administration; parses input and returns envelopes.

"""
User routes.

SECURITY:
- Listing and deleting users requires ADMIN
- A user may edit their own account; editing anyone else requires ADMIN
- Only ADMIN may change a role
"""

from flask import Blueprint, request

from ..decorators import get_current_user, require_auth, require_role
from ..errors import AuthorizationError
from ..models import User
from ..responses import ok
from ..services import transaction_service, user_service
from ..validation import ModelValidationPolicy, ValidationError, validate_payload

USER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "email", "phoneNumber", "role"},
    aliases={"phoneNumber": "phone_number"},
)

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("/all")
@require_auth
@require_role("ADMIN")
def list_users_route():
    return ok(users=[u.to_dict() for u in user_service.list_users()])


@users_bp.get("/current")
@require_auth
def current_user_route():
    return ok(user=get_current_user().to_dict())


@users_bp.put("/update/<int:user_id>")
@require_auth
def update_user_route(user_id: int):
    actor = get_current_user()
    if not actor.is_admin and actor.id != user_id:
        raise AuthorizationError("Permission denied: cannot edit another user")

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    payload = dict(payload)
    password = payload.pop("password", None)

    if "role" in payload and not actor.is_admin:
        raise AuthorizationError("Permission denied: ADMIN role required to change roles")

    patch = validate_payload(model=User, payload=payload, policy=USER_POLICY, partial=True)
    user = user_service.update_user(user_id, patch, password=password)
    return ok("User Successfully Updated", user=user.to_dict())


@users_bp.delete("/delete/<int:user_id>")
@require_auth
@require_role("ADMIN")
def delete_user_route(user_id: int):
    user_service.delete_user(user_id)
    return ok("User Successfully Deleted")


@users_bp.get("/transactions/<int:user_id>")
@require_auth
def user_transactions_route(user_id: int):
    user = transaction_service.list_user_transactions(user_id)
    return ok(user=user.to_dict(include_transactions=True))
