# Overview: Authentication and role decorators for API routes.

from functools import wraps

from flask import g

from .errors import AuthenticationError
from .responses import envelope


def _is_authenticated() -> bool:
    return getattr(g, "current_user", None) is not None


def get_current_user():
    """The user resolved by the auth gate; AuthenticationError when anonymous."""
    user = getattr(g, "current_user", None)
    if user is None:
        raise AuthenticationError("Authentication required")
    return user


def require_auth(f):
    """
    Require an identity established by the auth gate.

    Returns a 401 envelope when the request carried no valid bearer token.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not _is_authenticated():
            return envelope(401, "Authentication required")
        return f(*args, **kwargs)

    return decorated_function


def require_role(role: str):
    """
    Require a specific role (ADMIN / MANAGER).

    401 when anonymous, 403 when the identity holds a different role.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                return envelope(401, "Authentication required")

            if getattr(g, "current_role", None) != role:
                return envelope(403, f"Permission denied: {role} role required")

            return f(*args, **kwargs)

        return decorated_function
    return decorator
