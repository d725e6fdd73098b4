# Overview: Request decorators for API routes (authentication and role checks).

from functools import wraps

from flask import g, request

from .errors import AuthenticationError, AuthorizationError
from .services import identity_service


def _is_authenticated() -> bool:
    return hasattr(g, "current_user")


def require_auth(f):
    """
    Require a verified bearer token from an admin or manager.

    Sets g.current_user (identity_service.AuthenticatedUser).

    401: no/invalid token. 403: valid token, unknown email.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.current_user = identity_service.authenticate(request.headers.get("Authorization"))
        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles: str):
    """
    Require one of the given roles. Must be applied after @require_auth.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                raise AuthenticationError("Missing or invalid authorization token")
            if g.current_user.role not in roles:
                raise AuthorizationError("Forbidden: insufficient role")
            return f(*args, **kwargs)

        return decorated_function

    return decorator
