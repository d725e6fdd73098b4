# Overview: Bearer token verification and admin/manager role resolution.

"""
Identity service.

Tokens are issued by an external identity provider. We only verify them:
with the provider's JWKS endpoint when AUTH_JWKS_URL is configured (RS256,
e.g. Google ID tokens), otherwise with the shared AUTH_JWT_SECRET.

Role resolution order:
1. ADMIN_EMAILS config (bootstrap admins)
2. admins table
3. managed_users table
Anything else is authenticated but not authorized.
"""
from __future__ import annotations

from dataclasses import dataclass

import jwt
from flask import current_app

from ..extensions import db
from ..errors import AuthenticationError, AuthorizationError
from ..models import Admin, ManagedUser

ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"

_jwks_clients: dict[str, jwt.PyJWKClient] = {}


@dataclass(frozen=True)
class AuthenticatedUser:
    email: str
    name: str | None
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> dict:
        return {"email": self.email, "name": self.name, "role": self.role}


def _jwks_client(url: str) -> jwt.PyJWKClient:
    client = _jwks_clients.get(url)
    if client is None:
        client = jwt.PyJWKClient(url)
        _jwks_clients[url] = client
    return client


def decode_token(token: str) -> dict:
    """Verify signature, expiry and (when configured) audience and issuer."""
    cfg = current_app.config
    audience = cfg.get("AUTH_AUDIENCE")
    issuer = cfg.get("AUTH_ISSUER")
    options = {"verify_aud": bool(audience)}

    try:
        if cfg.get("AUTH_JWKS_URL"):
            signing_key = _jwks_client(cfg["AUTH_JWKS_URL"]).get_signing_key_from_jwt(token)
            return jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=audience,
                issuer=issuer,
                options=options,
            )

        secret = cfg.get("AUTH_JWT_SECRET")
        if not secret:
            current_app.logger.error("No token verification key configured (AUTH_JWT_SECRET / AUTH_JWKS_URL)")
            raise AuthenticationError("Token is invalid or has expired")
        return jwt.decode(
            token,
            secret,
            algorithms=cfg.get("AUTH_JWT_ALGORITHMS") or ["HS256"],
            audience=audience,
            issuer=issuer,
            options=options,
        )
    except jwt.PyJWTError as e:
        current_app.logger.info("Token verification failed: %s", e)
        raise AuthenticationError("Token is invalid or has expired") from e


def resolve_role(email: str) -> tuple[str, str | None] | None:
    """
    Return (role, display name fallback) for an email, or None when the email
    is neither an admin nor a managed user.
    """
    email = email.lower()
    if email in current_app.config.get("ADMIN_EMAILS", []):
        return ROLE_ADMIN, None

    admin = db.session.query(Admin).filter(Admin.email == email).one_or_none()
    if admin is not None:
        return ROLE_ADMIN, None

    manager = db.session.query(ManagedUser).filter(ManagedUser.email == email).one_or_none()
    if manager is not None:
        return ROLE_MANAGER, manager.name

    return None


def authenticate(auth_header: str | None) -> AuthenticatedUser:
    if not auth_header or not auth_header.startswith("Bearer "):
        raise AuthenticationError("Missing or invalid authorization token")

    token = auth_header.split(" ", 1)[1].strip()
    if not token:
        raise AuthenticationError("Missing or invalid authorization token")

    claims = decode_token(token)
    email = claims.get("email")
    if not email or not isinstance(email, str):
        raise AuthenticationError("Token does not carry an email")
    email = email.lower()

    resolved = resolve_role(email)
    if resolved is None:
        raise AuthorizationError("User is not authorized")
    role, fallback_name = resolved

    return AuthenticatedUser(email=email, name=claims.get("name") or fallback_name, role=role)
