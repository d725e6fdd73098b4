# backend/cosmo_admin/config.py
from __future__ import annotations
import os


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/cosmo_admin.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location (hosted Postgres in production)
        "sqlite:///cosmo_admin.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Emails that always resolve to the admin role, on top of the admins table
    ADMIN_EMAILS = [email.lower() for email in _split_csv(os.environ.get("ADMIN_EMAILS"))]

    # Bearer token verification. A JWKS URL (e.g. Google's certs endpoint) takes
    # precedence over the shared secret.
    AUTH_JWT_SECRET = os.environ.get("AUTH_JWT_SECRET")
    AUTH_JWT_ALGORITHMS = _split_csv(os.environ.get("AUTH_JWT_ALGORITHMS", "HS256"))
    AUTH_JWKS_URL = os.environ.get("AUTH_JWKS_URL")
    AUTH_AUDIENCE = os.environ.get("AUTH_AUDIENCE")
    AUTH_ISSUER = os.environ.get("AUTH_ISSUER")

    CORS_ALLOWED_ORIGINS = _split_csv(os.environ.get("CORS_ALLOWED_ORIGINS", "*"))

    DEFAULT_PAGE_SIZE = int(os.environ.get("DEFAULT_PAGE_SIZE", "20"))
    MAX_PAGE_SIZE = int(os.environ.get("MAX_PAGE_SIZE", "100"))

    # Printed on invoices and bills of lading
    COMPANY_NAME = os.environ.get("COMPANY_NAME", "ROMANOVA Cosmetics")
    COMPANY_ADDRESS = os.environ.get("COMPANY_ADDRESS", "1 Torhova St, Kyiv, 01001")
    COMPANY_EMAIL = os.environ.get("COMPANY_EMAIL", "")
    # TTF font with Cyrillic coverage (e.g. DejaVuSans.ttf); Helvetica otherwise
    PDF_FONT_PATH = os.environ.get("PDF_FONT_PATH")
