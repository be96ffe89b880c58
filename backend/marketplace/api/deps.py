"""
Auth dependencies for protected routes.

- ``get_current_user``: requires ``Authorization: Bearer <token>``.
- ``get_optional_user``: same token, but anonymous requests pass through.
- ``require_admin``: moderator endpoints, gated by ``X-Admin-Secret``.
"""
from __future__ import annotations

import hmac

from fastapi import Depends, Header, HTTPException, Security
from fastapi.security.api_key import APIKeyHeader
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..core.db import get_db
from ..models.user import User
from ..services import security

admin_secret_header = APIKeyHeader(name="X-Admin-Secret", auto_error=False)


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise HTTPException(status_code=401, detail="Missing Authorization header.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise HTTPException(status_code=401, detail="Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Authorization must be: Bearer <token>.")
    return token


def _user_from_token(db: Session, token: str) -> User:
    try:
        payload = security.decode_access_token(token)
    except security.AuthSecurityError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    subject = str(payload.get("sub") or "").strip()
    user = db.query(User).filter(User.id == subject).first() if subject else None
    if user is None:
        raise HTTPException(status_code=401, detail="User not found.")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="User is inactive.")
    return user


def get_current_user(
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    return _user_from_token(db, _extract_bearer_token(authorization))


def get_optional_user(
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> User | None:
    if not (authorization or "").strip():
        return None
    return _user_from_token(db, _extract_bearer_token(authorization))


def require_admin(admin_secret: str | None = Security(admin_secret_header)) -> None:
    expected = get_settings().ADMIN_SECRET
    if not expected or not admin_secret or not hmac.compare_digest(
        admin_secret.encode("utf-8"), expected.encode("utf-8")
    ):
        raise HTTPException(status_code=403, detail="Admin access required")
