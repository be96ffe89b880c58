from __future__ import annotations

import re
import time
from typing import Any

from sqlalchemy.orm import Session

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str | None) -> str:
    """
    "Café Lumière & Co." -> "caf-lumi-re-co"
    """
    lowered = (text or "").lower()
    return _NON_ALNUM.sub("-", lowered).strip("-")


def _slug_taken(db: Session, model: Any, slug: str) -> bool:
    return db.query(model.id).filter(model.slug == slug).first() is not None


def unique_slug(db: Session, model: Any, text: str | None, *, fallback_prefix: str) -> str:
    """
    Slug for ``text`` that is not yet used by any ``model`` row.

    Collisions get a numeric suffix: ``acme``, ``acme-1``, ``acme-2`` ...
    The unique index on ``slug`` is still the final guard against two
    concurrent requests picking the same value.
    """
    base = slugify(text) or f"{fallback_prefix}-{int(time.time() * 1000)}"

    if not _slug_taken(db, model, base):
        return base

    counter = 1
    while _slug_taken(db, model, f"{base}-{counter}"):
        counter += 1
    return f"{base}-{counter}"
