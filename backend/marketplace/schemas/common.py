import json
from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, Field, constr, field_validator


def blank_to_none(v):
    if v is None:
        return None
    if isinstance(v, str):
        stripped = v.strip()
        return stripped or None
    return v


def decode_json_list(v):
    """
    Older rows stored arrays as JSON-encoded text; accept both shapes.
    """
    if v is None:
        return []
    if isinstance(v, str):
        if not v.strip():
            return []
        try:
            parsed = json.loads(v)
        except ValueError:
            return [v]
        return parsed if isinstance(parsed, list) else [parsed]
    return v


def validate_http_url(v: str | None) -> str | None:
    if v is None:
        return None
    parts = urlparse(v)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError("must be a valid http(s) URL")
    return v


class Deck(BaseModel):
    type: Literal["pdf", "link"] | None = None
    url: str | None = None


class AdditionalSection(BaseModel):
    id: str
    title: str = Field(..., min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    # relative /uploads/... paths are allowed
    image_urls: list[constr(min_length=1)] = Field(default_factory=list, max_length=10)
    file_urls: list[constr(min_length=1)] = Field(default_factory=list, max_length=10)
    deck: Deck | None = None
    tags: list[constr(min_length=1, max_length=24)] = Field(default_factory=list, max_length=8)
    order: int = Field(default=0, ge=0)
    visibility: Literal["public", "requestAccess"] = "public"


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
