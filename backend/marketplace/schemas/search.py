from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from ..models.company import CompanyStatus

SortOption = Literal["relevance", "name", "views"]


class SearchParams(BaseModel):
    q: str | None = None
    sector: str | None = None
    state: str | None = None
    status: CompanyStatus | None = None
    # accepts ?tags=a,b as well as repeated ?tags=a&tags=b
    tags: list[str] | None = None
    sort: SortOption = "relevance"
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    # explicit offset wins over page when both are given
    offset: int | None = Field(default=None, ge=0)
    # raw search-engine filter expression, ignored by the database path
    filters: str | None = None

    @field_validator("q", "sector", "state", "status", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, v):
        if v is None:
            return None
        if isinstance(v, str):
            v = [v]
        tags = [t.strip() for raw in v for t in str(raw).split(",") if t.strip()]
        return tags or None

    @property
    def skip(self) -> int:
        if self.offset is not None:
            return self.offset
        return (self.page - 1) * self.limit


class SearchResponse(BaseModel):
    hits: list[dict[str, Any]]
    total_hits: int
    offset: int
    limit: int
    # "none" when a blank query short-circuits both backends
    source: Literal["search_engine", "database", "none"]


class AutocompleteResponse(BaseModel):
    suggestions: list[str]
