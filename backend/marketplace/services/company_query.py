"""
Direct database queries over companies.

Used by the company listing endpoint and as the fallback read path for
search when the search engine cannot answer.
"""
from __future__ import annotations

from typing import Any, List, Tuple

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from ..models.company import Company
from ..schemas.search import SearchParams

TEXT_SEARCH_COLUMNS = (
    Company.name,
    Company.description,
    Company.sector,
    Company.industry,
    Company.suburb,
    Company.state,
)


def _like_pattern(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_search_filters(params: SearchParams) -> List[Any]:
    """
    WHERE clauses for ``params``; an empty list matches every company.
    """
    clauses: List[Any] = []

    if params.q:
        pattern = _like_pattern(params.q)
        clauses.append(or_(*[col.ilike(pattern, escape="\\") for col in TEXT_SEARCH_COLUMNS]))

    if params.sector:
        clauses.append(Company.sector == params.sector)

    if params.state:
        clauses.append(Company.state == params.state)

    if params.status:
        clauses.append(Company.status == params.status)

    # tags live in a JSON array column; match each requested tag as a quoted
    # element of its serialised form
    for tag in params.tags or []:
        clauses.append(cast(Company.tags, String).like(_like_pattern(f'"{tag}"'), escape="\\"))

    return clauses


def build_search_order_by(params: SearchParams) -> List[Any]:
    if params.sort == "name":
        return [Company.name.asc()]
    if params.sort == "views":
        return [Company.views.desc()]
    return [Company.views.desc(), Company.created_at.desc()]


def search_companies(db: Session, params: SearchParams) -> Tuple[List[Company], int]:
    filters = build_search_filters(params)

    query = db.query(Company).filter(*filters)
    total = query.count()
    rows = (
        query.order_by(*build_search_order_by(params))
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return rows, total
