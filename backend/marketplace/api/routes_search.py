"""
Full-text search and autocomplete.

The search engine answers first; when it is unreachable or returns nothing,
the same query runs directly against the database.
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..schemas.search import AutocompleteResponse, SearchParams, SearchResponse
from ..services.company_query import search_companies
from ..services.search_index import SORT_MAP, SearchIndex, build_filter, get_search_index, search_hit
from ..services.suggestions import extract_suggestions

router = APIRouter(tags=["search"])

logger = logging.getLogger(__name__)

AUTOCOMPLETE_SCAN_LIMIT = 50


@router.get("/search", response_model=SearchResponse)
def search(
    params: Annotated[SearchParams, Query()],
    db: Session = Depends(get_db),
    index: SearchIndex = Depends(get_search_index),
):
    if not params.q:
        return SearchResponse(hits=[], total_hits=0, offset=0, limit=0, source="none")

    engine_result = index.search(
        params.q,
        limit=params.limit,
        offset=params.skip,
        filters=build_filter(
            sector=params.sector,
            state=params.state,
            status=params.status.value if params.status else None,
            tags=params.tags,
            raw=params.filters,
        ),
        sort=SORT_MAP[params.sort],
    )
    if engine_result and engine_result["hits"]:
        return SearchResponse(source="search_engine", **engine_result)

    logger.info(
        "Search engine returned no result, falling back to database",
        extra={"step": "search_fallback"},
    )

    rows, total = search_companies(db, params)
    return SearchResponse(
        hits=[search_hit(r) for r in rows],
        total_hits=total,
        offset=params.skip,
        limit=params.limit,
        source="database",
    )


@router.get("/autocomplete", response_model=AutocompleteResponse)
def autocomplete(
    q: str = "",
    limit: int = Query(default=5, ge=1, le=20),
    db: Session = Depends(get_db),
    index: SearchIndex = Depends(get_search_index),
):
    query = q.strip()
    if not query:
        return AutocompleteResponse(suggestions=[])

    suggestions = index.autocomplete(query, limit)
    if suggestions:
        return AutocompleteResponse(suggestions=suggestions)

    rows, _ = search_companies(db, SearchParams(q=query, limit=AUTOCOMPLETE_SCAN_LIMIT))
    hits = [
        {"name": r.name, "sector": r.sector, "industry": r.industry, "suburb": r.suburb, "state": r.state}
        for r in rows
    ]
    return AutocompleteResponse(suggestions=extract_suggestions(hits, query, limit))
