"""
Meilisearch index client for company listings.

The database is the source of truth; the index is a secondary read path.
Writes here are best effort and reads return ``None`` when the engine cannot
answer, so callers can fall back to the database.
"""
from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence

import logging

import httpx

from tenacity import retry, wait_exponential, stop_after_attempt, retry_if_exception_type

from ..core.config import get_settings
from ..models.company import Company
from ..schemas.common import decode_json_list
from .suggestions import extract_suggestions

logger = logging.getLogger(__name__)

settings = get_settings()

SEARCHABLE_ATTRIBUTES = [
    "name",
    "description",
    "sector",
    "industry",
    "sub_industry",
    "suburb",
    "state",
    "tags",
]
SORTABLE_ATTRIBUTES = ["created_at", "views", "name"]
FILTERABLE_ATTRIBUTES = ["sector", "industry", "state", "status", "tags", "amount_seeking"]

RETRIEVED_ATTRIBUTES = [
    "id", "name", "description", "sector", "industry",
    "suburb", "state", "latitude", "longitude", "tags",
    "status", "amount_seeking", "views", "created_at",
    "slug", "logo_url", "photos",
]

SORT_MAP: Dict[str, List[str]] = {
    "relevance": [],
    "name": ["name:asc"],
    "views": ["views:desc"],
}


def _epoch(value: datetime | None) -> int | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def _as_list(value: Any) -> list:
    decoded = decode_json_list(value)
    return decoded if isinstance(decoded, list) else []


def company_document(company: Company) -> Dict[str, Any]:
    status = company.status.value if hasattr(company.status, "value") else company.status
    return {
        "id": company.id,
        "name": company.name,
        "description": company.description or "",
        "sector": company.sector,
        "industry": company.industry or "",
        "sub_industry": company.sub_industry or "",
        "suburb": company.suburb or "",
        "state": company.state or "",
        "latitude": company.latitude,
        "longitude": company.longitude,
        "tags": _as_list(company.tags),
        "status": status,
        "amount_seeking": company.amount_seeking or "",
        "views": company.views or 0,
        "created_at": _epoch(company.created_at),
        "slug": company.slug,
        "logo_url": company.logo_url or "",
        "photos": _as_list(company.photos),
    }


def search_hit(company: Company) -> Dict[str, Any]:
    """
    The document as the engine returns it for a search, i.e. limited to
    ``RETRIEVED_ATTRIBUTES``.
    """
    doc = company_document(company)
    return {field: doc[field] for field in RETRIEVED_ATTRIBUTES}


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_filter(
    *,
    sector: str | None = None,
    state: str | None = None,
    status: str | None = None,
    tags: Sequence[str] | None = None,
    raw: str | None = None,
) -> str | None:
    """
    Meilisearch filter expression, e.g. ``sector = "Healthcare" AND tags = "AI"``.
    """
    clauses: List[str] = []
    if sector:
        clauses.append(f"sector = {_quote(sector)}")
    if state:
        clauses.append(f"state = {_quote(state)}")
    if status:
        clauses.append(f"status = {_quote(status)}")
    for tag in tags or []:
        clauses.append(f"tags = {_quote(tag)}")
    if raw and raw.strip():
        clauses.append(f"({raw.strip()})")
    return " AND ".join(clauses) or None


class SearchIndex:
    name = "meilisearch"

    def __init__(self) -> None:
        self.base_url: str = settings.MEILISEARCH_HOST.rstrip("/")
        self.index_uid: str = settings.MEILISEARCH_INDEX
        self.timeout: int = int(settings.MEILISEARCH_TIMEOUT_SECONDS or 5)
        self.api_key: str | None = settings.MEILISEARCH_API_KEY

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key.strip()}"
        return headers

    @retry(
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        stop=stop_after_attempt(max(1, settings.MEILISEARCH_RETRY_ATTEMPTS)),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        with httpx.Client(timeout=self.timeout, headers=self._headers()) as client:
            resp = client.request(method, f"{self.base_url}/indexes/{self.index_uid}{path}", **kwargs)
            resp.raise_for_status()
            if not resp.content:
                return None
            return resp.json()

    # ------------------------------------------------------------------
    # Index management
    # ------------------------------------------------------------------

    def initialize_index(self) -> bool:
        try:
            self._request(
                "PATCH",
                "/settings",
                json={
                    "searchableAttributes": SEARCHABLE_ATTRIBUTES,
                    "sortableAttributes": SORTABLE_ATTRIBUTES,
                    "filterableAttributes": FILTERABLE_ATTRIBUTES,
                },
            )
        except Exception:
            logger.exception("Failed to initialize search index", extra={"index": self.index_uid})
            return False
        logger.info("Search index settings updated", extra={"index": self.index_uid})
        return True

    def add_documents(self, documents: List[Dict[str, Any]]) -> None:
        """Raises on failure; used by bulk jobs that want to know."""
        if not documents:
            return
        self._request("POST", "/documents", params={"primaryKey": "id"}, json=documents)

    def clear(self) -> None:
        self._request("DELETE", "/documents")

    # ------------------------------------------------------------------
    # Best-effort mirror of database writes
    # ------------------------------------------------------------------

    def add_company(self, company: Company) -> bool:
        try:
            self.add_documents([company_document(company)])
        except Exception:
            logger.exception(
                "Failed to index company",
                extra={"company_id": company.id, "index": self.index_uid, "step": "index_add"},
            )
            return False
        logger.info(
            "Indexed company",
            extra={"company_id": company.id, "index": self.index_uid, "step": "index_add"},
        )
        return True

    def remove_company(self, company_id: str) -> bool:
        try:
            self._request("DELETE", f"/documents/{company_id}")
        except Exception:
            logger.exception(
                "Failed to remove company from index",
                extra={"company_id": company_id, "index": self.index_uid, "step": "index_remove"},
            )
            return False
        logger.info(
            "Removed company from index",
            extra={"company_id": company_id, "index": self.index_uid, "step": "index_remove"},
        )
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def search(
        self,
        query: str,
        *,
        limit: int = 20,
        offset: int = 0,
        filters: str | None = None,
        sort: Sequence[str] | None = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Returns ``{"hits", "total_hits", "offset", "limit"}`` or ``None`` when
        the engine is unavailable.
        """
        body: Dict[str, Any] = {
            "q": query,
            "limit": limit,
            "offset": offset,
            "attributesToRetrieve": RETRIEVED_ATTRIBUTES,
        }
        if filters:
            body["filter"] = filters
        if sort:
            body["sort"] = list(sort)

        try:
            data = self._request("POST", "/search", json=body) or {}
        except Exception as e:
            logger.warning(
                "Search engine query failed: %s",
                e,
                extra={"index": self.index_uid, "step": "search"},
            )
            return None

        hits = data.get("hits") or []
        return {
            "hits": hits,
            "total_hits": int(data.get("estimatedTotalHits") or data.get("totalHits") or len(hits)),
            "offset": int(data.get("offset") or offset),
            "limit": int(data.get("limit") or limit),
        }

    def autocomplete(self, query: str, limit: int = 5) -> Optional[List[str]]:
        body = {
            "q": query,
            "limit": limit,
            "attributesToRetrieve": ["name", "sector", "industry", "suburb", "state"],
        }
        try:
            data = self._request("POST", "/search", json=body) or {}
        except Exception as e:
            logger.warning(
                "Autocomplete query failed: %s",
                e,
                extra={"index": self.index_uid, "step": "autocomplete"},
            )
            return None
        return extract_suggestions(data.get("hits") or [], query, limit)


@lru_cache(maxsize=1)
def get_search_index() -> SearchIndex:
    return SearchIndex()
