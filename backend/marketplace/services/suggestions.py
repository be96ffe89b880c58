from __future__ import annotations

from typing import Any, Iterable, Mapping


def extract_suggestions(hits: Iterable[Mapping[str, Any]], query: str, limit: int = 5) -> list[str]:
    """
    Unique autocomplete strings from search hits, in hit order.

    A hit contributes its name, sector and industry when they contain the
    query (case-insensitive), and ``"{suburb}, {state}"`` when the suburb does.
    """
    needle = (query or "").strip().lower()
    if not needle or limit <= 0:
        return []

    suggestions: dict[str, None] = {}
    for hit in hits:
        for field in ("name", "sector", "industry"):
            value = hit.get(field)
            if value and needle in str(value).lower():
                suggestions.setdefault(str(value), None)

        suburb = hit.get("suburb")
        if suburb and needle in str(suburb).lower():
            state = hit.get("state") or ""
            suggestions.setdefault(f"{suburb}, {state}".rstrip(", "), None)

    return list(suggestions)[:limit]
