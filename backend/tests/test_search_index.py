"""
Tests for the Meilisearch client in search_index.py

HTTP traffic goes through httpx.MockTransport so request shapes can be
asserted without a running engine.
"""
import json
from datetime import datetime, timezone

import httpx
import pytest

from marketplace.models.company import Company, CompanyStatus
from marketplace.services import search_index as search_index_module
from marketplace.services.search_index import (
    RETRIEVED_ATTRIBUTES,
    SearchIndex,
    build_filter,
    company_document,
    search_hit,
)


def _company(**overrides):
    data = {
        "id": "c-1",
        "name": "Acme Robotics",
        "slug": "acme-robotics",
        "sector": "Technology",
        "industry": None,
        "suburb": "Surry Hills",
        "state": "NSW",
        "tags": ["AI"],
        "photos": [],
        "status": CompanyStatus.PUBLISHED,
        "views": 3,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    data.update(overrides)
    return Company(**data)


@pytest.fixture()
def mock_engine(monkeypatch):
    """
    Route every httpx.Client created by the module through a handler.
    Tests set ``state["handler"]``; requests are collected in ``state["requests"]``.
    """
    state = {"requests": [], "handler": None}
    real_client = httpx.Client

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        return state["handler"](request)

    def client_factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(search_index_module.httpx, "Client", client_factory)
    return state


class TestBuildFilter:
    """Tests for Meilisearch filter expressions."""

    def test_no_filters(self):
        assert build_filter() is None

    def test_single_clause(self):
        assert build_filter(sector="Healthcare") == 'sector = "Healthcare"'

    def test_clauses_joined_with_and(self):
        expr = build_filter(sector="Healthcare", state="NSW", status="published", tags=["AI", "B2B"])
        assert expr == (
            'sector = "Healthcare" AND state = "NSW" AND status = "published" '
            'AND tags = "AI" AND tags = "B2B"'
        )

    def test_quotes_are_escaped(self):
        assert build_filter(sector='Food "&" Bev') == 'sector = "Food \\"&\\" Bev"'

    def test_raw_expression_is_parenthesised(self):
        assert build_filter(state="VIC", raw=" views > 10 ") == 'state = "VIC" AND (views > 10)'


class TestCompanyDocument:
    """Tests for the indexed document shape."""

    def test_fields(self):
        doc = company_document(_company())
        assert doc["id"] == "c-1"
        assert doc["status"] == "published"
        assert doc["industry"] == ""
        assert doc["tags"] == ["AI"]
        assert doc["views"] == 3
        assert doc["created_at"] == 1704067200

    def test_naive_datetime_treated_as_utc(self):
        doc = company_document(_company(created_at=datetime(2024, 1, 1)))
        assert doc["created_at"] == 1704067200

    def test_missing_lists_become_empty(self):
        doc = company_document(_company(tags=None, photos=""))
        assert doc["tags"] == []
        assert doc["photos"] == []

    def test_legacy_json_string_arrays_are_decoded(self):
        doc = company_document(_company(tags='["AI", "B2B"]', photos='["/uploads/a.png"]'))
        assert doc["tags"] == ["AI", "B2B"]
        assert doc["photos"] == ["/uploads/a.png"]


class TestSearchHit:
    """Tests for search_hit."""

    def test_limited_to_retrieved_attributes(self):
        hit = search_hit(_company(sub_industry="Drones", project_photos=["/uploads/p.png"]))
        assert list(hit) == RETRIEVED_ATTRIBUTES
        assert hit["created_at"] == 1704067200
        assert hit["tags"] == ["AI"]


class TestSearchIndexReads:
    """search/autocomplete return None when the engine cannot answer."""

    def test_search_parses_response(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(
            200,
            json={"hits": [{"id": "c-1"}], "estimatedTotalHits": 7, "offset": 0, "limit": 5},
        )
        result = SearchIndex().search(
            "acme", limit=5, filters='sector = "Technology"', sort=["views:desc"]
        )

        assert result == {"hits": [{"id": "c-1"}], "total_hits": 7, "offset": 0, "limit": 5}
        request = mock_engine["requests"][0]
        assert request.method == "POST"
        assert request.url.path.endswith("/search")
        body = json.loads(request.content)
        assert body["q"] == "acme"
        assert body["filter"] == 'sector = "Technology"'
        assert body["sort"] == ["views:desc"]

    def test_search_sends_api_key(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(200, json={"hits": []})
        index = SearchIndex()
        index.api_key = "secret-key"
        index.search("acme")
        assert mock_engine["requests"][0].headers["Authorization"] == "Bearer secret-key"

    def test_search_unreachable_returns_none(self, mock_engine):
        def refuse(req):
            raise httpx.ConnectError("connection refused", request=req)

        mock_engine["handler"] = refuse
        assert SearchIndex().search("acme") is None

    def test_search_server_error_returns_none(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(500, json={"message": "boom"})
        assert SearchIndex().search("acme") is None
        assert len(mock_engine["requests"]) == 1

    def test_autocomplete_extracts_suggestions(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(
            200,
            json={"hits": [{"name": "Acme Robotics", "sector": "Technology", "suburb": "Acacia Ridge", "state": "QLD"}]},
        )
        assert SearchIndex().autocomplete("ac", limit=5) == ["Acme Robotics", "Acacia Ridge, QLD"]

    def test_autocomplete_unreachable_returns_none(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(503)
        assert SearchIndex().autocomplete("ac") is None


class TestSearchIndexWrites:
    """Mirror writes are best effort; bulk writes raise."""

    def test_add_company_posts_document(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(202, json={"taskUid": 1})
        assert SearchIndex().add_company(_company()) is True

        request = mock_engine["requests"][0]
        assert request.method == "POST"
        assert request.url.path.endswith("/documents")
        assert request.url.params["primaryKey"] == "id"
        assert json.loads(request.content)[0]["slug"] == "acme-robotics"

    def test_add_company_failure_is_swallowed(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(500)
        assert SearchIndex().add_company(_company()) is False

    def test_remove_company(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(202, json={"taskUid": 2})
        assert SearchIndex().remove_company("c-1") is True
        request = mock_engine["requests"][0]
        assert request.method == "DELETE"
        assert request.url.path.endswith("/documents/c-1")

    def test_remove_company_failure_is_swallowed(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(404)
        assert SearchIndex().remove_company("missing") is False

    def test_add_documents_raises(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(500)
        with pytest.raises(httpx.HTTPStatusError):
            SearchIndex().add_documents([{"id": "c-1"}])

    def test_add_documents_skips_empty_batch(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(500)
        SearchIndex().add_documents([])
        assert mock_engine["requests"] == []

    def test_initialize_index_patches_settings(self, mock_engine):
        mock_engine["handler"] = lambda req: httpx.Response(202, json={"taskUid": 3})
        assert SearchIndex().initialize_index() is True
        request = mock_engine["requests"][0]
        assert request.method == "PATCH"
        assert request.url.path.endswith("/settings")
        assert "tags" in json.loads(request.content)["filterableAttributes"]
