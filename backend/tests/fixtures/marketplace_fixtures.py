"""
Shared test data and fakes for the marketplace API tests.

Contains request payload builders, ORM row factories and an in-process
stand-in for the search engine client.
"""
from io import BytesIO
from typing import Any, Dict, List, Optional

from PIL import Image

from marketplace.models.advisor import Advisor
from marketplace.models.company import Company, CompanyStatus
from marketplace.services.search_index import company_document
from marketplace.services.slugs import unique_slug

ADMIN_SECRET = "test-admin-secret"


# ---------------------------------------------------------------------------
# Search engine fake
# ---------------------------------------------------------------------------

class FakeSearchIndex:
    """
    Records every call; ``search_result`` and ``autocomplete_result`` control
    what reads return (``None`` means the engine is unavailable).
    """

    index_uid = "listings-test"

    def __init__(self) -> None:
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.removed: List[str] = []
        self.search_calls: List[Dict[str, Any]] = []
        self.search_result: Optional[Dict[str, Any]] = None
        self.autocomplete_result: Optional[List[str]] = None
        self.fail_writes = False
        self.initialized = False
        self.cleared = False

    def initialize_index(self) -> bool:
        self.initialized = True
        return True

    def add_documents(self, documents: List[Dict[str, Any]]) -> None:
        for doc in documents:
            self.documents[doc["id"]] = doc

    def clear(self) -> None:
        self.cleared = True
        self.documents.clear()

    def add_company(self, company: Company) -> bool:
        if self.fail_writes:
            return False
        self.documents[company.id] = company_document(company)
        return True

    def remove_company(self, company_id: str) -> bool:
        if self.fail_writes:
            return False
        self.removed.append(company_id)
        self.documents.pop(company_id, None)
        return True

    def search(self, query: str, *, limit=20, offset=0, filters=None, sort=None):
        self.search_calls.append(
            {"query": query, "limit": limit, "offset": offset, "filters": filters, "sort": sort}
        )
        return self.search_result

    def autocomplete(self, query: str, limit: int = 5):
        return self.autocomplete_result


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

def company_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "name": "Acme Robotics",
        "sector": "Technology",
        "industry": "Robotics",
        "description": "Warehouse automation for mid-size retailers.",
        "suburb": "Surry Hills",
        "state": "NSW",
        "postcode": "2010",
        "latitude": -33.8886,
        "longitude": 151.2094,
        "tags": ["AI", "Logistics"],
        "amount_seeking": "$1M - $2M",
        "photos": ["/uploads/1700000000000-abc.jpg"],
    }
    payload.update(overrides)
    return payload


def listing_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "title": "Corner Cafe Freehold",
        "description": "Busy corner cafe with long lease.",
        "price": 850000,
        "address": "12 King Street",
        "suburb": "Newtown",
        "state": "NSW",
        "postcode": "2042",
        "latitude": -33.8970,
        "longitude": 151.1790,
        "images": ["/uploads/1700000000000-cafe.jpg"],
    }
    payload.update(overrides)
    return payload


def advisor_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "firm_name": "Harbour Street Advisory",
        "team_lead": "Sarah Chen",
        "email": "sarah@harbourstreet.example",
        "phone": "+61 2 9000 1000",
        "suburb": "Sydney",
        "state": "NSW",
        "specialties": ["Technology", "Healthcare"],
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Row factories
# ---------------------------------------------------------------------------

def make_company(db, **overrides: Any) -> Company:
    data = {
        "name": "Acme Robotics",
        "sector": "Technology",
        "industry": "Robotics",
        "suburb": "Surry Hills",
        "state": "NSW",
        "tags": ["AI", "Logistics"],
        "status": CompanyStatus.PUBLISHED,
        "views": 0,
    }
    data.update(overrides)
    company = Company(
        slug=unique_slug(db, Company, data["name"], fallback_prefix="company"),
        **data,
    )
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


def make_advisor(db, **overrides: Any) -> Advisor:
    data = advisor_payload()
    data.update(overrides)
    data.setdefault("status", "active")
    advisor = Advisor(**data)
    db.add(advisor)
    db.commit()
    db.refresh(advisor)
    return advisor


def image_bytes(width: int = 800, height: int = 600, fmt: str = "PNG") -> bytes:
    buf = BytesIO()
    Image.new("RGB", (width, height), color=(200, 120, 40)).save(buf, format=fmt)
    return buf.getvalue()
