"""
API tests for /api/my-listings (owner-scoped companies).
"""
from marketplace.models.company import Company, CompanyStatus
from marketplace.models.saved_listing import SavedListing

from tests.fixtures.marketplace_fixtures import company_payload, make_company


class TestMyListingsAuth:
    """Every my-listings route needs a bearer token."""

    def test_missing_token_returns_401(self, client):
        assert client.get("/api/my-listings").status_code == 401

    def test_malformed_header_returns_401(self, client):
        resp = client.get("/api/my-listings", headers={"Authorization": "Token abc"})
        assert resp.status_code == 401

    def test_invalid_token_returns_401(self, client):
        resp = client.get("/api/my-listings", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_inactive_user_returns_403(self, client, db, user, auth_headers):
        user.is_active = False
        db.commit()
        assert client.get("/api/my-listings", headers=auth_headers).status_code == 403


class TestMyListingsCrud:
    """Create, read, replace and delete owned companies."""

    def test_create_and_list(self, client, db, user, auth_headers, other_user):
        make_company(db, name="Not Mine", created_by=other_user.id)

        resp = client.post("/api/my-listings", json=company_payload(), headers=auth_headers)
        assert resp.status_code == 201
        assert resp.json()["company"]["created_by"] == user.id

        resp = client.get("/api/my-listings", headers=auth_headers)
        assert [c["name"] for c in resp.json()["companies"]] == ["Acme Robotics"]

    def test_get_own_listing(self, client, db, user, auth_headers):
        company = make_company(db, created_by=user.id)
        resp = client.get(f"/api/my-listings/{company.id}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["company"]["id"] == company.id

    def test_get_someone_elses_listing_returns_403(self, client, db, other_user, auth_headers):
        company = make_company(db, created_by=other_user.id)
        resp = client.get(f"/api/my-listings/{company.id}", headers=auth_headers)
        assert resp.status_code == 403

    def test_get_missing_returns_404(self, client, auth_headers):
        assert client.get("/api/my-listings/missing", headers=auth_headers).status_code == 404

    def test_replace_resets_status_and_keeps_slug(self, client, db, user, auth_headers, search_index):
        company = make_company(db, name="Acme Robotics", created_by=user.id, status=CompanyStatus.PUBLISHED)

        resp = client.put(
            f"/api/my-listings/{company.id}",
            json=company_payload(name="Acme Robotics Group", description="New pitch"),
            headers=auth_headers,
        )
        assert resp.status_code == 200
        body = resp.json()["company"]
        assert body["name"] == "Acme Robotics Group"
        assert body["slug"] == "acme-robotics"
        assert body["status"] == "pending"
        assert search_index.documents[company.id]["name"] == "Acme Robotics Group"

    def test_replace_someone_elses_listing_returns_403(self, client, db, other_user, auth_headers):
        company = make_company(db, created_by=other_user.id)
        resp = client.put(f"/api/my-listings/{company.id}", json=company_payload(), headers=auth_headers)
        assert resp.status_code == 403

    def test_delete_removes_company_saves_and_index_entry(self, client, db, user, other_user, auth_headers, search_index):
        company = make_company(db, created_by=user.id)
        db.add(SavedListing(user_id=other_user.id, company_id=company.id))
        db.commit()
        company_id = company.id

        resp = client.delete(f"/api/my-listings/{company_id}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True}

        db.expire_all()
        assert db.query(Company).filter(Company.id == company_id).first() is None
        assert db.query(SavedListing).count() == 0
        assert search_index.removed == [company_id]

    def test_delete_survives_index_failure(self, client, db, user, auth_headers, search_index):
        company = make_company(db, created_by=user.id)
        search_index.fail_writes = True

        resp = client.delete(f"/api/my-listings/{company.id}", headers=auth_headers)
        assert resp.status_code == 200
