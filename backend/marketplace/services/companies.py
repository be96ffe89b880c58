"""
Company write pipeline: validate → persist → index → respond.

Route handlers own request parsing and HTTP shaping; everything that touches
the database and the search index for a company write lives here so that
``/companies`` and ``/my-listings`` behave identically.
"""
from __future__ import annotations

from typing import Any, Dict
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ..models.advisor import Advisor
from ..models.company import Company, CompanyStatus
from ..schemas.company import CompanyAdminUpdate, CompanyIn
from .geocoding import geocode_address
from .search_index import SearchIndex
from .slugs import unique_slug

logger = logging.getLogger(__name__)


def get_company(db: Session, company_id: str) -> Company | None:
    return db.query(Company).filter(Company.id == company_id).first()


def get_company_by_id_or_slug(db: Session, key: str) -> Company | None:
    return (
        db.query(Company)
        .options(joinedload(Company.advisor))
        .filter(or_(Company.slug == key, Company.id == key))
        .first()
    )


def _ensure_advisor_exists(db: Session, advisor_id: str | None) -> None:
    if advisor_id is None:
        return
    if db.query(Advisor.id).filter(Advisor.id == advisor_id).first() is None:
        raise ValueError(f"Advisor {advisor_id} does not exist")


def _fill_coordinates(data: Dict[str, Any], payload: CompanyIn) -> None:
    if data.get("latitude") is not None and data.get("longitude") is not None:
        return
    address = payload.address_line()
    if not (payload.street or payload.suburb or payload.postcode):
        return
    result = geocode_address(address)
    if result is not None:
        data["latitude"] = result.latitude
        data["longitude"] = result.longitude


def _company_data(db: Session, payload: CompanyIn) -> Dict[str, Any]:
    _ensure_advisor_exists(db, payload.advisor_id)
    data = payload.model_dump(mode="json")
    _fill_coordinates(data, payload)
    return data


def create_company(
    db: Session,
    payload: CompanyIn,
    *,
    index: SearchIndex,
    created_by: str | None = None,
) -> Company:
    """
    New listings always start as ``pending`` until a moderator publishes them.
    Raises ValueError for references that do not resolve.
    """
    data = _company_data(db, payload)

    company = Company(
        **data,
        slug=unique_slug(db, Company, payload.name, fallback_prefix="company"),
        status=CompanyStatus.PENDING,
        created_by=created_by,
    )
    db.add(company)
    db.commit()
    db.refresh(company)

    logger.info(
        "Company created",
        extra={"company_id": company.id, "user_id": created_by, "step": "company_created"},
    )

    index.add_company(company)
    return company


def replace_company(db: Session, company: Company, payload: CompanyIn, *, index: SearchIndex) -> Company:
    """
    Owner edit: overwrite every editable field and send the listing back to
    moderation. The slug is stable across edits.
    """
    data = _company_data(db, payload)
    for field, value in data.items():
        setattr(company, field, value)
    company.status = CompanyStatus.PENDING

    db.commit()
    db.refresh(company)

    logger.info("Company updated by owner", extra={"company_id": company.id, "step": "company_updated"})

    index.add_company(company)
    return company


def apply_admin_update(
    db: Session,
    company: Company,
    payload: CompanyAdminUpdate,
    *,
    index: SearchIndex,
) -> Company:
    data = payload.model_dump(mode="json", exclude_unset=True)
    if "advisor_id" in data:
        _ensure_advisor_exists(db, data["advisor_id"])

    for field in ("name", "sector", "country", "status", "tags", "photos", "project_photos", "additional_sections"):
        # non-nullable columns: explicit nulls are ignored
        if field in data and data[field] is None:
            data.pop(field)

    if "status" in data:
        data["status"] = CompanyStatus(data["status"])

    for field, value in data.items():
        setattr(company, field, value)

    db.commit()
    db.refresh(company)

    logger.info(
        "Company updated by admin",
        extra={"company_id": company.id, "step": "company_moderated"},
    )

    index.add_company(company)
    return company


def delete_company(db: Session, company: Company, *, index: SearchIndex) -> None:
    company_id = company.id
    db.delete(company)
    db.commit()

    logger.info("Company deleted", extra={"company_id": company_id, "step": "company_deleted"})

    index.remove_company(company_id)


def increment_views(db: Session, company: Company) -> Company:
    db.query(Company).filter(Company.id == company.id).update(
        {Company.views: Company.views + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(company)
    return company
