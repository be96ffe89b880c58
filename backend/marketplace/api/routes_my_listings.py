"""
Listings owned by the signed-in user.

Ownership comes from the bearer token, never from the request body.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..models.company import Company
from ..models.user import User
from ..schemas.company import CompanyIn, CompanyOut
from ..services import companies as company_service
from ..services.search_index import SearchIndex, get_search_index
from .deps import get_current_user

router = APIRouter(tags=["my-listings"])


def _owned_company(db: Session, company_id: str, user: User) -> Company:
    company = company_service.get_company(db, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    if company.created_by != user.id:
        raise HTTPException(status_code=403, detail="You do not own this listing")
    return company


@router.get("/my-listings")
def list_my_listings(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    rows = (
        db.query(Company)
        .filter(Company.created_by == user.id)
        .order_by(Company.created_at.desc())
        .all()
    )
    return {"companies": [CompanyOut.model_validate(c) for c in rows]}


@router.post("/my-listings", status_code=201)
def create_my_listing(
    payload: CompanyIn,
    db: Session = Depends(get_db),
    index: SearchIndex = Depends(get_search_index),
    user: User = Depends(get_current_user),
):
    try:
        company = company_service.create_company(db, payload, index=index, created_by=user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"company": CompanyOut.model_validate(company)}


@router.get("/my-listings/{company_id}")
def get_my_listing(
    company_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    company = _owned_company(db, company_id, user)
    return {"company": CompanyOut.model_validate(company)}


@router.put("/my-listings/{company_id}")
def update_my_listing(
    company_id: str,
    payload: CompanyIn,
    db: Session = Depends(get_db),
    index: SearchIndex = Depends(get_search_index),
    user: User = Depends(get_current_user),
):
    company = _owned_company(db, company_id, user)
    try:
        company = company_service.replace_company(db, company, payload, index=index)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"company": CompanyOut.model_validate(company)}


@router.delete("/my-listings/{company_id}")
def delete_my_listing(
    company_id: str,
    db: Session = Depends(get_db),
    index: SearchIndex = Depends(get_search_index),
    user: User = Depends(get_current_user),
):
    company = _owned_company(db, company_id, user)
    company_service.delete_company(db, company, index=index)
    return {"success": True}
