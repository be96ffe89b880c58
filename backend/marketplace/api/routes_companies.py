import logging
import math
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..models.user import User
from ..schemas.common import Pagination
from ..schemas.company import CompanyAdminUpdate, CompanyIn, CompanyListResponse, CompanyOut, CompanyCard
from ..schemas.search import SearchParams
from ..services import companies as company_service
from ..services.company_query import search_companies
from ..services.search_index import SearchIndex, get_search_index
from .deps import get_optional_user, require_admin

router = APIRouter(tags=["companies"])

logger = logging.getLogger(__name__)


@router.get("/companies", response_model=CompanyListResponse)
def list_companies(
    params: Annotated[SearchParams, Query()],
    db: Session = Depends(get_db),
):
    companies, total = search_companies(db, params)

    return CompanyListResponse(
        companies=[CompanyCard.model_validate(c) for c in companies],
        pagination=Pagination(
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=math.ceil(total / params.limit),
        ),
    )


@router.post("/companies", status_code=201)
def create_company(
    payload: CompanyIn,
    db: Session = Depends(get_db),
    index: SearchIndex = Depends(get_search_index),
    user: User | None = Depends(get_optional_user),
):
    try:
        company = company_service.create_company(
            db,
            payload,
            index=index,
            created_by=user.id if user else None,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"company": CompanyOut.model_validate(company)}


@router.get("/companies/{id_or_slug}")
def get_company(
    id_or_slug: str,
    db: Session = Depends(get_db),
):
    company = company_service.get_company_by_id_or_slug(db, id_or_slug)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    company = company_service.increment_views(db, company)
    return {"company": CompanyOut.model_validate(company)}


@router.patch("/companies/{company_id}")
def update_company(
    company_id: str,
    payload: CompanyAdminUpdate,
    db: Session = Depends(get_db),
    index: SearchIndex = Depends(get_search_index),
    _: None = Depends(require_admin),
):
    company = company_service.get_company(db, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    try:
        company = company_service.apply_admin_update(db, company, payload, index=index)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"company": CompanyOut.model_validate(company)}
