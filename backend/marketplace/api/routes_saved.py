import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..core.db import get_db
from ..models.company import Company
from ..models.saved_listing import SavedListing
from ..models.user import User
from ..schemas.saved import SaveRequest, SavedListingOut
from .deps import get_current_user

router = APIRouter(tags=["saved"])

logger = logging.getLogger(__name__)


def _find_saved(db: Session, user_id: str, company_id: str) -> SavedListing | None:
    return (
        db.query(SavedListing)
        .filter(SavedListing.user_id == user_id, SavedListing.company_id == company_id)
        .first()
    )


@router.get("/saved")
def list_saved(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    rows = (
        db.query(SavedListing)
        .options(joinedload(SavedListing.company))
        .filter(SavedListing.user_id == user.id)
        .order_by(SavedListing.created_at.desc())
        .all()
    )
    return {"saved_listings": [SavedListingOut.model_validate(r) for r in rows]}


@router.post("/saved", status_code=201)
def save_listing(
    payload: SaveRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    company = db.query(Company).filter(Company.id == payload.company_id).first()
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    if _find_saved(db, user.id, company.id):
        raise HTTPException(status_code=409, detail="Company already saved")

    saved = SavedListing(user_id=user.id, company_id=company.id)
    db.add(saved)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent save of the same pair
        db.rollback()
        raise HTTPException(status_code=409, detail="Company already saved")
    db.refresh(saved)

    logger.info(
        "Listing saved",
        extra={"user_id": user.id, "company_id": company.id, "step": "saved"},
    )
    return {"saved_listing": SavedListingOut.model_validate(saved)}


@router.delete("/saved")
def unsave_listing(
    company_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    deleted = (
        db.query(SavedListing)
        .filter(SavedListing.user_id == user.id, SavedListing.company_id == company_id)
        .delete(synchronize_session=False)
    )
    db.commit()

    return {
        "removed": deleted > 0,
        "message": "Listing unsaved successfully" if deleted else "Listing was already unsaved",
    }


@router.get("/saved/check")
def check_saved(
    company_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return {"is_saved": _find_saved(db, user.id, company_id) is not None}
