import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..models.advisor import Advisor
from ..models.company import Company, CompanyStatus
from ..schemas.advisor import AdvisorIn, AdvisorOut

router = APIRouter(tags=["advisors"])

logger = logging.getLogger(__name__)


@router.post("/advisors", status_code=201)
def create_advisor(
    payload: AdvisorIn,
    db: Session = Depends(get_db),
):
    advisor = Advisor(**payload.model_dump(mode="json"), status="active")
    db.add(advisor)
    db.commit()
    db.refresh(advisor)

    logger.info("Advisor created: %s", advisor.firm_name, extra={"step": "advisor_created"})
    return {"advisor": AdvisorOut.model_validate(advisor)}


@router.get("/advisors")
def list_advisors(db: Session = Depends(get_db)):
    advisors = (
        db.query(Advisor)
        .filter(Advisor.status == "active")
        .order_by(Advisor.created_at.desc())
        .all()
    )
    return {"advisors": [AdvisorOut.model_validate(a) for a in advisors]}


@router.get("/advisors/{advisor_id}")
def get_advisor(
    advisor_id: str,
    db: Session = Depends(get_db),
):
    advisor = db.query(Advisor).filter(Advisor.id == advisor_id).first()
    if not advisor:
        raise HTTPException(status_code=404, detail="Advisor not found")

    listing_count = (
        db.query(Company)
        .filter(Company.advisor_id == advisor.id, Company.status == CompanyStatus.PUBLISHED)
        .count()
    )
    return {
        "advisor": AdvisorOut.model_validate(advisor),
        "listing_count": listing_count,
    }
