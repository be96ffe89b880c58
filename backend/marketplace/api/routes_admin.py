from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..models.company import Company, CompanyStatus
from ..schemas.company import CompanyOut
from .deps import require_admin

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/companies")
def list_companies_for_moderation(
    status: CompanyStatus | None = None,
    limit: int = 100,
    offset: int = 0,
    db: Session = Depends(get_db),
    _: None = Depends(require_admin),
):
    """
    Moderation queue: every company regardless of status, newest first,
    plus a count per status for the dashboard.
    """
    # Hard cap to avoid unbounded scans
    safe_limit = max(1, min(limit, 500))

    query = db.query(Company)
    if status is not None:
        query = query.filter(Company.status == status)

    companies = (
        query.order_by(Company.created_at.desc())
        .offset(max(offset, 0))
        .limit(safe_limit)
        .all()
    )

    counts = {s.value: 0 for s in CompanyStatus}
    for row_status, count in db.query(Company.status, func.count(Company.id)).group_by(Company.status):
        key = row_status.value if hasattr(row_status, "value") else row_status
        counts[key] = count

    return {
        "companies": [CompanyOut.model_validate(c) for c in companies],
        "counts": counts,
    }
