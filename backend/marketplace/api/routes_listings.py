import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..models.company import Company
from ..models.listing import Listing
from ..schemas.listing import ListingIn, ListingOut, ListingPage, ListingUpdate
from ..services.slugs import unique_slug

router = APIRouter(tags=["listings"])

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100

# columns that may not be nulled by a partial update
_REQUIRED_FIELDS = {"title", "description", "address", "latitude", "longitude", "images", "additional_sections"}


def _find_listing(db: Session, id_or_slug: str) -> Listing | None:
    """Numeric keys are ids, anything else is a slug."""
    if id_or_slug.isdigit():
        return db.query(Listing).filter(Listing.id == int(id_or_slug)).first()
    return db.query(Listing).filter(Listing.slug == id_or_slug).first()


def _ensure_company_exists(db: Session, company_id: str | None) -> None:
    if company_id is None:
        return
    if db.query(Company.id).filter(Company.id == company_id).first() is None:
        raise HTTPException(status_code=400, detail=f"Company {company_id} does not exist")


@router.get("/listings", response_model=ListingPage)
def list_listings(
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    db: Session = Depends(get_db),
):
    safe_page = max(page, 1)
    safe_limit = max(1, min(limit, MAX_PAGE_SIZE))

    query = db.query(Listing)
    total = query.count()
    items = (
        query.order_by(Listing.created_at.desc(), Listing.id.desc())
        .offset((safe_page - 1) * safe_limit)
        .limit(safe_limit)
        .all()
    )

    return ListingPage(
        items=[ListingOut.model_validate(i) for i in items],
        page=safe_page,
        limit=safe_limit,
        total=total,
    )


@router.post("/listings", response_model=ListingOut, status_code=201)
def create_listing(
    payload: ListingIn,
    db: Session = Depends(get_db),
):
    _ensure_company_exists(db, payload.company_id)

    data = payload.model_dump(mode="json")
    listing = Listing(
        **data,
        slug=unique_slug(db, Listing, payload.title, fallback_prefix="listing"),
    )
    db.add(listing)
    db.commit()
    db.refresh(listing)

    logger.info("Listing created", extra={"listing_id": listing.id, "step": "listing_created"})
    return listing


@router.get("/listings/{id_or_slug}", response_model=ListingOut)
def get_listing(
    id_or_slug: str,
    db: Session = Depends(get_db),
):
    listing = _find_listing(db, id_or_slug)
    if not listing:
        raise HTTPException(status_code=404, detail="Not found")
    return listing


@router.put("/listings/{id_or_slug}", response_model=ListingOut)
def update_listing(
    id_or_slug: str,
    payload: ListingUpdate,
    db: Session = Depends(get_db),
):
    listing = _find_listing(db, id_or_slug)
    if not listing:
        raise HTTPException(status_code=404, detail="Not found")

    data = payload.model_dump(mode="json", exclude_unset=True)
    if "company_id" in data:
        _ensure_company_exists(db, data["company_id"])

    for field, value in data.items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(listing, field, value)

    db.commit()
    db.refresh(listing)

    logger.info("Listing updated", extra={"listing_id": listing.id, "step": "listing_updated"})
    return listing


@router.delete("/listings/{id_or_slug}")
def delete_listing(
    id_or_slug: str,
    db: Session = Depends(get_db),
):
    listing = _find_listing(db, id_or_slug)
    if not listing:
        raise HTTPException(status_code=404, detail="Not found")

    listing_id = listing.id
    db.delete(listing)
    db.commit()

    logger.info("Listing deleted", extra={"listing_id": listing_id, "step": "listing_deleted"})
    return {"ok": True}
