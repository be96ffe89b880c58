from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from ..core.celery_app import celery_app
from ..core.db import SessionLocal
from ..models.company import Company
from .search_index import SearchIndex, company_document, get_search_index

logger = logging.getLogger(__name__)

BATCH_SIZE = 500


def reindex_all(db: Session, index: SearchIndex) -> int:
    """
    Rebuild the search index from the companies table.

    Unlike the per-request mirror writes, failures here propagate so the
    caller (Celery, the init script) sees them.
    """
    index.initialize_index()
    index.clear()

    total = 0
    batch: list[dict] = []
    for company in db.query(Company).order_by(Company.created_at.asc()).yield_per(BATCH_SIZE):
        batch.append(company_document(company))
        if len(batch) >= BATCH_SIZE:
            index.add_documents(batch)
            total += len(batch)
            batch = []
    if batch:
        index.add_documents(batch)
        total += len(batch)

    logger.info(
        "Reindexed %d companies",
        total,
        extra={"index": index.index_uid, "step": "reindex"},
    )
    return total


@celery_app.task(name="marketplace.services.indexing.reindex_companies")
def reindex_companies() -> int:
    db: Session = SessionLocal()
    try:
        return reindex_all(db, get_search_index())
    except Exception:
        logger.exception("Error during reindex_companies", extra={"step": "reindex"})
        raise
    finally:
        db.close()


@celery_app.task(name="marketplace.services.indexing.clear_search_index")
def clear_search_index() -> None:
    index = get_search_index()
    try:
        index.clear()
    except Exception:
        logger.exception("Error clearing search index", extra={"index": index.index_uid, "step": "clear"})
        raise
    logger.info("Cleared search index", extra={"index": index.index_uid, "step": "clear"})
