"""
A user's bookmark of a company. One row per (user, company) pair.
"""
from datetime import datetime
import uuid

from sqlalchemy import Column, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.db import Base


class SavedListing(Base):
    __tablename__ = "saved_listings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    company = relationship("Company", back_populates="saved_by")

    __table_args__ = (
        UniqueConstraint("user_id", "company_id", name="uq_saved_listing_user_company"),
    )
