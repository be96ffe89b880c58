from sqlalchemy import Column, Integer, String, Text, Float, JSON, DateTime, ForeignKey
from datetime import datetime
from ..core.db import Base


class Listing(Base):
    __tablename__ = "listings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(140), nullable=False)
    slug = Column(String(200), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Integer, nullable=True)
    address = Column(String, nullable=False)
    suburb = Column(String, nullable=True)
    state = Column(String, nullable=True)
    postcode = Column(String(20), nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    images = Column(JSON, nullable=False, default=list)
    additional_sections = Column(JSON, nullable=False, default=list)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
