from sqlalchemy import Column, String, Text, Float, Integer, JSON, Enum, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
import enum
from ..core.db import Base


class CompanyStatus(str, enum.Enum):
    PENDING = "pending"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Company(Base):
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    slug = Column(String(200), unique=True, index=True, nullable=False)
    sector = Column(String, nullable=False, index=True)
    industry = Column(String, nullable=True)
    sub_industry = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    logo_url = Column(String, nullable=True)
    website_url = Column(String, nullable=True)
    email = Column(String(320), nullable=True)
    phone = Column(String(50), nullable=True)

    # address / geolocation
    street = Column(String, nullable=True)
    suburb = Column(String, nullable=True)
    state = Column(String, nullable=True, index=True)
    postcode = Column(String(20), nullable=True)
    country = Column(String, nullable=False, default="Australia")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # investment details
    amount_seeking = Column(String, nullable=True)
    raising_reason = Column(Text, nullable=True)
    properties = Column(Text, nullable=True)

    tags = Column(JSON, nullable=False, default=list)
    photos = Column(JSON, nullable=False, default=list)          # relative /uploads/... urls
    project_photos = Column(JSON, nullable=False, default=list)
    additional_sections = Column(JSON, nullable=False, default=list)

    status = Column(
        Enum(CompanyStatus, values_callable=lambda e: [m.value for m in e], name="company_status"),
        nullable=False,
        default=CompanyStatus.PENDING,
        index=True,
    )
    views = Column(Integer, nullable=False, default=0)

    advisor_id = Column(String(36), ForeignKey("advisors.id"), nullable=True, index=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    advisor = relationship("Advisor", back_populates="companies")
    saved_by = relationship("SavedListing", back_populates="company", cascade="all, delete-orphan")
