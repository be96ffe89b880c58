from sqlalchemy import Column, String, Text, JSON, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from ..core.db import Base


class Advisor(Base):
    __tablename__ = "advisors"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    firm_name = Column(String(200), nullable=False)
    team_lead = Column(String(200), nullable=False)
    headshot_url = Column(String, nullable=True)
    email = Column(String(320), nullable=False)
    phone = Column(String(50), nullable=False)
    street = Column(String, nullable=True)
    suburb = Column(String, nullable=True)
    state = Column(String, nullable=True)
    postcode = Column(String(20), nullable=True)
    country = Column(String, nullable=False, default="Australia")
    website_url = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    specialties = Column(JSON, nullable=False, default=list)  # ["Technology", "Healthcare", ...]
    status = Column(String(20), nullable=False, default="active", index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    companies = relationship("Company", back_populates="advisor")
