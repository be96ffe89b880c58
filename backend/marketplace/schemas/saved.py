from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .company import CompanyCard


class SaveRequest(BaseModel):
    company_id: str = Field(..., min_length=1)


class SavedListingOut(BaseModel):
    id: str
    created_at: datetime
    company: CompanyCard

    model_config = ConfigDict(from_attributes=True)
