from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common import blank_to_none, decode_json_list, validate_http_url


class AdvisorIn(BaseModel):
    firm_name: str = Field(..., min_length=1, max_length=200)
    team_lead: str = Field(..., min_length=1, max_length=200)
    headshot_url: str | None = None
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    street: str | None = None
    suburb: str | None = None
    state: str | None = None
    postcode: str | None = None
    country: str = "Australia"
    website_url: str | None = None
    description: str | None = None
    specialties: list[str] = Field(default_factory=list)

    @field_validator(
        "headshot_url", "street", "suburb", "state", "postcode", "website_url", "description",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, v):
        return blank_to_none(v)

    @field_validator("firm_name", "team_lead", "phone", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("website_url")
    @classmethod
    def _validate_website(cls, v: str | None) -> str | None:
        return validate_http_url(v)

    @field_validator("specialties")
    @classmethod
    def _clean_specialties(cls, v: list[str]) -> list[str]:
        return [s.strip() for s in v if s and s.strip()]


class AdvisorBrief(BaseModel):
    id: str
    firm_name: str
    team_lead: str
    headshot_url: str | None = None
    email: str
    phone: str
    website_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class AdvisorOut(AdvisorBrief):
    street: str | None = None
    suburb: str | None = None
    state: str | None = None
    postcode: str | None = None
    country: str | None = None
    description: str | None = None
    specialties: list[str] = []
    status: str
    created_at: datetime

    @field_validator("specialties", mode="before")
    @classmethod
    def _decode_specialties(cls, v):
        return decode_json_list(v)
