from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, constr, field_validator

from ..models.company import CompanyStatus
from .advisor import AdvisorBrief
from .common import AdditionalSection, Pagination, blank_to_none, decode_json_list, validate_http_url

MAX_COMPANY_NAME_LEN = 100
MAX_TAGS = 50
MAX_TAG_LEN = 50
MAX_PHOTOS = 20
MAX_SECTIONS = 10

_OPTIONAL_TEXT_FIELDS = (
    "industry",
    "sub_industry",
    "description",
    "logo_url",
    "website_url",
    "email",
    "phone",
    "street",
    "suburb",
    "state",
    "postcode",
    "amount_seeking",
    "raising_reason",
    "properties",
    "advisor_id",
)


class CompanyIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_COMPANY_NAME_LEN)
    sector: str = Field(..., min_length=1)
    industry: str | None = None
    sub_industry: str | None = None
    description: str | None = None
    logo_url: str | None = None
    website_url: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    street: str | None = None
    suburb: str | None = None
    state: str | None = None
    postcode: str | None = None
    country: str = "Australia"
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    tags: list[constr(min_length=1, max_length=MAX_TAG_LEN)] = Field(default_factory=list, max_length=MAX_TAGS)
    amount_seeking: str | None = None
    raising_reason: str | None = None
    properties: str | None = None
    photos: list[constr(min_length=1)] = Field(default_factory=list, max_length=MAX_PHOTOS)
    project_photos: list[constr(min_length=1)] = Field(default_factory=list, max_length=MAX_PHOTOS)
    additional_sections: list[AdditionalSection] = Field(default_factory=list, max_length=MAX_SECTIONS)
    advisor_id: str | None = None

    @field_validator(*_OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        return blank_to_none(v)

    @field_validator("name", "sector", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("website_url")
    @classmethod
    def _validate_website(cls, v: str | None) -> str | None:
        return validate_http_url(v)

    @field_validator("country", mode="before")
    @classmethod
    def _default_country(cls, v):
        return blank_to_none(v) or "Australia"

    def address_line(self) -> str:
        parts = [self.street, self.suburb, self.state, self.postcode, self.country]
        return ", ".join(p for p in parts if p)


class CompanyAdminUpdate(BaseModel):
    """
    Partial update applied by moderators. Only fields present in the payload
    are written.
    """

    name: str | None = Field(default=None, min_length=1, max_length=MAX_COMPANY_NAME_LEN)
    sector: str | None = Field(default=None, min_length=1)
    industry: str | None = None
    sub_industry: str | None = None
    description: str | None = None
    logo_url: str | None = None
    website_url: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    street: str | None = None
    suburb: str | None = None
    state: str | None = None
    postcode: str | None = None
    country: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    tags: list[constr(min_length=1, max_length=MAX_TAG_LEN)] | None = Field(default=None, max_length=MAX_TAGS)
    amount_seeking: str | None = None
    raising_reason: str | None = None
    properties: str | None = None
    photos: list[constr(min_length=1)] | None = Field(default=None, max_length=MAX_PHOTOS)
    project_photos: list[constr(min_length=1)] | None = Field(default=None, max_length=MAX_PHOTOS)
    additional_sections: list[AdditionalSection] | None = Field(default=None, max_length=MAX_SECTIONS)
    advisor_id: str | None = None
    status: CompanyStatus | None = None

    @field_validator(*_OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        return blank_to_none(v)

    @field_validator("website_url")
    @classmethod
    def _validate_website(cls, v: str | None) -> str | None:
        return validate_http_url(v)


class CompanyCard(BaseModel):
    id: str
    name: str
    slug: str
    sector: str
    industry: str | None = None
    description: str | None = None
    logo_url: str | None = None
    website_url: str | None = None
    suburb: str | None = None
    state: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    amount_seeking: str | None = None
    tags: list[str] = []
    photos: list[str] = []
    project_photos: list[str] = []
    status: CompanyStatus
    views: int = 0
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("tags", "photos", "project_photos", mode="before")
    @classmethod
    def _decode_lists(cls, v):
        return decode_json_list(v)


class CompanyOut(CompanyCard):
    sub_industry: str | None = None
    email: str | None = None
    phone: str | None = None
    street: str | None = None
    postcode: str | None = None
    country: str | None = None
    raising_reason: str | None = None
    properties: str | None = None
    additional_sections: list[dict] = []
    advisor_id: str | None = None
    advisor: AdvisorBrief | None = None
    created_by: str | None = None
    updated_at: datetime | None = None

    @field_validator("additional_sections", mode="before")
    @classmethod
    def _decode_sections(cls, v):
        return decode_json_list(v)


class CompanyListResponse(BaseModel):
    companies: list[CompanyCard]
    pagination: Pagination
