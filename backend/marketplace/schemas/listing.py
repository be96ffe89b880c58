from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator, model_validator

from .common import AdditionalSection, blank_to_none, decode_json_list

MAX_TITLE_LEN = 140
MAX_DESCRIPTION_LEN = 10_000

PhotoUrl = constr(min_length=1, strip_whitespace=True)


class ListingIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LEN)
    description: str = Field(default="", max_length=MAX_DESCRIPTION_LEN)
    price: int | None = Field(default=None, ge=0)
    address: str = Field(..., min_length=1)
    suburb: str | None = None
    state: str | None = None
    postcode: str | None = None
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    images: list[PhotoUrl] = Field(default_factory=list)
    additional_sections: list[AdditionalSection] = Field(default_factory=list, max_length=10)
    company_id: str | None = None

    @field_validator("suburb", "state", "postcode", "company_id", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        return blank_to_none(v)

    @field_validator("title", "address", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class ListingUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=MAX_TITLE_LEN)
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LEN)
    price: int | None = Field(default=None, ge=0)
    address: str | None = Field(default=None, min_length=1)
    suburb: str | None = None
    state: str | None = None
    postcode: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    images: list[PhotoUrl] | None = None
    additional_sections: list[AdditionalSection] | None = Field(default=None, max_length=10)
    company_id: str | None = None

    @model_validator(mode="after")
    def _require_some_field(self):
        if not self.model_fields_set:
            raise ValueError("No fields to update")
        return self


class ListingOut(BaseModel):
    id: int
    title: str
    slug: str
    description: str = ""
    price: int | None = None
    address: str
    suburb: str | None = None
    state: str | None = None
    postcode: str | None = None
    latitude: float
    longitude: float
    images: list[str] = []
    additional_sections: list[dict] = []
    company_id: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("images", "additional_sections", mode="before")
    @classmethod
    def _decode_lists(cls, v):
        return decode_json_list(v)


class ListingPage(BaseModel):
    items: list[ListingOut]
    page: int
    limit: int
    total: int
