from datetime import date

from pydantic import BaseModel, Field, field_validator

from marketplace.catalog import SERVICES_AGGREGATE
from marketplace.models import ServiceType

SERVICE_TYPE_FILTERS = {SERVICES_AGGREGATE} | {member.value for member in ServiceType}


class SearchFilters(BaseModel):
    q: str | None = None
    city: str | None = None
    category: str | None = None
    service_type: str | None = None
    community: str | None = None
    verified_only: bool = False
    video_only: bool = False

    @field_validator("q", "city", "category", "community", "service_type")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("service_type")
    @classmethod
    def known_service_type(cls, value: str | None) -> str | None:
        if value is not None and value not in SERVICE_TYPE_FILTERS:
            raise ValueError(f"Unknown service type: {value}")
        return value


class ListingsGetRequest(SearchFilters):
    cursor: int = Field(default=0, ge=0)
    shown: int = Field(default=0, ge=0)
    country: str | None = None


class CreateLead(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=120)
    customer_phone: str = Field(..., min_length=6, max_length=32)
    customer_email: str | None = None
    message: str | None = Field(default=None, max_length=5000)


class CreateAppointment(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=120)
    customer_phone: str = Field(..., min_length=6, max_length=32)
    requested_date: date
    requested_time: str | None = None
    notes: str | None = Field(default=None, max_length=5000)


class UpdateProfileFlags(BaseModel):
    is_active: bool | None = None
    is_verified: bool | None = None


class AppendMedia(BaseModel):
    media_urls: list[str] = Field(..., min_length=1)


class DeleteMedia(BaseModel):
    url: str
