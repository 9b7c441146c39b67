from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel

from marketplace.catalog import Ad, Category, Community
from marketplace.media import MediaItem
from marketplace.models import AppointmentStatus, LeadStatus


class Professional(BaseModel):
    id: str
    name: str
    category: str
    categories: list[str]
    city: str
    rating: float
    reviews: int
    description: str
    is_verified: bool
    tags: list[str]
    avatar_url: str | None
    has_video: bool
    video_url: str | None
    service_type: str
    gender: str | None
    community: str | None
    gallery: list[str]
    media: list[MediaItem]
    is_sponsored: bool = False


class FeedEntry(BaseModel):
    kind: Literal["professional", "ad"]
    professional: Professional | None = None
    ad: Ad | None = None


class ListingsGetResponse(BaseModel):
    items: list[FeedEntry]
    total: int
    has_more: bool
    next_cursor: int
    failed: bool = False


class CarouselSnapshot(BaseModel):
    media: list[MediaItem]
    index: int
    mode: str
    progress: float
    muted: bool
    duration_ms: int
    tick_ms: int
    wraps: bool


class ProfileDetail(BaseModel):
    professional: Professional
    phone: str
    whatsapp: str | None
    address: str | None
    website_url: str | None
    carousel: CarouselSnapshot


class LeadOut(BaseModel):
    id: str
    created_at: datetime
    profile_id: str
    customer_name: str
    customer_phone: str
    customer_email: str | None
    message: str | None
    status: LeadStatus


class AppointmentOut(BaseModel):
    id: str
    created_at: datetime
    profile_id: str
    customer_name: str
    customer_phone: str
    requested_date: date
    requested_time: str | None
    status: AppointmentStatus
    notes: str | None


class AdminProfileRow(BaseModel):
    id: str
    business_name: str
    city: str
    service_type: str
    is_active: bool
    is_verified: bool
    has_video: bool
    media_urls: list[str]


class AdminStats(BaseModel):
    total: int
    active: int
    verified: int
    with_video: int


class AdminProfilesResponse(BaseModel):
    profiles: list[AdminProfileRow]
    stats: AdminStats


class MediaUpdateResponse(BaseModel):
    profile_id: str
    media_urls: list[str]


class UploadLine(BaseModel):
    filename: str
    success: bool
    url: str | None = None
    error: str | None = None


class UploadBatchResponse(BaseModel):
    succeeded: int
    failed: int
    results: list[UploadLine]
    media_urls: list[str]


class CatalogResponse(BaseModel):
    categories: list[Category]
    communities: list[Community]
    service_types: dict[str, str]
