from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # wire format is camelCase, attributes stay snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class LoginIn(BaseModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _email_shape(cls, v: str) -> str:
        v = v.strip()
        local, _, domain = v.partition("@")
        if not local or "." not in domain or domain.startswith(".") or domain.endswith("."):
            raise ValueError("Invalid email address")
        return v


class AdminOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str


class LoginOut(BaseModel):
    success: bool
    admin: AdminOut


class SessionOut(BaseModel):
    authenticated: bool
    admin: AdminOut


class CategoryRef(CamelModel):
    id: int
    title: str
    slug: str


class PriceOut(CamelModel):
    id: int
    category_id: int
    hourly_hours: int
    rate_cents: int
    label: str | None = None


class PriceWithCategoryOut(PriceOut):
    category: CategoryRef


class GalleryImageOut(CamelModel):
    id: int
    category: str
    url: str
    public_id: str
    caption: str | None = None
    category_id: int | None = None
    created_at: int


class GalleryImageWithCategoryOut(GalleryImageOut):
    hotel_category: CategoryRef | None = None


class CategoryOut(CamelModel):
    id: int
    slug: str
    title: str
    description: str | None = None
    specs: dict[str, bool] | None = None
    essential_amenities: list[str] = []
    bed_type: str | None = None
    max_occupancy: int | None = None
    room_size: str | None = None
    video_url: str | None = None
    room_count: int = 0
    prices: list[PriceOut] = []
    images: list[GalleryImageOut] = []


class RoomFeatureOut(CamelModel):
    id: int
    key: str
    label: str
    category: str
    sort_order: int
