from __future__ import annotations

from typing import Literal

from pydantic import Field

from .schemas import CamelModel

SLUG_PATTERN = r"^[a-z0-9-]+$"

GalleryCategory = Literal["Exterior", "Rooms", "Dining", "Amenities"]


class RoomSpecs(CamelModel):
    ac: bool = False
    wifi: bool = False
    tv: bool = False
    geyser: bool = False
    cctv: bool = False
    parking: bool = False
    attached: bool = False


class RoomSpecsPatch(CamelModel):
    ac: bool | None = None
    wifi: bool | None = None
    tv: bool | None = None
    geyser: bool | None = None
    cctv: bool | None = None
    parking: bool | None = None
    attached: bool | None = None


class CategoryIn(CamelModel):
    title: str = Field(min_length=1)
    # derived from the title when omitted
    slug: str | None = Field(default=None, min_length=1, pattern=SLUG_PATTERN)
    description: str | None = None
    room_count: int = Field(default=0, ge=0)
    bed_type: str | None = None
    max_occupancy: int | None = Field(default=None, ge=1)
    room_size: str | None = None
    video_url: str | None = None
    essential_amenities: list[str] = []
    specs: RoomSpecs | None = None


class PriceTierIn(CamelModel):
    hourly_hours: int = Field(gt=0)
    rate_cents: int = Field(gt=0)
    label: str | None = None


class CategoryUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    slug: str | None = Field(default=None, min_length=1, pattern=SLUG_PATTERN)
    description: str | None = None
    room_count: int | None = Field(default=None, ge=0)
    bed_type: str | None = None
    max_occupancy: int | None = Field(default=None, ge=1)
    room_size: str | None = None
    video_url: str | None = None
    essential_amenities: list[str] | None = None
    specs: RoomSpecsPatch | None = None
    # replaces every tier of the category when present
    prices: list[PriceTierIn] | None = None


class PriceIn(CamelModel):
    category_id: int = Field(gt=0)
    hourly_hours: int = Field(gt=0)
    rate_cents: int = Field(gt=0)
    label: str | None = None


class GalleryImageIn(CamelModel):
    category: GalleryCategory
    url: str = Field(min_length=1)
    public_id: str = Field(min_length=1)
    caption: str | None = None
    category_id: int | None = None


class GalleryImageUpdate(CamelModel):
    category: GalleryCategory
    caption: str | None = None
    category_id: int | None = None
    url: str | None = None
    public_id: str | None = None


class RoomImageIn(CamelModel):
    url: str = Field(min_length=1)
    public_id: str = Field(min_length=1)


class RoomVideoIn(CamelModel):
    url: str = Field(min_length=1)
    public_id: str | None = None


class RoomIn(CamelModel):
    """Room form payload: the category plus its already-hosted media."""

    title: str = Field(min_length=1)
    description: str | None = None
    specs: RoomSpecs | None = None
    essential_amenities: list[str] | None = None
    room_count: int | None = Field(default=None, ge=0)
    images: list[RoomImageIn] | None = None
    # only the first video is kept
    videos: list[RoomVideoIn] | None = None


class RoomUpdate(RoomIn):
    id: int | None = None
