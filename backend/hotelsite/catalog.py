from __future__ import annotations

import re

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from .admin_schemas import CategoryIn, CategoryUpdate, GalleryImageIn, GalleryImageUpdate, PriceIn, RoomIn
from .errors import NotFoundError
from .models import GalleryImage, HotelCategory, Price, RoomFeature

GALLERY_CATEGORIES = ("Exterior", "Rooms", "Dining", "Amenities")

MAX_PRICE_TIERS = 4

DEFAULT_PRICE_TIERS = (
    {"hourly_hours": 2, "rate_cents": 50000, "label": "2 Hours"},
    {"hourly_hours": 4, "rate_cents": 80000, "label": "4 Hours"},
    {"hourly_hours": 24, "rate_cents": 150000, "label": "24 Hours"},
)

DEFAULT_ROOM_FEATURES = (
    {"key": "ac", "label": "Air Conditioning", "category": "amenity", "sort_order": 1},
    {"key": "wifi", "label": "Free Wi-Fi", "category": "amenity", "sort_order": 2},
    {"key": "tv", "label": "Television", "category": "feature", "sort_order": 3},
    {"key": "geyser", "label": "Hot Water", "category": "feature", "sort_order": 4},
    {"key": "cctv", "label": "CCTV Security", "category": "feature", "sort_order": 5},
    {"key": "parking", "label": "Parking", "category": "feature", "sort_order": 6},
    {"key": "attached", "label": "Attached Bathroom", "category": "feature", "sort_order": 7},
)


def slugify(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def _with_children():
    return (selectinload(HotelCategory.prices), selectinload(HotelCategory.images))


# categories


def list_categories(s: Session) -> list[HotelCategory]:
    q = select(HotelCategory).options(*_with_children()).order_by(HotelCategory.title.asc())
    return list(s.execute(q).scalars().all())


def get_category(s: Session, category_id: int) -> HotelCategory:
    c = s.get(HotelCategory, category_id)
    if c is None:
        raise NotFoundError("Category")
    return c


def get_category_by_slug(s: Session, slug: str) -> HotelCategory:
    q = select(HotelCategory).options(*_with_children()).where(HotelCategory.slug == slug)
    c = s.execute(q).scalars().first()
    if c is None:
        raise NotFoundError("Category")
    return c


def create_category(s: Session, data: CategoryIn, now: int) -> HotelCategory:
    fields = data.model_dump(exclude={"slug", "specs"})
    c = HotelCategory(
        **fields,
        slug=data.slug or slugify(data.title),
        specs=data.specs.model_dump() if data.specs else None,
        created_at=now,
    )
    c.prices = [Price(**tier) for tier in DEFAULT_PRICE_TIERS]
    s.add(c)
    s.commit()
    s.refresh(c)
    return c


def update_category(s: Session, category_id: int, data: CategoryUpdate) -> HotelCategory:
    c = get_category(s, category_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True, exclude={"prices", "specs"})
    for key, value in changes.items():
        # blank strings mean "leave as is"
        if isinstance(value, str) and not value.strip():
            continue
        setattr(c, key, value)

    if data.specs is not None:
        patch = data.specs.model_dump(exclude_none=True)
        if patch:
            c.specs = {**(c.specs or {}), **patch}

    if data.prices is not None:
        c.prices.clear()
        s.flush()
        c.prices.extend(
            Price(hourly_hours=p.hourly_hours, rate_cents=p.rate_cents, label=p.label or None)
            for p in data.prices[:MAX_PRICE_TIERS]
        )

    s.add(c)
    s.commit()
    s.refresh(c)
    return c


def delete_category(s: Session, category_id: int) -> None:
    c = get_category(s, category_id)
    s.delete(c)
    s.commit()


# prices


def list_prices(s: Session, category_id: int | None = None) -> list[Price]:
    q = select(Price).join(Price.category).options(selectinload(Price.category))
    if category_id is not None:
        q = q.where(Price.category_id == category_id).order_by(Price.hourly_hours.asc())
    else:
        q = q.order_by(HotelCategory.title.asc(), Price.hourly_hours.asc())
    return list(s.execute(q).scalars().all())


def create_price(s: Session, data: PriceIn) -> Price:
    get_category(s, data.category_id)
    p = Price(**data.model_dump())
    s.add(p)
    s.commit()
    s.refresh(p)
    return p


# gallery


def list_gallery(s: Session, category: str | None = None) -> list[GalleryImage]:
    q = select(GalleryImage).options(selectinload(GalleryImage.hotel_category))
    # unknown categories fall back to the full gallery
    if category and category in GALLERY_CATEGORIES:
        q = q.where(GalleryImage.category == category)
    q = q.order_by(GalleryImage.created_at.desc(), GalleryImage.id.desc())
    return list(s.execute(q).scalars().all())


def get_gallery_image(s: Session, image_id: int) -> GalleryImage:
    img = s.get(GalleryImage, image_id)
    if img is None:
        raise NotFoundError("Image")
    return img


def create_gallery_image(s: Session, data: GalleryImageIn, now: int) -> GalleryImage:
    if data.category_id is not None:
        get_category(s, data.category_id)
    img = GalleryImage(**data.model_dump(), created_at=now)
    s.add(img)
    s.commit()
    s.refresh(img)
    return img


def update_gallery_image(s: Session, image_id: int, data: GalleryImageUpdate) -> GalleryImage:
    img = get_gallery_image(s, image_id)
    if data.category_id is not None:
        get_category(s, data.category_id)
    img.category = data.category
    img.caption = data.caption
    img.category_id = data.category_id
    if data.url and data.public_id:
        img.url = data.url
        img.public_id = data.public_id
    s.add(img)
    s.commit()
    s.refresh(img)
    return img


def delete_gallery_image(s: Session, image_id: int) -> None:
    img = get_gallery_image(s, image_id)
    s.delete(img)
    s.commit()


# room features


def list_room_features(s: Session) -> list[RoomFeature]:
    q = select(RoomFeature).where(RoomFeature.is_active.is_(True)).order_by(RoomFeature.sort_order.asc())
    return list(s.execute(q).scalars().all())


def seed_room_features(s: Session) -> int:
    existing = set(s.execute(select(RoomFeature.key)).scalars().all())
    added = 0
    for feature in DEFAULT_ROOM_FEATURES:
        if feature["key"] not in existing:
            s.add(RoomFeature(**feature, is_active=True))
            added += 1
    if added:
        s.commit()
    return added


# rooms: a category edited together with its "Rooms" images and video


def _room_images(data: RoomIn, now: int) -> list[GalleryImage]:
    return [
        GalleryImage(
            category="Rooms",
            url=img.url,
            public_id=img.public_id,
            caption=f"{data.title} - Image {n}",
            created_at=now,
        )
        for n, img in enumerate(data.images or [], start=1)
    ]


def _apply_room(c: HotelCategory, data: RoomIn) -> None:
    c.slug = slugify(data.title)
    c.title = data.title
    c.description = data.description or ""
    if data.specs is not None:
        c.specs = data.specs.model_dump()
    c.essential_amenities = data.essential_amenities or []
    c.room_count = data.room_count or 0
    c.video_url = data.videos[0].url if data.videos else None


def get_room(s: Session, room_id: int) -> HotelCategory:
    c = s.get(HotelCategory, room_id)
    if c is None:
        raise NotFoundError("Room")
    return c


def list_rooms(s: Session) -> list[HotelCategory]:
    q = (
        select(HotelCategory)
        .options(*_with_children())
        .order_by(HotelCategory.created_at.desc(), HotelCategory.id.desc())
    )
    return list(s.execute(q).scalars().all())


def create_room(s: Session, data: RoomIn, now: int) -> HotelCategory:
    c = HotelCategory(created_at=now)
    _apply_room(c, data)
    c.images = _room_images(data, now)
    s.add(c)
    s.commit()
    s.refresh(c)
    return c


def replace_room(s: Session, room_id: int, data: RoomIn, now: int) -> HotelCategory:
    """Overwrite a room's fields and swap its whole image set."""
    c = get_room(s, room_id)
    _apply_room(c, data)
    c.images.clear()
    s.flush()
    c.images.extend(_room_images(data, now))
    s.add(c)
    s.commit()
    s.refresh(c)
    return c


def delete_room(s: Session, room_id: int) -> None:
    s.delete(get_room(s, room_id))
    s.commit()


# demo content for local development

DEMO_VIDEO_BASE = "https://commondatastorage.googleapis.com/gtv-videos-bucket/sample"

DEMO_CATEGORIES = (
    {
        "slug": "attach-ac-single",
        "title": "Attached AC + Single Bed",
        "description": "Comfortable single bed room with attached bathroom and air conditioning",
        "specs": {"ac": True, "wifi": True, "tv": True, "geyser": True, "cctv": True, "parking": True, "attached": True},
        "essential_amenities": ["Free Wi-Fi", "Air Conditioning", "Daily Housekeeping"],
        "video_url": f"{DEMO_VIDEO_BASE}/BigBuckBunny.mp4",
        "room_count": 15,
    },
    {
        "slug": "attach-nonac-single",
        "title": "Attached Non-AC Single Bed",
        "description": "Single bed room with attached bathroom, fan-cooled for budget-conscious travelers",
        "specs": {"ac": False, "wifi": True, "tv": True, "geyser": True, "cctv": True, "parking": True, "attached": True},
        "essential_amenities": ["Free Wi-Fi", "Daily Housekeeping", "24/7 Reception"],
        "video_url": f"{DEMO_VIDEO_BASE}/ElephantsDream.mp4",
        "room_count": 20,
    },
    {
        "slug": "nonattach-single",
        "title": "Non-Attached Single Bed",
        "description": "Economical single bed room with shared bathroom facilities",
        "specs": {"ac": False, "wifi": True, "tv": False, "geyser": True, "cctv": True, "parking": True, "attached": False},
        "essential_amenities": ["Free Wi-Fi", "Shared Bathroom", "Common Area Access"],
        "video_url": f"{DEMO_VIDEO_BASE}/ForBiggerBlazes.mp4",
        "room_count": 10,
    },
)

DEMO_GALLERY = (
    {"category": "Exterior", "url": "https://images.unsplash.com/photo-1564013799919-ab600027ffc6?w=800&q=80",
     "public_id": "hotel-exterior-1", "caption": "Hotel Front View"},
    {"category": "Rooms", "url": "https://images.unsplash.com/photo-1611892440504-42a792e24d32?w=800&q=80",
     "public_id": "hotel-room-1", "caption": "AC Single Bed Room"},
    {"category": "Amenities", "url": "https://images.unsplash.com/photo-1578662996442-48f60103fc96?w=800&q=80",
     "public_id": "hotel-amenities-1", "caption": "Reception Area"},
    {"category": "Exterior", "url": "https://images.unsplash.com/photo-1551882547-ff40c63fe5fa?w=800&q=80",
     "public_id": "hotel-exterior-night", "caption": "Hotel Night View"},
)


def seed_demo_catalog(s: Session, now: int) -> int:
    """Insert the demo categories (with default tiers) and gallery images.

    Rows already present by slug or public id are left alone, so running it on
    every start is safe. Returns the number of rows added.
    """
    slugs = set(s.execute(select(HotelCategory.slug)).scalars().all())
    public_ids = set(s.execute(select(GalleryImage.public_id)).scalars().all())
    added = 0
    for demo in DEMO_CATEGORIES:
        if demo["slug"] in slugs:
            continue
        c = HotelCategory(**demo, created_at=now)
        c.prices = [Price(**tier) for tier in DEFAULT_PRICE_TIERS]
        s.add(c)
        added += 1
    for img in DEMO_GALLERY:
        if img["public_id"] not in public_ids:
            s.add(GalleryImage(**img, created_at=now))
            added += 1
    if added:
        s.commit()
    return added
