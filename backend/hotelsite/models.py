from __future__ import annotations

from sqlalchemy import JSON, BigInteger, Boolean, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # compared exactly as stored
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(BigInteger, nullable=True)  # unix seconds
    created_at = Column(BigInteger, nullable=False)  # unix seconds


class HotelCategory(Base):
    __tablename__ = "hotel_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String(128), nullable=False, unique=True)
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    specs = Column(JSON, nullable=True)  # {"ac": bool, "wifi": bool, ...}
    essential_amenities = Column(JSON, nullable=False, default=list)
    bed_type = Column(String(64), nullable=True)
    max_occupancy = Column(Integer, nullable=True)
    room_size = Column(String(64), nullable=True)
    video_url = Column(String(512), nullable=True)
    room_count = Column(Integer, nullable=False, default=0)
    created_at = Column(BigInteger, nullable=False)

    prices = relationship(
        "Price",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="Price.hourly_hours",
    )
    images = relationship(
        "GalleryImage",
        back_populates="hotel_category",
        cascade="all, delete-orphan",
        order_by="[GalleryImage.created_at, GalleryImage.id]",
    )


class Price(Base):
    __tablename__ = "prices"
    __table_args__ = (UniqueConstraint("category_id", "hourly_hours", name="uq_price_category_hours"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, ForeignKey("hotel_categories.id", ondelete="CASCADE"), nullable=False, index=True)
    hourly_hours = Column(Integer, nullable=False)
    rate_cents = Column(Integer, nullable=False)
    label = Column(String(64), nullable=True)

    category = relationship("HotelCategory", back_populates="prices")


class GalleryImage(Base):
    __tablename__ = "gallery_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String(32), nullable=False)  # Exterior|Rooms|Dining|Amenities
    url = Column(String(512), nullable=False)
    public_id = Column(String(256), nullable=False)
    caption = Column(String(256), nullable=True)
    category_id = Column(Integer, ForeignKey("hotel_categories.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(BigInteger, nullable=False)

    hotel_category = relationship("HotelCategory", back_populates="images")


class RoomFeature(Base):
    __tablename__ = "room_features"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(32), nullable=False, unique=True)
    label = Column(String(64), nullable=False)
    category = Column(String(32), nullable=False)  # amenity|feature
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
