from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from . import catalog
from .deps import db_failure, get_engine
from .schemas import CategoryOut, GalleryImageWithCategoryOut, PriceWithCategoryOut, RoomFeatureOut

router = APIRouter(prefix="/api")


@router.get("/categories")
def list_categories(engine=Depends(get_engine)):
    with db_failure("Failed to fetch categories"), Session(engine) as s:
        rows = catalog.list_categories(s)
        return {"success": True, "data": [CategoryOut.model_validate(c).model_dump(by_alias=True) for c in rows]}


@router.get("/categories/{slug}")
def get_category(slug: str, engine=Depends(get_engine)):
    with db_failure("Failed to fetch category"), Session(engine) as s:
        c = catalog.get_category_by_slug(s, slug)
        return {"success": True, "data": CategoryOut.model_validate(c).model_dump(by_alias=True)}


@router.get("/prices")
def list_prices(category_id: int | None = Query(default=None, alias="categoryId"), engine=Depends(get_engine)):
    with db_failure("Failed to fetch prices"), Session(engine) as s:
        rows = catalog.list_prices(s, category_id=category_id)
        return {"success": True, "data": [PriceWithCategoryOut.model_validate(p).model_dump(by_alias=True) for p in rows]}


@router.get("/gallery")
def list_gallery(category: str | None = None, engine=Depends(get_engine)):
    with db_failure("Failed to fetch gallery images"), Session(engine) as s:
        rows = catalog.list_gallery(s, category=category)
        return {
            "success": True,
            "data": [GalleryImageWithCategoryOut.model_validate(i).model_dump(by_alias=True) for i in rows],
            "categories": list(catalog.GALLERY_CATEGORIES),
        }


@router.get("/room-features")
def list_room_features(engine=Depends(get_engine)):
    with db_failure("Failed to fetch room features"), Session(engine) as s:
        rows = catalog.list_room_features(s)
        return {"success": True, "data": [RoomFeatureOut.model_validate(f).model_dump(by_alias=True) for f in rows]}
