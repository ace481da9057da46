from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import catalog
from .admin_schemas import CategoryIn, CategoryUpdate, GalleryImageIn, GalleryImageUpdate, PriceIn, RoomIn, RoomUpdate
from .deps import db_failure, get_engine, require_admin
from .schemas import CategoryOut, GalleryImageWithCategoryOut, PriceWithCategoryOut

# every handler re-checks the token; the route gate only looked for the cookie
router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])


def _now() -> int:
    return int(time.time())


def _category(c) -> dict:
    return CategoryOut.model_validate(c).model_dump(by_alias=True)


@router.get("/categories")
def admin_list_categories(engine=Depends(get_engine)):
    with db_failure("Failed to fetch categories"), Session(engine) as s:
        return {"success": True, "data": [_category(c) for c in catalog.list_categories(s)]}


@router.post("/categories")
def admin_create_category(body: CategoryIn, engine=Depends(get_engine)):
    with db_failure("Failed to create category"), Session(engine) as s:
        try:
            c = catalog.create_category(s, body, now=_now())
        except IntegrityError:
            raise HTTPException(status_code=409, detail="Slug already exists")
        return {"success": True, "data": _category(c)}


@router.get("/categories/{category_id}")
def admin_get_category(category_id: int, engine=Depends(get_engine)):
    with db_failure("Failed to fetch category"), Session(engine) as s:
        return {"success": True, "data": _category(catalog.get_category(s, category_id))}


@router.put("/categories/{category_id}")
def admin_update_category(category_id: int, body: CategoryUpdate, engine=Depends(get_engine)):
    with db_failure("Failed to update category"), Session(engine) as s:
        try:
            c = catalog.update_category(s, category_id, body)
        except IntegrityError:
            raise HTTPException(status_code=409, detail="Slug or price tier already exists")
        return {"success": True, "data": _category(c)}


@router.delete("/categories/{category_id}")
def admin_delete_category(category_id: int, engine=Depends(get_engine)):
    with db_failure("Failed to delete category"), Session(engine) as s:
        catalog.delete_category(s, category_id)
    return {"success": True, "message": "Category deleted successfully"}


@router.get("/prices")
def admin_list_prices(engine=Depends(get_engine)):
    with db_failure("Failed to fetch prices"), Session(engine) as s:
        rows = catalog.list_prices(s)
        return {"success": True, "data": [PriceWithCategoryOut.model_validate(p).model_dump(by_alias=True) for p in rows]}


@router.post("/prices")
def admin_create_price(body: PriceIn, engine=Depends(get_engine)):
    with db_failure("Failed to create price"), Session(engine) as s:
        try:
            p = catalog.create_price(s, body)
        except IntegrityError:
            raise HTTPException(status_code=409, detail="Price tier already exists")
        return {"success": True, "data": PriceWithCategoryOut.model_validate(p).model_dump(by_alias=True)}


@router.get("/gallery")
def admin_list_gallery(engine=Depends(get_engine)):
    with db_failure("Failed to fetch gallery images"), Session(engine) as s:
        rows = catalog.list_gallery(s)
        return {"success": True, "data": [GalleryImageWithCategoryOut.model_validate(i).model_dump(by_alias=True) for i in rows]}


@router.post("/gallery")
def admin_create_gallery_image(body: GalleryImageIn, engine=Depends(get_engine)):
    # the file itself is already hosted; only its url/public id are recorded
    with db_failure("Failed to upload image"), Session(engine) as s:
        img = catalog.create_gallery_image(s, body, now=_now())
        return {"success": True, "data": GalleryImageWithCategoryOut.model_validate(img).model_dump(by_alias=True)}


@router.put("/gallery/{image_id}")
def admin_update_gallery_image(image_id: int, body: GalleryImageUpdate, engine=Depends(get_engine)):
    with db_failure("Failed to update image"), Session(engine) as s:
        img = catalog.update_gallery_image(s, image_id, body)
        return {"success": True, "data": GalleryImageWithCategoryOut.model_validate(img).model_dump(by_alias=True)}


@router.delete("/gallery/{image_id}")
def admin_delete_gallery_image(image_id: int, engine=Depends(get_engine)):
    with db_failure("Failed to delete image"), Session(engine) as s:
        catalog.delete_gallery_image(s, image_id)
    return {"success": True, "message": "Image deleted successfully"}


# room form: bare records instead of the {success, data} envelope


@router.get("/rooms")
def admin_list_rooms(engine=Depends(get_engine)):
    with db_failure("Failed to fetch rooms"), Session(engine) as s:
        return [_category(c) for c in catalog.list_rooms(s)]


@router.post("/rooms")
def admin_create_room(body: RoomIn, engine=Depends(get_engine)):
    with db_failure("Failed to create room"), Session(engine) as s:
        try:
            c = catalog.create_room(s, body, now=_now())
        except IntegrityError:
            raise HTTPException(status_code=409, detail="Slug already exists")
        return JSONResponse(_category(c), status_code=201)


@router.put("/rooms")
def admin_update_room(body: RoomUpdate, engine=Depends(get_engine)):
    if not body.id:
        raise HTTPException(status_code=400, detail="Room ID is required")
    with db_failure("Failed to update room"), Session(engine) as s:
        try:
            c = catalog.replace_room(s, body.id, body, now=_now())
        except IntegrityError:
            raise HTTPException(status_code=409, detail="Slug already exists")
        return _category(c)


@router.delete("/rooms")
def admin_delete_room(room_id: int | None = Query(default=None, alias="id"), engine=Depends(get_engine)):
    if room_id is None:
        raise HTTPException(status_code=400, detail="Room ID is required")
    with db_failure("Failed to delete room"), Session(engine) as s:
        catalog.delete_room(s, room_id)
    return {"message": "Room deleted successfully"}
