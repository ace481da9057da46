"""Room categories, prices, gallery and room features."""

import pytest

from hotelsite.catalog import slugify

ROOM = {
    "title": "Deluxe AC Room!",
    "description": "Queen bed, city view",
    "roomCount": 4,
    "maxOccupancy": 2,
    "essentialAmenities": ["Free Wi-Fi"],
    "specs": {"ac": True, "wifi": True, "tv": True, "geyser": True, "cctv": True, "parking": False, "attached": True},
}


def _create_room(client, **overrides):
    resp = client.post("/api/admin/categories", json={**ROOM, **overrides})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "title, slug",
    [
        ("Attached AC + Single Bed", "attached-ac-single-bed"),
        ("  Non-Attached   Single ", "non-attached-single"),
        ("Suite 101", "suite-101"),
    ],
)
def test_slugify(title, slug):
    assert slugify(title) == slug


@pytest.mark.integration
@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/admin/categories"),
        ("post", "/api/admin/categories"),
        ("put", "/api/admin/categories/1"),
        ("delete", "/api/admin/categories/1"),
        ("get", "/api/admin/prices"),
        ("post", "/api/admin/gallery"),
        ("delete", "/api/admin/gallery/1"),
    ],
)
def test_admin_api_requires_valid_token(client, method, path):
    client.cookies.set("auth-token", "forged")
    resp = getattr(client, method)(path)

    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}


@pytest.mark.integration
def test_create_category_derives_slug_and_default_prices(admin_client):
    room = _create_room(admin_client)

    assert room["slug"] == "deluxe-ac-room"
    assert room["roomCount"] == 4
    assert room["specs"]["ac"] is True
    assert [(p["hourlyHours"], p["rateCents"]) for p in room["prices"]] == [(2, 50000), (4, 80000), (24, 150000)]


@pytest.mark.integration
def test_public_category_listing_and_lookup(admin_client):
    _create_room(admin_client, title="B Room")
    _create_room(admin_client, title="A Room")

    listing = admin_client.get("/api/categories").json()
    assert listing["success"] is True
    assert [c["title"] for c in listing["data"]] == ["A Room", "B Room"]

    one = admin_client.get("/api/categories/a-room")
    assert one.status_code == 200
    assert one.json()["data"]["title"] == "A Room"


@pytest.mark.integration
def test_unknown_slug_is_404(client):
    resp = client.get("/api/categories/missing")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Category not found"}


@pytest.mark.integration
def test_duplicate_slug_is_conflict(admin_client):
    _create_room(admin_client, slug="same")
    resp = admin_client.post("/api/admin/categories", json={**ROOM, "slug": "same"})
    assert resp.status_code == 409


@pytest.mark.integration
@pytest.mark.parametrize(
    "payload",
    [
        {"title": ""},
        {"title": "Room", "slug": "Bad Slug"},
        {"title": "Room", "roomCount": -1},
        {"title": "Room", "maxOccupancy": 0},
    ],
)
def test_invalid_category_payload_is_400(admin_client, payload):
    resp = admin_client.post("/api/admin/categories", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"


@pytest.mark.integration
def test_update_category_fields_specs_and_prices(admin_client):
    room = _create_room(admin_client)

    resp = admin_client.put(
        f"/api/admin/categories/{room['id']}",
        json={
            "title": "Deluxe Room",
            "description": "",
            "specs": {"parking": True},
            "prices": [
                {"hourlyHours": 12, "rateCents": 100000},
                {"hourlyHours": 1, "rateCents": 20000, "label": "1 Hour"},
                {"hourlyHours": 3, "rateCents": 40000},
                {"hourlyHours": 6, "rateCents": 60000},
                {"hourlyHours": 48, "rateCents": 250000},
            ],
        },
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["title"] == "Deluxe Room"
    assert data["description"] == "Queen bed, city view"
    assert data["specs"]["parking"] is True
    assert data["specs"]["ac"] is True
    assert [p["hourlyHours"] for p in data["prices"]] == [1, 3, 6, 12]


@pytest.mark.integration
def test_update_without_prices_keeps_tiers(admin_client):
    room = _create_room(admin_client)
    data = admin_client.put(f"/api/admin/categories/{room['id']}", json={"roomCount": 9}).json()["data"]

    assert data["roomCount"] == 9
    assert len(data["prices"]) == 3


@pytest.mark.integration
def test_update_and_delete_missing_category_is_404(admin_client):
    assert admin_client.put("/api/admin/categories/999", json={"roomCount": 1}).status_code == 404
    assert admin_client.delete("/api/admin/categories/999").status_code == 404


@pytest.mark.integration
def test_delete_category_removes_prices_and_images(admin_client):
    room = _create_room(admin_client)
    admin_client.post(
        "/api/admin/gallery",
        json={"category": "Rooms", "url": "https://img/1.jpg", "publicId": "rooms-1", "categoryId": room["id"]},
    )

    resp = admin_client.delete(f"/api/admin/categories/{room['id']}")
    assert resp.json() == {"success": True, "message": "Category deleted successfully"}
    assert admin_client.get("/api/categories").json()["data"] == []
    assert admin_client.get("/api/prices").json()["data"] == []
    assert admin_client.get("/api/gallery").json()["data"] == []


@pytest.mark.integration
def test_prices_listing_and_filter(admin_client):
    a = _create_room(admin_client, title="A")
    b = _create_room(admin_client, title="B")
    resp = admin_client.post("/api/admin/prices", json={"categoryId": b["id"], "hourlyHours": 8, "rateCents": 90000, "label": "8 Hours"})
    assert resp.status_code == 200
    assert resp.json()["data"]["category"]["slug"] == "b"

    everything = admin_client.get("/api/prices").json()["data"]
    assert [(p["category"]["title"], p["hourlyHours"]) for p in everything] == [
        ("A", 2), ("A", 4), ("A", 24), ("B", 2), ("B", 4), ("B", 8), ("B", 24),
    ]

    only_a = admin_client.get("/api/prices", params={"categoryId": a["id"]}).json()["data"]
    assert {p["categoryId"] for p in only_a} == {a["id"]}


@pytest.mark.integration
def test_price_for_missing_category_is_404(admin_client):
    resp = admin_client.post("/api/admin/prices", json={"categoryId": 999, "hourlyHours": 2, "rateCents": 1})
    assert resp.status_code == 404


@pytest.mark.integration
def test_duplicate_price_tier_is_conflict(admin_client):
    room = _create_room(admin_client)
    resp = admin_client.post("/api/admin/prices", json={"categoryId": room["id"], "hourlyHours": 2, "rateCents": 1})
    assert resp.status_code == 409


@pytest.mark.integration
def test_gallery_create_filter_update_delete(admin_client):
    ext = admin_client.post("/api/admin/gallery", json={"category": "Exterior", "url": "https://img/e.jpg", "publicId": "e"})
    assert ext.status_code == 200
    ext_id = ext.json()["data"]["id"]
    admin_client.post("/api/admin/gallery", json={"category": "Amenities", "url": "https://img/a.jpg", "publicId": "a", "caption": "Lobby"})

    public = admin_client.get("/api/gallery").json()
    assert len(public["data"]) == 2
    assert public["categories"] == ["Exterior", "Rooms", "Dining", "Amenities"]

    only_ext = admin_client.get("/api/gallery", params={"category": "Exterior"}).json()["data"]
    assert [i["publicId"] for i in only_ext] == ["e"]

    unknown = admin_client.get("/api/gallery", params={"category": "Spa"}).json()["data"]
    assert len(unknown) == 2

    upd = admin_client.put(f"/api/admin/gallery/{ext_id}", json={"category": "Rooms", "caption": "Front"})
    assert upd.status_code == 200
    assert upd.json()["data"]["category"] == "Rooms"
    assert upd.json()["data"]["url"] == "https://img/e.jpg"

    assert admin_client.delete(f"/api/admin/gallery/{ext_id}").json()["success"] is True
    assert admin_client.delete(f"/api/admin/gallery/{ext_id}").status_code == 404
    assert len(admin_client.get("/api/admin/gallery").json()["data"]) == 1


@pytest.mark.integration
def test_gallery_rejects_unknown_category_and_missing_url(admin_client):
    assert admin_client.post("/api/admin/gallery", json={"category": "Spa", "url": "u", "publicId": "p"}).status_code == 400
    assert admin_client.post("/api/admin/gallery", json={"category": "Rooms", "publicId": "p"}).status_code == 400


@pytest.mark.integration
def test_room_features_are_seeded_in_order(client):
    data = client.get("/api/room-features").json()["data"]
    assert [f["key"] for f in data] == ["ac", "wifi", "tv", "geyser", "cctv", "parking", "attached"]


ROOM_FORM = {
    "title": "Garden Suite",
    "description": "Ground floor, opens onto the lawn",
    "specs": {"ac": True, "wifi": True, "tv": True, "geyser": True, "cctv": False, "parking": True, "attached": True},
    "essentialAmenities": ["Free Wi-Fi"],
    "roomCount": 3,
    "images": [
        {"url": "https://img/g1.jpg", "publicId": "garden-1"},
        {"url": "https://img/g2.jpg", "publicId": "garden-2"},
    ],
    "videos": [{"url": "https://vid/garden.mp4"}, {"url": "https://vid/ignored.mp4"}],
}


@pytest.mark.integration
@pytest.mark.parametrize("method", ["get", "post", "put", "delete"])
def test_rooms_require_valid_token(client, method):
    client.cookies.set("auth-token", "forged")
    resp = getattr(client, method)("/api/admin/rooms")
    assert resp.status_code == 401


@pytest.mark.integration
def test_create_room_with_images_and_video(admin_client):
    resp = admin_client.post("/api/admin/rooms", json=ROOM_FORM)

    assert resp.status_code == 201
    room = resp.json()
    assert room["slug"] == "garden-suite"
    assert room["videoUrl"] == "https://vid/garden.mp4"
    assert room["roomCount"] == 3
    assert room["prices"] == []
    assert [(i["category"], i["publicId"], i["caption"]) for i in room["images"]] == [
        ("Rooms", "garden-1", "Garden Suite - Image 1"),
        ("Rooms", "garden-2", "Garden Suite - Image 2"),
    ]

    only_rooms = admin_client.get("/api/gallery", params={"category": "Rooms"}).json()["data"]
    assert {i["publicId"] for i in only_rooms} == {"garden-1", "garden-2"}


@pytest.mark.integration
def test_room_defaults_when_optional_fields_missing(admin_client):
    room = admin_client.post("/api/admin/rooms", json={"title": "Bare Room"}).json()

    assert room["description"] == ""
    assert room["essentialAmenities"] == []
    assert room["roomCount"] == 0
    assert room["videoUrl"] is None
    assert room["images"] == []


@pytest.mark.integration
def test_list_rooms_newest_first_with_children(admin_client):
    admin_client.post("/api/admin/rooms", json={**ROOM_FORM, "title": "Older"})
    _create_room(admin_client, title="Newer")

    rooms = admin_client.get("/api/admin/rooms").json()

    assert [r["title"] for r in rooms] == ["Newer", "Older"]
    assert len(rooms[0]["prices"]) == 3
    assert len(rooms[1]["images"]) == 2


@pytest.mark.integration
def test_update_room_replaces_all_images(admin_client):
    room = admin_client.post("/api/admin/rooms", json=ROOM_FORM).json()

    resp = admin_client.put(
        "/api/admin/rooms",
        json={
            "id": room["id"],
            "title": "Garden Suite Deluxe",
            "images": [{"url": "https://img/new.jpg", "publicId": "garden-new"}],
            "videos": [],
        },
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["slug"] == "garden-suite-deluxe"
    assert data["videoUrl"] is None
    assert [(i["publicId"], i["caption"]) for i in data["images"]] == [("garden-new", "Garden Suite Deluxe - Image 1")]
    assert [i["publicId"] for i in admin_client.get("/api/gallery").json()["data"]] == ["garden-new"]


@pytest.mark.integration
def test_update_room_needs_known_id(admin_client):
    missing_id = admin_client.put("/api/admin/rooms", json={"title": "X"})
    assert missing_id.status_code == 400
    assert missing_id.json() == {"error": "Room ID is required"}

    unknown = admin_client.put("/api/admin/rooms", json={"id": 999, "title": "X"})
    assert unknown.status_code == 404
    assert unknown.json() == {"error": "Room not found"}


@pytest.mark.integration
def test_delete_room(admin_client):
    room = admin_client.post("/api/admin/rooms", json=ROOM_FORM).json()

    resp = admin_client.delete("/api/admin/rooms", params={"id": room["id"]})

    assert resp.status_code == 200
    assert resp.json() == {"message": "Room deleted successfully"}
    assert admin_client.get("/api/admin/rooms").json() == []
    assert admin_client.get("/api/gallery").json()["data"] == []


@pytest.mark.integration
def test_delete_room_needs_known_id(admin_client):
    missing_id = admin_client.delete("/api/admin/rooms")
    assert missing_id.status_code == 400
    assert missing_id.json() == {"error": "Room ID is required"}

    unknown = admin_client.delete("/api/admin/rooms", params={"id": 999})
    assert unknown.status_code == 404
    assert unknown.json() == {"error": "Room not found"}
