"""Route tests for /api/plants."""

from bson import ObjectId


async def test_list_populates_categories_and_image_url(client, category, make_plant):
    await make_plant(name="Fern", category_ids=[category["_id"]])

    r = await client.get("/api/plants")

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["pagination"]["totalItems"] == 1
    plant = body["data"][0]
    assert plant["name"] == "Fern"
    assert plant["image_url"] == "/images/plant-1.jpg"
    assert plant["category_ids"] == [str(category["_id"])]
    assert plant["categories"] == [
        {"id": str(category["_id"]), "name": "Indoor", "description": "House plants"}
    ]


async def test_list_default_page_size_is_five(client, make_plant):
    for _ in range(12):
        await make_plant()

    r = await client.get("/api/plants", params={"page": 2})

    body = r.json()
    assert len(body["data"]) == 5
    assert body["pagination"] == {
        "currentPage": 2,
        "totalPages": 3,
        "totalItems": 12,
        "itemsPerPage": 5,
        "hasNextPage": True,
        "hasPrevPage": True,
    }


async def test_list_sort_descending(client, make_plant):
    for _ in range(4):
        await make_plant()

    r = await client.get("/api/plants", params={"sort": "-created_at"})

    names = [p["name"] for p in r.json()["data"]]
    assert names == ["Plant 04", "Plant 03", "Plant 02", "Plant 01"]


async def test_list_rejects_unsortable_field(client, make_plant):
    await make_plant()

    r = await client.get("/api/plants", params={"sort": "image"})

    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Field 'image' is not sortable"}


async def test_list_filters(client, db, category, make_plant):
    await make_plant(name="Fern", category_ids=[category["_id"]], favorite_count=4)
    await make_plant(name="Cactus", status="inactive", favorite_count=1)
    await make_plant(name="Orchid", description="A fern-like orchid")

    r = await client.get("/api/plants", params={"category_ids": str(category["_id"])})
    assert [p["name"] for p in r.json()["data"]] == ["Fern"]

    r = await client.get("/api/plants", params={"status": "inactive"})
    assert [p["name"] for p in r.json()["data"]] == ["Cactus"]

    r = await client.get("/api/plants", params={"favorite_count_gte": "2"})
    assert [p["name"] for p in r.json()["data"]] == ["Fern"]

    r = await client.get("/api/plants", params={"search": "FERN"})
    assert {p["name"] for p in r.json()["data"]} == {"Fern", "Orchid"}

    r = await client.get("/api/plants", params={"image": "plant-1.jpg"})
    assert r.json()["pagination"]["totalItems"] == 3


async def test_list_rejects_bad_date(client):
    r = await client.get("/api/plants", params={"startDate": "not-a-date"})
    assert r.status_code == 400
    assert r.json()["success"] is False


async def test_get_plant(client, category, make_plant):
    plant = await make_plant(name="Fern", category_ids=[category["_id"]])

    r = await client.get(f"/api/plants/{plant['_id']}")

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["id"] == str(plant["_id"])
    assert data["categories"][0]["name"] == "Indoor"


async def test_get_plant_not_found_and_invalid(client, db):
    r = await client.get(f"/api/plants/{ObjectId()}")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Plant not found"}

    r = await client.get("/api/plants/nope")
    assert r.status_code == 400


async def test_related_shares_category_and_excludes_self(client, db, category, make_plant):
    other = (await db["categories"].insert_one({"name": "Outdoor"})).inserted_id
    fern = await make_plant(name="Fern", category_ids=[category["_id"]])
    await make_plant(name="Ivy", category_ids=[category["_id"], other])
    await make_plant(name="Rose", category_ids=[other])

    r = await client.get(f"/api/plants/{fern['_id']}/related")

    assert r.status_code == 200
    assert [p["name"] for p in r.json()["data"]] == ["Ivy"]


async def test_create_plant_with_comma_separated_categories(client, db, category):
    second = (await db["categories"].insert_one({"name": "Succulents"})).inserted_id

    r = await client.post("/api/plants", json={
        "name": "Aloe",
        "description": "Spiky succulent",
        "image": "aloe.jpg",
        "category_ids": f"{category['_id']},{second}",
    })

    assert r.status_code == 201
    data = r.json()["data"]
    assert data["status"] == "active"
    assert data["favorite_count"] == 0
    assert data["category_ids"] == [str(category["_id"]), str(second)]
    assert {c["name"] for c in data["categories"]} == {"Indoor", "Succulents"}


async def test_create_plant_requires_existing_category(client, db):
    payload = {"name": "Aloe", "description": "d", "image": "a.jpg"}

    r = await client.post("/api/plants", json={**payload, "category_ids": []})
    assert r.status_code == 400

    r = await client.post("/api/plants", json={**payload, "category_ids": [str(ObjectId())]})
    assert r.status_code == 400
    assert r.json()["message"] == "One or more categories do not exist"


async def test_create_plant_duplicate_name(client, category, make_plant):
    await make_plant(name="Aloe")

    r = await client.post("/api/plants", json={
        "name": "Aloe",
        "description": "d",
        "image": "a.jpg",
        "category_ids": [str(category["_id"])],
    })

    assert r.status_code == 400


async def test_update_plant(client, category, make_plant):
    plant = await make_plant(name="Fern", category_ids=[category["_id"]])

    r = await client.put(f"/api/plants/{plant['_id']}", json={"status": "inactive"})

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["status"] == "inactive"
    assert data["name"] == "Fern"
    assert data["category_ids"] == [str(category["_id"])]


async def test_delete_plant_removes_favorites(client, db, user, make_plant):
    plant = await make_plant(name="Fern", image="fern.jpg")
    await db["favorites"].insert_one({"user_id": user["_id"], "plant_id": plant["_id"]})

    r = await client.delete(f"/api/plants/{plant['_id']}")

    assert r.status_code == 200
    assert r.json()["deleted_data"] == {
        "id": str(plant["_id"]),
        "name": "Fern",
        "deleted_image": "fern.jpg",
    }
    assert await db["plants"].count_documents({}) == 0
    assert await db["favorites"].count_documents({}) == 0

    r = await client.delete(f"/api/plants/{plant['_id']}")
    assert r.status_code == 404


async def test_assign_categories(client, db, category, make_plant):
    other = (await db["categories"].insert_one({"name": "Outdoor"})).inserted_id
    a = await make_plant(category_ids=[category["_id"]])
    b = await make_plant()

    r = await client.post("/api/plants/assign-categories", json={
        "plant_ids": [str(a["_id"]), str(b["_id"])],
        "category_ids": [str(category["_id"]), str(other)],
    })

    assert r.status_code == 200
    assert r.json()["matched_count"] == 2
    stored_a = await db["plants"].find_one({"_id": a["_id"]})
    stored_b = await db["plants"].find_one({"_id": b["_id"]})
    assert stored_a["category_ids"] == [category["_id"], other]
    assert stored_b["category_ids"] == [category["_id"], other]


async def test_assign_categories_requires_lists(client):
    r = await client.post("/api/plants/assign-categories", json={"plant_ids": "x"})
    assert r.status_code == 400
    assert r.json()["success"] is False
