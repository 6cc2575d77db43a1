"""Route tests for /api/favorites."""

from datetime import datetime

from bson import ObjectId


async def test_add_check_and_remove(client, db, user, make_plant):
    plant = await make_plant(name="Fern")
    pair = {"user_id": str(user["_id"]), "plant_id": str(plant["_id"])}

    r = await client.post("/api/favorites", json=pair)
    assert r.status_code == 201
    assert r.json()["data"]["plant_id"] == pair["plant_id"]
    assert (await db["plants"].find_one({"_id": plant["_id"]}))["favorite_count"] == 1

    r = await client.get("/api/favorites/check", params=pair)
    assert r.json() == {"success": True, "is_favorited": True}

    r = await client.request("DELETE", "/api/favorites", json=pair)
    assert r.status_code == 200
    assert (await db["plants"].find_one({"_id": plant["_id"]}))["favorite_count"] == 0

    r = await client.get("/api/favorites/check", params=pair)
    assert r.json()["is_favorited"] is False

    r = await client.request("DELETE", "/api/favorites", json=pair)
    assert r.status_code == 404


async def test_add_requires_both_ids(client):
    r = await client.post("/api/favorites", json={"user_id": str(ObjectId())})
    assert r.status_code == 400
    assert r.json()["success"] is False


async def test_add_duplicate(client, user, make_plant):
    plant = await make_plant()
    pair = {"user_id": str(user["_id"]), "plant_id": str(plant["_id"])}

    await client.post("/api/favorites", json=pair)
    r = await client.post("/api/favorites", json=pair)

    assert r.status_code == 400
    assert r.json()["message"] == "Plant is already in favorites"


async def test_add_unknown_plant(client, user):
    r = await client.post("/api/favorites", json={
        "user_id": str(user["_id"]),
        "plant_id": str(ObjectId()),
    })
    assert r.status_code == 404


async def test_user_favorite_plants_newest_first(client, db, user, make_plant):
    fern = await make_plant(name="Fern", image="fern.jpg")
    ivy = await make_plant(name="Ivy")
    await db["favorites"].insert_many([
        {"user_id": user["_id"], "plant_id": fern["_id"], "created_at": datetime(2024, 1, 1)},
        {"user_id": user["_id"], "plant_id": ivy["_id"], "created_at": datetime(2024, 2, 1)},
        {"user_id": ObjectId(), "plant_id": fern["_id"], "created_at": datetime(2024, 3, 1)},
    ])

    r = await client.get(f"/api/favorites/user/{user['_id']}")

    data = r.json()["data"]
    assert [p["name"] for p in data] == ["Ivy", "Fern"]
    assert data[1]["image_url"] == "/images/fern.jpg"


async def test_list_filtered_by_user(client, db, user, make_plant):
    plant = await make_plant()
    await db["favorites"].insert_many([
        {"user_id": user["_id"], "plant_id": plant["_id"], "created_at": datetime(2024, 1, 1)},
        {"user_id": ObjectId(), "plant_id": plant["_id"], "created_at": datetime(2024, 1, 2)},
    ])

    r = await client.get("/api/favorites", params={"user_id": str(user["_id"])})
    body = r.json()
    assert body["pagination"]["totalItems"] == 1
    assert body["data"][0]["user_id"] == str(user["_id"])

    r = await client.get("/api/favorites", params={"user_id": "bogus"})
    assert r.status_code == 400
