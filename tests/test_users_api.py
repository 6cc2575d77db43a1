"""Route tests for /api/users."""

from bson import ObjectId


async def test_create_and_get_user(client):
    r = await client.post("/api/users", json={
        "first_name": "Grace",
        "last_name": "Hopper",
        "email": "Grace@Example.com",
    })

    assert r.status_code == 201
    created = r.json()["data"]
    assert created["email"] == "grace@example.com"
    assert created["status"] == "active"

    r = await client.get(f"/api/users/{created['id']}")
    assert r.json()["data"]["first_name"] == "Grace"


async def test_duplicate_email_rejected(client, user):
    r = await client.post("/api/users", json={
        "first_name": "Other",
        "last_name": "Person",
        "email": user["email"],
    })
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Email already registered"}


async def test_invalid_email_rejected(client):
    r = await client.post("/api/users", json={
        "first_name": "A",
        "last_name": "B",
        "email": "not-an-email",
    })
    assert r.status_code == 400
    assert r.json()["errors"]


async def test_list_search_and_status(client, db, user):
    await db["users"].insert_many([
        {"first_name": "Linus", "last_name": "Leaf", "email": "linus@example.com",
         "status": "inactive", "created_at": user["created_at"]},
        {"first_name": "Maya", "last_name": "Moss", "email": "maya@garden.io",
         "status": "active", "created_at": user["created_at"]},
    ])

    r = await client.get("/api/users", params={"search": "GARDEN"})
    assert {u["first_name"] for u in r.json()["data"]} == {"Ada", "Maya"}

    r = await client.get("/api/users", params={"status": "inactive"})
    assert [u["first_name"] for u in r.json()["data"]] == ["Linus"]

    r = await client.get("/api/users", params={"sort": "email"})
    assert r.status_code == 400


async def test_update_user(client, user):
    r = await client.put(f"/api/users/{user['_id']}", json={"status": "inactive"})

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["status"] == "inactive"
    assert data["updated_at"] is not None


async def test_delete_user(client, user):
    r = await client.delete(f"/api/users/{user['_id']}")
    assert r.json() == {"success": True, "message": "User deleted"}

    r = await client.delete(f"/api/users/{user['_id']}")
    assert r.status_code == 404

    r = await client.get(f"/api/users/{ObjectId()}")
    assert r.status_code == 404
