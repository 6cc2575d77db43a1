"""Tests for core helpers: document serialization, image URLs, body size limit."""

from bson import ObjectId

from app.core.assets import image_url
from app.core.config import get_settings
from app.core.database import serialize_document, to_object_id


def test_serialize_document_converts_ids():
    oid, ref = ObjectId(), ObjectId()
    doc = {"_id": oid, "name": "Fern", "category_ids": [ref], "nested": {"_id": ref}}

    assert serialize_document(doc) == {
        "id": str(oid),
        "name": "Fern",
        "category_ids": [str(ref)],
        "nested": {"id": str(ref)},
    }
    assert serialize_document(None) is None


def test_to_object_id():
    oid = ObjectId()
    assert to_object_id(str(oid)) == oid
    assert to_object_id(oid) is oid
    assert to_object_id("xyz") is None
    assert to_object_id(None) is None


def test_image_url(monkeypatch):
    settings = get_settings()
    assert image_url(None) is None
    assert image_url("fern.jpg") == "/images/fern.jpg"
    assert image_url("https://cdn.example.com/a.jpg") == "https://cdn.example.com/a.jpg"

    monkeypatch.setattr(settings, "IMAGE_BASE_URL", "https://static.example.com/images")
    assert image_url("fern.jpg") == "https://static.example.com/images/fern.jpg"


async def test_oversized_body_rejected(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "MAX_REQUEST_BODY_BYTES", 20)

    r = await client.post("/api/categories", json={"name": "x" * 100})

    assert r.status_code == 413
    assert r.json() == {"success": False, "message": "Payload too large."}


async def test_unknown_route_uses_error_envelope(client):
    r = await client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json()["success"] is False
