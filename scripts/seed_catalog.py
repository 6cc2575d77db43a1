#!/usr/bin/env python3
"""
Seed script for the plant catalog.

Creates a handful of categories and plants linked to them. Existing
categories and plants are replaced; users and favorites are left alone.
"""

import asyncio
import os
import sys
from datetime import datetime, timedelta

# Make app package importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import get_settings
from app.core.database import Database, get_client


CATEGORIES = [
    {"name": "Indoor", "description": "Plants that do well inside the house"},
    {"name": "Outdoor", "description": "Garden and balcony plants"},
    {"name": "Succulents", "description": "Water-storing, low maintenance plants"},
    {"name": "Flowering", "description": "Grown mainly for their blooms"},
]

PLANTS = [
    ("Monstera Deliciosa", "Large split leaves, likes bright indirect light.", "monstera.jpg", ["Indoor"]),
    ("Snake Plant", "Hardy upright leaves, tolerates low light.", "snake-plant.jpg", ["Indoor", "Succulents"]),
    ("Aloe Vera", "Medicinal succulent with thick gel-filled leaves.", "aloe-vera.jpg", ["Succulents", "Outdoor"]),
    ("Peace Lily", "White blooms, droops when thirsty.", "peace-lily.jpg", ["Indoor", "Flowering"]),
    ("Rose", "Classic flowering shrub, needs full sun.", "rose.jpg", ["Outdoor", "Flowering"]),
    ("Jade Plant", "Woody succulent with round glossy leaves.", "jade.jpg", ["Succulents"]),
    ("Bougainvillea", "Climber with vivid papery bracts.", "bougainvillea.jpg", ["Outdoor", "Flowering"]),
    ("Pothos", "Trailing vine, very forgiving.", "pothos.jpg", ["Indoor"]),
]


async def seed_catalog():
    settings = get_settings()
    client = get_client(settings.MONGO_URI)
    Database.client = client
    Database.db = client[settings.MONGO_DB_NAME]
    categories = Database.db["categories"]
    plants = Database.db["plants"]

    # Replace existing data
    await plants.delete_many({})
    await categories.delete_many({})

    now = datetime.utcnow()
    category_docs = [
        {**c, "status": "active", "created_at": now, "updated_at": now}
        for c in CATEGORIES
    ]
    result = await categories.insert_many(category_docs)
    ids_by_name = {c["name"]: oid for c, oid in zip(CATEGORIES, result.inserted_ids)}

    plant_docs = []
    for idx, (name, description, image, category_names) in enumerate(PLANTS):
        created = now - timedelta(days=len(PLANTS) - idx)  # distinct created_at for sorting
        plant_docs.append(
            {
                "name": name,
                "description": description,
                "image": image,
                "status": "active",
                "category_ids": [ids_by_name[n] for n in category_names],
                "favorite_count": 0,
                "created_at": created,
                "updated_at": created,
            }
        )
    await plants.insert_many(plant_docs)
    await Database.create_indexes()

    print(f"Seeded {len(category_docs)} categories and {len(plant_docs)} plants")
    client.close()


if __name__ == "__main__":
    asyncio.run(seed_catalog())
