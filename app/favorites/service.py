"""Service layer for user plant favorites."""

import logging
from datetime import datetime
from typing import List, Mapping, Tuple

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from app.core.assets import image_url
from app.core.database import Database, serialize_document, to_object_id
from app.core.exceptions import BadRequestException, NotFoundException
from app.core.query_builder import FieldType, QueryConfig, ResultEnvelope, paginate

logger = logging.getLogger(__name__)

FAVORITE_QUERY = QueryConfig(
    default_limit=20,
    max_limit=100,
    default_sort="-created_at",
    allowed_sort_fields={"created_at"},
    allowed_filter_fields={"user_id", "plant_id"},
    date_field="created_at",
    field_types={
        "user_id": FieldType.OBJECT_ID,
        "plant_id": FieldType.OBJECT_ID,
    },
)

USER_FAVORITES_LIMIT = 500


class FavoriteService:
    """Service for managing which users favorited which plants."""
    
    COLLECTION_NAME = "favorites"
    
    @staticmethod
    def get_collection():
        """Get the favorites collection."""
        return Database.get_collection(FavoriteService.COLLECTION_NAME)

    @staticmethod
    def _parse_pair(user_id: str, plant_id: str) -> Tuple[ObjectId, ObjectId]:
        user_oid = to_object_id(user_id)
        plant_oid = to_object_id(plant_id)
        if user_oid is None:
            raise BadRequestException("Invalid user ID")
        if plant_oid is None:
            raise BadRequestException("Invalid plant ID")
        return user_oid, plant_oid
    
    @classmethod
    async def list_favorites(cls, params: Mapping[str, str]) -> ResultEnvelope:
        """Paginated favorites, filterable by user_id / plant_id."""
        result = await paginate(cls.get_collection(), params, FAVORITE_QUERY)
        result.data = [serialize_document(doc) for doc in result.data]
        return result
    
    @classmethod
    async def is_favorited(cls, user_id: str, plant_id: str) -> bool:
        """Check if a user has favorited a plant."""
        user_oid, plant_oid = cls._parse_pair(user_id, plant_id)
        item = await cls.get_collection().find_one({"user_id": user_oid, "plant_id": plant_oid})
        return item is not None
    
    @classmethod
    async def add_favorite(cls, user_id: str, plant_id: str) -> dict:
        """
        Favorite a plant for a user.
        
        Both must exist; a pair can only be favorited once. Bumps the
        plant's favorite_count.
        """
        user_oid, plant_oid = cls._parse_pair(user_id, plant_id)
        collection = cls.get_collection()

        if not await Database.get_collection("users").find_one({"_id": user_oid}, {"_id": 1}):
            raise NotFoundException("User not found")
        if not await Database.get_collection("plants").find_one({"_id": plant_oid}, {"_id": 1}):
            raise NotFoundException("Plant not found")

        if await collection.find_one({"user_id": user_oid, "plant_id": plant_oid}):
            raise BadRequestException("Plant is already in favorites")

        favorite = {
            "user_id": user_oid,
            "plant_id": plant_oid,
            "created_at": datetime.utcnow(),
        }
        try:
            result = await collection.insert_one(favorite)
        except DuplicateKeyError:
            raise BadRequestException("Plant is already in favorites")

        await Database.get_collection("plants").update_one(
            {"_id": plant_oid},
            {"$inc": {"favorite_count": 1}},
        )

        favorite["_id"] = result.inserted_id
        return serialize_document(favorite)
    
    @classmethod
    async def remove_favorite(cls, user_id: str, plant_id: str) -> None:
        """Remove a favorite; NotFoundException when it does not exist."""
        user_oid, plant_oid = cls._parse_pair(user_id, plant_id)
        result = await cls.get_collection().delete_one({
            "user_id": user_oid,
            "plant_id": plant_oid,
        })
        if result.deleted_count == 0:
            raise NotFoundException("Favorite not found")

        await Database.get_collection("plants").update_one(
            {"_id": plant_oid, "favorite_count": {"$gt": 0}},
            {"$inc": {"favorite_count": -1}},
        )
    
    @classmethod
    async def get_user_favorite_plants(cls, user_id: str) -> List[dict]:
        """
        Plants a user has favorited, most recently added first.
        
        Favorites whose plant no longer exists are skipped.
        """
        user_oid = to_object_id(user_id)
        if user_oid is None:
            raise BadRequestException("Invalid user ID")

        cursor = cls.get_collection().find(
            {"user_id": user_oid},
            sort=[("created_at", -1), ("_id", -1)],
        )
        favorites = await cursor.to_list(length=USER_FAVORITES_LIMIT)
        plant_ids = [fav["plant_id"] for fav in favorites]
        if not plant_ids:
            return []

        plants_cursor = Database.get_collection("plants").find(
            {"_id": {"$in": plant_ids}},
            {"name": 1, "image": 1, "description": 1},
        )
        plants = {p["_id"]: p for p in await plants_cursor.to_list(length=len(plant_ids))}

        result = []
        for plant_id in plant_ids:
            plant = plants.get(plant_id)
            if not plant:
                continue
            item = serialize_document(plant)
            item["image_url"] = image_url(plant.get("image"))
            result.append(item)
        return result
