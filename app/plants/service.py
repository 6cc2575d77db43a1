"""Plant service - catalog CRUD, category population and related plants."""

import logging
from datetime import datetime
from typing import List, Mapping

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.assets import image_url
from app.core.database import Database, serialize_document, to_object_id
from app.core.exceptions import BadRequestException, NotFoundException
from app.core.query_builder import FieldType, QueryConfig, ResultEnvelope, paginate
from app.categories.service import CategoryService
from app.plants.models import PlantCreate, PlantUpdate

logger = logging.getLogger(__name__)

PLANT_QUERY = QueryConfig(
    default_limit=5,
    max_limit=50,
    default_sort="created_at",
    allowed_sort_fields={"name", "status", "favorite_count", "created_at", "updated_at"},
    allowed_filter_fields={"name", "description", "status", "category_ids", "favorite_count"},
    search_fields=("name", "description"),
    date_field="created_at",
    field_types={
        "category_ids": FieldType.OBJECT_ID,
        "favorite_count": FieldType.INTEGER,
    },
)

RELATED_LIMIT = 10


class PlantService:
    """Handles plant catalog database operations."""

    @staticmethod
    def _get_plants_collection():
        return Database.get_collection("plants")

    @staticmethod
    def _validate_object_id(id_str: str, label: str = "plant") -> ObjectId:
        """Validate and convert string to ObjectId."""
        object_id = to_object_id(id_str)
        if object_id is None:
            raise BadRequestException(f"Invalid {label} ID")
        return object_id

    @classmethod
    def _parse_ids(cls, ids: List[str], label: str) -> List[ObjectId]:
        parsed = []
        for value in ids:
            object_id = cls._validate_object_id(value, label)
            if object_id not in parsed:
                parsed.append(object_id)
        return parsed

    # ==================== Queries ====================

    @classmethod
    async def list_plants(cls, params: Mapping[str, str]) -> ResultEnvelope:
        """Paginated plant list with categories populated."""
        result = await paginate(cls._get_plants_collection(), params, PLANT_QUERY)
        result.data = await cls._present_many(result.data)
        return result

    @classmethod
    async def get_plant(cls, plant_id: str) -> dict:
        object_id = cls._validate_object_id(plant_id)
        plant = await cls._get_plants_collection().find_one({"_id": object_id})
        if not plant:
            raise NotFoundException("Plant not found")
        return (await cls._present_many([plant]))[0]

    @classmethod
    async def get_related(cls, plant_id: str) -> List[dict]:
        """Other plants sharing at least one category, excluding the plant itself."""
        object_id = cls._validate_object_id(plant_id)
        collection = cls._get_plants_collection()

        plant = await collection.find_one({"_id": object_id}, {"category_ids": 1})
        if not plant:
            raise NotFoundException("Plant not found")

        category_ids = plant.get("category_ids") or []
        if not category_ids:
            return []

        cursor = collection.find(
            {"_id": {"$ne": object_id}, "category_ids": {"$in": category_ids}},
            sort=[("_id", 1)],
            limit=RELATED_LIMIT,
        )
        related = await cursor.to_list(length=RELATED_LIMIT)
        return await cls._present_many(related)

    # ==================== Mutations ====================

    @classmethod
    async def create_plant(cls, data: PlantCreate) -> dict:
        collection = cls._get_plants_collection()
        category_ids = cls._parse_ids(data.category_ids, "category")
        await CategoryService.ensure_exist(category_ids)

        if await collection.find_one({"name": data.name}):
            raise BadRequestException("A plant with this name already exists")

        now = datetime.utcnow()
        plant_doc = {
            "name": data.name,
            "description": data.description,
            "image": data.image,
            "status": "active",
            "category_ids": category_ids,
            "favorite_count": 0,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = await collection.insert_one(plant_doc)
        except DuplicateKeyError:
            raise BadRequestException("A plant with this name already exists")

        plant_doc["_id"] = result.inserted_id
        logger.info(f"Created plant {data.name!r} ({result.inserted_id})")
        return (await cls._present_many([plant_doc]))[0]

    @classmethod
    async def update_plant(cls, plant_id: str, data: PlantUpdate) -> dict:
        object_id = cls._validate_object_id(plant_id)
        collection = cls._get_plants_collection()

        updates = data.model_dump(exclude_none=True)
        if "category_ids" in updates:
            updates["category_ids"] = cls._parse_ids(updates["category_ids"], "category")
            if not updates["category_ids"]:
                raise BadRequestException("At least one category is required")
            await CategoryService.ensure_exist(updates["category_ids"])
        if "name" in updates:
            clash = await collection.find_one({"name": updates["name"], "_id": {"$ne": object_id}})
            if clash:
                raise BadRequestException("A plant with this name already exists")
        updates["updated_at"] = datetime.utcnow()

        try:
            plant = await collection.find_one_and_update(
                {"_id": object_id},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise BadRequestException("A plant with this name already exists")

        if not plant:
            raise NotFoundException("Plant not found")
        return (await cls._present_many([plant]))[0]

    @classmethod
    async def delete_plant(cls, plant_id: str) -> dict:
        """Delete a plant and every favorite pointing at it."""
        object_id = cls._validate_object_id(plant_id)

        plant = await cls._get_plants_collection().find_one_and_delete({"_id": object_id})
        if not plant:
            raise NotFoundException("Plant not found")

        await Database.get_collection("favorites").delete_many({"plant_id": object_id})
        logger.info(f"Deleted plant {plant_id}")

        return {
            "id": str(plant["_id"]),
            "name": plant.get("name", ""),
            "deleted_image": plant.get("image"),
        }

    @classmethod
    async def assign_categories(cls, plant_ids: List[str], category_ids: List[str]) -> dict:
        """Add each category to each plant, skipping ones already assigned."""
        plant_oids = cls._parse_ids(plant_ids, "plant")
        category_oids = cls._parse_ids(category_ids, "category")
        await CategoryService.ensure_exist(category_oids)

        result = await cls._get_plants_collection().update_many(
            {"_id": {"$in": plant_oids}},
            {
                "$addToSet": {"category_ids": {"$each": category_oids}},
                "$set": {"updated_at": datetime.utcnow()},
            },
        )
        return {
            "matched_count": result.matched_count,
            "modified_count": result.modified_count,
        }

    # ==================== Helpers ====================

    @staticmethod
    async def _present_many(docs: List[dict]) -> List[dict]:
        """Serialize plant documents, populating categories and the image URL."""
        wanted = [cid for doc in docs for cid in (doc.get("category_ids") or [])]
        summaries = await CategoryService.get_summaries(wanted)

        presented = []
        for doc in docs:
            item = serialize_document(doc)
            item["categories"] = [
                summaries[cid] for cid in (doc.get("category_ids") or []) if cid in summaries
            ]
            item["image_url"] = image_url(doc.get("image"))
            presented.append(item)
        return presented
