"""Category service - category CRUD and lookups used for population."""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Mapping

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.database import Database, serialize_document, to_object_id
from app.core.exceptions import BadRequestException, NotFoundException
from app.core.query_builder import QueryConfig, ResultEnvelope, paginate
from app.categories.models import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)

CATEGORY_QUERY = QueryConfig(
    default_limit=10,
    max_limit=100,
    default_sort="name",
    allowed_sort_fields={"name", "status", "created_at", "updated_at"},
    allowed_filter_fields={"name", "status"},
    search_fields=("name", "description"),
    date_field="created_at",
)


class CategoryService:
    """Handles category database operations."""

    @staticmethod
    def _get_collection():
        return Database.get_collection("categories")

    @staticmethod
    def _validate_object_id(id_str: str) -> ObjectId:
        object_id = to_object_id(id_str)
        if object_id is None:
            raise BadRequestException("Invalid category ID")
        return object_id

    @classmethod
    async def list_categories(cls, params: Mapping[str, str]) -> ResultEnvelope:
        result = await paginate(cls._get_collection(), params, CATEGORY_QUERY)
        result.data = [serialize_document(doc) for doc in result.data]
        return result

    @classmethod
    async def get_category(cls, category_id: str) -> dict:
        object_id = cls._validate_object_id(category_id)
        category = await cls._get_collection().find_one({"_id": object_id})
        if not category:
            raise NotFoundException("Category not found")
        return serialize_document(category)

    @classmethod
    async def get_summaries(cls, category_ids: Iterable[ObjectId]) -> Dict[ObjectId, dict]:
        """
        Fetch name/description for a set of category ids in one query.

        Returns a mapping keyed by ObjectId; unknown ids are simply absent.
        """
        ids = list({cid for cid in category_ids if isinstance(cid, ObjectId)})
        if not ids:
            return {}

        cursor = cls._get_collection().find(
            {"_id": {"$in": ids}},
            {"name": 1, "description": 1},
        )
        docs = await cursor.to_list(length=len(ids))
        return {
            doc["_id"]: {
                "id": str(doc["_id"]),
                "name": doc.get("name", ""),
                "description": doc.get("description"),
            }
            for doc in docs
        }

    @classmethod
    async def ensure_exist(cls, category_ids: List[ObjectId]) -> None:
        """Reject references to categories that do not exist."""
        found = await cls._get_collection().count_documents({"_id": {"$in": category_ids}})
        if found != len(set(category_ids)):
            raise BadRequestException("One or more categories do not exist")

    @classmethod
    async def create_category(cls, data: CategoryCreate) -> dict:
        collection = cls._get_collection()
        if await collection.find_one({"name": data.name}):
            raise BadRequestException("Category name already exists")

        now = datetime.utcnow()
        category_doc = {
            "name": data.name,
            "description": data.description,
            "status": data.status,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = await collection.insert_one(category_doc)
        except DuplicateKeyError:
            raise BadRequestException("Category name already exists")

        category_doc["_id"] = result.inserted_id
        logger.info(f"Created category {data.name!r}")
        return serialize_document(category_doc)

    @classmethod
    async def update_category(cls, category_id: str, data: CategoryUpdate) -> dict:
        object_id = cls._validate_object_id(category_id)
        updates = data.model_dump(exclude_none=True)
        updates["updated_at"] = datetime.utcnow()

        try:
            category = await cls._get_collection().find_one_and_update(
                {"_id": object_id},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise BadRequestException("Category name already exists")

        if not category:
            raise NotFoundException("Category not found")
        return serialize_document(category)

    @classmethod
    async def delete_category(cls, category_id: str) -> None:
        """Delete a category and detach it from every plant."""
        object_id = cls._validate_object_id(category_id)
        plants = Database.get_collection("plants")

        # Every plant keeps at least one category
        orphaned = await plants.count_documents({"category_ids": [object_id]})
        if orphaned:
            raise BadRequestException(
                f"Category is the only category of {orphaned} plant(s); reassign them first"
            )

        result = await cls._get_collection().delete_one({"_id": object_id})
        if result.deleted_count == 0:
            raise NotFoundException("Category not found")

        detached = await plants.update_many(
            {"category_ids": object_id},
            {"$pull": {"category_ids": object_id}},
        )
        logger.info(f"Deleted category {category_id}, detached from {detached.modified_count} plants")
