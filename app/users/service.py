"""User service - user CRUD operations."""

import logging
from datetime import datetime
from typing import Mapping

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.database import Database, serialize_document, to_object_id
from app.core.exceptions import BadRequestException, NotFoundException
from app.core.query_builder import QueryConfig, ResultEnvelope, paginate
from app.users.models import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

USER_QUERY = QueryConfig(
    default_limit=10,
    max_limit=100,
    default_sort="-created_at",
    allowed_sort_fields={"first_name", "last_name", "created_at"},
    allowed_filter_fields={"status"},
    search_fields=("first_name", "last_name", "email"),
    date_field="created_at",
)


class UserService:
    """Handles user database operations."""

    @staticmethod
    def _get_collection():
        return Database.get_collection("users")

    @staticmethod
    def _validate_object_id(id_str: str) -> ObjectId:
        """Validate and convert string to ObjectId."""
        object_id = to_object_id(id_str)
        if object_id is None:
            raise BadRequestException("Invalid user ID")
        return object_id

    @classmethod
    async def list_users(cls, params: Mapping[str, str]) -> ResultEnvelope:
        """Paginated, searchable user list."""
        result = await paginate(cls._get_collection(), params, USER_QUERY)
        result.data = [serialize_document(doc) for doc in result.data]
        return result

    @classmethod
    async def get_user(cls, user_id: str) -> dict:
        object_id = cls._validate_object_id(user_id)
        user = await cls._get_collection().find_one({"_id": object_id})
        if not user:
            raise NotFoundException("User not found")
        return serialize_document(user)

    @classmethod
    async def create_user(cls, data: UserCreate) -> dict:
        """Create a user; emails are unique."""
        collection = cls._get_collection()
        email = data.email.lower()

        if await collection.find_one({"email": email}):
            raise BadRequestException("Email already registered")

        now = datetime.utcnow()
        user_doc = {
            "first_name": data.first_name,
            "last_name": data.last_name,
            "email": email,
            "status": data.status,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = await collection.insert_one(user_doc)
        except DuplicateKeyError:
            raise BadRequestException("Email already registered")

        user_doc["_id"] = result.inserted_id
        logger.info(f"Created user {result.inserted_id}")
        return serialize_document(user_doc)

    @classmethod
    async def update_user(cls, user_id: str, data: UserUpdate) -> dict:
        object_id = cls._validate_object_id(user_id)
        collection = cls._get_collection()

        updates = data.model_dump(exclude_none=True)
        if "email" in updates:
            updates["email"] = updates["email"].lower()
            clash = await collection.find_one({"email": updates["email"], "_id": {"$ne": object_id}})
            if clash:
                raise BadRequestException("Email already registered")
        updates["updated_at"] = datetime.utcnow()

        try:
            user = await collection.find_one_and_update(
                {"_id": object_id},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise BadRequestException("Email already registered")

        if not user:
            raise NotFoundException("User not found")
        return serialize_document(user)

    @classmethod
    async def delete_user(cls, user_id: str) -> None:
        """Delete a user together with their favorites."""
        object_id = cls._validate_object_id(user_id)

        result = await cls._get_collection().delete_one({"_id": object_id})
        if result.deleted_count == 0:
            raise NotFoundException("User not found")

        await Database.get_collection("favorites").delete_many({"user_id": object_id})
        logger.info(f"Deleted user {user_id}")
