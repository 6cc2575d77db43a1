"""
MongoDB database connection and utilities.
"""

import logging
from typing import Any, Optional

import certifi
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import get_settings

logger = logging.getLogger(__name__)


def get_client(uri: str) -> AsyncIOMotorClient:
    """Create Mongo client with TLS if needed."""
    client_kwargs = {}
    if "mongodb+srv://" in uri or "ssl=true" in uri.lower():
        client_kwargs["tlsCAFile"] = certifi.where()
    return AsyncIOMotorClient(uri, **client_kwargs)


class Database:
    """MongoDB database connection manager."""
    
    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None
    
    @classmethod
    async def connect(cls):
        """Connect to MongoDB."""
        settings = get_settings()
        cls.client = get_client(settings.MONGO_URI)
        cls.db = cls.client[settings.MONGO_DB_NAME]
        
        # Create indexes
        await cls.create_indexes()
        
        logger.info(f"Connected to MongoDB: {settings.MONGO_DB_NAME}")
    
    @classmethod
    async def disconnect(cls):
        """Disconnect from MongoDB."""
        if cls.client:
            cls.client.close()
            logger.info("Disconnected from MongoDB")
    
    @classmethod
    async def create_indexes(cls):
        """Create database indexes for better query performance."""
        # Users collection
        await cls.db["users"].create_index("email", unique=True)
        await cls.db["users"].create_index("created_at")
        
        # Categories collection
        await cls.db["categories"].create_index("name", unique=True)
        
        # Plants collection
        await cls.db["plants"].create_index("name", unique=True)
        await cls.db["plants"].create_index("category_ids")
        await cls.db["plants"].create_index("created_at")
        
        # Favorites collection
        await cls.db["favorites"].create_index(
            [("user_id", 1), ("plant_id", 1)],
            unique=True,
            name="user_plant_unique",
        )
    
    @classmethod
    def get_collection(cls, name: str):
        """Get a collection by name."""
        return cls.db[name]


def get_db() -> AsyncIOMotorDatabase:
    """Get the database instance."""
    return Database.db


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Convert a string to ObjectId; None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def serialize_document(doc: Optional[dict]) -> Optional[dict]:
    """
    Make a MongoDB document JSON-friendly.

    `_id` becomes `id`; ObjectId values (also inside lists and nested
    documents) become strings.
    """
    if doc is None:
        return None

    def _convert(value):
        if isinstance(value, ObjectId):
            return str(value)
        if isinstance(value, list):
            return [_convert(v) for v in value]
        if isinstance(value, dict):
            return serialize_document(value)
        return value

    result = {}
    for key, value in doc.items():
        if key == "_id":
            result["id"] = str(value)
        else:
            result[key] = _convert(value)
    return result
