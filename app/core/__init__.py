"""Core module - config, database, exceptions, list query builder."""

from app.core.config import get_settings, Settings
from app.core.database import Database, get_db
from app.core.exceptions import (
    AppException,
    NotFoundException,
    BadRequestException,
    QueryValidationError,
)
from app.core.query_builder import QueryBuilder, QueryConfig, ResultEnvelope, paginate

__all__ = [
    "get_settings",
    "Settings",
    "Database",
    "get_db",
    "AppException",
    "NotFoundException",
    "BadRequestException",
    "QueryValidationError",
    "QueryBuilder",
    "QueryConfig",
    "ResultEnvelope",
    "paginate",
]
