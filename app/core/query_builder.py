"""
List query builder shared by every collection endpoint.

Turns raw query-string parameters into a MongoDB filter, sort and
pagination window, runs the count and the page fetch against a Motor
collection and returns a paginated envelope.

Supported parameters:

- ``page``, ``limit``: pagination; malformed values fall back to defaults.
- ``sort``: one allow-listed field, ``-`` prefix for descending.
- ``search``: case-insensitive substring match across ``search_fields``.
- ``startDate`` / ``endDate``: inclusive range on ``date_field``.
- ``<field>=value`` and ``<field>_gt|_gte|_lt|_lte=value`` for allow-listed
  filter fields. Unknown keys are ignored.
"""

from __future__ import annotations

import asyncio
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from bson import ObjectId
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pymongo import ASCENDING, DESCENDING

from app.core.exceptions import QueryValidationError

logger = logging.getLogger(__name__)

RESERVED_PARAMS = frozenset({"page", "limit", "sort", "search", "startDate", "endDate"})

# skip is sent to MongoDB as a signed 64-bit integer
MAX_SKIP = 2 ** 63 - 1


class FieldType(str, Enum):
    """How a filter value from the query string is coerced before matching."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    OBJECT_ID = "object_id"


class FilterOperator(str, Enum):
    """Filter kinds a query-string key can express."""

    EQ = "eq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"


# Longest suffix first so "_gte" wins over "_gt"
_OPERATOR_SUFFIXES: Tuple[Tuple[str, FilterOperator], ...] = (
    ("_gte", FilterOperator.GTE),
    ("_lte", FilterOperator.LTE),
    ("_gt", FilterOperator.GT),
    ("_lt", FilterOperator.LT),
)

_MONGO_OPERATORS = {
    FilterOperator.GT: "$gt",
    FilterOperator.GTE: "$gte",
    FilterOperator.LT: "$lt",
    FilterOperator.LTE: "$lte",
}

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


@dataclass(frozen=True)
class QueryConfig:
    """Per-endpoint allow-lists and defaults for list queries."""

    default_limit: int = 10
    max_limit: int = 100
    default_sort: str = "-created_at"
    allowed_sort_fields: FrozenSet[str] = frozenset()
    allowed_filter_fields: FrozenSet[str] = frozenset()
    search_fields: Tuple[str, ...] = ()
    date_field: Optional[str] = "created_at"
    field_types: Mapping[str, FieldType] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "allowed_sort_fields", frozenset(self.allowed_sort_fields))
        object.__setattr__(self, "allowed_filter_fields", frozenset(self.allowed_filter_fields))
        object.__setattr__(self, "search_fields", tuple(self.search_fields))
        object.__setattr__(self, "field_types", MappingProxyType(dict(self.field_types)))
        if self.default_limit < 1 or self.max_limit < 1:
            raise ValueError("default_limit and max_limit must be positive")

    def field_type(self, name: str) -> FieldType:
        return self.field_types.get(name, FieldType.STRING)


@dataclass(frozen=True)
class ResolvedQuery:
    """Filter, sort and window computed for a single request."""

    filter: Dict[str, Any]
    sort: List[Tuple[str, int]]
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    """Pagination metadata, serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total_items: int) -> "Pagination":
        total_pages = math.ceil(total_items / limit) if total_items else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total_items,
            items_per_page=limit,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class ResultEnvelope(BaseModel):
    """One page of raw documents plus pagination metadata."""

    data: List[Any]
    pagination: Pagination


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def is_date_only(value: str) -> bool:
    """True for a calendar date with no time part ("2024-05-01", "20240501")."""
    try:
        date.fromisoformat((value or "").strip())
    except ValueError:
        return False
    return True


def parse_datetime(value: str, name: str, end_of_day: bool = False) -> datetime:
    """
    Parse an ISO-8601 timestamp into a naive UTC datetime.

    With `end_of_day`, a date-only value ("2024-05-01") is moved to the
    start of the following day so callers can use an exclusive bound.
    """
    raw = (value or "").strip()
    text = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise QueryValidationError(f"Invalid date for '{name}': {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    if end_of_day and is_date_only(raw):
        parsed = parsed + timedelta(days=1)
    return parsed


def coerce_value(name: str, value: str, field_type: FieldType) -> Any:
    """Convert a query-string value to the stored type of `name`."""
    if field_type is FieldType.STRING:
        return value
    if field_type is FieldType.INTEGER:
        try:
            return int(value)
        except ValueError:
            raise QueryValidationError(f"Invalid value for '{name}': expected an integer")
    if field_type is FieldType.NUMBER:
        try:
            return float(value)
        except ValueError:
            raise QueryValidationError(f"Invalid value for '{name}': expected a number")
    if field_type is FieldType.BOOLEAN:
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise QueryValidationError(f"Invalid value for '{name}': expected a boolean")
    if field_type is FieldType.DATETIME:
        return parse_datetime(value, name)
    if field_type is FieldType.OBJECT_ID:
        if not ObjectId.is_valid(value):
            raise QueryValidationError(f"Invalid value for '{name}': expected an id")
        return ObjectId(value)
    raise QueryValidationError(f"Unsupported filter type for '{name}'")


class QueryBuilder:
    """Builds and runs paginated, sorted, filtered list queries."""

    def resolve(self, params: Mapping[str, str], config: QueryConfig) -> ResolvedQuery:
        """Validate the parameters and compute the query without touching the database."""
        sort = self._resolve_sort(params.get("sort"), config)
        page, limit = self._resolve_window(params, config)

        clauses: List[Dict[str, Any]] = []
        clauses.extend(self._field_clauses(params, config))

        search = self._search_clause(params.get("search"), config)
        if search:
            clauses.append(search)

        date_range = self._date_clause(params, config)
        if date_range:
            clauses.append(date_range)

        if not clauses:
            query: Dict[str, Any] = {}
        elif len(clauses) == 1:
            query = clauses[0]
        else:
            query = {"$and": clauses}

        return ResolvedQuery(filter=query, sort=sort, page=page, limit=limit)

    async def execute(
        self,
        collection,
        params: Mapping[str, str],
        config: QueryConfig,
    ) -> ResultEnvelope:
        """Run the list query against `collection` and return one page."""
        resolved = self.resolve(params, config)
        logger.debug(
            f"List query on {getattr(collection, 'name', collection)}: "
            f"filter={resolved.filter} sort={resolved.sort} "
            f"skip={resolved.skip} limit={resolved.limit}"
        )

        cursor = collection.find(
            resolved.filter,
            sort=resolved.sort,
            skip=resolved.skip,
            limit=resolved.limit,
        )
        total_items, records = await asyncio.gather(
            collection.count_documents(resolved.filter),
            cursor.to_list(length=resolved.limit),
        )

        return ResultEnvelope(
            data=records,
            pagination=Pagination.build(resolved.page, resolved.limit, total_items),
        )

    # ==================== Resolution steps ====================

    @staticmethod
    def _resolve_window(params: Mapping[str, str], config: QueryConfig) -> Tuple[int, int]:
        page = max(1, _parse_int(params.get("page")) or 1)
        limit = _parse_int(params.get("limit")) or config.default_limit
        limit = min(max(limit, 1), config.max_limit)
        page = min(page, MAX_SKIP // limit + 1)
        return page, limit

    @staticmethod
    def _resolve_sort(raw_sort: Optional[str], config: QueryConfig) -> List[Tuple[str, int]]:
        spec = (raw_sort or "").strip() or config.default_sort
        direction = ASCENDING
        name = spec
        if spec.startswith("-"):
            direction = DESCENDING
            name = spec[1:]

        if name not in config.allowed_sort_fields:
            raise QueryValidationError(f"Field '{name}' is not sortable")

        sort = [(name, direction)]
        if name != "_id":
            # _id breaks ties so pages do not overlap on equal values
            sort.append(("_id", direction))
        return sort

    @staticmethod
    def _match_filter_key(key: str, config: QueryConfig) -> Optional[Tuple[str, FilterOperator]]:
        if key in config.allowed_filter_fields:
            return key, FilterOperator.EQ
        for suffix, operator in _OPERATOR_SUFFIXES:
            if key.endswith(suffix):
                name = key[: -len(suffix)]
                if name in config.allowed_filter_fields:
                    return name, operator
                return None
        return None

    def _field_clauses(self, params: Mapping[str, str], config: QueryConfig) -> List[Dict[str, Any]]:
        conditions: Dict[str, Dict[FilterOperator, Any]] = {}
        for key in sorted(params):
            if key in RESERVED_PARAMS:
                continue
            matched = self._match_filter_key(key, config)
            if matched is None:
                continue
            value = (params[key] or "").strip()
            if not value:
                continue
            name, operator = matched
            conditions.setdefault(name, {})[operator] = coerce_value(
                name, value, config.field_type(name)
            )

        clauses = []
        for name, ops in conditions.items():
            if FilterOperator.EQ in ops:
                clauses.append({name: ops.pop(FilterOperator.EQ)})
            if ops:
                clauses.append({name: {_MONGO_OPERATORS[op]: v for op, v in ops.items()}})
        return clauses

    @staticmethod
    def _search_clause(raw_search: Optional[str], config: QueryConfig) -> Optional[Dict[str, Any]]:
        term = (raw_search or "").strip()
        if not term or not config.search_fields:
            return None
        pattern = re.escape(term)
        return {
            "$or": [
                {name: {"$regex": pattern, "$options": "i"}}
                for name in config.search_fields
            ]
        }

    @staticmethod
    def _date_clause(params: Mapping[str, str], config: QueryConfig) -> Optional[Dict[str, Any]]:
        start_raw = (params.get("startDate") or "").strip()
        end_raw = (params.get("endDate") or "").strip()
        if not config.date_field or not (start_raw or end_raw):
            return None

        bounds: Dict[str, datetime] = {}
        if start_raw:
            bounds["$gte"] = parse_datetime(start_raw, "startDate")
        if end_raw:
            # A date-only end covers that whole day
            date_only = is_date_only(end_raw)
            end = parse_datetime(end_raw, "endDate", end_of_day=date_only)
            bounds["$lt" if date_only else "$lte"] = end
            if start_raw:
                start = bounds["$gte"]
                if (start >= end) if date_only else (start > end):
                    raise QueryValidationError("startDate must not be after endDate")

        return {config.date_field: bounds}


def paginate(
    collection,
    params: Mapping[str, str],
    config: QueryConfig,
):
    """Shortcut for ``QueryBuilder().execute(...)``; returns an awaitable."""
    return QueryBuilder().execute(collection, params, config)


__all__ = [
    "FieldType",
    "FilterOperator",
    "QueryConfig",
    "ResolvedQuery",
    "Pagination",
    "ResultEnvelope",
    "QueryBuilder",
    "coerce_value",
    "is_date_only",
    "parse_datetime",
    "paginate",
]
