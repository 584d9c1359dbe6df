"""
Base repository with generic CRUD operations over a backend table.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlmodel import SQLModel

from staffhub.client import BackendClient, QueryBuilder
from staffhub.core.pagination import create_paginated_response

ModelType = TypeVar("ModelType", bound=SQLModel)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class BaseRepository(Generic[ModelType]):
    """
    Generic repository with CRUD operations.
    Inherit and specify the model class and table name.
    """

    select_columns = "*"
    timestamp_fields = ("created_at", "updated_at")

    def __init__(self, model: Type[ModelType], table: str, client: BackendClient):
        self.model = model
        self.table = table
        self.client = client

    def query(self) -> QueryBuilder:
        return self.client.table(self.table)

    def to_model(self, row: Dict[str, Any]) -> ModelType:
        """Reshape a raw row into the model. Override to flatten joins."""
        return self.model.model_validate(row)

    def to_models(self, rows: Optional[List[Dict[str, Any]]]) -> List[ModelType]:
        return [self.to_model(row) for row in rows or []]

    def _apply_filters(self, query: QueryBuilder, filters: Optional[dict]) -> QueryBuilder:
        if filters:
            for field, value in filters.items():
                if value is not None:
                    query = query.eq(field, value)
        return query

    async def create(self, obj_in: dict) -> ModelType:
        """Create a new record."""
        now = utcnow_iso()
        data = {field: now for field in self.timestamp_fields}
        data.update(obj_in)
        result = await self.query().insert(data).select(self.select_columns).single().execute()
        return self.to_model(result.data)

    async def get(self, id: uuid.UUID) -> Optional[ModelType]:
        """Get a record by ID."""
        return await self.get_by_field("id", id)

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """Get a record by a specific field."""
        result = await (
            self.query()
            .select(self.select_columns)
            .eq(field, value)
            .limit(1)
            .execute()
        )
        rows = result.data or []
        return self.to_model(rows[0]) if rows else None

    async def list(
        self,
        filters: Optional[dict] = None,
        order_by: str = "created_at",
        order_desc: bool = True,
        limit: Optional[int] = None
    ) -> List[ModelType]:
        """List all records with optional filters."""
        query = self._apply_filters(self.query().select(self.select_columns), filters)
        query = query.order(order_by, desc=order_desc)
        if limit:
            query = query.limit(limit)
        result = await query.execute()
        return self.to_models(result.data)

    async def list_paginated(
        self,
        filters: Optional[dict] = None,
        page: int = 1,
        limit: int = 20,
        order_by: str = "created_at",
        order_desc: bool = True,
        query: Optional[QueryBuilder] = None
    ) -> dict:
        """List records with pagination."""
        if query is None:
            query = self.query().select(self.select_columns, count="exact")
        query = self._apply_filters(query, filters)
        query = query.order(order_by, desc=order_desc)

        # Apply pagination
        offset = (page - 1) * limit
        result = await query.range(offset, offset + limit - 1).execute()

        items = self.to_models(result.data)
        total = result.count if result.count is not None else len(items)
        return create_paginated_response(items, total, page, limit)

    async def update(self, id: uuid.UUID, obj_in: dict) -> Optional[ModelType]:
        """
        Update a record. Returns None when no row matched.

        Every key in obj_in is written, so an explicit None clears the column.
        """
        values = dict(obj_in)
        # Update timestamp if the table has one
        if "updated_at" in self.timestamp_fields:
            values["updated_at"] = utcnow_iso()
        result = await (
            self.query()
            .update(values)
            .eq("id", id)
            .select(self.select_columns)
            .execute()
        )
        rows = result.data or []
        return self.to_model(rows[0]) if rows else None

    async def delete(self, id: uuid.UUID) -> bool:
        """Delete a record."""
        result = await self.query().delete().eq("id", id).execute()
        return bool(result.data)

    async def count(self, filters: Optional[dict] = None) -> int:
        """Count records."""
        query = self.query().select("id", count="exact", head=True)
        query = self._apply_filters(query, filters)
        result = await query.execute()
        return result.count or 0

    async def exists(self, id: uuid.UUID) -> bool:
        """Check if a record exists."""
        return await self.count({"id": id}) > 0
