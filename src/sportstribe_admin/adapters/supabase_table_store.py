"""Supabase-backed table store."""

from collections.abc import Mapping
from dataclasses import dataclass

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient

from sportstribe_admin.services.failures import StoreFailure
from sportstribe_admin.services.resources import Row, TableStore


@dataclass
class SupabaseTableStore(TableStore):
    """Supabase implementation of the generic table operations."""

    client: AsyncClient

    async def select_ordered(  # noqa: PLR0913
        self,
        table: str,
        order_column: str,
        descending: bool,
        filters: Mapping[str, object] | None = None,
        limit: int | None = None,
    ) -> list[Row]:
        """Return rows ordered by a column."""
        query = self.client.table(table).select("*")
        for column, value in (filters or {}).items():
            if isinstance(value, list):
                query = query.in_(column, value)
            else:
                query = query.eq(column, value)
        query = query.order(order_column, desc=descending)
        if limit is not None:
            query = query.limit(limit)
        response = await _execute(query)
        return response.data or []

    async def select_by_id(self, table: str, row_id: str) -> Row | None:
        """Return a row by id, if present."""
        response = await _execute(
            self.client.table(table).select("*").eq("id", row_id).limit(1)
        )
        if not response.data:
            return None
        return response.data[0]

    async def insert_one(self, table: str, row: Row) -> Row:
        """Insert a row and return it."""
        response = await _execute(self.client.table(table).insert(row))
        if not response.data:
            raise StoreFailure(f"Insert into {table} returned no rows")
        return response.data[0]

    async def update_by_id(self, table: str, row_id: str, changes: Row) -> Row | None:
        """Update a row and return it, if it exists."""
        response = await _execute(
            self.client.table(table).update(changes).eq("id", row_id)
        )
        if not response.data:
            return None
        return response.data[0]

    async def delete_by_id(self, table: str, row_id: str) -> None:
        """Delete a row by id."""
        await _execute(self.client.table(table).delete().eq("id", row_id))


async def _execute(query):  # type: ignore[no-untyped-def]
    """Run a query, translating client errors into store failures."""
    try:
        return await query.execute()
    except APIError as exc:
        raise StoreFailure(
            exc.message or "Supabase request failed",
            code=str(exc.code) if exc.code is not None else None,
            details=exc.details,
            hint=exc.hint,
        ) from exc
    except httpx.HTTPStatusError as exc:
        raise StoreFailure(str(exc), status=exc.response.status_code) from exc
