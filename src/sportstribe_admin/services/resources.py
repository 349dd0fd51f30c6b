"""Generic create/read/update/delete gateway for admin-managed entities."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Collection, Mapping
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from sportstribe_admin.domain.errors import (
    ResourceValidationError,
    UnknownResourceError,
)
from sportstribe_admin.services.failures import classify_failure
from sportstribe_admin.services.registry import EntityDescriptor, EntityT, FieldError

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")

Row = dict[str, object]


class TableStore(Protocol):
    """Backing-store operations addressed by table name.

    Implementations raise ``StoreFailure`` (or any exception) on failure.
    """

    async def select_ordered(  # noqa: PLR0913
        self,
        table: str,
        order_column: str,
        descending: bool,
        filters: Mapping[str, object] | None = None,
        limit: int | None = None,
    ) -> list[Row]:
        """Return rows ordered by a column, optionally filtered and limited."""

    async def select_by_id(self, table: str, row_id: str) -> Row | None:
        """Return a single row by id, if present."""

    async def insert_one(self, table: str, row: Row) -> Row:
        """Insert a row and return it as stored."""

    async def update_by_id(self, table: str, row_id: str, changes: Row) -> Row | None:
        """Update a row and return it, or None when no row matched."""

    async def delete_by_id(self, table: str, row_id: str) -> None:
        """Delete a row by id."""


@dataclass
class ResourceGateway(Generic[EntityT]):
    """CRUD facade for one entity kind.

    Every read goes to the store; nothing is cached. Failures reach callers
    only as ``ResourceError`` subclasses.
    """

    store: TableStore
    descriptor: EntityDescriptor[EntityT]

    async def list(
        self,
        order_field: str | None = None,
        descending: bool | None = None,
        *,
        where: Mapping[str, object] | None = None,
        limit: int | None = None,
    ) -> list[EntityT]:
        """Return entities in the configured (or requested) order."""
        try:
            column = self.descriptor.column(order_field or self.descriptor.order_by)
            filters = self._filters(where or {})
        except FieldError as exc:
            raise self._invalid(exc) from None
        if limit is not None and limit <= 0:
            limit = None

        rows = await self._call(
            "list",
            self.store.select_ordered,
            self.descriptor.table,
            column,
            self.descriptor.descending if descending is None else descending,
            filters or None,
            limit,
        )
        return [self._to_domain(row, "list") for row in rows]

    async def get_by_id(self, entity_id: str) -> EntityT | None:
        """Return an entity by id, or None when it does not exist."""
        row = await self._call(
            "load", self.store.select_by_id, self.descriptor.table, str(entity_id)
        )
        if row is None:
            return None
        return self._to_domain(row, "load")

    async def create(self, fields: Mapping[str, object]) -> EntityT:
        """Insert a new entity from its mapped domain fields."""
        try:
            payload = self.descriptor.to_wire(fields, partial=False)
        except FieldError as exc:
            raise self._invalid(exc) from None

        row = await self._call(
            "create", self.store.insert_one, self.descriptor.table, payload
        )
        entity = self._to_domain(row, "create")
        logger.info("Created %s %s", self.descriptor.label, row.get("id"))
        return entity

    async def update(self, entity_id: str, changes: Mapping[str, object]) -> EntityT:
        """Apply a partial update and return the full entity."""
        try:
            payload = self.descriptor.to_wire(changes, partial=True)
        except FieldError as exc:
            raise self._invalid(exc) from None

        if not payload:
            current = await self.get_by_id(entity_id)
            if current is None:
                raise self._missing(entity_id)
            return current

        row = await self._call(
            "update",
            self.store.update_by_id,
            self.descriptor.table,
            str(entity_id),
            payload,
        )
        if row is None:
            raise self._missing(entity_id)
        logger.info("Updated %s %s", self.descriptor.label, entity_id)
        return self._to_domain(row, "update")

    async def delete(self, entity_id: str) -> None:
        """Remove an entity; deleting a missing id is not an error."""
        await self._call(
            "delete", self.store.delete_by_id, self.descriptor.table, str(entity_id)
        )
        logger.info("Deleted %s %s", self.descriptor.label, entity_id)

    async def _call(
        self,
        action: str,
        operation: Callable[..., Awaitable[ResultT]],
        *args: object,
    ) -> ResultT:
        try:
            return await operation(*args)
        except Exception as exc:  # noqa: BLE001
            error = classify_failure(exc, self.descriptor, action)
        logger.warning(
            "Failed to %s %s (%s): %s",
            action,
            self.descriptor.name,
            error.kind,
            error.diagnostic,
        )
        raise error

    def _filters(self, where: Mapping[str, object]) -> dict[str, object]:
        filters: dict[str, object] = {}
        for name, value in where.items():
            column = self.descriptor.column(name)
            mapping = self.descriptor.field(name)
            if isinstance(value, Collection) and not isinstance(value, str | bytes):
                values = list(value)
                filters[column] = (
                    [mapping.to_wire(item) for item in values] if mapping else values
                )
            else:
                filters[column] = mapping.to_wire(value) if mapping else value
        return filters

    def _to_domain(self, row: Row, action: str) -> EntityT:
        try:
            return self.descriptor.to_domain(row)
        except (KeyError, TypeError, ValueError) as exc:
            error = UnknownResourceError(
                f"Failed to {action} {self.descriptor.title.lower()}.",
                entity=self.descriptor.name,
                diagnostic=f"Malformed {self.descriptor.label} row: {exc!r}",
            )
        logger.warning("Discarding malformed %s row: %s", self.descriptor.label, row)
        raise error

    def _invalid(self, exc: FieldError) -> ResourceValidationError:
        return ResourceValidationError(
            f"Invalid {self.descriptor.label}: {exc.field_name} {exc.reason}.",
            entity=self.descriptor.name,
            diagnostic=str(exc),
        )

    def _missing(self, entity_id: str) -> ResourceValidationError:
        return ResourceValidationError(
            f"The {self.descriptor.label} {entity_id} does not exist.",
            entity=self.descriptor.name,
        )
