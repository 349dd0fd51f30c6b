"""Shared test fixtures."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import uuid4

import pytest

from sportstribe_admin.config import Settings
from sportstribe_admin.containers import (
    AppContainer,
    build_gateways,
    build_session_store,
)
from sportstribe_admin.services.resources import Row, TableStore
from sportstribe_admin.services.sessions import AdminPolicy, SessionStore
from sportstribe_admin.services.storage import InMemoryStorage

START = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@dataclass
class FakeClock:
    """Manually advanced clock."""

    now: datetime = START

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class InMemoryTableStore(TableStore):
    """In-memory table store that assigns ids and timestamps like the backend."""

    tables: dict[str, dict[str, Row]] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple[str, str, object]] = field(default_factory=list)
    _tick: int = 0

    def fail(self, operation: str, error: Exception) -> None:
        self.failures[operation] = error

    def seed(self, table: str, row: Row) -> Row:
        stored = {"id": str(uuid4()), **self._timestamps(), **row}
        self.tables.setdefault(table, {})[str(stored["id"])] = stored
        return stored

    async def select_ordered(  # noqa: PLR0913
        self,
        table: str,
        order_column: str,
        descending: bool,
        filters: Mapping[str, object] | None = None,
        limit: int | None = None,
    ) -> list[Row]:
        self._record("select_ordered", table, dict(filters or {}))
        rows = [
            dict(row)
            for row in self.tables.get(table, {}).values()
            if _matches(row, filters or {})
        ]
        rows.sort(key=lambda row: str(row.get(order_column) or ""), reverse=descending)
        return rows[:limit] if limit is not None else rows

    async def select_by_id(self, table: str, row_id: str) -> Row | None:
        self._record("select_by_id", table, row_id)
        row = self.tables.get(table, {}).get(row_id)
        return dict(row) if row else None

    async def insert_one(self, table: str, row: Row) -> Row:
        self._record("insert_one", table, dict(row))
        return dict(self.seed(table, row))

    async def update_by_id(self, table: str, row_id: str, changes: Row) -> Row | None:
        self._record("update_by_id", table, dict(changes))
        current = self.tables.get(table, {}).get(row_id)
        if current is None:
            return None
        current.update(changes)
        current["updated_at"] = self._timestamps()["updated_at"]
        return dict(current)

    async def delete_by_id(self, table: str, row_id: str) -> None:
        self._record("delete_by_id", table, row_id)
        self.tables.get(table, {}).pop(row_id, None)

    def _record(self, operation: str, table: str, payload: object) -> None:
        self.calls.append((operation, table, payload))
        if operation in self.failures:
            raise self.failures[operation]

    def _timestamps(self) -> dict[str, str]:
        self._tick += 1
        stamp = (START + timedelta(minutes=self._tick)).isoformat()
        return {"created_at": stamp, "updated_at": stamp}


def _matches(row: Row, filters: Mapping[str, object]) -> bool:
    for column, expected in filters.items():
        if isinstance(expected, list):
            if row.get(column) not in expected:
                return False
        elif row.get(column) != expected:
            return False
    return True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def session_store(clock: FakeClock, storage: InMemoryStorage) -> SessionStore:
    return SessionStore(
        storage=storage,
        policy=AdminPolicy(
            admin_email="admin@sportstribe.com", admin_password="admin123"
        ),
        clock=clock,
    )


@pytest.fixture
def table_store() -> InMemoryTableStore:
    return InMemoryTableStore()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        session_storage_path=str(tmp_path / "session.json"),
    )


@pytest.fixture
def container(
    settings: Settings,
    clock: FakeClock,
    storage: InMemoryStorage,
    table_store: InMemoryTableStore,
) -> AppContainer:
    session_store = build_session_store(settings, storage)
    session_store.clock = clock

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        session_store=session_store,
        gateways=build_gateways(table_store),
        close_resources=close_resources,
    )
