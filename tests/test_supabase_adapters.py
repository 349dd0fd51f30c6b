"""Tests for the Supabase table store."""

import asyncio
from dataclasses import dataclass, field

import httpx
import pytest
from postgrest.exceptions import APIError

from sportstribe_admin.adapters.supabase_table_store import SupabaseTableStore
from sportstribe_admin.domain.errors import ResourceMissingError
from sportstribe_admin.services.failures import StoreFailure
from sportstribe_admin.services.registry import NEWS, TOURNAMENTS
from sportstribe_admin.services.resources import ResourceGateway


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    last_limit: int | None = None
    error: Exception | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, count: int) -> "FakeTable":
        self.last_limit = count
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    async def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_select_ordered_applies_filters_order_and_limit() -> None:
    client = FakeSupabaseClient()
    table = client.table("tournaments")
    table.queue("select", [{"id": "t1"}])

    store = SupabaseTableStore(client)  # type: ignore[arg-type]
    rows = asyncio.run(
        store.select_ordered(
            "tournaments",
            "date",
            False,
            filters={"status": ["active", "upcoming"], "location": "Pune"},
            limit=3,
        )
    )

    assert rows == [{"id": "t1"}]
    assert table.last_filters == [
        ("status", ["active", "upcoming"]),
        ("location", "Pune"),
    ]
    assert table.last_order == ("date", False)
    assert table.last_limit == 3


def test_select_by_id_returns_none_when_empty() -> None:
    client = FakeSupabaseClient()
    store = SupabaseTableStore(client)  # type: ignore[arg-type]

    assert asyncio.run(store.select_by_id("news", "missing")) is None
    assert client.table("news").last_filters == [("id", "missing")]


def test_insert_and_update_return_stored_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("sports")
    table.queue("insert", [{"id": "s1", "name": "Cricket"}])
    table.queue("update", [{"id": "s1", "name": "Football"}])

    store = SupabaseTableStore(client)  # type: ignore[arg-type]
    created = asyncio.run(store.insert_one("sports", {"name": "Cricket"}))
    updated = asyncio.run(store.update_by_id("sports", "s1", {"name": "Football"}))

    assert created["id"] == "s1"
    assert updated == {"id": "s1", "name": "Football"}
    assert table.last_payload == {"name": "Football"}


def test_update_without_match_returns_none() -> None:
    client = FakeSupabaseClient()
    store = SupabaseTableStore(client)  # type: ignore[arg-type]

    assert asyncio.run(store.update_by_id("sports", "nope", {"name": "x"})) is None


def test_insert_without_returned_row_fails() -> None:
    store = SupabaseTableStore(FakeSupabaseClient())  # type: ignore[arg-type]

    with pytest.raises(StoreFailure):
        asyncio.run(store.insert_one("sports", {"name": "Cricket"}))


def test_delete_filters_by_id() -> None:
    client = FakeSupabaseClient()
    store = SupabaseTableStore(client)  # type: ignore[arg-type]

    asyncio.run(store.delete_by_id("products", "p1"))

    assert client.table("products").last_filters == [("id", "p1")]


def test_api_error_becomes_store_failure() -> None:
    client = FakeSupabaseClient()
    client.table("news").error = APIError(
        {
            "message": 'relation "public.news" does not exist',
            "code": "42P01",
            "hint": None,
            "details": None,
        }
    )
    store = SupabaseTableStore(client)  # type: ignore[arg-type]

    with pytest.raises(StoreFailure) as exc_info:
        asyncio.run(store.select_ordered("news", "date", True))

    assert exc_info.value.code == "42P01"
    assert exc_info.value.message == 'relation "public.news" does not exist'


def test_http_status_error_keeps_status() -> None:
    request = httpx.Request("GET", "https://example.supabase.co/rest/v1/news")
    response = httpx.Response(403, request=request)
    client = FakeSupabaseClient()
    client.table("news").error = httpx.HTTPStatusError(
        "Forbidden", request=request, response=response
    )
    store = SupabaseTableStore(client)  # type: ignore[arg-type]

    with pytest.raises(StoreFailure) as exc_info:
        asyncio.run(store.select_by_id("news", "n1"))

    assert exc_info.value.status == 403


def test_gateway_over_supabase_classifies_missing_table() -> None:
    client = FakeSupabaseClient()
    client.table("tournaments").error = APIError(
        {"message": "missing", "code": "42P01", "hint": None, "details": None}
    )
    gateway = ResourceGateway(
        store=SupabaseTableStore(client),  # type: ignore[arg-type]
        descriptor=TOURNAMENTS,
    )

    with pytest.raises(ResourceMissingError) as exc_info:
        asyncio.run(gateway.list(where={"status": ["active", "upcoming"]}, limit=4))

    assert exc_info.value.message == "Tournaments table does not exist."


def test_gateway_over_supabase_maps_rows() -> None:
    client = FakeSupabaseClient()
    client.table("news").queue(
        "select",
        [
            {
                "id": "n1",
                "title": "Finals",
                "description": "Recap",
                "date": "2024-05-01",
                "image": "https://cdn.example.com/n1.png",
                "created_at": "2024-05-01T09:00:00+00:00",
            }
        ],
    )
    gateway = ResourceGateway(
        store=SupabaseTableStore(client),  # type: ignore[arg-type]
        descriptor=NEWS,
    )

    articles = asyncio.run(gateway.list())

    assert articles[0].image_url == "https://cdn.example.com/n1.png"
    assert client.table("news").last_order == ("date", True)
