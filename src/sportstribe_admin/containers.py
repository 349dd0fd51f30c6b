"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any

from supabase import AsyncClient

from sportstribe_admin.adapters.json_file_storage import JsonFileStorage
from sportstribe_admin.adapters.supabase_table_store import SupabaseTableStore
from sportstribe_admin.config import Settings, parse_csv
from sportstribe_admin.services.registry import ENTITY_REGISTRY
from sportstribe_admin.services.resources import ResourceGateway, TableStore
from sportstribe_admin.services.sessions import AdminPolicy, SessionStore
from sportstribe_admin.services.storage import KeyValueStorage


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_store: SessionStore
    gateways: dict[str, ResourceGateway[Any]]
    close_resources: Callable[[], Awaitable[None]]

    def gateway(self, name: str) -> ResourceGateway[Any]:
        """Return the gateway for an entity kind."""
        return self.gateways[name]


def build_session_store(settings: Settings, storage: KeyValueStorage) -> SessionStore:
    """Create the session store configured from settings."""
    policy = AdminPolicy(
        admin_email=settings.admin_email,
        admin_password=settings.admin_password,
        markers=parse_csv(settings.admin_markers),
        domain_suffixes=parse_csv(settings.admin_domain_suffixes),
    )
    return SessionStore(
        storage=storage,
        policy=policy,
        timeout=timedelta(hours=settings.session_timeout_hours),
    )


def build_gateways(store: TableStore) -> dict[str, ResourceGateway[Any]]:
    """Create one gateway per registered entity kind."""
    return {
        name: ResourceGateway(store=store, descriptor=descriptor)
        for name, descriptor in ENTITY_REGISTRY.items()
    }


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = AsyncClient(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    table_store = SupabaseTableStore(supabase_client)
    session_store = build_session_store(
        resolved_settings,
        JsonFileStorage(Path(resolved_settings.session_storage_path)),
    )

    async def close_resources() -> None:
        await supabase_client.postgrest.aclose()

    return AppContainer(
        settings=resolved_settings,
        session_store=session_store,
        gateways=build_gateways(table_store),
        close_resources=close_resources,
    )
