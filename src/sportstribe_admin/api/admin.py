"""Admin API endpoints gated by the admin session."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from fastapi import (
    APIRouter,
    Body,
    Depends,
    Header,
    HTTPException,
    Query,
    Request,
    Response,
    status,
)
from fastapi.encoders import jsonable_encoder

from sportstribe_admin.api.models import (
    AdminUserView,
    LoginRequest,
    SessionResponse,
    SessionView,
)
from sportstribe_admin.domain.sessions import InvalidCredentialsError
from sportstribe_admin.services.registry import ENTITY_REGISTRY, EntityDescriptor

if TYPE_CHECKING:
    from sportstribe_admin.containers import AppContainer
    from sportstribe_admin.domain.sessions import AdminSession, AdminUser

router = APIRouter(prefix="/admin", tags=["admin"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_admin(
    request: Request, x_admin_token: str | None = Header(default=None)
) -> None:
    """Ensure the request carries the token of the valid admin session."""
    if not _container(request).session_store.authorize(x_admin_token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/login")
async def login(credentials: LoginRequest, request: Request) -> SessionResponse:
    """Issue an admin session for accepted credentials."""
    session_store = _container(request).session_store
    try:
        session = session_store.login(credentials.email, credentials.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)
        ) from exc
    return _session_response(
        session, session_store.current_user(), token=session.token
    )


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def logout(request: Request) -> Response:
    """Clear the admin session."""
    _container(request).session_store.logout()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/session", dependencies=[Depends(require_admin)])
async def current_session(request: Request) -> SessionResponse:
    """Return the active admin session."""
    session_store = _container(request).session_store
    session = session_store.current_session()
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return _session_response(session, session_store.current_user())


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


def build_entity_router(descriptor: EntityDescriptor[Any]) -> APIRouter:
    """Create CRUD routes for one entity kind."""
    entity_router = APIRouter(
        prefix=f"/admin/{descriptor.url_name}",
        tags=[descriptor.name],
        dependencies=[Depends(require_admin)],
    )
    name = descriptor.name

    @entity_router.get("")
    async def list_entities(
        request: Request,
        limit: int | None = None,
        status_filter: str | None = Query(default=None, alias="status"),
        order: str | None = None,
        descending: bool | None = None,
    ) -> dict[str, object]:
        """List entities, newest first unless configured otherwise."""
        where = {"status": status_filter} if status_filter is not None else None
        items = await _container(request).gateway(name).list(
            order, descending, where=where, limit=limit
        )
        return {"items": jsonable_encoder(items)}

    @entity_router.get("/{entity_id}")
    async def get_entity(entity_id: str, request: Request) -> dict[str, object]:
        """Return a single entity."""
        entity = await _container(request).gateway(name).get_by_id(entity_id)
        if entity is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return jsonable_encoder(entity)

    @entity_router.post("", status_code=status.HTTP_201_CREATED)
    async def create_entity(
        request: Request, payload: dict[str, Any] = Body(...)
    ) -> dict[str, object]:
        """Create an entity from its domain fields."""
        entity = await _container(request).gateway(name).create(payload)
        return jsonable_encoder(entity)

    @entity_router.patch("/{entity_id}")
    async def update_entity(
        entity_id: str, request: Request, payload: dict[str, Any] = Body(...)
    ) -> dict[str, object]:
        """Apply a partial update."""
        entity = await _container(request).gateway(name).update(entity_id, payload)
        return jsonable_encoder(entity)

    @entity_router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entity(entity_id: str, request: Request) -> Response:
        """Delete an entity."""
        await _container(request).gateway(name).delete(entity_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return entity_router


entity_routers = [build_entity_router(d) for d in ENTITY_REGISTRY.values()]


def _session_response(
    session: AdminSession, user: AdminUser | None, token: str | None = None
) -> SessionResponse:
    return SessionResponse(
        session=SessionView(**asdict(session)),
        user=AdminUserView(**asdict(user)) if user else None,
        token=token,
    )
