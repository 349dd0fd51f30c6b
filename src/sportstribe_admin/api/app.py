"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sportstribe_admin.api.admin import entity_routers
from sportstribe_admin.api.admin import router as admin_router
from sportstribe_admin.app_logging import configure_logging
from sportstribe_admin.containers import AppContainer
from sportstribe_admin.domain.errors import ResourceError, ResourceErrorKind

ERROR_STATUS: dict[ResourceErrorKind, int] = {
    ResourceErrorKind.RESOURCE_MISSING: 503,
    ResourceErrorKind.PERMISSION_DENIED: 403,
    ResourceErrorKind.VALIDATION: 422,
    ResourceErrorKind.UNKNOWN: 502,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)
    for entity_router in entity_routers:
        app.include_router(entity_router)

    @app.exception_handler(ResourceError)
    async def resource_error_handler(
        request: Request, exc: ResourceError
    ) -> JSONResponse:
        logger.info(
            "%s %s -> %s (%s)", request.method, request.url.path, exc.kind, exc.entity
        )
        return JSONResponse(status_code=ERROR_STATUS[exc.kind], content=exc.to_dict())

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
