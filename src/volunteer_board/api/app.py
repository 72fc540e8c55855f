"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from volunteer_board.api.records import router as records_router
from volunteer_board.app_logging import configure_logging
from volunteer_board.config import SCHEMA_SQL
from volunteer_board.containers import AppContainer
from volunteer_board.errors import (
    AuthorizationError,
    GatewayError,
    RemoteError,
    ValidationError,
)

HTTP_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.container.setup_required:
            logger.warning("Starting in setup-required mode")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(records_router)

    @app.exception_handler(ValidationError)
    async def validation_failed(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=HTTP_UNPROCESSABLE,
            content={"detail": str(exc)},
        )

    @app.exception_handler(AuthorizationError)
    async def authorization_failed(
        request: Request, exc: AuthorizationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": str(exc)},
        )

    @app.exception_handler(GatewayError)
    async def gateway_failed(request: Request, exc: GatewayError) -> JSONResponse:
        logger.error(
            "Supabase call failed",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        content: dict[str, object] = {"detail": "The record store request failed."}
        if isinstance(exc, RemoteError) and _is_local(request):
            content["upstream_status"] = exc.status_code
            content["upstream_body"] = exc.body
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=content)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/setup")
    async def setup(request: Request) -> dict[str, object]:
        """Report whether Supabase still has to be configured."""
        state_container: AppContainer = request.app.state.container
        return {
            "setup_required": state_container.setup_required,
            "schema_sql": SCHEMA_SQL,
        }

    return app


def _is_local(request: Request) -> bool:
    """Upstream error details are only exposed in the local environment."""
    state_container: AppContainer = request.app.state.container
    return state_container.settings.environment == "local"
