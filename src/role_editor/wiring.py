from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from .config import Settings
from .exceptions import RoleNotFoundError
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and wire the FastAPI application.

    Routers, middleware and exception handlers are registered here so tests
    can build fresh apps; the role store is resolved lazily through
    ``deps.providers`` and can be swapped with ``dependency_overrides``.
    """
    if settings is None:
        settings = Settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name)

    from .metrics import metrics_response
    from .middleware.metrics_middleware import MetricsMiddleware
    from .routers import health, role_editor

    app.include_router(health.router)
    app.include_router(role_editor.router)

    app.add_middleware(MetricsMiddleware)

    @app.get("/metrics")
    async def _metrics():
        data, content_type = metrics_response()
        return Response(content=data, media_type=content_type)

    @app.exception_handler(RoleNotFoundError)
    async def _role_not_found_handler(request: Request, exc: RoleNotFoundError):
        return JSONResponse(status_code=404, content={"detail": "role not found"})

    logger.info("app_created", extra={"app_name": settings.app_name})
    return app


__all__ = ["create_app"]
