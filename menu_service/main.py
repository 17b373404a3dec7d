import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from prometheus_client import make_asgi_app

from menu_service.config import Settings, settings
from menu_service.errors import ErrorKind, MenuError
from menu_service.middleware.metrics import MetricsMiddleware
from menu_service.middleware.request_id import RequestIDMiddleware
from menu_service.routers import menu
from menu_service.services.menu_service import MenuService
from menu_service.storage.sql import SqlStorageBackend
from menu_service.utils.logging import setup_logging
from menu_service.utils.tracing import setup_tracing

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.RECORD_TOO_LARGE: 413,  # Content Too Large
}


async def menu_error_handler(request: Request, exc: MenuError) -> JSONResponse:
    logger.info(
        "Returning %s for menu error",
        exc.kind.value,
        extra={"request_id": getattr(request.state, "request_id", "unknown"), "item_id": exc.item_id},
    )
    return JSONResponse(
        status_code=_ERROR_STATUS[exc.kind],
        content={"kind": exc.kind.value, "item_id": exc.item_id, "detail": exc.message},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # rejected inputs are not echoed back; an inf/nan price cannot be rendered as JSON
    errors = [{key: value for key, value in err.items() if key not in ("input", "ctx")} for err in exc.errors()]
    return JSONResponse(
        status_code=422,  # Unprocessable Content
        content={"detail": jsonable_encoder(errors)},
    )


def create_app(app_settings: Settings = settings, service: MenuService | None = None) -> FastAPI:
    tracing_enabled = setup_tracing("menu-service", app_settings.otlp_endpoint)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        menu_service = service or MenuService.from_settings(app_settings)
        logger.info("Starting up, opening storage", extra={"backend": app_settings.storage_backend})
        await menu_service.start()

        if tracing_enabled and isinstance(menu_service.backend, SqlStorageBackend):
            SQLAlchemyInstrumentor().instrument(engine=menu_service.backend.engine.sync_engine)

        if app_settings.seed_menu:
            await menu_service.seed_menu()

        app.state.menu_service = menu_service
        logger.info("Startup complete")

        yield

        await menu_service.close()
        logger.info("Shutting down")

    app = FastAPI(
        title="Menu Service",
        description="Menu catalog with durable ids and availability tracking",
        version="1.0.0",
        lifespan=lifespan,
    )

    if tracing_enabled:
        FastAPIInstrumentor.instrument_app(app)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(MenuError, menu_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(menu.router, prefix="/menu", tags=["menu"])

    # Expose Prometheus metrics at /metrics
    app.mount("/metrics", make_asgi_app())

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app


setup_logging(settings.log_level)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
