import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.routes.free_drinks import router as free_drinks_router
from app.api.routes.health import router as health_router
from app.api.routes.loyalty import router as loyalty_router
from app.api.routes.qr import router as qr_router
from app.api.routes.redemptions import router as redemptions_router
from app.core.config import get_settings
from app.core.logging import configure_logging

logger = structlog.get_logger(__name__)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("request_validation_failed", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=422,
        content={"detail": {"code": "VALIDATION_ERROR", "message": "Invalid request payload"}},
    )


async def _handle_internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_failed_internal", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"detail": {"code": "E_INTERNAL"}})


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, app_env=settings.app_env)

    app = FastAPI(
        title="Come Get It API",
        version="0.1.0",
        docs_url="/docs" if settings.enable_openapi_docs else None,
        redoc_url="/redoc" if settings.enable_openapi_docs else None,
        openapi_url="/openapi.json" if settings.enable_openapi_docs else None,
    )
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, _handle_internal_error)
    app.add_exception_handler(TimeoutError, _handle_internal_error)

    app.include_router(health_router)
    app.include_router(free_drinks_router)
    app.include_router(qr_router)
    app.include_router(redemptions_router)
    app.include_router(loyalty_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
