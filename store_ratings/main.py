import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from store_ratings.api.deps import get_db
from store_ratings.api.v1.router import api_router
from store_ratings.config.settings import get_settings
from store_ratings.core.errors import AppError, AuthError, InternalError, ValidationError
from store_ratings.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _field_name(loc: tuple) -> str:
    # drop the "body"/"query"/"path" prefix FastAPI puts in front
    parts = [str(part) for part in loc[1:]] or [str(part) for part in loc]
    return ".".join(parts)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(
        "Validation failed",
        errors=[
            {"field": _field_name(tuple(item.get("loc", ()))), "message": item.get("msg", "Invalid value")}
            for item in exc.errors()
        ],
    )
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    def health(db: Session=Depends(get_db)):
        try:
            db.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Health check failed")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy", "database": "disconnected"},
            )
        return {"status": "healthy", "database": "connected"}

    return app


app = create_app()
