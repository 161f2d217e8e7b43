"""
FastAPI application factory.

* Registers routes for customers, partners, the service catalog,
  emergencies and admin.
* Renders every error as ``{"success": false, "message": ...}``.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from roadside.api.middleware import limiter
from roadside.api.routes import admin, emergency, partners, services, users
from roadside.config import settings
from roadside.domain.errors import DispatchError
from roadside.infrastructure.database import engine

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Dispose the connection pool on shutdown."""
    logger.info("Roadside API starting")
    yield
    await engine.dispose()
    logger.info("Roadside API stopped")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


async def _dispatch_error_handler(request: Request, exc: DispatchError):
    return _error(exc.status_code, exc.message)


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())[1:])
        problems.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return _error(400, "; ".join(problems) or "Invalid request")


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if settings.debug else "Internal server error"
    return _error(500, message)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Roadside Assistance API",
        description=(
            "Connects stranded drivers with nearby garages, tyre shops and "
            "towing partners.  Ranks approved partners by great-circle "
            "distance and handles emergency SOS requests."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Error envelope
    app.add_exception_handler(DispatchError, _dispatch_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    # Routers
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(emergency.router, prefix="/api/v1")
    app.include_router(partners.router, prefix="/api/v1")
    app.include_router(services.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
