import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shipyard.api.api import api_router
from shipyard.config import settings
from shipyard.logging_config import setup_logging
from shipyard.middleware.request_logging import RequestLoggingMiddleware
from shipyard.seed import seed_sample_data
from shipyard.storage import Storage, build_storage

logger = logging.getLogger("shipyard")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies, query strings and path ids are client errors
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(storage: Optional[Storage] = None, seed: Optional[bool] = None) -> FastAPI:
    """Build the API application around ``storage``.

    Without an explicit storage the backend is chosen from settings, and
    sample data is loaded when ``SEED_SAMPLE_DATA`` is on.
    """
    if storage is None:
        storage = build_storage(settings)
        if seed is None:
            seed = settings.SEED_SAMPLE_DATA
    if seed:
        seed_sample_data(storage)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.storage.close()

    app = FastAPI(
        title=settings.APP_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    app.state.storage = storage

    cors_origins = ["http://localhost:3000", "http://localhost:5000", "http://localhost:5173"]
    cors_origins.extend(settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging middleware – request ID, timing
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root():
        return {"message": f"Welcome to {settings.APP_NAME} API", "docs": "/docs"}

    return app


def get_app() -> FastAPI:
    """ASGI factory: ``uvicorn shipyard.main:get_app --factory``."""
    setup_logging()
    return create_app()
