"""FastAPI application entry point."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from platify.api.routes import health, images, pages, preview
from platify.config import Settings, settings
from platify.core.request_id import get_request_id
from platify.core.templates import TemplateSet
from platify.middleware.logging import RequestLoggingMiddleware
from platify.middleware.security import (
    SecurityHeadersMiddleware,
    UploadSizeLimitMiddleware,
    setup_compression,
)
from platify.services.image_ingestor import ImageIngestor
from platify.services.page_renderer import PageRenderer
from platify.services.upstream_client import UpstreamClient
from platify.utils.exceptions import (
    ImageValidationError,
    PlatifyException,
    TemplateSetError,
    UploadTooLargeError,
)
from platify.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"


def _is_api_request(request: Request) -> bool:
    return request.url.path.startswith(API_PREFIX)


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "request_id": get_request_id()},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map exceptions to JSON for the API and to error pages elsewhere."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning(
            f"Validation error: {str(exc)}",
            extra={"path": request.url.path, "method": request.method, "errors": exc.errors()},
        )
        return _error_json(status.HTTP_400_BAD_REQUEST, "invalid request")

    @app.exception_handler(PlatifyException)
    async def platify_exception_handler(request: Request, exc: PlatifyException) -> JSONResponse:
        if isinstance(exc, ImageValidationError):
            status_code = status.HTTP_400_BAD_REQUEST
        elif isinstance(exc, UploadTooLargeError):
            status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        if status_code >= 500:
            logger.error(f"Exception: {exc}", extra={"path": request.url.path})
        else:
            logger.info(f"Rejected request: {exc}", extra={"path": request.url.path})

        return _error_json(status_code, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if _is_api_request(request):
            return _error_json(exc.status_code, str(exc.detail))
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return request.app.state.page_renderer.render_error(
                exc.status_code, "Page not found", "This page does not exist."
            )
        return request.app.state.page_renderer.render_error(
            exc.status_code, "Something went wrong", str(exc.detail)
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> Response:
        logger.error(f"Unexpected exception: {str(exc)}", exc_info=True)
        if _is_api_request(request):
            return _error_json(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error")
        return request.app.state.page_renderer.render_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Something went wrong",
            "This page could not be displayed. Please try again later.",
        )


def create_app(
    app_settings: Optional[Settings] = None,
    upstream_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application.

    The template set is compiled here, once, so a broken template directory
    fails at startup rather than on the first request.

    Args:
        app_settings: Settings to use instead of the environment-derived ones
        upstream_transport: httpx transport for upstream calls (tests)

    Raises:
        TemplateSetError: If the template directory cannot be compiled
    """
    app_settings = app_settings or settings
    templates = TemplateSet(app_settings.templates_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Platify website starting up...")
        logger.info(f"Upstream API: {app_settings.api_base_url}")
        logger.info(f"Uploads stored in {app_settings.upload_dir}")
        yield
        logger.info("Platify website shutting down...")

    app = FastAPI(
        title="Platify Website",
        description="Server-rendered recipe and product pages",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.templates = templates
    app.state.page_renderer = PageRenderer(templates)
    app.state.upstream_client = UpstreamClient(
        app_settings.api_base_url,
        timeout=app_settings.http_timeout,
        transport=upstream_transport,
    )
    app.state.image_ingestor = ImageIngestor(
        app_settings.upload_dir,
        app_settings.upload_url_prefix,
        app_settings.max_upload_bytes,
    )

    try:
        app_settings.upload_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Upload directory {app_settings.upload_dir} is not available yet: {e}")

    register_exception_handlers(app)

    # Add middleware (last added runs first)
    app.add_middleware(UploadSizeLimitMiddleware, max_bytes=app_settings.max_upload_bytes)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    setup_compression(app)

    # Preview routes must be matched before /recipes/{id} and /products/{id}
    if not app_settings.is_release:
        app.include_router(preview.router)
        logger.info("Dev routes registered: GET /recipes/_example, GET /products/_example")
    app.include_router(health.router)
    app.include_router(images.router)
    app.include_router(pages.router)

    app.mount(
        app_settings.upload_url_prefix,
        StaticFiles(directory=app_settings.upload_dir, check_dir=False),
        name="uploads",
    )
    app.mount("/static", StaticFiles(directory=app_settings.static_dir, check_dir=False), name="static")

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    try:
        application = create_app()
    except TemplateSetError as e:
        logger.critical(f"Failed to load templates: {e}")
        sys.exit(1)

    logger.info(f"Platify website listening on {settings.host}:{settings.port}")
    uvicorn.run(application, host=settings.host, port=settings.port, log_config=None)


setup_logging(settings.log_level)

if __name__ == "__main__":
    run()
