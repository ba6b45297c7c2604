"""
FastAPI application entry point for the Content Gateway.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from content_gateway.api.error_handlers import EXCEPTION_HANDLERS
from content_gateway.api.middleware import RequestTracingMiddleware
from content_gateway.api.routes_generative import router as generative_router
from content_gateway.api.routes_records import router as records_router
from content_gateway.api.routes_service import router as service_router
from content_gateway.cache.fetcher import CacheAsideFetcher
from content_gateway.cache.redis_client import RedisClient
from content_gateway.cache.tier_selector import CacheTierSelector
from content_gateway.clients.content_client import ContentApiClient
from content_gateway.clients.generative_client import GenerativeTextClient
from content_gateway.config import Settings, settings
from content_gateway.documents.converter import FormatConverter
from content_gateway.documents.pdf_converter import PdfConverter
from content_gateway.documents.renderer import DocumentRenderer
from content_gateway.documents.rtf_converter import RtfConverter
from content_gateway.logging_config import configure_logging
from content_gateway.services.record_service import RecordService

logger = structlog.get_logger(__name__)

REGION_COMPLETIONS = "completions"


def build_lifespan(app_settings: Settings):
    """Lifespan that builds shared resources on startup and releases them on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Application startup",
            version=app_settings.APP_VERSION,
            environment=app_settings.ENVIRONMENT,
            content_api=app_settings.CONTENT_API_BASE_URL,
            cache_type=app_settings.CACHE_TYPE,
        )

        # Tier decided once, before the first request
        selector = CacheTierSelector.from_settings(app_settings)
        await selector.initialize()

        content_client = ContentApiClient.from_settings(app_settings)
        generative_client = GenerativeTextClient.from_settings(
            app_settings,
            completions_cache=CacheAsideFetcher(
                selector,
                REGION_COMPLETIONS,
                Optional[str],
                single_flight=app_settings.CACHE_SINGLE_FLIGHT,
            ),
        )

        app.state.settings = app_settings
        app.state.tier_selector = selector
        app.state.content_client = content_client
        app.state.generative_client = generative_client
        app.state.record_service = RecordService(
            content_client, selector, single_flight=app_settings.CACHE_SINGLE_FLIGHT
        )
        app.state.document_renderer = DocumentRenderer(title=app_settings.DOCUMENT_TITLE)
        app.state.format_converter = FormatConverter(
            pdf=PdfConverter(title=app_settings.DOCUMENT_TITLE),
            rtf=RtfConverter(font=app_settings.RTF_FONT),
        )

        logger.info("Application startup complete", cache_state=selector.state.value)
        try:
            yield
        finally:
            logger.info("Application shutdown")
            await content_client.close()
            await generative_client.close()
            await RedisClient.close_async_pool()
            logger.info("Application shutdown complete")

    return lifespan


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the FastAPI application."""
    configure_logging(
        app_settings.LOG_LEVEL,
        app_settings.ENVIRONMENT,
        service=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
    )

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Cached content API gateway with document export and generative-text endpoints",
        version=app_settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=build_lifespan(app_settings),
    )

    # Request tracing first so request_id is bound in every log line
    app.add_middleware(RequestTracingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)

    app.include_router(service_router, tags=["service"])
    app.include_router(records_router, prefix="/api/posts", tags=["records"])
    app.include_router(generative_router, prefix="/api/claude", tags=["generative"])

    if app_settings.PROMETHEUS_ENABLED:
        Instrumentator().instrument(app).expose(app)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "content_gateway.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
