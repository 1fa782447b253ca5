"""
EvaLegalAI Core - Backend
FastAPI application relaying contract analysis between Bitrix24 and OpenAI
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from openai import AsyncOpenAI

from evalegal import __version__
from evalegal.api.routers import api_router
from evalegal.config.settings import Settings, get_settings
from evalegal.controllers.legal_controller import LegalAnalysisController
from evalegal.middleware.body_limit import BodySizeLimitMiddleware
from evalegal.middleware.error_handling import ErrorHandlingMiddleware
from evalegal.middleware.request_logging import RequestLoggingMiddleware
from evalegal.middleware.security_headers import SecurityHeadersMiddleware
from evalegal.services.bitrix import BitrixClient
from evalegal.services.documents import DocumentFetcher
from evalegal.services.llm import LegalAnalysisAIClient


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    settings: Settings = app.state.settings

    # Startup
    logging.info(f"Starting {settings.app_name} ({settings.system_environment})")
    if settings.chat_allowlist:
        logging.info(f"Chat allowlist: {len(settings.chat_allowlist)} chat(s)")
    else:
        logging.warning("Chat allowlist is empty - every chat is allowed")

    http_client = httpx.AsyncClient()
    openai_client = AsyncOpenAI(api_key=settings.openai_api_key)

    app.state.bitrix_client = BitrixClient(
        base_url=settings.bitrix_url,
        http_client=http_client,
        timeout=settings.bitrix_timeout_seconds,
    )
    app.state.legal_controller = LegalAnalysisController(
        ai_client=LegalAnalysisAIClient(
            client=openai_client,
            model=settings.openai_model,
            timeout=settings.openai_timeout_seconds,
        ),
        document_fetcher=DocumentFetcher(
            http_client=http_client,
            timeout=settings.document_timeout_seconds,
            max_bytes=settings.document_max_bytes,
        ),
        chat_allowlist=settings.chat_allowlist,
    )

    yield

    # Shutdown
    logging.info("Shutting down...")
    await http_client.aclose()
    await openai_client.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Contract analysis relay between Bitrix24 and OpenAI",
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = settings

    # Add custom middleware (last added runs first)
    app.add_middleware(ErrorHandlingMiddleware)
    if settings.enable_request_logging:
        app.add_middleware(RequestLoggingMiddleware)
    # Outside request logging, which reads the whole body
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.request_body_limit_bytes)
    app.add_middleware(SecurityHeadersMiddleware)

    app.include_router(api_router)

    return app


settings = get_settings()
configure_logging(settings)
app = create_app(settings)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=not settings.is_production,
    )
