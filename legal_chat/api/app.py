"""FastAPI application factory and configuration.

Hosts the health endpoint and the NiceGUI chat page, which is mounted onto
this app in ``legal_chat.main``.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from legal_chat.client.config import get_client_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Log startup and shutdown of the chat client."""
    logger.info(f"Starting LegalAI Assistant (backend: {get_client_config().api_base_url})")
    yield
    logger.info("Shutting down LegalAI Assistant...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="LegalAI Assistant",
        description=(
            "Browser chat client for a legal research assistant. Keeps several "
            "conversations per user, persists them across reloads, and routes "
            "questions to the retrieval backend by search scope."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "legal-chat"}

    return application

