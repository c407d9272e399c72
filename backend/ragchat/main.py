"""ASGI entry point for the chat API.

    uvicorn ragchat.main:app

The shared embedding, vector store and chat clients live for the whole
process; they are built in the lifespan and closed on shutdown.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ragchat.config import Settings, get_settings
from ragchat.infrastructure.dependencies import close_clients, init_clients
from ragchat.infrastructure.logging.log_config import setup_logging
from ragchat.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging(settings)

    clients = init_clients(settings)
    logger.info(
        "%s %s serving collection '%s' (embeddings=%s, model=%s, top_k=%d)",
        settings.app_title,
        settings.app_version,
        settings.astra_db_collection,
        clients.embedding_provider.provider_name,
        settings.chat_model,
        settings.retrieval_top_k,
    )
    try:
        yield
    finally:
        await close_clients()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application with CORS and the versioned API routes."""
    settings = settings or get_settings()

    app = FastAPI(title=settings.app_title, version=settings.app_version, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("ragchat.main:app", host="0.0.0.0", port=8000, reload=True)
