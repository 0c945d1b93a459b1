"""
FastAPI application factory and configuration
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from randobot.api.config import settings
from randobot.api.dependencies import AppState
from randobot.api.routes import chat, health, indexing, root
from randobot.api.services import build_resolver
from randobot.crawl import ContentManager, StoreState

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    app_state = AppState()
    app_state.reset(history_size=settings.HISTORY_SIZE)

    logger.info(f"Loading document store from {settings.DATA_PATH}...")
    content_manager = ContentManager(settings.DATA_PATH)
    app_state.content_manager = content_manager

    app_state.set_store_state(StoreState.LOADING)
    store = await content_manager.load()
    app_state.set_store_state(content_manager.state)
    app_state.set_resolver(build_resolver(store))

    if content_manager.state == StoreState.LOADED:
        logger.info(f"Document store ready: {len(store.pages)} pages")
    else:
        logger.warning(f"No usable snapshot ({content_manager.state.value}), index the site with POST /api/index-website")

    yield

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Factory function for the FastAPI app"""
    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(root.router)
    app.include_router(chat.router)
    app.include_router(indexing.router)
    app.include_router(health.router)

    return app
