"""
Business logic behind the chat and indexing routes
"""
import logging

from randobot.api.config import settings
from randobot.api.dependencies import AppState
from randobot.api.exceptions import CrawlInProgressError, IndexingFailedError
from randobot.api.models import ChatResponse, IndexResponse
from randobot.crawl import StoreState
from randobot.qa import GeminiGenerator, QueryResolver

logger = logging.getLogger(__name__)


def build_resolver(store) -> QueryResolver:
    """Resolver with the Gemini fallback when a key is configured"""
    generator = None
    if settings.ENABLE_FALLBACK and settings.GOOGLE_API_KEY:
        generator = GeminiGenerator(model=settings.LLM_MODEL, api_key=settings.GOOGLE_API_KEY)
        logger.info(f"Generative fallback enabled with {settings.LLM_MODEL}")
    else:
        logger.warning("Generative fallback disabled, unmatched questions get a fixed answer")
    return QueryResolver(store=store, generator=generator)


class ChatService:
    """Service for chat messages"""

    @staticmethod
    async def process_message(app_state: AppState, resolver: QueryResolver, message: str) -> ChatResponse:
        logger.info(f"Question received: {message}")
        answer = await resolver.answer(message)

        app_state.remember('user', message)
        app_state.remember('assistant', answer.text)

        return ChatResponse(message=answer.text, sources=answer.sources, intent=answer.intent)


class IndexingService:
    """Service for re-crawling the site"""

    @staticmethod
    async def index_website(app_state: AppState, url: str) -> IndexResponse:
        if app_state.crawl_lock.locked():
            raise CrawlInProgressError()

        async with app_state.crawl_lock:
            logger.info(f"Indexing started for {url}")
            crawler = app_state.crawler_factory(app_state.crawl_config)
            try:
                store = await crawler.start_crawling(url, app_state.content_manager)
            except Exception as e:
                logger.error(f"Indexing failed for {url}: {e}")
                raise IndexingFailedError(str(e))

            if app_state.resolver is None:
                app_state.set_resolver(build_resolver(store))
            else:
                app_state.resolver.set_store(store)
            app_state.set_store_state(StoreState.LOADED)
            logger.info(f"Indexing finished: {len(store.pages)} pages")

            return IndexResponse(
                success=True,
                pages=len(store.pages),
                urls=[page.url for page in store.pages],
            )


class HealthService:
    """Service for health checks"""

    @staticmethod
    def check(app_state: AppState) -> dict:
        pages = len(app_state.resolver.store.pages) if app_state.resolver else 0
        return {
            "status": "healthy" if app_state.is_data_loaded() else "degraded",
            "store_state": app_state.store_state.value,
            "pages": pages,
            "fallback_enabled": bool(app_state.resolver and app_state.resolver.fallback),
        }
