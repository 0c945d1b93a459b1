"""
FastAPI dependencies for shared state and validation
"""
import asyncio
from collections import deque
from typing import Callable, Deque, Dict, Optional

from fastapi import Depends

from randobot.api.exceptions import DataNotLoadedError
from randobot.crawl import ContentManager, CrawlConfig, StoreState, WebCrawler
from randobot.qa import QueryResolver


class AppState:
    """Singleton holding the store, the resolver and the chat history"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.reset()
        return cls._instance

    def reset(self, history_size: int = 10):
        self.content_manager: Optional[ContentManager] = None
        self.resolver: Optional[QueryResolver] = None
        self.crawler_factory: Callable[[CrawlConfig], WebCrawler] = lambda config: WebCrawler(config)
        self.crawl_config = CrawlConfig()
        self.store_state = StoreState.EMPTY
        self.history: Deque[Dict[str, str]] = deque(maxlen=history_size)
        self.crawl_lock = asyncio.Lock()

    def set_resolver(self, resolver: QueryResolver):
        self.resolver = resolver

    def set_store_state(self, state: StoreState):
        self.store_state = state

    def is_data_loaded(self) -> bool:
        return (
            self.resolver is not None
            and self.store_state == StoreState.LOADED
            and len(self.resolver.store.pages) > 0
        )

    def remember(self, role: str, content: str):
        self.history.append({'role': role, 'content': content})


def get_app_state() -> AppState:
    """Dependency returning the app state"""
    return AppState()


def get_resolver(app_state: AppState = Depends(get_app_state)) -> QueryResolver:
    """Dependency returning the resolver once data is loaded"""
    if not app_state.is_data_loaded():
        raise DataNotLoadedError()
    return app_state.resolver
