"""
Depth-first crawler for the hiking gallery site
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, List, Optional, Set, Tuple
from urllib.parse import urldefrag

from ..events import EventKind, EventTracker
from .browser import PageLoader, PlaywrightPageLoader
from .config import CrawlConfig
from .content_extractor import ContentExtractor
from .content_manager import ContentManager
from .models import DocumentStore, LoadedPage, Page, UrlState
from .url_filter import UrlFilter, normalize_url


LoaderFactory = Callable[[CrawlConfig], PageLoader]
Sleep = Callable[[float], Awaitable[None]]


class WebCrawler:
    """Crawl one site from a root URL into a fresh DocumentStore

    Traversal uses an explicit stack of (url, depth) pairs; a page is stored
    before its children are pushed, and children are pushed in reverse so the
    first link on a page is explored first.
    """

    def __init__(
        self,
        config: Optional[CrawlConfig] = None,
        loader_factory: Optional[LoaderFactory] = None,
        extractor: Optional[ContentExtractor] = None,
        events: Optional[EventTracker] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config or CrawlConfig()
        self.loader_factory = loader_factory or PlaywrightPageLoader
        self.extractor = extractor or ContentExtractor(self.config)
        self.events = events or EventTracker()
        self.sleep = sleep
        self.logger = logging.getLogger(__name__)

        self.url_filter: Optional[UrlFilter] = None
        self.store = DocumentStore()
        self.visited: Set[str] = set()
        self.abandoned: Set[str] = set()
        self.url_states: Dict[str, UrlState] = {}
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, float]:
        return {
            'pages_crawled': 0,
            'pages_failed': 0,
            'retries': 0,
            'navigation_fallbacks': 0,
            'skipped_revisits': 0,
            'duration_seconds': 0.0,
        }

    def _reset(self, start_url: str):
        self.url_filter = UrlFilter(start_url, self.config)
        self.store = DocumentStore()
        self.visited = set()
        self.abandoned = set()
        self.url_states = {}
        self.stats = self._empty_stats()

    async def crawl(self, start_url: str) -> DocumentStore:
        """Crawl from start_url; raises BrowserLaunchError if the browser cannot start"""
        start_time = time.time()
        self._reset(start_url)
        root_href, _ = urldefrag(start_url.strip())
        root = normalize_url(root_href)

        self.events.emit(
            EventKind.CRAWL_STARTED,
            url=root,
            detail=f"max_depth={self.config.max_depth} max_retries={self.config.max_retries}",
        )

        async with self.loader_factory(self.config) as loader:
            stack: List[Tuple[str, int, str]] = [(root, 0, root_href)]
            while stack:
                url, depth, href = stack.pop()
                if url in self.visited or url in self.abandoned:
                    self.stats['skipped_revisits'] += 1
                    self.events.emit(EventKind.PAGE_SKIPPED, url=url, depth=depth, detail="already visited")
                    continue

                self.url_states[url] = UrlState.PENDING
                loaded = await self._load_with_retry(loader, url, depth, href)
                if loaded is None:
                    self.abandoned.add(url)
                    continue

                self._store_page(url, loaded, depth)

                if depth >= self.config.max_depth:
                    continue
                for child, child_href in reversed(self._links_to_follow(url, loaded, depth)):
                    stack.append((child, depth + 1, child_href))

        self.store.refresh_stats()
        self.stats['duration_seconds'] = round(time.time() - start_time, 2)
        self.events.emit(
            EventKind.CRAWL_FINISHED,
            url=root,
            detail=f"pages={len(self.store.pages)} failed={self.stats['pages_failed']}",
        )
        return self.store

    async def start_crawling(self, root_url: str, content_manager: ContentManager) -> DocumentStore:
        """Fully repopulate the store from root_url and persist it"""
        store = await self.crawl(root_url)
        await content_manager.save(store)
        return store

    def _store_page(self, url: str, loaded: LoadedPage, depth: int):
        extracted = self.extractor.extract(loaded)
        page = Page(
            url=url,
            title=extracted.title,
            content=extracted.content,
            metadata=extracted.metadata,
        )
        if self.store.add_page(page):
            self.visited.add(url)
            self.stats['pages_crawled'] += 1
            self.events.emit(EventKind.PAGE_STORED, url=url, depth=depth, detail=page.title)

    def _links_to_follow(self, url: str, loaded: LoadedPage, depth: int) -> List[Tuple[str, str]]:
        """(normalized url, address to load) of the children to push"""
        children = []
        seen = set()
        # relative hrefs resolve against the document URL, trailing slash included
        for link in self.url_filter.extract_links(loaded.html, loaded.url or url):
            info = self.url_filter.classify(link.url, url)
            if info.url in seen or info.url in self.abandoned:
                continue
            if self.url_filter.should_follow(info, depth, self.visited):
                seen.add(info.url)
                children.append((info.url, link.href or info.url))
                self.events.emit(EventKind.LINK_FOLLOWED, url=info.url, depth=depth + 1)
        return children

    async def _load_with_retry(
        self, loader: PageLoader, url: str, depth: int, href: Optional[str] = None
    ) -> Optional[LoadedPage]:
        """Load a page, retrying with exponential backoff; None once retries are exhausted"""
        for attempt in range(1, self.config.max_retries + 1):
            self.url_states[url] = UrlState.LOADING
            self.events.emit(EventKind.PAGE_LOADING, url=url, depth=depth, attempt=attempt)
            try:
                loaded = await self._load_once(loader, href or url, depth, attempt)
                self.url_states[url] = UrlState.SUCCEEDED
                return loaded
            except Exception as e:
                self.logger.error(f"Error on attempt {attempt}/{self.config.max_retries} for {url}: {e}")

                if attempt == self.config.max_retries:
                    self.url_states[url] = UrlState.FAILED
                    self.stats['pages_failed'] += 1
                    self.events.emit(
                        EventKind.PAGE_FAILED, url=url, depth=depth, attempt=attempt,
                        detail="all retries failed",
                    )
                    return None

                wait_ms = self.config.backoff_ms(attempt)
                self.url_states[url] = UrlState.RETRYING
                self.stats['retries'] += 1
                self.events.emit(
                    EventKind.PAGE_RETRYING, url=url, depth=depth, attempt=attempt,
                    detail=f"waiting {wait_ms}ms",
                )
                await self.sleep(wait_ms / 1000)
        return None

    async def _load_once(self, loader: PageLoader, url: str, depth: int, attempt: int) -> LoadedPage:
        """Fast readiness condition first, full network idle as fallback"""
        timeout_ms = self.config.page_timeout_ms
        try:
            loaded = await loader.load(url, 'domcontentloaded', timeout_ms)
        except Exception as e:
            self.stats['navigation_fallbacks'] += 1
            self.events.emit(
                EventKind.NAVIGATION_FALLBACK, url=url, depth=depth, attempt=attempt,
                detail=f"domcontentloaded failed: {e}",
            )
            loaded = await loader.load(url, 'networkidle', timeout_ms)

        if self.config.settle_delay > 0:
            await self.sleep(self.config.settle_delay)
        return loaded

    def get_report(self) -> Dict:
        """Summary of the last crawl"""
        return {
            'crawl_summary': dict(self.stats, urls_visited=len(self.visited), urls_abandoned=len(self.abandoned)),
            'site_stats': self.store.site_stats.to_dict(),
            'configuration': {
                'max_depth': self.config.max_depth,
                'max_retries': self.config.max_retries,
                'page_timeout_ms': self.config.page_timeout_ms,
                'follow_gallery_links': self.config.follow_gallery_links,
            },
        }
