"""
Crawl module for the hiking gallery assistant

Contains the crawler, the link classifier, the content extractor, the
statistics aggregator and snapshot persistence.
"""

from .aggregator import aggregate, french_month_to_number, parse_french_date
from .browser import PageLoader, PlaywrightPageLoader
from .config import CrawlConfig
from .content_extractor import ContentExtractor, ExtractedContent
from .content_manager import ContentManager
from .crawler import WebCrawler
from .models import (
    DocumentStore,
    LoadedPage,
    Page,
    PageMetadata,
    SiteStats,
    StoreState,
    UrlState,
)
from .url_filter import LinkInfo, UrlFilter, normalize_url

__all__ = [
    # Main crawler
    'WebCrawler',
    'PageLoader',
    'PlaywrightPageLoader',

    # Configuration
    'CrawlConfig',

    # Data models
    'DocumentStore',
    'LoadedPage',
    'Page',
    'PageMetadata',
    'SiteStats',
    'StoreState',
    'UrlState',

    # Core components
    'ContentExtractor',
    'ExtractedContent',
    'ContentManager',
    'UrlFilter',
    'LinkInfo',
    'normalize_url',
    'aggregate',
    'french_month_to_number',
    'parse_french_date',
]
