#!/usr/bin/env python3
"""
Tests for the depth-first crawler
Covers traversal, link following rules, retries with backoff and persistence
"""

import json
import shutil
import tempfile
from pathlib import Path

import pytest

from helpers import BASE_URL, FakeLoader, RecordingSleep, sample_site
from randobot.crawl import ContentManager, CrawlConfig, UrlState, WebCrawler
from randobot.errors import BrowserLaunchError
from randobot.events import EventKind


def make_crawler(loader, config=None, sleep=None):
    config = config or CrawlConfig(settle_delay=0)
    return WebCrawler(config, loader_factory=lambda _: loader, sleep=sleep or RecordingSleep())


class TestCrawlConfig:
    """Test CrawlConfig dataclass"""

    def test_default_config(self):
        config = CrawlConfig()

        assert config.max_depth == 5
        assert config.max_retries == 3
        assert config.follow_gallery_links is False
        assert config.settle_delay == 1.0
        assert '/mountain_flowers' in config.thematic_paths

    def test_backoff_is_capped(self):
        config = CrawlConfig()

        assert config.backoff_ms(1) == 2000
        assert config.backoff_ms(2) == 4000
        assert config.backoff_ms(3) == 8000
        assert config.backoff_ms(4) == 10000
        assert config.backoff_ms(10) == 10000


class TestTraversal:
    """Test which pages a crawl reaches"""

    @pytest.mark.asyncio
    async def test_crawls_reachable_pages(self):
        loader = FakeLoader(sample_site())
        crawler = make_crawler(loader)

        store = await crawler.crawl(BASE_URL + "/")

        assert [page.url for page in store.pages] == [
            BASE_URL,
            f"{BASE_URL}/2024/lac-blanc",
            f"{BASE_URL}/mountain_flowers",
            f"{BASE_URL}/2024",
            f"{BASE_URL}/month/2024/1",
        ]

    @pytest.mark.asyncio
    async def test_visited_set_matches_stored_pages(self):
        loader = FakeLoader(sample_site())
        crawler = make_crawler(loader)

        store = await crawler.crawl(BASE_URL)
        urls = [page.url for page in store.pages]

        assert len(urls) == len(set(urls))
        assert crawler.visited == set(urls)
        assert crawler.stats['skipped_revisits'] >= 1

    @pytest.mark.asyncio
    async def test_external_and_asset_links_are_ignored(self):
        loader = FakeLoader(sample_site())
        crawler = make_crawler(loader)

        await crawler.crawl(BASE_URL)

        loaded = loader.loaded_urls()
        assert "https://other.test/x" not in loaded
        assert f"{BASE_URL}/photo.jpg" not in loaded

    @pytest.mark.asyncio
    async def test_gallery_links_below_root_are_not_followed_by_default(self):
        loader = FakeLoader(sample_site())
        crawler = make_crawler(loader)

        await crawler.crawl(BASE_URL)

        assert f"{BASE_URL}/2024/col-des-montets" not in loader.loaded_urls()

    @pytest.mark.asyncio
    async def test_gallery_links_followed_when_enabled(self):
        loader = FakeLoader(sample_site())
        config = CrawlConfig(settle_delay=0, follow_gallery_links=True, max_retries=1)
        crawler = make_crawler(loader, config)

        store = await crawler.crawl(BASE_URL)

        assert f"{BASE_URL}/2024/col-des-montets" in loader.loaded_urls()
        assert f"{BASE_URL}/2024/col-des-montets" in crawler.abandoned
        assert len(store.pages) == 5

    @pytest.mark.asyncio
    async def test_relative_links_resolve_against_directory_url(self):
        loader = FakeLoader({
            f"{BASE_URL}/fr": ("Accueil", '<html><body><a href="2024">2024</a></body></html>'),
            f"{BASE_URL}/fr/2024": ("2024", "<html><body><p>Année 2024</p></body></html>"),
        })
        crawler = make_crawler(loader)

        store = await crawler.crawl(f"{BASE_URL}/fr/")

        assert [page.url for page in store.pages] == [f"{BASE_URL}/fr", f"{BASE_URL}/fr/2024"]
        assert loader.requested[0] == f"{BASE_URL}/fr/"
        assert f"{BASE_URL}/2024" not in loader.loaded_urls()
        assert crawler.abandoned == set()

    @pytest.mark.asyncio
    async def test_max_depth_zero_stores_root_only(self):
        loader = FakeLoader(sample_site())
        crawler = make_crawler(loader, CrawlConfig(settle_delay=0, max_depth=0))

        store = await crawler.crawl(BASE_URL)

        assert [page.url for page in store.pages] == [BASE_URL]

    @pytest.mark.asyncio
    async def test_site_stats_refreshed_after_crawl(self):
        crawler = make_crawler(FakeLoader(sample_site()))

        store = await crawler.crawl(BASE_URL)

        assert store.site_stats.total_pages == 5
        assert store.site_stats.total_outings == 1
        assert store.site_stats.thematic_pages == 1
        assert store.site_stats.outings_by_month == {2024: {1: 1}}

    @pytest.mark.asyncio
    async def test_settle_delay_after_each_load(self):
        sleep = RecordingSleep()
        crawler = make_crawler(FakeLoader(sample_site()), CrawlConfig(settle_delay=1.0), sleep)

        store = await crawler.crawl(BASE_URL)

        assert sleep.calls == [1.0] * len(store.pages)


class TestRetries:
    """Test navigation fallback and exponential backoff"""

    @pytest.mark.asyncio
    async def test_navigation_fallback_to_network_idle(self):
        target = f"{BASE_URL}/2024/lac-blanc"
        loader = FakeLoader(sample_site(), failures={target: 1})
        crawler = make_crawler(loader)

        store = await crawler.crawl(BASE_URL)

        assert store.has_url(target)
        assert (target, 'networkidle') in loader.calls
        assert crawler.stats['navigation_fallbacks'] == 1
        assert crawler.stats['retries'] == 0

    @pytest.mark.asyncio
    async def test_retry_after_failed_attempt(self):
        target = f"{BASE_URL}/2024/lac-blanc"
        loader = FakeLoader(sample_site(), failures={target: 2})
        sleep = RecordingSleep()
        crawler = make_crawler(loader, sleep=sleep)

        store = await crawler.crawl(BASE_URL)

        assert store.has_url(target)
        assert sleep.calls == [2.0]
        assert crawler.stats['retries'] == 1
        assert crawler.url_states[target] == UrlState.SUCCEEDED

    @pytest.mark.asyncio
    async def test_page_abandoned_after_all_retries(self):
        target = f"{BASE_URL}/2024/lac-blanc"
        loader = FakeLoader(sample_site(), failures={target: 6})
        sleep = RecordingSleep()
        crawler = make_crawler(loader, sleep=sleep)

        store = await crawler.crawl(BASE_URL)

        assert not store.has_url(target)
        assert target in crawler.abandoned
        assert target not in crawler.visited
        assert sleep.calls == [2.0, 4.0]
        assert crawler.url_states[target] == UrlState.FAILED
        assert [event.url for event in crawler.events.of_kind(EventKind.PAGE_FAILED)] == [target]
        assert len(store.pages) == 4

    @pytest.mark.asyncio
    async def test_browser_launch_error_propagates(self):
        crawler = make_crawler(FakeLoader(sample_site(), launch_error=True))

        with pytest.raises(BrowserLaunchError):
            await crawler.crawl(BASE_URL)


class TestStartCrawling:
    """Test crawl plus snapshot persistence"""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.data_path = Path(self.temp_dir) / "website_data.json"

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    @pytest.mark.asyncio
    async def test_snapshot_written(self):
        crawler = make_crawler(FakeLoader(sample_site()))

        store = await crawler.start_crawling(BASE_URL, ContentManager(self.data_path))

        saved = json.loads(self.data_path.read_text(encoding='utf-8'))
        assert len(saved['pages']) == len(store.pages)
        assert saved['siteStats']['outingsByYear'] == {'2024': 1}

    @pytest.mark.asyncio
    async def test_report(self):
        crawler = make_crawler(FakeLoader(sample_site()))
        await crawler.crawl(BASE_URL)

        report = crawler.get_report()

        assert report['crawl_summary']['pages_crawled'] == 5
        assert report['crawl_summary']['urls_visited'] == 5
        assert report['configuration']['max_depth'] == 5
        assert report['site_stats']['totalPages'] == 5
