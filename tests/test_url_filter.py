#!/usr/bin/env python3
"""
Tests for link classification and the follow rules
"""

from helpers import BASE_URL
from randobot.crawl import CrawlConfig, UrlFilter, normalize_url
from randobot.crawl.url_filter import YEAR_ROUTES


class TestNormalizeUrl:
    """Test URL normalization"""

    def test_drops_fragment_and_trailing_slash(self):
        assert normalize_url("https://hikes.test/2024/#top") == "https://hikes.test/2024"
        assert normalize_url("https://hikes.test/") == "https://hikes.test"


class TestClassify:
    """Test route-shape predicates"""

    def setup_method(self):
        self.url_filter = UrlFilter(BASE_URL)

    def test_year_and_month_links(self):
        year = self.url_filter.classify(f"{BASE_URL}/2024", BASE_URL)
        month = self.url_filter.classify(f"{BASE_URL}/month/2024/3", BASE_URL)

        assert year.is_year_link and year.is_valid_year_route
        assert month.is_month_link and not month.is_year_link

    def test_gallery_thematic_and_project_links(self):
        gallery = self.url_filter.classify(f"{BASE_URL}/2024/lac-blanc", BASE_URL)
        thematic = self.url_filter.classify(f"{BASE_URL}/mountain_animals", BASE_URL)
        project = self.url_filter.classify(f"{BASE_URL}/projets", BASE_URL)

        assert gallery.is_gallery_link and not gallery.is_special_page
        assert thematic.is_thematic_page and thematic.is_special_page
        assert project.is_project_page and project.is_special_page

    def test_external_link(self):
        info = self.url_filter.classify("https://other.test/2024", BASE_URL)

        assert info.is_internal is False

    def test_year_route_on_years_page(self):
        info = self.url_filter.classify(f"{BASE_URL}/bestof", f"{BASE_URL}/years")

        assert info.is_on_years_page
        assert info.is_valid_year_route
        assert not info.is_year_link


class TestShouldFollow:
    """Test the follow decision"""

    def setup_method(self):
        self.url_filter = UrlFilter(BASE_URL)

    def test_root_follows_any_internal_link(self):
        info = self.url_filter.classify(f"{BASE_URL}/about", BASE_URL)

        assert self.url_filter.should_follow(info, 0, set())

    def test_external_never_followed(self):
        info = self.url_filter.classify("https://other.test/2024", BASE_URL)

        assert not self.url_filter.should_follow(info, 0, set())

    def test_visited_never_followed(self):
        info = self.url_filter.classify(f"{BASE_URL}/2024", BASE_URL)

        assert not self.url_filter.should_follow(info, 0, {f"{BASE_URL}/2024"})

    def test_year_month_and_thematic_followed_at_depth(self):
        for path in ('/years', '/2019', '/month/2019/7', '/dreams'):
            info = self.url_filter.classify(f"{BASE_URL}{path}", f"{BASE_URL}/2019")
            assert self.url_filter.should_follow(info, 3, set()), path

    def test_year_route_only_from_years_page(self):
        from_years = self.url_filter.classify(f"{BASE_URL}/bestof", f"{BASE_URL}/years")
        from_elsewhere = self.url_filter.classify(f"{BASE_URL}/bestof", f"{BASE_URL}/2019")

        assert self.url_filter.should_follow(from_years, 1, set())
        assert not self.url_filter.should_follow(from_elsewhere, 1, set())

    def test_gallery_links_need_opt_in(self):
        info = self.url_filter.classify(f"{BASE_URL}/2019/mont-blanc", f"{BASE_URL}/2019")
        opted_in = UrlFilter(BASE_URL, CrawlConfig(follow_gallery_links=True))

        assert not self.url_filter.should_follow(info, 1, set())
        assert opted_in.should_follow(info, 1, set())


class TestExtractLinks:
    """Test anchor collection"""

    def setup_method(self):
        self.url_filter = UrlFilter(BASE_URL)

    def test_resolves_and_deduplicates(self):
        html = (
            '<a href="/2024">2024</a>'
            '<a href="/2024/#top">Haut</a>'
            '<a href="mailto:me@hikes.test">Mail</a>'
            '<a href="/img/photo.JPG">Photo</a>'
            '<a href="lac">Lac</a>'
        )

        links = self.url_filter.extract_links(html, f"{BASE_URL}/2023/")

        assert [link.url for link in links] == [f"{BASE_URL}/2024", f"{BASE_URL}/2023/lac"]
        assert links[0].text == "2024"

    def test_href_keeps_directory_slash(self):
        links = self.url_filter.extract_links('<a href="/fr/#haut">FR</a>', BASE_URL)

        assert links[0].url == f"{BASE_URL}/fr"
        assert links[0].href == f"{BASE_URL}/fr/"

    def test_years_page_adds_year_routes(self):
        links = self.url_filter.extract_links("<html><body></body></html>", f"{BASE_URL}/years")

        urls = [link.url for link in links]
        assert len(urls) == len(YEAR_ROUTES)
        assert f"{BASE_URL}/bestof" in urls
        assert f"{BASE_URL}/year2016" in urls
