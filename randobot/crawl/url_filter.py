"""
Link classification for the gallery site's route taxonomy
"""

import re
from dataclasses import dataclass
from typing import Collection, List, Optional
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

from .config import CrawlConfig
from .models import Link


YEAR_LINK = re.compile(r'^/20\d{2}$')
MONTH_LINK = re.compile(r'^/month/20\d{2}/\d{1,2}$')
VALID_YEAR_ROUTE = re.compile(r'^/(20\d{2}|bestof|index|future|in_my_life|year2016)$')
GALLERY_LINK = re.compile(r'^/(?:20\d{2}/[^/]+|gall?er(?:y|ie)s?/[^/]+)')
YEARS_PAGE = '/years'

# Year navigation on the years index is rendered outside regular anchors
YEAR_ROUTES = [
    ('2017', '/2017'),
    ('2018', '/2018'),
    ('2019', '/2019'),
    ('2020', '/2020'),
    ('2021', '/2021'),
    ('2022', '/2022'),
    ('2023', '/bestof'),
    ('2024', '/index'),
    ('2025', '/future'),
    ('Archives', '/in_my_life'),
    ('2016', '/year2016'),
]

SKIPPED_EXTENSIONS = (
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.svg', '.webp',
    '.css', '.js', '.pdf', '.zip', '.mp4', '.mp3', '.xml', '.json',
)


def normalize_url(url: str) -> str:
    """Drop the fragment and any trailing slash"""
    url, _ = urldefrag(url.strip())
    return url.rstrip('/')


def url_path(url: str) -> str:
    path = urlparse(url).path.rstrip('/')
    return path or '/'


@dataclass
class LinkInfo:
    url: str
    path: str
    is_internal: bool
    is_years_page: bool
    is_year_link: bool
    is_month_link: bool
    is_on_years_page: bool
    is_valid_year_route: bool
    is_thematic_page: bool
    is_project_page: bool
    is_gallery_link: bool

    @property
    def is_special_page(self) -> bool:
        return (
            self.is_years_page
            or self.is_valid_year_route
            or self.is_thematic_page
            or self.is_project_page
        )


class UrlFilter:
    """Classify discovered links and decide which ones the crawler follows"""

    def __init__(self, base_url: str, config: Optional[CrawlConfig] = None):
        self.config = config or CrawlConfig()
        parsed = urlparse(base_url)
        self.base_origin = f"{parsed.scheme}://{parsed.netloc}".lower()

    def is_internal(self, url: str) -> bool:
        parsed = urlparse(url)
        return f"{parsed.scheme}://{parsed.netloc}".lower() == self.base_origin

    def is_thematic_path(self, path: str) -> bool:
        return path in self.config.thematic_paths

    def is_project_path(self, path: str) -> bool:
        return path in self.config.project_paths

    def classify(self, link_url: str, current_page_url: str) -> LinkInfo:
        """Pure route-shape predicates over the link's path"""
        url = normalize_url(link_url)
        path = url_path(url)
        return LinkInfo(
            url=url,
            path=path,
            is_internal=self.is_internal(url),
            is_years_page=path == YEARS_PAGE,
            is_year_link=bool(YEAR_LINK.match(path)),
            is_month_link=bool(MONTH_LINK.match(path)),
            is_on_years_page=url_path(current_page_url) == YEARS_PAGE,
            is_valid_year_route=bool(VALID_YEAR_ROUTE.match(path)),
            is_thematic_page=self.is_thematic_path(path),
            is_project_page=self.is_project_path(path),
            is_gallery_link=bool(GALLERY_LINK.match(path)),
        )

    def should_follow(self, info: LinkInfo, depth: int, visited: Collection[str]) -> bool:
        """Follow decision for a link found on a page crawled at `depth`"""
        if not info.is_internal or info.url in visited:
            return False
        return (
            info.is_years_page
            or info.is_year_link
            or info.is_month_link
            or depth == 0
            or (info.is_on_years_page and info.is_valid_year_route)
            or info.is_thematic_page
            or (self.config.follow_gallery_links and info.is_gallery_link)
        )

    def extract_links(self, html: str, page_url: str) -> List[Link]:
        """Collect anchors from the page plus the synthetic year links"""
        links: List[Link] = []
        seen = set()

        soup = BeautifulSoup(html or '', 'html.parser')
        for anchor in soup.find_all('a', href=True):
            href = anchor['href'].strip()
            if not href or href.startswith(('mailto:', 'tel:', 'javascript:')):
                continue

            target, _ = urldefrag(urljoin(page_url, href))
            absolute_url = normalize_url(target)
            parsed = urlparse(absolute_url)
            if parsed.scheme not in ('http', 'https') or not parsed.netloc:
                continue
            if parsed.path.lower().endswith(SKIPPED_EXTENSIONS):
                continue
            if absolute_url in seen:
                continue

            seen.add(absolute_url)
            links.append(Link(url=absolute_url, text=anchor.get_text(strip=True), href=target))

        if url_path(page_url) == YEARS_PAGE:
            origin = urlparse(page_url)
            for label, route in YEAR_ROUTES:
                year_url = f"{origin.scheme}://{origin.netloc}{route}"
                if year_url not in seen:
                    seen.add(year_url)
                    links.append(Link(url=year_url, text=label, href=year_url))

        return links
