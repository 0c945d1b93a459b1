"""
Data models for the crawler and the document store
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class StoreState(Enum):
    """Loading state of a persisted document store"""
    EMPTY = "empty"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class UrlState(Enum):
    """Per-URL crawl state"""
    PENDING = "pending"
    LOADING = "loading"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class LoadedPage:
    """Rendered page returned by a page loader"""
    url: str
    html: str
    title: str = ''


@dataclass
class Link:
    """Discovered link; `url` is normalized, `href` is the absolute address to load"""
    url: str
    text: str = ''
    href: str = ''


@dataclass
class PageMetadata:
    """Structured facts extracted from one page"""
    date: Optional[str] = None
    altitude: Optional[int] = None
    features: List[str] = field(default_factory=list)
    location: Optional[str] = None
    is_project_page: bool = False
    projects_count: int = 0
    is_gallery_page: bool = False
    is_thematic_page: bool = False
    photo_count: int = 0
    path: str = ''

    def to_dict(self) -> Dict:
        return {
            'date': self.date,
            'altitude': self.altitude,
            'features': list(self.features),
            'location': self.location,
            'isProjectPage': self.is_project_page,
            'projectsCount': self.projects_count,
            'isGalleryPage': self.is_gallery_page,
            'isThematicPage': self.is_thematic_page,
            'photoCount': self.photo_count,
            'path': self.path,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'PageMetadata':
        data = data or {}
        altitude = data.get('altitude')
        return cls(
            date=data.get('date') or None,
            altitude=int(altitude) if isinstance(altitude, (int, float)) else None,
            features=list(data.get('features') or []),
            location=data.get('location') or None,
            is_project_page=bool(data.get('isProjectPage', False)),
            projects_count=int(data.get('projectsCount') or 0),
            is_gallery_page=bool(data.get('isGalleryPage', False)),
            is_thematic_page=bool(data.get('isThematicPage', False)),
            photo_count=int(data.get('photoCount') or 0),
            path=data.get('path') or '',
        )


@dataclass
class Page:
    """One crawled document"""
    url: str
    title: str
    content: str
    metadata: PageMetadata = field(default_factory=PageMetadata)

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization"""
        return {
            'url': self.url,
            'title': self.title,
            'content': self.content,
            'metadata': self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Page':
        return cls(
            url=data['url'],
            title=data.get('title') or '',
            content=data.get('content') or '',
            metadata=PageMetadata.from_dict(data.get('metadata')),
        )


def _counts_to_json(counts: Dict[int, int]) -> Dict[str, int]:
    return {str(key): count for key, count in counts.items()}


def _counts_from_json(data: Optional[Dict]) -> Dict[int, int]:
    return {int(key): int(count) for key, count in (data or {}).items()}


@dataclass
class SiteStats:
    """Site-wide statistics, always derived from the page list"""
    total_pages: int = 0
    total_outings: int = 0
    thematic_pages: int = 0
    outings_by_year: Dict[int, int] = field(default_factory=dict)
    outings_by_month: Dict[int, Dict[int, int]] = field(default_factory=dict)
    outings_by_feature: Dict[str, List[str]] = field(default_factory=dict)
    total_photos: int = 0
    photos_by_year: Dict[int, int] = field(default_factory=dict)
    photos_by_month: Dict[int, Dict[int, int]] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'totalPages': self.total_pages,
            'totalOutings': self.total_outings,
            'thematicPages': self.thematic_pages,
            'outingsByYear': _counts_to_json(self.outings_by_year),
            'outingsByMonth': {str(year): _counts_to_json(months) for year, months in self.outings_by_month.items()},
            'outingsByFeature': {tag: list(urls) for tag, urls in self.outings_by_feature.items()},
            'totalPhotos': self.total_photos,
            'photosByYear': _counts_to_json(self.photos_by_year),
            'photosByMonth': {str(year): _counts_to_json(months) for year, months in self.photos_by_month.items()},
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'SiteStats':
        data = data or {}
        return cls(
            total_pages=int(data.get('totalPages') or 0),
            total_outings=int(data.get('totalOutings') or 0),
            thematic_pages=int(data.get('thematicPages') or 0),
            outings_by_year=_counts_from_json(data.get('outingsByYear')),
            outings_by_month={
                int(year): _counts_from_json(months)
                for year, months in (data.get('outingsByMonth') or {}).items()
            },
            outings_by_feature={tag: list(urls) for tag, urls in (data.get('outingsByFeature') or {}).items()},
            total_photos=int(data.get('totalPhotos') or 0),
            photos_by_year=_counts_from_json(data.get('photosByYear')),
            photos_by_month={
                int(year): _counts_from_json(months)
                for year, months in (data.get('photosByMonth') or {}).items()
            },
        )


@dataclass
class DocumentStore:
    """Pages plus derived statistics; the unit of persistence"""
    pages: List[Page] = field(default_factory=list)
    site_stats: SiteStats = field(default_factory=SiteStats)

    def __post_init__(self):
        self._urls = {page.url for page in self.pages}

    def has_url(self, url: str) -> bool:
        return url in self._urls

    def add_page(self, page: Page) -> bool:
        """Append a page unless its URL is already stored"""
        if page.url in self._urls:
            return False
        self.pages.append(page)
        self._urls.add(page.url)
        return True

    def refresh_stats(self) -> SiteStats:
        """Recompute site statistics from scratch"""
        from .aggregator import aggregate

        self.site_stats = aggregate(self.pages)
        return self.site_stats

    def to_dict(self) -> Dict:
        return {
            'pages': [page.to_dict() for page in self.pages],
            'siteStats': self.site_stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'DocumentStore':
        store = cls(site_stats=SiteStats.from_dict(data.get('siteStats')))
        for item in data.get('pages') or []:
            if item.get('url'):
                store.add_page(Page.from_dict(item))
        return store
