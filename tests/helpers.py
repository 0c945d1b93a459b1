"""
Shared fakes and builders for the test suite
"""

from typing import Dict, List, Optional, Tuple

from randobot.crawl import DocumentStore, LoadedPage, Page, PageMetadata, normalize_url
from randobot.errors import BrowserLaunchError, PageLoadError

BASE_URL = "https://hikes.test"


class FakeLoader:
    """In-memory PageLoader keyed by normalized URL; `failures` counts failing load calls per URL

    `calls` records the normalized URL, `requested` the address actually passed in.
    """

    def __init__(
        self,
        pages: Dict[str, Tuple[str, str]],
        failures: Optional[Dict[str, int]] = None,
        launch_error: bool = False,
    ):
        self.pages = pages
        self.failures = dict(failures or {})
        self.launch_error = launch_error
        self.calls: List[Tuple[str, str]] = []
        self.requested: List[str] = []

    async def __aenter__(self):
        if self.launch_error:
            raise BrowserLaunchError("Could not launch browser: no chromium")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def load(self, url: str, wait_until: str, timeout_ms: int) -> LoadedPage:
        key = normalize_url(url)
        self.calls.append((key, wait_until))
        self.requested.append(url)
        if self.failures.get(key, 0) > 0:
            self.failures[key] -= 1
            raise PageLoadError(url, "timeout")
        if key not in self.pages:
            raise PageLoadError(url, "404")
        title, html = self.pages[key]
        return LoadedPage(url=url, html=html, title=title)

    def loaded_urls(self) -> List[str]:
        return [url for url, _ in self.calls]


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float):
        self.calls.append(seconds)


def sample_site() -> Dict[str, Tuple[str, str]]:
    """Five reachable pages plus links that must not be followed"""
    return {
        BASE_URL: (
            "Accueil | Hiking Gallery",
            '<html><body><h1>Mes randonnées</h1>'
            '<a href="/2024/lac-blanc">Lac Blanc</a>'
            '<a href="/mountain_flowers">Fleurs</a>'
            '<a href="/2024">2024</a>'
            '<a href="https://other.test/x">Ailleurs</a>'
            '<a href="/2024/lac-blanc#photos">Photos</a>'
            '<a href="/photo.jpg">Image</a>'
            '</body></html>',
        ),
        f"{BASE_URL}/2024/lac-blanc": (
            "Lac Blanc | Hiking Gallery",
            '<html><body><nav><a href="/">Retour aux galeries</a></nav>'
            '<h1>Lac Blanc</h1>'
            '<div class="description"><p>Randonnée au lac Blanc le 14 janvier 2024. '
            'Arrivée à 2 352 m face au glacier.</p></div>'
            '<a href="/2024/col-des-montets">Suivante</a>'
            '<img src="a.jpg"><img src="b.jpg">'
            '</body></html>',
        ),
        f"{BASE_URL}/mountain_flowers": (
            "Fleurs de montagne",
            '<html><body><h1>Fleurs</h1><a href="/2024">Année 2024</a></body></html>',
        ),
        f"{BASE_URL}/2024": (
            "2024",
            '<html><body><a href="/month/2024/1">Janvier</a>'
            '<a href="/2024/lac-blanc">Lac Blanc</a></body></html>',
        ),
        f"{BASE_URL}/month/2024/1": (
            "Janvier 2024",
            '<html><body><p>Sorties du 14 janvier 2024</p></body></html>',
        ),
    }


def make_page(
    slug: str,
    title: str,
    content: str = "",
    date: Optional[str] = None,
    altitude: Optional[int] = None,
    features: Optional[List[str]] = None,
    location: Optional[str] = None,
    gallery: bool = True,
    thematic: bool = False,
    project: bool = False,
    projects_count: int = 0,
    photo_count: int = 0,
) -> Page:
    return Page(
        url=f"{BASE_URL}/{slug}",
        title=title,
        content=content,
        metadata=PageMetadata(
            date=date,
            altitude=altitude,
            features=list(features or []),
            location=location,
            is_gallery_page=gallery,
            is_thematic_page=thematic,
            is_project_page=project,
            projects_count=projects_count,
            photo_count=photo_count,
            path=f"/{slug}",
        ),
    )


PROJECTS_JSON = (
    '[{"title": "Tour du Mont Blanc", "date": "12 juillet 2025", "description": "Huit jours de marche", "image": ""}, '
    '{"title": "Grand Paradis", "date": "3 mars 2025", "description": "Ski de randonnée", "image": ""}]'
)


def sample_store() -> DocumentStore:
    """Five outings, one thematic page and the projects page"""
    store = DocumentStore()
    pages = [
        make_page("2024/lac-blanc", "Lac Blanc", "Randonnée au lac Blanc face au glacier.",
                  date="14 janvier 2024", altitude=2352, features=["glaciers", "lacs"], location="lac Blanc", photo_count=12),
        make_page("2024/aiguillette", "Aiguillette des Houches", "Sommet facile en raquettes.",
                  date="20 janvier 2024", altitude=2285, features=["sommets"], location="Les Houches", photo_count=8),
        make_page("2024/dome-des-ecrins", "Dôme des Écrins", "Ascension du Dôme par le glacier Blanc.",
                  date="28 janvier 2024", altitude=4015, features=["glaciers", "sommets"], location="Écrins", photo_count=20),
        make_page("2024/lac-de-peyre", "Lac de Peyre", "Balade hivernale.",
                  date="3 février 2024", altitude=1800, features=["lacs"], location="Aravis", photo_count=5),
        make_page("2023/pointe-percee", "Pointe Percée", "Sommet des Aravis.",
                  date="15 janvier 2023", altitude=2750, features=["sommets"], location="Aravis", photo_count=10),
        make_page("mountain_flowers", "Fleurs de montagne", "Edelweiss et gentianes.", gallery=False, thematic=True, photo_count=30),
        make_page("projets", "Projets", PROJECTS_JSON, gallery=False, project=True, projects_count=2),
    ]
    for page in pages:
        store.add_page(page)
    store.refresh_stats()
    return store


class FakeGenerator:
    """TextGenerator replaying a list of texts or exceptions"""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def generate(self, prompt, max_tokens, temperature, stop=None):
        self.calls.append({'prompt': prompt, 'max_tokens': max_tokens, 'temperature': temperature, 'stop': stop})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
