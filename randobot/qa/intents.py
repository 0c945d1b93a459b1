"""
Ordered intent matchers for French questions about the gallery

Each Intent pairs a predicate over the raw question with a handler that
renders the answer from the document store. The resolver evaluates them in
list order and stops at the first predicate that matches and whose handler
returns a result; a handler returning [] lets the cascade continue.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from ..crawl.aggregator import french_month_to_number, is_outing, month_name, parse_french_date
from ..crawl.content_extractor import LONG_DATE, parse_date
from ..crawl.models import DocumentStore, Page
from .config import QueryConfig
from .formatting import format_hike_listing, format_project_listing, plural
from .search import HikeCriteria, extract_keywords, keyword_search, search_hikes

logger = logging.getLogger(__name__)

_MONTHS = r'janvier|f[ée]vrier|mars|avril|mai|juin|juillet|ao[ûu]t|septembre|octobre|novembre|d[ée]cembre'

PAGE_COUNT = re.compile(r'combien.*pages|nombre.*pages', re.IGNORECASE)
PROJECTS = re.compile(r'\b(projets?|futures?|prévu(?:e|s|es)?)\b', re.IGNORECASE)
ASKING_COUNT = re.compile(r'\b(combien|nombre)\b', re.IGNORECASE)
OUTING = re.compile(r'\b(sorties?|randonn[ée]es?|balades?|excursions?)\b', re.IGNORECASE)
YEAR = re.compile(r'\b(20\d{2})\b')
MONTH = re.compile(rf'\b({_MONTHS})\b', re.IGNORECASE)
PHOTOS = re.compile(r'\bphotos?\b', re.IGNORECASE)
TIME_OF_DAY = re.compile(r'quelle\s+heure|heure\s+est[- ]il', re.IGNORECASE)
ALTITUDE = re.compile(
    r'(?:sorties?|randonn[ée]es?)\s*'
    r'(?:à plus de|de plus de|au[- ]dessus de|au[- ]delà de|à|>)\s*'
    r'(\d{1,2}[ ,.\u00a0\u202f]?\d{3})\s*m',
    re.IGNORECASE,
)
HIKING_VOCABULARY = re.compile(
    r'randonn|sortie|sommet|\blacs?\b|glacier|montagne|altitude|photo|galerie|projet|'
    r'\bcols?\b|refuge|balade|alpin|\bmont\b|\bpics?\b|vallée|sentier|itinéraire|marche|neige|page',
    re.IGNORECASE,
)

GENERAL_KNOWLEDGE = [
    (
        re.compile(r"\bqui\s+(?:es[- ]tu|êtes[- ]vous)\b|\bcomment\s+t['’]appelles[- ]tu\b", re.IGNORECASE),
        "Je m'appelle Mike. Je suis l'assistant de ce site de randonnées : "
        "posez-moi vos questions sur les sorties, les sommets, les lacs et les glaciers.",
    ),
    (
        re.compile(r'\bvictor\s+hugo\b', re.IGNORECASE),
        "Victor Hugo (1802-1885) est un écrivain, poète et dramaturge français, "
        "figure majeure du romantisme, auteur notamment des Misérables et de Notre-Dame de Paris.",
    ),
    (
        re.compile(r'\bmarie\s+curie\b', re.IGNORECASE),
        "Marie Curie (1867-1934) est une physicienne et chimiste, pionnière de l'étude de la radioactivité "
        "et première personne à avoir reçu deux prix Nobel, en physique (1903) et en chimie (1911).",
    ),
]


@dataclass
class SearchResult:
    """One answer candidate produced by a resolver stage"""
    content: str
    similarity: float = 1.0
    intent: str = ''
    sources: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'content': self.content,
            'similarity': self.similarity,
            'intent': self.intent,
            'sources': list(self.sources),
        }


@dataclass
class IntentContext:
    store: DocumentStore
    config: QueryConfig
    now: Callable[[], datetime]


@dataclass
class Intent:
    name: str
    predicate: Callable[[str], bool]
    handler: Callable[[str, IntentContext], List[SearchResult]]


def _result(content: str, intent: str, sources: Optional[List[str]] = None, similarity: float = 1.0) -> List[SearchResult]:
    return [SearchResult(content=content, similarity=similarity, intent=intent, sources=sources or [])]


def parse_altitude_threshold(query: str) -> Optional[int]:
    match = ALTITUDE.search(query)
    if not match:
        return None
    return int(re.sub(r'\D', '', match.group(1)))


# Page count

def handle_page_count(query: str, ctx: IntentContext) -> List[SearchResult]:
    total = len(ctx.store.pages)
    thematic = sum(1 for page in ctx.store.pages if page.metadata.is_thematic_page)
    return _result(
        f"Le site contient {total} pages au total, dont {thematic} pages thématiques.",
        'page_count',
    )


# Projects

def find_projects_page(store: DocumentStore) -> Optional[Page]:
    for page in store.pages:
        if page.metadata.is_project_page:
            return page
    return None


def load_projects(page: Page) -> List[Dict[str, str]]:
    try:
        projects = json.loads(page.content or '[]')
    except ValueError:
        logger.warning(f"Projects page {page.url} does not hold a project list")
        return []
    if not isinstance(projects, list):
        return []
    return [project for project in projects if isinstance(project, dict) and project.get('title')]


def _project_sort_key(project: Dict[str, str]):
    text = project.get('date') or ''
    parsed = parse_french_date(text)
    if parsed is None:
        match = LONG_DATE.search(text)
        if match:
            month = french_month_to_number(match.group(2))
            try:
                parsed = date(int(match.group(3)), month, int(match.group(1)))
            except (TypeError, ValueError):
                parsed = None
    if parsed is None:
        try:
            parsed = date.fromisoformat(text[:10])
        except ValueError:
            parsed = None
    return (parsed is None, parsed or date.max)


def handle_projects(query: str, ctx: IntentContext) -> List[SearchResult]:
    page = find_projects_page(ctx.store)
    projects = sorted(load_projects(page), key=_project_sort_key) if page else []
    if not projects:
        return _result("Je n'ai pas trouvé de projets.", 'projects')

    sources = [page.url]
    if ASKING_COUNT.search(query):
        count = len(projects)
        return _result(f"Il y a {count} {plural(count, 'projet')} {plural(count, 'prévu')}.", 'projects', sources)
    return _result(format_project_listing(projects), 'projects', sources)


# Altitude

def handle_altitude(query: str, ctx: IntentContext) -> List[SearchResult]:
    threshold = parse_altitude_threshold(query)
    hikes = search_hikes(ctx.store.pages, HikeCriteria(min_altitude=threshold))
    if not hikes:
        return _result(f"Aucune sortie trouvée au-dessus de {threshold}m.", 'altitude')

    sources = [hike.url for hike in hikes]
    count = len(hikes)
    if ASKING_COUNT.search(query):
        return _result(f"Il y a {count} {plural(count, 'sortie')} à plus de {threshold}m.", 'altitude', sources)
    return _result(
        format_hike_listing(f"🏔️ Sorties à plus de {threshold}m :", hikes, ctx.config.description_max_length),
        'altitude',
        sources,
    )


# Photos

def is_photo_query(query: str) -> bool:
    return bool(PHOTOS.search(query) and YEAR.search(query))


def handle_photos(query: str, ctx: IntentContext) -> List[SearchResult]:
    day = parse_date(query)
    if day:
        pages = [page for page in ctx.store.pages if page.metadata.date == day]
        if not pages:
            return _result(f"Aucune sortie trouvée le {day}.", 'photos')
        count = sum(page.metadata.photo_count for page in pages)
        return _result(
            f"Il y a {count} {plural(count, 'photo')} pour la sortie du {day}.",
            'photos',
            [page.url for page in pages],
        )

    year = int(YEAR.search(query).group(1))
    month_match = MONTH.search(query)
    month = french_month_to_number(month_match.group(1)) if month_match else None
    stats = ctx.store.site_stats
    if month:
        count = stats.photos_by_month.get(year, {}).get(month, 0)
        period = f"{month_name(month)} {year}"
    else:
        count = stats.photos_by_year.get(year, 0)
        period = str(year)

    sources = []
    for page in ctx.store.pages:
        page_date = parse_french_date(page.metadata.date)
        if page_date and page.metadata.photo_count and page_date.year == year and month in (None, page_date.month):
            sources.append(page.url)
    return _result(f"Il y a {count} {plural(count, 'photo')} en {period}.", 'photos', sources)


# Outings by year / month

def is_dated_outing_query(query: str) -> bool:
    return bool(OUTING.search(query) and YEAR.search(query))


def handle_outings_by_date(query: str, ctx: IntentContext) -> List[SearchResult]:
    year = int(YEAR.search(query).group(1))
    month_match = MONTH.search(query)
    month = french_month_to_number(month_match.group(1)) if month_match else None
    period = f"{month_name(month)} {year}" if month else str(year)
    stats = ctx.store.site_stats

    if ASKING_COUNT.search(query):
        if month:
            count = stats.outings_by_month.get(year, {}).get(month, 0)
        else:
            count = stats.outings_by_year.get(year, 0)
        return _result(f"Il y a {count} {plural(count, 'sortie')} en {period}.", 'outings_by_date')

    outings = []
    for page in ctx.store.pages:
        if not is_outing(page):
            continue
        outing_date = parse_french_date(page.metadata.date)
        if outing_date.year == year and (month is None or outing_date.month == month):
            outings.append(page)

    if not outings:
        return _result(f"Aucune sortie trouvée pour {period}.", 'outings_by_date')
    return _result(
        format_hike_listing(f"Voici les sorties pour {period} :", outings, ctx.config.description_max_length),
        'outings_by_date',
        [page.url for page in outings],
    )


# Time of day

def handle_time_of_day(query: str, ctx: IntentContext) -> List[SearchResult]:
    now = ctx.now()
    return _result(f"Il est {now.hour}h{now.minute:02d}.", 'time_of_day')


# General knowledge

def is_general_query(query: str) -> bool:
    return not HIKING_VOCABULARY.search(query)


def handle_general_knowledge(query: str, ctx: IntentContext) -> List[SearchResult]:
    for pattern, answer in GENERAL_KNOWLEDGE:
        if pattern.search(query):
            return _result(answer, 'general_knowledge')
    return []


# Keyword search

def handle_keyword_search(query: str, ctx: IntentContext) -> List[SearchResult]:
    keywords = extract_keywords(query)
    logger.debug(f"Keyword search for {keywords}")
    matches = keyword_search(
        ctx.store.pages,
        keywords,
        max_results=ctx.config.max_results,
        title_weight=ctx.config.title_weight,
    )
    if not matches:
        return []

    pages = [page for page, _, _ in matches]
    best_matched = matches[0][2]
    return _result(
        format_hike_listing(
            "Voici les sorties correspondant à votre recherche :",
            pages,
            ctx.config.description_max_length,
        ),
        'keyword_search',
        [page.url for page in pages],
        similarity=round(best_matched / len(keywords), 3),
    )


DEFAULT_INTENTS: List[Intent] = [
    Intent('page_count', lambda q: bool(PAGE_COUNT.search(q)), handle_page_count),
    Intent('projects', lambda q: bool(PROJECTS.search(q)), handle_projects),
    Intent('altitude', lambda q: bool(ALTITUDE.search(q)), handle_altitude),
    Intent('photos', is_photo_query, handle_photos),
    Intent('outings_by_date', is_dated_outing_query, handle_outings_by_date),
    Intent('time_of_day', lambda q: bool(TIME_OF_DAY.search(q)), handle_time_of_day),
    Intent('general_knowledge', is_general_query, handle_general_knowledge),
    Intent('keyword_search', lambda q: True, handle_keyword_search),
]
