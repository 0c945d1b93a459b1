"""
Heuristic extraction of titles, text and hiking metadata from rendered pages

Every stage is a plain function over text (or over the parsed DOM for the
region and project stages) so it can be tested and replaced on its own.
The pipeline in ContentExtractor guards each stage and falls back to the
stage's default value instead of failing the crawl.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TypeVar
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .aggregator import FRENCH_MONTHS, french_month_to_number
from .config import CrawlConfig
from .models import LoadedPage, PageMetadata
from .url_filter import GALLERY_LINK, MONTH_LINK, url_path

logger = logging.getLogger(__name__)

T = TypeVar('T')

_MONTH_PATTERN = r'janvier|f[ée]vrier|mars|avril|mai|juin|juillet|ao[ûu]t|septembre|octobre|novembre|d[ée]cembre'
LONG_DATE = re.compile(rf'\b(\d{{1,2}})(?:er)?\s*({_MONTH_PATTERN})\s*(\d{{4}})\b', re.IGNORECASE)
PATH_DATE = re.compile(r'/(20\d{2})[/-](\d{1,2})(?=[/-]|$)')
ALTITUDE = re.compile(
    r'(?<![\d,.])(\d{1,2}[\s\u00a0\u202f,.]\d{3}|\d{3,4})\s?m(?:[èe]tres?)?(?![^\W\d_])'
)

# keywords match as substrings anchored at a word start
FEATURE_KEYWORDS: Dict[str, List[str]] = {
    'lacs': [r'\blac(?!et)', r'\bétang', r'\blake'],
    'sommets': [r'\bsommet', r'\bpics?\b', r'\bpointe', r'\baiguille', r'\bcrête', r'\bsummit'],
    'glaciers': [r'\bglacier', r'\bnévé', r'\bsérac', r'\bmer de glace'],
}

_CAP = r"[A-ZÉÈÊÀÂÎÔÛÇ][\w'’\-]*"
_JOIN = r"\s+(?:(?:de\s+la|de|du|des|la|le|les)\s+|d['’]|l['’])?"
_PLACE = rf"{_CAP}(?:{_JOIN}{_CAP})*"
ANCHORED_LOCATION = re.compile(
    r"(?i:\b(?:dans|au|aux|près|sur|vers|depuis)\s+)"
    r"(?P<phrase>(?i:(?:la|le|les)\s+|l['’])?"
    r"(?i:vallée|pied|massif|col|lac|refuge|village|région|hauteurs|sommet|cirque|plateau|val)\s+"
    rf"(?i:(?:de\s+la|de|du|des)\s+|d['’]|l['’])?{_PLACE})"
)
CAPITALIZED_PHRASE = re.compile(rf"\b{_CAP}(?:{_JOIN}{_CAP})+")
PLACE_LINE = re.compile(rf"^{_PLACE}$")
PLACE_NOUNS = re.compile(r'\b(?:vallée|lac|col|mont|pic|refuge|massif|aiguille|glacier|val)\b', re.IGNORECASE)

NOISE_PHRASES = [
    'retour aux galeries',
    'retour à la galerie',
    'retour',
    'accueil',
    'menu',
]
NON_PLACE_WORDS = {
    'le', 'la', 'les', 'un', 'une', 'des', 'du', 'de', 'je', 'il', 'elle', 'on', 'nous',
    'vous', 'ils', 'ce', 'cette', 'ces', 'mon', 'ma', 'mes', 'après', 'avant', 'puis',
    'retour', 'galerie', 'galeries', 'photos', 'photo', 'description', 'date', 'altitude',
    'accueil', 'menu', 'best', 'hiking', 'gallery',
} | set(FRENCH_MONTHS)

DESCRIPTION_SELECTORS = '.description, .gallery-description, #description, [class*="description"]'
HIKE_VOCABULARY = ('description', 'randonnée', 'ascension')
ERROR_WORDS = ('erreur', 'error', '404', 'introuvable', 'not found')
PROJECT_CARD_SELECTORS = ['.project-card', '.project', '.projet', '.card', 'article']
STRIPPED_TAGS = ['script', 'style', 'noscript', 'nav', 'header', 'footer', 'aside']


@dataclass
class ExtractedContent:
    title: str
    content: str
    metadata: PageMetadata = field(default_factory=PageMetadata)


def _collapse(text: str) -> str:
    return re.sub(r'\s+', ' ', text or '').strip()


def clean_title(title: str, suffixes: Optional[List[str]] = None) -> str:
    """Strip site boilerplate suffixes from a page title"""
    title = _collapse(title)
    suffixes = suffixes if suffixes is not None else CrawlConfig().title_suffixes
    changed = True
    while changed:
        changed = False
        for suffix in suffixes:
            if title.lower().endswith(suffix.lower()):
                title = title[:-len(suffix)].rstrip(' -–|')
                changed = True
    return title.strip()


def parse_date(text: str) -> Optional[str]:
    """First French long date in the text, as 'D mois YYYY'"""
    for match in LONG_DATE.finditer(text or ''):
        day = int(match.group(1))
        month = french_month_to_number(match.group(2))
        if month is None or not 1 <= day <= 31:
            continue
        return f"{day} {FRENCH_MONTHS[month - 1]} {match.group(3)}"
    return None


def parse_date_from_path(path: str) -> Optional[str]:
    """Year and month taken from the URL, assuming the 15th"""
    match = PATH_DATE.search(path or '')
    if not match:
        return None
    month = int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return f"15 {FRENCH_MONTHS[month - 1]} {match.group(1)}"


def parse_altitude(*texts: str, min_altitude: int = 100, max_altitude: int = 9000) -> Optional[int]:
    """Highest plausible altitude mentioned in the texts"""
    values = []
    for text in texts:
        for match in ALTITUDE.finditer(text or ''):
            value = int(re.sub(r'\D', '', match.group(1)))
            if min_altitude <= value <= max_altitude:
                values.append(value)
    return max(values) if values else None


def tag_features(text: str) -> List[str]:
    lowered = (text or '').lower()
    return sorted(
        tag for tag, patterns in FEATURE_KEYWORDS.items()
        if any(re.search(pattern, lowered) for pattern in patterns)
    )


def clean_location(text: Optional[str]) -> Optional[str]:
    """Remove navigation noise from a location candidate"""
    if not text:
        return None
    cleaned = text
    for phrase in NOISE_PHRASES:
        cleaned = re.sub(rf'\b{re.escape(phrase)}\b', ' ', cleaned, flags=re.IGNORECASE)
    cleaned = _collapse(cleaned).strip(' ,.;:-–|')
    cleaned = re.sub(r'^(?:la|le|les)\s+|^l[\'’]', '', cleaned, flags=re.IGNORECASE)
    return cleaned if len(cleaned) >= 2 else None


def _looks_like_place(phrase: str) -> bool:
    first_word = re.split(r"[\s'’\-]", phrase, maxsplit=1)[0].lower()
    return first_word not in NON_PLACE_WORDS and not re.search(r'\d', phrase)


def parse_location(text: str) -> Optional[str]:
    """Preposition-anchored place phrase, else a capitalized multi-word phrase"""
    match = ANCHORED_LOCATION.search(text or '')
    if match:
        location = clean_location(match.group('phrase'))
        if location:
            return location

    for match in CAPITALIZED_PHRASE.finditer(text or ''):
        phrase = match.group(0)
        if _looks_like_place(phrase):
            location = clean_location(phrase)
            if location:
                return location
    return None


def location_from_regions(soup: BeautifulSoup) -> Optional[str]:
    """Place-like lines found in footer, nav and main regions"""
    candidates = set()
    for region in soup.select('footer, nav, main'):
        for line in region.get_text('\n').splitlines():
            line = _collapse(line)
            if not 2 <= len(line) <= 60 or not PLACE_LINE.match(line):
                continue
            if ' ' not in line and not PLACE_NOUNS.search(line):
                continue
            if not _looks_like_place(line):
                continue
            location = clean_location(line)
            if location:
                candidates.add(location)
    if not candidates:
        return None
    return ', '.join(sorted(candidates)[:3])


def _first_text(element, selectors: str) -> str:
    found = element.select_one(selectors)
    return _collapse(found.get_text(' ')) if found else ''


def parse_projects(soup: BeautifulSoup, page_url: str = '') -> List[Dict[str, str]]:
    """Project cards as {title, date, description, image} records"""
    cards = []
    for selector in PROJECT_CARD_SELECTORS:
        cards = soup.select(selector)
        if cards:
            break

    projects = []
    for card in cards:
        title = _first_text(card, 'h1, h2, h3, h4, .title, .project-title')
        if not title:
            continue

        date = ''
        time_tag = card.find('time')
        if time_tag:
            date = _collapse(time_tag.get_text(' ')) or time_tag.get('datetime', '')
        if not date:
            date = _first_text(card, '.date, .project-date')
        if not date:
            date = parse_date(card.get_text(' ')) or ''

        description = _first_text(card, '.description, .project-description')
        if not description:
            for paragraph in card.find_all('p'):
                text = _collapse(paragraph.get_text(' '))
                if text and text != date:
                    description = text
                    break

        image = ''
        img = card.find('img')
        if img and img.get('src'):
            image = urljoin(page_url, img['src'])

        projects.append({
            'title': title,
            'date': date,
            'description': description,
            'image': image,
        })
    return projects


def _gallery_text(soup: BeautifulSoup) -> str:
    """Description block, else the first paragraph that reads like a hike"""
    block = soup.select_one(DESCRIPTION_SELECTORS)
    if block:
        text = _collapse(block.get_text(' '))
        if text:
            return text

    for paragraph in soup.find_all('p'):
        text = _collapse(paragraph.get_text(' '))
        lowered = text.lower()
        if any(word in lowered for word in HIKE_VOCABULARY) and not any(word in lowered for word in ERROR_WORDS):
            return text
    return ''


class ContentExtractor:
    """Turn a rendered page into title, content and metadata"""

    def __init__(self, config: Optional[CrawlConfig] = None):
        self.config = config or CrawlConfig()

    def _stage(self, name: str, url: str, func: Callable[[], T], default: T) -> T:
        try:
            return func()
        except Exception as e:
            logger.warning(f"Extraction stage '{name}' failed for {url}: {e}")
            return default

    def extract(self, page: LoadedPage) -> ExtractedContent:
        """Best-effort extraction; never raises"""
        path = url_path(page.url)
        metadata = PageMetadata(path=path)

        try:
            soup = BeautifulSoup(page.html or '', 'html.parser')
        except Exception as e:
            logger.warning(f"Could not parse {page.url}: {e}")
            return ExtractedContent(title=clean_title(page.title, self.config.title_suffixes), content='', metadata=metadata)

        raw_title = page.title or (soup.title.get_text() if soup.title else '') or _first_text(soup, 'h1')
        title = self._stage('title', page.url, lambda: clean_title(raw_title, self.config.title_suffixes), raw_title or '')

        region_location = self._stage('regions', page.url, lambda: location_from_regions(soup), None)
        metadata.photo_count = self._stage('photos', page.url, lambda: len(soup.find_all('img')), 0)

        is_month_index = bool(MONTH_LINK.match(path))
        metadata.is_thematic_page = path in self.config.thematic_paths
        metadata.is_project_page = path in self.config.project_paths
        has_description = self._stage('gallery', page.url, lambda: soup.select_one(DESCRIPTION_SELECTORS) is not None, False)
        metadata.is_gallery_page = (
            not metadata.is_project_page
            and not is_month_index
            and (bool(GALLERY_LINK.match(path)) or has_description)
        )

        gallery_text = ''
        if metadata.is_gallery_page:
            gallery_text = self._stage('description', page.url, lambda: _gallery_text(soup), '')

        for tag in soup(STRIPPED_TAGS):
            tag.decompose()
        body_text = self._stage('body', page.url, lambda: _collapse(soup.get_text(' ')), '')

        if metadata.is_project_page:
            projects = self._stage('projects', page.url, lambda: parse_projects(soup, page.url), [])
            metadata.projects_count = len(projects)
            content = json.dumps(projects, ensure_ascii=False)
        else:
            content = gallery_text or body_text

        full_text = f"{title} {body_text}"
        if not is_month_index:
            metadata.date = self._stage(
                'date', page.url,
                lambda: parse_date(full_text) or parse_date_from_path(path),
                None,
            )

        prose = '' if metadata.is_project_page else content
        metadata.altitude = self._stage(
            'altitude', page.url,
            lambda: parse_altitude(
                prose, title,
                min_altitude=self.config.min_altitude,
                max_altitude=self.config.max_altitude,
            ),
            None,
        )
        metadata.features = self._stage('features', page.url, lambda: tag_features(full_text), [])
        metadata.location = self._stage(
            'location', page.url,
            lambda: parse_location(prose) or parse_location(body_text),
            None,
        ) or region_location

        return ExtractedContent(title=title, content=content, metadata=metadata)
