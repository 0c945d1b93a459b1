"""
Criteria filtering and keyword search over crawled pages
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Tuple

from ..crawl.aggregator import parse_french_date
from ..crawl.models import Page


FRENCH_STOPWORDS = {
    'alors', 'au', 'aux', 'avec', 'avez', 'avoir', 'bien', 'ce', 'cela', 'celle', 'celles',
    'ces', 'cet', 'cette', 'ceux', 'chez', 'combien', 'comme', 'comment', 'dans', 'de', 'des',
    'donc', 'donne', 'donner', 'dont', 'du', 'elle', 'elles', 'en', 'est', 'et', 'être', 'fait',
    'faire', 'il', 'ils', 'je', 'la', 'le', 'les', 'leur', 'leurs', 'lui', 'ma', 'mais', 'me',
    'mes', 'moi', 'mon', 'ne', 'nous', 'on', 'ou', 'où', 'par', 'parle', 'parler', 'pas',
    'peux', 'peut', 'plus', 'pour', 'pourquoi', 'quand', 'que', 'quel', 'quelle', 'quelles',
    'quels', 'qui', 'quoi', 'sa', 'sans', 'se', 'ses', 'son', 'sont', 'sur', 'ta', 'te', 'tes',
    'toi', 'ton', 'tous', 'tout', 'toute', 'toutes', 'tu', 'un', 'une', 'vers', 'voici',
    'voila', 'voilà', 'vos', 'votre', 'vous', 'sais', 'savoir', 'dire', 'dis', 'avais',
    'était', 'étaient', 'ai', 'as', 'a', 'y', 'site', 'nos', 'ont', 'été', 'ici', 'oui', 'non',
}

CAPITALIZED_PHRASE = re.compile(r"[A-ZÉÈÊÀÂÎÔÛÇ][\w'’\-]+(?:\s+[A-ZÉÈÊÀÂÎÔÛÇ][\w'’\-]+)*")
LOWERCASE_WORD = re.compile(r"\b[a-zàâçéèêëîïôûùüÿœ][a-zàâçéèêëîïôûùüÿœ\-]{2,}\b")


@dataclass
class HikeCriteria:
    """Filters AND-combined by search_hikes; None means unconstrained"""
    min_altitude: Optional[int] = None
    max_altitude: Optional[int] = None
    features: List[str] = field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Optional[str] = None


def _matches(page: Page, criteria: HikeCriteria) -> bool:
    metadata = page.metadata

    if criteria.min_altitude is not None or criteria.max_altitude is not None:
        if metadata.altitude is None:
            return False
        if criteria.min_altitude is not None and metadata.altitude < criteria.min_altitude:
            return False
        if criteria.max_altitude is not None and metadata.altitude > criteria.max_altitude:
            return False

    if criteria.features and not all(tag in metadata.features for tag in criteria.features):
        return False

    if criteria.start_date is not None or criteria.end_date is not None:
        page_date = parse_french_date(metadata.date)
        if page_date is None:
            return False
        if criteria.start_date is not None and page_date < criteria.start_date:
            return False
        if criteria.end_date is not None and page_date > criteria.end_date:
            return False

    if criteria.location:
        if not metadata.location or criteria.location.lower() not in metadata.location.lower():
            return False

    return True


def search_hikes(pages: Iterable[Page], criteria: HikeCriteria) -> List[Page]:
    """Pages satisfying every provided criterion, in store order"""
    return [page for page in pages if _matches(page, criteria)]


def extract_keywords(query: str) -> List[str]:
    """Capitalized phrases and significant lowercase words, lowercased and deduplicated"""
    keywords = []
    for match in CAPITALIZED_PHRASE.finditer(query or ''):
        words = [word for word in match.group(0).split() if word.lower() not in FRENCH_STOPWORDS]
        if words:
            keywords.append(' '.join(words).lower())
    for match in LOWERCASE_WORD.finditer(query or ''):
        if match.group(0) not in FRENCH_STOPWORDS:
            keywords.append(match.group(0))

    seen = set()
    unique = []
    for keyword in keywords:
        if len(keyword) >= 3 and keyword not in seen:
            seen.add(keyword)
            unique.append(keyword)
    return unique


def score_page(page: Page, keywords: List[str], title_weight: int = 2) -> Tuple[int, int]:
    """(term-frequency score with title boost, number of keywords matched)"""
    title = (page.title or '').lower()
    content = '' if page.metadata.is_project_page else (page.content or '').lower()
    score = 0
    matched = 0
    for keyword in keywords:
        hits = content.count(keyword) + title.count(keyword) * title_weight
        if hits:
            matched += 1
            score += hits
    return score, matched


def keyword_search(
    pages: Iterable[Page],
    keywords: List[str],
    max_results: int = 5,
    title_weight: int = 2,
) -> List[Tuple[Page, int, int]]:
    """Pages with at least one hit, best first; ties keep store order"""
    if not keywords:
        return []

    scored = []
    seen_urls = set()
    for page in pages:
        if page.url in seen_urls:
            continue
        seen_urls.add(page.url)
        score, matched = score_page(page, keywords, title_weight)
        if score > 0:
            scored.append((page, score, matched))

    scored.sort(key=lambda item: item[1], reverse=True)
    return scored[:max_results]
