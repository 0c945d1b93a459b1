"""
Site-wide statistics computed from the crawled pages
"""

import re
import unicodedata
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, Optional

from .models import Page, SiteStats


FRENCH_MONTHS = [
    'janvier', 'février', 'mars', 'avril', 'mai', 'juin',
    'juillet', 'août', 'septembre', 'octobre', 'novembre', 'décembre',
]


def _strip_accents(text: str) -> str:
    return ''.join(
        char for char in unicodedata.normalize('NFD', text)
        if unicodedata.category(char) != 'Mn'
    )


_MONTH_NUMBERS: Dict[str, int] = {}
for _index, _name in enumerate(FRENCH_MONTHS, start=1):
    _MONTH_NUMBERS[_name] = _index
    _MONTH_NUMBERS[_strip_accents(_name)] = _index

_DATE_PARTS = re.compile(r'^\s*(\d{1,2})(?:er)?\s+(\S+)\s+(\d{4})\s*$', re.IGNORECASE)


def french_month_to_number(name: str) -> Optional[int]:
    """'janvier' -> 1, accents optional; None for anything else"""
    if not name:
        return None
    return _MONTH_NUMBERS.get(name.strip().lower()) or _MONTH_NUMBERS.get(_strip_accents(name.strip().lower()))


def month_name(month: int) -> str:
    return FRENCH_MONTHS[month - 1]


def parse_french_date(text: Optional[str]) -> Optional[date]:
    """Parse a stored 'D mois YYYY' date"""
    if not text:
        return None
    match = _DATE_PARTS.match(text)
    if not match:
        return None
    month = french_month_to_number(match.group(2))
    if month is None:
        return None
    try:
        return date(int(match.group(3)), month, int(match.group(1)))
    except ValueError:
        return None


def is_outing(page: Page) -> bool:
    return page.metadata.is_gallery_page and parse_french_date(page.metadata.date) is not None


def aggregate(pages: Iterable[Page]) -> SiteStats:
    """Build site statistics from the page list; pure and idempotent"""
    pages = list(pages)
    by_year: Dict[int, int] = defaultdict(int)
    by_month: Dict[int, Dict[int, int]] = defaultdict(lambda: defaultdict(int))
    by_feature: Dict[str, list] = defaultdict(list)
    photos_by_year: Dict[int, int] = defaultdict(int)
    photos_by_month: Dict[int, Dict[int, int]] = defaultdict(lambda: defaultdict(int))
    total_outings = 0
    thematic_pages = 0
    total_photos = 0

    for page in pages:
        if page.metadata.is_thematic_page:
            thematic_pages += 1

        photos = page.metadata.photo_count
        total_photos += photos
        page_date = parse_french_date(page.metadata.date)
        if page_date is not None and photos > 0:
            photos_by_year[page_date.year] += photos
            photos_by_month[page_date.year][page_date.month] += photos

        # photos count on any dated page, outings only on gallery pages
        if not page.metadata.is_gallery_page or page_date is None:
            continue

        total_outings += 1
        by_year[page_date.year] += 1
        by_month[page_date.year][page_date.month] += 1
        for tag in page.metadata.features:
            by_feature[tag].append(page.url)

    return SiteStats(
        total_pages=len(pages),
        total_outings=total_outings,
        thematic_pages=thematic_pages,
        outings_by_year=dict(sorted(by_year.items())),
        outings_by_month={
            year: dict(sorted(months.items()))
            for year, months in sorted(by_month.items())
        },
        outings_by_feature=dict(sorted(by_feature.items())),
        total_photos=total_photos,
        photos_by_year=dict(sorted(photos_by_year.items())),
        photos_by_month={
            year: dict(sorted(months.items()))
            for year, months in sorted(photos_by_month.items())
        },
    )
