"""
Configuration settings for the crawler
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class CrawlConfig:
    """Configuration class for crawler settings"""
    # Traversal
    max_depth: int = 5
    max_retries: int = 3
    follow_gallery_links: bool = False

    # Navigation
    page_timeout_ms: int = 30000
    settle_delay: float = 1.0
    backoff_base_ms: int = 2000
    backoff_max_ms: int = 10000
    headless: bool = True

    # Site taxonomy
    thematic_paths: List[str] = field(default_factory=lambda: [
        '/mountain_flowers',
        '/mountain_animals',
        '/memories',
        '/dreams',
    ])
    project_paths: List[str] = field(default_factory=lambda: [
        '/projets',
        '/projects',
        '/future',
    ])
    title_suffixes: List[str] = field(default_factory=lambda: [
        '| Hiking Gallery',
        '- Hiking Gallery',
        '– Hiking Gallery',
        '| Galerie photos',
        '- Galerie photos',
        '| Randonnées',
        '- Randonnées',
    ])

    # Extraction
    min_altitude: int = 100
    max_altitude: int = 9000

    def backoff_ms(self, attempt: int) -> int:
        """Delay before the next attempt once `attempt` has failed"""
        return min(self.backoff_base_ms * 2 ** (attempt - 1), self.backoff_max_ms)
