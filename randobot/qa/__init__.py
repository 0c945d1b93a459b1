"""
Question answering module for the hiking gallery assistant

Contains the intent cascade, criteria search, answer formatting and the
generative fallback.
"""

from .config import QueryConfig
from .intents import DEFAULT_INTENTS, Intent, IntentContext, SearchResult
from .llm import GeminiGenerator, GenerativeFallback, TextGenerator
from .resolver import Answer, QueryResolver
from .search import HikeCriteria, extract_keywords, keyword_search, search_hikes

__all__ = [
    # Resolver
    'QueryResolver',
    'Answer',
    'SearchResult',

    # Intents
    'Intent',
    'IntentContext',
    'DEFAULT_INTENTS',

    # Search
    'HikeCriteria',
    'search_hikes',
    'keyword_search',
    'extract_keywords',

    # Generative fallback
    'TextGenerator',
    'GeminiGenerator',
    'GenerativeFallback',

    # Configuration
    'QueryConfig',
]
