"""
API module for the hiking gallery assistant

Contains the FastAPI app factory, models, routes and dependencies.
"""

from .app import create_app
from .config import settings
from .dependencies import AppState
from .exceptions import (
    CrawlInProgressError,
    DataNotLoadedError,
    EmptyMessageError,
    IndexingFailedError,
    MissingUrlError,
)
from .models import ChatRequest, ChatResponse, HealthResponse, IndexRequest, IndexResponse, StatsResponse

__all__ = [
    # App factory
    'create_app',

    # Configuration
    'settings',

    # Models
    'ChatRequest',
    'ChatResponse',
    'IndexRequest',
    'IndexResponse',
    'HealthResponse',
    'StatsResponse',

    # Exceptions
    'DataNotLoadedError',
    'EmptyMessageError',
    'MissingUrlError',
    'CrawlInProgressError',
    'IndexingFailedError',

    # Dependencies
    'AppState',
]
