"""
Query resolution cascade with generative fallback
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from ..crawl.models import DocumentStore, Page
from ..events import EventKind, EventTracker
from .config import QueryConfig
from .intents import DEFAULT_INTENTS, Intent, IntentContext, SearchResult
from .llm import GenerativeFallback, TextGenerator
from .search import HikeCriteria, search_hikes

logger = logging.getLogger(__name__)

ERROR_MESSAGE = (
    "Je suis désolé, une erreur s'est produite pendant la recherche. "
    "Pouvez-vous reformuler votre question ?"
)
NO_ANSWER_MESSAGE = "Je suis désolé, je n'ai pas trouvé d'information à ce sujet sur le site."


@dataclass
class Answer:
    text: str
    intent: str
    sources: List[str] = field(default_factory=list)
    used_fallback: bool = False

    def to_dict(self) -> Dict:
        return {
            'text': self.text,
            'intent': self.intent,
            'sources': list(self.sources),
            'used_fallback': self.used_fallback,
        }


class QueryResolver:
    """Answer French questions from a DocumentStore

    `search_content` runs the structural intents only and returns [] when
    nothing matched; `answer` adds the generative fallback on top.
    """

    def __init__(
        self,
        store: Optional[DocumentStore] = None,
        generator: Optional[TextGenerator] = None,
        config: Optional[QueryConfig] = None,
        events: Optional[EventTracker] = None,
        clock: Callable[[], datetime] = datetime.now,
        intents: Optional[List[Intent]] = None,
        fallback: Optional[GenerativeFallback] = None,
    ):
        self.store = store or DocumentStore()
        self.config = config or QueryConfig()
        self.events = events or EventTracker()
        self.clock = clock
        self.intents = list(intents) if intents is not None else list(DEFAULT_INTENTS)
        if fallback is None and generator is not None:
            fallback = GenerativeFallback(generator, self.config, self.events)
        self.fallback = fallback

    def set_store(self, store: DocumentStore):
        self.store = store

    def search_content(self, query: str, store: Optional[DocumentStore] = None) -> List[SearchResult]:
        """Structural resolution; [] means defer to the generative fallback"""
        query = (query or '').strip()
        if not query:
            return []

        context = IntentContext(store=store or self.store, config=self.config, now=self.clock)
        try:
            for intent in self.intents:
                if not intent.predicate(query):
                    continue
                results = intent.handler(query, context)
                if results:
                    self.events.emit(EventKind.INTENT_MATCHED, detail=intent.name)
                    return results
        except Exception as e:
            logger.error(f"Error resolving query '{query}': {e}", exc_info=True)
            return [SearchResult(content=ERROR_MESSAGE, similarity=0.0, intent='error')]

        self.events.emit(EventKind.NO_MATCH, detail=query)
        return []

    def search_hikes(self, criteria: HikeCriteria) -> List[Page]:
        return search_hikes(self.store.pages, criteria)

    async def answer(self, query: str, store: Optional[DocumentStore] = None) -> Answer:
        """Full cascade; always returns a French sentence"""
        results = self.search_content(query, store)
        if results:
            best = results[0]
            return Answer(text=best.content, intent=best.intent, sources=list(best.sources))

        if self.fallback is None:
            return Answer(text=NO_ANSWER_MESSAGE, intent='no_match')

        text, ok = await self.fallback.answer(query)
        return Answer(text=text, intent='generative' if ok else 'fallback_error', used_fallback=True)
