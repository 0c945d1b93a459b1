"""
Structured progress events for the crawler and the query resolver
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class EventKind(Enum):
    CRAWL_STARTED = "crawl_started"
    PAGE_SKIPPED = "page_skipped"
    PAGE_LOADING = "page_loading"
    NAVIGATION_FALLBACK = "navigation_fallback"
    PAGE_RETRYING = "page_retrying"
    PAGE_STORED = "page_stored"
    PAGE_FAILED = "page_failed"
    LINK_FOLLOWED = "link_followed"
    CRAWL_FINISHED = "crawl_finished"
    INTENT_MATCHED = "intent_matched"
    NO_MATCH = "no_match"
    FALLBACK_USED = "fallback_used"
    FALLBACK_FAILED = "fallback_failed"


_WARNING_KINDS = {EventKind.PAGE_FAILED, EventKind.FALLBACK_FAILED}


@dataclass
class Event:
    kind: EventKind
    url: Optional[str] = None
    depth: Optional[int] = None
    attempt: Optional[int] = None
    detail: str = ""
    timestamp: float = field(default_factory=time.time)


class EventTracker:
    """Record events in memory and mirror them to the standard logger"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("randobot.events")
        self.events: List[Event] = []

    def emit(
        self,
        kind: EventKind,
        url: Optional[str] = None,
        depth: Optional[int] = None,
        attempt: Optional[int] = None,
        detail: str = "",
    ) -> Event:
        event = Event(kind=kind, url=url, depth=depth, attempt=attempt, detail=detail)
        self.events.append(event)

        parts = [kind.value]
        if url:
            parts.append(url)
        if depth is not None:
            parts.append(f"depth={depth}")
        if attempt is not None:
            parts.append(f"attempt={attempt}")
        if detail:
            parts.append(detail)
        level = logging.WARNING if kind in _WARNING_KINDS else logging.INFO
        self.logger.log(level, " ".join(parts))
        return event

    def of_kind(self, kind: EventKind) -> List[Event]:
        return [event for event in self.events if event.kind == kind]

    def kinds(self) -> List[EventKind]:
        return [event.kind for event in self.events]

    def clear(self):
        self.events.clear()
