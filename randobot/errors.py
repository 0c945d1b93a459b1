"""
Exception hierarchy shared by the crawler and the query resolver
"""


class RandobotError(Exception):
    """Base class for every error raised by randobot"""


class BrowserLaunchError(RandobotError):
    """The headless browser could not be started; aborts the whole crawl"""


class PageLoadError(RandobotError):
    """A navigation failed with every readiness condition"""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to load {url}: {reason}" if reason else f"Failed to load {url}")


class GenerationError(RandobotError):
    """The generative model returned an error or an unusable response"""


class RateLimitError(GenerationError):
    """The generative model refused the call because of a quota"""
