"""
Generative fallback through a hosted language model
"""

import asyncio
import logging
import os
from typing import Awaitable, Callable, Dict, List, Optional, Protocol, Tuple

from langchain_google_genai import ChatGoogleGenerativeAI

from ..errors import GenerationError, RateLimitError
from ..events import EventKind, EventTracker
from .config import QueryConfig

logger = logging.getLogger(__name__)

APOLOGY = (
    "Je suis désolé, je ne peux pas répondre à cette question pour le moment. "
    "Pouvez-vous réessayer un peu plus tard ?"
)

PROMPT_TEMPLATE = """Tu es un assistant francophone spécialisé dans la randonnée en montagne. Instructions IMPORTANTES :
1. Tu DOIS TOUJOURS répondre UNIQUEMENT en français
2. Utilise un langage naturel et chaleureux
3. Si la question concerne une randonnée ou un lieu, donne des informations pertinentes
4. Reste dans le domaine de la randonnée, de la montagne et de la photographie de montagne

Question: {question}

Rappel: Ta réponse doit être EXCLUSIVEMENT en français."""


class TextGenerator(Protocol):
    async def generate(
        self,
        prompt: str,
        max_tokens: int,
        temperature: float,
        stop: Optional[List[str]] = None,
    ) -> str: ...


def _is_rate_limit(error: Exception) -> bool:
    code = getattr(error, 'code', None) or getattr(error, 'status_code', None)
    if code == 429:
        return True
    text = f"{type(error).__name__} {error}".lower()
    return '429' in text or 'resourceexhausted' in text or 'resource_exhausted' in text or 'rate limit' in text


def _message_text(content) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get('type') == 'text':
                parts.append(part.get('text', ''))
        return ''.join(parts)
    return ''


class GeminiGenerator:
    """TextGenerator backed by Google Gemini via LangChain"""

    def __init__(self, model: Optional[str] = None, api_key: Optional[str] = None):
        self.model = model or os.getenv("LLM_MODEL", "gemini-2.0-flash")
        self.api_key = api_key or os.getenv("GOOGLE_API_KEY")
        self._clients: Dict[Tuple[int, float], ChatGoogleGenerativeAI] = {}

    def _client(self, max_tokens: int, temperature: float) -> ChatGoogleGenerativeAI:
        key = (max_tokens, temperature)
        if key not in self._clients:
            self._clients[key] = ChatGoogleGenerativeAI(
                model=self.model,
                google_api_key=self.api_key,
                temperature=temperature,
                max_output_tokens=max_tokens,
            )
        return self._clients[key]

    async def generate(
        self,
        prompt: str,
        max_tokens: int,
        temperature: float,
        stop: Optional[List[str]] = None,
    ) -> str:
        try:
            message = await self._client(max_tokens, temperature).ainvoke(prompt, stop=stop or None)
        except Exception as e:
            if _is_rate_limit(e):
                raise RateLimitError(str(e)) from e
            raise GenerationError(str(e)) from e

        text = _message_text(getattr(message, 'content', None))
        if not text.strip():
            raise GenerationError("Empty response from model")
        return text


class GenerativeFallback:
    """French-only, hiking-constrained generation with rate-limit cooldown"""

    def __init__(
        self,
        generator: TextGenerator,
        config: Optional[QueryConfig] = None,
        events: Optional[EventTracker] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.generator = generator
        self.config = config or QueryConfig()
        self.events = events or EventTracker()
        self.sleep = sleep

    @staticmethod
    def build_prompt(question: str) -> str:
        return PROMPT_TEMPLATE.format(question=question.strip())

    async def answer(self, question: str) -> Tuple[str, bool]:
        """Generated text and True, or the apology and False"""
        prompt = self.build_prompt(question)
        rate_limited = 0

        while True:
            try:
                text = await self.generator.generate(
                    prompt,
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                    stop=self.config.stop_sequences or None,
                )
                text = (text or '').strip()
                if not text:
                    raise GenerationError("Empty response from model")
                self.events.emit(EventKind.FALLBACK_USED, detail=f"{len(text)} chars")
                return text, True

            except RateLimitError as e:
                rate_limited += 1
                if rate_limited > self.config.max_rate_limit_retries:
                    self.events.emit(EventKind.FALLBACK_FAILED, attempt=rate_limited, detail=f"rate limited: {e}")
                    return APOLOGY, False
                logger.warning(
                    f"Rate limit hit, retry {rate_limited}/{self.config.max_rate_limit_retries} "
                    f"in {self.config.rate_limit_cooldown}s"
                )
                await self.sleep(self.config.rate_limit_cooldown)

            except Exception as e:
                self.events.emit(EventKind.FALLBACK_FAILED, detail=str(e))
                return APOLOGY, False
