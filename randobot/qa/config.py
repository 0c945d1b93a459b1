"""
Configuration settings for the query resolver
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class QueryConfig:
    """Configuration class for query resolution and the generative fallback"""
    # Keyword search
    max_results: int = 5
    title_weight: int = 2
    description_max_length: int = 400

    # Generative fallback
    max_tokens: int = 500
    temperature: float = 0.7
    stop_sequences: List[str] = field(default_factory=list)
    rate_limit_cooldown: float = 70.0
    max_rate_limit_retries: int = 3
