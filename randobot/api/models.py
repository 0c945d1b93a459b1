"""
Pydantic models for API requests and responses
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ChatRequest(BaseModel):
    message: Optional[str] = None


class ChatResponse(BaseModel):
    message: str
    sources: List[str] = []
    intent: Optional[str] = None


class IndexRequest(BaseModel):
    url: Optional[str] = None


class IndexResponse(BaseModel):
    success: bool
    pages: int
    urls: List[str]


class HealthResponse(BaseModel):
    status: str
    store_state: str
    pages: int
    fallback_enabled: bool


class StatsResponse(BaseModel):
    site_stats: Dict[str, Any]
    data_path: str


class HistoryEntry(BaseModel):
    role: str
    content: str
