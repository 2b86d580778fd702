"""Dependency injection for FastAPI endpoints"""

from typing import Optional
from fastapi import Request
from credit_scoring.config import settings
from credit_scoring.infrastructure.cache import InMemoryScoreCache, ScoreCache

_score_cache = InMemoryScoreCache(max_entries=settings.score_cache_max_entries)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_score_cache() -> Optional[ScoreCache]:
    """Provide the process-wide score cache, or None when caching is disabled"""
    return _score_cache if settings.score_cache_enabled else None
