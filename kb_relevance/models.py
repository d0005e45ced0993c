"""Data models for knowledge-base relevance scoring"""

import math
import re
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_PAGE_SIZE = 100

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(value) -> Optional[int]:
    """
    Leading integer of a query-string value, None if there is none.
    
    Examples:
        >>> parse_int("2.5")
        2
        >>> parse_int("10items")
        10
        >>> parse_int("abc") is None
        True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


class Document(BaseModel):
    """
    Knowledge-base article as consumed by the scorer.
    
    The engine only reads documents; ownership and storage belong to the caller.
    """
    model_config = ConfigDict(frozen=True)
    
    id: Union[str, int]
    content: Optional[str] = Field(default="", description="Article body (empty body never matches)")
    title: Optional[str] = ""
    tags: Optional[List[str]] = Field(default_factory=list)
    category: str = "general"
    source_type: str = "text"
    is_active: bool = True


class ScoredDocument(BaseModel):
    """Document plus relevance score, produced fresh for every call"""
    model_config = ConfigDict(frozen=True)
    
    document: Document
    score: float = Field(..., ge=0.0, le=1.0)


class ArticleFilters(BaseModel):
    """
    Free-text search filters.
    
    page and limit are clamped rather than rejected: page >= 1,
    1 <= limit <= 100. Unparseable values fall back to defaults
    (limit None means "use configured page size").
    """
    category: Optional[str] = None
    source_type: Optional[str] = None
    is_active: Optional[bool] = None
    search: Optional[str] = None
    page: int = 1
    limit: Optional[int] = None
    
    @field_validator("page", mode="before")
    @classmethod
    def clamp_page(cls, value):
        return max(parse_int(value) or 1, 1)
    
    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, value):
        limit = parse_int(value)
        if not limit:
            return None
        return min(max(limit, 1), MAX_PAGE_SIZE)


class SearchPage(BaseModel):
    """One page of free-text search results"""
    articles: List[ScoredDocument]
    total: int
    page: int
    total_pages: int
