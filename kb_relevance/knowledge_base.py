"""
Knowledge-base retrieval policies built on the lexical ranker.

- search_knowledge_base: RAG context for the support assistant
  (active articles only, score >= RAG_SCORE_THRESHOLD, top RAG_TOP_K)
- search_articles: free-text search for the dashboard
  (caller filters, score > 0, paginated)
- format_knowledge_context: renders selected articles into the prompt block
"""

import logging
import math
from typing import List, Optional, Sequence

from .config import Settings, get_settings
from .lexical.ranking import score_and_select
from .models import ArticleFilters, Document, ScoredDocument, SearchPage

logger = logging.getLogger(__name__)

TRUNCATION_SUFFIX = "..."


def search_knowledge_base(
    query: str,
    documents: Sequence[Document],
    settings: Optional[Settings] = None
) -> List[ScoredDocument]:
    """
    Select knowledge-base articles to ground an assistant reply.
    
    Args:
        query: Latest user message
        documents: All articles of one tenant (inactive ones are skipped)
        settings: Thresholds and pool config (default: from environment)
    
    Returns:
        At most rag_top_k articles with score >= rag_score_threshold, best first
    """
    settings = settings or get_settings()
    active = [doc for doc in documents if doc.is_active]
    
    results = score_and_select(
        query,
        active,
        min_score=settings.rag_score_threshold,
        top_k=settings.rag_top_k,
        max_workers=settings.scoring_max_workers,
        parallel_threshold=settings.scoring_parallel_threshold,
    )
    
    logger.info(f"RAG lookup: {len(results)} articles above {settings.rag_score_threshold} ({len(active)} active)")
    return results


def filter_articles(documents: Sequence[Document], filters: ArticleFilters) -> List[Document]:
    """Apply category / source type / active filters, keeping input order."""
    filtered = []
    for doc in documents:
        if filters.category and doc.category != filters.category:
            continue
        if filters.source_type and doc.source_type != filters.source_type:
            continue
        if filters.is_active is not None and doc.is_active != filters.is_active:
            continue
        filtered.append(doc)
    return filtered


def search_articles(
    documents: Sequence[Document],
    filters: Optional[ArticleFilters] = None,
    settings: Optional[Settings] = None
) -> SearchPage:
    """
    Free-text search over a tenant's articles.
    
    With a non-blank filters.search, every filtered article is scored and
    anything with score > 0 is returned, best first. Without one, filtered
    articles are returned in input order with score 0.
    
    Args:
        documents: Articles of one tenant, in the caller's default order
        filters: Filters and pagination (default: none, page 1)
        settings: Page size and pool config (default: from environment)
    
    Returns:
        SearchPage with the requested slice and totals
    """
    filters = filters or ArticleFilters()
    settings = settings or get_settings()
    limit = filters.limit or settings.search_page_size
    
    candidates = filter_articles(documents, filters)
    
    if filters.search and filters.search.strip():
        matches = score_and_select(
            filters.search,
            candidates,
            min_score=0.0,
            top_k=None,
            exclusive=True,
            max_workers=settings.scoring_max_workers,
            parallel_threshold=settings.scoring_parallel_threshold,
        )
    else:
        matches = [ScoredDocument(document=doc, score=0.0) for doc in candidates]
    
    total = len(matches)
    skip = (filters.page - 1) * limit
    
    return SearchPage(
        articles=matches[skip:skip + limit],
        total=total,
        page=filters.page,
        total_pages=math.ceil(total / limit),
    )


def format_knowledge_context(results: Sequence[ScoredDocument], char_limit: Optional[int] = None) -> str:
    """
    Render selected articles as the knowledge-base section of a system prompt.
    
    Args:
        results: Ranked articles from search_knowledge_base
        char_limit: Max content chars per article (default: RAG_CONTEXT_CHAR_LIMIT setting)
    
    Returns:
        Prompt block, or "" when there are no results
        
    Example output:
        === KNOWLEDGE BASE (use this to answer questions) ===
        
        --- Returns [billing] (relevance: 87%) ---
        Items can be returned within 30 days...
        
        === END KNOWLEDGE BASE ===
    """
    if not results:
        return ""
    
    if char_limit is None:
        char_limit = get_settings().rag_context_char_limit
    
    lines = ["=== KNOWLEDGE BASE (use this to answer questions) ==="]
    for item in results:
        doc = item.document
        content = doc.content or ""
        if len(content) > char_limit:
            content = content[:char_limit] + TRUNCATION_SUFFIX
        
        lines.append("")
        lines.append(f"--- {doc.title or ''} [{doc.category}] (relevance: {item.score * 100:.0f}%) ---")
        lines.append(content)
    
    lines.append("")
    lines.append("=== END KNOWLEDGE BASE ===")
    return "\n".join(lines)
