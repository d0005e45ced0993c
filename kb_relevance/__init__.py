"""
kb-relevance - lexical relevance scoring for knowledge-base search and RAG context.

Usage:
    from kb_relevance import Document, search_knowledge_base, format_knowledge_context
    
    articles = [Document(id="1", title="Returns", content="Items can be returned within 30 days")]
    results = search_knowledge_base("how do I return an item", articles)
    prompt_block = format_knowledge_context(results)
"""

from .models import Document, ScoredDocument, ArticleFilters, SearchPage
from .lexical import score_document, score_and_select
from .knowledge_base import search_knowledge_base, search_articles, format_knowledge_context

__all__ = [
    "Document",
    "ScoredDocument",
    "ArticleFilters",
    "SearchPage",
    "score_document",
    "score_and_select",
    "search_knowledge_base",
    "search_articles",
    "format_knowledge_context",
]
