"""
Unit tests for knowledge-base retrieval policies (RAG context, free-text search).
"""

import pytest
from kb_relevance.config import Settings
from kb_relevance.knowledge_base import (
    filter_articles,
    format_knowledge_context,
    search_articles,
    search_knowledge_base,
)
from kb_relevance.models import ArticleFilters, Document, ScoredDocument

pytestmark = pytest.mark.unit


@pytest.fixture
def articles():
    """Tenant knowledge base with one inactive article"""
    return [
        Document(
            id="returns",
            title="Return policy",
            content="Our return policy allows refunds within 30 days of delivery.",
            category="billing",
            tags=["returns", "refunds"],
        ),
        Document(
            id="shipping",
            title="Shipping times",
            content="Standard shipping takes 5 business days. Express shipping arrives in 2 days.",
            category="shipping",
            tags=["shipping"],
        ),
        Document(
            id="warranty",
            title="Warranty coverage",
            content="Hardware warranty covers manufacturing defects for one year.",
            category="warranty",
            source_type="file",
        ),
        Document(
            id="old-returns",
            title="Return policy (2019)",
            content="Our return policy allows refunds within 14 days.",
            category="billing",
            is_active=False,
        ),
    ]


@pytest.fixture
def settings():
    """Default thresholds, sequential scoring"""
    return Settings(scoring_parallel_threshold=10_000)


class TestSearchKnowledgeBase:
    """Test RAG context selection"""
    
    def test_selects_relevant_active_articles(self, articles, settings):
        """Test inactive articles are never used as context"""
        results = search_knowledge_base("What is your return policy?", articles, settings)
        assert [item.document.id for item in results] == ["returns"]
        assert results[0].score == 1.0
    
    def test_threshold_excludes_weak_matches(self, articles, settings):
        """Test articles below rag_score_threshold are dropped"""
        # Each article matches one of the two keywords: base 0.5, no bonuses
        default = search_knowledge_base("delivery express", articles, settings)
        assert [item.document.id for item in default] == ["returns", "shipping"]
        assert [item.score for item in default] == [0.5, 0.5]

        strict = Settings(rag_score_threshold=0.95, scoring_parallel_threshold=10_000)
        assert search_knowledge_base("delivery express", articles, strict) == []
    
    def test_top_k_from_settings(self, articles):
        """Test rag_top_k caps the context size"""
        one = Settings(rag_top_k=1, rag_score_threshold=0.0, scoring_parallel_threshold=10_000)
        results = search_knowledge_base("shipping refunds warranty", articles, one)
        assert len(results) == 1
    
    def test_no_keywords(self, articles, settings):
        """Test greeting-only message retrieves nothing"""
        assert search_knowledge_base("hello, thanks!", articles, settings) == []
    
    def test_defaults_from_environment(self, articles, monkeypatch):
        """Test settings fall back to environment variables"""
        monkeypatch.setenv("RAG_SCORE_THRESHOLD", "0.0")
        monkeypatch.setenv("RAG_TOP_K", "2")
        results = search_knowledge_base("shipping refunds warranty", articles)
        assert len(results) == 2


class TestSearchArticles:
    """Test free-text search with filters and pagination"""
    
    def test_search_keeps_any_signal(self, articles, settings):
        """Test score > 0 results, best first, inactive included without filter"""
        page = search_articles(articles, ArticleFilters(search="return policy"), settings)
        assert [item.document.id for item in page.articles] == ["returns", "old-returns"]
        assert page.total == 2
        assert page.page == 1
        assert page.total_pages == 1
    
    def test_search_with_active_filter(self, articles, settings):
        """Test is_active filter applied before scoring"""
        filters = ArticleFilters(search="return policy", is_active=True)
        page = search_articles(articles, filters, settings)
        assert [item.document.id for item in page.articles] == ["returns"]
    
    def test_search_no_matches(self, articles, settings):
        """Test unmatched query yields empty page"""
        page = search_articles(articles, ArticleFilters(search="zebra"), settings)
        assert page.articles == []
        assert page.total == 0
        assert page.total_pages == 0
    
    def test_blank_search_lists_filtered(self, articles, settings):
        """Test blank search returns filtered articles in input order"""
        page = search_articles(articles, ArticleFilters(search="   ", category="billing"), settings)
        assert [item.document.id for item in page.articles] == ["returns", "old-returns"]
        assert all(item.score == 0.0 for item in page.articles)
    
    def test_pagination(self, articles, settings):
        """Test skip/take and page totals"""
        page = search_articles(articles, ArticleFilters(page=2, limit=3), settings)
        assert [item.document.id for item in page.articles] == ["old-returns"]
        assert page.total == 4
        assert page.total_pages == 2
    
    def test_page_beyond_end(self, articles, settings):
        """Test page past the last one is empty but keeps totals"""
        page = search_articles(articles, ArticleFilters(page=9, limit=2), settings)
        assert page.articles == []
        assert page.total == 4
    
    def test_default_page_size_from_settings(self, articles):
        """Test limit falls back to search_page_size"""
        small = Settings(search_page_size=1, scoring_parallel_threshold=10_000)
        page = search_articles(articles, ArticleFilters(), small)
        assert len(page.articles) == 1
        assert page.total_pages == 4
    
    def test_no_filters(self, articles, settings):
        """Test filters default to everything, page 1"""
        page = search_articles(articles, settings=settings)
        assert page.total == 4


class TestFilterArticles:
    """Test category / source type / active filters"""
    
    def test_source_type(self, articles):
        """Test source_type filter"""
        assert [doc.id for doc in filter_articles(articles, ArticleFilters(source_type="file"))] == ["warranty"]
    
    def test_inactive_only(self, articles):
        """Test is_active=False selects archived articles, string input coerced"""
        filters = ArticleFilters(is_active="false")
        assert [doc.id for doc in filter_articles(articles, filters)] == ["old-returns"]
    
    def test_combined(self, articles):
        """Test filters combine with AND"""
        filters = ArticleFilters(category="billing", is_active=True)
        assert [doc.id for doc in filter_articles(articles, filters)] == ["returns"]


class TestArticleFilters:
    """Test page / limit clamping"""
    
    @pytest.mark.parametrize("raw, expected", [(None, 1), ("abc", 1), (0, 1), (-3, 1), ("4", 4)])
    def test_page_clamped(self, raw, expected):
        """Test page never below 1, bad input falls back to 1"""
        assert ArticleFilters(page=raw).page == expected
    
    @pytest.mark.parametrize("raw, expected", [(None, None), ("abc", None), (0, None), (-5, 1), (500, 100), ("25", 25)])
    def test_limit_clamped(self, raw, expected):
        """Test limit within 1..100, unset/invalid means configured default"""
        assert ArticleFilters(limit=raw).limit == expected
    
    @pytest.mark.parametrize("raw, expected", [("2.5", 2), (" 3", 3), ("10items", 10), (2.9, 2), (float("nan"), 1), (True, 1)])
    def test_page_leading_integer(self, raw, expected):
        """Test query-string pages parse their leading integer"""
        assert ArticleFilters(page=raw).page == expected
    
    def test_limit_leading_integer(self):
        """Test decimal limit strings keep the integer part"""
        assert ArticleFilters(limit="15.7").limit == 15


class TestFormatKnowledgeContext:
    """Test prompt block rendering"""
    
    def test_empty_results(self):
        """Test no articles renders nothing"""
        assert format_knowledge_context([]) == ""
    
    def test_article_section(self, articles):
        """Test header with title, category and relevance percent"""
        block = format_knowledge_context([ScoredDocument(document=articles[0], score=0.87)], char_limit=1500)
        lines = block.split("\n")
        assert lines[0] == "=== KNOWLEDGE BASE (use this to answer questions) ==="
        assert "--- Return policy [billing] (relevance: 87%) ---" in lines
        assert articles[0].content in lines
        assert lines[-1] == "=== END KNOWLEDGE BASE ==="
    
    def test_long_content_truncated(self):
        """Test content beyond the budget is cut and marked"""
        doc = Document(id="long", title="Manual", content="x" * 2000)
        block = format_knowledge_context([ScoredDocument(document=doc, score=0.5)], char_limit=1500)
        assert "x" * 1500 + "..." in block
        assert "x" * 1501 not in block
    
    def test_char_limit_from_settings(self, monkeypatch):
        """Test default budget comes from RAG_CONTEXT_CHAR_LIMIT"""
        monkeypatch.setenv("RAG_CONTEXT_CHAR_LIMIT", "10")
        doc = Document(id="short", title="Manual", content="abcdefghijklmnop")
        block = format_knowledge_context([ScoredDocument(document=doc, score=0.5)])
        assert "abcdefghij..." in block
