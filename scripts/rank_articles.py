#!/usr/bin/env python3
"""
Rank a JSON file of knowledge-base articles against a query.

Article file: a JSON list of objects with id, content and optional
title, tags, category, source_type, is_active.

Usage:
    python scripts/rank_articles.py "return policy" articles.json
    python scripts/rank_articles.py --search "return policy" articles.json
"""

import json
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from kb_relevance.config import get_settings, load_environment
from kb_relevance.knowledge_base import format_knowledge_context, search_articles, search_knowledge_base
from kb_relevance.logging_config import setup_logging
from kb_relevance.models import ArticleFilters, Document


def load_articles(path: Path) -> list:
    """Read and validate articles from a JSON file."""
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    return [Document(**item) for item in raw]


def main(argv=None):
    """Main entry point."""
    args = list(sys.argv[1:] if argv is None else argv)
    search_mode = bool(args) and args[0] == "--search"
    if search_mode:
        args = args[1:]
    
    if len(args) != 2:
        print("Usage:")
        print('  python scripts/rank_articles.py "QUERY" articles.json')
        print('  python scripts/rank_articles.py --search "QUERY" articles.json')
        sys.exit(1)
    
    query, articles_path = args
    
    load_environment(project_root)
    try:
        settings = get_settings()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)
    
    setup_logging(log_file=None, console_level=settings.console_level)
    
    try:
        articles = load_articles(Path(articles_path))
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    
    if search_mode:
        page = search_articles(articles, ArticleFilters(search=query), settings)
        print(f"\n{page.total} matches (page {page.page}/{page.total_pages})")
        print("=" * 80)
        for item in page.articles:
            print(f"{item.score:6.3f} | {item.document.id} | {item.document.title or ''}")
        print("=" * 80)
    else:
        results = search_knowledge_base(query, articles, settings)
        if not results:
            print("No articles above the RAG threshold.")
        else:
            print(format_knowledge_context(results, settings.rag_context_char_limit))


if __name__ == "__main__":
    main()
