"""
Lexical relevance scoring for knowledge-base retrieval.

Components:
- tokenizer: Tokenization and query keyword extraction (stopword filtering)
- levenshtein: Edit distance between two tokens
- fuzzy: Best match tier of a keyword against a field's tokens
- scorer: Multi-signal document score (content, title, tags, proximity, coverage)
- ranking: Threshold / top-K selection, parallel scoring for large sets

No embeddings, no stemming, no index: documents are tokenized and scored
on every call. The engine is pure and keeps no state between calls.
"""

from .tokenizer import STOP_WORDS, tokenize, extract_keywords
from .levenshtein import levenshtein
from .fuzzy import MatchTier, fuzzy_match_score
from .scorer import RelevanceScorer, score_document
from .ranking import rank_documents, score_documents, score_and_select, score_and_select_async

__all__ = [
    "STOP_WORDS",
    "tokenize",
    "extract_keywords",
    "levenshtein",
    "MatchTier",
    "fuzzy_match_score",
    "RelevanceScorer",
    "score_document",
    "rank_documents",
    "score_documents",
    "score_and_select",
    "score_and_select_async",
]
