"""
Multi-signal document relevance scorer.

Combines per-field fuzzy matches across all query keywords into one score:

    final = base + title + tags + proximity + coverage   (clamped to [0, 1])

Where:
    base      = sum(content match per keyword) / number of keywords
                (an average, so unrelated query words cannot inflate it)
    title     = sum(title match per keyword) * 0.35
    tags      = sum(tag match per keyword) * 0.25
    proximity = +0.1 per adjacent keyword pair whose first occurrences in the
                lowercased content are < 50 chars apart, capped at 0.2
    coverage  = +0.1 when every keyword matched the content

Proximity uses raw substring positions, not the fuzzy matcher. The two
signals can disagree (a keyword matched only fuzzily may still earn a
proximity bonus through an unrelated substring). This is reproduced
deliberately; rankings depend on it.

All weights are tuned heuristics and must stay bit-identical.
"""

import logging
from typing import FrozenSet, List, Optional, Sequence

from .fuzzy import fuzzy_match_score
from .tokenizer import STOP_WORDS, extract_keywords, tokenize

logger = logging.getLogger(__name__)

# A title hit is a strong signal but secondary to body coverage
TITLE_WEIGHT = 0.35
# Tags are curated but coarse
TAG_WEIGHT = 0.25

PROXIMITY_BONUS = 0.1
PROXIMITY_BONUS_CAP = 0.2
# Max distance in characters between first occurrences (exclusive)
PROXIMITY_WINDOW = 50

# Awarded when every keyword matched content at least once
COVERAGE_BONUS = 0.1

MIN_SCORE = 0.0
MAX_SCORE = 1.0


def _tag_tokens(tags) -> List[str]:
    if isinstance(tags, str):
        tags = [tags]
    elif not isinstance(tags, (list, tuple)):
        return []
    
    tokens = []
    for tag in tags:
        tokens.extend(tokenize(tag))
    return tokens


def proximity_bonus(keywords: Sequence[str], content: str) -> float:
    """
    Bonus for adjacent query keywords appearing close together in content.
    
    Args:
        keywords: Query keywords in query order
        content: Raw document content
    
    Returns:
        0.1 per qualifying adjacent pair, at most 0.2
    """
    if len(keywords) < 2:
        return 0.0
    
    content_lower = content.lower()
    bonus = 0.0
    
    for first, second in zip(keywords, keywords[1:]):
        pos1 = content_lower.find(first)
        pos2 = content_lower.find(second)
        if pos1 != -1 and pos2 != -1 and abs(pos1 - pos2) < PROXIMITY_WINDOW:
            bonus += PROXIMITY_BONUS
    
    return min(bonus, PROXIMITY_BONUS_CAP)


class RelevanceScorer:
    """
    Lexical relevance scorer for knowledge-base articles.
    
    Stateless apart from its stopword set; safe to share across threads
    and to pickle into worker processes.
    """
    
    def __init__(self, stop_words: FrozenSet[str] = STOP_WORDS):
        """
        Initialize scorer.
        
        Args:
            stop_words: Words removed from queries before matching
                Default: built-in English list
        """
        self.stop_words = stop_words
    
    def score(
        self,
        query,
        content,
        title: Optional[str] = "",
        tags: Optional[Sequence[str]] = None
    ) -> float:
        """
        Compute relevance of one document to a query.
        
        Never raises: empty or malformed input scores 0.0.
        
        Args:
            query: User query text
            content: Document body (required for a non-zero score)
            title: Document title (optional)
            tags: Document tags (optional)
        
        Returns:
            Relevance score in [0, 1]
            
        Example:
            >>> scorer = RelevanceScorer()
            >>> scorer.score(
            ...     "shipping delay",
            ...     "Our shipping policy explains delivery delay procedures in detail."
            ... )
            1.0
        """
        keywords = extract_keywords(query, self.stop_words)
        if not keywords:
            return 0.0
        
        content_tokens = tokenize(content)
        if not content_tokens:
            return 0.0
        
        title_tokens = tokenize(title)
        tag_tokens = _tag_tokens(tags)
        
        content_score = 0.0
        title_score = 0.0
        tag_score = 0.0
        matched_keywords = 0
        
        for keyword in keywords:
            content_match = fuzzy_match_score(keyword, content_tokens)
            if content_match > 0:
                content_score += content_match
                matched_keywords += 1
            
            title_match = fuzzy_match_score(keyword, title_tokens)
            if title_match > 0:
                title_score += title_match * TITLE_WEIGHT
            
            tag_match = fuzzy_match_score(keyword, tag_tokens)
            if tag_match > 0:
                tag_score += tag_match * TAG_WEIGHT
        
        base_score = content_score / len(keywords)
        proximity = proximity_bonus(keywords, content)
        coverage = COVERAGE_BONUS if matched_keywords == len(keywords) else 0.0
        
        final_score = base_score + title_score + tag_score + proximity + coverage
        
        logger.debug(
            f"Scored document: keywords={keywords}, base={base_score:.3f}, title={title_score:.3f}, "
            f"tags={tag_score:.3f}, proximity={proximity:.1f}, coverage={coverage:.1f}"
        )
        
        return min(MAX_SCORE, max(MIN_SCORE, final_score))


default_scorer = RelevanceScorer()


def score_document(query, content, title: Optional[str] = "", tags: Optional[Sequence[str]] = None) -> float:
    """Score one document with the default English stopword list."""
    return default_scorer.score(query, content, title, tags)
