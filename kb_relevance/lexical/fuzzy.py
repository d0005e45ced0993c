"""
Fuzzy field scorer: best match strength of one keyword against a token list.

Each keyword/token comparison is quantized into a MatchTier. Per token the
first applicable tier wins; across tokens the best tier is kept.

Tier order:
1. Exact equality                         -> 1.0 (short-circuits)
2. Substring containment, either way      -> 0.9
3. Edit distance, only when token lengths differ by <= 2:
   - distance 1 and longer word >= 4 chars -> 0.8
   - distance 2 and longer word >= 5 chars -> 0.5
4. Nothing                                -> 0.0

The length floors suppress accidental short-word hits ("to" vs "go",
"cat" vs "bat"). Tier values are tuned heuristics; changing them changes
rankings.
"""

from enum import Enum
from typing import Sequence

from .levenshtein import levenshtein


class MatchTier(float, Enum):
    """Quantized strength of a single keyword-to-token comparison"""
    EXACT = 1.0
    CONTAINMENT = 0.9
    EDIT_DISTANCE_1 = 0.8
    EDIT_DISTANCE_2 = 0.5
    NO_MATCH = 0.0


# Edit distance is skipped when token lengths differ by more than this
MAX_LENGTH_DIFF = 2

# Minimum length of the longer word for each edit-distance tier
EDIT_DISTANCE_1_MIN_LENGTH = 4
EDIT_DISTANCE_2_MIN_LENGTH = 5


def match_tier(keyword: str, token: str) -> MatchTier:
    """Classify a single keyword/token comparison."""
    if token == keyword:
        return MatchTier.EXACT
    
    if keyword in token or token in keyword:
        return MatchTier.CONTAINMENT
    
    if abs(len(token) - len(keyword)) > MAX_LENGTH_DIFF:
        return MatchTier.NO_MATCH
    
    distance = levenshtein(keyword, token)
    longest = max(len(keyword), len(token))
    
    if distance == 1 and longest >= EDIT_DISTANCE_1_MIN_LENGTH:
        return MatchTier.EDIT_DISTANCE_1
    if distance == 2 and longest >= EDIT_DISTANCE_2_MIN_LENGTH:
        return MatchTier.EDIT_DISTANCE_2
    
    return MatchTier.NO_MATCH


def fuzzy_match_score(keyword: str, field_tokens: Sequence[str]) -> float:
    """
    Best match strength of keyword against any token of a field.
    
    Args:
        keyword: Query keyword (already normalized)
        field_tokens: Tokens of one document field (content, title or tags)
    
    Returns:
        Score in [0, 1]; 0.0 when field_tokens is empty
        
    Examples:
        >>> fuzzy_match_score("shipping", ["free", "shipping"])
        1.0
        >>> fuzzy_match_score("refund", ["refunds"])
        0.9
        >>> fuzzy_match_score("cat", ["bat"])
        0.0
    """
    best = MatchTier.NO_MATCH
    
    for token in field_tokens:
        tier = match_tier(keyword, token)
        if tier is MatchTier.EXACT:
            return MatchTier.EXACT.value
        if tier > best:
            best = tier
    
    return best.value
