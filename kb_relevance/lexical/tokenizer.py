"""
Tokenizer and keyword extraction for lexical relevance scoring.

Tokenization pipeline:
1. Lowercase conversion
2. Replace everything outside [a-z0-9], whitespace and hyphen with a space
3. Split on whitespace runs, drop empty strings

Keyword extraction (queries only) additionally:
4. Drops tokens of length <= 2
5. Drops stopwords (English function words + chat fillers)
6. Deduplicates, keeping first-seen order

Document fields are never stopword-filtered: every word in an article
must stay searchable even if it would be dropped from a query.

Known quirk: apostrophes are destroyed, so "don't" -> ["don", "t"].
Kept as-is because changing it would shift existing rankings.
"""

import re
from typing import FrozenSet, List

# Closed, hand-maintained list. Not locale-aware.
STOP_WORDS: FrozenSet[str] = frozenset([
    'a', 'an', 'the', 'is', 'are', 'was', 'were', 'be', 'been', 'being',
    'have', 'has', 'had', 'do', 'does', 'did', 'will', 'would', 'could',
    'should', 'may', 'might', 'can', 'shall', 'to', 'of', 'in', 'for',
    'on', 'with', 'at', 'by', 'from', 'as', 'into', 'through', 'during',
    'before', 'after', 'above', 'below', 'between', 'and', 'but', 'or',
    'not', 'no', 'nor', 'so', 'yet', 'both', 'either', 'neither', 'each',
    'every', 'all', 'any', 'few', 'more', 'most', 'other', 'some', 'such',
    'than', 'too', 'very', 'just', 'about', 'up', 'out', 'if', 'then',
    'what', 'which', 'who', 'whom', 'this', 'that', 'these', 'those',
    'i', 'me', 'my', 'we', 'our', 'you', 'your', 'he', 'him', 'his',
    'she', 'her', 'it', 'its', 'they', 'them', 'their', 'how', 'when',
    'where', 'why', 'hi', 'hello', 'hey', 'please', 'thanks', 'thank',
    'want', 'need', 'know', 'get', 'got', 'like', 'also', 'well', 'back',
    'even', 'new', 'way', 'use', 'come', 'make', 'go', 'see', 'look',
])

# Keywords must be longer than this
MIN_KEYWORD_LENGTH = 2

_NON_TOKEN_CHARS = re.compile(r'[^a-z0-9\s-]')


def tokenize(text) -> List[str]:
    """
    Split text into lowercase word tokens.
    
    Args:
        text: Input text. None or non-string input yields an empty list.
        
    Returns:
        Tokens in source order, duplicates preserved
        
    Examples:
        >>> tokenize("Co-pay refunds, explained!")
        ['co-pay', 'refunds', 'explained']
        
        >>> tokenize("Don't panic")
        ['don', 't', 'panic']
        
        >>> tokenize(None)
        []
    """
    if not text or not isinstance(text, str):
        return []
    
    text = _NON_TOKEN_CHARS.sub(' ', text.lower())
    return [t for t in text.split() if t]


def extract_keywords(text, stop_words: FrozenSet[str] = STOP_WORDS) -> List[str]:
    """
    Extract query keywords: tokens longer than 2 chars, minus stopwords, deduplicated.
    
    Args:
        text: Query text
        stop_words: Words to drop (default: STOP_WORDS)
    
    Returns:
        Keywords in first-seen order. Empty list means the query carries
        no searchable signal (callers may skip retrieval entirely).
        
    Examples:
        >>> extract_keywords("Hi, what is your return policy? Return please!")
        ['return', 'policy']
    """
    keywords = []
    seen = set()
    
    for token in tokenize(text):
        if len(token) <= MIN_KEYWORD_LENGTH or token in stop_words:
            continue
        if token not in seen:
            seen.add(token)
            keywords.append(token)
    
    return keywords
