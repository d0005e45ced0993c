"""
Ranking: score a candidate set, filter by threshold, sort, truncate.

Two call sites share this primitive with different policies:
- RAG context: score >= 0.3, top 5
- Free-text search: score > 0, then paginate

Sorting is stable: ties keep the caller's enumeration order, so results are
deterministic for identical inputs.

Scoring is CPU-bound (Levenshtein dominates), so large candidate sets are
fanned out across worker processes. Threads would serialize on the GIL.
"""

import asyncio
import logging
import multiprocessing
import os
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import get_settings
from ..models import Document, ScoredDocument
from .scorer import RelevanceScorer, default_scorer
from .tokenizer import extract_keywords

logger = logging.getLogger(__name__)


def _pool_context():
    """Start method for scoring workers: never fork, callers may be multi-threaded."""
    if "forkserver" in multiprocessing.get_all_start_methods():
        return multiprocessing.get_context("forkserver")
    return multiprocessing.get_context("spawn")


def _validate_selection(min_score: float, top_k: Optional[int]) -> None:
    if not 0.0 <= min_score <= 1.0:
        raise ValueError(f"min_score must be between 0 and 1, got {min_score}")
    if top_k is not None and top_k < 0:
        raise ValueError(f"top_k must be non-negative, got {top_k}")


def rank_documents(
    scored: Iterable[ScoredDocument],
    min_score: float = 0.0,
    top_k: Optional[int] = None,
    exclusive: bool = False
) -> List[ScoredDocument]:
    """
    Filter scored documents by threshold, sort descending, truncate.
    
    Args:
        scored: Scored documents in enumeration order
        min_score: Score threshold (inclusive unless exclusive=True)
        top_k: Maximum results (None = no limit)
        exclusive: Keep only score > min_score (free-text search uses this with 0)
    
    Returns:
        Ranked documents, highest score first, ties in input order
        
    Raises:
        ValueError: min_score outside [0, 1] or negative top_k
    """
    _validate_selection(min_score, top_k)
    
    if exclusive:
        kept = [item for item in scored if item.score > min_score]
    else:
        kept = [item for item in scored if item.score >= min_score]
    
    # sorted() is stable, also with reverse=True
    ranked = sorted(kept, key=lambda item: item.score, reverse=True)
    
    if top_k is not None:
        ranked = ranked[:top_k]
    
    return ranked


def _score_fields(scorer: RelevanceScorer, query: str, fields: Tuple) -> float:
    content, title, tags = fields
    return scorer.score(query, content, title, tags)


def score_documents(
    query: str,
    documents: Sequence[Document],
    scorer: Optional[RelevanceScorer] = None,
    max_workers: Optional[int] = None,
    parallel_threshold: Optional[int] = None
) -> List[ScoredDocument]:
    """
    Score every document against a query, preserving input order.
    
    Args:
        query: User query text
        documents: Candidate documents (read only)
        scorer: Scorer to use (default: English stopwords)
        max_workers: Process pool size (default: SCORING_MAX_WORKERS setting)
        parallel_threshold: Minimum candidate count for the process pool
            (default: SCORING_PARALLEL_THRESHOLD setting)
    
    Returns:
        One ScoredDocument per input document, same order
    """
    scorer = scorer or default_scorer
    documents = list(documents)
    
    if not documents:
        return []
    
    if not extract_keywords(query, scorer.stop_words):
        logger.info(f"Query produced no keywords, {len(documents)} documents score 0")
        return [ScoredDocument(document=doc, score=0.0) for doc in documents]
    
    if max_workers is None or parallel_threshold is None:
        settings = get_settings()
        if max_workers is None:
            max_workers = settings.scoring_max_workers
        if parallel_threshold is None:
            parallel_threshold = settings.scoring_parallel_threshold
    
    fields = [(doc.content, doc.title, doc.tags) for doc in documents]
    score_one = partial(_score_fields, scorer, query)
    
    if len(documents) >= parallel_threshold:
        workers = max_workers or os.cpu_count() or 1
        chunksize = max(1, len(fields) // (workers * 4))
        logger.debug(f"Scoring {len(documents)} documents across {workers} processes (chunksize={chunksize})")
        with ProcessPoolExecutor(max_workers=workers, mp_context=_pool_context()) as executor:
            scores = list(executor.map(score_one, fields, chunksize=chunksize))
    else:
        scores = [score_one(item) for item in fields]
    
    return [
        ScoredDocument(document=doc, score=score)
        for doc, score in zip(documents, scores)
    ]


def score_and_select(
    query: str,
    documents: Sequence[Document],
    min_score: float,
    top_k: Optional[int],
    exclusive: bool = False,
    **scoring_options
) -> List[ScoredDocument]:
    """
    Score documents and return the top_k with score >= min_score.
    
    Args:
        query: User query text
        documents: Candidate documents for one tenant
        min_score: Inclusive score threshold
        top_k: Maximum results (None = no limit)
        exclusive: Use score > min_score instead
        **scoring_options: Passed to score_documents (scorer, max_workers, parallel_threshold)
    
    Returns:
        Ranked documents, highest score first
        
    Example:
        >>> docs = [Document(id="a", content="Return policy: 30 days for refunds")]
        >>> [(r.document.id, round(r.score, 2)) for r in score_and_select("return policy", docs, 0.3, 5)]
        [('a', 1.0)]
    """
    _validate_selection(min_score, top_k)
    
    scored = score_documents(query, documents, **scoring_options)
    ranked = rank_documents(scored, min_score=min_score, top_k=top_k, exclusive=exclusive)
    
    logger.info(f"Selected {len(ranked)} of {len(scored)} documents (min_score={min_score}, top_k={top_k})")
    return ranked


async def score_and_select_async(
    query: str,
    documents: Sequence[Document],
    min_score: float,
    top_k: Optional[int],
    timeout: Optional[float] = None,
    **options
) -> List[ScoredDocument]:
    """
    Run score_and_select off the event loop.
    
    The timeout covers the whole batch, not individual documents.
    
    Raises:
        TimeoutError: Batch did not finish within timeout seconds
    """
    loop = asyncio.get_running_loop()
    call = partial(score_and_select, query, documents, min_score, top_k, **options)
    
    try:
        return await asyncio.wait_for(loop.run_in_executor(None, call), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"Scoring timeout after {timeout}s ({len(documents)} documents)")
        raise TimeoutError(f"Relevance scoring timeout ({timeout}s)")
