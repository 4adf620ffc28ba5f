"""
Retrieval: lexical keyword scoring over the handbook chunks.

Responsibility: Turn a user question into search terms, count literal term
occurrences in each chunk, return the best chunks for the prompt.
Matching is substring-based ("plan" also matches "planning").
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ragchat.core.config import RETRIEVAL_TOP_K

logger = logging.getLogger(__name__)

# Query words of this length or shorter are ignored ("is", "the", "how"...)
MIN_TERM_LENGTH = 3
_PUNCTUATION = str.maketrans("", "", ".,?!;:()\"'")


@dataclass(frozen=True)
class ScoredChunk:
    index: int
    text: str
    score: int


def tokenize_query(query: str) -> list[str]:
    """
    Lower-case, split on whitespace, drop words of <= 3 characters, then strip
    punctuation. Length is checked before stripping, so "ok?!" is kept as "ok".
    """
    if not query:
        return []
    terms = []
    for word in query.lower().split():
        if len(word) <= MIN_TERM_LENGTH:
            continue
        term = word.translate(_PUNCTUATION)
        if term:
            terms.append(term)
    return terms


def score_chunk(chunk: str, terms: Sequence[str]) -> int:
    """Sum of non-overlapping occurrences of each term in the lower-cased chunk."""
    text = chunk.lower()
    return sum(text.count(term) for term in terms)


def rank_chunks(query: str, chunks: Sequence[str]) -> list[ScoredChunk]:
    """All chunks with a positive score, best first; ties keep document order."""
    terms = tokenize_query(query)
    if not terms:
        logger.info("[retrieval:rank_chunks] no usable terms in query=%r", query)
        return []
    scored = [ScoredChunk(index=i, text=c, score=score_chunk(c, terms)) for i, c in enumerate(chunks)]
    matched = [s for s in scored if s.score > 0]
    # sorted() is stable, so equal scores stay in document order
    matched = sorted(matched, key=lambda s: -s.score)
    logger.info(
        "[retrieval:rank_chunks] terms=%s chunks=%d matched=%d top_scores=%s",
        terms, len(chunks), len(matched), [s.score for s in matched[:5]],
    )
    return matched


def retrieve(query: str, chunks: Sequence[str], top_k: int = RETRIEVAL_TOP_K) -> list[str]:
    """Return up to top_k chunk texts that best match the query ([] when nothing matches)."""
    logger.info("[retrieval:retrieve] IN  query=%r top_k=%d", query, top_k)
    results = [s.text for s in rank_chunks(query, chunks)[:top_k]]
    logger.info("[retrieval:retrieve] OUT sources=%d", len(results))
    return results
