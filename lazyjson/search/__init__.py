"""Search package exports: fuzzy ranking, highlighting and debounce."""

from __future__ import annotations

from .debounce import SEARCH_DEBOUNCE_SECONDS, SearchDebouncer
from .fuzzy import (
    BOUNDARY_CHARS,
    SEARCH_RESULT_LIMIT,
    SearchHit,
    apply_highlight,
    candidate_score,
    descriptor_candidates,
    descriptor_score,
    fuzzy_search,
    highlight_ranges,
    merge_ranges,
    split_query,
    subsequence_match,
    word_match_score,
)

__all__ = [
    "BOUNDARY_CHARS",
    "SEARCH_DEBOUNCE_SECONDS",
    "SEARCH_RESULT_LIMIT",
    "SearchDebouncer",
    "SearchHit",
    "apply_highlight",
    "candidate_score",
    "descriptor_candidates",
    "descriptor_score",
    "fuzzy_search",
    "highlight_ranges",
    "merge_ranges",
    "split_query",
    "subsequence_match",
    "word_match_score",
]
