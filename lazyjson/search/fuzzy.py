"""Multi-word fuzzy scoring, ranking and highlight ranges for document nodes.

Each query word is looked up as a left-most substring (pass A). When any word
is missing, the concatenated query falls back to an in-order subsequence
match (pass B) scored by matched character count.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..document import NodeDescriptor

SEARCH_RESULT_LIMIT = 50
BOUNDARY_CHARS = frozenset(" _.-/\\[]:@")
POSITION_PENALTY_CAP = 50
BOUNDARY_BONUS = 50
WORD_BASE_SCORE = 100


@dataclass(frozen=True)
class SearchHit:
    """One ranked search result."""

    descriptor: NodeDescriptor
    score: int
    index: int


def split_query(query: str) -> list[str]:
    """Return case-folded whitespace-separated query words."""
    return query.casefold().split()


def _is_boundary(candidate: str, idx: int) -> bool:
    return idx == 0 or candidate[idx - 1] in BOUNDARY_CHARS


def word_match_score(words: list[str], candidate: str) -> tuple[int, list[tuple[int, int]]] | None:
    """Score ``candidate`` when every word occurs in it, else ``None``.

    ``candidate`` must already be case-folded.
    """
    if not words:
        return None
    score = 0
    ranges: list[tuple[int, int]] = []
    for word in words:
        idx = candidate.find(word)
        if idx < 0:
            return None
        score += WORD_BASE_SCORE - min(idx, POSITION_PENALTY_CAP)
        if _is_boundary(candidate, idx):
            score += BOUNDARY_BONUS
        score += len(word) * 2
        ranges.append((idx, idx + len(word)))
    return score, ranges


def subsequence_match(pattern: str, candidate: str) -> tuple[int, list[int]] | None:
    """Match ``pattern`` characters in order; score is the matched count."""
    if not pattern:
        return None
    positions: list[int] = []
    pos = 0
    for ch in pattern:
        idx = candidate.find(ch, pos)
        if idx < 0:
            return None
        positions.append(idx)
        pos = idx + 1
    return len(positions), positions


def candidate_score(words: list[str], candidate: str) -> int | None:
    """Return the pass-A score, else the pass-B score, else ``None``."""
    folded = candidate.casefold()
    matched = word_match_score(words, folded)
    if matched is not None:
        return matched[0]
    fallback = subsequence_match("".join(words), folded)
    if fallback is not None:
        return fallback[0]
    return None


def descriptor_candidates(descriptor: NodeDescriptor) -> tuple[str, str, str, str]:
    """Return the key, display value, path and their space-joined concatenation."""
    combined = f"{descriptor.key} {descriptor.display_value} {descriptor.path}"
    return descriptor.key, descriptor.display_value, descriptor.path, combined


def descriptor_score(words: list[str], descriptor: NodeDescriptor) -> int | None:
    best: int | None = None
    for candidate in descriptor_candidates(descriptor):
        score = candidate_score(words, candidate)
        if score is not None and (best is None or score > best):
            best = score
    return best


def fuzzy_search(
    query: str,
    flat_index: tuple[NodeDescriptor, ...] | list[NodeDescriptor],
    limit: int = SEARCH_RESULT_LIMIT,
) -> list[SearchHit]:
    """Rank flat-index entries against ``query``.

    Ties keep flat-index order. An empty or whitespace-only query matches
    nothing.
    """
    words = split_query(query)
    if not words:
        return []
    hits: list[SearchHit] = []
    for idx, descriptor in enumerate(flat_index):
        score = descriptor_score(words, descriptor)
        if score is None:
            continue
        hits.append(SearchHit(descriptor=descriptor, score=score, index=idx))
    hits.sort(key=lambda hit: -hit.score)
    return hits[: max(0, limit)]


def merge_ranges(ranges: list[tuple[int, int]]) -> list[tuple[int, int]]:
    """Merge overlapping or adjacent half-open ranges."""
    merged: list[tuple[int, int]] = []
    for start, end in sorted(r for r in ranges if r[1] > r[0]):
        if merged and start <= merged[-1][1]:
            prev_start, prev_end = merged[-1]
            merged[-1] = (prev_start, max(prev_end, end))
        else:
            merged.append((start, end))
    return merged


def highlight_ranges(query: str, text: str) -> list[tuple[int, int]]:
    """Return merged ranges of ``text`` to mark for ``query``.

    Union of every word's left-most occurrence and the subsequence positions
    of the concatenated query.
    """
    words = split_query(query)
    if not words or not text:
        return []
    folded = text.casefold()
    if len(folded) != len(text):
        # Case folding changed lengths (e.g. "ß"); fall back to lower().
        folded = text.lower()
        if len(folded) != len(text):
            return []

    ranges: list[tuple[int, int]] = []
    for word in words:
        idx = folded.find(word)
        if idx >= 0:
            ranges.append((idx, idx + len(word)))
    subsequence = subsequence_match("".join(words), folded)
    if subsequence is not None:
        ranges.extend((pos, pos + 1) for pos in subsequence[1])
    return merge_ranges(ranges)


def apply_highlight(text: str, ranges: list[tuple[int, int]], on: str, off: str) -> str:
    """Wrap each range of ``text`` in ``on``/``off`` markers."""
    if not ranges:
        return text
    out: list[str] = []
    cursor = 0
    for start, end in ranges:
        start = max(cursor, min(len(text), start))
        end = max(start, min(len(text), end))
        out.append(text[cursor:start])
        if end > start:
            out.append(on + text[start:end] + off)
        cursor = end
    out.append(text[cursor:])
    return "".join(out)
