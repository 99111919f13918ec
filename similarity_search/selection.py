"""
Streaming top-K selection.

Keeps the K best-scoring candidates seen so far without storing or sorting
the full stream. Once full, each arrival is compared against the current
minimum (found by a linear scan, first minimum wins on ties) and replaces
it only when strictly greater. K is small, so O(n*K) beats a heap on
simplicity.

A selector is not thread-safe; exactly one consumer must own it.
"""

import os
from typing import Iterable, List

from .scoring import ScoredCandidate

DEFAULT_TOP_K = int(os.environ.get("SEARCH_TOP_K", "5"))


class TopKSelector:
    """Bounded set of the K highest-scoring candidates."""

    def __init__(self, k: int = DEFAULT_TOP_K):
        if k <= 0:
            raise ValueError(f"k must be positive, got {k}")
        self.k = k
        self._entries: List[ScoredCandidate] = []

    def __len__(self) -> int:
        return len(self._entries)

    def _min_index(self) -> int:
        index = 0
        for i, entry in enumerate(self._entries):
            if entry.score < self._entries[index].score:
                index = i
        return index

    def offer(self, candidate: ScoredCandidate) -> bool:
        """
        Consider a candidate for the result set.

        Returns:
            True if the candidate was kept.
        """
        if len(self._entries) < self.k:
            self._entries.append(candidate)
            return True

        smallest = self._min_index()
        if candidate.score > self._entries[smallest].score:
            self._entries[smallest] = candidate
            return True
        return False

    def results(self) -> List[ScoredCandidate]:
        """Current entries, unordered."""
        return list(self._entries)


def select_top_k(candidates: Iterable[ScoredCandidate],
                 k: int = DEFAULT_TOP_K) -> List[ScoredCandidate]:
    selector = TopKSelector(k)
    for candidate in candidates:
        selector.offer(candidate)
    return selector.results()
