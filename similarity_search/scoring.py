"""
Histogram intersection scoring.

The similarity of two histograms is the sum of their element-wise minima.
Higher is more similar; a histogram scored against itself yields its own
total mass, which is the largest score any candidate can reach against it.
"""

import logging
from typing import Iterable, List, NamedTuple

import numpy as np

from .exceptions import HistogramMismatchError
from .histograms import Histogram

logger = logging.getLogger(__name__)


class ScoredCandidate(NamedTuple):
    histogram: Histogram
    score: float

    @property
    def name(self) -> str:
        return self.histogram.name


def histogram_intersection(query: Histogram, candidate: Histogram) -> float:
    """
    Compute the histogram intersection of two equal-length histograms.

    Raises:
        HistogramMismatchError: If the bin counts differ.
    """
    if len(query.bins) != len(candidate.bins):
        raise HistogramMismatchError(
            f"Histogram dimension {len(candidate.bins)} of {candidate.name} "
            f"doesn't match query dimension {len(query.bins)}"
        )
    return float(np.minimum(query.bins, candidate.bins).sum(dtype=np.float64))


def score_candidate(query: Histogram, candidate: Histogram) -> ScoredCandidate:
    return ScoredCandidate(candidate, histogram_intersection(query, candidate))


def rank_results(candidates: Iterable[ScoredCandidate]) -> List[ScoredCandidate]:
    """
    Sort scored candidates by score, highest first.

    Python's sort is stable, so equal scores keep their input order.
    """
    return sorted(candidates, key=lambda c: -c.score)
