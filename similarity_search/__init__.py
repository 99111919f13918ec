"""
similarity_search — Parallel color-histogram image similarity search.

Ranks a directory of images against a query image by histogram
intersection, extracting histograms concurrently across dataset
partitions and keeping only the top K matches.

Modules:
    engine         SearchEngine pipeline orchestration
    histograms     Per-channel color histogram extraction
    preprocessing  Image decoding and 16-bit channel widening
    datasets       Dataset directory listing
    partitioning   Contiguous work-list partitioning
    workers        Worker fan-out and the bounded histogram stream
    scoring        Histogram intersection scoring
    selection      Streaming top-K selection
    cli            Command-line entry point
"""

from .engine import SearchEngine, search_similar
from .histograms import Histogram, extract_histogram

__version__ = "1.0.0"

__all__ = ["SearchEngine", "search_similar", "Histogram", "extract_histogram"]
