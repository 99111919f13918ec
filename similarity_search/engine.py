"""
Similarity search pipeline.

Wires the stages of a search run together:
    1. List and partition the dataset directory
    2. Dispatch one histogram worker per partition, plus the query
       histogram, onto a thread pool
    3. Score each streamed histogram against the query and keep the
       top K in a single-consumer selector
    4. Close the stream only after every worker has finished

Individual unreadable images are skipped. Only an unreadable dataset
directory or a failed query histogram aborts the run.
"""

import os
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import List, Dict, Any

from .datasets import IMAGE_EXTENSION, list_images, resolve_paths
from .exceptions import HistogramError, HistogramMismatchError, QueryImageError
from .histograms import DEFAULT_DEPTH, Histogram, extract_histogram
from .partitioning import partition
from .scoring import rank_results, score_candidate
from .selection import DEFAULT_TOP_K, TopKSelector
from .workers import HistogramStream, close_when_done, dispatch_workers

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = int(os.environ.get("SEARCH_WORKERS", "4"))
STREAM_CAPACITY = int(os.environ.get("SEARCH_STREAM_CAPACITY", "64"))


class PipelineState(Enum):
    """
    Stages of a search run.

    SELECTING covers the streaming score-and-select loop, which drains the
    stream as it goes. DRAINING is entered only when a run is aborted and
    the remaining histograms are discarded so producers can finish.
    """
    IDLE = "idle"
    PARTITIONING = "partitioning"
    DISPATCHING = "dispatching"
    DRAINING = "draining"
    SELECTING = "selecting"
    DONE = "done"


class SearchEngine:
    """
    Parallel color-histogram search over one dataset directory.

    Each call to search() lists the directory afresh; nothing is indexed
    or cached between runs.
    """

    def __init__(self, dataset_dir: str,
                 workers: int = DEFAULT_WORKERS,
                 depth: int = DEFAULT_DEPTH,
                 top_k: int = DEFAULT_TOP_K,
                 stream_capacity: int = STREAM_CAPACITY,
                 extension: str = IMAGE_EXTENSION):
        """
        Args:
            dataset_dir: Directory of candidate images.
            workers: Number of partitions, one worker thread each. A
                non-positive value means there is nothing to do.
            depth: Leading zero bins per histogram.
            top_k: Number of results to keep.
            stream_capacity: Bound of the worker -> consumer queue.
            extension: The image extension recognized in dataset_dir.
        """
        if depth < 0:
            raise ValueError(f"depth must be non-negative, got {depth}")
        if top_k <= 0:
            raise ValueError(f"top_k must be positive, got {top_k}")
        if stream_capacity <= 0:
            raise ValueError(f"stream_capacity must be positive, got {stream_capacity}")

        self.dataset_dir = dataset_dir
        self.workers = workers
        self.depth = depth
        self.top_k = top_k
        self.stream_capacity = stream_capacity
        self.extension = extension
        self.state = PipelineState.IDLE
        self.last_run: Dict[str, Any] = {}

    def _transition(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline {self.state.value} -> {state.value}")
        self.state = state

    def search(self, query_path: str) -> List[Dict[str, Any]]:
        """
        Rank the dataset images by similarity to a query image.

        Args:
            query_path: Path of the query image.

        Returns:
            List of result dicts sorted by score (highest first), each
            containing rank, filename, path, score. Empty when the
            dataset has no images or workers <= 0.

        Raises:
            DatasetError: The dataset directory cannot be listed.
            QueryImageError: The query histogram cannot be computed.
        """
        start = time.perf_counter()
        self.state = PipelineState.IDLE
        self._transition(PipelineState.PARTITIONING)

        filenames = list_images(self.dataset_dir, self.extension)
        partitions = partition(resolve_paths(self.dataset_dir, filenames), self.workers)
        stats = {
            "candidates": len(filenames),
            "processed": 0,
            "errors": 0,
            "mismatched": 0,
            "elapsed": 0.0,
        }

        if not partitions:
            logger.warning(
                f"Nothing to search: {len(filenames)} images, {self.workers} workers"
            )
            self._transition(PipelineState.DONE)
            stats["elapsed"] = time.perf_counter() - start
            self.last_run = stats
            return []

        stream = HistogramStream(self.stream_capacity)
        self._transition(PipelineState.DISPATCHING)

        # query + workers + closer all run at once
        with ThreadPoolExecutor(max_workers=len(partitions) + 2,
                                thread_name_prefix="histogram") as executor:
            query_future = executor.submit(extract_histogram, query_path, self.depth)
            worker_futures = dispatch_workers(executor, partitions, self.depth, stream)
            executor.submit(close_when_done, worker_futures, stream)

            try:
                try:
                    query = query_future.result()
                except HistogramError as e:
                    logger.error(f"Query histogram failed: {e}")
                    raise QueryImageError(f"Cannot compute query histogram: {e}") from e

                self._transition(PipelineState.SELECTING)
                selector = self._consume(query, stream, stats)
            except BaseException:
                self._transition(PipelineState.DRAINING)
                stream.drain()
                raise

        # re-raise anything unexpected from a worker
        for future in worker_futures:
            report = future.result()
            stats["processed"] += report["processed"]
            stats["errors"] += report["errors"]

        ranked = rank_results(selector.results())
        results = [
            {
                "rank": i + 1,
                "filename": os.path.basename(c.name),
                "path": c.name,
                "score": c.score,
            }
            for i, c in enumerate(ranked)
        ]

        stats["elapsed"] = time.perf_counter() - start
        self.last_run = stats
        self._transition(PipelineState.DONE)

        logger.info(
            f"Search complete: {stats['processed']}/{stats['candidates']} images "
            f"scored → {len(results)} results ({stats['errors']} errors, "
            f"{stats['mismatched']} mismatched) in {stats['elapsed']:.3f}s"
        )
        return results

    def _consume(self, query: Histogram, stream: HistogramStream,
                 stats: Dict[str, Any]) -> TopKSelector:
        """Single consumer: score every streamed histogram into a selector."""
        selector = TopKSelector(self.top_k)
        for histogram in stream:
            try:
                candidate = score_candidate(query, histogram)
            except HistogramMismatchError as e:
                logger.warning(f"Skipping {histogram.name}: {e}")
                stats["mismatched"] += 1
                continue
            selector.offer(candidate)
        return selector


def search_similar(query_path: str, dataset_dir: str, **options) -> List[Dict[str, Any]]:
    """Run a single search; options are passed to SearchEngine."""
    return SearchEngine(dataset_dir, **options).search(query_path)
