"""
Fan-out of histogram extraction across worker threads.

Each worker owns one dataset partition and pushes finished histograms onto
a shared bounded HistogramStream. Workers never close the stream: the
orchestrator joins every worker future and only then calls close().
"""

import logging
import queue
import threading
from concurrent.futures import Executor, Future, wait
from typing import Dict, Iterator, List, Sequence

import cv2

from .exceptions import HistogramError, StreamClosedError
from .histograms import Histogram, extract_histogram

logger = logging.getLogger(__name__)

_END_OF_STREAM = object()


class HistogramStream:
    """
    Bounded, closable hand-off between producer workers and one consumer.

    put() blocks while the stream is full. close() is called exactly once
    by the owner after every producer has finished; iteration ends when the
    consumer reaches the close marker.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError(f"Stream capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._queue = queue.Queue(maxsize=capacity)
        self._closed = False
        self._exhausted = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, histogram: Histogram) -> None:
        if self._closed:
            raise StreamClosedError(f"Cannot put {histogram.name}: stream is closed")
        self._queue.put(histogram)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                raise StreamClosedError("Stream already closed")
            self._closed = True
        self._queue.put(_END_OF_STREAM)

    def __iter__(self) -> Iterator[Histogram]:
        while not self._exhausted:
            item = self._queue.get()
            if item is _END_OF_STREAM:
                self._exhausted = True
                return
            yield item

    def drain(self) -> int:
        """Discard items until the close marker so blocked producers can finish."""
        return sum(1 for _ in self)


def compute_histograms(image_paths: Sequence[str], depth: int,
                       stream: HistogramStream) -> Dict[str, int]:
    """
    Worker body: extract a histogram for every path and stream it.

    Unreadable or undecodable files, and files that exhaust memory or
    trip an OpenCV error, are logged and skipped; the worker carries on
    with the rest of its partition.

    Returns:
        Dict with 'processed' and 'errors' counts.
    """
    processed = 0
    errors = 0

    for image_path in image_paths:
        try:
            histogram = extract_histogram(image_path, depth)
        except HistogramError as e:
            logger.warning(f"Skipping {image_path}: {e}")
            errors += 1
            continue
        except (MemoryError, cv2.error) as e:
            logger.warning(f"Skipping {image_path}: {type(e).__name__}: {e}")
            errors += 1
            continue

        stream.put(histogram)
        processed += 1

    logger.debug(
        f"Worker {threading.current_thread().name} done: "
        f"{processed} processed, {errors} errors"
    )
    return {"processed": processed, "errors": errors}


def dispatch_workers(executor: Executor,
                     partitions: Sequence[Sequence[str]],
                     depth: int,
                     stream: HistogramStream) -> List[Future]:
    """Submit one compute_histograms task per partition."""
    return [
        executor.submit(compute_histograms, group, depth, stream)
        for group in partitions
    ]


def close_when_done(futures: Sequence[Future], stream: HistogramStream) -> None:
    """Join barrier: wait for every producer, then close the stream once."""
    wait(futures)
    stream.close()
    logger.debug(f"All {len(futures)} workers finished, stream closed")
