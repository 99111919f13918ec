"""Command-line interface for similarity_search."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Iterable

from .datasets import IMAGE_EXTENSION
from .engine import DEFAULT_WORKERS, SearchEngine
from .exceptions import DatasetError, QueryImageError
from .histograms import DEFAULT_DEPTH
from .selection import DEFAULT_TOP_K

logger = logging.getLogger(__name__)

QUERY_ROOT = os.environ.get("SEARCH_QUERY_ROOT", os.path.join("res", "queryImages"))
DATASET_ROOT = os.environ.get("SEARCH_DATASET_ROOT", "res")


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for a similarity search run."""
    parser = argparse.ArgumentParser(
        prog="similarity-search",
        description="Rank a directory of images by color-histogram similarity to a query image.",
    )
    parser.add_argument(
        "query",
        help="Query image name, resolved against --query-root.",
    )
    parser.add_argument(
        "dataset",
        help="Dataset directory name, resolved against --dataset-root.",
    )
    parser.add_argument(
        "--query-root",
        default=QUERY_ROOT,
        help="Directory holding query images (default: %(default)s).",
    )
    parser.add_argument(
        "--dataset-root",
        default=DATASET_ROOT,
        help="Directory holding dataset directories (default: %(default)s).",
    )
    parser.add_argument(
        "--workers", "-k",
        type=int,
        default=DEFAULT_WORKERS,
        help="Number of dataset partitions processed in parallel (default: %(default)s).",
    )
    parser.add_argument(
        "--top-k",
        type=int,
        default=DEFAULT_TOP_K,
        help="Number of results to report (default: %(default)s).",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=DEFAULT_DEPTH,
        help="Leading zero bins per histogram (default: %(default)s).",
    )
    parser.add_argument(
        "--extension",
        default=IMAGE_EXTENSION,
        help="Image file extension recognized in the dataset (default: %(default)s).",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    query_path = os.path.join(args.query_root, args.query)
    dataset_dir = os.path.join(args.dataset_root, args.dataset)

    try:
        engine = SearchEngine(
            dataset_dir,
            workers=args.workers,
            depth=args.depth,
            top_k=args.top_k,
            extension=args.extension,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    print("|| STARTING ||")
    try:
        results = engine.search(query_path)
    except (DatasetError, QueryImageError) as e:
        logger.error(str(e))
        return 1

    for result in results:
        print(f"|| {result['filename']} ||")
    print("|| DONE ||")
    return 0


if __name__ == "__main__":
    sys.exit(main())
