"""
Dataset directory enumeration.

A dataset is a flat directory of images sharing a single file extension.
Failing to list it is fatal for a search run.
"""

import os
import logging
from typing import List, Sequence

from .exceptions import DatasetError

logger = logging.getLogger(__name__)

IMAGE_EXTENSION = os.environ.get("SEARCH_IMAGE_EXT", ".jpg")


def list_images(directory: str, extension: str = IMAGE_EXTENSION) -> List[str]:
    """
    List image filenames in a dataset directory.

    Args:
        directory: Dataset directory.
        extension: Recognized image extension, matched case-insensitively.

    Returns:
        Sorted list of filenames (not paths).

    Raises:
        DatasetError: If the directory cannot be read.
    """
    extension = extension.lower()
    if not extension.startswith('.'):
        extension = '.' + extension

    try:
        entries = os.listdir(directory)
    except OSError as e:
        raise DatasetError(f"Cannot read dataset directory {directory}: {e}") from e

    filenames = sorted(
        f for f in entries
        if os.path.splitext(f)[1].lower() == extension
        and os.path.isfile(os.path.join(directory, f))
    )
    logger.info(f"Found {len(filenames)} {extension} images in {directory}")
    return filenames


def resolve_paths(directory: str, filenames: Sequence[str]) -> List[str]:
    return [os.path.join(directory, f) for f in filenames]
