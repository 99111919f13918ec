"""
Per-channel color histogram extraction.

Builds the raw color fingerprint that the similarity scorer compares:
every pixel contributes its red, blue and green intensities (8-bit range,
in that order) to a flat bin sequence that starts with `depth` zero bins.
Each bin at position i is then divided by the channel sum at index i % 3.

The modulo indexing runs over the whole sequence, padding included, so
with a depth that is not a multiple of 3 a pixel value is normalized by a
neighbouring channel's sum. Histograms are only comparable when they were
built with the same depth, and scoring relies on this exact layout.
"""

import os
import logging
from typing import NamedTuple

import numpy as np

from .exceptions import ImageDecodeError
from .preprocessing import load_image, to_rgb16

logger = logging.getLogger(__name__)

# Number of zero-filled bins leading every histogram.
DEFAULT_DEPTH = int(os.environ.get("HIST_DEPTH", "10"))

# Pixel values are appended red, blue, green; the normalization sums
# are accumulated in the same order.
CHANNEL_ORDER = (0, 2, 1)
NUM_CHANNELS = 3


class Histogram(NamedTuple):
    """Immutable color fingerprint of one image."""
    name: str
    bins: np.ndarray


def compute_histogram(name: str, image_np: np.ndarray,
                      depth: int = DEFAULT_DEPTH) -> Histogram:
    """
    Compute the normalized color histogram of a decoded image.

    Process:
        1. Widen to 16-bit and shift back down by 8 bits per channel
        2. Lay out (red, blue, green) per pixel in row-major order
        3. Prefix `depth` zero bins
        4. Divide bin i by the channel sum at index i % 3

    Args:
        name: Identifier stored on the histogram (usually the file path).
        image_np: RGB image, uint8 or uint16.
        depth: Number of leading zero bins.

    Returns:
        Histogram with depth + 3 * pixel_count float32 bins. A bin whose
        divisor is zero is 0.0.
    """
    if depth < 0:
        raise ValueError(f"depth must be non-negative, got {depth}")

    rgb = to_rgb16(image_np)
    rgb >>= 8
    flat = rgb.reshape(-1, NUM_CHANNELS)

    # pixel values are written straight into the tail of the output
    bins = np.zeros(depth + flat.size, dtype=np.float32)
    pixels = bins[depth:].reshape(-1, NUM_CHANNELS)
    for column, channel in enumerate(CHANNEL_ORDER):
        pixels[:, column] = flat[:, channel]
    del rgb, flat

    channel_sums = pixels.sum(axis=0, dtype=np.float64)
    # value j of a pixel sits at depth + 3p + j, so its divisor is
    # channel_sums[(depth + j) % 3]
    divisors = np.roll(channel_sums, -depth)
    for column in range(NUM_CHANNELS):
        if divisors[column] > 0:
            pixels[:, column] /= np.float32(divisors[column])
        else:
            pixels[:, column] = 0.0

    if np.any(channel_sums == 0):
        logger.debug(f"{name}: zero channel sum, affected bins set to 0")

    return Histogram(name, bins)


def extract_histogram(image_path: str, depth: int = DEFAULT_DEPTH) -> Histogram:
    """
    Load an image file and compute its histogram.

    Raises:
        ImageReadError: The file could not be opened.
        ImageDecodeError: The file is not a decodable image.
    """
    image = load_image(image_path)
    if image.size == 0:
        raise ImageDecodeError(image_path, "image has no pixels")

    return compute_histogram(image_path, image, depth)
