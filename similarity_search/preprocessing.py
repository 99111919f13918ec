"""
Image loading and channel normalization for histogram extraction.

Decodes raw file bytes with OpenCV and widens every sample to the 16-bit
channel range, so 8-bit and 16-bit sources are handled the same way
downstream.
"""

import logging

import cv2
import numpy as np

from .exceptions import ImageDecodeError, ImageReadError

logger = logging.getLogger(__name__)

# 8-bit samples are replicated into both bytes: 0xAB -> 0xABAB
UINT8_TO_UINT16 = 257


def read_image_bytes(path: str) -> bytes:
    """Read an image file from disk, raising ImageReadError on failure."""
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise ImageReadError(path, f"cannot read file ({e.strerror or e})") from e


def decode_image(data: bytes, name: str = "<bytes>") -> np.ndarray:
    """
    Decode an encoded image into an RGB pixel grid.

    Args:
        data: Encoded image bytes.
        name: Identifier used in error messages.

    Returns:
        RGB image of shape (H, W, 3), uint8 or uint16.

    Raises:
        ImageDecodeError: If the bytes are not a decodable raster image.
    """
    buffer = np.frombuffer(data, dtype=np.uint8)
    if buffer.size == 0:
        raise ImageDecodeError(name, "empty image data")

    image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageDecodeError(name, "not a decodable image")

    if image.dtype not in (np.uint8, np.uint16):
        raise ImageDecodeError(name, f"unsupported sample type {image.dtype}")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGB)
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def load_image(path: str) -> np.ndarray:
    """Read and decode an image file into an RGB pixel grid."""
    image = decode_image(read_image_bytes(path), name=path)
    logger.debug(f"Decoded {path}: {image.shape[1]}x{image.shape[0]} {image.dtype}")
    return image


def to_rgb16(image_np: np.ndarray) -> np.ndarray:
    """
    Widen an RGB image to the 16-bit channel range.

    Grayscale input is expanded to three equal channels and an alpha
    channel is dropped, so the result is always (H, W, 3).

    Returns:
        uint32 array with channel values in [0, 65535].
    """
    if image_np.ndim == 2:
        image_np = np.stack([image_np] * 3, axis=-1)
    elif image_np.shape[2] > 3:
        image_np = image_np[:, :, :3]

    if image_np.dtype == np.uint8:
        widened = image_np.astype(np.uint32)
        widened *= UINT8_TO_UINT16
        return widened
    if image_np.dtype == np.uint16:
        return image_np.astype(np.uint32)
    raise ValueError(f"Expected uint8 or uint16 image, got {image_np.dtype}")
