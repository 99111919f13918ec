"""
Error taxonomy for the similarity search pipeline.

Per-file failures (HistogramError and its subclasses) are recoverable:
dataset workers log and skip them. DatasetError and QueryImageError abort
a whole run.
"""


class SimilaritySearchError(Exception):
    """Base class for all similarity search errors."""


class HistogramError(SimilaritySearchError):
    """A single image could not be turned into a histogram."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class ImageReadError(HistogramError):
    """The image file could not be opened or read."""


class ImageDecodeError(HistogramError):
    """The image bytes are not a supported raster image."""


class HistogramMismatchError(SimilaritySearchError, ValueError):
    """Two histograms of different lengths were compared."""


class DatasetError(SimilaritySearchError):
    """The dataset directory could not be enumerated."""


class QueryImageError(SimilaritySearchError):
    """The query image histogram could not be computed."""


class StreamClosedError(SimilaritySearchError):
    """A producer tried to push onto a closed histogram stream."""
