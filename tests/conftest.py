"""Shared test fixtures for similarity search tests."""

import os
import shutil

import numpy as np
import cv2
import pytest

DATASET_SIZE = 20
IMAGE_SHAPE = (8, 8, 3)
QUERY_INDEX = 7
SOLID_QUERY_INDEX = 5


def write_png(path, rgb):
    """Write an RGB array to a lossless PNG file."""
    bgr = cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)
    assert cv2.imwrite(str(path), bgr)
    return str(path)


@pytest.fixture
def png_writer():
    """Return a helper that writes an RGB array as PNG."""
    return write_png


@pytest.fixture
def red_image():
    """Generate a 2x2 pure red image."""
    return np.full((2, 2, 3), (255, 0, 0), dtype=np.uint8)


@pytest.fixture
def gray_image():
    """Generate a 3x4 solid mid-gray image."""
    return np.full((3, 4, 3), 128, dtype=np.uint8)


@pytest.fixture
def noise_image():
    """Generate an 8x8 random noise image."""
    rng = np.random.RandomState(42)
    return rng.randint(0, 255, IMAGE_SHAPE, dtype=np.uint8)


@pytest.fixture
def dataset(tmp_path):
    """
    Build a dataset of 20 noise images plus a query directory.

    The query image is a byte-identical copy of img07.png.

    Returns:
        Tuple of (dataset_dir, query_path).
    """
    dataset_dir = tmp_path / "dataset"
    query_dir = tmp_path / "queries"
    dataset_dir.mkdir()
    query_dir.mkdir()

    for i in range(DATASET_SIZE):
        rng = np.random.RandomState(1000 + i)
        image = rng.randint(0, 255, IMAGE_SHAPE, dtype=np.uint8)
        write_png(dataset_dir / f"img{i:02d}.png", image)

    query_path = query_dir / "query.png"
    shutil.copyfile(dataset_dir / f"img{QUERY_INDEX:02d}.png", query_path)
    return str(dataset_dir), str(query_path)


@pytest.fixture
def solid_dataset(tmp_path):
    """
    Build a dataset of 20 solid-color 8x8 images plus a query directory.

    img00.png is pure red. Image i has the color
    ((37i) % 256, (71i) % 256, (113i) % 256), which has no zero channel
    for i in 1..19. The query is a byte-identical copy of img05.png.

    Returns:
        Tuple of (dataset_dir, query_path).
    """
    dataset_dir = tmp_path / "solid"
    query_dir = tmp_path / "solid_queries"
    dataset_dir.mkdir()
    query_dir.mkdir()

    for i in range(DATASET_SIZE):
        color = (255, 0, 0) if i == 0 else ((37 * i) % 256, (71 * i) % 256, (113 * i) % 256)
        image = np.full(IMAGE_SHAPE, color, dtype=np.uint8)
        write_png(dataset_dir / f"img{i:02d}.png", image)

    query_path = query_dir / "query.png"
    shutil.copyfile(dataset_dir / f"img{SOLID_QUERY_INDEX:02d}.png", query_path)
    return str(dataset_dir), str(query_path)


@pytest.fixture
def query_name():
    return f"img{QUERY_INDEX:02d}.png"


@pytest.fixture
def corrupt_file(tmp_path):
    path = os.path.join(str(tmp_path), "corrupt.png")
    with open(path, "wb") as f:
        f.write(b"this is not an image")
    return path
