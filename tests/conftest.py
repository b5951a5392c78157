import numpy as np
import pytest


BLOB_CENTER = (32, 32)
BLOB_SIGMA = 3.8


def makeBlob(shape, center, sigma, amplitude=1.0):
    """Radially symmetric Gaussian blob on a flat zero background."""
    rows, cols = np.mgrid[0 : shape[0], 0 : shape[1]]
    y, x = center
    dist2 = (rows - y) ** 2 + (cols - x) ** 2
    return (amplitude * np.exp(-dist2 / (2 * sigma ** 2))).astype(np.float32)


@pytest.fixture
def blobImage():
    return makeBlob((65, 65), BLOB_CENTER, BLOB_SIGMA)


@pytest.fixture
def zeroImage():
    return np.zeros((64, 64), dtype=np.float32)


@pytest.fixture
def noiseImage():
    rng = np.random.default_rng(7)
    return rng.random((80, 96)).astype(np.float32)
