import numpy as np
import pytest

from handsift.keypoint import GradientPatch, Keypoint
from handsift.descriptor import calcDescriptor, calcDescriptors
from handsift.sift import buildDescriptors


def makePatch(angle):
    angle = np.asarray(angle, dtype=np.float64)
    return GradientPatch(magnitude=np.ones_like(angle), angle=angle)


def test_descriptor_length():
    descriptor = calcDescriptor(makePatch(np.zeros((16, 16))))
    assert descriptor.shape == (128,)
    assert descriptor.dtype == np.float64


def test_constant_patch():
    descriptor = calcDescriptor(makePatch(np.full((16, 16), 100.0)))
    blocks = descriptor.reshape(16, 8)
    expected = np.zeros(8)
    expected[2] = 16
    for block in blocks:
        np.testing.assert_array_equal(block, expected)


def test_blocks_are_visited_column_major():
    rows, cols = np.mgrid[0:16, 0:16]
    # Block (rowBlock, colBlock) falls in bin 2 * colBlock + rowBlock % 2
    angle = 90.0 * (cols // 4) + 45.0 * ((rows // 4) % 2)
    blocks = calcDescriptor(makePatch(angle)).reshape(16, 8)
    blockIdx = 0
    for colBlock in range(4):
        for rowBlock in range(4):
            assert blocks[blockIdx][2 * colBlock + rowBlock % 2] == 16
            assert blocks[blockIdx].sum() == 16
            blockIdx += 1


def test_incomplete_blocks_are_dropped():
    descriptor = calcDescriptor(makePatch(np.zeros((10, 14))))
    # 2 * 3 complete blocks
    assert descriptor.shape == (2 * 3 * 8,)
    assert descriptor.sum() == 2 * 3 * 16


def test_patch_smaller_than_block_gives_empty_descriptor():
    descriptor = calcDescriptor(makePatch(np.zeros((2, 2))))
    assert descriptor.shape == (0,)
    assert descriptor.dtype == np.float64
    assert calcDescriptors([makePatch(np.zeros((2, 2)))] * 3).shape == (3, 0)


def test_block_size_must_be_positive():
    with pytest.raises(ValueError):
        calcDescriptor(makePatch(np.zeros((16, 16))), blockSize=0)


def test_descriptor_is_pure():
    rng = np.random.default_rng(0)
    patch = makePatch(rng.uniform(0, 360, size=(16, 16)))
    angleBefore = patch.angle.copy()
    first = calcDescriptor(patch)
    second = calcDescriptor(patch)
    assert first.tobytes() == second.tobytes()
    np.testing.assert_array_equal(patch.angle, angleBefore)


def test_no_patches():
    assert calcDescriptors([]).shape == (0, 0)


def test_build_descriptors_skips_keypoints_without_patch():
    withPatch = Keypoint(x=10, y=10, octave=0, interval=1, angle=5.0, patch=makePatch(np.zeros((16, 16))))
    without = Keypoint(x=1, y=1, octave=0, interval=1)
    other = Keypoint(x=20, y=10, octave=0, interval=2, angle=95.0, patch=makePatch(np.full((16, 16), 90.0)))
    descriptors = buildDescriptors([withPatch, without, other])
    assert descriptors.shape == (2, 128)
    assert descriptors[0].reshape(16, 8)[:, 0].sum() == 256
    assert descriptors[1].reshape(16, 8)[:, 2].sum() == 256
