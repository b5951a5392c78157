import numpy as np
from logzero import logger

from handsift.orientation import buildHistogram


DESCR_BLOCK_SIZE = 4
DESCR_HIST_BIN_WIDTH = 45
DESCR_HIST_MAX = 360


def calcDescriptor(patch, blockSize=DESCR_BLOCK_SIZE, binWidth=DESCR_HIST_BIN_WIDTH, maximum=DESCR_HIST_MAX):
    """
    Concatenated angle histograms of the blockSize * blockSize blocks of the patch.
    Blocks are visited column-major: columns outer, rows inner. Incomplete
    blocks on the right / bottom edge are left out, so a patch smaller
    than one block gives an empty descriptor.
    """
    if blockSize < 1:
        raise ValueError(f'blockSize must be >= 1, got {blockSize}')
    angle = patch.angle
    h, w = angle.shape

    blockHistograms = [np.zeros(0, dtype=np.int64)]
    for col in range(0, w - blockSize + 1, blockSize):
        for row in range(0, h - blockSize + 1, blockSize):
            block = angle[row : row + blockSize, col : col + blockSize]
            blockHistograms.append(buildHistogram(block, binWidth, maximum))
    return np.concatenate(blockHistograms).astype(np.float64)


def calcDescriptors(patches, blockSize=DESCR_BLOCK_SIZE, binWidth=DESCR_HIST_BIN_WIDTH, maximum=DESCR_HIST_MAX):
    descriptors = [calcDescriptor(patch, blockSize, binWidth, maximum) for patch in patches]
    if not descriptors:
        return np.zeros((0, 0), dtype=np.float64)
    descriptors = np.stack(descriptors)
    logger.debug(f'The descriptors shape: {descriptors.shape}')
    return descriptors
