import numpy as np
from logzero import logger

from handsift.keypoint import GradientPatch


SIFT_HIST_BORDER = 8
ORI_HIST_BIN_WIDTH = 10
ORI_HIST_MAX = 360


def buildHistogram(values, binWidth, maximum):
    """
    Count occurrences of values in [0, maximum) with bins of width binWidth.
    Counts are not weighted by gradient magnitude.
    """
    nBins = int(maximum // binWidth)
    binIdx = np.floor(np.asarray(values, dtype=np.float64).ravel() / binWidth).astype(int)
    if binIdx.size and (binIdx.min() < 0 or binIdx.max() >= nBins):
        raise ValueError(f'Values outside [0, {nBins * binWidth}) for {nBins} bins of width {binWidth}')
    return np.bincount(binIdx, minlength=nBins)


def histogramMax(histogram):
    # argmax returns the first maximum
    indexMax = int(np.argmax(histogram))
    return histogram[indexMax], indexMax


def gradientAngle(dx, dy):
    angle = np.rad2deg(np.arctan2(dy, dx))
    angle = np.where(angle < 0, angle + 360., angle)
    # -tiny + 360 can round up to 360
    angle[angle >= 360.] = 0.
    return angle


def calcGradientPatch(image, row, col, windowHalfSize=SIFT_HIST_BORDER):
    if windowHalfSize < 1:
        raise ValueError(f'windowHalfSize must be >= 1, got {windowHalfSize}')
    h, w = image.shape
    W = windowHalfSize
    # Central differences of the border pixels need one more pixel on each side
    if col - W - 1 < 0 or col + W + 1 > w or row - W - 1 < 0 or row + W + 1 > h:
        return None

    image = image.astype(np.float64)
    top, bottom, left, right = row - W, row + W, col - W, col + W
    dx = image[top:bottom, left + 1 : right + 1] - image[top:bottom, left - 1 : right - 1]
    dy = image[top + 1 : bottom + 1, left:right] - image[top - 1 : bottom - 1, left:right]
    magnitude = np.sqrt(dx * dx + dy * dy)
    return GradientPatch(magnitude=magnitude, angle=gradientAngle(dx, dy))


def calcKeypointOrientation(DoGPyramid, keypoint, windowHalfSize=SIFT_HIST_BORDER,
                            binWidth=ORI_HIST_BIN_WIDTH, maximum=ORI_HIST_MAX):
    """
    Orientation is the centre of the most populated angle bin of the patch.
    A keypoint whose window leaves the image keeps its unset angle and gets no patch.
    """
    DoGImage = DoGPyramid[keypoint.octave][keypoint.interval]
    patch = calcGradientPatch(DoGImage, keypoint.y, keypoint.x, windowHalfSize)
    if patch is None:
        logger.debug(f'Keypoint {keypoint.pt} (octave {keypoint.octave}) window out of bounds')
        return None

    histogram = buildHistogram(patch.angle, binWidth, maximum)
    _, indexMax = histogramMax(histogram)
    keypoint.angle = indexMax * binWidth + binWidth / 2
    keypoint.patch = patch
    return patch


def assignOrientations(DoGPyramid, keypoints, windowHalfSize=SIFT_HIST_BORDER,
                       binWidth=ORI_HIST_BIN_WIDTH, maximum=ORI_HIST_MAX):
    if maximum % binWidth != 0:
        raise ValueError(f'maximum {maximum} is not a multiple of binWidth {binWidth}')
    patches = []
    for keypoint in keypoints:
        patch = calcKeypointOrientation(DoGPyramid, keypoint, windowHalfSize, binWidth, maximum)
        if patch is not None:
            patches.append(patch)
    logger.debug(f'[Orientation] {len(patches)} of {len(keypoints)} keypoints have a gradient patch')
    return patches
