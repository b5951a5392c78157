import numpy as np
from logzero import logger

from handsift.keypoint import Keypoint


SIFT_IMG_BORDER = 5
SIFT_CURV_THR = 10
SIFT_CONTR_THR = 0.03
SIFT_DETER_THR = 0.0

# (interval, row, col) offsets of the 26 neighbours in a 3 * 3 * 3 cube
NEIGHBOR_OFFSETS = [(s, r, c) for s in (-1, 0, 1) for r in (-1, 0, 1) for c in (-1, 0, 1) if (s, r, c) != (0, 0, 0)]


def isExtremaPoint(firstImage, secondImage, thirdImage, row, col):
    """
    Strict test against all 26 neighbours, ties disqualify.
    Positive centre must be greater than every neighbour, non-positive centre smaller.
    """
    cube = np.stack([image[row - 1 : row + 2, col - 1 : col + 2] for image in (firstImage, secondImage, thirdImage)])
    pixelValue = cube[1, 1, 1]
    neighbors = np.delete(cube.ravel(), 13)
    if pixelValue > 0:
        return bool(np.all(pixelValue > neighbors))
    return bool(np.all(pixelValue < neighbors))


def findExtremaMask(firstImage, secondImage, thirdImage, borderWidth):
    """
    Vectorised form of isExtremaPoint over the scan region
    [borderWidth, dim - borderWidth - 1] in both axes.
    """
    h, w = secondImage.shape
    if h - 2 * borderWidth <= 0 or w - 2 * borderWidth <= 0:
        return np.zeros((max(h - 2 * borderWidth, 0), max(w - 2 * borderWidth, 0)), dtype=bool)
    images = (firstImage, secondImage, thirdImage)
    center = secondImage[borderWidth : h - borderWidth, borderWidth : w - borderWidth]
    isMax = np.ones(center.shape, dtype=bool)
    isMin = np.ones(center.shape, dtype=bool)
    for ds, dr, dc in NEIGHBOR_OFFSETS:
        neighbor = images[ds + 1][borderWidth + dr : h - borderWidth + dr, borderWidth + dc : w - borderWidth + dc]
        isMax &= center > neighbor
        isMin &= center < neighbor
    return np.where(center > 0, isMax, isMin)


def cleanPoint(image, row, col, curvThreshold=SIFT_CURV_THR, contThreshold=SIFT_CONTR_THR, detThreshold=SIFT_DETER_THR):
    """
    Drop low contrast points and edge responses.
    row indexes y and col indexes x, the same as in the extrema scan.
    """
    value = float(image[row, col])
    if abs(value) < contThreshold:
        return False

    fxx = float(image[row, col - 1]) + float(image[row, col + 1]) - 2 * value
    fyy = float(image[row - 1, col]) + float(image[row + 1, col]) - 2 * value
    fxy = float(image[row - 1, col - 1]) + float(image[row + 1, col + 1]) \
        - float(image[row + 1, col - 1]) - float(image[row - 1, col + 1])
    trace = fxx + fyy
    det = fxx * fyy - fxy * fxy
    if det <= detThreshold:
        return False
    curvature = trace * trace / det
    return curvature <= curvThreshold


def calcExtremaPoint(DoGPyramid, borderWidth=SIFT_IMG_BORDER, curvThreshold=SIFT_CURV_THR,
                     contThreshold=SIFT_CONTR_THR, detThreshold=SIFT_DETER_THR):
    if borderWidth < 1:
        raise ValueError(f'borderWidth must be >= 1 to hold a 3 * 3 neighbourhood, got {borderWidth}')
    keypoints = []
    for octaveIdx, DoGImagesInOctave in enumerate(DoGPyramid):
        nCandidates = 0
        # Interior intervals only, so a full 3-interval neighbourhood exists
        for intervalIdx in range(1, len(DoGImagesInOctave) - 1):
            firstImage, secondImage, thirdImage = DoGImagesInOctave[intervalIdx - 1 : intervalIdx + 2]
            mask = findExtremaMask(firstImage, secondImage, thirdImage, borderWidth)
            # argwhere is row-major: rows outer, columns inner
            for row, col in np.argwhere(mask) + borderWidth:
                nCandidates += 1
                if not cleanPoint(secondImage, row, col, curvThreshold, contThreshold, detThreshold):
                    continue
                keypoints.append(Keypoint(x=int(col), y=int(row), octave=octaveIdx, interval=intervalIdx))
        logger.debug(f'Octave {octaveIdx}: {nCandidates} extrema candidates')
    logger.debug(f'[Detect] The number of keypoints: {len(keypoints)}')
    return keypoints
