"""
Gaussian scale space and difference-of-Gaussian pyramid.

Every interval of an octave is blurred directly from the octave base image
with its own absolute sigma: sigma_j = SIFT_INIT_SIGMA * SIFT_STEP_SIGMA ** j.
"""
import numpy as np
import cv2
from logzero import logger


SIFT_INIT_SIGMA = 1.6
SIFT_STEP_SIGMA = np.sqrt(2)
INTERPOLATION_SIGMA = 0.5
# Smallest octave that still holds a 3 * 3 neighbourhood
MIN_OCTAVE_SIZE = 3


def createGaussianSigma(nIntervals, sigma=SIFT_INIT_SIGMA, stepSigma=SIFT_STEP_SIGMA):
    """
        Eq: sigma * stepSigma ** j, j in [0, nIntervals + 2]
    """
    return [sigma * stepSigma ** j for j in range(nIntervals + 3)]


def computeNumberOfOctaves(shape, minSize=MIN_OCTAVE_SIZE):
    h, w = shape[:2]
    nOctaves = 0
    while min(h, w) >= minSize:
        nOctaves += 1
        h, w = h // 2, w // 2
    return nOctaves


def checkPyramidGeometry(shape, nOctaves, nIntervals):
    if len(shape) != 2:
        raise ValueError(f'Expected a single-channel image, got shape {shape}')
    if nOctaves < 1:
        raise ValueError(f'nOctaves must be >= 1, got {nOctaves}')
    if nIntervals < 1:
        raise ValueError(f'nIntervals must be >= 1, got {nIntervals}')
    h, w = shape
    last_h, last_w = h // 2 ** (nOctaves - 1), w // 2 ** (nOctaves - 1)
    if min(last_h, last_w) < MIN_OCTAVE_SIZE:
        raise ValueError(f'Image of shape {h} * {w} is too small for {nOctaves} octaves: '
                         f'last octave would be {last_h} * {last_w}, minimum is {MIN_OCTAVE_SIZE} * {MIN_OCTAVE_SIZE}')


def downSample(image, sigma=INTERPOLATION_SIGMA):
    blurredImage = cv2.GaussianBlur(image, (0, 0), sigmaX=sigma, sigmaY=sigma)
    h, w = blurredImage.shape
    # Keep the even columns first, then the even rows
    halfCols = blurredImage[:, 0 : 2 * (w // 2) : 2]
    halfImage = halfCols[0 : 2 * (h // 2) : 2, :]
    return np.ascontiguousarray(halfImage)


def createGaussianPyramid(image, nOctaves, nIntervals, sigma=SIFT_INIT_SIGMA, stepSigma=SIFT_STEP_SIGMA,
                          interpolationSigma=INTERPOLATION_SIGMA):
    image = np.asarray(image)
    checkPyramidGeometry(image.shape, nOctaves, nIntervals)
    gaussianSigmaList = createGaussianSigma(nIntervals, sigma=sigma, stepSigma=stepSigma)
    logger.debug(f'sigmas: {gaussianSigmaList}')

    baseImage = image.astype(np.float32)
    gaussianPyramid = []
    for octaveIdx in range(nOctaves):
        gaussianImagesInOctave = []
        for gaussianSigma in gaussianSigmaList:
            blurredImage = cv2.GaussianBlur(baseImage, (0, 0), sigmaX=gaussianSigma, sigmaY=gaussianSigma)
            gaussianImagesInOctave.append(blurredImage)
        gaussianPyramid.append(gaussianImagesInOctave)
        logger.debug(f'Octave {octaveIdx}: {len(gaussianImagesInOctave)} intervals of {baseImage.shape[0]} * {baseImage.shape[1]}')

        # Prepare next octave base image
        if octaveIdx < nOctaves - 1:
            baseImage = downSample(baseImage, sigma=interpolationSigma)
    return gaussianPyramid


def calcDoGPyramid(gaussianPyramid):
    DoGPyramid = []
    for gaussianImagesInOctave in gaussianPyramid:
        DoGImagesInOctave = []
        for firstImage, secondImage in zip(gaussianImagesInOctave, gaussianImagesInOctave[1:]):
            DoGImagesInOctave.append(firstImage - secondImage)
        DoGPyramid.append(DoGImagesInOctave)
    logger.debug(f'DoG Pyramid: {len(DoGPyramid)} octaves * {len(DoGPyramid[0]) if DoGPyramid else 0} intervals')
    return DoGPyramid


def pyramidShapes(pyramid):
    return [gaussianImagesInOctave[0].shape for gaussianImagesInOctave in pyramid]
