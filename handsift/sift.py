"""
DoG keypoint detector with block histogram descriptors.

[Pipeline]
1. Gaussian pyramid, every interval blurred from the octave base image
2. DoG pyramid
3. 26 neighbour extrema in the interior intervals, low contrast / edge points dropped
4. Orientation from the angle histogram of a 2W * 2W gradient patch
5. Descriptor from the 4 * 4 block angle histograms of that patch
"""
import os
import os.path as osp
import argparse
import logging

import numpy as np
import cv2
import logzero
from logzero import logger

from handsift.pyramid import createGaussianPyramid, calcDoGPyramid, computeNumberOfOctaves, pyramidShapes
from handsift.extrema import calcExtremaPoint, SIFT_IMG_BORDER, SIFT_CURV_THR, SIFT_CONTR_THR, SIFT_DETER_THR
from handsift.orientation import assignOrientations, SIFT_HIST_BORDER, ORI_HIST_BIN_WIDTH, ORI_HIST_MAX
from handsift.descriptor import calcDescriptors
from handsift.utils import loadImage, normalizeImage, drawKeypoints


def detect(image, nOctaves, nIntervals, borderWidth=SIFT_IMG_BORDER, curvThreshold=SIFT_CURV_THR,
           contThreshold=SIFT_CONTR_THR, detThreshold=SIFT_DETER_THR, windowHalfSize=SIFT_HIST_BORDER,
           binWidth=ORI_HIST_BIN_WIDTH, maximum=ORI_HIST_MAX):
    """
    Args:
        image: single channel float image normalised to [0, 1], [H, W]
    Return:
        keypoints in (octave, interval, row, col) order. Keypoints whose window
        fits in their DoG image carry an angle and a gradient patch.
    """
    image = np.asarray(image)
    h, w = image.shape[:2]
    logger.debug(f'Origin image shape: {h} * {w}')

    gaussianPyramid = createGaussianPyramid(image, nOctaves, nIntervals)
    logger.debug(f'Gaussian pyramid octave shapes: {pyramidShapes(gaussianPyramid)}')
    DoGPyramid = calcDoGPyramid(gaussianPyramid)

    keypoints = calcExtremaPoint(DoGPyramid, borderWidth=borderWidth, curvThreshold=curvThreshold,
                                 contThreshold=contThreshold, detThreshold=detThreshold)
    assignOrientations(DoGPyramid, keypoints, windowHalfSize=windowHalfSize, binWidth=binWidth, maximum=maximum)
    return keypoints


def buildDescriptors(keypoints):
    """
    One descriptor row per keypoint holding a gradient patch, in keypoint order.
    """
    return calcDescriptors([keypoint.patch for keypoint in keypoints if keypoint.patch is not None])


def SIFT(image, nOctaves, nIntervals, **kwargs):
    keypoints = detect(image, nOctaves, nIntervals, **kwargs)
    descriptors = buildDescriptors(keypoints)
    return keypoints, descriptors


def parseArgs(argv=None):
    parser = argparse.ArgumentParser(prog='handsift')
    # -------------------------------- PATHS -------------------------------- #
    parser.add_argument('--imPath', required=True)
    parser.add_argument('--saveRoot', default=None)
    # -------------------------------- CONFIGS -------------------------------- #
    parser.add_argument('--nOctaves', type=int, default=None)
    parser.add_argument('--nIntervals', type=int, default=3)
    parser.add_argument('--borderWidth', type=int, default=SIFT_IMG_BORDER)
    parser.add_argument('--curvThreshold', type=float, default=SIFT_CURV_THR)
    parser.add_argument('--contThreshold', type=float, default=SIFT_CONTR_THR)
    parser.add_argument('--detThreshold', type=float, default=SIFT_DETER_THR)
    parser.add_argument('--windowHalfSize', type=int, default=SIFT_HIST_BORDER)
    parser.add_argument('--binWidth', type=float, default=ORI_HIST_BIN_WIDTH)
    # -------------------------------- DEBUG CONFIGS -------------------------------- #
    parser.add_argument('--verbose', action='store_true')
    return parser.parse_args(argv)


def main(argv=None):
    args = parseArgs(argv)
    logzero.loglevel(logging.DEBUG if args.verbose else logging.INFO)

    image = loadImage(args.imPath)
    grayImage = normalizeImage(image)
    nOctaves = args.nOctaves
    if nOctaves is None:
        nOctaves = computeNumberOfOctaves(grayImage.shape, minSize=2 * args.borderWidth + 1)
    logger.debug(f'Num of octaves: {nOctaves}')

    keypoints, descriptors = SIFT(grayImage, nOctaves, args.nIntervals, borderWidth=args.borderWidth,
                                  curvThreshold=args.curvThreshold, contThreshold=args.contThreshold,
                                  detThreshold=args.detThreshold, windowHalfSize=args.windowHalfSize,
                                  binWidth=args.binWidth)
    logger.info(f'{osp.basename(args.imPath)}: {len(keypoints)} keypoints, descriptors {descriptors.shape}')

    if args.saveRoot is not None:
        os.makedirs(args.saveRoot, exist_ok=True)
        cv2.imwrite(osp.join(args.saveRoot, 'keypoints.png'), drawKeypoints(image, keypoints))
        np.save(osp.join(args.saveRoot, 'descriptors.npy'), descriptors)
        logger.info(f'Saved keypoints.png and descriptors.npy to {args.saveRoot}')
    return keypoints, descriptors


if __name__ == '__main__':
    main()
