import os.path as osp

import numpy as np
import cv2


def loadImage(imPath):
    if not osp.exists(imPath):
        raise ValueError(f'Invalid image path: {imPath}')
    image = cv2.imread(imPath, cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError(f'Unable to decode image: {imPath}')
    return image


def normalizeImage(image):
    """
    Gray scale, float32, min-max normalised to [0, 1].
    """
    if image.ndim == 3:
        image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return cv2.normalize(image, None, 0, 1, cv2.NORM_MINMAX, cv2.CV_32F)


def drawKeypoints(image, keypoints, lineLength=5, radius=3):
    if image.dtype != np.uint8:
        image = np.clip(np.round(image * 255), 0, 255).astype(np.uint8)
    if image.ndim == 2:
        plotImage = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    else:
        plotImage = image.copy()

    for keypoint in keypoints:
        # Keypoint positions are in octave resolution
        scale = 2 ** keypoint.octave
        x, y = keypoint.x * scale, keypoint.y * scale
        if keypoint.hasOrientation():
            theta = np.deg2rad(keypoint.angle)
            end = (int(np.round(x + np.cos(theta) * lineLength * scale)), int(np.round(y + np.sin(theta) * lineLength * scale)))
            cv2.line(plotImage, (x, y), end, color=(150, 0, 0), thickness=1, lineType=cv2.LINE_AA)
        cv2.circle(plotImage, (x, y), radius=radius, color=(0, 69, 255), thickness=-1, lineType=cv2.LINE_AA)
    return plotImage
