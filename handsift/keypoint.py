from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np


UNSET_ANGLE = -1.0


@dataclass(eq=False)
class GradientPatch:
    """
    Gradient window around a keypoint in its DoG image.
    magnitude / angle: [2W, 2W], row index follows y, column index follows x.
    Angles are in degrees, [0, 360).
    """
    magnitude: np.ndarray
    angle: np.ndarray

    @property
    def shape(self):
        return self.angle.shape


@dataclass
class Keypoint:
    """
    x, y: pixel position inside its octave (column, row)
    interval: DoG interval index the extremum was found in (scale label)
    """
    x: int
    y: int
    octave: int
    interval: int
    angle: float = UNSET_ANGLE
    patch: Optional[GradientPatch] = None

    @property
    def pt(self):
        return (self.x, self.y)

    def hasOrientation(self):
        return self.angle != UNSET_ANGLE

    def toCvKeyPoint(self):
        # Scale back to the resolution of the input image
        scale = 2 ** self.octave
        return cv2.KeyPoint(float(self.x * scale), float(self.y * scale), float(self.interval),
                            float(self.angle), 0., self.octave)
