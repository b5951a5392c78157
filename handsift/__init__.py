from handsift.keypoint import Keypoint, GradientPatch, UNSET_ANGLE
from handsift.sift import detect, buildDescriptors, SIFT


__all__ = ['Keypoint', 'GradientPatch', 'UNSET_ANGLE', 'detect', 'buildDescriptors', 'SIFT']
