from __future__ import annotations
import math
from typing import Callable, Dict

import cv2
import numpy as np
from skimage.color import rgb2gray
from skimage.util import img_as_ubyte

from .errors import InvalidArgument, OutOfBounds
from .helpers import CropRect


# Pixel operations on uint8 arrays: (H, W, 3) RGB or (H, W) luma.
# Every function returns a new array and leaves its input untouched.

def blur(img: np.ndarray, sigma: float) -> np.ndarray:
    """Gaussian blur; kernel size is derived from sigma by OpenCV."""
    if not (sigma > 0 and math.isfinite(sigma)):
        raise InvalidArgument(f"blur sigma must be a finite number > 0, got {sigma}")
    return cv2.GaussianBlur(img, (0, 0), sigmaX=float(sigma), sigmaY=float(sigma))


def brighten(img: np.ndarray, delta: int) -> np.ndarray:
    """Add delta to every channel, saturating at 0 and 255."""
    # any |delta| >= 255 already saturates every channel
    delta = max(-255, min(255, int(delta)))
    out = img.astype(np.int16) + delta
    return np.clip(out, 0, 255).astype(np.uint8)


def crop(img: np.ndarray, rect: CropRect) -> np.ndarray:
    if rect.width == 0 or rect.height == 0:
        raise InvalidArgument(
            f"crop {rect.x},{rect.y},{rect.width},{rect.height} has zero width or height"
        )
    height, width = img.shape[:2]
    if rect.x + rect.width > width or rect.y + rect.height > height:
        raise OutOfBounds(
            f"crop {rect.x},{rect.y},{rect.width},{rect.height} "
            f"exceeds image bounds {width}x{height}"
        )
    return img[rect.y:rect.y + rect.height, rect.x:rect.x + rect.width].copy()


def rotate90(img: np.ndarray) -> np.ndarray:
    return cv2.rotate(img, cv2.ROTATE_90_CLOCKWISE)


def rotate180(img: np.ndarray) -> np.ndarray:
    return cv2.rotate(img, cv2.ROTATE_180)


def rotate270(img: np.ndarray) -> np.ndarray:
    return cv2.rotate(img, cv2.ROTATE_90_COUNTERCLOCKWISE)


QUARTER_TURNS: Dict[int, Callable[[np.ndarray], np.ndarray]] = {
    90: rotate90,
    180: rotate180,
    270: rotate270,
}


def rotate(img: np.ndarray, degrees: int) -> np.ndarray:
    """Clockwise rotation for exactly 90/180/270; any other angle is a no-op."""
    fn = QUARTER_TURNS.get(degrees)
    if fn is None:
        return img.copy()
    return fn(img)


def invert(img: np.ndarray) -> np.ndarray:
    return cv2.bitwise_not(img)


def grayscale(img: np.ndarray) -> np.ndarray:
    """RGB -> single-channel luma (Rec. 709 weights). Luma input is copied."""
    if img.ndim == 2:
        return img.copy()
    return img_as_ubyte(rgb2gray(img))
