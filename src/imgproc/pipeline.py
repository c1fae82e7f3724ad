from __future__ import annotations
import logging
from typing import Optional

import numpy as np

from . import ops
from .helpers import TransformRequest

logger = logging.getLogger(__name__)


class TransformPipeline:
    """Apply a TransformRequest in fixed order.

    blur -> brighten -> crop -> rotate -> invert -> grayscale, each at most
    once and only when requested. The order in which fields were set on the
    request does not matter. Errors from a step abort the remaining steps.
    """

    def __init__(self, request: Optional[TransformRequest] = None) -> None:
        self.request = request or TransformRequest()

    def blur(self, img: np.ndarray) -> np.ndarray:
        if self.request.blur is None:
            return img
        logger.debug("blur sigma=%s", self.request.blur)
        return ops.blur(img, self.request.blur)

    def brighten(self, img: np.ndarray) -> np.ndarray:
        if self.request.brighten is None:
            return img
        logger.debug("brighten delta=%s", self.request.brighten)
        return ops.brighten(img, self.request.brighten)

    def crop(self, img: np.ndarray) -> np.ndarray:
        if self.request.crop is None:
            return img
        logger.debug("crop rect=%s", self.request.crop.as_tuple())
        return ops.crop(img, self.request.crop)

    def rotate(self, img: np.ndarray) -> np.ndarray:
        if self.request.rotate is None:
            return img
        if self.request.rotate not in ops.QUARTER_TURNS:
            logger.debug("rotate %s ignored (not 90/180/270)", self.request.rotate)
        else:
            logger.debug("rotate %s", self.request.rotate)
        return ops.rotate(img, self.request.rotate)

    def invert(self, img: np.ndarray) -> np.ndarray:
        if not self.request.invert:
            return img
        logger.debug("invert")
        return ops.invert(img)

    def grayscale(self, img: np.ndarray) -> np.ndarray:
        if not self.request.grayscale:
            return img
        logger.debug("grayscale")
        return ops.grayscale(img)

    def run(self, img: np.ndarray) -> np.ndarray:
        out = self.blur(img)
        out = self.brighten(out)
        out = self.crop(out)
        out = self.rotate(out)
        out = self.invert(out)
        out = self.grayscale(out)
        return out


def apply(image: np.ndarray, request: TransformRequest) -> np.ndarray:
    return TransformPipeline(request).run(image)
