from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np
import os

from .errors import DecodeError, EncodeError, InvalidArgument


# Config dataclasses (lightweight & reusable)

@dataclass(frozen=True)
class GeneratorConfig:
    width: int = 800
    height: int = 800


@dataclass(frozen=True)
class FractalParams:
    c: complex = complex(-0.4, 0.6)   # Julia constant
    escape_radius: float = 2.0
    max_iter: int = 255               # also the green channel cap
    span: float = 3.0                 # width of the complex window
    offset: float = 1.5               # window is [-offset, span - offset]
    red_scale: float = 0.3
    blue_scale: float = 0.3
    dtype: type = np.float32          # precision of the mapping and the iteration


@dataclass(frozen=True)
class CropRect:
    x: int
    y: int
    width: int
    height: int

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class TransformRequest:
    blur: Optional[float] = None        # sigma, > 0
    brighten: Optional[int] = None      # signed delta
    crop: Optional[CropRect] = None
    rotate: Optional[int] = None        # degrees; only 90/180/270 rotate
    invert: bool = False
    grayscale: bool = False

    def is_empty(self) -> bool:
        return (
            self.blur is None
            and self.brighten is None
            and self.crop is None
            and self.rotate is None
            and not self.invert
            and not self.grayscale
        )


@dataclass
class PipelineConfig:
    request: TransformRequest = field(default_factory=TransformRequest)
    outfile: Optional[str] = None
    show: bool = False


# Argument parsing helpers

_CROP_FIELDS = ("x", "y", "width", "height")


def parse_crop(value: str) -> CropRect:
    """Parse ``"x,y,width,height"`` into a :class:`CropRect`.

    Raises InvalidArgument naming the malformed field.
    """
    parts = value.split(",")
    if len(parts) != len(_CROP_FIELDS):
        raise InvalidArgument(f"Invalid crop value: {value}")
    numbers = []
    for name, part in zip(_CROP_FIELDS, parts):
        try:
            n = int(part)
        except ValueError:
            raise InvalidArgument(f"Invalid {name} value: {part}") from None
        if n < 0:
            raise InvalidArgument(f"Invalid {name} value: {part}")
        numbers.append(n)
    return CropRect(*numbers)


# Codec: bytes <-> RGB arrays (OpenCV works in BGR internally)

def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes into an RGB uint8 array. Raises DecodeError."""
    buf = np.frombuffer(data, dtype=np.uint8)
    if buf.size == 0:
        raise DecodeError("Could not decode image: empty input")
    img_bgr = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    if img_bgr is None:
        raise DecodeError("Could not decode image: unsupported or corrupt data")
    return cv2.cvtColor(img_bgr, cv2.COLOR_BGR2RGB)


def encode_image(img: np.ndarray, ext: str = ".png") -> bytes:
    """Encode an RGB (or single-channel) uint8 array. Raises EncodeError."""
    if not ext.startswith("."):
        ext = "." + ext
    if img.ndim == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)
    try:
        ok, buf = cv2.imencode(ext, img)
    except cv2.error as exc:
        raise EncodeError(f"Could not encode image as {ext}") from exc
    if not ok:
        raise EncodeError(f"Could not encode image as {ext}")
    return buf.tobytes()


# I/O helpers

def load_image_rgb(path: str | os.PathLike) -> np.ndarray:
    """Load an image file as RGB uint8. Raises DecodeError on failure."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise DecodeError(f"Could not read image: {path}") from exc
    try:
        return decode_image(data)
    except DecodeError as exc:
        raise DecodeError(f"Could not read image: {path}") from exc


def save_image(img: np.ndarray, path: str | os.PathLike) -> None:
    """Encode by file extension, then write. Nothing is written if encoding fails."""
    p = Path(path)
    if not p.suffix:
        raise EncodeError(f"Could not infer output format from: {path}")
    try:
        data = encode_image(img, p.suffix.lower())
    except EncodeError as exc:
        raise EncodeError(f"Failed writing {path}: {exc}") from exc
    try:
        p.write_bytes(data)
    except OSError as exc:
        raise EncodeError(f"Failed writing {path}") from exc
