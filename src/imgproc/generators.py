from __future__ import annotations
from enum import Enum
import math
from typing import Optional, Tuple

import numpy as np

from .helpers import FractalParams, GeneratorConfig


def cast_u8(values: np.ndarray) -> np.ndarray:
    """Fixed-width cast: truncate toward zero, then keep the low 8 bits."""
    return np.mod(np.trunc(values).astype(np.int64), 256).astype(np.uint8)


def _cast_u8_scalar(value: float) -> int:
    return int(value) % 256


# Gradient

GRADIENT_FREQ = 0.01
GRADIENT_AMPLITUDE = 0.5


def gradient_pixel(x: int, y: int) -> Tuple[int, int, int]:
    """(r, g, b) of the gradient at pixel (x, y)."""
    r = GRADIENT_AMPLITUDE * math.sin(x * GRADIENT_FREQ) * 255
    g = GRADIENT_AMPLITUDE * math.sin(y * GRADIENT_FREQ) * 255
    b = GRADIENT_AMPLITUDE * math.sin((x + y) * GRADIENT_FREQ) * 255
    return _cast_u8_scalar(r), _cast_u8_scalar(g), _cast_u8_scalar(b)


def generate_gradient(config: Optional[GeneratorConfig] = None) -> np.ndarray:
    """Sinusoidal RGB field; red follows x, green follows y, blue follows x + y."""
    cfg = config or GeneratorConfig()
    yy, xx = np.mgrid[0:cfg.height, 0:cfg.width].astype(np.float64)

    img = np.empty((cfg.height, cfg.width, 3), dtype=np.uint8)
    img[..., 0] = cast_u8(GRADIENT_AMPLITUDE * np.sin(xx * GRADIENT_FREQ) * 255)
    img[..., 1] = cast_u8(GRADIENT_AMPLITUDE * np.sin(yy * GRADIENT_FREQ) * 255)
    img[..., 2] = cast_u8(GRADIENT_AMPLITUDE * np.sin((xx + yy) * GRADIENT_FREQ) * 255)
    return img


# Fractal
# Arithmetic runs in params.dtype (float32 by default) with real and imaginary
# parts as separate values: z*z + c = (re*re - im*im + cr, re*im + im*re + ci).

def map_to_complex(
    x: int, y: int, width: int, height: int, params: Optional[FractalParams] = None,
) -> complex:
    """Pixel -> starting point z0. Rows drive the real axis, columns the imaginary one."""
    p = params or FractalParams()
    f = p.dtype
    cx = f(y) * (f(p.span) / f(width)) - f(p.offset)
    cy = f(x) * (f(p.span) / f(height)) - f(p.offset)
    return complex(cx, cy)


def escape_count(
    z0: complex,
    c: complex = complex(-0.4, 0.6),
    max_iter: int = 255,
    radius: float = 2.0,
    dtype: type = np.float32,
) -> int:
    """Iterations of z <- z*z + c before |z| > radius, capped at max_iter."""
    re, im = dtype(z0.real), dtype(z0.imag)
    cr, ci = dtype(c.real), dtype(c.imag)
    r = dtype(radius)
    n = 0
    while n < max_iter and np.hypot(re, im) <= r:
        re, im = re * re - im * im + cr, re * im + im * re + ci
        n += 1
    return n


def fractal_pixel(
    x: int, y: int, width: int = 800, height: int = 800,
    params: Optional[FractalParams] = None,
) -> Tuple[int, int, int]:
    p = params or FractalParams()
    f = p.dtype
    z0 = map_to_complex(x, y, width, height, p)
    green = escape_count(z0, p.c, p.max_iter, p.escape_radius, f)
    return (
        _cast_u8_scalar(f(p.red_scale) * f(x)),
        green % 256,
        _cast_u8_scalar(f(p.blue_scale) * f(y)),
    )


def _escape_counts(zr: np.ndarray, zi: np.ndarray, params: FractalParams) -> np.ndarray:
    """Vectorized escape_count over a grid given as real/imaginary planes."""
    f = params.dtype
    cr, ci = f(params.c.real), f(params.c.imag)
    r = f(params.escape_radius)
    re = zr.ravel()
    im = zi.ravel()
    counts = np.zeros(re.shape, dtype=np.int64)

    # only points still inside the radius are iterated
    idx = np.flatnonzero(np.hypot(re, im) <= r)
    re, im = re[idx], im[idx]
    for _ in range(params.max_iter):
        if idx.size == 0:
            break
        re, im = re * re - im * im + cr, re * im + im * re + ci
        counts[idx] += 1
        keep = np.hypot(re, im) <= r
        idx = idx[keep]
        re, im = re[keep], im[keep]
    return counts.reshape(zr.shape)


def generate_fractal(
    config: Optional[GeneratorConfig] = None,
    params: Optional[FractalParams] = None,
) -> np.ndarray:
    """Escape-time Julia set for c = -0.4 + 0.6i, red/blue ramps along x/y."""
    cfg = config or GeneratorConfig()
    p = params or FractalParams()
    f = p.dtype
    yy, xx = np.mgrid[0:cfg.height, 0:cfg.width].astype(f)

    cx = yy * (f(p.span) / f(cfg.width)) - f(p.offset)
    cy = xx * (f(p.span) / f(cfg.height)) - f(p.offset)

    img = np.empty((cfg.height, cfg.width, 3), dtype=np.uint8)
    img[..., 0] = cast_u8(f(p.red_scale) * xx)
    img[..., 1] = np.mod(_escape_counts(cx, cy, p), 256).astype(np.uint8)
    img[..., 2] = cast_u8(f(p.blue_scale) * yy)
    return img


class GenerationMode(Enum):
    GRADIENT = "gradient"
    FRACTAL = "fractal"

    @property
    def size(self) -> Tuple[int, int]:
        cfg = GeneratorConfig()
        return (cfg.width, cfg.height)

    def render(
        self,
        config: Optional[GeneratorConfig] = None,
        params: Optional[FractalParams] = None,
    ) -> np.ndarray:
        """Render this mode; params only applies to FRACTAL."""
        if self is GenerationMode.GRADIENT:
            return generate_gradient(config)
        return generate_fractal(config, params)
