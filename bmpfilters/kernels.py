"""Convolution kernels used by the image filters."""

from __future__ import annotations

import struct
from collections.abc import Sequence

Kernel = tuple[tuple[float, ...], ...]


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def scale_kernel(values: Sequence[Sequence[float]], factor: float) -> Kernel:
    """Return ``values`` multiplied by ``factor``, in single precision."""
    single_factor = _to_float32(factor)
    return tuple(
        tuple(_to_float32(_to_float32(value) * single_factor) for value in row)
        for row in values
    )


def box_blur_kernel() -> Kernel:
    """Uniform 3x3 averaging kernel."""
    return scale_kernel(((1, 1, 1), (1, 1, 1), (1, 1, 1)), 1.0 / 9.0)


def gaussian_blur_kernel() -> Kernel:
    """3x3 approximation of a Gaussian blur."""
    return scale_kernel(((1, 2, 1), (2, 4, 2), (1, 2, 1)), 1.0 / 16.0)


def sharpen_kernel() -> Kernel:
    """3x3 sharpening kernel."""
    return scale_kernel(((0, -1, 0), (-1, 5, -1), (0, -1, 0)), 1.0)


def outline_kernel() -> Kernel:
    """3x3 edge detection kernel."""
    return scale_kernel(((-1, -1, -1), (-1, 8, -1), (-1, -1, -1)), 1.0)


def emboss_kernel() -> Kernel:
    """3x3 relief kernel."""
    return scale_kernel(((-2, -1, 0), (-1, 1, 1), (0, 1, 2)), 1.0)