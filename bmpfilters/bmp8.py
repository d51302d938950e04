"""8-bit grayscale BMP images and their filters."""

from __future__ import annotations

import math
import struct
from collections.abc import Sequence
from dataclasses import dataclass
from itertools import accumulate
from pathlib import Path

HEADER_BYTES = 54
COLOR_TABLE_BYTES = 1024
GRAY_LEVELS = 256

BITMAP_WIDTH = 0x12
BITMAP_HEIGHT = 0x16
BITMAP_DEPTH = 0x1C
BITMAP_SIZE_RAW = 0x22


class ImageFormatError(ValueError):
    """Raised when a file is not a readable 8-bit BMP image."""


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _round_half_away(value: float) -> int:
    return math.floor(value + 0.5) if value >= 0 else -math.floor(-value + 0.5)


@dataclass
class Bmp8Image:
    """A grayscale image: raw header, palette and one byte per pixel."""

    header: bytes
    color_table: bytes
    data: bytearray
    width: int
    height: int
    color_depth: int

    def __post_init__(self) -> None:
        if len(self.header) != HEADER_BYTES:
            raise ValueError(f"header must be {HEADER_BYTES} bytes")
        if len(self.color_table) != COLOR_TABLE_BYTES:
            raise ValueError(f"color table must be {COLOR_TABLE_BYTES} bytes")
        self.header = bytes(self.header)
        self.color_table = bytes(self.color_table)
        self.data = bytearray(self.data)

    @property
    def data_size(self) -> int:
        return len(self.data)

    @property
    def _pixel_count(self) -> int:
        return min(self.width * self.height, len(self.data))

    def save(self, path: str | Path) -> None:
        """Write header, palette and pixel data to ``path``."""
        with open(path, "wb") as stream:
            stream.write(self.header)
            stream.write(self.color_table)
            stream.write(self.data)

    def info(self) -> str:
        """Describe the image dimensions and sizes."""
        return "\n".join(
            [
                "Image info:",
                f"\tWidth : {self.width}",
                f"\tHeight : {self.height}",
                f"\tColor Depth : {self.color_depth}",
                f"\tDataSize : {self.data_size}",
            ]
        )

    def negative(self) -> None:
        """Invert every pixel."""
        count = self._pixel_count
        self.data[:count] = bytes(255 - value for value in self.data[:count])

    def brightness(self, value: int) -> None:
        """Add ``value`` to every pixel, clamped to 0..255."""
        count = self._pixel_count
        self.data[:count] = bytes(
            min(255, max(0, pixel + value)) for pixel in self.data[:count]
        )

    def threshold(self, threshold: int) -> None:
        """Set pixels at or above ``threshold`` to white, the rest to black."""
        count = self._pixel_count
        self.data[:count] = bytes(
            255 if pixel >= threshold else 0 for pixel in self.data[:count]
        )

    def apply_filter(self, kernel: Sequence[Sequence[float]]) -> None:
        """Convolve the image with a square kernel, leaving the borders as they are."""
        offset = len(kernel) // 2
        coefficients = [[_to_float32(c) for c in row] for row in kernel]
        width = self.width
        source = bytes(self.data)
        result = bytearray(source)
        for i in range(offset, self.height - offset):
            for j in range(offset, width - offset):
                total = 0.0
                for ki, row in enumerate(coefficients):
                    base = (i + ki - offset) * width + j - offset
                    for kj, coeff in enumerate(row):
                        product = _to_float32(source[base + kj] * coeff)
                        total = _to_float32(total + product)
                total = min(255.0, max(0.0, total))
                result[i * width + j] = int(total)
        self.data[:] = result

    def histogram(self) -> list[int]:
        """Count the pixels of each gray level."""
        counts = [0] * GRAY_LEVELS
        for pixel in self.data:
            counts[pixel] += 1
        return counts

    def equalize(self) -> None:
        """Spread the gray levels using the normalised cumulative histogram."""
        mapping = compute_cdf(self.histogram())
        self.data[:] = bytes(mapping[pixel] for pixel in self.data)


def compute_cdf(hist: Sequence[int]) -> list[int]:
    """Turn a 256-bin histogram into an equalisation lookup table.

    Levels below the first occupied one map to 0; a histogram with a single
    occupied level (or none) maps every level to 0.
    """
    if len(hist) != GRAY_LEVELS:
        raise ValueError(f"histogram must have {GRAY_LEVELS} bins")
    cdf = list(accumulate(hist))
    cdf_min = next((value for value in cdf if value != 0), 0)
    denominator = cdf[-1] - cdf_min
    if denominator == 0:
        return [0] * GRAY_LEVELS
    single_denominator = _to_float32(denominator)
    table = []
    for value in cdf:
        ratio = _to_float32(_to_float32(max(value - cdf_min, 0)) / single_denominator)
        table.append(min(255, _round_half_away(_to_float32(ratio * 255))))
    return table


def load_bmp8(path: str | Path) -> Bmp8Image:
    """Read an 8-bit grayscale BMP file."""
    with open(path, "rb") as stream:
        header = stream.read(HEADER_BYTES)
        if len(header) != HEADER_BYTES:
            raise ImageFormatError("could not read the BMP header")
        if header[BITMAP_DEPTH] != 8:
            raise ImageFormatError("image is not an 8-bit grayscale BMP")
        (width,) = struct.unpack_from("<I", header, BITMAP_WIDTH)
        (height,) = struct.unpack_from("<I", header, BITMAP_HEIGHT)
        (color_depth,) = struct.unpack_from("<I", header, BITMAP_DEPTH)
        (data_size,) = struct.unpack_from("<I", header, BITMAP_SIZE_RAW)
        color_table = stream.read(COLOR_TABLE_BYTES)
        if len(color_table) != COLOR_TABLE_BYTES:
            raise ImageFormatError("could not read the color table")
        data = stream.read(data_size)
        if len(data) != data_size:
            raise ImageFormatError("could not read the pixel data")
    return Bmp8Image(
        header=header,
        color_table=color_table,
        data=bytearray(data),
        width=width,
        height=height,
        color_depth=color_depth,
    )