"""24-bit colour BMP images and their filters."""

from __future__ import annotations

import math
import struct
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from bmpfilters.bmp8 import ImageFormatError
from bmpfilters.kernels import (
    box_blur_kernel,
    emboss_kernel,
    gaussian_blur_kernel,
    outline_kernel,
    sharpen_kernel,
)

HEADER_BYTES = 54
BITMAP_OFFSET = 0x0A
BITMAP_WIDTH = 0x12
BITMAP_HEIGHT = 0x16
BITMAP_DEPTH = 0x1C
BMP_TYPE = 0x4D42
HEADER_SIZE = 0x0E
INFO_SIZE = 0x28
DEFAULT_DEPTH = 0x18
RESOLUTION = 0x0B13
GRAY_LEVELS = 256

_FILE_HEADER = struct.Struct("<HIHHI")
_INFO_HEADER = struct.Struct("<IiiHHIIiiII")


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _round_half_away(value: float) -> int:
    return math.floor(value + 0.5) if value >= 0 else -math.floor(-value + 0.5)


def _clamp_byte(value: float) -> float:
    return min(255.0, max(0.0, value))


def _row_padding(width: int) -> int:
    return (4 - (width * 3) % 4) % 4


@dataclass(frozen=True)
class Pixel:
    """One RGB pixel with 8-bit channels."""

    red: int = 0
    green: int = 0
    blue: int = 0

    def __post_init__(self) -> None:
        for channel in (self.red, self.green, self.blue):
            if not 0 <= channel <= 255:
                raise ValueError(f"channel value out of range: {channel}")


@dataclass
class Bmp24Image:
    """A colour image stored as rows of pixels, in file order."""

    width: int
    height: int
    color_depth: int = DEFAULT_DEPTH
    data: list[list[Pixel]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("image dimensions must not be negative")
        if not self.data:
            self.data = [[Pixel() for _ in range(self.width)] for _ in range(self.height)]
        if len(self.data) != self.height or any(len(row) != self.width for row in self.data):
            raise ValueError("pixel data does not match the image dimensions")

    def save(self, path: str | Path) -> None:
        """Write the image as an uncompressed 24-bit BMP file."""
        row_size = self.width * 3 + _row_padding(self.width)
        image_size = row_size * self.height
        offset = HEADER_SIZE + INFO_SIZE
        with open(path, "wb") as stream:
            stream.write(_FILE_HEADER.pack(BMP_TYPE, offset + image_size, 0, 0, offset))
            stream.write(
                _INFO_HEADER.pack(
                    INFO_SIZE,
                    self.width,
                    self.height,
                    1,
                    24,
                    0,
                    image_size,
                    RESOLUTION,
                    RESOLUTION,
                    0,
                    0,
                )
            )
            write_pixel_data(self, stream)

    def negative(self) -> None:
        """Invert every channel of every pixel."""
        self.data = [
            [Pixel(255 - p.red, 255 - p.green, 255 - p.blue) for p in row]
            for row in self.data
        ]

    def grayscale(self) -> None:
        """Replace each pixel by the integer mean of its channels."""
        new_rows = []
        for row in self.data:
            new_row = []
            for p in row:
                mean = (p.red + p.green + p.blue) // 3
                new_row.append(Pixel(mean, mean, mean))
            new_rows.append(new_row)
        self.data = new_rows

    def brightness(self, value: int) -> None:
        """Add ``value`` to every channel, clamped to 0..255."""

        def adjust(channel: int) -> int:
            return min(255, max(0, channel + value))

        self.data = [
            [Pixel(adjust(p.red), adjust(p.green), adjust(p.blue)) for p in row]
            for row in self.data
        ]

    def convolution(self, x: int, y: int, kernel: Sequence[Sequence[float]]) -> Pixel:
        """Return the filtered pixel at column ``x``, row ``y``.

        The kernel's first index follows the horizontal displacement and its
        second the vertical one; neighbours outside the image are skipped.
        """
        half = len(kernel) // 2
        red = green = blue = 0.0
        for i in range(-half, half + 1):
            xi = x + i
            for j in range(-half, half + 1):
                yj = y + j
                if 0 <= xi < self.width and 0 <= yj < self.height:
                    neighbour = self.data[yj][xi]
                    coeff = _f32(kernel[i + half][j + half])
                    red = _f32(red + _f32(neighbour.red * coeff))
                    green = _f32(green + _f32(neighbour.green * coeff))
                    blue = _f32(blue + _f32(neighbour.blue * coeff))
        return Pixel(int(_clamp_byte(red)), int(_clamp_byte(green)), int(_clamp_byte(blue)))

    def _apply_kernel(self, kernel: Sequence[Sequence[float]]) -> None:
        offset = len(kernel) // 2
        result = [list(row) for row in self.data]
        for y in range(offset, self.height - offset):
            for x in range(offset, self.width - offset):
                result[y][x] = self.convolution(x, y, kernel)
        self.data = result

    def box_blur(self) -> None:
        """Blur with a uniform 3x3 kernel, leaving the borders untouched."""
        self._apply_kernel(box_blur_kernel())

    def gaussian_blur(self) -> None:
        """Blur with a 3x3 Gaussian kernel, leaving the borders untouched."""
        self._apply_kernel(gaussian_blur_kernel())

    def outline(self) -> None:
        """Detect edges, leaving the borders untouched."""
        self._apply_kernel(outline_kernel())

    def emboss(self) -> None:
        """Apply a relief effect, leaving the borders untouched."""
        self._apply_kernel(emboss_kernel())

    def sharpen(self) -> None:
        """Sharpen the image, leaving the borders untouched."""
        self._apply_kernel(sharpen_kernel())

    def equalize(self) -> None:
        """Equalise the luminance histogram and rescale each pixel's channels."""
        luminances = []
        hist = [0] * GRAY_LEVELS
        for row in self.data:
            lum_row = []
            for p in row:
                lum = _f32(0.299 * p.red + 0.587 * p.green + 0.114 * p.blue)
                lum_row.append(lum)
                hist[min(255, max(0, _round_half_away(lum)))] += 1
            luminances.append(lum_row)

        cdf = []
        running = 0
        for count in hist:
            running += count
            cdf.append(running)
        cdf_min = min(cdf)
        denominator = _f32(self.width * self.height - cdf_min)

        table = []
        for value in cdf:
            if denominator == 0:
                table.append(0)
                continue
            ratio = _f32(_f32(value - cdf_min) / denominator)
            level = _round_half_away(_f32(ratio * 255))
            table.append(min(255, max(0, level)))

        new_rows = []
        for row, lum_row in zip(self.data, luminances):
            new_row = []
            for p, lum in zip(row, lum_row):
                if lum == 0:
                    new_row.append(p)
                    continue
                equalized = float(table[min(255, max(0, _round_half_away(lum)))])
                scale = _f32(equalized / lum)
                new_row.append(
                    Pixel(
                        min(255, _round_half_away(p.red * scale)),
                        min(255, _round_half_away(p.green * scale)),
                        min(255, _round_half_away(p.blue * scale)),
                    )
                )
            new_rows.append(new_row)
        self.data = new_rows


def new_bmp24(width: int, height: int, color_depth: int) -> Bmp24Image:
    """Create a black image of the given size."""
    return Bmp24Image(width=width, height=height, color_depth=color_depth)


def read_pixel_data(stream: BinaryIO, width: int, height: int) -> list[list[Pixel]]:
    """Read ``height`` rows of BGR pixels, skipping the row padding."""
    padding = _row_padding(width)
    rows = []
    for _ in range(height):
        raw = stream.read(width * 3)
        if len(raw) != width * 3:
            raise ImageFormatError("could not read the pixel data")
        rows.append([Pixel(red, green, blue) for blue, green, red in struct.iter_unpack("3B", raw)])
        stream.read(padding)
    return rows


def write_pixel_data(image: Bmp24Image, stream: BinaryIO) -> None:
    """Write the image rows as BGR pixels, each row padded to 4 bytes."""
    pad = bytes(_row_padding(image.width))
    for row in image.data:
        stream.write(b"".join(bytes((p.blue, p.green, p.red)) for p in row))
        stream.write(pad)


def load_bmp24(path: str | Path) -> Bmp24Image:
    """Read a 24-bit colour BMP file."""
    with open(path, "rb") as stream:
        header = stream.read(HEADER_BYTES)
        if len(header) != HEADER_BYTES:
            raise ImageFormatError("could not read the BMP header")
        (width,) = struct.unpack_from("<i", header, BITMAP_WIDTH)
        (height,) = struct.unpack_from("<i", header, BITMAP_HEIGHT)
        (color_depth,) = struct.unpack_from("<H", header, BITMAP_DEPTH)
        (offset,) = struct.unpack_from("<I", header, BITMAP_OFFSET)
        if width < 0 or height < 0:
            raise ImageFormatError("unsupported image dimensions")
        stream.seek(offset)
        data = read_pixel_data(stream, width, height)
    return Bmp24Image(width=width, height=height, color_depth=color_depth, data=data)