"""Interactive menus that read a numeric choice from the user."""

from __future__ import annotations

from collections.abc import Callable, Container
from typing import TextIO

Reader = Callable[[], str]

IMAGE_TYPE_MENU = (
    "Please choose an option:\n"
    "\t8. bmp8 (grayscale images)\n"
    "\t24. bmp24 (colour images)\n"
)
IMAGE_TYPE_RETRY = "Please choose a valid option (either 8 or 24):\n"

MAIN_MENU = (
    "Please choose an option:\n"
    "\t1. Open an image\n"
    "\t2. Save an image\n"
    "\t3. Apply a filter\n"
    "\t4. Show image information (bmp8 only)\n"
    "\t5. Histogram equalization\n"
    "\t6. Change the image type (bmp8/bmp24)\n"
    "\t7. Quit\n"
)
MAIN_RETRY = "Please choose a valid option (between 1 and 7):\n"

FILTER_MENU = (
    "Please choose a filter:\n"
    "\t1. Negative\n"
    "\t2. Brightness\n"
    "\t3. Threshold (bmp8)/Grayscale (bmp24)\n"
    "\t4. Blur\n"
    "\t5. Gaussian blur\n"
    "\t6. Sharpen\n"
    "\t7. Outline\n"
    "\t8. Emboss\n"
    "\t9. Back to the previous menu\n"
)
FILTER_RETRY = "Please choose a valid option (between 1 and 9):\n"


def _parse_int(text: str) -> int | None:
    try:
        return int(text.strip())
    except ValueError:
        return None


def read_choice(
    reader: Reader, out: TextIO, valid: Container[int], retry_message: str
) -> int:
    """Read integers from ``reader`` until one is in ``valid``.

    ``retry_message`` is written after every rejected entry. EOFError from
    the reader is propagated.
    """
    while True:
        value = _parse_int(reader())
        if value is not None and value in valid:
            return value
        out.write(retry_message)


def _ask(reader: Reader, out: TextIO, menu: str, valid: Container[int], retry: str) -> int:
    out.write(menu)
    choice = read_choice(reader, out, valid, retry)
    out.write(f">>> Your choice : {choice}\n")
    return choice


def ask_image_type(reader: Reader, out: TextIO) -> int:
    """Ask whether to work on 8-bit grayscale or 24-bit colour images."""
    return _ask(reader, out, IMAGE_TYPE_MENU, (8, 24), IMAGE_TYPE_RETRY)


def ask_main_option(reader: Reader, out: TextIO) -> int:
    """Show the main menu and return the chosen option (1 to 7)."""
    return _ask(reader, out, MAIN_MENU, range(1, 8), MAIN_RETRY)


def ask_filter_option(reader: Reader, out: TextIO) -> int:
    """Show the filter menu and return the chosen filter (1 to 9)."""
    return _ask(reader, out, FILTER_MENU, range(1, 10), FILTER_RETRY)