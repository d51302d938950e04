"""Interactive command-line session for editing BMP images."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from bmpfilters.bmp8 import Bmp8Image, load_bmp8
from bmpfilters.bmp24 import Bmp24Image, load_bmp24
from bmpfilters.kernels import (
    box_blur_kernel,
    emboss_kernel,
    gaussian_blur_kernel,
    outline_kernel,
    sharpen_kernel,
)
from bmpfilters.menu import (
    Reader,
    ask_filter_option,
    ask_image_type,
    ask_main_option,
    read_choice,
)

DEFAULT_IMAGE_DIR = "../images"
IMAGE_EXTENSION = ".bmp"

NO_IMAGE = "No image loaded."
FILTER_DONE = "Filter applied successfully!"
BRIGHTNESS_PROMPT = "Brightness value (+/-) : "
THRESHOLD_PROMPT = "Threshold (0-255) : "

_KERNELS_8: dict[int, Callable[[], tuple[tuple[float, ...], ...]]] = {
    4: box_blur_kernel,
    5: gaussian_blur_kernel,
    6: sharpen_kernel,
    7: outline_kernel,
    8: emboss_kernel,
}

_FILTERS_24: dict[int, Callable[[Bmp24Image], None]] = {
    4: Bmp24Image.box_blur,
    5: Bmp24Image.gaussian_blur,
    6: Bmp24Image.sharpen,
    7: Bmp24Image.outline,
    8: Bmp24Image.emboss,
}


def image_path(directory: str | Path, name: str) -> Path:
    """Return the path of the image called ``name`` inside ``directory``."""
    return Path(directory) / f"{name}{IMAGE_EXTENSION}"


@dataclass
class Session:
    """The images being edited and the type currently worked on."""

    image_dir: Path
    out: TextIO
    image_type: int = 8
    image8: Bmp8Image | None = None
    image24: Bmp24Image | None = None

    @property
    def image(self) -> Bmp8Image | Bmp24Image | None:
        return self.image8 if self.image_type == 8 else self.image24

    def _say(self, message: str) -> None:
        self.out.write(message + "\n")

    def _require_image(self) -> bool:
        if self.image is None:
            self._say(NO_IMAGE)
            return False
        return True

    def open(self, name: str) -> bool:
        """Load the image ``name`` for the current type; on failure it is cleared."""
        path = image_path(self.image_dir, name)
        try:
            if self.image_type == 8:
                self.image8 = load_bmp8(path)
            else:
                self.image24 = load_bmp24(path)
        except (OSError, ValueError):
            if self.image_type == 8:
                self.image8 = None
            else:
                self.image24 = None
            self._say(f"Cannot load file: {name}")
            return False
        self._say("Loaded successfully!")
        return True

    def save(self, name: str) -> bool:
        """Save the current image as ``name``."""
        if not self._require_image():
            return False
        image = self.image
        assert image is not None
        try:
            image.save(image_path(self.image_dir, name))
        except OSError:
            self._say("Cannot open the file for writing")
            return False
        self._say(f"Image saved successfully to {name}")
        return True

    def apply_filter(self, option: int, reader: Reader) -> bool:
        """Apply the filter chosen in the filter menu; 9 goes back without change."""
        if not self._require_image():
            return False
        image = self.image
        if option == 1:
            image.negative()
            self._say("Negative filter applied successfully!")
        elif option == 2:
            self.out.write(BRIGHTNESS_PROMPT)
            value = read_choice(reader, self.out, range(-255, 256), BRIGHTNESS_PROMPT)
            image.brightness(value)
            self._say("Brightness filter applied successfully!")
        elif option == 3:
            if isinstance(image, Bmp8Image):
                self.out.write(THRESHOLD_PROMPT)
                level = read_choice(reader, self.out, range(0, 256), THRESHOLD_PROMPT)
                image.threshold(level)
                self._say("Threshold filter applied successfully!")
            else:
                image.grayscale()
                self._say("Grayscale filter applied successfully!")
        elif option in _KERNELS_8:
            if isinstance(image, Bmp8Image):
                image.apply_filter(_KERNELS_8[option]())
            else:
                _FILTERS_24[option](image)
            self._say(FILTER_DONE)
        elif option == 9:
            return False
        else:
            self._say("Invalid filter choice")
            return False
        return True

    def show_info(self) -> bool:
        """Describe the grayscale image; colour images have no description."""
        if self.image_type != 8:
            self._say("Showing information is not available for colour images.")
            return False
        if not self._require_image():
            return False
        assert self.image8 is not None
        self._say(self.image8.info())
        return True

    def equalize(self) -> bool:
        """Equalise the histogram of the current image."""
        if not self._require_image():
            return False
        self.image.equalize()
        self._say("Equalization applied successfully!")
        return True


def run(reader: Reader, out: TextIO, image_dir: str | Path) -> int:
    """Run the menu loop until the user quits or input ends."""
    try:
        session = Session(Path(image_dir), out, ask_image_type(reader, out))
        while True:
            option = ask_main_option(reader, out)
            if option == 1:
                out.write("Image name: ")
                session.open(reader().strip())
            elif option == 2:
                out.write("New image name: ")
                name = reader().strip()
                session.save(name)
            elif option == 3:
                if session.image is None:
                    out.write(NO_IMAGE + "\n")
                    continue
                session.apply_filter(ask_filter_option(reader, out), reader)
            elif option == 4:
                session.show_info()
            elif option == 5:
                session.equalize()
            elif option == 6:
                session.image_type = ask_image_type(reader, out)
            else:
                break
    except EOFError:
        pass
    return 0


def _stdin_reader() -> str:
    sys.stdout.flush()
    line = sys.stdin.readline()
    if not line:
        raise EOFError
    return line


def main(argv: list[str] | None = None) -> int:
    """Entry point of the interactive image editor."""
    parser = argparse.ArgumentParser(
        prog="bmpfilters", description="Apply filters to BMP images interactively."
    )
    parser.add_argument(
        "--images",
        default=DEFAULT_IMAGE_DIR,
        help="directory holding the images (default: %(default)s)",
    )
    args = parser.parse_args(argv)
    return run(_stdin_reader, sys.stdout, args.images)


if __name__ == "__main__":
    sys.exit(main())