# bmpfilters

Load, edit and save uncompressed BMP images from the terminal or from Python.
The package handles two kinds of image:

- **8-bit grayscale** BMPs. These have a 54-byte header, then a 1024-byte
  colour table, then one byte per pixel. The header and the colour table are
  kept as they are and written back unchanged.
- **24-bit colour** BMPs. Their rows hold blue, green and red bytes and are
  padded to four bytes. On save, a new 54-byte header is written.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Interactive use

```
bmpfilters [--images DIRECTORY]
```

`--images` gives the directory that holds the images. The default is
`../images`.

The program first asks whether you are working with grayscale (`8`) or colour
(`24`) images. It then shows a menu:

1. Open an image
2. Save an image
3. Apply a filter
4. Show image information (bmp8 only)
5. Histogram equalization
6. Change the image type (bmp8/bmp24)
7. Quit

Give image names without a directory and without the `.bmp` extension. For
example, `lena_gray` refers to `<images>/lena_gray.bmp`.

A grayscale image and a colour image can be loaded at the same time. Menu
actions work on the image of the type currently selected. If an image fails to
load, the image of that type is cleared. An invalid menu choice is asked for
again. The session ends on option 7 or at the end of input.

The filter menu offers the following:

1. Negative
2. Brightness. Asks for a value from -255 to 255.
3. Threshold for grayscale images. Asks for a level from 0 to 255.
   For colour images, conversion to gray instead.
4. Box blur
5. Gaussian blur
6. Sharpen
7. Outline
8. Emboss
9. Back to the main menu

Filters 4 to 8 are 3×3 convolutions. They leave a one-pixel border of the
image unchanged.

## Library use

```python
from bmpfilters.bmp8 import load_bmp8
from bmpfilters.kernels import gaussian_blur_kernel

image = load_bmp8("images/lena_gray.bmp")
print(image.info())
image.apply_filter(gaussian_blur_kernel())
image.equalize()
image.save("images/lena_gray_blurred.bmp")
```

```python
from bmpfilters.bmp24 import load_bmp24

image = load_bmp24("images/flowers_color.bmp")
image.sharpen()
image.brightness(30)
image.save("images/flowers_bright.bmp")
```

### Modules

- `bmpfilters.bmp8`
  - `Bmp8Image` has the methods `negative`, `brightness`, `threshold`,
    `apply_filter(kernel)`, `histogram`, `equalize`, `info` and `save`.
  - `load_bmp8(path)` reads a grayscale image.
  - `compute_cdf(hist)` turns a 256-bin histogram into an equalisation lookup
    table.
- `bmpfilters.bmp24`
  - `Pixel` is an RGB pixel.
  - `Bmp24Image` has the methods `negative`, `grayscale`, `brightness`,
    `convolution(x, y, kernel)`, `box_blur`, `gaussian_blur`, `sharpen`,
    `outline`, `emboss`, `equalize` and `save`.
  - `load_bmp24(path)` reads a colour image.
  - `new_bmp24(width, height, color_depth)` creates a black image.
  - `read_pixel_data` and `write_pixel_data` read and write the pixel rows.
- `bmpfilters.kernels` holds the 3×3 kernels: `box_blur_kernel`,
  `gaussian_blur_kernel`, `sharpen_kernel`, `outline_kernel` and
  `emboss_kernel`. It also has `scale_kernel(values, factor)`, which builds a
  kernel of your own.
- `bmpfilters.menu` has the prompts that read a numeric choice.
- `bmpfilters.cli` has `Session`, `run(reader, out, image_dir)` and `main`.

### Errors

- `load_bmp8` raises `bmpfilters.bmp8.ImageFormatError` when:
  - the file is too short,
  - its depth field is not 8.
- `load_bmp24` raises the same error when:
  - the header or the pixel data is short,
  - the width or height is negative.
- Both raise `OSError` when the file cannot be opened.

## Limitations

- Only uncompressed BMPs are read.
- Colour images with a negative height (top-down row order) are rejected.
- Image information (menu option 4) is only shown for grayscale images.
- Grayscale images are saved with the header they were loaded with. It is
  never rebuilt.