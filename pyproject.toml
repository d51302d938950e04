[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bmpfilters"
version = "0.1.0"
description = "Load, filter and save 8-bit grayscale and 24-bit colour BMP images"
requires-python = ">=3.10"
dependencies = []
keywords = ["bmp", "bitmap", "image", "filter", "convolution", "histogram", "equalization"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Editors :: Raster-Based",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bmpfilters = "bmpfilters.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["bmpfilters"]

[tool.pytest.ini_options]
addopts = "-ra"
