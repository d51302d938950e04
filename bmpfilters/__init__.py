"""Load, filter and save 8-bit grayscale and 24-bit colour BMP images."""

__version__ = "0.1.0"
__all__ = ["bmp8", "bmp24", "kernels", "menu", "cli"]