"""Infrastructure helpers for image uploads and pixel sampling."""

from .sampling import ImageDecodeError, canvas_size, fit_to_canvas, load_image, sample_pixel
from .store import STORE, ImageStore, image_token

__all__ = [
    "ImageDecodeError",
    "canvas_size",
    "fit_to_canvas",
    "load_image",
    "sample_pixel",
    "STORE",
    "ImageStore",
    "image_token",
]
