from __future__ import annotations

import io
import math
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..config import SETTINGS
from ..mixing.colors import RGB


class ImageDecodeError(ValueError):
    """Raised when uploaded bytes are not an image Pillow can read."""


def load_image(data: bytes) -> Image.Image:
    if not data:
        raise ImageDecodeError("Empty upload")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageDecodeError(f"Unreadable image: {exc}") from exc
    return img.convert("RGB")


def canvas_size(
    width: int,
    height: int,
    max_width: Optional[int] = None,
    max_height: Optional[int] = None,
) -> Tuple[int, int]:
    """Shrink ``width`` x ``height`` to fit the picking canvas.

    Width is limited first and height second, so a tall image that was already
    narrowed may be narrowed again. Images are never enlarged.
    """

    max_w = SETTINGS.canvas_max_width if max_width is None else max_width
    max_h = SETTINGS.canvas_max_height if max_height is None else max_height

    fitted_w = float(width)
    fitted_h = float(height)
    if fitted_w > max_w:
        fitted_h = (max_w / fitted_w) * fitted_h
        fitted_w = float(max_w)
    if fitted_h > max_h:
        fitted_w = (max_h / fitted_h) * fitted_w
        fitted_h = float(max_h)
    return max(1, int(fitted_w)), max(1, int(fitted_h))


def fit_to_canvas(
    img: Image.Image,
    max_width: Optional[int] = None,
    max_height: Optional[int] = None,
) -> Image.Image:
    src = img.convert("RGB")
    size = canvas_size(src.width, src.height, max_width, max_height)
    if size == src.size:
        return src.copy()
    return src.resize(size, Image.Resampling.BILINEAR)


def sample_pixel(
    img: Image.Image,
    x: float,
    y: float,
    display_size: Optional[Tuple[float, float]] = None,
) -> RGB:
    """Return the RGB value under a click at ``(x, y)``.

    ``display_size`` is the on-screen size of the image when it differs from
    its pixel size; click coordinates are scaled back to image pixels.
    """

    if display_size is not None:
        display_w, display_h = display_size
        if display_w <= 0 or display_h <= 0:
            raise ValueError(f"Invalid display size: {display_size}")
        x = x * (img.width / display_w)
        y = y * (img.height / display_h)

    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Invalid coordinates: ({x}, {y})")
    px = math.floor(x)
    py = math.floor(y)
    if not (0 <= px < img.width and 0 <= py < img.height):
        raise ValueError(f"Pixel ({px}, {py}) outside {img.width}x{img.height} image")

    r, g, b = img.convert("RGB").getpixel((px, py))[:3]
    return r, g, b
