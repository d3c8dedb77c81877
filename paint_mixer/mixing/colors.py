from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple

RGB = Tuple[int, int, int]

_HEX_PATTERN = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


def hex_to_rgb(text: object) -> Optional[RGB]:
    """Decode ``#RRGGBB`` (hash optional, any case) into an RGB triple.

    Anything that is not exactly six hex digits yields ``None`` rather than an
    exception so callers can simply skip the update.
    """

    if not isinstance(text, str):
        return None
    match = _HEX_PATTERN.fullmatch(text)
    if match is None:
        return None
    r, g, b = (int(group, 16) for group in match.groups())
    return r, g, b


def rgb_to_hex(rgb: RGB) -> str:
    r, g, b = rgb
    return f"#{r:02x}{g:02x}{b:02x}"


def normalize_hex(text: object) -> Optional[str]:
    rgb = hex_to_rgb(text)
    if rgb is None:
        return None
    return rgb_to_hex(rgb).upper()


def validate_rgb(values: Iterable[object]) -> RGB:
    channels = list(values)
    if len(channels) != 3:
        raise ValueError(f"Expected 3 channels, got {len(channels)}")
    coerced = []
    for name, value in zip("rgb", channels):
        try:
            channel = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise ValueError(f"Channel {name} is not an integer: {value!r}") from None
        if not 0 <= channel <= 255:
            raise ValueError(f"Channel {name} out of range 0-255: {channel}")
        coerced.append(channel)
    r, g, b = coerced
    return r, g, b
