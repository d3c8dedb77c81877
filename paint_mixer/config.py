import logging
import os
from dataclasses import dataclass
from typing import NamedTuple, Tuple


@dataclass
class MixerSettings:
    port: int
    log_level: str
    default_color: str
    default_color_name: str
    canvas_max_width: int
    canvas_max_height: int
    upload_ttl: float
    max_uploads: int
    max_upload_bytes: int

    @classmethod
    def from_env(cls) -> "MixerSettings":
        return cls(
            port=int(os.getenv("PORT", "5500")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            default_color=os.getenv("DEFAULT_COLOR", "#FF6B6B"),
            default_color_name=os.getenv("DEFAULT_COLOR_NAME", "Coral Red"),
            canvas_max_width=int(os.getenv("CANVAS_MAX_WIDTH", "600")),
            canvas_max_height=int(os.getenv("CANVAS_MAX_HEIGHT", "400")),
            upload_ttl=float(os.getenv("UPLOAD_TTL", "900")),
            max_uploads=int(os.getenv("MAX_UPLOADS", "16")),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))),
        )


SETTINGS = MixerSettings.from_env()


class Pigment(NamedTuple):
    key: str
    label: str
    letter: str
    swatch: str
    text_color: str
    paint: str


class Preset(NamedTuple):
    name: str
    hex: str
    description: str


PIGMENTS: Tuple[Pigment, ...] = (
    Pigment("cyan", "Cyan", "C", "#0069A5", "white", "Phthalo Blue (GS)"),
    Pigment("magenta", "Magenta", "M", "#D5007F", "white", "Quinacridone Magenta"),
    Pigment("yellow", "Yellow", "Y", "#FFD700", "#1f2937", "Cadmium Yellow Medium"),
    Pigment("black", "Black", "K", "#1a1a1a", "white", "Carbon Black"),
    Pigment("white", "White", "W", "#FAFAFA", "#374151", "Titanium White"),
)

PIGMENT_KEYS: Tuple[str, ...] = tuple(pigment.key for pigment in PIGMENTS)


PRESET_COLORS: Tuple[Preset, ...] = (
    Preset("Sky Blue", "#87CEEB", "Light, airy blue"),
    Preset("Forest Green", "#228B22", "Deep natural green"),
    Preset("Sunset Orange", "#FF6347", "Warm, vibrant orange"),
    Preset("Royal Purple", "#6B3AA0", "Rich, deep purple"),
    Preset("Sunshine Yellow", "#FFD700", "Bright, cheerful yellow"),
    Preset("Rose Pink", "#FF1493", "Bold, romantic pink"),
    Preset("Chocolate Brown", "#7B3F00", "Rich, earthy brown"),
    Preset("Charcoal Gray", "#36454F", "Deep, sophisticated gray"),
)


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=SETTINGS.log_level)
    return logging.getLogger("paint-mixer")
