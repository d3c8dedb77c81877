"""Request-scoped mixing state.

The page is rebuilt from the query string on every request, so the state that
a browser app would keep in memory travels in the URL instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .config import PRESET_COLORS, SETTINGS, Preset
from .mixing.colors import RGB, hex_to_rgb, rgb_to_hex
from .mixing.quantizer import PartsRecipe, rgb_to_paint_parts

LOGGER = logging.getLogger("paint-mixer")


def find_preset(name: str) -> Optional[Preset]:
    for preset in PRESET_COLORS:
        if preset.name == name:
            return preset
    return None


@dataclass
class MixerSession:
    selected_color: str
    color_name: str
    paint_parts: PartsRecipe = field(default_factory=PartsRecipe)
    image_token: Optional[str] = None
    picking: bool = False

    @classmethod
    def initial(cls) -> "MixerSession":
        session = cls(
            selected_color=SETTINGS.default_color,
            color_name=SETTINGS.default_color_name,
        )
        if not session.select_color(SETTINGS.default_color):
            LOGGER.warning("Ignoring invalid DEFAULT_COLOR %r", SETTINGS.default_color)
            session.select_color("#FF6B6B")
        return session

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "MixerSession":
        session = cls.initial()
        color = args.get("color")
        if color and not session.select_color(color):
            LOGGER.info("Ignoring malformed color %r", color)
        name = args.get("name")
        if name is not None:
            session.color_name = name
        preset_name = args.get("preset")
        if preset_name:
            preset = find_preset(preset_name)
            if preset is None or not session.select_preset(preset):
                LOGGER.info("Ignoring unknown preset %r", preset_name)
        token = args.get("image")
        if token:
            session.attach_image(token)
        return session

    def select_color(self, hex_color: str) -> bool:
        rgb = hex_to_rgb(hex_color)
        if rgb is None:
            return False
        self.selected_color = rgb_to_hex(rgb).upper()
        self.paint_parts = rgb_to_paint_parts(*rgb)
        return True

    def select_preset(self, preset: Preset) -> bool:
        if not self.select_color(preset.hex):
            return False
        self.color_name = preset.name
        return True

    def pick_rgb(self, rgb: RGB) -> None:
        self.select_color(rgb_to_hex(rgb))

    def attach_image(self, token: str) -> None:
        self.image_token = token
        self.picking = True

    def close_image(self) -> None:
        self.image_token = None
        self.picking = False

    def query(self, **extra: str) -> Dict[str, str]:
        params = {"color": self.selected_color, "name": self.color_name}
        if self.image_token:
            params["image"] = self.image_token
        params.update(extra)
        return params
