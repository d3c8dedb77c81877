from __future__ import annotations

import io
from typing import Any, Dict

from flask import jsonify, send_file
from PIL import Image

from .config import PIGMENTS, Preset
from .mixing.colors import RGB, hex_to_rgb, rgb_to_hex
from .mixing.instructions import mixing_instructions, parts_visual
from .mixing.quantizer import rgb_to_paint_parts


def recipe_payload(rgb: RGB) -> Dict[str, Any]:
    recipe = rgb_to_paint_parts(*rgb)
    return {
        "color": rgb_to_hex(rgb).upper(),
        "rgb": list(rgb),
        "parts": recipe.as_dict(),
        "total": recipe.total,
        "instructions": mixing_instructions(recipe),
        "visual": {
            pigment.key: parts_visual(value) for pigment, value in zip(PIGMENTS, recipe)
        },
    }


def preset_payload(preset: Preset) -> Dict[str, Any]:
    rgb = hex_to_rgb(preset.hex)
    if rgb is None:
        raise ValueError(f"Malformed preset color: {preset.hex}")
    return {
        "name": preset.name,
        "hex": preset.hex,
        "description": preset.description,
        "recipe": recipe_payload(rgb),
    }


def error_response(message: str, status: int = 400):
    return jsonify(error=message), status


def send_png(img: Image.Image):
    buffer = io.BytesIO()
    img.save(buffer, "PNG", optimize=True)
    buffer.seek(0)
    return send_file(buffer, mimetype="image/png")
