from __future__ import annotations

from typing import Dict, List

from ..config import PIGMENTS, Pigment
from .quantizer import MAX_PARTS, PartsRecipe


def mixing_instructions(recipe: PartsRecipe) -> str:
    steps = []
    for pigment, value in zip(PIGMENTS, recipe):
        if value > 0:
            unit = "part" if value == 1 else "parts"
            steps.append(f"{value} {unit} {pigment.label}")
    if not steps:
        return "Pure white"
    return " + ".join(steps)


def parts_visual(value: int, max_parts: int = MAX_PARTS) -> List[bool]:
    return [index < value for index in range(max_parts)]


def ratio_strip(recipe: PartsRecipe) -> List[Pigment]:
    strip: List[Pigment] = []
    for pigment, value in zip(PIGMENTS, recipe):
        strip.extend([pigment] * value)
    return strip


def breakdown(recipe: PartsRecipe) -> List[Dict[str, object]]:
    """One row per pigment, in mixing order, for the parts breakdown panel."""

    return [
        {
            "key": pigment.key,
            "label": pigment.label,
            "paint": pigment.paint,
            "swatch": pigment.swatch,
            "text_color": pigment.text_color,
            "value": value,
            "indicators": parts_visual(value),
        }
        for pigment, value in zip(PIGMENTS, recipe)
    ]
