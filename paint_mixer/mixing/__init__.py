"""Color conversion and recipe quantization for the paint mixer."""

from .colors import RGB, hex_to_rgb, normalize_hex, rgb_to_hex, validate_rgb
from .instructions import breakdown, mixing_instructions, parts_visual, ratio_strip
from .quantizer import (
    MixPercentages,
    PartsRecipe,
    percentages_to_parts,
    rgb_to_paint_parts,
    rgb_to_percentages,
)

__all__ = [
    "RGB",
    "hex_to_rgb",
    "normalize_hex",
    "rgb_to_hex",
    "validate_rgb",
    "breakdown",
    "mixing_instructions",
    "parts_visual",
    "ratio_strip",
    "MixPercentages",
    "PartsRecipe",
    "percentages_to_parts",
    "rgb_to_paint_parts",
    "rgb_to_percentages",
]
