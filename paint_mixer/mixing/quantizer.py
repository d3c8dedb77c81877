"""RGB to acrylic paint parts.

The recipe is a heuristic, not a pigment model: RGB is converted to CMYK
percentages plus a white percentage, and those are squeezed onto a 0-10
"parts" scale through a fixed sequence of override passes. Each pass may
overwrite what an earlier one produced, so the order below matters.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Dict, Iterator, Tuple

from ..config import PIGMENT_KEYS

MAX_PARTS = 10


def round_half_up(value: float) -> int:
    # Math.round semantics; the built-in round() is banker's rounding.
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class MixPercentages:
    cyan: int
    magenta: int
    yellow: int
    black: int
    white: int

    def items(self) -> Iterator[Tuple[str, int]]:
        for key in PIGMENT_KEYS:
            yield key, getattr(self, key)


@dataclass(frozen=True)
class PartsRecipe:
    cyan: int = 0
    magenta: int = 0
    yellow: int = 0
    black: int = 0
    white: int = 0

    def __iter__(self) -> Iterator[int]:
        return (getattr(self, key) for key in PIGMENT_KEYS)

    @property
    def total(self) -> int:
        return sum(self)

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


PURE_WHITE = PartsRecipe(white=MAX_PARTS)
PURE_BLACK = PartsRecipe(black=MAX_PARTS)


def rgb_to_percentages(r: int, g: int, b: int) -> MixPercentages:
    r_norm = r / 255
    g_norm = g / 255
    b_norm = b / 255

    brightest = max(r_norm, g_norm, b_norm)
    darkest = min(r_norm, g_norm, b_norm)

    k_value = 1 - brightest
    if k_value < 1:
        c_value = (1 - r_norm - k_value) / (1 - k_value)
        m_value = (1 - g_norm - k_value) / (1 - k_value)
        y_value = (1 - b_norm - k_value) / (1 - k_value)
    else:
        c_value = m_value = y_value = 0.0

    lightness = (brightest + darkest) / 2
    saturation = brightest - darkest

    white = 0
    if lightness > 0.5 and saturation < 0.8:
        white = round_half_up((lightness - 0.5) * 200)

    return MixPercentages(
        cyan=round_half_up(c_value * 100),
        magenta=round_half_up(m_value * 100),
        yellow=round_half_up(y_value * 100),
        black=round_half_up(k_value * 100),
        white=white,
    )


def _scale_to_parts(percent: float) -> int:
    scaled = percent / 10
    if math.isnan(scaled):
        return 0
    return round_half_up(scaled) or 0


def _dampen_black(k: int) -> int:
    """Compress black nonlinearly; a little carbon black goes a long way."""

    if k > 80:
        return min(10, round_half_up(k / 15))
    if k > 50:
        return min(5, round_half_up(k / 20))
    if k > 20:
        return min(3, round_half_up(k / 25))
    if k > 5:
        return 1
    return 0


def percentages_to_parts(percentages: MixPercentages) -> PartsRecipe:
    p = percentages

    if p.cyan == 0 and p.magenta == 0 and p.yellow == 0 and p.black == 0:
        return PURE_WHITE
    if p.black == 100:
        return PURE_BLACK

    parts = {key: _scale_to_parts(percent) for key, percent in p.items()}

    if parts["black"] > 0:
        parts["black"] = _dampen_black(p.black)

    non_zero = [value for value in parts.values() if value > 0]
    if non_zero and max(non_zero) < 2:
        for key, percent in p.items():
            if percent > 5:
                parts[key] = max(1, round_half_up(percent / 15))

    for key, percent in p.items():
        if percent > 15 and parts[key] == 0:
            parts[key] = 1

    for key in parts:
        parts[key] = min(parts[key], MAX_PARTS)

    if sum(parts.values()) < 2:
        max_percent = max(percent for _, percent in p.items())
        if max_percent > 0:
            for key, percent in p.items():
                if percent <= 0:
                    continue
                ratio = percent / max_percent
                if key == "black":
                    parts[key] = min(2, round_half_up(ratio * 2))
                else:
                    parts[key] = max(1, round_half_up(ratio * 5))

    return PartsRecipe(**parts)


def rgb_to_paint_parts(r: int, g: int, b: int) -> PartsRecipe:
    """Return the mixing recipe for an RGB color with channels in 0-255."""

    return percentages_to_parts(rgb_to_percentages(r, g, b))
