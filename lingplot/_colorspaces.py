"""Colors for categories, generated in LCh space

Hue separates the levels of the first factor, lightness the levels of the
second. Chroma is held at the maximum and clipped to the sRGB gamut.
"""
from typing import List, Sequence, Tuple, Union

from colormath.color_objects import LCHabColor, sRGBColor
from colormath.color_conversions import convert_color
import numpy as np


RGB = Tuple[float, float, float]

# Okabe & Ito palette, distinct with color vision deficiency
# https://jfly.uni-koeln.de/html/color_blind/
UNAMBIGUOUS_COLORS = {
    'black': (0.00, 0.00, 0.00),
    'orange': (0.90, 0.60, 0.00),
    'sky blue': (0.35, 0.70, 0.90),
    'bluish green': (0.00, 0.60, 0.50),
    'yellow': (0.95, 0.90, 0.25),
    'blue': (0.00, 0.45, 0.70),
    'vermilion': (0.80, 0.40, 0.00),
    'reddish purple': (0.80, 0.60, 0.70),
}


def lch_to_rgb(lightness: float, chroma: float, hue: float) -> RGB:
    "RGB for lightness (0-100), chroma and hue (0-1)"
    rgb = convert_color(LCHabColor(lightness, chroma, hue * 360), sRGBColor)
    return rgb.clamped_rgb_r, rgb.clamped_rgb_g, rgb.clamped_rgb_b


def hue_circle(n: int, start: float = 0.2) -> np.ndarray:
    "``n`` evenly spaced hues, starting at ``start``"
    return np.linspace(start, start + 1, n, endpoint=False) % 1.


def unambiguous_colors(n: int, picks: Union[bool, Sequence[int]] = True) -> List[RGB]:
    "The first ``n`` unambiguous colors, or those numbered in ``picks`` (1-8)"
    palette = list(UNAMBIGUOUS_COLORS.values())
    if picks is True:
        if n > len(palette):
            raise ValueError(f"unambiguous=True for {n} > {len(palette)} colors")
        return palette[:n]
    picks = list(picks)
    if min(picks) < 1 or max(picks) > len(palette):
        raise ValueError(f"unambiguous={picks}: values outside range (1, {len(palette)})")
    return [palette[i - 1] for i in picks]


def oneway_colors(
        n: int,
        hue_start: Union[float, Sequence[float]] = 0.2,
        light_range: Union[float, Tuple[float, float]] = 0.5,
) -> List[RGB]:
    "Colors with different hues and a lightness gradient"
    if np.isscalar(hue_start):
        hues = hue_circle(n, hue_start)
    elif len(hue_start) < n:
        raise ValueError(f"{hue_start=}: need at least as many hues as there are cells ({n})")
    else:
        hues = hue_start
    if np.isscalar(light_range):
        light_range = (0.5 + 0.5 * light_range, 0.5 - 0.5 * light_range)
    lightness = np.linspace(100 * light_range[0], 100 * light_range[1], n)
    return [lch_to_rgb(l, 100, h) for l, h in zip(lightness, hues)]


def twoway_colors(
        n1: int,
        n2: int,
        hue_start: float = 0.2,
        lightness: Union[float, Sequence[float]] = None,
) -> List[RGB]:
    "``n1`` hues times ``n2`` lightness levels, in row-major order"
    if lightness is None:
        lightness = 60. / n2
    if np.isscalar(lightness):
        levels = np.linspace(lightness, 100 - lightness, n2)
    elif len(lightness) != n2:
        raise ValueError(f"{lightness=}: need {n2} values")
    else:
        levels = lightness
    return [lch_to_rgb(l, 100, h) for h in hue_circle(n1, hue_start) for l in levels]
