# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Colors and patterns for the cells of categorial variables"""
from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from itertools import product
from typing import Any, Dict, Sequence, Tuple, Union

import matplotlib as mpl

from .._colorspaces import oneway_colors, twoway_colors, unambiguous_colors
from .._data_obj import Factor, Interaction, CellArg
from .._exceptions import KeysMissing


@dataclass
class Style:
    """Appearance of one cell in a plot

    Lines use ``color``, ``marker``, ``linestyle`` and ``linewidth``
    (:class:`~matplotlib.lines.Line2D`); bars and boxes use ``color`` and
    ``hatch`` (:class:`~matplotlib.patches.Patch`).
    """
    color: Any = (0, 0, 0)
    marker: str = None
    hatch: str = ''
    linestyle: str = None
    linewidth: float = None
    zorder: float = 0  # z-order shift (relative to plot element default)

    @cached_property
    def line_args(self):
        return {'color': self.color, 'linestyle': self.linestyle, 'linewidth': self.linewidth, 'marker': self.marker, 'markerfacecolor': self.color, 'zorder': 2 + self.zorder}

    @cached_property
    def patch_args(self):
        return {'facecolor': self.color, 'hatch': self.hatch, 'zorder': 1 + self.zorder}

    @classmethod
    def _coerce(cls, arg):
        if isinstance(arg, cls):
            return arg
        return cls() if arg is None else cls(arg)


def _parent_cell(cell, colors: dict):
    "Color entry for the longest leading part of an interaction cell"
    for i in range(len(cell) - 1, 0, -1):
        if cell[:i] in colors:
            return colors[cell[:i]]
    if cell[0] in colors:
        return colors[cell[0]]
    raise KeyError(cell)


def find_cell_styles(
        cells: Sequence[CellArg] = None,
        colors: ColorsArg = None,
        fallback: bool = True,
) -> StylesDict:
    """Resolve a plot's ``colors`` argument to one :class:`Style` per cell

    Parameters
    ----------
    cells
        Cells for which colors are needed (``None`` for plots without a color
        variable).
    colors
        **str**: A colormap name; cells are mapped onto the colormap in
        regular intervals.
        **list**: A list of colors in the same sequence as cells.
        **dict**: A dictionary mapping each cell to a color or :class:`Style`.
        ``None`` or ``True`` picks colors automatically.
    fallback
        Interaction cells missing from a ``colors`` dict take the color of
        their leading part (e.g., ``('English', 'animal')`` takes the color of
        ``'English'``).
    """
    if cells is None or tuple(cells) == (None,):
        if isinstance(colors, dict):
            out = colors
        else:
            out = {None: 'k' if colors is None or colors is True else colors}
    elif isinstance(colors, (list, tuple)):
        if len(colors) < len(cells):
            raise ValueError(f"{colors=}: only {len(colors)} colors for {len(cells)} cells.")
        out = dict(zip(cells, colors))
    elif isinstance(colors, dict):
        out = dict(colors)
        missing = []
        for cell in cells:
            if cell in out:
                continue
            elif fallback and isinstance(cell, tuple):
                try:
                    out[cell] = _parent_cell(cell, colors)
                    continue
                except KeyError:
                    pass
            missing.append(cell)
        if missing:
            raise KeysMissing(missing, 'colors', colors)
    elif colors is None or colors is True or isinstance(colors, str):
        cmap = colors if isinstance(colors, str) else None
        if all(isinstance(cell, str) for cell in cells):
            out = colors_for_oneway(cells, cmap=cmap)
        elif all(isinstance(cell, tuple) for cell in cells) and len(set(map(len, cells))) == 1:
            out = colors_for_nway(list(zip(*cells)))
        else:
            raise NotImplementedError(f"{cells=}: unequal cell size")
    else:
        raise TypeError(f"{colors=}")
    return {cell: Style._coerce(spec) for cell, spec in out.items()}


def colors_for_categorial(x, hue_start=0.2, cmap=None):
    """Default colors for the cells of a Factor or Interaction

    One-way models get evenly spaced hues (or ``cmap``), multi-way models get
    one hue per cell of the first factor and lightness steps for the rest.
    """
    if isinstance(x, Factor):
        return colors_for_oneway(x.cells, hue_start, cmap=cmap)
    elif isinstance(x, Interaction):
        return colors_for_nway([f.cells for f in x.base], hue_start)
    raise TypeError(f"{x=}: needs to be Factor or Interaction")


def colors_for_oneway(
        cells: Sequence[str],
        hue_start: Union[float, Sequence[float]] = 0.2,
        light_range: Union[float, Tuple[float, float]] = 0.5,
        cmap: str = None,
        unambiguous: Union[bool, Sequence[int]] = None,
):
    """Colors for the cells of one factor

    Parameters
    ----------
    cells
        Cells to color.
    hue_start
        First hue value (``0 <= hue < 1``) or list of hue values.
    light_range : scalar | tuple of 2 scalar
        Amount of lightness variation (default 0.5). If positive, the first
        color is lightest; if negative, the first color is darkest. A tuple
        specifies exact end-points (e.g., ``(1.0, 0.4)``).
    cmap
        Name of a matplotlib colormap (e.g., 'viridis') to use instead of
        hue-based colors.
    unambiguous
        Use `unambiguous colors <https://jfly.uni-koeln.de/html/color_blind/
        #pallet>`_. If ``True``, choose the ``n`` first colors; use a list of
        ``int`` to pick specific colors.

    Returns
    -------
    colors : dict
        ``{cell: (r, g, b)}``.

    Examples
    --------
    Two colors that are distinct for readers with color blindness::

        >>> colors = colors_for_oneway(['English', 'Other'], unambiguous=[2, 3])
    """
    cells = tuple(cells)
    n = len(cells)
    if unambiguous:
        colors = unambiguous_colors(n, unambiguous)
    elif cmap is not None:
        cm = mpl.colormaps[cmap]
        colors = [cm(i / max(1, n - 1)) for i in range(n)]
    else:
        colors = oneway_colors(n, hue_start, light_range)
    return dict(zip(cells, colors))


def colors_for_twoway(
        x1_cells: Sequence[str],
        x2_cells: Sequence[str],
        hue_start: float = 0.2,
        lightness: Union[float, Sequence[float]] = None,
):
    """Colors for the crossed cells of two factors

    Parameters
    ----------
    x1_cells
        Cells of the major factor (one hue each).
    x2_cells
        Cells of the minor factor (one lightness level each).
    hue_start : 0 <= scalar < 1
        First hue value.
    lightness
        Scalar for evenly spaced lightness levels between ``lightness`` and
        ``100 - lightness``, or one lightness value per cell of ``x2_cells``.

    Returns
    -------
    colors : dict
        ``{(cell1, cell2): (r, g, b)}``.
    """
    x1_cells = list(x1_cells)
    x2_cells = list(x2_cells)
    if len(x1_cells) < 2 or len(x2_cells) < 2:
        raise ValueError("Need at least 2 cells on each factor")
    colors = twoway_colors(len(x1_cells), len(x2_cells), hue_start, lightness)
    return dict(zip(product(x1_cells, x2_cells), colors))


def colors_for_nway(
        cell_lists: Sequence[Sequence[str]],
        hue_start: float = 0.2,
):
    """Colors for the crossed cells of several factors

    The first factor determines hue, the combination of the remaining factors
    lightness.

    Parameters
    ----------
    cell_lists : sequence of sequence of str
        Cells of each factor, e.g. for ``Class % Frequency``:
        ``[('animal', 'plant'), ('low', 'high')]``.
    hue_start : 0 <= scalar < 1
        First hue value.
    """
    cell_lists = [list(dict.fromkeys(cells)) for cells in cell_lists]
    if not cell_lists:
        return {}
    elif len(cell_lists) == 1:
        return colors_for_oneway(cell_lists[0], hue_start)
    inner = list(product(*cell_lists[1:]))
    colors = twoway_colors(len(cell_lists[0]), len(inner), hue_start)
    cells = [(cell, *rest) for cell in cell_lists[0] for rest in inner]
    return dict(zip(cells, colors))


ColorArg = Union[str, Sequence[float]]
ColorsArg = Union[bool, ColorArg, Dict[CellArg, ColorArg], Sequence[ColorArg]]
StylesDict = Dict[CellArg, Style]
