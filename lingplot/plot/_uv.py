# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Plots of one continuous variable (:class:`~lingplot.Var`)

Categorial plots (:class:`Barplot`, :class:`Boxplot`, :class:`Violin`) place
one element per cell of ``x`` along the x-axis and summarize ``y`` within each
cell through a :class:`~lingplot.Celltable`. :class:`Histogram` and
:class:`Scatter` draw one axes per cell of a facet variable and overlay the
cells of a ``color`` variable.
"""
from dataclasses import replace
import inspect
from itertools import chain
import logging
from typing import Any, Dict, Literal, Sequence, Union

import numpy as np
import scipy.stats
import matplotlib as mpl
import matplotlib.axes
import matplotlib.patches

from .._celltable import Celltable
from .._data_obj import VarArg, CategorialArg, IndexArg, CellArg, Dataset, ascategorial, asvar, assub, cellname
from .._stats import linear_fit, lowess_fit
from ._base import LingFigure, Layout, LegendArg, LegendMixin, CategorialAxisMixin, YLimMixin, facet_cells, frame_title, share_limits
from ._styles import ColorsArg, Style, find_cell_styles


# Axes.boxplot() parameters after the data
BOXPLOT_KEYWORDS = tuple(inspect.signature(matplotlib.axes.Axes.boxplot).parameters)[2:]
# bars, violins and histograms without a color variable
DEFAULT_COLOR = '#0099FF'

TicksArg = Union[bool, Dict[CellArg, str], Sequence[str]]


class _CategorialFigure(CategorialAxisMixin, YLimMixin, LingFigure):
    "Single axes with the cells of ``ct.x`` along the x-axis"

    def __init__(self, ct: Celltable, ylabel, autoscale=False, **kwargs):
        layout = Layout(1, 1, 5, autoscale=autoscale, **kwargs)
        LingFigure.__init__(self, frame_title(ct.y, ct.x), layout)
        self._ax = self._axes[0]
        self._configure_axis_data('y', ct.y, ylabel)

    def _finish(self, ct: Celltable, plot, xlabel, xticks: TicksArg, labels, xtick_delim, origin=None):
        if labels and xticks is True:
            xticks = labels
        self._plot = plot
        CategorialAxisMixin.__init__(self, self._ax, 'x', self._layout, xlabel, ct.x, xticks, xtick_delim, plot.pos, ct.cells, origin)
        YLimMixin.__init__(self, (plot,))
        self._show()


class Barplot(_CategorialFigure):
    r"""Bars for cell means, with error bars

    Parameters
    ----------
    y
        Dependent variable.
    x
        Factor or Interaction; one bar per cell.
    match
        Repeated measures unit (e.g., ``'Subject'``). Cases with the same
        ``match`` and ``x`` values are averaged first, so that bars show the
        mean of subject means.
    sub
        Only plot a subset of the cases.
    cells
        Cells to plot, in this order (default all cells of ``x``).
    error
        Error bar size: ``'sem'`` (standard error, default), ``'2sem'``,
        ``'ci'`` (95% confidence interval), ``'99%ci'`` or ``'sd'``.
    pool_error
        Use one error estimate for all bars (Loftus & Masson 1994). The
        default is to pool for designs in which all cells are measured
        within ``match``.
    ec : matplotlib color
        Error bar color.
    bottom, top
        Y-axis limits (default from the data).
    origin
        Value from which the bars start (default 0, or the y-axis limit
        closest to 0).
    xlabel, ylabel
        Axis labels (``True`` to use the variable names, ``False`` for none).
    labels
        ``{cell: label}`` to rename cells on the axis.
    xticks
        Tick labels as list or ``{cell: label}`` dict; ``False`` for no
        labels.
    xtick_delim
        Delimiter between the components of interaction cells (default
        newline).
    colors
        Bar colors, ``True`` to pick colors for each cell automatically
        (default is ``c`` for all bars).
    pos
        X-axis positions of the bars (default ``0, 1, ...``).
    width
        Width of the bars.
    c
        Color for all bars.
    edgec : matplotlib color
        Bar outline color.
    data
        Dataset in which to evaluate str arguments.
    ...
        Also accepts :ref:`general-layout-parameters`.

    Attributes
    ----------
    means : array
        Bar heights.
    error_bars : array
        Error bar size for each bar.
    """
    def __init__(
            self,
            y: VarArg,
            x: CategorialArg = None,
            match: CategorialArg = None,
            sub: IndexArg = None,
            cells: Sequence[CellArg] = None,
            error: str = 'sem',
            pool_error: bool = None,
            ec: Any = 'k',
            bottom: float = None,
            top: float = None,
            origin: float = None,
            xlabel: Union[bool, str] = True,
            ylabel: Union[bool, str] = True,
            labels: Dict[CellArg, str] = None,
            xticks: TicksArg = True,
            xtick_delim: str = '\n',
            colors: ColorsArg = False,
            pos: Sequence[float] = None,
            width: Union[float, Sequence[float]] = 0.5,
            c: Any = DEFAULT_COLOR,
            edgec: Any = None,
            data: Dataset = None,
            **kwargs,
    ):
        ct = Celltable(y, x, match, sub, cells, data, asvar)
        styles = None if colors is False else find_cell_styles(ct.cells, colors)
        if pool_error is None:
            pool_error = ct.all_within
        _CategorialFigure.__init__(self, ct, ylabel, **kwargs)
        plot = _BarPlot(self._ax, ct, error, pool_error, styles, bottom, top, origin, pos, width, c, edgec, ec)
        self.means = plot.height
        self.error_bars = plot.error_bars
        self._finish(ct, plot, xlabel, xticks, labels, xtick_delim, plot.origin)


class Boxplot(_CategorialFigure):
    r"""Box and whisker plot for each cell

    Parameters
    ----------
    y
        Dependent variable.
    x
        Factor or Interaction; one box per cell.
    match
        Repeated measures unit; values are averaged within each ``match``
        and ``x`` cell first.
    sub
        Only plot a subset of the cases.
    cells
        Cells to plot, in this order (default all cells of ``x``).
    bottom
        Lower y-axis limit (default 0 for positive data, otherwise slightly
        below the smallest value).
    top
        Upper y-axis limit (default from the data).
    xlabel, ylabel
        Axis labels (``True`` to use the variable names, ``False`` for none).
    labels
        ``{cell: label}`` to rename cells on the axis.
    xticks
        Tick labels as list or ``{cell: label}`` dict; ``False`` for no
        labels.
    xtick_delim
        Delimiter between the components of interaction cells.
    colors
        Fill colors for the boxes (``True`` for automatic colors; default
        unfilled).
    data
        Dataset in which to evaluate str arguments.
    label_fliers
        Label outliers with their ``match`` level (requires ``match``).
    ...
        Also accepts :ref:`general-layout-parameters` and
        :meth:`~matplotlib.axes.Axes.boxplot` parameters.
    """
    def __init__(
            self,
            y: VarArg,
            x: CategorialArg = None,
            match: CategorialArg = None,
            sub: IndexArg = None,
            cells: Sequence[CellArg] = None,
            bottom: float = None,
            top: float = None,
            xlabel: Union[bool, str] = True,
            ylabel: Union[bool, str] = True,
            labels: Dict[CellArg, str] = None,
            xticks: TicksArg = True,
            xtick_delim: str = '\n',
            colors: ColorsArg = False,
            data: Dataset = None,
            label_fliers: bool = False,
            **kwargs,
    ):
        ct = Celltable(y, x, match, sub, cells, data, asvar)
        if label_fliers and ct.match is None:
            raise TypeError(f"{label_fliers=}: labels are match levels, so match needs to be specified")
        styles = None if colors is False else find_cell_styles(ct.cells, colors)
        boxplot_args = {key: kwargs.pop(key) for key in BOXPLOT_KEYWORDS if key in kwargs}
        _CategorialFigure.__init__(self, ct, ylabel, **kwargs)
        plot = _BoxPlot(self._ax, ct, styles, bottom, top, label_fliers, boxplot_args)
        self._finish(ct, plot, xlabel, xticks, labels, xtick_delim)


class Violin(_CategorialFigure):
    r"""Kernel density of ``y`` in each cell, mirrored around the cell position

    Parameters
    ----------
    y
        Dependent variable.
    x
        Factor or Interaction; one violin per cell.
    match
        Repeated measures unit; values are averaged within each ``match``
        and ``x`` cell first.
    sub
        Only plot a subset of the cases.
    cells
        Cells to plot, in this order (default all cells of ``x``).
    colors
        Violin colors (default one color per cell).
    data
        Dataset in which to evaluate str arguments.
    points
        Draw the individual values, jittered horizontally.
    means
        Mark the mean of each cell.
    bw_method : str | scalar
        Kernel bandwidth (see :class:`scipy.stats.gaussian_kde`).
    width
        Largest width of a violin.
    xlabel, ylabel
        Axis labels (``True`` to use the variable names, ``False`` for none).
    labels
        ``{cell: label}`` to rename cells on the axis.
    xticks
        Tick labels (see :class:`Barplot`).
    xtick_delim
        Delimiter between the components of interaction cells.
    alpha
        Opacity of the violins.
    ...
        Also accepts :ref:`general-layout-parameters`.
    """
    def __init__(
            self,
            y: VarArg,
            x: CategorialArg = None,
            match: CategorialArg = None,
            sub: IndexArg = None,
            cells: Sequence[CellArg] = None,
            colors: ColorsArg = None,
            data: Dataset = None,
            points: bool = False,
            means: bool = True,
            bw_method: Union[str, float] = None,
            width: float = 0.8,
            xlabel: Union[bool, str] = True,
            ylabel: Union[bool, str] = True,
            labels: Dict[CellArg, str] = None,
            xticks: TicksArg = True,
            xtick_delim: str = '\n',
            alpha: float = 0.6,
            **kwargs,
    ):
        ct = Celltable(y, x, match, sub, cells, data, asvar)
        if colors is None and ct.x is None:
            colors = DEFAULT_COLOR
        styles = find_cell_styles(ct.cells, colors)
        _CategorialFigure.__init__(self, ct, ylabel, autoscale=True, **kwargs)
        plot = _ViolinPlot(self._ax, ct, styles, points, means, bw_method, width, alpha)
        self._finish(ct, plot, xlabel, xticks, labels, xtick_delim)


class _CellPlot:
    "Elements at ``pos`` on the x-axis of ``ax``; tracks the y-axis limits"

    def __init__(self, ax: mpl.axes.Axes, pos, width):
        self.ax = ax
        self.pos = np.asarray(pos)
        margin = np.broadcast_to(width, self.pos.shape)
        self.left = np.min(self.pos - margin)
        self.right = np.max(self.pos + margin)
        self.origin = None
        self.vmin, self.vmax = ax.get_ylim()

    def _set_limits(self, bottom, top, data_max):
        if top is None:
            top = data_max + (data_max - bottom) / 15
            if self.origin is not None:
                top = max(top, self.origin)
        self.ax.set_xlim(self.left, self.right)
        self.set_ylim(bottom, top)

    def set_ylim(self, bottom, top):
        self.ax.set_ylim(bottom, top)
        self.vmin, self.vmax = self.ax.get_ylim()


class _BarPlot(_CellPlot):

    def __init__(self, ax, ct: Celltable, error, pool_error, styles, bottom, top, origin, pos, width, c, edgec, ec):
        n = len(ct.cells)
        pos = np.arange(n) if pos is None else np.asarray(pos)
        height = np.array(ct.get_statistic(np.mean))
        # a pooled estimate applies to every bar
        error_bars = np.array(np.broadcast_to(ct.variability(error, pool_error), (n,)))
        if origin is None:
            if bottom is not None and bottom > 0:
                origin = bottom
            elif top is not None and top < 0:
                origin = top
            else:
                origin = 0
        high = np.max(height + error_bars)
        low = np.min(height - error_bars)
        if bottom is None:
            bottom = min(low - (high - low) / 20, origin)

        bars = ax.bar(pos, height - origin, width, origin, color=c, edgecolor=edgec, ecolor=ec, yerr=error_bars)
        # bars and error bars may extend beyond the y-axis limits
        for artist in chain(bars.patches, *bars.errorbar.lines[1:]):
            artist.set_clip_on(False)
        if styles:
            for cell, bar in zip(ct.cells, bars):
                bar.set_facecolor(styles[cell].color)
                if styles[cell].hatch:
                    bar.set_hatch(styles[cell].hatch)

        self.height = height
        self.error_bars = error_bars
        _CellPlot.__init__(self, ax, pos, width)
        self.origin = origin
        self._set_limits(bottom, top, high)


class _BoxPlot(_CellPlot):

    def __init__(self, ax, ct: Celltable, styles, bottom, top, label_fliers, boxplot_args):
        values = [data.x for data in ct.get_data()]
        pos = boxplot_args.setdefault('positions', np.arange(len(values)))
        self.boxplot = boxes = ax.boxplot(values, **boxplot_args)
        if styles:
            for cell, box in zip(ct.cells, boxes['boxes']):
                corners = np.column_stack([box.get_xdata()[:5], box.get_ydata()[:5]])
                style = styles[cell]
                ax.add_patch(mpl.patches.Polygon(corners, facecolor=style.color, hatch=style.hatch, zorder=-999))
            for median in boxes['medians']:
                median.set_color('black')
        if label_fliers:
            for cell, fliers in zip(ct.cells, boxes['fliers']):
                self._label_fliers(ax, fliers, ct.data[cell].x, ct.groups[cell])

        y_min = min(v.min() for v in values)
        y_max = max(v.max() for v in values)
        if bottom is None:
            bottom = 0 if y_min >= 0 else y_min - (y_max - y_min) / 20
        _CellPlot.__init__(self, ax, pos, 0.5)
        self._set_limits(bottom, top, y_max)

    @staticmethod
    def _label_fliers(ax, fliers, values, groups):
        xs, ys = fliers.get_data()
        if len(xs) == 0:
            return
        for y in set(ys):
            label = ', '.join(cellname(groups[i]) for i in np.flatnonzero(values == y))
            ax.annotate(label, (xs[0] + 0.25, y), va='center')


class _ViolinPlot(_CellPlot):

    def __init__(self, ax, ct: Celltable, styles, points, means, bw_method, width, alpha):
        values = [ct.data[cell].x for cell in ct.cells]
        for cell, v in zip(ct.cells, values):
            if len(v) < 2:
                raise ValueError(f"Cell {cellname(cell)!r} has {len(v)} value(s); a violin needs at least 2")
        pos = np.arange(len(values))
        parts = ax.violinplot(values, pos, widths=width, showextrema=False, bw_method=bw_method)
        for cell, body in zip(ct.cells, parts['bodies']):
            body.set_facecolor(styles[cell].color)
            body.set_edgecolor('k')
            body.set_alpha(alpha)
        if points:
            rng = np.random.RandomState(0)
            for x, v in zip(pos, values):
                jitter = rng.uniform(-width / 6, width / 6, len(v))
                ax.scatter(x + jitter, v, s=6, color='k', alpha=0.5, zorder=3, linewidths=0)
        self.means = np.array([v.mean() for v in values])
        if means:
            ax.scatter(pos, self.means, s=30, color='white', edgecolor='k', zorder=4)
        ax.set_xlim(-width, len(pos) - 1 + width)
        self.bodies = parts['bodies']
        _CellPlot.__init__(self, ax, pos, width)


def _group_index(facet, facet_cell, color, color_cell):
    "Boolean index for one facet and color cell (``None`` for all cases)"
    index = None
    for factor, cell in ((facet, facet_cell), (color, color_cell)):
        if cell is not None:
            index = factor == cell if index is None else index & (factor == cell)
    return index


def _histogram_bins(y, bins, n):
    "Bin edges shared by all histograms of ``y``"
    if bins is None:
        # one bin per value for integers in a narrow range
        if y.x.dtype.kind in 'iu' and y.max() - y.min() < n:
            bins = 'int'
        else:
            bins = 'auto'
    if isinstance(bins, str) and bins == 'int':
        return np.arange(y.min() - 0.5, y.max() + 1, 1)
    elif isinstance(bins, (str, int)):
        return np.histogram_bin_edges(y.x, bins)
    return np.asarray(bins)


def _ax_histogram(ax, data, bins, density, normal, kde, style, label=None, alpha=1.):
    "Histogram with optional normal density and kernel density overlays"
    _, bins, patches = ax.hist(data, bins, density=density, alpha=alpha, label=label, **style.patch_args)
    if normal or kde:
        x = np.linspace(bins[0], bins[-1], 200)
        # densities on the count scale
        scale = 1 if density else len(data) * (bins[1] - bins[0])
        if normal:
            pdf = scipy.stats.norm.pdf(x, np.mean(data), np.std(data, ddof=1))
            ax.plot(x, pdf * scale, '--', color=style.color, linewidth=1)
        if kde:
            ax.plot(x, scipy.stats.gaussian_kde(data)(x) * scale, color=style.color, linewidth=1.5)
    return patches


class Histogram(LegendMixin, LingFigure):
    """Distribution of a continuous variable

    Parameters
    ----------
    y
        Dependent variable.
    x
        Draw a separate histogram for each cell of ``x``, each in its own
        axes.
    color
        Overlay histograms for the cells of ``color`` in the same axes.
    sub
        Only plot a subset of the cases.
    data
        Dataset in which to evaluate str arguments.
    density
        Scale bars so that their area is 1 instead of showing counts.
    bins : str | int | array
        Bin edges, or a ``bins`` argument for
        :func:`numpy.histogram_bin_edges`. All histograms share the same
        bins. Integer data in a narrow range get one bin per value.
    normal
        Overlay a normal distribution with the mean and standard deviation of
        the data.
    kde
        Overlay a kernel density estimate.
    colors
        Colors for the cells of ``color``.
    alpha
        Bar opacity (default 1, or 0.5 when overlaying ``color`` cells).
    legend
        Legend location (see :meth:`~LegendMixin.plot_legend`).
    labels
        ``{cell: label}`` for legend entries.
    xlabel
        X-axis label (default from ``y``).
    axtitle
        Axes titles (default is the cell names of ``x``).
    ...
        Also accepts :ref:`general-layout-parameters`.

    Attributes
    ----------
    bins : array
        Bin edges.
    counts : dict
        ``{(x_cell, color_cell): counts}``.
    """
    def __init__(
            self,
            y: VarArg,
            x: CategorialArg = None,
            color: CategorialArg = None,
            sub: IndexArg = None,
            data: Dataset = None,
            density: bool = False,
            bins: Union[str, int, Sequence[float]] = None,
            normal: bool = False,
            kde: bool = False,
            colors: ColorsArg = None,
            alpha: float = None,
            legend: LegendArg = 'upper right',
            labels: Dict[CellArg, str] = None,
            xlabel: Union[bool, str] = True,
            axtitle: Union[bool, str, Sequence[str]] = True,
            tight: bool = True,
            title: str = None,
            **kwargs,
    ):
        sub, n = assub(sub, data, return_n=True)
        y, n = asvar(y, sub, data, n, return_n=True)
        x = None if x is None else ascategorial(x, sub, data, n)
        color = None if color is None else ascategorial(color, sub, data, n)
        color_cells = facet_cells(color)
        if colors is None and color is None:
            colors = DEFAULT_COLOR
        styles = find_cell_styles(color_cells, colors)
        if alpha is None:
            alpha = 0.5 if color is not None else 1.
        self.bins = _histogram_bins(y, bins, n)

        cells = facet_cells(x)
        layout = Layout(len(cells), 1.5, 3, tight, title, autoscale=True, **kwargs)
        LingFigure.__init__(self, frame_title(y, color, x), layout)

        handles = {}
        self.counts = {}
        for cell, ax in zip(cells, self._axes):
            for color_cell in color_cells:
                index = _group_index(x, cell, color, color_cell)
                values = y.x if index is None else y.x[index]
                if len(values) == 0:
                    continue
                patches = _ax_histogram(ax, values, self.bins, density, normal, kde, styles[color_cell], cellname(color_cell), alpha)
                self.counts[cell, color_cell] = np.histogram(values, self.bins)[0]
                if color_cell is not None:
                    handles.setdefault(color_cell, patches[0])
            ax.autoscale_view()
        share_limits(self._axes)
        if x is not None:
            self._set_axtitle(axtitle, [cellname(cell) for cell in cells])

        self._configure_axis_data('y', None, 'Density' if density else 'Count', 'left')
        self._configure_axis_data('x', y, xlabel, 'bottom')
        LegendMixin.__init__(self, legend, handles, labels)
        self._show()


class Scatter(LegendMixin, LingFigure):
    """Scatter-plot of ``y`` against ``x``, optionally with smoothers and facets

    Parameters
    ----------
    y
        Variable for the y-axis.
    x
        Variable for the x-axis.
    color
        Categories plotted in different colors (each with its own smoother).
    facet
        Plot each cell of ``facet`` in a separate axes; all axes share the
        same limits.
    smooth : False | 'lm' | 'lowess'
        Smoother for each ``color`` category: ``'lm'`` for a regression line
        with confidence band, ``'lowess'`` for a locally weighted regression
        curve.
    ci
        Confidence level of the band around regression lines (``0`` to omit
        the band).
    sub
        Only plot a subset of the cases.
    data
        Dataset in which to evaluate str arguments.
    colors
        Colors for the cells of ``color``.
    alpha
        Point opacity.
    size
        Marker size (scalar, or variable with one size per case).
    markers
        Marker shape (see :mod:`matplotlib.markers`).
    frac
        Fraction of the data used for each lowess estimate.
    legend
        Legend location (see :meth:`~LegendMixin.plot_legend`).
    labels
        ``{cell: label}`` for legend entries (in this order).
    xlabel, ylabel
        Axis labels (default from the data).
    axtitle
        Axes titles (default is the cell names of ``facet``).
    ...
        Also accepts :ref:`general-layout-parameters`.

    Attributes
    ----------
    fits : dict
        ``{(facet_cell, color_cell): fit}`` for each smoother; with
        ``smooth='lm'`` each fit is a :class:`~lingplot.LinearFit`, with
        ``'lowess'`` an ``(x, y)`` tuple.
    """
    def __init__(
            self,
            y: VarArg,
            x: VarArg,
            color: CategorialArg = None,
            facet: CategorialArg = None,
            smooth: Union[bool, Literal['lm', 'lowess']] = False,
            ci: float = .95,
            sub: IndexArg = None,
            data: Dataset = None,
            colors: ColorsArg = None,
            alpha: float = 1.,
            size: Union[VarArg, float] = None,
            markers: str = None,
            frac: float = 2 / 3,
            legend: LegendArg = 'upper right',
            labels: Dict[CellArg, str] = None,
            xlabel: Union[bool, str] = True,
            ylabel: Union[bool, str] = True,
            axtitle: Union[bool, str, Sequence[str]] = True,
            **kwargs):
        if smooth is True:
            smooth = 'lm'
        elif smooth not in (False, None, 'lm', 'lowess'):
            raise ValueError(f"{smooth=}: use 'lm' or 'lowess'")
        sub, n = assub(sub, data, return_n=True)
        y, n = asvar(y, sub, data, n, return_n=True)
        x = asvar(x, sub, data, n)
        color = None if color is None else ascategorial(color, sub, data, n)
        facet = None if facet is None else ascategorial(facet, sub, data, n)
        if size is not None and not np.isscalar(size):
            size = asvar(size, sub, data, n).x
        color_cells = facet_cells(color)
        styles = find_cell_styles(color_cells, colors)

        cells = facet_cells(facet)
        layout = Layout(len(cells), 1, 5 if len(cells) == 1 else 3, autoscale=True, **kwargs)
        LingFigure.__init__(self, frame_title(y, x, facet), layout)

        handles = {}
        self.fits = {}
        for cell, ax in zip(cells, self._axes):
            for color_cell in color_cells:
                index = _group_index(facet, cell, color, color_cell)
                if index is None:
                    x_i, y_i, size_i = x.x, y.x, size
                else:
                    x_i, y_i = x.x[index], y.x[index]
                    size_i = size[index] if isinstance(size, np.ndarray) else size
                if len(x_i) == 0:
                    continue
                style = styles[color_cell]
                points = ax.scatter(x_i, y_i, size_i, color=style.color, marker=markers, alpha=alpha, linewidths=0)
                if color_cell is not None:
                    handles.setdefault(color_cell, points)
                if smooth:
                    if color_cell is None:
                        line_style = Style('k', linewidth=1.5, zorder=1)
                    else:
                        line_style = replace(style, marker=None, linewidth=style.linewidth or 1.5, zorder=style.zorder + 1)
                    fit = self._smooth(ax, smooth, x_i, y_i, ci, frac, line_style, (cell, color_cell))
                    if fit is not None:
                        self.fits[cell, color_cell] = fit
            ax.autoscale_view()
        share_limits(self._axes)
        if facet is not None:
            self._set_axtitle(axtitle, [cellname(cell) for cell in cells])

        self._configure_axis_data('y', y, ylabel, 'left')
        self._configure_axis_data('x', x, xlabel, 'bottom')
        LegendMixin.__init__(self, legend, handles, labels)
        self._show()

    @staticmethod
    def _smooth(ax, kind, x, y, ci, frac, style: Style, group):
        if kind == 'lowess':
            fit = lowess_fit(x, y, frac)
            ax.plot(*fit, **style.line_args)
            return fit
        try:
            fit = linear_fit(x, y, ci or .95)
        except ValueError as error:
            desc = ' '.join(cellname(cell) for cell in group if cell is not None)
            logging.getLogger('lingplot').warning("No regression line for %s: %s", desc, error)
            return None
        ax.plot(fit.x, fit.y, **style.line_args)
        if ci:
            ax.fill_between(fit.x, fit.lower, fit.upper, color=style.color, alpha=0.2, linewidth=0, zorder=style.zorder + 1)
        return fit
