# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Framework for figures

Implementation
==============

Each public plot is a class whose constructor draws the whole figure:

1. Coerce the data arguments (names are evaluated in ``data``).
2. Resolve a :class:`Layout` from the layout arguments and the plot's
   defaults (figure size, number and arrangement of axes).
3. Initialize :class:`LingFigure`, which creates the matplotlib figure and
   its axes.
4. Draw into the axes with ``_plt_*`` helpers, then call
   :meth:`LingFigure._show`.

Plots with several axes (facets) create one axes per cell of the facet
variable and give all axes the same limits (:func:`share_limits`).
"""
import __main__

from logging import getLogger
import math
from pathlib import Path
from typing import List, Optional, Sequence, Union

import matplotlib as mpl
import matplotlib.axes
from matplotlib.ticker import FuncFormatter

from .._config import CONFIG
from .._data_obj import Factor, Interaction, Var, cellname, isdataobject, longname
from .._text import enumeration
from .._utils.notebooks import use_inline_backend


# maximum figure size for automatic layouts (inches)
MAX_W = 16

FLOAT_FORMATTER = FuncFormatter(lambda x, pos: '%g' % x)
INT_FORMATTER = FuncFormatter(lambda x, pos: '%i' % round(x))


def do_autorun(run=None):
    "Whether showing a figure should block"
    if run is not None:
        return run
    elif CONFIG['autorun'] is None:
        # interactive sessions have no __main__.__file__
        return not hasattr(__main__, '__file__')
    else:
        return CONFIG['autorun']


def axis_label(v: Union[Var, str, None], label: Union[bool, str] = True) -> Optional[str]:
    "Axis label for ``v``, or ``label`` if it is given explicitly"
    if label is not True:
        return label or None
    elif isinstance(v, str):
        return v
    elif v is None:
        return None
    label = longname(v, True)
    return None if label is None else label.replace('_', ' ')


def frame_title(y, x=None, xax=None):
    """Generate a figure description from the plotted variables

    Parameters
    ----------
    y : data-obj | str
        Dependent variable.
    x : data-obj | str
        Predictor.
    xax : data-obj | str
        Variable that determines separate axes.
    """
    y, x, xax = (v.name if isdataobject(v) else v for v in (y, x, xax))
    title = str(y)
    if x is not None:
        title += f" ~ {x}"
    if xax is not None:
        title += f" | {xax}"
    return title


class FigureFrame:
    "Figure owned by someone else (e.g., axes provided by the user)"

    def __init__(self, figure):
        self.figure = figure
        self.canvas = figure.canvas

    def Close(self):
        pass

    def Show(self, run=None):
        pass


class MatplotlibFrame(FigureFrame):
    "Frame for a figure created through pyplot"

    def __init__(self, **fig_kwargs):
        from matplotlib import pyplot

        FigureFrame.__init__(self, pyplot.figure(**fig_kwargs))
        self._plt = pyplot

    def Close(self):
        self._plt.close(self.figure)

    def Show(self, run=None):
        if use_inline_backend() or mpl.get_backend().lower() == 'agg':
            return
        self._plt.show(block=do_autorun(run))


class Layout:
    """Grid of axes of equal size

    Parameters
    ----------
    nax
        Number of axes (``0`` for a figure without axes).
    ax_aspect
        Default width / height aspect of the axes.
    axh_default
        Default axes height (inches).
    tight
        Rescale axes so that the space in the figure is used optimally
        (default True).
    title
        Figure title.
    h, w
        Figure height and width (inches).
    axh, axw
        Height and width of each axes (inches).
    nrow, ncol
        Number of rows and columns of the axes grid. By default, axes are
        placed side by side and wrapped to new rows when the figure would get
        too wide.
    dpi
        Resolution of the figure (default from :attr:`matplotlib.rcParams`).
    show
        Show the figure on the screen (default True). Use False for
        creating figures and saving them without displaying them.
    run
        Block until the figure window is closed (default is True in
        scripts and False in interactive sessions).
    frame : bool | 'none'
        Draw a frame around the axes: ``True`` draws all four spines,
        ``False`` only the left and bottom spines, ``'none'`` no spines.
    autoscale
        Let matplotlib scale axes limits to the plotted data.
    name
        Description used in the figure's repr.
    axes
        Draw into existing matplotlib axes instead of creating a new figure.
    """
    def __init__(
            self,
            nax: int,
            ax_aspect: float,
            axh_default: float,
            tight: bool = True,
            title: str = None,
            h: float = None,
            w: float = None,
            axh: float = None,
            axw: float = None,
            nrow: int = None,
            ncol: int = None,
            dpi: float = None,
            show: bool = True,
            run: bool = None,
            frame: Union[bool, str] = True,
            autoscale: bool = False,
            name: str = None,
            axes: Union[matplotlib.axes.Axes, List[matplotlib.axes.Axes]] = None,
    ):
        if frame not in (True, False, 'none'):
            raise ValueError(f"{frame=}")
        if h is not None and axh is not None and h < axh:
            raise ValueError(f"{h=} < {axh=}")
        if w is not None and axw is not None and w < axw:
            raise ValueError(f"{w=} < {axw=}")

        if nax:
            # axes size
            if axh is None:
                if axw is not None:
                    axh = axw / ax_aspect
                else:
                    axh = axh_default
            if axw is None:
                axw = axh * ax_aspect
            # grid
            if nrow is None and ncol is None:
                ncol = w / axw if w else MAX_W / axw
                ncol = max(1, min(nax, math.floor(ncol)))
            if ncol is None:
                ncol = math.ceil(nax / nrow)
            nrow = math.ceil(nax / ncol)
            # fixed figure size determines axes size
            if h is None:
                h = nrow * axh
            else:
                axh = h / nrow
            if w is None:
                w = ncol * axw
            else:
                axw = w / ncol
        else:
            if h is None:
                h = axh_default if w is None else w / ax_aspect
            if w is None:
                w = h * ax_aspect

        self.nax = nax
        self.nrow = nrow
        self.ncol = ncol
        self.h = h
        self.w = w
        self.axh = axh
        self.axw = axw
        self.dpi = dpi or mpl.rcParams['figure.dpi']
        self.tight = tight
        self.title = title
        self.name = name or title
        self.show = show
        self.run = run
        self.frame = frame
        self.autoscale = autoscale
        if isinstance(axes, matplotlib.axes.Axes):
            axes = [axes]
        self.user_axes = axes

    def __repr__(self):
        return f"<Layout: {self.nax} axes ({self.nrow} x {self.ncol}), {self.w:.2f} x {self.h:.2f} in>"

    def fig_kwa(self):
        out = {'figsize': (self.w, self.h), 'dpi': self.dpi}
        if CONFIG['figure_background'] is not False:
            out['facecolor'] = CONFIG['figure_background']
        return out

    def make_axes(self, figure):
        if self.user_axes:
            axes = list(self.user_axes)
        else:
            axes = [figure.add_subplot(self.nrow, self.ncol, i + 1, autoscale_on=self.autoscale) for i in range(self.nax)]
        for ax in axes:
            format_axes(ax, self.frame)
        return axes


def format_axes(ax: mpl.axes.Axes, frame: Union[bool, str]):
    if frame == 'none':
        for spine in ax.spines.values():
            spine.set_visible(False)
    elif not frame:
        ax.spines['right'].set_visible(False)
        ax.spines['top'].set_visible(False)
        ax.yaxis.set_ticks_position('left')
        ax.xaxis.set_ticks_position('bottom')


class LingFigure:
    """Parent class for lingplot figures.

    Subclasses determine the layout, initialize :class:`LingFigure`, plot
    into :attr:`LingFigure.axes`, and end their initialization by calling
    :meth:`LingFigure._show`.
    """
    _default_xlabel_ax = -1
    _default_ylabel_ax = 0

    def __init__(self, data_desc: Optional[str], layout: Layout):
        """Parent class for lingplot figures.

        Parameters
        ----------
        data_desc
            Data description for the figure's repr.
        layout
            Layout that determines figure dimensions.
        """
        name = self.__class__.__name__
        desc = layout.name or data_desc
        self._title = f'{name}: {desc}' if desc else name

        if layout.user_axes:
            frame = FigureFrame(layout.user_axes[0].get_figure())
        else:
            frame = MatplotlibFrame(**layout.fig_kwa())
        figure = frame.figure
        self._figtitle = figure.suptitle(layout.title) if layout.title else None

        self.figure = figure
        self.canvas = frame.canvas
        self._frame = frame
        self._layout = layout
        self._axes = layout.make_axes(figure)

    def __repr__(self):
        return f'<{self._title}>'

    def _ipython_display_(self):
        from IPython.display import display
        display(self.figure)

    @property
    def axes(self) -> List[matplotlib.axes.Axes]:
        "Matplotlib axes of the figure"
        return list(self._axes)

    def _set_axtitle(self, axtitle, names: Sequence[str], **kwargs):
        """Set axes titles

        ``axtitle`` can be ``True`` (use ``names``), a format string with a
        ``{name}`` field, a list of titles, or ``False``.
        """
        if not axtitle:
            return
        elif axtitle is True:
            axtitle = names
        elif isinstance(axtitle, str):
            axtitle = [axtitle.format(name=name) for name in names]
        for title, ax in zip(axtitle, self._axes):
            ax.set_title(title, **kwargs)

    def _show(self):
        if self._layout.user_axes:
            return
        if self._layout.tight:
            try:
                self.figure.tight_layout()
            except ValueError as error:
                getLogger('lingplot').debug("tight_layout: %s", error)
        self.draw()
        if CONFIG['show'] and self._layout.show:
            self._frame.Show(self._layout.run)

    def _configure_axis_data(
            self,
            axis: str,  # 'x' | 'y'
            data: Union[Var, str, None],  # data for default label
            label: Union[bool, str],  # override label
            ticklabels: Union[str, bool] = True,  # 'left' | 'bottom': only outer axes
    ):
        "Tick format and label for an axis showing ``data``"
        is_int = isinstance(data, Var) and data.x.dtype.kind in 'iu'
        formatter = INT_FORMATTER if is_int else FLOAT_FORMATTER
        ncol = self._layout.ncol or 1
        nax = len(self._axes)
        for i, ax in enumerate(self._axes):
            axis_obj = ax.yaxis if axis == 'y' else ax.xaxis
            axis_obj.set_major_formatter(formatter)
            if ticklabels == 'left':
                show = i % ncol == 0
            elif ticklabels == 'bottom':
                show = i >= nax - ncol
            else:
                show = bool(ticklabels)
            if not show:
                ax.tick_params(**{'labelleft' if axis == 'y' else 'labelbottom': False})
        label = axis_label(data, label)
        if label:
            if axis == 'y':
                self.set_ylabel(label)
            else:
                self.set_xlabel(label)

    def _get_axes(self, axes):
        "Axes selected by an ``axes`` argument"
        if axes is None:
            return self._axes
        elif isinstance(axes, int):
            return [self._axes[axes]]
        return [self._axes[i] for i in axes]

    def close(self):
        "Close the figure."
        self._frame.Close()

    def draw(self):
        "(Re-)draw the figure (after making manual changes)."
        self.canvas.draw()

    def save(self, path, **kwargs):
        """Save the figure (see :meth:`matplotlib.figure.Figure.savefig`)

        Parameters
        ----------
        path : str | Path
            Destination. Without a file extension, the format set with
            :func:`configure` is used and appended.
        ...
            :meth:`~matplotlib.figure.Figure.savefig` parameters.
        """
        path = Path(path)
        if not path.suffix and 'format' not in kwargs:
            kwargs['format'] = CONFIG['format']
            path = path.with_name(f"{path.name}.{CONFIG['format']}")
        self.figure.savefig(path, **kwargs)

    def add_hline(self, y, axes=None, **kwargs):
        """Draw a horizontal line

        Parameters
        ----------
        y : scalar
            Level at which to draw the line.
        axes : int | list of int
            Axes on which to draw the line (default all).
        ...
            :meth:`matplotlib.axes.Axes.axhline` parameters.
        """
        for ax in self._get_axes(axes):
            ax.axhline(y, **kwargs)
        self.draw()

    def add_vline(self, x, axes=None, **kwargs):
        """Draw a vertical line

        Parameters
        ----------
        x : scalar
            Position of the line on the x-axis.
        axes : int | list of int
            Axes on which to draw the line (default all).
        ...
            :meth:`matplotlib.axes.Axes.axvline` parameters.
        """
        for ax in self._get_axes(axes):
            ax.axvline(x, **kwargs)
        self.draw()

    def set_xtick_rotation(self, rotation: float):
        "Rotate the x-axis tick-labels (counterclockwise, in degrees)"
        for ax in self._axes:
            ax.tick_params('x', labelrotation=rotation)
        self.draw()

    def set_xlabel(self, label: str, ax: int = None):
        """Set the x-axis label

        Parameters
        ----------
        label
            X-axis label.
        ax
            Axes on which to set the label (default is the last axes).
        """
        if ax is None:
            ax = self._default_xlabel_ax
        self._axes[ax].set_xlabel(label)

    def set_ylabel(self, label: str, ax: int = None):
        """Set the y-axis label

        Parameters
        ----------
        label
            Y-axis label.
        ax
            Axes on which to set the label (default is the first axes).
        """
        if ax is None:
            ax = self._default_ylabel_ax
        self._axes[ax].set_ylabel(label)


class LegendMixin:
    """Legend for figures with a color variable

    Parameters
    ----------
    loc : str | int | 'fig' | False | None
        Matplotlib figure legend location, ``'fig'`` to plot the legend in a
        separate figure, or ``False`` for no legend.
    handles : dict
        ``{cell: artist}`` dictionary.
    labels : dict
        Alternative labels as ``{cell: label}`` dictionary.
    """
    _LOCATIONS = (
        'upper right', 'upper left', 'lower left', 'lower right', 'right',
        'center left', 'center right', 'lower center', 'upper center',
        'center', 'best',
    )

    def __init__(self, loc, handles, labels=None):
        self.__handles = handles
        self.__labels = None if labels is None else dict(labels)
        self.legend = None
        if handles:
            self.plot_legend(loc, labels)

    @property
    def legend_handles(self) -> dict:
        "``{cell: handle}`` dictionary of legend entries"
        return self.__handles

    def plot_legend(self, loc='fig', labels=None, **kwargs):
        """Plot the legend, or remove it from the figure

        Parameters
        ----------
        loc : False | 'fig' | str | int
            ``False`` to remove the legend; ``'fig'`` to plot the legend in a
            new figure; a matplotlib location (``'upper right'``, ...) to plot
            the legend on the figure.
        labels : dict
            Alternative labels as ``{cell: label}`` dictionary. The order of
            the dictionary determines the order of the entries.
        ...
            Layout parameters for the separate legend figure.

        Returns
        -------
        legend : None | Legend
            The legend figure if ``loc == 'fig'``.
        """
        if loc is None or loc is False:
            if self.legend is not None:
                self.legend.remove()
                self.legend = None
                self.draw()
            return
        elif not (loc == 'fig' or loc in self._LOCATIONS or (isinstance(loc, int) and 0 <= loc <= 10)):
            raise ValueError(f"{loc=}: invalid legend location; use one of {enumeration(map(repr, ('fig', *self._LOCATIONS)), 'or')}")
        elif not self.__handles:
            raise RuntimeError("No handles to produce legend.")

        if labels is not None:
            self.__labels = dict(labels)
        if self.__labels is None:
            cells = list(self.__handles)
            names = [cellname(cell) for cell in cells]
        else:
            cells = list(self.__labels)
            names = list(self.__labels.values())
        handles = [self.__handles[cell] for cell in cells]

        if loc == 'fig':
            return Legend(handles, names, **kwargs)
        if self.legend is not None:
            self.legend.remove()
        self.legend = self.figure.legend(handles, names, loc=loc)
        self.draw()

    def save_legend(self, *args, **kwargs):
        """Save the legend as image file

        Parameters
        ----------
        ...
            Parameters for :meth:`LingFigure.save`.
        """
        legend = self.plot_legend(show=False)
        try:
            legend.save(*args, **kwargs)
        finally:
            legend.close()


class Legend(LingFigure):
    """Legend in a separate figure

    Parameters
    ----------
    handles : list of artist
        Matplotlib artists to show in the legend.
    labels : list of str
        Labels for the handles.
    ...
        Layout parameters.
    """
    def __init__(self, handles, labels, **kwargs):
        layout = Layout(0, 1, 2, tight=False, **kwargs)
        LingFigure.__init__(self, None, layout)
        self.legend = self.figure.legend(handles, labels, loc='upper left')
        self._show()


class CategorialAxisMixin:
    """Axis with one tick per cell

    Parameters
    ----------
    ax : Axes
        Axes containing the categorial axis.
    axis : 'x' | 'y'
        Which axis is categorial.
    layout : Layout
        The figure layout.
    label : bool | str
        Axis label (``True`` to use the name of ``model``).
    model : Factor | Interaction | None
        Categorial variable defining the cells.
    ticks : bool | dict | list
        ``True`` for cell names, ``{cell: label}`` for alternative labels
        (cells not in the dictionary keep their name), a list of labels, or
        ``False`` for no ticks.
    tick_delim : str
        Delimiter for the components of interaction cells.
    tick_pos : sequence of scalar
        Position of the cells on the axis.
    cells : sequence of cells
        Cells, in the order of ``tick_pos``.
    origin : scalar
        Draw a line across the plot at this value of the other axis.
    """
    def __init__(self, ax, axis, layout, label, model, ticks, tick_delim, tick_pos, cells, origin=None):
        if axis == 'x':
            axis_obj = ax.xaxis
            spine = 'bottom'
            add_line = ax.axhline
        elif axis == 'y':
            axis_obj = ax.yaxis
            spine = 'left'
            add_line = ax.axvline
        else:
            raise ValueError(f"{axis=}")
        if layout.frame is not True:
            ax.spines[spine].set_visible(False)
        if origin is not None:
            add_line(origin, color='k', linewidth=mpl.rcParams['axes.linewidth'], clip_on=False)

        if label is True:
            label = model.name.replace('_', ' ') if model is not None and model.name else False
        if label:
            axis_obj.set_label_text(label)

        axis_obj.set_ticks_position('none')
        if ticks is False:
            axis_obj.set_ticks(())
        elif ticks:
            if ticks is True:
                ticks = [cellname(cell, tick_delim) for cell in cells]
            elif isinstance(ticks, dict):
                ticks = [ticks.get(cell, cellname(cell, tick_delim)) for cell in cells]
            axis_obj.set_ticks(tick_pos)
            axis_obj.set_ticklabels(ticks)


class YLimMixin:
    """Shared y-axis limits for plots

    Parameters
    ----------
    plots : sequence
        Plots with ``vmin``, ``vmax`` attributes and a ``set_ylim()`` method.
    """
    def __init__(self, plots):
        self.__plots = plots

    def get_ylim(self):
        "Lowest and highest limit of the y-axes"
        return min(p.vmin for p in self.__plots), max(p.vmax for p in self.__plots)

    def set_ylim(self, bottom=None, top=None):
        """Set the y-axis limits

        Parameters
        ----------
        bottom : scalar
            Lower y-axis limit.
        top : scalar
            Upper y-axis limit.
        """
        if bottom is None and top is None:
            return
        for p in self.__plots:
            p.set_ylim(bottom, top)
        self.draw()


def facet_cells(facet: Union[Factor, Interaction, None]) -> tuple:
    "Cells of a facet variable (``(None,)`` for no facets)"
    if facet is None:
        return None,
    return tuple(facet.cells)


def share_limits(axes: Sequence[matplotlib.axes.Axes], x: bool = True, y: bool = True):
    "Give all axes the union of their limits"
    if len(axes) < 2:
        return
    for share, get, set_ in ((x, 'get_xlim', 'set_xlim'), (y, 'get_ylim', 'set_ylim')):
        if not share:
            continue
        lims = [getattr(ax, get)() for ax in axes]
        lim = (min(low for low, _ in lims), max(high for _, high in lims))
        for ax in axes:
            getattr(ax, set_)(lim)


LegendArg = Union[bool, str, int, None]
