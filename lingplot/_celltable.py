from functools import cached_property
from itertools import combinations
from typing import Callable, Dict, List, Sequence, Union

import numpy as np

from ._data_obj import (
    CategorialArg, CellArg, IndexArg, VarArg,
    Dataset, Var, ascategorial, assub, asvar,
    cellname, dataobj_repr,
)
from ._stats.stats import Dispersion, dispersion


class Celltable:
    """Divide ``y`` into the cells of ``x``

    Parameters
    ----------
    y
        Dependent measurement.
    x
        Factor or Interaction dividing ``y`` into cells.
    match
        Factor on which cases are matched (e.g., ``'Subject'``). When several
        cases of the same ``match`` level fall into one cell of ``x``, they
        are averaged first, so each cell contains one value per ``match``
        level.
    sub
        Only use a subset of the cases (boolean or integer index, or an
        expression evaluated in ``data``).
    cells
        Only retain data for these cells, in this order.
    data
        Dataset in which to evaluate ``str`` arguments.
    coercion
        Function to convert ``y`` (default :func:`asvar`).

    Examples
    --------
    Mean log RT of each subject for each word class::

        >>> ct = Celltable('RT', 'Class', match='Subject', data=ds)

    Attributes
    ----------
    y : Var
        ``y`` after evaluating input parameters (and averaging within
        ``match``).
    x : Factor | Interaction | None
        ``x`` after evaluating input parameters.
    match : Factor | None
        ``match`` after evaluating input parameters.
    cells : tuple of (str | tuple)
        Cells of ``x``.
    data : {cell: Var}
        Data in each cell.
    data_indexes : {cell: array of bool}
        Index of the cases of each cell in :attr:`y`.
    groups : {cell: Factor}
        The ``match`` values corresponding to ``data`` (only with ``match``).
    within : {(cell1, cell2): bool}
        For each pair of cells, whether they contain the same ``match`` levels
        (repeated measures comparison).
    all_within : bool
        Whether all comparisons are repeated measures comparisons.
    """
    def __init__(
            self,
            y: VarArg,
            x: CategorialArg = None,
            match: CategorialArg = None,
            sub: IndexArg = None,
            cells: Sequence[CellArg] = None,
            data: Dataset = None,
            coercion: Callable = asvar,
    ):
        self.sub = sub
        sub, n = assub(sub, data, return_n=True)
        if x is None:
            if cells is not None:
                raise TypeError(f"{cells=}: cells is only a valid argument if x is provided")
            y, n = coercion(y, sub, data, n, return_n=True)
        else:
            x, n = ascategorial(x, sub, data, n, return_n=True)
            if cells is not None:
                cells = tuple(cells)
                missing = [repr(cell) for cell in cells if cell not in x.cells]
                if missing:
                    raise ValueError(f"{cells=} contains cells that are not in the data: {', '.join(missing)}")
                order = x.sort_index(order=cells)
                x = x[order]
                if sub is None:
                    sub = order
                elif sub.dtype.kind == 'b':
                    sub = np.flatnonzero(sub)[order]
                else:
                    sub = sub[order]
            y = coercion(y, sub, data, n)

        if match is not None:
            match = ascategorial(match, sub, data, n)
            units = match if x is None else x % match
            if len(units) > len(units.cells):
                # several cases per unit
                y = y.aggregate(units)
                match = match.aggregate(units)
                if x is not None:
                    x = x.aggregate(units)
            else:
                order = units.sort_index()
                if cells is not None:
                    order = order[x[order].sort_index(order=cells)]
                if np.any(order != np.arange(len(order))):
                    y = y[order]
                    match = match[order]
                    if x is not None:
                        x = x[order]

        self.y = y
        self.x = x
        self.match = match
        self.n_cases = len(y)
        self.groups = {}
        self.within = {}
        if x is None:
            self.cells = (None,)
            self.data = {None: y}
            self.data_indexes = {None: np.ones(len(y), bool)}
            if match is not None:
                self.groups[None] = match
            self.all_within = match is not None
        else:
            self.cells = x.cells if cells is None else cells
            self.data_indexes = index = {cell: x == cell for cell in self.cells}
            self.data = {cell: y[i] for cell, i in index.items()}
            if match is not None:
                self.groups = {cell: match[i] for cell, i in index.items()}
            for cell1, cell2 in combinations(self.cells, 2):
                if match is None:
                    within = False
                else:
                    group1, group2 = self.groups[cell1], self.groups[cell2]
                    if len(group1) == 0 or len(group2) == 0:
                        continue
                    within = len(group1) == len(group2) and bool(np.all(group1 == group2))
                self.within[cell1, cell2] = self.within[cell2, cell1] = within
            self.all_within = bool(self.within) and all(self.within.values())
        self.n_cells = len(self.cells)

    def __repr__(self):
        args = [dataobj_repr(self.y)]
        if self.x is not None:
            args.append(dataobj_repr(self.x))
        if self.match is not None:
            args.append(f"match={dataobj_repr(self.match)}")
        if self.sub is not None:
            args.append(f"sub={self.sub!r}" if isinstance(self.sub, str) else "sub=<index>")
        return f"Celltable({', '.join(args)})"

    def __len__(self):
        return self.n_cells

    def cellnames(self, delim: str = ' ') -> List[str]:
        "Cell names as strings (``delim`` joins the components of interaction cells)"
        return [cellname(cell, delim) for cell in self.cells]

    def get_data(self) -> List[Var]:
        "Data of each cell, in the order of :attr:`cells`"
        return [self.data[cell] for cell in self.cells]

    def get_statistic(self, func: Union[Callable, str] = np.mean) -> list:
        """``func(data)`` for each cell

        Parameters
        ----------
        func
            Function applied to the data of each cell, or a dispersion
            specification such as ``'sem'``, ``'2sem'`` or ``'95%ci'``.
        """
        if isinstance(func, str):
            spec = func
            return [dispersion(self.data[cell].x, spec=spec) for cell in self.cells]
        return [func(self.data[cell].x) for cell in self.cells]

    def get_statistic_dict(self, func: Union[Callable, str] = np.mean) -> Dict[CellArg, float]:
        "``{cell: func(data)}`` dictionary (see :meth:`.get_statistic`)"
        return dict(zip(self.cells, self.get_statistic(func)))

    @cached_property
    def _pooled_dispersion(self):
        return Dispersion(self.y.x, self.x, self.match)

    def variability(
            self,
            error: str = 'sem',
            pool: bool = None,
            cell: CellArg = None,
    ):
        """Dispersion of the cell means

        Parameters
        ----------
        error
            ``'sem'`` (default), a multiple like ``'2sem'``, a confidence
            interval like ``'ci'`` (95%) or ``'99%ci'``, or ``'sd'``.
        pool
            Estimate one error term from the subject by condition residuals
            (Loftus & Masson, 1994). Defaults to pooling when every pair of
            cells is a within-subject comparison.
        cell
            Only compute the estimate for this cell.

        Returns
        -------
        variability : scalar | array
            Scalar when pooled or for a single ``cell``, otherwise one value
            per cell.
        """
        if pool is None:
            pool = self.all_within
        if pool:
            if self.match is None:
                return dispersion(self.y.x, self.x, None, error, pool=True)
            return self._pooled_dispersion.get(error)
        elif cell is not None:
            return dispersion(self.data[cell].x, spec=error)
        elif self.x is None:
            return dispersion(self.y.x, spec=error)
        return dispersion(self.y.x, self.x, spec=error, cells=self.cells)
