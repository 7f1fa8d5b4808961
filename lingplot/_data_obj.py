# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Data containers for tables of trials.

Managing categorial data
========================

A :class:`Factor` stores each case as an integer code that indexes into
:attr:`Factor.cells`; the order of the cells is the order in which they are
plotted. Cells that do not occur in the data are removed whenever the data
change (indexing, assignment, relabelling).


Names
=====

Each data-object has a ``.name`` attribute. When a data-object is added to a
:class:`Dataset`, its name is set to the key. Arithmetic operations on
:class:`Var` keep the name of the first operand and store a description of the
operation as ``info['longname']``, which is used for axis labels.
"""
from __future__ import annotations

from collections.abc import Iterator, Sequence
from functools import cached_property
from itertools import chain, product
from keyword import iskeyword
from numbers import Integral, Number
import operator
import re
from typing import Any, Callable, Collection, Dict, Iterable, List, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike

from ._exceptions import EvalError
from ._utils import natsorted


REPR_N_CASES = 100
STR_N_CASES = 20
FLOAT_FMT = '%.6g'
UNNAMED = '<?>'
EVAL_CONTEXT = dict(vars(np))  # updated at end of file
LEGAL_KEY = re.compile(r"^[a-zA-Z_]\w*$")


def cellname(cell, delim=' '):
    "Cell as str (components of Interaction cells joined with ``delim``)"
    if cell is None:
        return ''
    elif isinstance(cell, tuple):
        return delim.join(cell)
    return str(cell)


def longname(x, none=False):
    "Description of ``x`` for labels"
    if isinstance(x, Var) and 'longname' in x.info:
        return x.info['longname']
    elif getattr(x, 'name', None) is not None:
        return x.name
    elif np.isscalar(x) and not isinstance(x, str):
        return f'{x:g}'
    return None if none else UNNAMED


def _bracket(desc):
    return f"({desc})" if ' ' in desc else desc


def op_name(obj: Var, operand: str = None, other: Any = None, name: str = None):
    "``(name, info)`` for the result of an operation on ``obj``"
    info = dict(obj.info)
    if name is not None:
        info['longname'] = name
        return name, info
    elif operand is None:
        return obj.name, info

    desc = longname(obj, True)
    if desc is not None:
        if operand.endswith('('):
            desc = f"{operand}{_bracket(desc)})"
        else:
            other_desc = longname(other, True)
            desc = None if other_desc is None else f"{_bracket(desc)} {operand} {_bracket(other_desc)}"
    if desc is None:
        info.pop('longname', None)
    else:
        info['longname'] = desc
    return obj.name, info


def dataobj_repr(obj: Any):
    "Short reference to ``obj`` for reprs and error messages"
    if isdataobject(obj) and obj.name is not None:
        return obj.name
    return f'<{obj.__class__.__name__}>'


def isdataobject(x: Any) -> bool:
    return isinstance(x, (Var, Factor, Interaction))


def isuv(x: Any) -> bool:
    "Whether x is a single variable (Var or Factor)"
    return isinstance(x, (Factor, Var))


def asindex(x):
    "Convert data-objects and boolean lists to numpy indexes"
    if isinstance(x, Factor):
        return x != ''
    elif isinstance(x, Var):
        return x.x
    elif isinstance(x, list) and x and all(isinstance(v, (bool, np.bool_)) for v in x):
        return np.array(x)
    return x


def _evaluate(x, data, kind):
    "Evaluate a str argument in ``data``"
    if data is None:
        raise TypeError(f"{x!r}: {kind} was specified as string, but no Dataset was specified")
    return data.eval(x)


def _restrict(x, sub, n, return_n):
    "Check the length of ``x`` and apply the ``sub`` index"
    if n is None:
        n = len(x)
    elif len(x) != n:
        raise ValueError(f"{dataobj_repr(x)}: Arguments have different length ({len(x)} vs {n})")
    if sub is not None:
        x = x[sub]
    return (x, n) if return_n else x


def asarray(x, sub=None, data=None, n=None, return_n=False) -> np.ndarray:
    "Coerce input to array"
    if isinstance(x, str):
        x = _evaluate(x, data, 'Parameter')
    x = x.x if isinstance(x, Var) else np.asarray(x)
    return _restrict(x, sub, n, return_n)


def ascategorial(x, sub=None, data=None, n=None, return_n=False):
    "Coerce to Factor or Interaction"
    if isinstance(x, str):
        x = _evaluate(x, data, 'Parameter')
    if not isinstance(x, (Factor, Interaction)):
        x = asfactor(x)
    return _restrict(x, sub, n, return_n)


def asfactor(x, sub=None, data=None, n=None, return_n=False) -> Factor:
    "Coerce to Factor"
    if isinstance(x, str):
        x = _evaluate(x, data, 'Factor')
    if isinstance(x, (Var, Interaction)):
        x = x.as_factor(name=x.name)
    elif not isinstance(x, Factor):
        x = Factor(x)
    return _restrict(x, sub, n, return_n)


def assub(sub, data=None, return_n=False):
    "Interpret the sub argument."
    if sub is None:
        return (None, None) if return_n else None
    elif isinstance(sub, str):
        sub = _evaluate(sub, data, 'sub')

    if isinstance(sub, Var):
        sub = sub.x
    elif isinstance(sub, list):
        sub = np.asarray(sub)
    elif not isinstance(sub, np.ndarray):
        raise TypeError(f"sub={sub!r}: need boolean or integer index (Var, array or list)")

    if return_n:
        return sub, len(sub) if sub.dtype.kind == 'b' else None
    return sub


def asuv(x, sub=None, data=None, n=None, return_n=False):
    "Coerce to Var or Factor"
    if isinstance(x, str):
        x = _evaluate(x, data, 'Parameter')
    if not isuv(x):
        x = Factor(x) if all(isinstance(v, str) for v in x) else Var(x)
    return _restrict(x, sub, n, return_n)


def asvar(x, sub=None, data=None, n=None, return_n=False) -> Var:
    "Coerce to Var"
    if isinstance(x, str):
        x = _evaluate(x, data, 'Var')
    if isinstance(x, (Factor, Interaction)):
        raise TypeError(f"{dataobj_repr(x)}: categorial variable where a numerical variable (Var) is required")
    elif not isinstance(x, Var):
        x = Var(x)
    return _restrict(x, sub, n, return_n)


def combine(
        items: Iterable,
        name: str = None,
):
    """Concatenate the cases of several data-objects of the same type

    Parameters
    ----------
    items
        Datasets, Vars or Factors. Plain numbers are collected into a
        :class:`Var`, plain strings into a :class:`Factor`.
    name
        Name of the result (default is the name of the first item).
    """
    items = list(items)
    if not items:
        raise ValueError("combine() needs at least one item")
    first = items[0]
    if isinstance(first, (Number, np.number, np.bool_)):
        return Var(items, name)
    elif isinstance(first, str):
        return Factor(items, name)
    kind = type(first)
    if any(type(item) is not kind for item in items):
        raise TypeError(f"Can only combine items of one type, got {', '.join({type(i).__name__ for i in items})}")
    if name is None:
        name = first.name

    if kind is Dataset:
        missing = {key for item in items[1:] for key in first if key not in item}
        if missing:
            raise ValueError(f"Variables {', '.join(sorted(missing))} missing from some Datasets")
        return Dataset({key: combine([item[key] for item in items]) for key in first}, name, first.info)
    elif kind is Var:
        return Var(np.concatenate([v.x for v in items]), name, first.info)
    elif kind is Factor:
        if len({f.random for f in items}) > 1:
            raise ValueError("Can not combine random and fixed Factors")
        labels = {cell: cell for f in items for cell in f.cells}
        values = list(chain.from_iterable(f.as_labels() for f in items))
        return Factor(values, name, first.random, labels=labels)
    raise TypeError(f"Can not combine {kind.__name__} objects")


def _var_operator(op: Callable, symbol: str, reflected: bool = False):
    def method(self, other):
        other_x = self._operand(other)
        x = op(other_x, self.x) if reflected else op(self.x, other_x)
        return Var(x, *op_name(self, symbol, other))
    return method


def _var_comparison(op: Callable):
    def method(self, other):
        return op(self.x, self._operand(other))
    return method


class Var:
    """Numerical variable with one value per case (e.g., log RT)

    Parameters
    ----------
    x
        Values (anything :func:`numpy.asarray` turns into a numerical
        array; arrays with a single non-singleton dimension are flattened).
    name
        Variable name.
    info
        Metadata; ``info['longname']`` is used for axis labels.
    repeat
        Number of times each value is repeated (scalar, or one number per
        value).
    tile
        Number of times the whole sequence is repeated.

    Attributes
    ----------
    x : numpy.ndarray
        The values.
    name : None | str
        Variable name.

    Notes
    -----
    Arithmetic (``+``, ``-``, ``*``, ``/``, ``//``, ``%``, ``**``) works
    element-wise; for anything more complicated use the :attr:`Var.x` array.
    """
    __array_priority__ = 15

    def __init__(
            self,
            x: ArrayLike,
            name: str = None,
            info: dict = None,
            repeat: Union[ArrayLike, int] = 1,
            tile: int = 1,
    ):
        if isinstance(x, str):
            raise TypeError(f"{x=}: Var needs numbers, not a str")
        elif isinstance(x, Iterator):
            x = list(x)
        x = np.asarray(x)
        if x.dtype.kind in 'OUSV':
            raise TypeError(f"x with dtype {x.dtype}: Var needs numbers; use a Factor for categories")
        elif x.ndim == 0:
            x = x.reshape(1)
        elif x.ndim > 1:
            if sum(i > 1 for i in x.shape) > 1:
                raise ValueError(f"x with shape {x.shape}; x needs to be one-dimensional")
            x = x.ravel()
        if not (isinstance(repeat, Integral) and repeat == 1):
            x = np.repeat(x, repeat)
        if tile > 1:
            x = np.tile(x, tile)
        self.x = x
        self.name = name
        self.info = {} if info is None else dict(info)

    def __repr__(self, full=False):
        fmt = '%s' if self.x.dtype.kind in 'biu' else FLOAT_FMT
        values = self.x if full else self.x[:REPR_N_CASES]
        items = [fmt % v for v in values]
        if len(values) < len(self.x):
            items.append(f'... (N={len(self.x)})')
        name = '' if self.name is None else f', name={self.name!r}'
        return f"Var([{', '.join(items)}]{name})"

    def __str__(self):
        return self.__repr__(True)

    @property
    def __array_interface__(self):
        return self.x.__array_interface__

    # container ---
    def __len__(self):
        return len(self.x)

    def __getitem__(self, index):
        x = self.x[asindex(index)]
        if isinstance(x, np.ndarray):
            return Var(x, self.name, self.info)
        return x

    def __setitem__(self, index, value):
        self.x[asindex(index)] = value

    def __contains__(self, value):
        return value in self.x

    def __iter__(self):
        return iter(self.x)

    # numeric ---
    def __bool__(self):
        raise TypeError("The truth value of a Var is ambiguous. Use v.x.any() or v.x.all()")

    def _operand(self, other):
        if isinstance(other, Var):
            return other.x
        elif isinstance(other, (Factor, Interaction)):
            raise TypeError(f"{dataobj_repr(other)}: arithmetic operation with categorial variable")
        return other

    def __neg__(self):
        return Var(-self.x, *op_name(self, '-('))

    __add__ = _var_operator(operator.add, '+')
    __radd__ = _var_operator(operator.add, '+', True)
    __sub__ = _var_operator(operator.sub, '-')
    __rsub__ = _var_operator(operator.sub, '-', True)
    __mul__ = _var_operator(operator.mul, '*')
    __rmul__ = _var_operator(operator.mul, '*', True)
    __truediv__ = _var_operator(operator.truediv, '/')
    __rtruediv__ = _var_operator(operator.truediv, '/', True)
    __floordiv__ = _var_operator(operator.floordiv, '//')
    __mod__ = _var_operator(operator.mod, '%')
    __pow__ = _var_operator(np.power, '**')

    __lt__ = _var_comparison(operator.lt)
    __le__ = _var_comparison(operator.le)
    __eq__ = _var_comparison(operator.eq)
    __ne__ = _var_comparison(operator.ne)
    __gt__ = _var_comparison(operator.gt)
    __ge__ = _var_comparison(operator.ge)
    __hash__ = None

    def _summary(self, width=80):
        return f"{np.nanmin(self.x):g} - {np.nanmax(self.x):g}"

    def as_factor(self, labels='%r', name=None, random=False):
        """Factor with one cell per distinct value

        Parameters
        ----------
        labels : str | dict
            Format string applied to each value (default ``'%r'``), or
            ``{value: label}`` dictionary. Use a tuple of values as key to
            give several values the same label; values missing from the
            dictionary get the label of the ``'default'`` key (or ``''``).
        name : str
            Factor name (default is the Var name).
        random : bool
            Make the Factor a random effect.

        Examples
        --------
        >>> v = Var([0, 1, 2, 3])
        >>> v.as_factor()
        Factor(['0', '1', '2', '3'])
        >>> v.as_factor({(0, 1): 'low', (2, 3): 'high'})
        Factor(['low', 'low', 'high', 'high'])
        """
        values = np.unique(self.x)
        if isinstance(labels, dict):
            mapping = {}
            for key, label in labels.items():
                for k in (key if isinstance(key, tuple) else (key,)):
                    mapping[k] = label
            default = mapping.pop('default', '')
            mapping.update({v.item(): default for v in values if v.item() not in mapping})
        else:
            mapping = {v.item(): labels % v.item() for v in values}
        return Factor(self.x, self.name if name is None else name, random, labels=mapping)

    def copy(self, name=None):
        "Return a deep copy"
        return Var(self.x.copy(), name or self.name, self.info)

    def aggregate(
            self,
            x: CategorialArg,
            func: Callable = np.mean,
            name: str = None,
    ) -> Var:
        """One value per cell of ``x``, computed with ``func`` (default mean)

        With ``x=None``, the result has a single case.
        """
        if x is None:
            values = [func(self.x)]
        elif len(x) != len(self):
            raise ValueError(f"x={dataobj_repr(x)} has {len(x)} cases, Var has {len(self)}")
        else:
            values = [func(self.x[x == cell]) for cell in x.cells]
        return Var(values, name or self.name, self.info)

    def abs(self, name=None):
        return Var(np.abs(self.x), *op_name(self, 'abs(', name=name))

    def astype(self, dtype):
        "Copy of the Var with values cast to ``dtype``"
        return Var(self.x.astype(dtype), self.name, self.info)

    def exp(self, name=None):
        "Var with the exponential of each value (e.g., log RT to RT)"
        return Var(np.exp(self.x), *op_name(self, 'exp(', name=name))

    def isnan(self):
        "Boolean index of cases that are NaN"
        return np.isnan(self.x)

    def log(self, base=None, name=None):
        """Var with the logarithm of each value

        Parameters
        ----------
        base : scalar
            Base of the logarithm (default is the natural logarithm).
        name : str
            Name of the output Var (default is the current name).
        """
        if base is None:
            x = np.log(self.x)
        elif base == 2:
            x = np.log2(self.x)
        elif base == 10:
            x = np.log10(self.x)
        else:
            x = np.log(self.x) / np.log(base)
        return Var(x, *op_name(self, 'log(', name=name))

    def max(self):
        return self.x.max()

    def mean(self):
        return self.x.mean()

    def min(self):
        return self.x.min()

    def std(self):
        return self.x.std()

    def sum(self):
        return self.x.sum()


class _Effect:
    "Methods shared by categorial data-objects"

    def __bool__(self):
        raise TypeError(f"{self.__class__.__name__} has no truth value; compare with a cell first")

    def __mod__(self, other):
        return Interaction((self, other))

    def __ne__(self, other):
        return np.invert(self == other)

    __hash__ = None

    def index(self, cell):
        """Positions of the cases in ``cell``

        Examples
        --------
        >>> f = Factor('abcabcabc')
        >>> f.index('b')
        array([1, 4, 7])
        """
        return np.flatnonzero(self == cell)

    def sort_index(self, order=None):
        """Index that sorts cases by cell

        Parameters
        ----------
        order : sequence of cells
            Custom cell order (default is :attr:`cells`). Cases whose cell is
            not in ``order`` are omitted.
        """
        cells = self.cells if order is None else order
        rank = np.full(len(self), len(cells), np.intp)
        for i, cell in enumerate(cells):
            rank[self == cell] = i
        index = np.argsort(rank, kind='stable')
        return index[:np.count_nonzero(rank < len(cells))]


class Factor(_Effect):
    """Categorial variable (e.g., word class, subject)

    Parameters
    ----------
    x
        Values; converted to labels with ``labels``, or with ``str()``.
    name
        Variable name.
    random
        Random effect (e.g., subjects and items in a mixed-effects model).
    repeat
        Number of times each value is repeated (scalar, or one number per
        value).
    tile
        Number of times the whole sequence is repeated.
    labels
        ``{value: label}`` dictionary; its order determines the order of
        :attr:`cells`.
    default
        Label for values missing from ``labels`` (default ``str(value)``).

    Attributes
    ----------
    name : None | str
        Variable name.
    cells : tuple of str
        Cell labels, in display order. Cells named in ``labels`` come first, in
        the order of ``labels``; the remaining cells follow in natural sort
        order (``'S2'`` before ``'S10'``).
    random : bool
        Random effect.

    Examples
    --------
    From labels::

        >>> Factor(['English', 'English', 'Other'])
        Factor(['English', 'English', 'Other'])

    From codes and a ``labels`` dictionary::

        >>> Factor([0, 0, 1], labels={0: 'English', 1: 'Other'})
        Factor(['English', 'English', 'Other'])

    A str is read as a sequence of one-character labels::

        >>> Factor('ffmm')
        Factor(['f', 'f', 'm', 'm'])
    """
    def __init__(
            self,
            x: Iterable[Any],
            name: str = None,
            random: bool = False,
            repeat: Union[int, Sequence[int]] = 1,
            tile: int = 1,
            labels: Dict[Any, str] = None,
            default: str = None,
    ):
        if isinstance(x, Iterator):
            x = list(x)
        elif isinstance(x, (Var, Factor)):
            if name is None:
                name = x.name
            if isinstance(x, Factor):
                if labels is None:
                    labels = {cell: cell for cell in x.cells}
                x = x.as_labels()
            else:
                x = x.x
        labels = {} if labels is None else dict(labels)

        # codes in order of first occurrence
        codes = {}
        first_codes = np.empty(len(x), np.intp)
        for i, value in enumerate(x):
            if isinstance(value, np.generic):
                value = value.item()
            if value in labels:
                label = labels[value]
            elif default is not None:
                label = default
            else:
                label = str(value)
            first_codes[i] = codes.setdefault(label, len(codes))

        # cell order
        ordered = [label for label in dict.fromkeys(labels.values()) if label in codes]
        cells = ordered + natsorted(label for label in codes if label not in ordered)
        recode = np.empty(len(codes), np.intp)
        for i, cell in enumerate(cells):
            recode[codes[cell]] = i
        x_ = recode[first_codes]

        if not (isinstance(repeat, Integral) and repeat == 1):
            x_ = x_.repeat(repeat)
        if tile != 1:
            x_ = np.tile(x_, tile)
        self.x = x_
        self._cells = cells
        self.name = name
        self.random = random
        self._remove_unused_cells()

    @classmethod
    def _from_codes(cls, codes, cells, name=None, random=False):
        out = cls.__new__(cls)
        out.x = np.asarray(codes, np.intp)
        out._cells = list(cells)
        out.name = name
        out.random = random
        out._remove_unused_cells()
        return out

    def _remove_unused_cells(self):
        used = np.zeros(len(self._cells), bool)
        used[self.x] = True
        if not used.all():
            recode = np.cumsum(used) - 1
            self.x = recode[self.x]
            self._cells = [cell for cell, keep in zip(self._cells, used) if keep]

    def _codes(self) -> Dict[str, int]:
        return {cell: i for i, cell in enumerate(self._cells)}

    def __repr__(self, full=False):
        labels = self.as_labels()
        if full or len(labels) <= REPR_N_CASES:
            values = repr(labels)
        else:
            items = [repr(v) for v in labels[:REPR_N_CASES]]
            values = f"[{', '.join(items)}, <... N={len(labels)}>]"
        args = [values]
        if self.name is not None:
            args.append(f'name={self.name!r}')
        if self.random:
            args.append('random=True')
        return f"Factor({', '.join(args)})"

    def __str__(self):
        return self.__repr__(True)

    # container ---
    def __len__(self):
        return len(self.x)

    def __getitem__(self, index):
        x = self.x[asindex(index)]
        if isinstance(x, np.ndarray):
            return Factor._from_codes(x, self._cells, self.name, self.random)
        return self._cells[x]

    def __setitem__(self, index, value):
        index = asindex(index)
        values = [value] if isinstance(value, str) else list(value)
        for label in values:
            if label not in self._cells:
                self._cells.append(label)
        codes = self._codes()
        self.x[index] = codes[value] if isinstance(value, str) else [codes[label] for label in values]
        self._remove_unused_cells()

    def __iter__(self):
        return (self._cells[code] for code in self.x)

    def __contains__(self, value):
        return value in self._cells

    # numeric ---
    def __eq__(self, other):
        codes = self._codes()
        if isinstance(other, str):
            return self.x == codes.get(other, -1)
        elif isinstance(other, Factor):
            recode = np.array([codes.get(cell, -1) for cell in other._cells] or [-1])
            return self.x == recode[other.x]
        return self.x == np.array([codes.get(label, -1) for label in other], np.intp)

    def as_labels(self) -> List[str]:
        "Label of each case"
        return [self._cells[code] for code in self.x]

    def as_var(self, labels, default=None, name=None):
        """Var with a number for each cell

        Parameters
        ----------
        labels : dict
            ``{cell: number}`` dictionary.
        default : scalar
            Number for cells missing from ``labels`` (by default, missing
            cells raise :exc:`KeyError`).
        name : str
            Var name (default is the Factor name).
        """
        if default is None:
            values = [labels[cell] for cell in self]
        else:
            values = [labels.get(cell, default) for cell in self]
        return Var(values, name or self.name)

    @property
    def cells(self) -> Tuple[str, ...]:
        return tuple(self._cells)

    @property
    def n_cells(self):
        return len(self._cells)

    def isin(self, cells):
        "Boolean index of cases whose label is one of ``cells``"
        codes = self._codes()
        return np.isin(self.x, [codes[cell] for cell in cells if cell in codes])

    def _cellsize(self):
        "Number of cases per cell (``int`` if all cells are equal in size, else ``dict``)"
        counts = np.bincount(self.x, minlength=len(self._cells))
        if len(set(counts)) == 1:
            return int(counts[0])
        return dict(zip(self._cells, counts.tolist()))

    def _summary(self, width=80):
        counts = np.bincount(self.x, minlength=len(self._cells))
        desc = ', '.join(f'{cell}:{n}' if n > 1 else cell for cell, n in zip(self._cells, counts))
        suffix = ' (random)' if self.random else ''
        if len(desc) + len(suffix) > width:
            desc = f'{len(self._cells)} cells'
        return desc + suffix

    def aggregate(
            self,
            x: CategorialArg,
            name: str = None,
    ) -> Factor:
        """The value of the Factor in each cell of ``x``

        Raises :exc:`ValueError` if the Factor is not constant within a cell
        of ``x``.
        """
        if x is None:
            groups = {None: slice(None)}
        elif len(x) != len(self):
            raise ValueError(f"x={dataobj_repr(x)} has {len(x)} cases, Factor {dataobj_repr(self)} has {len(self)}")
        else:
            groups = {cell: x == cell for cell in x.cells}

        codes = []
        for cell, index in groups.items():
            values = np.unique(self.x[index])
            if len(values) > 1:
                desc = '' if cell is None else f' in cell {cellname(cell)!r}'
                found = ', '.join(self._cells[v] for v in values)
                raise ValueError(f"Factor {dataobj_repr(self)} is not constant{desc} ({found}); use drop_bad=True to drop it when aggregating")
            codes.append(values[0])
        return Factor._from_codes(codes, self._cells, name or self.name, self.random)

    def copy(self, name=None):
        "A deep copy"
        return Factor._from_codes(self.x.copy(), self._cells, name or self.name, self.random)

    def update_labels(self, labels):
        """Rename cells in place

        Parameters
        ----------
        labels : dict
            ``{old: new}`` dictionary; cells not mentioned keep their label,
            cells renamed to the same label are merged.

        Examples
        --------
        >>> f = Factor(['E', 'O', 'E'])
        >>> f.update_labels({'E': 'English', 'O': 'Other'})
        >>> f
        Factor(['English', 'Other', 'English'])
        """
        missing = [label for label in labels if label not in self._cells]
        if missing:
            raise KeyError(f"{labels=}: contains labels not in the Factor ({', '.join(map(repr, missing))})")
        new = [labels.get(cell, cell) for cell in self._cells]
        cells = list(dict.fromkeys(new))
        recode = np.array([cells.index(label) for label in new], np.intp)
        self.x = recode[self.x]
        self._cells = cells

    def sort_cells(self, order: Sequence[str]):
        """Change the order of :attr:`cells` (the order used in plots)

        ``order`` has to contain every cell exactly once.
        """
        order = list(order)
        if sorted(order) != sorted(self._cells):
            raise ValueError(f"{order=}: needs to contain each cell of the Factor exactly once ({', '.join(self._cells)})")
        recode = np.array([order.index(cell) for cell in self._cells], np.intp)
        self.x = recode[self.x]
        self._cells = order


class Interaction(_Effect):
    """Cells defined by combining two or more Factors

    Usually not initialized directly but through ``A % B``.

    Parameters
    ----------
    base : sequence of Factor | Interaction
        Factors forming the interaction.

    Attributes
    ----------
    base : list of Factor
        The Factors.
    cells : tuple of tuple
        Combinations of Factor cells that occur in the data, in the order of
        the Factors' cells.
    """
    random = False

    def __init__(self, base):
        factors = []
        for item in base:
            if isinstance(item, Factor):
                factors.append(item)
            elif isinstance(item, Interaction):
                factors.extend(item.base)
            else:
                raise TypeError(f"{dataobj_repr(item)}: Interaction can only combine Factors")
        if len(factors) < 2:
            raise ValueError(f"Interaction of {len(factors)} Factor(s); need at least two")
        n = len(factors[0])
        if any(len(f) != n for f in factors[1:]):
            raise ValueError(f"Interaction of Factors with different lengths: {[len(f) for f in factors]}")
        self.base = factors
        self.name = ' x '.join(str(f.name) for f in factors)

    def __repr__(self):
        return ' % '.join(UNNAMED if f.name is None else f.name for f in self.base)

    @cached_property
    def cells(self):
        present = set(self)
        return tuple(cell for cell in product(*(f.cells for f in self.base)) if cell in present)

    # container ---
    def __len__(self):
        return len(self.base[0])

    def __getitem__(self, index):
        index = asindex(index)
        items = [f[index] for f in self.base]
        if isinstance(items[0], Factor):
            return Interaction(items)
        return tuple(items)

    def __contains__(self, cell):
        return cell in self.cells

    def __iter__(self):
        return zip(*self.base)

    # numeric ---
    def __eq__(self, other):
        if isinstance(other, Interaction):
            other = other.base
        elif not isinstance(other, tuple):
            return np.zeros(len(self), bool)
        if len(other) != len(self.base):
            return np.zeros(len(self), bool)
        return np.logical_and.reduce([f == value for f, value in zip(self.base, other)])

    def as_factor(self, delim=' ', name=None):
        "Factor whose labels join the components of each cell with ``delim``"
        order = {delim.join(cell): delim.join(cell) for cell in self.cells}
        return Factor(self.as_labels(delim), name, labels=order)

    def as_labels(self, delim=' '):
        "Label of each case, components joined with ``delim``"
        return [delim.join(filter(None, case)) for case in self]

    def aggregate(self, x: CategorialArg) -> Interaction:
        return Interaction([f.aggregate(x) for f in self.base])

    def copy(self):
        return Interaction([f.copy() for f in self.base])


def assert_is_legal_dataset_key(key):
    if iskeyword(key):
        raise ValueError(f"{key!r}: Python keyword, can not be a Dataset key")
    elif not LEGAL_KEY.match(key):
        raise ValueError(f"{key!r}: Dataset keys need to be valid Python identifiers")


def as_legal_dataset_key(key):
    "Closest legal Dataset key (e.g., for column names read from a file)"
    if iskeyword(key):
        return f"{key}_"
    elif LEGAL_KEY.match(key):
        return key
    key = re.sub(r'\W', '_', key) or '_'
    return f"_{key}" if key[0].isdigit() else key


class Dataset(dict):
    """Table of trials: variables that share a common set of cases

    Parameters
    ----------
    items : dict | list
        ``{key: variable}`` dictionary, list of ``(key, variable)`` pairs, or
        list of named variables. Variables are stored without copying.
    name : str
        Dataset name.
    info : dict
        Metadata (available as :attr:`info`).
    n_cases : int
        Number of cases, for an empty Dataset (otherwise set by the first
        variable).

    Attributes
    ----------
    n_cases : None | int
        Number of cases (rows); ``None`` while the Dataset is empty.

    Notes
    -----
    Each variable is a column, and each case is a row (in a lexical decision
    experiment, usually one trial).

    - ``ds['RT']`` --> the ``RT`` Var.
    - ``ds['RT', 'Word']`` --> ``Dataset`` with those two items.
    - ``ds[1]`` --> row 1 as ``{name: value}`` dictionary
    - ``ds[1:5]`` or ``ds[[1, 2, 3, 4]]`` --> rows 1 through 4
    - ``ds[0, 'Word']`` --> the value of ``Word`` in the first row

    When a Var/Factor is added to a Dataset, the key is assigned to its
    ``.name`` attribute.
    """
    def __init__(self, items=None, name=None, info=None, n_cases=None):
        dict.__init__(self)
        self.n_cases = None if n_cases is None else int(n_cases)
        self.name = name
        self.info = {} if info is None else dict(info)
        if items is None:
            return
        elif isinstance(items, dict):
            pairs = items.items()
        else:
            items = list(items)
            if all(isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str) for item in items):
                pairs = items
            elif any(getattr(item, 'name', None) is None for item in items):
                raise ValueError(f"{items!r}: items without keys need a name")
            else:
                pairs = [(item.name, item) for item in items]
        for key, value in pairs:
            self[key] = value

    def __getitem__(self, index):
        if isinstance(index, str):
            return dict.__getitem__(self, index)
        elif isinstance(index, Integral):
            return self.get_case(index)
        elif isinstance(index, slice):
            return self.sub(index)
        elif not np.iterable(index):
            raise KeyError(f"Invalid index for Dataset: {index!r}")
        elif len(index) and all(isinstance(item, str) for item in index):
            return self.sub(keys=index)
        elif isinstance(index, tuple):
            if len(index) != 2:
                raise KeyError(f"Invalid index for Dataset: {index!r}")
            cases, key = index
            if isinstance(cases, str):
                cases, key = key, cases
            if isinstance(key, str):
                return dict.__getitem__(self, key)[cases]
            elif np.iterable(key) and all(isinstance(item, str) for item in key):
                return self.sub(cases, keys=key)
            raise KeyError(f"Invalid index for Dataset: {index!r}")
        return self.sub(index)

    def __setitem__(self, index, item):
        if isinstance(index, tuple):
            self._set_values(index, item)
            return
        elif not isinstance(index, str):
            raise IndexError(f"{index!r}: Dataset keys are str")
        assert_is_legal_dataset_key(index)

        if isdataobject(item):
            item.name = index
        elif isinstance(item, np.ndarray) and item.ndim == 1:
            item = Factor(item, index) if item.dtype.kind in 'US' else Var(item, index)
        elif isinstance(item, Sequence) and not isinstance(item, str):
            item = asuv(item)
            item.name = index
        else:
            raise TypeError(f"{item!r}: can not be stored in a Dataset (need Var, Factor or 1-d sequence)")

        if self.n_cases is None:
            self.n_cases = len(item)
        elif len(item) != self.n_cases:
            raise ValueError(f"{index!r} has {len(item)} cases, Dataset has {self.n_cases}")
        dict.__setitem__(self, index, item)

    def _set_values(self, index, value):
        "``ds[cases, key] = value``"
        if len(index) != 2:
            raise IndexError(f"{index!r}: use ds[cases, key]")
        cases, key = index
        if isinstance(cases, str):
            cases, key = key, cases
        elif not isinstance(key, str):
            raise IndexError(f"{index!r}: one component of the index needs to be a key (str)")

        if key in self:
            self[key][cases] = value
        elif not (isinstance(cases, slice) and cases == slice(None)):
            raise IndexError(f"{key!r}: a new variable needs values for all cases (ds[:, {key!r}] = value)")
        elif isdataobject(value):
            self[key] = value
        elif self.n_cases is None:
            raise IndexError(f"{key!r}: can not broadcast a value in an empty Dataset")
        elif isinstance(value, str):
            self[key] = Factor([value], repeat=self.n_cases)
        elif np.isscalar(value):
            self[key] = Var([value], repeat=self.n_cases)
        else:
            raise IndexError(f"{value!r}: a new variable can be set from a str (Factor) or a number (Var)")

    @property
    def n_items(self):
        return len(self)

    def __repr__(self):
        name = '' if self.name is None else f' {self.name!r}'
        if self.n_cases is None:
            return f"<{self.__class__.__name__}{name}>"
        kinds = {Var: 'V', Factor: 'F'}
        items = [f'{key!r}:{kinds.get(type(v), type(v).__name__)}' for key, v in self.items()]
        return f"<{self.__class__.__name__}{name} ({self.n_cases} cases) {', '.join(items)}>"

    def __str__(self):
        if self.n_cases is None:
            return repr(self)
        return self.as_table(STR_N_CASES)

    def as_dataframe(self):
        """Convert to a :class:`pandas.DataFrame`

        Notes
        -----
        Only includes :class:`Var` and :class:`Factor` items. Factors become
        :class:`pandas.Categorical` with the Factor's cell order.
        """
        import pandas

        columns = {}
        for key, item in self.items():
            if isinstance(item, Var):
                columns[key] = item.x
            elif isinstance(item, Factor):
                columns[key] = pandas.Categorical.from_codes(item.x, item.cells)
        return pandas.DataFrame(columns)

    def as_table(self, cases=0, fmt=FLOAT_FMT, header=True):
        """Create a plain text table of the Dataset

        Parameters
        ----------
        cases : int
            Number of cases to include (0 includes all; negative number works
            like negative indexing).
        fmt : str
            Format string for numerical variables.
        header : bool
            Include the variable names as a header row.
        """
        n = self.n_cases or 0
        if cases > 0:
            rows = range(min(cases, n))
        elif cases < 0:
            rows = range(max(0, n + cases), n)
        else:
            rows = range(n)

        columns = []
        for key, item in self.items():
            if isinstance(item, Var):
                item_fmt = '%s' if item.x.dtype.kind in 'biu' else fmt
                values = [item_fmt % item.x[i] for i in rows]
            elif isinstance(item, Factor):
                values = [item[i] for i in rows]
            else:
                continue
            columns.append([key, *values] if header else values)
        widths = [max(map(len, column)) for column in columns]
        lines = ['   '.join(value.ljust(w) for value, w in zip(row, widths)).rstrip() for row in zip(*columns)]
        if header:
            lines.insert(1, '-' * max(map(len, lines)))
        if len(rows) < n:
            lines.append(f"... ({len(rows)} of {n} rows shown)")
        return '\n'.join(lines)

    def eval(self, expression):
        """Evaluate a Python expression with the variables as names

        Besides the variables, the namespace contains :mod:`numpy` functions
        and the :class:`Var` and :class:`Factor` classes.

        Examples
        --------
        >>> ds.eval("NativeLanguage % Class")
        NativeLanguage % Class
        >>> ds.eval("RT.exp()")
        """
        if not isinstance(expression, str):
            raise TypeError(f"{expression=}: need str")
        try:
            return eval(expression, EVAL_CONTEXT, self)
        except Exception as exception:
            desc = f"Dataset {self.name!r}" if self.name else "Dataset"
            raise EvalError(expression, exception, desc) from exception

    @classmethod
    def from_caselist(
            cls,
            names: Sequence[str],
            cases: Sequence[Sequence[Union[str, Number]]],
            name: str = None,
            info: dict = None,
            random: Union[str, Collection[str]] = (),
    ):
        """Dataset from rows

        Parameters
        ----------
        names
            Variable names.
        cases
            One sequence of values per case. Columns of str become
            :class:`Factor`, columns of numbers :class:`Var`.
        name
            Dataset name.
        info
            Dataset metadata.
        random
            Factors that are random effects.
        """
        names = list(names)
        cases = list(cases)
        if isinstance(random, str):
            random = [random]
        lengths = set(map(len, cases))
        if len(lengths) > 1:
            raise ValueError(f"Cases of unequal length: {sorted(lengths)}")
        n_values = lengths.pop()
        if len(names) != n_values:
            raise ValueError(f'{names=}: {len(names)} names but {n_values} values in each case')
        ds = cls(name=name, info=info)
        for i, key in enumerate(names):
            ds[key] = item = combine([case[i] for case in cases])
            if key in random:
                if not isinstance(item, Factor):
                    raise ValueError(f"random={random}: {key!r} is not categorial")
                item.random = True
        return ds

    @classmethod
    def from_dataframe(
            cls,
            df,  # pandas.DataFrame
            name: str = None,
            random: Union[str, Collection[str]] = (),
    ):
        """Dataset from a :class:`pandas.DataFrame`

        Numerical and boolean columns become :class:`Var`, all other columns
        :class:`Factor` (keeping the category order of categorical columns).
        Column names are converted to legal keys. ``random`` names the
        columns that are random effects.
        """
        if isinstance(random, str):
            random = [random]
        ds = cls(name=name)
        for key in df.columns:
            column = df[key]
            if hasattr(column, 'cat'):
                labels = {str(c): str(c) for c in column.cat.categories}
                item = Factor(column.astype(str), random=key in random, labels=labels)
            elif column.dtype.kind in 'iufb':
                item = Var(column.to_numpy())
            else:
                item = Factor(column.astype(str), random=key in random)
            ds[as_legal_dataset_key(str(key))] = item
        return ds

    def get_case(self, i):
        "The ``i``-th case as a ``{name: value}`` dictionary"
        return {key: item[i] for key, item in self.items()}

    def aggregate(
            self,
            x: CategorialArg = None,
            name: str = '{name}',
            count: Union[bool, str] = 'n',
            drop_bad: bool = False,
            drop: Sequence[str] = (),
            func: Callable = np.mean,
    ) -> Dataset:
        """Collapse cases within the cells of ``x``

        Parameters
        ----------
        x
            Cells; one case per cell in the result (``None`` for a single
            case).
        name
            Name of the result (``{name}`` is replaced with the current name).
        count
            Name for a Var with the number of cases in each cell (``False``
            to omit).
        drop_bad
            Omit Factors that are not constant within cells (instead of
            raising :exc:`ValueError`).
        drop
            Keys of variables to omit.
        func
            Summary for :class:`Var` (default :func:`numpy.mean`).

        Examples
        --------
        Mean log RT of each subject::

            >>> ds.aggregate('Subject', drop_bad=True)
        """
        if isinstance(x, str):
            x = ascategorial(x, data=self) if x else None
        elif x is not None:
            x = ascategorial(x)

        ds = Dataset(name=name.format(name=self.name), info=self.info)
        if count:
            ds[count] = Var([self.n_cases] if x is None else [np.sum(x == cell) for cell in x.cells])
        for key, item in self.items():
            if key in drop:
                continue
            try:
                ds[key] = item.aggregate(x, func=func) if isinstance(item, Var) else item.aggregate(x)
            except ValueError:
                if not drop_bad:
                    raise
        return ds

    def copy(self, name=None):
        "New Dataset with the same variables (shallow copy)"
        return Dataset(self.items(), name or self.name, self.info, self.n_cases)

    def head(self, n=10):
        "Text table of the first ``n`` cases"
        return self.as_table(n)

    def itercases(self, start=None, stop=None):
        "Iterate over cases as ``{key: value}`` dictionaries"
        for i in range(*slice(start, stop).indices(self.n_cases or 0)):
            yield self.get_case(i)

    def sub(self, index=None, keys=None, name=None):
        """Subset of cases and/or variables

        Parameters
        ----------
        index : int | array | str
            Cases to keep: numpy index, or an expression evaluated in the
            Dataset (e.g., ``"Class == 'animal'"``).
        keys : sequence of str | str
            Variables to keep (default all); a single str returns that
            variable instead of a Dataset.
        name : str
            Name of the result.
        """
        if isinstance(index, str):
            index = self.eval(index)
        if index is not None:
            index = asindex(index)
            if isinstance(index, list):
                index = np.asarray(index, dtype=np.intp)

        if isinstance(keys, str):
            item = dict.__getitem__(self, keys)
            return item if index is None else item[index]
        elif keys is None:
            if index is None:
                return self.copy(name)
            keys = list(self.keys())

        if isinstance(index, Integral):
            return {key: dict.__getitem__(self, key)[index] for key in keys}
        items = {key: dict.__getitem__(self, key) for key in keys}
        if index is not None:
            items = {key: item[index] for key, item in items.items()}
        return Dataset(items, name or self.name, self.info)

    def summary(self, width=80):
        "One line per variable with its type and values (truncated to ``width``)"
        lines = [f"{self.name or 'Dataset'}: {self.n_cases} cases"]
        n_key = max(map(len, self.keys()), default=0)
        for key, item in self.items():
            kind = type(item).__name__
            lines.append(f"{key.ljust(n_key)}  {kind.ljust(6)}  {item._summary(width)}")
        return '\n'.join(lines)

    def tail(self, n=10):
        "Text table of the last ``n`` cases"
        return self.as_table(-n)


EVAL_CONTEXT.update(Var=Var, Factor=Factor)

VarArg = Union[Var, str]
CategorialArg = Union[Factor, Interaction, str]
FactorArg = Union[Factor, str]
CellArg = Union[str, Tuple[str, ...]]
IndexArg = Union[Var, np.ndarray, str]
