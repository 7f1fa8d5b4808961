"""
Read tables of trials from delimited text files.

.. autosummary::
   :toctree: generated

   tsv
"""
import csv
import gzip
import logging
from pathlib import Path
import re
from numbers import Number
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from .._types import PathArg
from .._utils.parse import FLOAT_NAN_PATTERN
from .. import _data_obj as _data

__all__ = ('tsv',)


# values read as NaN in numerical columns (None stands for a missing entry)
NA_VALUES = {'NA': np.nan, 'na': np.nan, 'NaN': np.nan, 'nan': np.nan, 'NAN': np.nan, None: np.nan}
BOOL_VALUES = {'True': True, 'False': False, 'TRUE': True, 'FALSE': False, None: False}
TYPES = 'afvb'


def to_num(v: str):
    return int(v) if v.isdigit() else float(v)


def _read_rows(path: Path, delimiter: str, encoding: Optional[str], comment: Optional[str], fmtparams) -> List[List[str]]:
    "Non-empty rows of a delimited text file"
    suffix = path.suffix.lower()
    opener = open
    if suffix == '.gz':
        opener = gzip.open
        suffix = path.with_suffix('').suffix.lower()
    if delimiter == 'auto':
        delimiter = ',' if suffix == '.csv' else '\t'
    skip = re.compile(comment) if comment else None
    with opener(path, 'rt', encoding=encoding, newline='') as file:
        lines = (line for line in file if skip is None or not skip.match(line))
        rows = [row for row in csv.reader(lines, delimiter=delimiter, **fmtparams) if row]
    if not rows:
        raise IOError(f"{path}: file contains no data")
    elif rows[0][0].startswith('\ufeff'):
        raise IOError(f"First word invalid: {rows[0][0]!r}; file might be encoded with byte order mark, try opening with encoding='utf-8-sig'")
    return rows


def _unique_name(name: str, names: Sequence[str]) -> str:
    while name in names:
        name += '_'
    return name


def _column_names(header: Optional[List[str]], names, n_columns: int) -> List[str]:
    if header is not None:
        column_names = list(header)
        # R write.table() omits the name of the row names column
        if len(column_names) == n_columns - 1:
            column_names.insert(0, '')
        # R write.csv() names it ""
        if column_names and column_names[0] == '':
            column_names[0] = _unique_name('row', column_names)
    elif names:
        column_names = list(names)
        if len(column_names) > n_columns:
            raise IOError(f"{names=}: More names than columns ({len(column_names)} names, {n_columns} columns)")
    else:
        column_names = []
    for i in range(len(column_names), n_columns):
        column_names.append(_unique_name(f'v{i}', column_names))
    return column_names


def _column_types(types, column_names: List[str]) -> str:
    if types is None:
        out = 'a' * len(column_names)
    elif isinstance(types, dict):
        out = ''.join(types.get(name, 'a') for name in column_names)
    elif isinstance(types, str):
        out = types
    else:
        raise TypeError(f'{types=}')
    if len(out) != len(column_names):
        raise ValueError(f'{types=}: {len(out)} values for file with {len(column_names)} columns')
    invalid = set(out).difference(TYPES)
    if invalid:
        raise ValueError(f"{types=}: invalid values {', '.join(map(repr, sorted(invalid)))}")
    return out


def _infer_type(values, na_values: Dict) -> str:
    if all(v in BOOL_VALUES for v in values):
        return 'b'
    float_pattern = re.compile(FLOAT_NAN_PATTERN)
    if all(v in na_values or float_pattern.match(v) for v in values):
        return 'v'
    return 'f'


def tsv(
        path: PathArg,
        names: Union[Sequence[str], bool] = True,
        types: Union[str, dict] = None,
        delimiter: str = 'auto',
        skiprows: int = 0,
        ignore_missing: bool = False,
        empty: Union[str, float] = None,
        random: Union[str, Sequence[str]] = None,
        strip: bool = False,
        encoding: str = None,
        comment: str = '^#',
        **fmtparams,
) -> _data.Dataset:
    r"""Read a :class:`Dataset` from a tab- or comma-separated text file

    Parameters
    ----------
    path : str
        Text file (``*.gz`` files are decompressed).
    names : Sequence of str | bool
        ``True`` to read column names from the first row, a list of names, or
        ``False`` to name columns ``v0``, ``v1``, ...
    types : str | dict
        Column types: ``'f'`` for :class:`Factor`, ``'v'`` for
        :class:`Var`, ``'b'`` for boolean :class:`Var` and ``'a'`` to
        infer the type from the values. Either one character per column
        (``'ffvva'``) or ``{name: type}`` for some columns (e.g.
        ``{'Subject': 'f'}``).
    delimiter : str
        Column delimiter (by default ``','`` for ``*.csv`` files and tab
        otherwise).
    skiprows : int
        Number of rows to skip before the column names.
    ignore_missing : bool
        Allow rows with fewer entries (missing values are ``NaN`` or ``''``).
        By default, unequal rows raise :exc:`IOError`.
    empty : number | 'nan'
        Value for empty entries in numerical columns. Without ``empty``, a
        column with empty entries is read as :class:`Factor`.
    random : str | sequence of str
        Columns to read as random effects.
    strip
        Remove leading and trailing white-space from Factor labels.
    encoding
        File encoding (see :func:`open`).
    comment
        Regular expression for lines to skip (default ``#`` comments).
    **fmtparams
        Further :func:`csv.reader` parameters.

    Notes
    -----
    Tables saved from R with ``write.csv()`` or ``write.table()`` can be
    read directly: ``NA`` is read as ``NaN``, and the column of row names is
    named ``row``.
    """
    path = Path(path)
    random = [random] if isinstance(random, str) else list(random or ())

    rows = _read_rows(path, delimiter, encoding, comment, fmtparams)[skiprows:]
    header = rows.pop(0) if names is True and rows else None
    lengths = {len(row) for row in rows}
    if not lengths:
        raise IOError(f"{path}: file contains no rows")
    elif len(lengths) > 1 and not ignore_missing:
        raise IOError(f"{path}: rows with unequal numbers of entries ({sorted(lengths)}); use ignore_missing=True to pad them")
    n_columns = max(lengths)
    column_names = _column_names(header, names, n_columns)
    if missing := [name for name in random if name not in column_names]:
        raise ValueError(f"{random=}: no column named {', '.join(missing)}")
    column_types = _column_types(types, column_names)

    na_values = dict(NA_VALUES)
    if isinstance(empty, str):
        na_values[''] = to_num(empty)
    elif isinstance(empty, Number):
        na_values[''] = empty
    elif empty is not None:
        raise TypeError(f'{empty=}')

    ds = _data.Dataset(name=path.name)
    keys = {}
    for i, (name, kind) in enumerate(zip(column_names, column_types)):
        values = [row[i] if i < len(row) else None for row in rows]
        if kind == 'a':
            kind = _infer_type(values, na_values)
        if kind == 'f':
            item = _data.Factor(values, name, name in random, labels={None: ''})
            if strip and any(cell.strip() != cell for cell in item.cells):
                item.update_labels({cell: cell.strip() for cell in item.cells})
        elif name in random:
            raise ValueError(f"{random=}: column {name!r} is not categorial")
        elif kind == 'b':
            item = _data.Var([BOOL_VALUES[v] for v in values], name)
        else:
            item = _data.Var([na_values[v] if v in na_values else to_num(v) for v in values], name)
        keys[name] = _data.as_legal_dataset_key(name)
        ds[keys[name]] = item

    if any(name != key for name, key in keys.items()):
        ds.info['keys'] = keys
    logging.getLogger('lingplot').debug("Loaded %s: %i cases, %i variables", path.name, ds.n_cases, len(ds))
    return ds
