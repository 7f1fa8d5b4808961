# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Descriptive statistics and fits on numpy arrays

Error bars for repeated measures follow Loftus & Masson (1994): the
variability due to differences between subjects is removed by estimating the
error from the residuals of an additive ``condition + subject`` model.
"""
from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Literal, Sequence, Union

import numpy as np
import scipy.stats
from statsmodels.nonparametric.smoothers_lowess import lowess

from .._data_obj import CategorialArg, CellArg, Dataset, Factor, FactorArg, asarray, ascategorial, asfactor


SPEC_PATTERN = re.compile(r"^(?P<number>[.\d]*)(?P<percent>%?)(?P<measure>CI|SEM|SD)$")


@dataclass
class DispersionSpec:
    """Parsed error bar description such as ``'2sem'`` or ``'99%ci'``

    For ``CI``, ``multiplier`` is the confidence level, otherwise it scales
    the measure.
    """
    multiplier: float = 1
    measure: Literal['SEM', 'CI', 'SD'] = 'SEM'

    @classmethod
    def from_string(cls, string: Union[str, DispersionSpec]) -> DispersionSpec:
        if isinstance(string, cls):
            return string
        match = SPEC_PATTERN.match(string.upper())
        if match is None:
            raise ValueError(f"{string!r}: not an error specification; use a measure (CI, SEM or SD) with optional number prefix")
        measure = match.group('measure')
        number = match.group('number')
        if not number:
            multiplier = .95 if measure == 'CI' else 1
        elif match.group('percent'):
            multiplier = float(number) / 100
        else:
            multiplier = float(number)
        return cls(multiplier, measure)


def _float_array(y) -> np.ndarray:
    return np.asarray(y, dtype=np.float64)


def design_matrix(factors: Sequence[Factor]) -> np.ndarray:
    """Additive design matrix with intercept and dummy codes for each factor

    The first cell of each factor is the reference cell.
    """
    columns = [np.ones(len(factors[0]))]
    columns.extend((factor == cell).astype(np.float64) for factor in factors for cell in factor.cells[1:])
    return np.column_stack(columns)


def residuals(y, factors):
    """Residuals of ``y`` after regressing out an additive model of ``factors``

    Returns
    -------
    residuals : array (n, ...)
        Residuals, same shape as ``y``.
    df_error : int
        Residual degrees of freedom.
    """
    y = _float_array(y)
    flat = y.reshape((len(y), -1))
    x = design_matrix(factors)
    betas, _, rank, _ = np.linalg.lstsq(x, flat, rcond=None)
    return (flat - x @ betas).reshape(y.shape), len(y) - rank


def residual_mean_square(y, factors=None):
    """Error variance estimate, optionally after removing ``factors``

    Returns
    -------
    mean_square : array [...]
        Residual sum of squares divided by ``df``.
    df : int
        Error degrees of freedom.
    """
    y = _float_array(y)
    if len(y) < 2:
        raise ValueError("Need at least two measurements to estimate dispersion")
    if factors is None:
        res, df = y - y.mean(0), len(y) - 1
    else:
        res, df = residuals(y, factors)
    if df < 1:
        raise ValueError("No error degrees of freedom left: the model explains all variability")
    return (res ** 2).sum(0) / df, df


def sem(y, axis=0):
    "Standard error of the mean"
    y = _float_array(y)
    return y.std(axis, ddof=1) / np.sqrt(y.shape[axis])


def _t_multiplier(confidence: float, df: int) -> float:
    return scipy.stats.t.isf((1 - confidence) / 2, df)


def confidence_interval(y, confidence=.95):
    "Half-width of the t-based confidence interval for the mean of ``y``"
    return sem(y) * _t_multiplier(confidence, len(y) - 1)


class Dispersion:
    """Pooled standard error of cell means

    Parameters
    ----------
    y : array (n, ...)
        Data, first dimension reflecting cases.
    x : Factor | Interaction
        Cells; the error is estimated from the variance within cells, which
        need to be of equal size.
    match : Factor
        Repeated measures unit (e.g. subject); its main effect is removed
        from the error.
    """
    def __init__(self, y, x=None, match=None):
        factors = []
        if x is not None and len(x.cells) > 1:
            x = asfactor(x)
            n = x._cellsize()
            if isinstance(n, dict):
                raise NotImplementedError("Pooled error for unequal cell sizes")
            factors.append(x)
        else:
            n = len(y)
        if match is not None and len(match.cells) < len(match):
            factors.append(asfactor(match))
        mean_square, df = residual_mean_square(y, factors or None)
        self.n = n
        self.df = df
        self.model = factors or None
        self.sem = np.sqrt(mean_square / n)

    def ci(self, confidence):
        "Half-width of the ``confidence`` interval around cell means"
        return self.sem * _t_multiplier(confidence, self.df)

    def get(self, spec: Union[str, DispersionSpec]):
        spec = DispersionSpec.from_string(spec)
        if spec.measure == 'CI':
            return self.ci(spec.multiplier)
        elif spec.measure == 'SEM':
            return self.sem * spec.multiplier
        raise NotImplementedError(f"Pooled {spec.measure}")


def dispersion(
        y: np.ndarray,
        x: CategorialArg = None,
        match: FactorArg = None,
        spec: str = 'SEM',
        pool: bool = None,
        cells: Sequence[CellArg] = None,
        data: Dataset = None,
):
    """Error bar size for data, optionally per cell

    Parameters
    ----------
    y
        Dependent measure.
    x
        Cells of the design.
    match
        Repeated measures unit; between-unit variability is removed
        (Loftus & Masson 1994).
    spec
        Number, optional percent sign and measure, e.g. ``'sem'``,
        ``'2sem'`` (two standard errors), ``'ci'`` (95% confidence interval),
        ``'99%ci'`` or ``'sd'``.
    pool
        Estimate a single error term from all cells instead of one per cell.
    cells
        Cells for which to estimate the error (default ``x.cells``).
    data
        Dataset in which to evaluate str arguments.

    Returns
    -------
    var : scalar | array
        Scalar if pooled (or without ``x``), otherwise one value per cell.
    """
    spec_ = DispersionSpec.from_string(spec)
    y, n = asarray(y, data=data, return_n=True)
    y = _float_array(y)
    if match is not None:
        match = asfactor(match, data=data, n=n)
    if x is not None:
        x = ascategorial(x, data=data, n=n)
        if cells is None:
            cells = x.cells
    elif match is not None and match.n_cells == len(match):
        raise ValueError(f"match={match.name!r}: one case per level leaves no within-subject error")
    per_cell = x is not None and not pool

    if spec_.measure == 'SD':
        if match is not None:
            raise NotImplementedError(f"{spec!r} with match")
        if per_cell:
            out = [y[x == cell].std(0, ddof=1) for cell in cells]
        else:
            out = y.std(0, ddof=1)
        out = np.multiply(out, spec_.multiplier)
    elif not per_cell:
        out = Dispersion(y, x, match).get(spec_)
    elif match is not None:
        raise NotImplementedError(f"{spec!r} per cell with match; use pool=True")
    else:
        out = [Dispersion(y[x == cell]).get(spec_) for cell in cells]

    out = np.asarray(out)
    return out.item() if out.ndim == 0 else out


@dataclass
class LinearFit:
    """Ordinary least squares line with pointwise confidence band

    Attributes
    ----------
    x : array
        Evaluation points spanning the range of the predictor.
    y : array
        Fitted values at ``x``.
    lower, upper : array
        Confidence band around ``y``.
    intercept, slope : float
        Regression coefficients.
    r2 : float
        Proportion of variance explained.
    confidence : float
        Confidence level of the band.
    """
    x: np.ndarray
    y: np.ndarray
    lower: np.ndarray
    upper: np.ndarray
    intercept: float
    slope: float
    r2: float
    confidence: float


def linear_fit(x, y, confidence=.95, n_points=100):
    """Fit a regression line with confidence band

    Parameters
    ----------
    x : array (n,)
        Predictor.
    y : array (n,)
        Dependent measure.
    confidence : scalar
        Confidence level for the band (default 95%).
    n_points : int
        Number of points at which to evaluate the line.

    Returns
    -------
    fit : LinearFit
        The fitted line.
    """
    x = _float_array(x)
    y = _float_array(y)
    n = len(x)
    if n < 3:
        raise ValueError(f"Need at least 3 points for a regression line, got {n}")
    x_mean = x.mean()
    ss_x = np.sum((x - x_mean) ** 2)
    if ss_x == 0:
        raise ValueError("Can't fit regression line: predictor is constant")
    slope = np.sum((x - x_mean) * (y - y.mean())) / ss_x
    intercept = y.mean() - slope * x_mean
    res = y - (intercept + slope * x)
    ss_res = np.sum(res ** 2)
    ss_tot = np.sum((y - y.mean()) ** 2)
    r2 = 1 - ss_res / ss_tot if ss_tot else 0.
    s = np.sqrt(ss_res / (n - 2))

    x_out = np.linspace(x.min(), x.max(), n_points)
    y_out = intercept + slope * x_out
    se_fit = s * np.sqrt(1 / n + (x_out - x_mean) ** 2 / ss_x)
    t = _t_multiplier(confidence, n - 2)
    return LinearFit(x_out, y_out, y_out - t * se_fit, y_out + t * se_fit, intercept, slope, r2, confidence)


def lowess_fit(x, y, frac=2/3):
    """Locally weighted scatterplot smoothing

    Returns
    -------
    x : array
        Sorted predictor values.
    y : array
        Smoothed values at ``x``.
    """
    out = lowess(_float_array(y), _float_array(x), frac=frac, return_sorted=True)
    return out[:, 0], out[:, 1]
