# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Linear mixed-effects models

Thin wrapper around :func:`statsmodels.formula.api.mixedlm` that takes a
:class:`Dataset`, tries several optimizers until one converges, and returns
results as lingplot data-objects so that they can be plotted directly.
"""
from __future__ import annotations

from functools import cached_property
import logging
from typing import Dict, List, Sequence, Tuple, Union
import warnings

import numpy as np
import statsmodels.formula.api as smf
from statsmodels.tools.sm_exceptions import ConvergenceWarning

from .._data_obj import Dataset, Factor, Var
from .._exceptions import ModelFitError
from .._utils import as_sequence


METHODS = ('lbfgs', 'powell', 'nm')
MAXITER = 200


def _fit(formula, df, random, re_formula, reml, method):
    "Fit one model, returning the result and convergence warnings"
    if len(random) == 1:
        groups = df[random[0]]
        vc_formula = None
    else:
        # crossed random intercepts as variance components of a single group
        groups = np.ones(len(df))
        vc_formula = {name: f"0 + C({name})" for name in random}
        re_formula = '0'
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ConvergenceWarning)
        model = smf.mixedlm(formula, df, groups=groups, re_formula=re_formula, vc_formula=vc_formula)
        result = model.fit(reml=reml, method=method, maxiter=MAXITER)
    messages = [str(w.message) for w in caught if issubclass(w.category, ConvergenceWarning)]
    return result, messages


def _fit_problem(result, messages):
    "Reason for rejecting a fit (``None`` for a usable fit)"
    if not np.isfinite(result.llf):
        return 'log-likelihood is not finite'
    elif any('not positive definite' in message for message in messages):
        return 'Hessian is not positive definite'
    elif not result.converged:
        return 'not converged'
    return None


def lmm(
        formula: str,
        random: Union[str, Sequence[str]],
        data: Dataset,
        reml: bool = True,
        re_formula: str = None,
        method: Union[str, Sequence[str]] = None,
) -> LMMResult:
    """Fit a linear mixed-effects model

    Parameters
    ----------
    formula
        Fixed effects in :mod:`patsy` notation (e.g.
        ``'RT ~ Frequency * NativeLanguage'``).
    random
        Name of the grouping factor (e.g. ``'Subject'``) for random intercepts.
        Several names (e.g. ``['Subject', 'Word']``) fit crossed random
        intercepts.
    data
        Dataset containing all variables.
    reml
        Fit with restricted maximum likelihood (default). Use ``False`` for
        maximum likelihood fits that can be compared with :attr:`LMMResult.aic`.
    re_formula
        Random effects formula for a single grouping factor (e.g. ``'1 + Trial'``
        for random intercepts and slopes; default random intercepts only).
    method
        Optimizer(s) to try in turn. By default, ``'lbfgs'``, ``'powell'`` and
        ``'nm'`` are tried until one converges.

    Returns
    -------
    result
        The model fit.

    Notes
    -----
    A fit is rejected when its log-likelihood is not finite, its Hessian is
    not positive definite or the optimizer did not converge. When every
    optimizer is rejected, the last fit with a finite log-likelihood is used
    and :attr:`LMMResult.converged` is ``False``; without such a fit,
    :exc:`ModelFitError` is raised.

    Examples
    --------
    Effect of frequency on log RT with subject and word intercepts::

        >>> ds = datasets.get_lexdec()
        >>> res = lmm('RT ~ Frequency', ['Subject', 'Word'], ds)
    """
    logger = logging.getLogger('lingplot')
    random = list(as_sequence(random))
    if not random:
        raise ValueError(f"{random=}: need at least one grouping factor")
    if re_formula is not None and len(random) > 1:
        raise ValueError(f"{re_formula=}: only available with a single grouping factor")
    missing = [name for name in random if name not in data]
    if missing:
        raise KeyError(f"{random=}: {', '.join(missing)} not in data")
    methods = METHODS if method is None else as_sequence(method)
    df = data.as_dataframe()

    errors: List[Tuple[str, str]] = []
    fallback = None
    for method_ in methods:
        logger.debug("Fitting %s with %s", formula, method_)
        try:
            result, messages = _fit(formula, df, random, re_formula, reml, method_)
        except (ValueError, np.linalg.LinAlgError) as error:
            logger.debug("%s failed: %s", method_, error)
            errors.append((method_, str(error)))
            continue
        problem = _fit_problem(result, messages)
        if problem is None:
            converged = True
            break
        logger.debug("%s rejected: %s", method_, problem)
        errors.append((method_, problem))
        if np.isfinite(result.llf):
            fallback = (result, messages, method_)
    else:
        if fallback is None:
            raise ModelFitError(formula, errors)
        result, messages, method_ = fallback
        converged = False
        logger.warning("%s: no optimizer produced a usable fit, using %s", formula, method_)
    for message in messages:
        logger.warning("%s (%s): %s", formula, method_, message)
    return LMMResult(result, formula, random, re_formula, reml, method_, messages, data.n_cases, converged, errors)


class LMMResult:
    """Linear mixed-effects model fit

    Attributes
    ----------
    formula : str
        Fixed effects formula.
    random : list of str
        Grouping factors.
    n_cases : int
        Number of observations.
    converged : bool
        Whether the fit was accepted (converged with a finite log-likelihood
        and a positive definite Hessian).
    method : str
        Optimizer that produced the fit.
    warnings : list of str
        Convergence warnings emitted during the fit.
    rejected : list of (str, str)
        ``(method, reason)`` for optimizers tried before ``method``.
    coefficients : Dataset
        Fixed effects table with ``term``, ``estimate``, ``se``, ``z``, ``p``,
        ``ci_low`` and ``ci_high``.
    random_variances : dict
        ``{name: variance}`` for the random effects and the residual.
    fitted : Var
        Fitted values, including random effects.
    residuals : Var
        Residuals.
    """
    def __init__(
            self,
            result,  # statsmodels MixedLMResults
            formula: str,
            random: List[str],
            re_formula: str,
            reml: bool,
            method: str,
            warnings: List[str],
            n_cases: int,
            converged: bool = None,
            rejected: List[Tuple[str, str]] = (),
    ):
        self._result = result
        self.formula = formula
        self.random = random
        self.re_formula = re_formula
        self.reml = reml
        self.method = method
        self.warnings = warnings
        self.n_cases = n_cases
        self.converged = bool(result.converged) if converged is None else converged
        self.rejected = list(rejected)

    def __repr__(self):
        return f"<LMMResult: {self.formula}, random={'+'.join(self.random)}, n={self.n_cases}>"

    def __str__(self):
        table = self.coefficients.as_table(fmt='%.4g')
        lines = [
            f"Linear mixed model: {self.formula}",
            f"Random: {', '.join(self.random)}; {self.n_cases} observations; {'REML' if self.reml else 'ML'}; {self.method}{'' if self.converged else ' (not converged)'}",
            '',
            table,
            '',
            'Random effects variance:',
        ]
        n = max(map(len, self.random_variances))
        lines.extend(f"  {name.ljust(n)}  {v:.4g}" for name, v in self.random_variances.items())
        return '\n'.join(lines)

    @property
    def terms(self) -> List[str]:
        "Fixed effects terms"
        return list(self._result.fe_params.index)

    @cached_property
    def coefficients(self) -> Dataset:
        terms = self.terms
        res = self._result
        ci = res.conf_int().loc[terms]
        ds = Dataset(name='coefficients')
        ds['term'] = Factor(terms, labels={term: term for term in terms})
        ds['estimate'] = Var(res.fe_params.to_numpy())
        ds['se'] = Var(res.bse_fe.to_numpy())
        ds['z'] = Var(res.tvalues[terms].to_numpy())
        ds['p'] = Var(res.pvalues[terms].to_numpy())
        ds['ci_low'] = Var(ci.iloc[:, 0].to_numpy())
        ds['ci_high'] = Var(ci.iloc[:, 1].to_numpy())
        return ds

    @cached_property
    def random_variances(self) -> Dict[str, float]:
        res = self._result
        out = {}
        if len(self.random) == 1:
            group = self.random[0]
            for name in res.cov_re.index:
                key = group if self.re_formula is None else f"{group}:{name}"
                out[key] = float(res.cov_re.loc[name, name])
        else:
            for name, v in zip(res.model.exog_vc.names, res.vcomp):
                out[name] = float(v)
        out['Residual'] = float(res.scale)
        return out

    @cached_property
    def fitted(self) -> Var:
        return Var(np.asarray(self._result.fittedvalues), 'fitted', {'longname': 'Fitted values'})

    @cached_property
    def residuals(self) -> Var:
        return Var(np.asarray(self._result.resid), 'residuals')

    @property
    def log_likelihood(self) -> float:
        return float(self._result.llf)

    @property
    def aic(self) -> float:
        "Akaike information criterion (only defined for ML fits)"
        if self.reml:
            return np.nan
        return float(self._result.aic)

    def predict(self, data: Dataset, name: str = 'predicted') -> Var:
        """Fixed effects predictions for new data

        Parameters
        ----------
        data
            Dataset with all the variables in the fixed effects formula.
        name
            Name for the predicted values.
        """
        df = data.as_dataframe()
        # new data can contain a subset of the levels
        for key in df.select_dtypes('category'):
            df[key] = df[key].astype(str)
        y = self._result.predict(exog=df)
        return Var(np.asarray(y), name)

    def add_to(self, data: Dataset, name: str = 'fitted'):
        """Add the fitted values to ``data`` (in place)"""
        if data.n_cases != self.n_cases:
            raise ValueError(f"{data=}: {data.n_cases} cases, but the model was fit to {self.n_cases}")
        data[name] = self.fitted.copy(name)
