# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Plot mixed-effects model results"""
from typing import Any, Dict, Sequence, Union

import numpy as np

from .._stats.lmm import LMMResult
from ._base import LingFigure, Layout, CategorialAxisMixin


class Coefficients(CategorialAxisMixin, LingFigure):
    """Fixed effects estimates of a mixed-effects model

    Each term is plotted as a point at its estimate with a horizontal line
    for its confidence interval.

    Parameters
    ----------
    result
        Model fit from :func:`lingplot.lmm`.
    terms
        Terms to plot, in order from top to bottom (default all terms).
    intercept
        Include the intercept (default ``False``, since its scale usually
        differs from that of the other terms).
    c
        Color for points and confidence intervals.
    xlabel
        X-axis label.
    labels
        Alternative labels for terms as ``{term: label}`` dictionary.
    ...
        Also accepts :ref:`general-layout-parameters`.

    Attributes
    ----------
    terms : list of str
        Terms in the plot, from top to bottom.
    """
    def __init__(
            self,
            result: LMMResult,
            terms: Sequence[str] = None,
            intercept: bool = False,
            c: Any = 'k',
            xlabel: Union[bool, str] = 'Estimate',
            labels: Dict[str, str] = None,
            **kwargs,
    ):
        coefficients = result.coefficients
        all_terms = list(coefficients['term'])
        if terms is None:
            terms = [term for term in all_terms if intercept or term != 'Intercept']
        else:
            terms = list(terms)
            missing = [term for term in terms if term not in all_terms]
            if missing:
                raise ValueError(f"{terms=}: not in model ({', '.join(missing)})")
        if not terms:
            raise ValueError(f"{result}: no terms to plot")
        index = [all_terms.index(term) for term in terms]
        estimate = coefficients['estimate'].x[index]
        low = coefficients['ci_low'].x[index]
        high = coefficients['ci_high'].x[index]

        n = len(terms)
        kwargs.setdefault('h', 1 + 0.4 * n)
        layout = Layout(1, 2, 3, **kwargs)
        LingFigure.__init__(self, result.formula, layout)
        ax = self._axes[0]

        pos = np.arange(n)[::-1]
        ax.hlines(pos, low, high, color=c, linewidth=1.5)
        ax.scatter(estimate, pos, color=c, zorder=3)
        ax.set_ylim(-0.5, n - 0.5)
        span = max(high.max(), 0) - min(low.min(), 0)
        ax.set_xlim(min(low.min(), 0) - .05 * span, max(high.max(), 0) + .05 * span)
        if xlabel:
            ax.set_xlabel(xlabel)

        ticks = True if labels is None else {term: labels.get(term, term) for term in terms}
        CategorialAxisMixin.__init__(self, ax, 'y', self._layout, False, None, ticks, ' ', pos, terms, 0)
        self.terms = terms
        self.estimates = estimate
        self._show()
