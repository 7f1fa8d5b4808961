# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
import numpy as np
from numpy.testing import assert_allclose
import pytest
import scipy.stats

from lingplot import Factor, datasets
from lingplot._stats import stats


def test_dispersion_spec():
    spec = stats.DispersionSpec.from_string('sem')
    assert spec == stats.DispersionSpec(1, 'SEM')
    assert stats.DispersionSpec.from_string('2sem') == stats.DispersionSpec(2, 'SEM')
    assert stats.DispersionSpec.from_string('ci') == stats.DispersionSpec(.95, 'CI')
    assert stats.DispersionSpec.from_string('99%ci') == stats.DispersionSpec(.99, 'CI')
    assert stats.DispersionSpec.from_string('SD') == stats.DispersionSpec(1, 'SD')
    assert stats.DispersionSpec.from_string(spec) is spec
    with pytest.raises(ValueError):
        stats.DispersionSpec.from_string('var')


def test_sem_and_ci():
    "Test sem() and confidence_interval()"
    y = np.array([6.1, 6.4, 6.3, 6.8, 6.5, 6.2])
    assert stats.sem(y) == pytest.approx(scipy.stats.sem(y))
    ci = stats.confidence_interval(y)
    low, high = scipy.stats.t.interval(.95, len(y) - 1, y.mean(), scipy.stats.sem(y))
    assert ci == pytest.approx(high - y.mean())
    assert stats.dispersion(y, spec='ci') == pytest.approx(ci)
    assert stats.dispersion(y, spec='sd') == pytest.approx(y.std(ddof=1))


def test_dispersion():
    "Test within-subject dispersion (Loftus & Masson 1994)"
    ds = datasets.get_loftus_masson_1994()
    x = ds['exposure'].as_factor()
    y = ds['n_recalled'].x
    # pooled within-subject CI
    ci = stats.dispersion(y, x, ds['subject'], '95%ci', pool=True)
    assert ci == pytest.approx(0.52, abs=.005)
    # pooled between-subject error
    sem = stats.dispersion(y, x, spec='sem', pool=True)
    ms_within = np.mean([y[x == cell].var(ddof=1) for cell in x.cells])
    assert sem == pytest.approx(np.sqrt(ms_within / 10))
    # one estimate per cell
    sems = stats.dispersion(y, x, spec='sem')
    assert_allclose(sems, [scipy.stats.sem(y[x == cell]) for cell in x.cells])
    sems = stats.dispersion(y, x, spec='sem', cells=['5', '1'])
    assert sems[0] == pytest.approx(scipy.stats.sem(y[x == '5']))
    # names in a Dataset
    assert stats.dispersion('n_recalled', data=ds) == pytest.approx(scipy.stats.sem(y))

    with pytest.raises(NotImplementedError):
        stats.dispersion(y, x, ds['subject'], 'sem')
    with pytest.raises(NotImplementedError):
        stats.dispersion(y, x, ds['subject'], 'sd')
    with pytest.raises(ValueError):
        stats.dispersion(y[:10], match=ds['subject'][:10])
    with pytest.raises(ValueError):
        stats.dispersion(y[:1])


def test_residuals():
    y = np.array([1., 2., 3., 5., 6., 7.])
    f = Factor('aaabbb')
    res, df = stats.residuals(y, [f])
    assert_allclose(res, [-1, 0, 1, -1, 0, 1], atol=1e-12)
    assert df == 4
    ms, df = stats.residual_mean_square(y, [f])
    assert ms == pytest.approx(1)
    x = stats.design_matrix([f, Factor('abcabc')])
    assert x.shape == (6, 4)


def test_linear_fit():
    "Test regression lines"
    rng = np.random.RandomState(0)
    x = rng.uniform(1, 8, 50)
    y = 6.5 - .03 * x + rng.normal(0, .1, 50)
    fit = stats.linear_fit(x, y)
    ref = scipy.stats.linregress(x, y)
    assert fit.slope == pytest.approx(ref.slope)
    assert fit.intercept == pytest.approx(ref.intercept)
    assert fit.r2 == pytest.approx(ref.rvalue ** 2)
    assert fit.x[0] == x.min()
    assert fit.x[-1] == pytest.approx(x.max())
    assert np.all(fit.lower < fit.y)
    assert np.all(fit.upper > fit.y)
    # band is narrowest at the mean of x
    width = fit.upper - fit.lower
    assert abs(fit.x[np.argmin(width)] - x.mean()) < (x.max() - x.min()) / 50
    # wider band for higher confidence
    fit_99 = stats.linear_fit(x, y, .99)
    assert np.all(fit_99.upper - fit_99.lower > width)
    # plain lists of numbers
    fit = stats.linear_fit([1, 2, 3, 4], [1., 2., 2.5, 4.])
    assert fit.slope == pytest.approx(.95)
    assert fit.intercept == pytest.approx(0, abs=1e-12)

    with pytest.raises(ValueError):
        stats.linear_fit([1, 2], [1, 2])
    with pytest.raises(ValueError):
        stats.linear_fit([1, 1, 1], [1, 2, 3])


def test_lowess_fit():
    x = np.linspace(0, 10, 40)
    y = 2 * x + 1 + np.random.RandomState(0).normal(0, .1, 40)
    x_out, y_out = stats.lowess_fit(x[::-1], y[::-1])
    assert len(x_out) == 40
    assert np.all(np.diff(x_out) >= 0)
    assert_allclose(y_out, 2 * x_out + 1, atol=.3)
