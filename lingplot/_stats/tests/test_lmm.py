# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
import numpy as np
from numpy.testing import assert_allclose
import pytest

from lingplot import LMMResult, Var, datasets, lmm
from lingplot._exceptions import ModelFitError


@pytest.fixture(scope='module')
def lexdec():
    return datasets.get_lexdec(n_subjects=10, n_words=20)


@pytest.fixture(scope='module')
def result(lexdec):
    return lmm('RT ~ Frequency * NativeLanguage', ['Subject', 'Word'], lexdec)


def test_lmm(lexdec, result):
    "Test crossed random effects model"
    assert isinstance(result, LMMResult)
    assert result.n_cases == lexdec.n_cases
    assert result.random == ['Subject', 'Word']
    assert result.method in ('lbfgs', 'powell', 'nm')
    assert repr(result) == f"<LMMResult: RT ~ Frequency * NativeLanguage, random=Subject+Word, n={lexdec.n_cases}>"
    assert 'Random effects variance:' in str(result)

    # fixed effects
    coefficients = result.coefficients
    assert list(coefficients) == ['term', 'estimate', 'se', 'z', 'p', 'ci_low', 'ci_high']
    terms = list(coefficients['term'])
    assert terms == result.terms
    assert terms[0] == 'Intercept'
    assert 'Frequency' in terms
    assert 'NativeLanguage[T.Other]' in terms
    assert 'Frequency:NativeLanguage[T.Other]' in terms
    assert np.all(coefficients['ci_low'].x < coefficients['estimate'].x)
    assert np.all(coefficients['ci_high'].x > coefficients['estimate'].x)
    assert np.all((coefficients['p'].x >= 0) & (coefficients['p'].x <= 1))
    assert_allclose(coefficients['z'].x, coefficients['estimate'].x / coefficients['se'].x)

    # random effects
    variances = result.random_variances
    assert list(variances) == ['Subject', 'Word', 'Residual']
    assert all(v >= 0 for v in variances.values())

    # fitted values
    fitted = result.fitted
    assert isinstance(fitted, Var)
    assert fitted.name == 'fitted'
    assert fitted.info['longname'] == 'Fitted values'
    assert_allclose(fitted.x + result.residuals.x, lexdec['RT'].x)
    ds = lexdec.copy()
    result.add_to(ds)
    assert_allclose(ds['fitted'].x, fitted.x)
    with pytest.raises(ValueError):
        result.add_to(lexdec[:10])
    predicted = result.predict(lexdec[:10])
    assert len(predicted) == 10
    assert_allclose(predicted.x, result.predict(lexdec).x[:10])
    assert np.isnan(result.aic)
    assert np.isfinite(result.log_likelihood)


def test_lmm_ml(lexdec):
    "Maximum likelihood fit with a single grouping factor"
    result = lmm('RT ~ Frequency', 'Subject', lexdec, reml=False)
    assert list(result.random_variances) == ['Subject', 'Residual']
    assert np.isfinite(result.aic)
    assert result.coefficients.n_cases == 2
    # the lbfgs fit ends on the boundary with an infinite log-likelihood
    assert result.method != 'lbfgs'
    assert result.rejected[0] == ('lbfgs', 'log-likelihood is not finite')
    assert np.isfinite(result.log_likelihood)
    assert result.random_variances['Subject'] > 0


def test_lmm_optimizers(lexdec):
    "Explicit optimizer order"
    result = lmm('RT ~ Frequency', 'Subject', lexdec, reml=False, method=['no-such-optimizer', 'powell'])
    assert result.method == 'powell'
    assert result.rejected[0][0] == 'no-such-optimizer'
    with pytest.raises(ModelFitError) as info:
        lmm('RT ~ Frequency', 'Subject', lexdec, method='no-such-optimizer')
    assert [method for method, _ in info.value.errors] == ['no-such-optimizer']


def test_lmm_errors(lexdec):
    with pytest.raises(ValueError):
        lmm('RT ~ Frequency', [], lexdec)
    with pytest.raises(KeyError):
        lmm('RT ~ Frequency', 'Item', lexdec)
    with pytest.raises(ValueError):
        lmm('RT ~ Frequency', ['Subject', 'Word'], lexdec, re_formula='1 + Trial')
