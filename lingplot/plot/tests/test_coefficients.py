import numpy as np
import pytest

from lingplot import datasets, lmm, plot
from lingplot.testing import hide_plots


@pytest.fixture(scope='module')
def result():
    ds = datasets.get_lexdec(n_subjects=10, n_words=20)
    return lmm('RT ~ Frequency * NativeLanguage', 'Subject', ds)


@hide_plots
def test_coefficients(result):
    "Test plot.Coefficients"
    p = plot.Coefficients(result)
    assert 'Intercept' not in p.terms
    assert len(p.terms) == 3
    ax = p.axes[0]
    # one tick per term
    assert set(t.get_text() for t in ax.get_yticklabels()) == set(p.terms)
    assert ax.get_ylim() == (-0.5, 2.5)
    assert ax.get_xlabel() == 'Estimate'
    # x-axis includes 0
    xmin, xmax = ax.get_xlim()
    assert xmin < 0 < xmax

    p = plot.Coefficients(result, intercept=True)
    assert p.terms[0] == 'Intercept'
    estimates = result.coefficients['estimate'].x
    assert np.allclose(p.estimates, estimates)

    p = plot.Coefficients(result, ['Frequency'], labels={'Frequency': 'Log frequency'}, c='r')
    assert p.terms == ['Frequency']
    assert [t.get_text() for t in p.axes[0].get_yticklabels()] == ['Log frequency']

    with pytest.raises(ValueError):
        plot.Coefficients(result, ['Length'])
    with pytest.raises(ValueError):
        plot.Coefficients(result, [])
