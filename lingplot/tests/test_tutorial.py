# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
from matplotlib import pyplot
import pytest

from lingplot import TUTORIAL_STEPS, datasets, run_tutorial
from lingplot.testing import hide_plots
from lingplot.tutorial import get_step


PLOT_STEPS = [step.name for step in TUTORIAL_STEPS if not step.name.startswith('lmm')]


def test_steps():
    names = [step.name for step in TUTORIAL_STEPS]
    assert names == [
        'rt-histogram', 'rt-histogram-by-language', 'rt-density-by-language',
        'frequency-scatter', 'frequency-smooth', 'frequency-smooth-by-language',
        'rt-barplot', 'rt-barplot-by-subject', 'rt-violin',
        'frequency-facets-by-class', 'lmm-fitted', 'lmm-coefficients',
    ]
    assert all(step.description for step in TUTORIAL_STEPS)
    assert get_step('rt-violin').name == 'rt-violin'
    with pytest.raises(ValueError):
        get_step('rt-pie-chart')


@hide_plots
def test_run_tutorial(tmp_path):
    "Test rendering tutorial figures"
    ds = datasets.get_lexdec(n_subjects=6, n_words=12)
    paths = run_tutorial(tmp_path / 'figures', ds, 'png', PLOT_STEPS)
    assert [path.name for path in paths] == [f'{name}.png' for name in PLOT_STEPS]
    for path in paths:
        assert path.exists()
        assert path.stat().st_size > 0
    # figures are closed after saving
    assert pyplot.get_fignums() == []

    paths = run_tutorial(tmp_path, ds, 'svg', ['rt-barplot'])
    assert paths == [tmp_path / 'rt-barplot.svg']
    assert paths[0].read_text().lstrip().startswith('<?xml')

    with pytest.raises(ValueError):
        run_tutorial(tmp_path, ds, steps=['rt-pie-chart'])


@hide_plots
def test_tutorial_figures():
    "Check the content of tutorial figures"
    ds = datasets.get_lexdec(n_subjects=6, n_words=12)
    p = get_step('rt-histogram-by-language').func(ds)
    assert len(p.axes) == 2
    assert [ax.get_title() for ax in p.axes] == ['English', 'Other']
    p.close()

    p = get_step('frequency-smooth-by-language').func(ds)
    assert set(p.fits) == {(None, 'English'), (None, 'Other')}
    p.close()

    p = get_step('frequency-facets-by-class').func(ds)
    assert len(p.axes) == 2
    assert p.axes[0].get_ylim() == p.axes[1].get_ylim()
    assert p.axes[0].get_xlim() == p.axes[1].get_xlim()
    p.close()


@pytest.mark.slow
@hide_plots
def test_full_tutorial(tmp_path):
    "Render all steps, including the mixed-effects model"
    paths = run_tutorial(tmp_path, format='png')
    assert len(paths) == len(TUTORIAL_STEPS)
    assert all(path.exists() for path in paths)


@hide_plots
def test_lmm_steps(tmp_path):
    ds = datasets.get_lexdec(n_subjects=10, n_words=20)
    paths = run_tutorial(tmp_path, ds, 'png', ['lmm-fitted', 'lmm-coefficients'])
    assert all(path.exists() for path in paths)
    assert 'fitted' not in ds
