# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Plotting walk-through with the ``lexdec`` data

Each step of the tutorial is a function that takes the ``lexdec``
:class:`Dataset` and returns a figure. :func:`run_tutorial` renders all (or
some) steps to image files.
"""
import logging
from pathlib import Path
from typing import Callable, List, NamedTuple, Sequence

from ._config import CONFIG
from ._data_obj import Dataset
from ._stats.lmm import lmm
from ._types import PathArg
from ._utils import tqdm
from . import datasets, plot


LMM_FORMULA = 'RT ~ Frequency * NativeLanguage'
LMM_RANDOM = ('Subject', 'Word')


class TutorialStep(NamedTuple):
    name: str
    description: str
    func: Callable


def _rt_histogram(ds, **kwargs):
    return plot.Histogram('RT', data=ds, **kwargs)


def _rt_histogram_by_language(ds, **kwargs):
    return plot.Histogram('RT', 'NativeLanguage', data=ds, **kwargs)


def _rt_density_by_language(ds, **kwargs):
    return plot.Histogram('RT', color='NativeLanguage', density=True, kde=True, data=ds, **kwargs)


def _frequency_scatter(ds, **kwargs):
    return plot.Scatter('RT', 'Frequency', data=ds, alpha=.3, size=8, **kwargs)


def _frequency_smooth(ds, **kwargs):
    return plot.Scatter('RT', 'Frequency', smooth='lm', data=ds, alpha=.3, size=8, **kwargs)


def _frequency_smooth_by_language(ds, **kwargs):
    return plot.Scatter('RT', 'Frequency', 'NativeLanguage', smooth='lm', data=ds, alpha=.3, size=8, **kwargs)


def _rt_barplot(ds, **kwargs):
    return plot.Barplot('RT', 'NativeLanguage', data=ds, bottom=6, **kwargs)


def _rt_barplot_by_subject(ds, **kwargs):
    # subject means in each word class; error bars from within-subject variability
    return plot.Barplot('RT', 'Class', match='Subject', data=ds, bottom=6, **kwargs)


def _rt_violin(ds, **kwargs):
    return plot.Violin('RT', 'NativeLanguage % Class', data=ds, **kwargs)


def _frequency_facets_by_class(ds, **kwargs):
    return plot.Scatter('RT', 'Frequency', 'NativeLanguage', facet='Class', smooth='lm', data=ds, alpha=.3, size=8, **kwargs)


def _lmm_fitted(ds, **kwargs):
    result = lmm(LMM_FORMULA, LMM_RANDOM, ds)
    ds = ds.copy()
    result.add_to(ds)
    return plot.Scatter('fitted', 'Frequency', 'NativeLanguage', smooth='lm', data=ds, alpha=.3, size=8, **kwargs)


def _lmm_coefficients(ds, **kwargs):
    result = lmm(LMM_FORMULA, LMM_RANDOM, ds)
    return plot.Coefficients(result, **kwargs)


TUTORIAL_STEPS = [
    TutorialStep('rt-histogram', "Histogram of log reaction times", _rt_histogram),
    TutorialStep('rt-histogram-by-language', "Reaction time histograms, one panel per native language", _rt_histogram_by_language),
    TutorialStep('rt-density-by-language', "Overlaid reaction time densities for the two native language groups", _rt_density_by_language),
    TutorialStep('frequency-scatter', "Reaction time by word frequency", _frequency_scatter),
    TutorialStep('frequency-smooth', "Reaction time by word frequency with a linear smoother", _frequency_smooth),
    TutorialStep('frequency-smooth-by-language', "Linear smoothers for each native language group", _frequency_smooth_by_language),
    TutorialStep('rt-barplot', "Mean reaction time by native language with standard error bars", _rt_barplot),
    TutorialStep('rt-barplot-by-subject', "Word class means computed over subject means, with within-subject error bars", _rt_barplot_by_subject),
    TutorialStep('rt-violin', "Reaction time distributions by native language and word class", _rt_violin),
    TutorialStep('frequency-facets-by-class', "Frequency effect in separate panels for animals and plants", _frequency_facets_by_class),
    TutorialStep('lmm-fitted', "Fitted values of a mixed-effects model by word frequency", _lmm_fitted),
    TutorialStep('lmm-coefficients', "Fixed effects estimates of the mixed-effects model", _lmm_coefficients),
]
STEP_NAMES = [step.name for step in TUTORIAL_STEPS]


def get_step(name: str) -> TutorialStep:
    "Tutorial step by name"
    for step in TUTORIAL_STEPS:
        if step.name == name:
            return step
    raise ValueError(f"{name=}: unknown tutorial step; needs to be one of {', '.join(STEP_NAMES)}")


def run_tutorial(
        dst: PathArg,
        data: Dataset = None,
        format: str = None,
        steps: Sequence[str] = None,
) -> List[Path]:
    """Render the tutorial figures to image files

    Parameters
    ----------
    dst
        Directory in which to save the figures (created if it does not exist).
    data
        The ``lexdec`` data (default :func:`datasets.get_lexdec`). Can also be
        the path to a table exported from R (see :func:`datasets.load_lexdec`).
    format
        File format (default is the format set with :func:`configure`).
    steps
        Names of the steps to render (default all, see
        :data:`TUTORIAL_STEPS`).

    Returns
    -------
    paths
        Files that were written, in the order of the steps.
    """
    logger = logging.getLogger('lingplot')
    if steps is None:
        selected = TUTORIAL_STEPS
    else:
        selected = [get_step(name) for name in steps]
    if format is None:
        format = CONFIG['format']
    if data is None:
        data = datasets.get_lexdec()
    elif not isinstance(data, Dataset):
        data = datasets.load_lexdec(data)
    dst = Path(dst).expanduser()
    dst.mkdir(parents=True, exist_ok=True)

    paths = []
    for step in tqdm(selected, "Tutorial", unit='figure', disable=not CONFIG['tqdm']):
        logger.info("%s: %s", step.name, step.description)
        figure = step.func(data, show=False)
        path = dst / f'{step.name}.{format}'
        try:
            figure.save(path, format=format)
        finally:
            figure.close()
        logger.debug("Saved %s", path)
        paths.append(path)
    return paths
