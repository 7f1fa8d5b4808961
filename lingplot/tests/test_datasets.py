# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
from pathlib import Path

import numpy as np
import pytest

from lingplot import datasets
from lingplot._exceptions import KeysMissing
from lingplot.testing import TempDir


def test_get_lexdec():
    "Test the simulated lexdec data"
    ds = datasets.get_lexdec(n_subjects=6, n_words=12)
    assert ds.name == 'lexdec'
    assert list(ds) == list(datasets.LEXDEC_COLUMNS)
    assert ds.n_cases == 72
    assert ds['Subject'].random
    assert ds['Word'].random
    assert ds['NativeLanguage'].cells == ('English', 'Other')
    assert ds['Class'].cells == ('animal', 'plant')
    # each subject sees each word once
    assert len(ds['Subject'] % ds['Word']) == len((ds['Subject'] % ds['Word']).cells)
    # native language is a property of the subject
    subjects = ds.aggregate('Subject', drop_bad=True)
    assert 'NativeLanguage' in subjects
    assert 'Word' not in subjects
    # word properties
    words = ds.aggregate('Word', drop_bad=True)
    assert np.all(words['Length'].x == [len(word) for word in words['Word']])
    # same seed, same data
    ds2 = datasets.get_lexdec(n_subjects=6, n_words=12)
    assert np.all(ds2['RT'].x == ds['RT'].x)
    # more words than in the original list
    ds = datasets.get_lexdec(n_subjects=2, n_words=81)
    assert 'w081' in ds['Word'].cells
    with pytest.raises(ValueError):
        datasets.get_lexdec(n_subjects=1)
    with pytest.raises(ValueError):
        datasets.get_lexdec(n_words=2)


@pytest.mark.slow
def test_lexdec_effects():
    "Simulated effects have the expected direction"
    ds = datasets.get_lexdec()
    assert ds.n_cases == 21 * 79
    english = ds['NativeLanguage'] == 'English'
    assert ds['RT'].x[english].mean() < ds['RT'].x[~english].mean()
    assert np.corrcoef(ds['Frequency'].x, ds['RT'].x)[0, 1] < 0


def test_load_lexdec():
    "Test loading lexdec from a table"
    tempdir = TempDir()
    ds = datasets.get_lexdec(n_subjects=2, n_words=4)
    path = Path(tempdir) / 'lexdec.csv'
    lines = [','.join(['""', *(f'"{key}"' for key in ds)])]
    for i, case in enumerate(ds.itercases(), 1):
        values = [f'"{v}"' if isinstance(v, str) else repr(v.item()) for v in case.values()]
        lines.append(','.join([f'"{i}"', *values]))
    path.write_text('\n'.join(lines) + '\n')

    ds_loaded = datasets.load_lexdec(path)
    assert ds_loaded.name == 'lexdec'
    assert list(ds_loaded) == list(ds)
    assert ds_loaded['Subject'].random
    assert ds_loaded['Word'].random
    assert ds_loaded['RT'].x == pytest.approx(ds['RT'].x)
    assert ds_loaded['Subject'].as_labels() == ds['Subject'].as_labels()

    # missing columns
    path.write_text('"","Subject","Word","RT"\n"1","A1","owl",6.3\n')
    with pytest.raises(KeysMissing):
        datasets.load_lexdec(path)


def test_lexdec_info():
    assert datasets.lexdec_info('RT') == "Log reaction time"
    assert set(datasets.lexdec_info()) == set(datasets.LEXDEC_COLUMNS)
    with pytest.raises(KeyError):
        datasets.lexdec_info('Latency')


def test_loftus_masson():
    ds = datasets.get_loftus_masson_1994()
    assert ds.n_cases == 30
    assert ds['subject'].random
    ds = datasets.permute((('A', ('a1', 'a2')), ('B', ('b1', 'b2'))))
    assert ds['A'].as_labels() == ['a1', 'a1', 'a2', 'a2']
