# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
import numpy as np
from numpy.testing import assert_array_almost_equal, assert_array_equal
import pytest

from lingplot import Celltable, Factor, datasets


def test_celltable():
    "Test the Celltable class."
    ds = datasets.get_lexdec(n_subjects=6, n_words=12)

    ct = Celltable('RT', 'NativeLanguage', data=ds)
    assert ct.cells == ds['NativeLanguage'].cells
    assert ct.n_cases == ds.n_cases
    assert not ct.all_within
    for cell in ct.cells:
        assert_array_equal(ct.data[cell].x, ds[ds['NativeLanguage'] == cell, 'RT'].x)
    means = ct.get_statistic_dict()
    assert means['English'] == pytest.approx(ds[ds['NativeLanguage'] == 'English', 'RT'].mean())

    assert_array_equal(ct.data_indexes['English'], ds['NativeLanguage'] == 'English')

    # cells argument determines order
    ct = Celltable('RT', 'NativeLanguage', cells=('Other', 'English'), data=ds)
    assert ct.cells == ('Other', 'English')
    assert ct.cellnames() == ['Other', 'English']
    with pytest.raises(ValueError):
        Celltable('RT', 'NativeLanguage', cells=('Other', 'German'), data=ds)
    with pytest.raises(TypeError):
        Celltable('RT', cells=('Other',), data=ds)

    # interaction
    ct = Celltable('RT', 'NativeLanguage % Class', data=ds)
    assert len(ct) == 4
    assert ct.cellnames('-')[0] == 'English-animal'

    # sub
    ct = Celltable('RT', 'Class', sub="NativeLanguage == 'Other'", data=ds)
    assert ct.n_cases == np.sum(ds['NativeLanguage'] == 'Other')


def test_celltable_match():
    "Test aggregating within matched cells"
    ds = datasets.get_lexdec(n_subjects=6, n_words=12)
    ct = Celltable('RT', 'Class', match='Subject', data=ds)
    # one value per subject and word class
    assert ct.n_cases == 12
    assert ct.all_within
    s1 = ds.sub("(Subject == 'S01') & (Class == 'animal')", 'RT')
    index = ct.groups['animal'] == 'S01'
    assert ct.data['animal'].x[index][0] == pytest.approx(s1.mean())

    # between-subject factor
    ct = Celltable('RT', 'NativeLanguage', match='Subject', data=ds)
    assert ct.n_cases == 6
    assert not ct.all_within
    assert ct.within['English', 'Other'] is False


def test_variability():
    "Test Celltable.variability()"
    ds = datasets.get_loftus_masson_1994()
    ct = Celltable('n_recalled', 'exposure.as_factor()', 'subject', data=ds)
    # Loftus & Masson (1994), within-subject 95% confidence interval
    assert ct.variability('95%ci') == pytest.approx(0.52, abs=.005)
    assert ct.variability('sem') == pytest.approx(np.sqrt(0.615 / 10), abs=.001)
    with pytest.raises(NotImplementedError):
        ct.variability('sd')

    # unpooled: one value per cell
    ct = Celltable('n_recalled', 'exposure.as_factor()', data=ds)
    sem = ct.variability('sem')
    assert len(sem) == 3
    for cell, value in zip(ct.cells, sem):
        y = ct.data[cell].x
        assert value == pytest.approx(y.std(ddof=1) / np.sqrt(len(y)))
    assert_array_almost_equal(ct.variability('2sem'), 2 * sem)
    assert ct.variability('sem', cell='1') == pytest.approx(sem[0])
    sd = ct.variability('sd')
    assert sd[0] == pytest.approx(ct.data['1'].x.std(ddof=1))
    with pytest.raises(ValueError):
        ct.variability('sme')


def test_celltable_factor_objects():
    "Celltable with data-objects instead of names"
    y = np.arange(6.)
    x = Factor('aabbcc', 'x')
    ct = Celltable(y, x)
    assert ct.get_statistic() == [0.5, 2.5, 4.5]
