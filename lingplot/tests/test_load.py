# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
import gzip
from pathlib import Path

import numpy as np
from numpy.testing import assert_array_equal
import pytest

from lingplot import Factor, Var, load
from lingplot.testing import TempDir


R_CSV = '''"","Subject","RT","Trial","NativeLanguage","Correct"
"1","A1",6.340359,23,"English","correct"
"2","A1",6.308098,27,"English","correct"
"3","C",NA,29,"Other","incorrect"
'''


def test_r_csv():
    "Test reading output of write.csv"
    tempdir = TempDir()
    path = Path(tempdir) / 'lexdec.csv'
    path.write_text(R_CSV)
    ds = load.tsv(path, random='Subject')
    assert ds.name == 'lexdec.csv'
    assert list(ds) == ['row', 'Subject', 'RT', 'Trial', 'NativeLanguage', 'Correct']
    assert isinstance(ds['row'], Var)
    assert ds['Subject'].random
    assert ds['Subject'].cells == ('A1', 'C')
    assert isinstance(ds['RT'], Var)
    assert np.isnan(ds['RT'][2])
    assert_array_equal(ds['Trial'].x, [23, 27, 29])
    assert ds['Trial'].x.dtype.kind == 'i'
    assert isinstance(ds['Correct'], Factor)

    # types
    ds = load.tsv(path, types={'row': 'f', 'Trial': 'f'})
    assert ds['row'].cells == ('1', '2', '3')
    assert isinstance(ds['Trial'], Factor)
    with pytest.raises(ValueError):
        load.tsv(path, types='fv')
    with pytest.raises(ValueError):
        load.tsv(path, types={'RT': 'x'})
    with pytest.raises(ValueError):
        load.tsv(path, random='Trial')
    with pytest.raises(ValueError):
        load.tsv(path, random='Word')


def test_tsv():
    "Test tab-separated files"
    tempdir = TempDir()
    path = Path(tempdir) / 'table.txt'
    path.write_text("# comment\nword\tfreq\tok\nowl\t4.2\tTrue\nmole\t\tFalse\n")
    ds = load.tsv(path)
    assert ds['word'].cells == ('mole', 'owl')
    # empty entry makes the column categorial
    assert isinstance(ds['freq'], Factor)
    assert_array_equal(ds['ok'].x, [True, False])
    ds = load.tsv(path, empty='nan')
    assert isinstance(ds['freq'], Var)
    assert np.isnan(ds['freq'][1])
    ds = load.tsv(path, empty=0)
    assert_array_equal(ds['freq'].x, [4.2, 0])

    # names
    ds = load.tsv(path, names=['w', 'f', 'b'], skiprows=1, empty=0)
    assert list(ds) == ['w', 'f', 'b']
    ds = load.tsv(path, names=False, skiprows=1)
    assert list(ds) == ['v0', 'v1', 'v2']
    with pytest.raises(IOError):
        load.tsv(path, names=['a', 'b', 'c', 'd'], skiprows=1)

    # keys that are not legal Dataset keys
    path.write_text("log RT\tclass\n6.3\tanimal\n")
    ds = load.tsv(path)
    assert list(ds) == ['log_RT', 'class_']
    assert ds.info['keys'] == {'log RT': 'log_RT', 'class': 'class_'}


def test_tsv_errors():
    tempdir = TempDir()
    path = Path(tempdir) / 'table.txt'
    path.write_text("a\tb\n1\t2\n3\n")
    with pytest.raises(IOError):
        load.tsv(path)
    ds = load.tsv(path, ignore_missing=True)
    assert ds.n_cases == 2
    path.write_text("")
    with pytest.raises(IOError):
        load.tsv(path)
    path.write_text("\ufeffa\tb\n1\t2\n", encoding='utf-8')
    with pytest.raises(IOError):
        load.tsv(path, encoding='utf-8')
    ds = load.tsv(path, encoding='utf-8-sig')
    assert list(ds) == ['a', 'b']


def test_gzip():
    "Test reading compressed files"
    tempdir = TempDir()
    path = Path(tempdir) / 'lexdec.csv.gz'
    with gzip.open(path, 'wt') as file:
        file.write(R_CSV)
    ds = load.tsv(path)
    assert ds.name == 'lexdec.csv.gz'
    assert list(ds) == ['row', 'Subject', 'RT', 'Trial', 'NativeLanguage', 'Correct']
    assert_array_equal(ds['Trial'].x, [23, 27, 29])

    # tab-separated
    path = Path(tempdir) / 'trials.txt.gz'
    with gzip.open(path, 'wt') as file:
        file.write("Word\tLength\nowl\t3\nmole\t4\n")
    ds = load.tsv(path)
    assert ds['Word'].cells == ('mole', 'owl')
    assert_array_equal(ds['Length'].x, [3, 4])
