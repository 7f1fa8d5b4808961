# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
import numpy as np
from numpy.testing import assert_array_equal
import pytest

from lingplot import Dataset, Factor, Interaction, Var, cellname, combine, datasets
from lingplot._exceptions import EvalError
from lingplot.testing import assert_dataobj_equal, assert_dataset_equal


def test_var():
    "Test Var objects"
    v = Var([1, 2, 3], 'v')
    assert len(v) == 3
    assert v.mean() == 2
    assert_array_equal((v + 1).x, [2, 3, 4])
    assert_array_equal((2 * v).x, [2, 4, 6])
    assert_array_equal(Var([1, 2], repeat=2).x, [1, 1, 2, 2])
    assert_array_equal(Var([1, 2], tile=2).x, [1, 2, 1, 2])
    # longname propagates through operations
    rt = Var([6., 6.5], 'RT')
    assert rt.exp().info['longname'] == 'exp(RT)'
    assert (rt - 6).info['longname'] == 'RT - 6'
    assert Var([1.], 'RT', {'longname': 'log RT'}).exp().info['longname'] == 'exp((log RT))'
    # invalid input
    with pytest.raises(TypeError):
        Var('abc')
    with pytest.raises(TypeError):
        Var(['a', 'b'])
    with pytest.raises(ValueError):
        Var(np.ones((2, 3)))
    with pytest.raises(TypeError):
        bool(v)


def test_var_math():
    v = Var([1., 10., 100.], 'freq')
    assert_array_equal(v.log(10).x, [0, 1, 2])
    assert v.log().info['longname'] == 'log(freq)'
    assert_array_equal(Var([-1, 2]).abs().x, [1, 2])
    assert_array_equal(Var([1., np.nan]).isnan(), [False, True])
    assert v.astype(int).x.dtype.kind == 'i'


def test_var_as_factor():
    v = Var([0, 1, 2, 3])
    assert v.as_factor().cells == ('0', '1', '2', '3')
    f = v.as_factor({(0, 1): 'low', (2, 3): 'high'})
    assert f.as_labels() == ['low', 'low', 'high', 'high']


def test_factor_as_var():
    f = Factor('abc')
    assert f.as_var({'a': 1, 'b': 2}, default=0).x.tolist() == [1, 2, 0]
    with pytest.raises(KeyError):
        f.as_var({'a': 1})


def test_factor():
    "Test Factor objects"
    f = Factor('aabbcc', 'f')
    assert f.cells == ('a', 'b', 'c')
    assert f.n_cells == 3
    assert_array_equal(f.isin(('a', 'c', 'x')), [True, True, False, False, True, True])
    assert_array_equal(f == 'b', [False, False, True, True, False, False])
    assert_array_equal(f.index('c'), [4, 5])
    assert f[2] == 'b'
    assert_dataobj_equal(f[:2], Factor('aa', 'f'))

    # labels determine cell order
    f = Factor([1, 0, 1], labels={1: 'Other', 0: 'English'})
    assert f.cells == ('Other', 'English')
    f.sort_cells(['English', 'Other'])
    assert f.cells == ('English', 'Other')
    with pytest.raises(ValueError):
        f.sort_cells(['English'])

    # assignment adds labels
    f = Factor('aab')
    f[2] = 'c'
    assert f.cells == ('a', 'c')

    # update_labels merges cells
    f = Factor('abc')
    f.update_labels({'b': 'a'})
    assert f.cells == ('a', 'c')
    assert f.as_labels() == ['a', 'a', 'c']
    with pytest.raises(KeyError):
        f.update_labels({'x': 'y'})

    # natural sort of cells
    f = Factor(['S10', 'S2', 'S1'])
    assert f.cells == ('S1', 'S2', 'S10')


def test_interaction():
    "Test Interaction"
    a = Factor('aabb', 'A')
    b = Factor('xyxy', 'B')
    i = a % b
    assert isinstance(i, Interaction)
    assert i.name == 'A x B'
    assert i.cells == (('a', 'x'), ('a', 'y'), ('b', 'x'), ('b', 'y'))
    assert_array_equal(i == ('a', 'y'), [False, True, False, False])
    assert i.as_labels() == ['a x', 'a y', 'b x', 'b y']
    assert cellname(('a', 'y')) == 'a y'
    assert cellname(('a', 'y'), '\n') == 'a\ny'
    with pytest.raises(ValueError):
        Interaction([a])


def test_combine():
    "Test combine()"
    assert_dataobj_equal(combine([Var([1], 'v'), Var([2], 'v')]), Var([1, 2], 'v'))
    f = combine([Factor('ab', 'f'), Factor('bc', 'f')])
    assert f.cells == ('a', 'b', 'c')
    ds = combine([Dataset([Var([1], 'v')]), Dataset([Var([2], 'v')])])
    assert ds.n_cases == 2
    with pytest.raises(TypeError):
        combine([Var([1]), Factor('a')])
    with pytest.raises(ValueError):
        combine([])


def test_dataset():
    "Test Dataset"
    ds = Dataset()
    ds['RT'] = Var([6.1, 6.2, 6.3, 6.4])
    ds['Class'] = Factor(['animal', 'plant', 'animal', 'plant'])
    ds[:, 'Language'] = 'English'
    assert ds.n_cases == 4
    assert ds.n_items == 3
    assert ds['Language'].cells == ('English',)
    assert ds['RT'].name == 'RT'
    with pytest.raises(ValueError):
        ds['short'] = Var([1, 2])
    with pytest.raises(ValueError):
        ds['not a key'] = Var([1, 2, 3, 4])

    # indexing
    assert ds[0] == {'RT': 6.1, 'Class': 'animal', 'Language': 'English'}
    sub = ds[ds['Class'] == 'plant']
    assert sub.n_cases == 2
    assert_array_equal(sub['RT'].x, [6.2, 6.4])
    assert list(ds['RT', 'Class']) == ['RT', 'Class']
    assert ds.sub("Class == 'animal'", 'RT').x.tolist() == [6.1, 6.3]

    # eval
    assert_array_equal(ds.eval('RT * 2').x, ds['RT'].x * 2)
    with pytest.raises(EvalError):
        ds.eval('Frequency + 1')

    # aggregate
    agg = ds.aggregate('Class')
    assert agg.n_cases == 2
    assert_array_equal(agg['n'].x, [2, 2])
    assert agg['RT'].x.tolist() == pytest.approx([6.2, 6.3])

    # copy
    ds_copy = ds.copy()
    ds_copy['new'] = Var([0, 0, 0, 0])
    assert 'new' not in ds
    assert_dataset_equal(ds_copy['RT', 'Class', 'Language'], ds)


def test_dataset_from_caselist():
    ds = Dataset.from_caselist(['Subject', 'RT'], [('S1', 6.1), ('S2', 6.5)], random='Subject')
    assert ds['Subject'].random
    assert isinstance(ds['RT'], Var)
    with pytest.raises(ValueError):
        Dataset.from_caselist(['Subject'], [('S1', 6.1)])


def test_dataframe():
    "Test conversion to and from pandas"
    ds = datasets.get_lexdec(n_subjects=4, n_words=6)
    df = ds.as_dataframe()
    assert len(df) == ds.n_cases
    assert list(df['NativeLanguage'].cat.categories) == list(ds['NativeLanguage'].cells)
    ds2 = Dataset.from_dataframe(df, random=['Subject', 'Word'])
    assert ds2['Subject'].random
    assert_dataobj_equal(ds2['RT'], ds['RT'])
    assert ds2['Correct'].cells == ds['Correct'].cells


def test_dataset_str():
    ds = datasets.get_lexdec(n_subjects=2, n_words=4)
    lines = str(ds['RT', 'Word'].as_table(3)).splitlines()
    assert lines[0].split() == ['RT', 'Word']
    assert lines[-1] == f"... (3 of {ds.n_cases} rows shown)"
    assert ds.summary().startswith('lexdec: 8 cases')
    lines = ds.head(2).splitlines()
    assert len(lines) == 5
    assert lines[2].split()[0] == ds[0, 'Subject']
    lines = ds.tail(2).splitlines()
    assert lines[3].split()[0] == ds[-1, 'Subject']
