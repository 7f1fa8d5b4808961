# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
import pytest

from lingplot import Factor
from lingplot._exceptions import KeysMissing
from lingplot.plot._styles import Style, colors_for_categorial, colors_for_oneway, colors_for_twoway, find_cell_styles


def test_colors():
    "Test automatic cell colors"
    colors = colors_for_oneway(['English', 'Other'])
    assert list(colors) == ['English', 'Other']
    assert colors['English'] != colors['Other']
    colors = colors_for_oneway(['a', 'b', 'c'], cmap='viridis')
    assert len(colors) == 3
    colors = colors_for_oneway(['English', 'Other'], unambiguous=[2, 3])
    assert colors['English'] != colors['Other']

    colors = colors_for_twoway(['English', 'Other'], ['animal', 'plant'])
    assert list(colors) == [('English', 'animal'), ('English', 'plant'), ('Other', 'animal'), ('Other', 'plant')]
    assert len(set(colors.values())) == 4
    with pytest.raises(ValueError):
        colors_for_twoway(['English'], ['animal', 'plant'])

    language = Factor('eeoo', 'NativeLanguage')
    word_class = Factor('apap', 'Class')
    assert list(colors_for_categorial(language)) == ['e', 'o']
    assert len(colors_for_categorial(language % word_class)) == 4
    with pytest.raises(TypeError):
        colors_for_categorial('NativeLanguage')


def test_find_cell_styles():
    "Test the colors argument of plots"
    cells = ('English', 'Other')
    styles = find_cell_styles(cells, ['r', 'b'])
    assert styles['English'].color == 'r'
    styles = find_cell_styles(cells, {'English': 'r', 'Other': Style('b', hatch='//')})
    assert styles['Other'].hatch == '//'
    styles = find_cell_styles(cells)
    assert set(styles) == set(cells)
    styles = find_cell_styles(None, 'g')
    assert styles[None].color == 'g'

    # partial cells
    cells = (('English', 'animal'), ('English', 'plant'), ('Other', 'animal'))
    styles = find_cell_styles(cells, {'English': 'r', 'Other': 'b'})
    assert styles['English', 'plant'].color == 'r'
    with pytest.raises(KeysMissing):
        find_cell_styles(cells, {'English': 'r'})
    with pytest.raises(ValueError):
        find_cell_styles(cells, ['r', 'b'])
    with pytest.raises(TypeError):
        find_cell_styles(cells, 3)


def test_style():
    style = Style('r', linestyle='--')
    assert style.line_args['color'] == 'r'
    assert style.line_args['linestyle'] == '--'
    assert style.patch_args['facecolor'] == 'r'
    assert Style._coerce(style) is style
    assert Style._coerce(None).color == (0, 0, 0)
    assert Style._coerce('k').color == 'k'
