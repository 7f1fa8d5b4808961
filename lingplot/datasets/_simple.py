"""Small fixed datasets for examples and tests"""
from itertools import product

from .._data_obj import Dataset, Factor, Var


def permute(variables):
    """Fully crossed design with one case per combination of values

    Parameters
    ----------
    variables : sequence of (str, sequence of str)
        ``(name, values)`` for each variable; the last variable changes
        fastest.

    Examples
    --------
    >>> ds = permute((('Class', ('animal', 'plant')), ('Language', ('English', 'Other'))))
    >>> ds['Language'].as_labels()
    ['English', 'Other', 'English', 'Other']
    """
    names = [name for name, _ in variables]
    return Dataset.from_caselist(names, list(product(*(values for _, values in variables))))


def get_loftus_masson_1994():
    """Number of words recalled at three exposure durations (within subjects)

    Data from Loftus & Masson (1994), Table 2, with 10 subjects.
    """
    n_recalled = [
        10, 6, 11, 22, 16, 15, 1, 12, 9, 8,  # 1 s
        13, 8, 14, 23, 18, 17, 1, 15, 12, 9,  # 2 s
        13, 8, 14, 25, 20, 17, 4, 17, 12, 12,  # 5 s
    ]
    ds = Dataset(name='Loftus & Masson 1994')
    ds['subject'] = Factor(range(1, 11), tile=3, random=True)
    ds['exposure'] = Var([1, 2, 5], repeat=10)
    ds['n_recalled'] = Var(n_recalled)
    return ds
