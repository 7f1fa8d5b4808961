"""
Tools for loading data.

The following submodules are available:

txt:
    Load datasets from text files

"""
from .._io import txt

from .._io.txt import tsv
