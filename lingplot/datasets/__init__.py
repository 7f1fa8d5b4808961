# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Example data sets"""
from ._lexdec import LEXDEC_COLUMNS, get_lexdec, lexdec_info, load_lexdec
from ._simple import get_loftus_masson_1994, permute
