"""Plotting for data-objects"""
# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>

from ._base import Legend
from ._lmm import Coefficients
from ._styles import Style, colors_for_categorial, colors_for_oneway, colors_for_twoway, find_cell_styles
from ._uv import Barplot, Boxplot, Histogram, Scatter, Violin
