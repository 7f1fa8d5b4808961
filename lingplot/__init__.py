# Author: Christian Brodbeck <christianbrodbeck@nyu.edu>
"""Plotting and project tools for psycholinguistics classes.

Data-objects (:class:`Var`, :class:`Factor`, :class:`Dataset`), figures for
the ``lexdec`` plotting tutorial, a wrapper for linear mixed-effects models,
and the directory conventions for student projects.
"""
from ._config import configure
from ._celltable import Celltable
from ._data_obj import Dataset, Var, Factor, Interaction, combine, cellname
from ._stats.lmm import LMMResult, lmm
from ._stats.stats import LinearFit
from ._utils import set_log_level
from .project import PROJECT_DIRECTORIES, ProjectCheck, assert_project, check_project, new_project
from .tutorial import TUTORIAL_STEPS, run_tutorial

from . import datasets
from . import load
from . import plot


__version__ = '0.1b1'
