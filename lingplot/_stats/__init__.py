from .stats import DispersionSpec, LinearFit, confidence_interval, dispersion, linear_fit, lowess_fit, sem
from .lmm import LMMResult, lmm
