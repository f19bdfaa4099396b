"""jackknife_analyzer package public API."""

from .analyzer import JackknifeAnalyzer, JackknifeEstimate
from .binning import jackknife_covariance, jackknife_error, jackknife_variance, reduce
from .context import CIMethod, JackknifeContext
from .errors import (
    InconsistentDatasetSizeError,
    InvalidBinCountError,
    JackknifeError,
    UnknownKeyError,
)
from .utils import autocrit, t_crit, z_crit

__all__ = [
    "JackknifeAnalyzer",
    "JackknifeEstimate",
    "JackknifeContext",
    "CIMethod",
    "JackknifeError",
    "InvalidBinCountError",
    "InconsistentDatasetSizeError",
    "UnknownKeyError",
    "reduce",
    "jackknife_variance",
    "jackknife_error",
    "jackknife_covariance",
    "z_crit",
    "t_crit",
    "autocrit",
]

__version__ = "0.1.0"
