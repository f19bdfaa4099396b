r"""

jackknife_analyzer.analyzer
===========================

Jackknife dataset store and error propagation through derived quantities.

This module provides:

* :class:`~jackknife_analyzer.analyzer.JackknifeAnalyzer` – the dataset store.
* :class:`~jackknife_analyzer.analyzer.JackknifeEstimate` – a mean/error pair with
  confidence intervals.

Workflow
--------

Seed the analyzer with raw samples (:meth:`JackknifeAnalyzer.resample`) or with
samples that are already reduced (:meth:`JackknifeAnalyzer.add_resampled`).
Every stored variable has the same number of bins. Derived variables are then
computed with :meth:`JackknifeAnalyzer.add_function`, which evaluates the
function on the argument means and, bin by bin, on the argument reduced samples.
Because bin :math:`b` of every argument is used together, correlations between
the arguments carry over into the error of the derived variable.

>>> jk = JackknifeAnalyzer(bin_size=1)
>>> jk.resample("x", [1.0, 2.0, 3.0, 4.0])
>>> jk.resample("y", [2.0, 2.5, 2.0, 3.5])
>>> jk.add_function_of("ratio", lambda x, y: x / y, "x", "y")
>>> found, mu, sigma = jk.jackknife("ratio")

Thread safety
-------------

Insertions perform an existence check, a bin-count check and a write. Callers
that mutate one analyzer from several threads must hold a lock around it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, Iterable, Optional, Sequence, TypeVar, Union

import numpy as np

from .binning import as_samples, bin_count, jackknife_covariance, jackknife_error, reduce
from .context import CIMethod, JackknifeContext
from .errors import InconsistentDatasetSizeError, InvalidBinCountError, UnknownKeyError
from .utils import autocrit

logger = logging.getLogger(__name__)  # pragma: no cover
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


K = TypeVar("K", bound=Hashable)


def _as_scalar(value: Any, key: Any) -> float:
    r"""
    Coerce the value of a derived variable to a real scalar.

    Raises
    ------
    TypeError
        If ``value`` is not a single real number.
    """
    arr = np.asarray(value)
    if arr.ndim != 0 or not np.issubdtype(arr.dtype, np.number) or np.iscomplexobj(arr):
        raise TypeError(f"function for {key!r} must return a real scalar, got {type(value).__name__}")
    return float(arr)


@dataclass(frozen=True)
class JackknifeEstimate:
    r"""
    Mean and jackknife error of one stored variable.

    Attributes
    ----------
    key : hashable
        Key of the variable in the analyzer.
    mean : float
        Stored point estimate :math:`\bar x`.
    sigma : float
        Jackknife standard error.
    n_bins : int
        Number of jackknife bins behind ``sigma``.
    confidence : float, default 0.95
        Default confidence level for :meth:`ci`.
    ci_method : {"auto", "z", "t"}, default "auto"
        Default critical-value strategy for :meth:`ci`.
    """

    key: Any
    mean: float
    sigma: float
    n_bins: int
    confidence: float = 0.95
    ci_method: str = "auto"

    def ci(self, confidence: Optional[float] = None, method: Optional[str] = None) -> tuple[float, float]:
        r"""
        Confidence interval :math:`\bar x \pm c\,\sigma`.

        Parameters
        ----------
        confidence : float, optional
            Overrides :attr:`confidence`.
        method : {"auto", "z", "t"}, optional
            Overrides :attr:`ci_method`. Student-t uses ``n_bins - 1`` degrees
            of freedom.

        Returns
        -------
        tuple of float
            ``(low, high)``.
        """
        confidence = self.confidence if confidence is None else confidence
        method = self.ci_method if method is None else method
        crit, _ = autocrit(confidence, self.n_bins, method)
        return self.mean - crit * self.sigma, self.mean + crit * self.sigma

    def result_to_string(self, confidence: Optional[float] = None, method: Optional[str] = None) -> str:
        r"""
        Human-readable one-variable summary.

        Returns
        -------
        str
            Multiline text with the mean, the error and the confidence interval.
        """
        confidence = self.confidence if confidence is None else confidence
        method = self.ci_method if method is None else method
        crit, kind = autocrit(confidence, self.n_bins, method)
        lo, hi = self.mean - crit * self.sigma, self.mean + crit * self.sigma
        lines = [
            f"Jackknife estimate for {self.key!r}:",
            f"  Bins: {self.n_bins}",
            f"  Mean: {self.mean:.5f}   (sigma: {self.sigma:.5f})",
            f"  {int(round(confidence * 100))}% {kind}-CI: [{lo:.5f}, {hi:.5f}]",
        ]
        return "\n".join(lines)


class JackknifeAnalyzer(Generic[K]):
    r"""
    Store of jackknife-resampled variables sharing one bin structure.

    Parameters
    ----------
    bin_size : int or JackknifeContext, default 1
        Number of consecutive raw samples left out together by :meth:`resample`,
        or a full :class:`~jackknife_analyzer.context.JackknifeContext`.

    Notes
    -----
    The number of bins :attr:`n_bins` is fixed by the first stored dataset and
    never changes afterwards, not even when every variable has been removed.
    Every insertion is a no-op for a key that is already stored, so scripts that
    derive quantities can safely be re-run.

    Examples
    --------
    >>> jk = JackknifeAnalyzer()
    >>> jk.resample("X", [1, 2, 3, 4, 5, 6])
    >>> jk.n_bins, jk.mu("X")
    (6, 3.5)
    """

    def __init__(self, bin_size: Union[int, JackknifeContext] = 1):
        if isinstance(bin_size, JackknifeContext):
            self.ctx = bin_size
        else:
            self.ctx = JackknifeContext(bin_size=bin_size)
        self._n_bins = 0
        self._means: dict[K, float] = {}
        self._reduced: dict[K, np.ndarray] = {}

    @classmethod
    def from_samples(cls, key: K, raw_samples: Iterable[float], bin_size: int = 1) -> "JackknifeAnalyzer[K]":
        r"""
        Create an analyzer and :meth:`resample` one dataset into it.

        Parameters
        ----------
        key : hashable
            Key for the dataset.
        raw_samples : array_like
            Raw samples.
        bin_size : int, default 1
            See :class:`JackknifeAnalyzer`.

        Returns
        -------
        JackknifeAnalyzer
        """
        jk = cls(bin_size)
        jk.resample(key, raw_samples)
        return jk

    @property
    def bin_size(self) -> int:
        return self.ctx.bin_size

    @property
    def n_bins(self) -> int:
        """Number of bins per variable, ``0`` until the first dataset is stored."""
        return self._n_bins

    def __contains__(self, key: object) -> bool:
        return key in self._means

    def __len__(self) -> int:
        return len(self._means)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bin_size={self.bin_size}, n_bins={self._n_bins}, variables={len(self)})"

    # ------------------------------------------------------------------ store

    def _check_bins(self, n_bins: int) -> None:
        if n_bins < 2:
            raise InvalidBinCountError(n_bins)
        if self._n_bins and n_bins != self._n_bins:
            raise InconsistentDatasetSizeError(n_bins, self._n_bins)

    def _store(self, key: K, mean: float, reduced: np.ndarray) -> None:
        if not self._n_bins:
            self._n_bins = int(reduced.size)
            logger.info(f"Number of jackknife bins fixed to {self._n_bins}")
        self._means[key] = mean
        self._reduced[key] = reduced
        logger.debug(f"Stored {key!r}: mean={mean!r}, {reduced.size} reduced samples")

    def _require(self, key: K) -> None:
        if key not in self._means:
            raise UnknownKeyError(key)

    def resample(self, key: K, raw_samples: Iterable[float]) -> None:
        r"""
        Reduce raw samples and store them with their mean under ``key``.

        Parameters
        ----------
        key : hashable
            Key for the new variable. If it is already stored, nothing happens.
        raw_samples : array_like
            Raw samples; ``len(raw_samples) // bin_size`` bins are formed.

        Raises
        ------
        InvalidBinCountError
            If fewer than two bins can be formed.
        InconsistentDatasetSizeError
            If the bin count differs from :attr:`n_bins`.
        """
        if key in self._means:
            logger.debug(f"Key {key!r} already stored, skipping resample")
            return
        arr = as_samples(raw_samples)
        self._check_bins(bin_count(arr.size, self.bin_size))
        mean, reduced = reduce(arr, self.bin_size)
        self._store(key, mean, reduced)

    def add_resampled(self, key: K, reduced_samples: Iterable[float], mean: float) -> None:
        r"""
        Store already-reduced jackknife samples and their mean under ``key``.

        The mean must be supplied because for a variable that depends nonlinearly
        on other quantities it is not the average of the reduced samples.

        Parameters
        ----------
        key : hashable
            Key for the new variable. If it is already stored, nothing happens.
        reduced_samples : array_like
            One reduced sample per bin.
        mean : float
            Point estimate stored verbatim.

        Raises
        ------
        InvalidBinCountError
            If fewer than two reduced samples are given.
        InconsistentDatasetSizeError
            If the number of reduced samples differs from :attr:`n_bins`.
        """
        if key in self._means:
            logger.debug(f"Key {key!r} already stored, skipping add_resampled")
            return
        reduced = as_samples(reduced_samples)
        self._check_bins(reduced.size)
        self._store(key, _as_scalar(mean, key), reduced)

    def add_function(
        self,
        key: K,
        function: Callable[[Sequence[float]], float],
        arg_keys: Sequence[K],
    ) -> None:
        r"""
        Store the variable ``function(*stored variables)`` under ``key``.

        Parameters
        ----------
        key : hashable
            Key for the derived variable. If it is already stored, nothing happens.
        function : callable
            Called as ``function(values)`` with a list of floats ordered like
            ``arg_keys``; must return a real scalar and have no side effects.
        arg_keys : sequence of hashable
            Keys of the stored arguments.

        Raises
        ------
        UnknownKeyError
            If any key in ``arg_keys`` is not stored.
        ValueError
            If ``arg_keys`` is empty.
        TypeError
            If ``function`` does not return a real scalar.

        Notes
        -----
        The mean is :math:`F(\bar x_1, \dots, \bar x_k)` and reduced sample
        :math:`b` is :math:`F(\tilde x_{1,b}, \dots, \tilde x_{k,b})`.
        """
        if key in self._means:
            logger.debug(f"Key {key!r} already stored, skipping add_function")
            return
        arg_keys = list(arg_keys)
        if not arg_keys:
            raise ValueError(f"add_function for {key!r} requires at least one argument key")
        for arg in arg_keys:
            self._require(arg)

        f_mean = _as_scalar(function([self._means[arg] for arg in arg_keys]), key)
        columns = np.stack([self._reduced[arg] for arg in arg_keys], axis=1)
        f_reduced = np.array([_as_scalar(function(row), key) for row in columns.tolist()], dtype=float)
        self._store(key, f_mean, f_reduced)

    def add_function_of(self, key: K, function: Callable[..., float], *arg_keys: K) -> None:
        r"""
        Positional form of :meth:`add_function`.

        ``function`` receives one positional argument per key, e.g.
        ``add_function_of("sum", lambda a, b: a + b, "A", "B")``.
        """
        self.add_function(key, lambda values: function(*values), arg_keys)

    def remove(self, key: K) -> None:
        """Remove ``key`` if stored. :attr:`n_bins` is left unchanged."""
        if self._means.pop(key, None) is not None:
            del self._reduced[key]
            logger.debug(f"Removed {key!r}")

    # ---------------------------------------------------------------- queries

    def keys(self) -> list[K]:
        """Keys of all stored variables; callers must not rely on the order."""
        return list(self._means)

    def mu(self, key: K) -> float:
        """Stored mean of ``key``. Raises :class:`UnknownKeyError` if absent."""
        self._require(key)
        return self._means[key]

    def sigma(self, key: K) -> float:
        """Jackknife standard error of ``key``. Raises :class:`UnknownKeyError` if absent."""
        self._require(key)
        return jackknife_error(self._reduced[key], self._means[key])

    def jackknife(self, key: K) -> tuple[bool, float, float]:
        r"""
        Probe ``key`` without raising.

        Returns
        -------
        tuple of (bool, float, float)
            ``(True, mean, sigma)`` if ``key`` is stored, else
            ``(False, nan, nan)``.
        """
        if key not in self._means:
            return False, float("nan"), float("nan")
        return True, self._means[key], jackknife_error(self._reduced[key], self._means[key])

    def samples(self, key: K) -> np.ndarray:
        """Copy of the reduced samples of ``key``. Raises :class:`UnknownKeyError` if absent."""
        self._require(key)
        return self._reduced[key].copy()

    def covariance(self, key_a: K, key_b: K) -> float:
        r"""
        Jackknife covariance of two stored variables.

        ``covariance(k, k)`` equals ``sigma(k) ** 2``.

        Raises
        ------
        UnknownKeyError
            If either key is absent.
        """
        self._require(key_a)
        self._require(key_b)
        return jackknife_covariance(
            self._reduced[key_a], self._means[key_a], self._reduced[key_b], self._means[key_b]
        )

    def correlation(self, key_a: K, key_b: K) -> float:
        """Jackknife correlation coefficient; ``nan`` if either error is zero."""
        cov = self.covariance(key_a, key_b)
        denom = self.sigma(key_a) * self.sigma(key_b)
        if denom == 0.0:
            return float("nan")
        return cov / denom

    def estimate(self, key: K) -> JackknifeEstimate:
        """:class:`JackknifeEstimate` of ``key`` using the analyzer's CI defaults."""
        self._require(key)
        return JackknifeEstimate(
            key=key,
            mean=self._means[key],
            sigma=jackknife_error(self._reduced[key], self._means[key]),
            n_bins=self._n_bins,
            confidence=self.ctx.confidence,
            ci_method=CIMethod(self.ctx.ci_method).value,
        )

    def summary(self) -> dict[K, JackknifeEstimate]:
        """Estimates of every stored variable keyed like :meth:`keys`."""
        return {key: self.estimate(key) for key in self._means}


__all__ = ["JackknifeAnalyzer", "JackknifeEstimate"]
