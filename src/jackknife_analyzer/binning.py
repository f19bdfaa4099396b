r"""
jackknife_analyzer.binning
==========================
Binning, leave-one-bin-out reduction and the jackknife error estimators.

For raw samples :math:`x_0, \dots, x_{M-1}` and bin size :math:`S`, the number
of bins is :math:`N = \lfloor M / S \rfloor` and the reduced sample of bin
:math:`b` is the mean of all samples outside that bin,

.. math::

   \tilde x_b = \frac{\sum_i x_i - \sum_{i=bS}^{(b+1)S-1} x_i}{M - S}.

The jackknife standard error of a variable with stored mean :math:`\bar x` is

.. math::

   \sigma = \sqrt{\frac{N-1}{N} \sum_{b=0}^{N-1} (\tilde x_b - \bar x)^2}.
"""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


def as_samples(x) -> np.ndarray:
    r"""
    Copy ``x`` into a one-dimensional float array.

    Parameters
    ----------
    x : array_like
        Sequence of real numbers.

    Returns
    -------
    ndarray of float
        A fresh array that does not alias ``x``.

    Raises
    ------
    ValueError
        If ``x`` is not one-dimensional.
    """
    arr = np.array(x, dtype=float, copy=True)
    if arr.ndim != 1:
        raise ValueError(f"samples must be one-dimensional, got shape {arr.shape}")
    return arr


def bin_count(n_samples: int, bin_size: int = 1) -> int:
    r"""
    Number of complete bins of ``bin_size`` samples in ``n_samples`` samples.

    Examples
    --------
    >>> bin_count(10, 3)
    3
    """
    if bin_size < 1:
        raise ValueError("bin_size must be a positive integer")
    return int(n_samples) // int(bin_size)


def reduce(x, bin_size: int = 1) -> tuple[float, np.ndarray]:
    r"""
    Jackknife-reduce raw samples.

    Parameters
    ----------
    x : array_like
        Raw samples :math:`x_0, \dots, x_{M-1}`.
    bin_size : int, default 1
        Number of consecutive samples left out together.

    Returns
    -------
    tuple of (float, ndarray)
        ``(mean, reduced)`` where ``mean`` is the arithmetic mean of all samples
        and ``reduced`` holds one leave-one-bin-out mean per bin.

    Raises
    ------
    ValueError
        If fewer than two bins can be formed.

    Notes
    -----
    Samples beyond the last complete bin count towards the total and the mean
    but are never left out.

    Examples
    --------
    >>> mean, reduced = reduce([1, 2, 3, 4, 5, 6])
    >>> mean
    3.5
    >>> float(reduced[0]), float(reduced[5])
    (4.0, 3.0)
    """
    arr = as_samples(x)
    n_bins = bin_count(arr.size, bin_size)
    if n_bins < 2:
        raise ValueError(f"need at least 2 bins, got {n_bins}")

    used = n_bins * bin_size
    if used != arr.size:
        logger.warning(
            f"{arr.size} samples are not a multiple of bin_size={bin_size}; "
            f"the last {arr.size - used} samples are never left out"
        )

    total = float(np.sum(arr))
    bin_sums = arr[:used].reshape(n_bins, bin_size).sum(axis=1)
    reduced = (total - bin_sums) / (arr.size - bin_size)
    return total / arr.size, reduced


def jackknife_variance(reduced: np.ndarray, mean: float) -> float:
    r"""
    Jackknife variance :math:`\frac{N-1}{N}\sum_b (\tilde x_b - \bar x)^2`.

    The spread is measured around the supplied ``mean``, which for nonlinear
    derived variables differs from the average of ``reduced``.
    """
    return jackknife_covariance(reduced, mean, reduced, mean)


def jackknife_error(reduced: np.ndarray, mean: float) -> float:
    r"""Jackknife standard error, the square root of :func:`jackknife_variance`."""
    return float(np.sqrt(jackknife_variance(reduced, mean)))


def jackknife_covariance(reduced_a: np.ndarray, mean_a: float, reduced_b: np.ndarray, mean_b: float) -> float:
    r"""
    Jackknife covariance of two variables sharing the same bin structure.

    .. math::

       \operatorname{cov}(a, b) = \frac{N-1}{N} \sum_b (\tilde a_b - \bar a)(\tilde b_b - \bar b)

    Parameters
    ----------
    reduced_a, reduced_b : ndarray
        Reduced samples of equal length :math:`N`.
    mean_a, mean_b : float
        Stored means of the two variables.

    Returns
    -------
    float
    """
    a = np.asarray(reduced_a, dtype=float)
    b = np.asarray(reduced_b, dtype=float)
    if a.shape != b.shape:
        raise ValueError(f"reduced samples differ in shape: {a.shape} vs {b.shape}")
    n = a.size
    if n < 2:
        raise ValueError(f"need at least 2 bins, got {n}")
    return float((n - 1) / n * np.sum((a - mean_a) * (b - mean_b)))


__all__ = [
    "as_samples",
    "bin_count",
    "reduce",
    "jackknife_variance",
    "jackknife_error",
    "jackknife_covariance",
]
