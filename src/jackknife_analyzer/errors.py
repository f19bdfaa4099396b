r"""
jackknife_analyzer.errors
=========================
Exceptions raised by :class:`~jackknife_analyzer.analyzer.JackknifeAnalyzer`.

All errors are deterministic consequences of caller input and are raised at the
offending call, before the store is modified.
"""

from __future__ import annotations


class JackknifeError(Exception):
    """Base class for all analyzer errors."""


class InvalidBinCountError(JackknifeError, ValueError):
    r"""
    A dataset would yield fewer than two jackknife bins.

    Parameters
    ----------
    n_bins : int
        Bin count derived from the offending dataset.
    """

    def __init__(self, n_bins: int):
        self.n_bins = n_bins
        super().__init__(f"dataset yields {n_bins} bin(s), at least 2 are required")


class InconsistentDatasetSizeError(JackknifeError, ValueError):
    r"""
    A dataset's bin count disagrees with the analyzer's fixed bin count.

    Parameters
    ----------
    n_bins : int
        Bin count derived from the offending dataset.
    expected : int
        Bin count already fixed by the first stored dataset.
    """

    def __init__(self, n_bins: int, expected: int):
        self.n_bins = n_bins
        self.expected = expected
        super().__init__(f"dataset yields {n_bins} bins, but the analyzer holds {expected} bins per variable")


class UnknownKeyError(JackknifeError, KeyError):
    """A query or derivation referenced a key that is not stored."""

    def __init__(self, key):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"unknown key: {self.key!r}"


__all__ = [
    "JackknifeError",
    "InvalidBinCountError",
    "InconsistentDatasetSizeError",
    "UnknownKeyError",
]
