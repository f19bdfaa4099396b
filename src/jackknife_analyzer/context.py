r"""
jackknife_analyzer.context
==========================
Configuration shared by the analyzer and the estimates it produces.

:class:`JackknifeContext` fixes the bin size used for raw resampling and the
defaults for confidence intervals reported by
:class:`~jackknife_analyzer.analyzer.JackknifeEstimate`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class CIMethod(str, Enum):
    r"""
    Strategies for selecting confidence-interval critical values.

    Attributes
    ----------
    auto : str
        Choose Student-t when fewer than 30 bins are stored, otherwise z.
    z : str
        Always use the normal :math:`z` critical value.
    t : str
        Always use the Student-:math:`t` critical value with ``n_bins - 1``
        degrees of freedom.
    """

    auto = "auto"
    z = "z"
    t = "t"


@dataclass(slots=True)
class JackknifeContext:
    r"""
    Explicit configuration for a :class:`~jackknife_analyzer.analyzer.JackknifeAnalyzer`.

    Attributes
    ----------
    bin_size : int, default 1
        Number of consecutive raw samples collapsed into one bin by
        :meth:`~jackknife_analyzer.analyzer.JackknifeAnalyzer.resample`.
        ``1`` means plain leave-one-sample-out.
    confidence : float, default 0.95
        Default confidence level in :math:`(0, 1)` for reported intervals.
    ci_method : {"auto", "z", "t"}, default "auto"
        Default critical-value strategy for reported intervals.

    Examples
    --------
    >>> ctx = JackknifeContext(bin_size=10)
    >>> ctx.with_overrides(confidence=0.68).bin_size
    10
    """

    bin_size: int = 1
    confidence: float = 0.95
    ci_method: CIMethod = "auto"

    def with_overrides(self, **changes) -> "JackknifeContext":
        r"""
        Return a copy with selected fields replaced.

        Parameters
        ----------
        **changes :
            Field overrides passed to :func:`dataclasses.replace`.

        Returns
        -------
        JackknifeContext
        """
        return replace(self, **changes)

    @property
    def alpha(self) -> float:
        r"""Tail probability :math:`\alpha = 1 - \text{confidence}`."""
        return 1.0 - self.confidence

    def __post_init__(self) -> None:
        r"""
        Validate field ranges.

        Raises
        ------
        ValueError
            If ``bin_size`` is not a positive integer, ``confidence`` is outside
            :math:`(0, 1)`, or ``ci_method`` is unknown.
        """
        if isinstance(self.bin_size, bool) or int(self.bin_size) != self.bin_size:
            raise ValueError("bin_size must be a positive integer")
        self.bin_size = int(self.bin_size)
        if self.bin_size < 1:
            raise ValueError("bin_size must be a positive integer")
        if not (0.0 < self.confidence < 1.0):
            raise ValueError("confidence must be in (0,1)")
        try:
            self.ci_method = CIMethod(self.ci_method)
        except ValueError:
            raise ValueError(f"ci_method must be one of 'auto', 'z', 't', got '{self.ci_method}'") from None


__all__ = ["CIMethod", "JackknifeContext"]
