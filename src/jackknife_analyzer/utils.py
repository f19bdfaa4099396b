r"""
jackknife_analyzer.utils
========================
Critical values for confidence intervals built from jackknife errors.
"""

from __future__ import annotations

from scipy.stats import norm, t


def z_crit(confidence: float) -> float:
    r"""
    Two-sided normal critical value :math:`z_{1-\alpha/2}`.

    Parameters
    ----------
    confidence : float
        Confidence level in :math:`(0, 1)`.

    Returns
    -------
    float

    Examples
    --------
    >>> round(z_crit(0.95), 3)
    1.96
    """
    if not (0.0 < confidence < 1.0):
        raise ValueError("confidence must be in (0,1)")
    return float(norm.ppf(0.5 + confidence / 2.0))


def t_crit(confidence: float, df: int) -> float:
    r"""
    Two-sided Student-t critical value :math:`t_{1-\alpha/2,\,\nu}`.

    Parameters
    ----------
    confidence : float
        Confidence level in :math:`(0, 1)`.
    df : int
        Degrees of freedom :math:`\nu \ge 1`.

    Returns
    -------
    float
    """
    if not (0.0 < confidence < 1.0):
        raise ValueError("confidence must be in (0,1)")
    if df < 1:
        raise ValueError("df must be >= 1")
    return float(t.ppf(0.5 + confidence / 2.0, df))


def autocrit(confidence: float, n: int, method: str = "auto") -> tuple[float, str]:
    r"""
    Select a critical value for a sample of ``n`` independent units.

    Parameters
    ----------
    confidence : float
        Confidence level in :math:`(0, 1)`.
    n : int
        Number of independent units (jackknife bins).
    method : {"auto", "z", "t"}, default "auto"
        ``"auto"`` uses Student-t with ``n - 1`` degrees of freedom when
        :math:`n < 30`, otherwise z.

    Returns
    -------
    tuple of (float, str)
        ``(crit, kind)`` where ``kind`` is ``"z"`` or ``"t"``.
    """
    method = str(getattr(method, "value", method))
    if method not in ("auto", "z", "t"):
        raise ValueError(f"method must be one of 'auto', 'z', 't', got '{method}'")
    use_t = method == "t" or (method == "auto" and n < 30)
    if use_t:
        return t_crit(confidence, max(1, int(n) - 1)), "t"
    return z_crit(confidence), "z"


__all__ = ["z_crit", "t_crit", "autocrit"]
