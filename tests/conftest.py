import numpy as np
import pytest

from jackknife_analyzer import JackknifeAnalyzer


@pytest.fixture(autouse=True)
def _stable_seed():
    np.random.seed(42)


@pytest.fixture
def sample_data():
    """Fixture providing independent normal samples"""
    rng = np.random.default_rng(42)
    return rng.normal(5.0, 2.0, 1000)


@pytest.fixture
def correlated_data():
    """AR(1) series with strong autocorrelation"""
    rng = np.random.default_rng(7)
    x = np.empty(2000)
    x[0] = 0.0
    for i in range(1, x.size):
        x[i] = 0.9 * x[i - 1] + rng.normal()
    return x + 10.0


@pytest.fixture
def analyzer():
    """Provide an empty analyzer with bin size 1."""
    return JackknifeAnalyzer()


@pytest.fixture
def seeded_analyzer():
    """Analyzer holding two independent 100-sample datasets 'A' and 'B'."""
    rng = np.random.default_rng(123)
    jk = JackknifeAnalyzer()
    jk.resample("A", rng.normal(1.0, 0.5, 100))
    jk.resample("B", rng.normal(3.0, 1.0, 100))
    return jk
