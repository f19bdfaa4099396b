from __future__ import annotations

import numpy as np

from jackknife_analyzer import JackknifeAnalyzer


def ar1_series(n: int, phi: float, mean: float, rng: np.random.Generator) -> np.ndarray:
    """Autocorrelated Markov-chain-like samples around ``mean``."""
    x = np.empty(n)
    x[0] = rng.normal()
    for i in range(1, n):
        x[i] = phi * x[i - 1] + rng.normal()
    return x + mean


def main():
    rng = np.random.default_rng(2024)
    n = 20_000
    noise = ar1_series(n, 0.95, 0.0, rng)
    energy = 2.0 + 0.5 * noise + 0.1 * rng.normal(size=n)
    energy_sq = energy**2

    print("Bin size dependence of the error of <E>:")
    for bin_size in (1, 10, 100, 1000):
        jk = JackknifeAnalyzer.from_samples("E", energy, bin_size=bin_size)
        print(f"  bin_size={bin_size:5d}  bins={jk.n_bins:6d}  sigma={jk.sigma('E'):.5f}")

    jk = JackknifeAnalyzer(bin_size=200)
    jk.resample("E", energy)
    jk.resample("E2", energy_sq)

    # specific heat-like fluctuation <E^2> - <E>^2
    jk.add_function_of("C", lambda e, e2: e2 - e * e, "E", "E2")
    jk.add_function("ratio", lambda v: v[1] / v[0], ["E", "E2"])

    print()
    for estimate in jk.summary().values():
        print(estimate.result_to_string())
    print()
    print(f"corr(E, E2) = {jk.correlation('E', 'E2'):.4f}")


if __name__ == "__main__":
    main()
