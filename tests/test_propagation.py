import numpy as np
import pytest

from jackknife_analyzer import JackknifeAnalyzer, UnknownKeyError
from jackknife_analyzer.binning import jackknife_error, reduce


class TestAddFunction:
    """Test sequence-based derivation"""

    def test_identity_copies_variable(self, seeded_analyzer):
        seeded_analyzer.add_function("A2", lambda v: v[0], ["A"])
        assert seeded_analyzer.mu("A2") == seeded_analyzer.mu("A")
        np.testing.assert_array_equal(seeded_analyzer.samples("A2"), seeded_analyzer.samples("A"))
        assert seeded_analyzer.sigma("A2") == seeded_analyzer.sigma("A")

    def test_sum_matches_literal_sum_series(self):
        rng = np.random.default_rng(5)
        a = rng.normal(0.0, 1.0, 60)
        b = rng.normal(2.0, 3.0, 60)
        jk = JackknifeAnalyzer(bin_size=3)
        jk.resample("A", a)
        jk.resample("B", b)
        jk.add_function("S", sum, ["A", "B"])

        mean, reduced = reduce(a + b, bin_size=3)
        assert jk.mu("S") == pytest.approx(jk.mu("A") + jk.mu("B"))
        np.testing.assert_allclose(jk.samples("S"), reduced)
        assert jk.sigma("S") == pytest.approx(jackknife_error(reduced, mean))

    def test_arguments_in_given_order(self, seeded_analyzer):
        seeded_analyzer.add_function("A-B", lambda v: v[0] - v[1], ["A", "B"])
        seeded_analyzer.add_function("B-A", lambda v: v[0] - v[1], ["B", "A"])
        assert seeded_analyzer.mu("A-B") == pytest.approx(-seeded_analyzer.mu("B-A"))

    def test_function_receives_floats(self, seeded_analyzer):
        seen = []

        def record(values):
            seen.append(values)
            return values[0]

        seeded_analyzer.add_function("rec", record, ("A", "B"))
        assert len(seen) == 1 + seeded_analyzer.n_bins
        assert all(len(v) == 2 and all(isinstance(x, float) for x in v) for v in seen)
        assert seen[0] == [seeded_analyzer.mu("A"), seeded_analyzer.mu("B")]

    def test_nonlinear_mean_is_function_of_means(self, seeded_analyzer):
        seeded_analyzer.add_function("ratio", lambda v: v[0] / v[1], ["A", "B"])
        assert seeded_analyzer.mu("ratio") == pytest.approx(seeded_analyzer.mu("A") / seeded_analyzer.mu("B"))
        expected = seeded_analyzer.samples("A") / seeded_analyzer.samples("B")
        np.testing.assert_allclose(seeded_analyzer.samples("ratio"), expected)

    def test_correlation_cancels_in_difference(self, seeded_analyzer):
        seeded_analyzer.add_function("A+B", sum, ["A", "B"])
        seeded_analyzer.add_function("zero", lambda v: v[0] - v[1] - v[2], ["A+B", "A", "B"])
        assert seeded_analyzer.mu("zero") == pytest.approx(0.0, abs=1e-12)
        assert seeded_analyzer.sigma("zero") == pytest.approx(0.0, abs=1e-12)

    def test_derived_from_derived(self, seeded_analyzer):
        seeded_analyzer.add_function("sq", lambda v: v[0] ** 2, ["A"])
        seeded_analyzer.add_function("root", lambda v: np.sqrt(v[0]), ["sq"])
        np.testing.assert_allclose(seeded_analyzer.samples("root"), np.abs(seeded_analyzer.samples("A")))

    def test_repeated_is_noop(self, seeded_analyzer):
        seeded_analyzer.add_function("F", lambda v: v[0] * 2, ["A"])
        before = seeded_analyzer.samples("F")
        seeded_analyzer.add_function("F", lambda v: v[0] * 3, ["A"])
        np.testing.assert_array_equal(seeded_analyzer.samples("F"), before)
        assert seeded_analyzer.mu("F") == pytest.approx(2 * seeded_analyzer.mu("A"))

    def test_existing_target_skips_argument_check(self, seeded_analyzer):
        seeded_analyzer.add_function("A", lambda v: v[0], ["missing"])
        assert seeded_analyzer.n_bins == 100

    def test_unknown_argument(self, seeded_analyzer):
        calls = []
        with pytest.raises(UnknownKeyError) as exc:
            seeded_analyzer.add_function("F", lambda v: calls.append(v) or 0.0, ["A", "missing"])
        assert exc.value.key == "missing"
        assert calls == []
        assert "F" not in seeded_analyzer

    def test_unknown_argument_on_empty_store(self, analyzer):
        with pytest.raises(UnknownKeyError):
            analyzer.add_function("F", lambda v: v[0], ["X"])

    def test_no_arguments(self, seeded_analyzer):
        with pytest.raises(ValueError, match="at least one argument"):
            seeded_analyzer.add_function("F", lambda v: 1.0, [])

    @pytest.mark.parametrize("result", [[1.0, 2.0], "1.0", None, 1 + 2j])
    def test_non_scalar_result(self, seeded_analyzer, result):
        with pytest.raises(TypeError, match="real scalar"):
            seeded_analyzer.add_function("F", lambda v: result, ["A"])
        assert "F" not in seeded_analyzer

    def test_numpy_scalar_result(self, seeded_analyzer):
        seeded_analyzer.add_function("exp", lambda v: np.exp(v[0]), ["A"])
        assert isinstance(seeded_analyzer.mu("exp"), float)

    def test_function_error_propagates(self, seeded_analyzer):
        def failing(values):
            raise ZeroDivisionError("boom")

        with pytest.raises(ZeroDivisionError, match="boom"):
            seeded_analyzer.add_function("F", failing, ["A"])
        assert "F" not in seeded_analyzer


class TestAddFunctionOf:
    """Test the positional form"""

    def test_two_arguments(self, seeded_analyzer):
        seeded_analyzer.add_function_of("sum", lambda a, b: a + b, "A", "B")
        seeded_analyzer.add_function("sum_seq", sum, ["A", "B"])
        assert seeded_analyzer.mu("sum") == seeded_analyzer.mu("sum_seq")
        np.testing.assert_array_equal(seeded_analyzer.samples("sum"), seeded_analyzer.samples("sum_seq"))

    def test_three_and_four_arguments(self, seeded_analyzer):
        seeded_analyzer.add_function_of("C", lambda a, b, c: a * b - c, "A", "B", "A")
        seeded_analyzer.add_function_of("D", lambda a, b, c, d: a + b + c + d, "A", "B", "C", "A")
        expected = 2 * seeded_analyzer.mu("A") + seeded_analyzer.mu("B") + seeded_analyzer.mu("C")
        assert seeded_analyzer.mu("D") == pytest.approx(expected)

    def test_unknown_argument(self, seeded_analyzer):
        with pytest.raises(UnknownKeyError):
            seeded_analyzer.add_function_of("F", lambda a, b: a + b, "A", "nope")

    def test_repeated_is_noop(self, seeded_analyzer):
        seeded_analyzer.add_function_of("F", lambda a: a, "A")
        seeded_analyzer.add_function_of("F", lambda b: b, "B")
        assert seeded_analyzer.mu("F") == seeded_analyzer.mu("A")
