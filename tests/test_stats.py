import math

import pytest

from bullean.neural.stats import (
    check_string_if_contains,
    dot,
    iparam,
    max_value,
    mean,
    min_value,
    round_half_up,
    sgn,
    sma,
    standard_deviation,
    standardize,
    total,
    variance,
)

VALUES = [3.0, -1.5, 4.25, 0.5, 2.0, 7.75]


def test_mean_simple():
    assert mean([1.0, 2.0, 3.0]) == 2.0


def test_mean_empty_raises():
    with pytest.raises(ValueError):
        mean([])


def test_variance_single_value_is_zero():
    assert variance([42.0]) == 0.0


def test_variance_constant_is_zero_and_shift_invariant():
    assert variance([5.0, 5.0, 5.0]) == 0.0
    shifted = [x + 10.0 for x in VALUES]
    assert variance(shifted) == pytest.approx(variance(VALUES))


def test_standard_deviation_is_root_of_variance():
    assert standard_deviation(VALUES) == pytest.approx(math.sqrt(variance(VALUES)))


def test_standardize_gives_zero_mean_unit_deviation():
    z = standardize(VALUES)
    assert len(z) == len(VALUES)
    assert mean(z) == pytest.approx(0.0, abs=1e-12)
    assert standard_deviation(z) == pytest.approx(1.0)


def test_standardize_constant_values_gives_zeros():
    assert standardize([4.0, 4.0]) == [0.0, 0.0]


def test_sgn():
    assert sgn(-3.5) == -1.0
    assert sgn(0.0) == 0.0
    assert sgn(2.0) == 1.0


def test_total_matches_mean_times_length():
    assert total(VALUES) == pytest.approx(mean(VALUES) * len(VALUES))
    assert total([]) == 0.0


def test_round_half_up():
    assert round_half_up(2.5) == 3.0
    assert round_half_up(-2.5) == -2.0
    assert round_half_up(1.2) == 1.0


def test_dot_with_ones_is_total_and_orthogonal_is_zero():
    assert dot(VALUES, [1.0] * len(VALUES)) == pytest.approx(total(VALUES))
    assert dot([1.0, 0.0], [0.0, 1.0]) == 0.0


def test_dot_short_second_vector_raises():
    with pytest.raises(ValueError):
        dot([1.0, 2.0], [1.0])


def test_iparam():
    assert iparam(0, 7) == 7
    assert iparam(3, 7) == 3


def test_check_string_if_contains():
    assert check_string_if_contains("BTCUSDT", "USDT") is True
    assert check_string_if_contains("BTCUSDT", "ETH") is False


def test_sma_period_one_is_identity():
    assert sma(1, VALUES) == pytest.approx(VALUES)


def test_sma_windows():
    result = sma(2, VALUES)
    assert len(result) == len(VALUES)
    assert result[0] == VALUES[0]
    assert result[-1] == pytest.approx(mean(VALUES[-2:]))


def test_sma_long_period_is_running_mean():
    result = sma(100, VALUES)
    assert result[-1] == pytest.approx(mean(VALUES))
    assert result[2] == pytest.approx(mean(VALUES[:3]))


def test_sma_invalid_period_raises():
    with pytest.raises(ValueError):
        sma(0, VALUES)


def test_max_and_min_value_first_occurrence():
    assert max_value([1.0, 5.0, 5.0, 2.0]) == (5.0, 1)
    assert min_value([3.0, -2.0, 4.0, -2.0]) == (-2.0, 1)


def test_max_and_min_value_empty():
    assert max_value([]) == (float(-(2**63)), 0)
    assert min_value([]) == (float(2**63 - 1), 0)