import math

import pytest

from bullean.neural.activation import (
    Linear,
    ReLU,
    Sigmoid,
    Tanh,
    arg_max,
    get_activation,
    logistic,
    maximum,
    minimum,
    normalize,
    output_activation,
    softmax,
)
from bullean.neural.core import ActivationType, Mode

H = 1e-6


def _numeric_derivative(fn, x):
    return (fn(x + H) - fn(x - H)) / (2 * H)


def test_output_activation_by_mode():
    assert output_activation(Mode.MULTI_CLASS) == ActivationType.SOFTMAX
    assert output_activation(Mode.REGRESSION) == ActivationType.LINEAR
    assert output_activation(Mode.BINARY) == ActivationType.SIGMOID
    assert output_activation(Mode.MULTI_LABEL) == ActivationType.SIGMOID
    assert output_activation(Mode.DEFAULT) == ActivationType.NONE


@pytest.mark.parametrize(
    "act, cls",
    [
        (ActivationType.SIGMOID, Sigmoid),
        (ActivationType.TANH, Tanh),
        (ActivationType.RELU, ReLU),
        (ActivationType.LINEAR, Linear),
        (ActivationType.SOFTMAX, Linear),
        (ActivationType.NONE, Linear),
    ],
)
def test_get_activation_behaves_like_class(act, cls):
    impl = get_activation(act)
    for x in (-1.3, 0.4, 2.2):
        assert impl.f(x) == cls().f(x)
        assert impl.df(impl.f(x)) == cls().df(cls().f(x))


def test_linear_is_identity_with_constant_slope():
    lin = Linear()
    assert lin.f(-7.25) == -7.25
    assert lin.df(3.0) == lin.df(-3.0)


def test_relu():
    relu = ReLU()
    assert relu.f(2.5) == 2.5
    assert relu.f(-2.5) == 0.0
    assert relu.df(relu.f(2.5)) == Linear().df(2.5)
    assert relu.df(relu.f(-2.5)) == relu.f(-1.0)


@pytest.mark.parametrize("x", [-2.0, -0.3, 0.0, 0.7, 3.1])
def test_sigmoid_derivative_matches_numeric(x):
    sig = Sigmoid()
    assert sig.df(sig.f(x)) == pytest.approx(_numeric_derivative(sig.f, x), rel=1e-5)
    assert sig.f(x) + sig.f(-x) == pytest.approx(1.0)


@pytest.mark.parametrize("x", [-2.0, -0.3, 0.7, 3.1])
def test_tanh_derivative_and_symmetry(x):
    tanh = Tanh()
    assert tanh.df(tanh.f(x)) == pytest.approx(_numeric_derivative(tanh.f, x), rel=1e-5)
    assert tanh.f(-x) == pytest.approx(-tanh.f(x))
    assert tanh.f(x) == pytest.approx(math.tanh(x))


def test_logistic_extremes_do_not_overflow():
    low = logistic(-1000.0, 1.0)
    high = logistic(1000.0, 1.0)
    assert low == pytest.approx(1.0 - high)
    assert logistic(2.0, 0.5) == pytest.approx(logistic(1.0, 1.0))


def test_softmax_properties():
    xx = [1.0, 3.0, 2.0, -1.0]
    out = softmax(xx)
    assert sum(out) == pytest.approx(1.0)
    assert arg_max(out) == arg_max(xx)
    shifted = softmax([x + 100.0 for x in xx])
    assert shifted == pytest.approx(out)


def test_softmax_large_values_stable():
    out = softmax([1000.0, 1000.0])
    assert out[0] == pytest.approx(out[1])


def test_max_min_argmax():
    xx = [2.0, 9.0, -4.0, 9.0, 1.0]
    top = maximum(xx)
    bottom = minimum(xx)
    assert top in xx and all(x <= top for x in xx)
    assert bottom in xx and all(x >= bottom for x in xx)
    assert arg_max(xx) == xx.index(top)


def test_empty_sequences_raise():
    for fn in (maximum, minimum, arg_max, softmax, normalize):
        with pytest.raises(ValueError):
            fn([])


def test_normalize_range_and_order():
    xx = [5.0, -3.0, 12.0, 0.5]
    out = normalize(xx)
    assert min(out) == 0.0
    assert max(out) == 1.0
    assert sorted(range(len(xx)), key=xx.__getitem__) == sorted(range(len(out)), key=out.__getitem__)
    assert xx == [5.0, -3.0, 12.0, 0.5]


def test_normalize_constant_raises():
    with pytest.raises(ValueError):
        normalize([2.0, 2.0])