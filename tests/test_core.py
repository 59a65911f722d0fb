import random

import pytest

from bullean.neural.core import (
    ActivationType,
    Example,
    Examples,
    LossType,
    Mode,
    default_ffnn_config,
)


def _examples(n):
    return Examples(Example([float(i)], [float(i)]) for i in range(n))


@pytest.mark.parametrize(
    "value,name",
    [(0, "N/A"), (1, "CE"), (2, "BinCE"), (3, "MSE")],
)
def test_loss_names(value, name):
    loss = LossType(value)
    assert loss.__str__() == name


def test_default_config():
    config = default_ffnn_config(20)
    assert config.inputs == 21
    assert config.mode == Mode.MULTI_CLASS
    assert config.activation == ActivationType.SOFTMAX
    assert config.bias is True
    assert config.layout[-1] == 3
    assert all(size == 100 for size in config.layout[:-1])
    assert abs(config.weight() - 1e-20) < 1e-18


def test_split_size_chunks():
    data = _examples(10)
    chunks = data.split_size(4)
    assert [len(c) for c in chunks] == [4, 4, 2]
    assert [e for c in chunks for e in c] == list(data)
    assert all(isinstance(c, Examples) for c in chunks)


def test_split_size_rejects_non_positive():
    with pytest.raises(ValueError):
        _examples(3).split_size(0)


def test_split_n_round_robin():
    data = _examples(7)
    parts = data.split_n(3)
    assert sum(len(p) for p in parts) == 7
    assert parts[0][0] is data[0]
    assert parts[1][0] is data[1]
    assert parts[0][1] is data[3]


def test_split_n_more_parts_than_items():
    parts = _examples(2).split_n(4)
    assert [len(p) for p in parts] == [1, 1, 0, 0]


def test_split_n_rejects_zero():
    with pytest.raises(ValueError):
        _examples(3).split_n(0)


def test_split_extremes():
    data = _examples(20)
    first, second = data.split(1.0)
    assert list(first) == list(data) and len(second) == 0
    first, second = data.split(0.0)
    assert list(second) == list(data) and len(first) == 0


def test_split_partitions_all():
    random.seed(5)
    data = _examples(50)
    first, second = data.split(0.5)
    assert len(first) + len(second) == len(data)
    assert sorted(e.input[0] for e in list(first) + list(second)) == [e.input[0] for e in data]


def test_shuffle_keeps_elements():
    random.seed(11)
    data = _examples(30)
    original = list(data)
    data.shuffle()
    assert sorted(data, key=lambda e: e.input[0]) == original
    assert list(data) != original


def test_slice_returns_examples():
    data = _examples(5)
    part = data[1:3]
    assert isinstance(part, Examples)
    assert list(part) == [data[1], data[2]]