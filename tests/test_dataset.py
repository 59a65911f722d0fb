import pytest

from bullean.dataset import DataSet, close_percentage_policy, ma_percentage_policy
from bullean.entities import Candle, Data, FeatureType, PolicyConfig


def make_candles(closes):
    return [
        Candle(symbol="X", open=c - 1, high=c + 2, low=c - 2, close=c) for c in closes
    ]


CLOSES = [float(100 + n) for n in range(30)]


@pytest.mark.parametrize(
    "feat_type,attribute",
    [
        (FeatureType.OPEN, "open"),
        (FeatureType.HIGH, "high"),
        (FeatureType.LOW, "low"),
        (FeatureType.CLOSE, "close"),
    ],
)
def test_get_feature_values_by_type(feat_type, attribute):
    candles = make_candles([5.0, 6.0, 7.0])
    values = DataSet(candles).get_feature_values(candles, feat_type)
    assert values == [getattr(c, attribute) for c in candles]


def test_close_percentage_features_reconstruct_closes():
    closes = [50.0, 55.0, 44.0, 66.0]
    candles = make_candles(closes)
    values = DataSet(candles).get_feature_values(candles, FeatureType.CLOSE_PERCENTAGE)
    assert values[0] == 0.0
    for pct, prev, cur in zip(values[1:], closes, closes[1:]):
        assert prev * (1 + pct / 100) == pytest.approx(cur)


def test_unknown_feature_type_yields_nothing():
    candles = make_candles([1.0, 2.0])
    assert DataSet(candles).get_feature_values(candles, 99) == []


def test_create_policy_windows_and_labels():
    candles = make_candles(CLOSES)
    data_set = DataSet(candles, input_len=10)
    windows = []

    def policy(window):
        windows.append(window)
        return len(windows) % 3

    data_set.create_policy(PolicyConfig(feat_name="close", feat_type=FeatureType.CLOSE, policy_range=3), policy)
    data = data_set.get_data_set()

    assert len(data) == len(windows) == len(CLOSES) - 3 - 10
    assert all(len(w) == 10 + 3 for w in windows)
    assert all(len(d.features) == 11 and d.name == "close" for d in data)
    assert data[0].features == CLOSES[0:11]
    assert data[-1].features == CLOSES[len(CLOSES) - 3 - 11 : len(CLOSES) - 3]
    assert [d.label for d in reversed(data)] == [(n + 1) % 3 for n in range(len(windows))]


def test_create_policy_prepends_to_existing():
    candles = make_candles(CLOSES)
    data_set = DataSet(candles, input_len=10)
    config = PolicyConfig(feat_name="a", feat_type=FeatureType.CLOSE, policy_range=3)
    data_set.create_policy(config, lambda w: 0)
    first = list(data_set.get_data_set())
    data_set.create_policy(PolicyConfig(feat_name="b", feat_type=FeatureType.CLOSE, policy_range=3), lambda w: 1)
    data = data_set.get_data_set()
    assert data[len(first):] == first
    assert all(d.name == "b" for d in data[: len(first)])


def test_create_policy_needs_lookback():
    data_set = DataSet(make_candles(CLOSES), input_len=2)
    config = PolicyConfig(feat_name="c", feat_type=FeatureType.CLOSE, policy_range=3)
    with pytest.raises(ValueError):
        data_set.create_policy(config, lambda w: 0)
    assert data_set.get_data_set() == []


def rows(labels):
    return [Data(name="n", features=[], label=label) for label in labels]


def test_serialize_labels_smooths_isolated_change():
    data_set = DataSet([], features=rows([0, 2, 0, 0, 0, 0, 2, 2, 2, 2]))
    data_set.serialize_labels()
    assert [d.label for d in data_set.get_data_set()] == [0, 0, 0, 0, 0, 0, 2, 2, 2, 2]


def test_serialize_labels_keeps_persistent_change():
    labels = [0, 0, 2, 2, 2, 2, 2, 2, 2]
    data_set = DataSet([], features=rows(labels))
    data_set.serialize_labels()
    assert [d.label for d in data_set.get_data_set()] == labels


def test_serialize_labels_short_list_untouched():
    labels = [1, 2, 0, 1]
    data_set = DataSet([], features=rows(labels))
    data_set.serialize_labels()
    assert [d.label for d in data_set.get_data_set()] == labels


def test_close_percentage_policy():
    assert close_percentage_policy(make_candles([100.0, 101.0])) == 1
    assert close_percentage_policy(make_candles([100.0, 100.0])) == 0
    assert close_percentage_policy(make_candles([100.0, 99.0])) == 2


def test_ma_percentage_policy():
    rising = [float(100 + n) for n in range(20)]
    assert ma_percentage_policy(make_candles(rising)) == 1
    assert ma_percentage_policy(make_candles(rising[::-1])) == 2
    assert ma_percentage_policy(make_candles([7.0] * 15)) == 0


def test_ma_percentage_policy_needs_enough_candles():
    with pytest.raises(IndexError):
        ma_percentage_policy(make_candles([1.0] * 5))