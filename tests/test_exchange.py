import math

import pytest

from bullean.exchange import BuyInfo, ExchangeClient, SellInfo, round_down, to_float


def test_to_float_parses_numbers():
    assert to_float("1.5") == 1.5
    assert to_float("-0.25") == -0.25
    assert to_float("1e3") == 1000.0


@pytest.mark.parametrize("text", ["abc", "", " 1", "1_000"])
def test_to_float_invalid_gives_zero(text):
    assert to_float(text) == 0.0


def test_to_float_requires_string():
    with pytest.raises(TypeError):
        to_float(5)


def test_round_down_truncates():
    assert round_down(1.239, 2) == 1.23
    assert round_down(-1.231, 2) == -1.24


def test_round_down_zero_precision_is_floor():
    for value in [0.5, 2.9, -2.1]:
        assert round_down(value, 0) == math.floor(value)


@pytest.mark.parametrize("value", [0.12345, 17.9999, 3.0, 123.456789])
@pytest.mark.parametrize("precision", [1, 2, 3])
def test_round_down_invariant(value, precision):
    result = round_down(value, precision)
    assert result <= value
    assert value - result < 10.0**-precision + 1e-12


def test_buy_info_defaults():
    info = BuyInfo(base_asset="USDT", quote_asset="BTC", price=10.0)
    assert info.stop_loss is None
    assert info.take_profit is None
    assert info.position_side == 0
    assert info.amount == 0.0


def test_exchange_client_protocol():
    class Fake:
        def buy(self, info):
            self.last = info

        def sell(self, info):
            self.last = info

        def get_symbol_balance(self, asset):
            return 1.0

    fake = Fake()
    assert isinstance(fake, ExchangeClient)
    assert not isinstance(object(), ExchangeClient)
    fake.sell(SellInfo(price=2.0))
    assert fake.last.price == 2.0