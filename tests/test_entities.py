from datetime import datetime, timezone

from bullean.entities import (
    Candle,
    ResponseType,
    StreamReqMsg,
    StreamResMsg,
    Subscription,
    Trade,
)


def test_candle_from_dict_reads_short_keys():
    raw = {"s": "BTCUSDT", "o": 1.0, "h": 4.0, "l": 0.5, "c": 2.0, "v": 7.0}
    candle = Candle.from_dict(raw)
    assert candle.symbol == "BTCUSDT"
    assert (candle.open, candle.high, candle.low, candle.close, candle.volume) == (1.0, 4.0, 0.5, 2.0, 7.0)
    assert candle.trades == []
    assert candle.open_time is None


def test_candle_parses_utc_time():
    candle = Candle.from_dict({"t": "2024-01-02T03:04:05Z"})
    assert candle.open_time == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_candle_parses_nanosecond_time():
    candle = Candle.from_dict({"T": "2024-01-02T03:04:05.123456789Z"})
    assert candle.close_time.microsecond == 123456
    assert candle.close_time.tzinfo is not None


def test_candle_round_trip():
    original = Candle(
        symbol="ETHUSDT",
        open_time=datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc),
        open=10.0,
        high=12.0,
        low=9.0,
        close=11.0,
        close_time=datetime(2024, 5, 6, 7, 9, 9, tzinfo=timezone.utc),
        volume=3.5,
        trades=[Trade(event_type="trade", symbol="ETHUSDT", trade_id="42", price=11.0, quantity=1.0)],
    )
    assert Candle.from_dict(original.to_dict()) == original


def test_candle_to_dict_uses_wire_keys():
    data = Candle(symbol="X").to_dict()
    assert set(data) == {"s", "t", "o", "h", "l", "c", "T", "v", "tr"}


def test_trade_from_dict():
    trade = Trade.from_dict({"e": "trade", "s": "BTCUSDT", "t": "9", "p": 5.0, "q": 2.0, "m": True})
    assert trade.event_type == "trade"
    assert trade.trade_id == "9"
    assert trade.price == 5.0
    assert trade.quantity == 2.0
    assert trade.is_buyer_maker is True


def test_stream_res_msg_from_dict():
    raw = {"type_of": "history", "candle": [{"s": "A", "c": 1.0}, {"s": "B", "c": 2.0}], "is_done": True}
    msg = StreamResMsg.from_dict(raw)
    assert msg.type_of == ResponseType.HISTORY
    assert [c.symbol for c in msg.candles] == ["A", "B"]
    assert msg.is_done is True


def test_stream_res_msg_unknown_type_kept():
    msg = StreamResMsg.from_dict({"type_of": "other"})
    assert msg.type_of == "other"
    assert msg.candles == []
    assert msg.is_done is False


def test_stream_req_msg_to_dict():
    msg = StreamReqMsg(
        type_of="subscribe",
        history=True,
        history_size=100,
        subscriptions=[Subscription(key="symbol", value="BTCUSDT")],
    )
    assert msg.to_dict() == {
        "type_of": "subscribe",
        "history": True,
        "history_size": 100,
        "subscriptions": [{"key": "symbol", "value": "BTCUSDT"}],
    }