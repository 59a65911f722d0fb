"""Market data entities exchanged with the candle stream service."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Mapping

HISTORY_LIMIT = 40000

_TIME_PATTERN = re.compile(r"^(.*T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(.*)$")


class ClientVersion(str, Enum):
    """Address of a stream service version."""

    V1 = "152.89.38.10:5067"


class FeatureType(IntEnum):
    """Which candle value a feature vector is built from."""

    OPEN = 1
    HIGH = 2
    LOW = 3
    CLOSE = 4
    CLOSE_PERCENTAGE = 5


class ResponseType(str, Enum):
    """Kind of message sent by the stream service."""

    HISTORY = "history"
    NEW_CANDLE = "new_candle"


def _parse_time(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    match = _TIME_PATTERN.match(text)
    if match:
        fraction = (match.group(2) or "")[:6]
        text = match.group(1) + (f".{fraction.ljust(6, '0')}" if fraction else "") + match.group(3)
    return datetime.fromisoformat(text)


def _format_time(value: datetime | None) -> str | None:
    if value is None:
        return None
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


@dataclass
class Subscription:
    """A single key/value subscription filter."""

    key: str = ""
    value: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "value": self.value}


@dataclass
class StreamReqMsg:
    """Subscription request sent when a stream connection opens."""

    type_of: str = ""
    history: bool = False
    history_size: int = 0
    subscriptions: list[Subscription] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type_of": self.type_of,
            "history": self.history,
            "history_size": self.history_size,
            "subscriptions": [sub.to_dict() for sub in self.subscriptions],
        }


@dataclass
class ClientConfig:
    """Connection settings for the stream client."""

    version: ClientVersion | str = ClientVersion.V1
    name: str = ""
    api_key: str = ""
    api_secret: str = ""
    stream_req_msg: StreamReqMsg = field(default_factory=StreamReqMsg)


@dataclass
class Trade:
    """A single trade reported inside a candle."""

    event_type: str = ""
    event_time: datetime | None = None
    symbol: str = ""
    trade_id: str = ""
    price: float = 0.0
    quantity: float = 0.0
    trade_time: datetime | None = None
    is_buyer_maker: bool = False

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Trade":
        return cls(
            event_type=str(raw.get("e") or ""),
            event_time=_parse_time(raw.get("E")),
            symbol=str(raw.get("s") or ""),
            trade_id=str(raw.get("t") or ""),
            price=float(raw.get("p") or 0.0),
            quantity=float(raw.get("q") or 0.0),
            trade_time=_parse_time(raw.get("T")),
            is_buyer_maker=bool(raw.get("m", False)),
        )


def _trade_to_dict(trade: Trade | None) -> dict[str, Any] | None:
    if trade is None:
        return None
    return {
        "e": trade.event_type,
        "E": _format_time(trade.event_time),
        "s": trade.symbol,
        "t": trade.trade_id,
        "p": trade.price,
        "q": trade.quantity,
        "T": _format_time(trade.trade_time),
        "m": trade.is_buyer_maker,
    }


@dataclass
class Candle:
    """An OHLCV candle for one symbol."""

    symbol: str = ""
    open_time: datetime | None = None
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0
    close_time: datetime | None = None
    volume: float = 0.0
    trades: list[Trade | None] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Candle":
        trades = raw.get("tr") or []
        return cls(
            symbol=str(raw.get("s") or ""),
            open_time=_parse_time(raw.get("t")),
            open=float(raw.get("o") or 0.0),
            high=float(raw.get("h") or 0.0),
            low=float(raw.get("l") or 0.0),
            close=float(raw.get("c") or 0.0),
            close_time=_parse_time(raw.get("T")),
            volume=float(raw.get("v") or 0.0),
            trades=[Trade.from_dict(t) if t is not None else None for t in trades],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "s": self.symbol,
            "t": _format_time(self.open_time),
            "o": self.open,
            "h": self.high,
            "l": self.low,
            "c": self.close,
            "T": _format_time(self.close_time),
            "v": self.volume,
            "tr": [_trade_to_dict(t) for t in self.trades],
        }


@dataclass
class StreamResMsg:
    """A message received from the stream service."""

    type_of: ResponseType | str = ""
    candles: list[Candle] = field(default_factory=list)
    is_done: bool = False

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "StreamResMsg":
        type_of: ResponseType | str = str(raw.get("type_of") or "")
        try:
            type_of = ResponseType(type_of)
        except ValueError:
            pass
        return cls(
            type_of=type_of,
            candles=[Candle.from_dict(c) for c in raw.get("candle") or []],
            is_done=bool(raw.get("is_done", False)),
        )


@dataclass
class Data:
    """A labelled feature vector."""

    name: str = ""
    features: list[float] = field(default_factory=list)
    label: int = 0


@dataclass
class PolicyConfig:
    """Settings for building a labelled data set from candles."""

    feat_name: str = ""
    feat_type: FeatureType = FeatureType.CLOSE
    policy_range: int = 0