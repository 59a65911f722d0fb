"""Exchange order types, the client protocol and numeric helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


def to_float(value: str) -> float:
    """Parse a decimal string, giving 0.0 when it is not a number."""
    if not isinstance(value, str):
        raise TypeError(f"expected str, got {type(value).__name__}")
    if value != value.strip() or "_" in value:
        return 0.0
    try:
        return float(value)
    except ValueError:
        return 0.0


def round_down(val: float, precision: int) -> float:
    """Floor `val` to `precision` decimal places."""
    scale = 10.0**precision
    return math.floor(val * scale) / scale


@dataclass
class ExchangeClientConfig:
    """Credentials for an exchange account."""

    api_key: str = ""
    api_secret: str = ""


@dataclass
class BuyInfo:
    """Parameters of a buy (or position-opening) order."""

    base_asset: str = ""
    quote_asset: str = ""
    amount: float = 0.0
    price: float = 0.0
    stop_loss: float | None = None
    take_profit: float | None = None
    position_side: int = 0


@dataclass
class SellInfo:
    """Parameters of a sell (or position-closing) order."""

    base_asset: str = ""
    quote_asset: str = ""
    price: float = 0.0
    position_side: int = 0


@runtime_checkable
class ExchangeClient(Protocol):
    """What a strategy needs from an exchange account."""

    def buy(self, info: BuyInfo) -> None:
        ...

    def sell(self, info: SellInfo) -> None:
        ...

    def get_symbol_balance(self, asset: str) -> float:
        ...