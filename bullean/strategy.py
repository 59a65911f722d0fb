"""Multi-asset trading strategy driven by caller-supplied conditions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Iterable

from bullean.entities import Candle
from bullean.exchange import BuyInfo, ExchangeClient, SellInfo


class PositionType(IntEnum):
    """Decision returned by a strategy condition."""

    HOLD = 0
    BUY = 1
    SELL = 2


@dataclass
class Position:
    """An open position."""

    pos_type: PositionType = PositionType.HOLD
    entry_price: float = 0.0


def percentage_change(val1: float, val2: float) -> float:
    """Percentage change from `val1` to `val2`; a zero base counts as 1."""
    if val1 == 0:
        val1 = 1
    return ((val2 - val1) / val1) * 100


Condition = Callable[[float, float], PositionType]


@dataclass
class Strategy:
    """Keeps recent candles per symbol and places orders on conditions."""

    base_asset: str
    quote_assets: list[str]
    candle_limit: int
    client: ExchangeClient
    candles: dict[str, list[Candle]] = field(default_factory=dict)
    last_long_enter_price: float = 0.0
    last_long_close_price: float = 0.0
    last_short_enter_price: float = 0.0
    last_short_close_price: float = 0.0

    def _symbol(self, quote_asset: str) -> str:
        return f"{quote_asset}{self.base_asset}"

    def _last_close(self, quote_asset: str) -> float:
        return self.candles[self._symbol(quote_asset)][-1].close

    def next(self, candles: Iterable[Candle]) -> None:
        """Append new candles, dropping the oldest past the limit."""
        for candle in candles:
            series = self.candles.setdefault(candle.symbol, [])
            if series and len(series) >= self.candle_limit:
                series.pop(0)
            series.append(candle)

    def evaluate(self, long_condition: Condition, short_condition: Condition) -> None:
        """Ask both conditions for every known quote asset and act on them."""
        for quote in self.quote_assets:
            if self._symbol(quote) not in self.candles:
                continue
            decision = long_condition(self.last_long_enter_price, self.last_long_close_price)
            if decision == PositionType.BUY:
                self.long_enter(quote)
            elif decision == PositionType.SELL:
                self.long_close(quote)
            decision = short_condition(self.last_short_enter_price, self.last_short_close_price)
            if decision == PositionType.BUY:
                self.short_enter(quote)
            elif decision == PositionType.SELL:
                self.short_close(quote)

    def long_enter(self, quote_asset: str) -> None:
        self.last_long_enter_price = self._last_close(quote_asset)
        balance = self.client.get_symbol_balance(quote_asset)
        self.client.buy(
            BuyInfo(
                base_asset=self.base_asset,
                quote_asset=quote_asset,
                amount=balance,
                price=self.last_long_enter_price,
                position_side=1,
            )
        )

    def short_enter(self, quote_asset: str) -> None:
        self.last_short_enter_price = self._last_close(quote_asset)
        balance = self.client.get_symbol_balance(quote_asset)
        self.client.buy(
            BuyInfo(
                base_asset=self.base_asset,
                quote_asset=quote_asset,
                amount=balance,
                price=self.last_short_enter_price,
                position_side=2,
            )
        )

    def long_close(self, quote_asset: str) -> None:
        self.last_long_close_price = self._last_close(quote_asset)
        self.client.sell(
            SellInfo(
                base_asset=self.base_asset,
                quote_asset=quote_asset,
                price=self.last_long_close_price,
                position_side=1,
            )
        )

    def short_close(self, quote_asset: str) -> None:
        self.last_short_close_price = self._last_close(quote_asset)
        self.client.sell(
            SellInfo(
                base_asset=self.base_asset,
                quote_asset=quote_asset,
                price=self.last_short_close_price,
                position_side=2,
            )
        )