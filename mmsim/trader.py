"""Simulated market-making trades against aggregated quotes."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from mmsim.aggregator import AggregatedPrices

BASIC_EXECUTION_PROB = 0.70
MIN_EXECUTION_PROB = 0.20
MAX_EXECUTION_PROB = 0.90


class _RandomSource(Protocol):
    def random(self) -> float: ...


class TradeSide(Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class Trade:
    side: TradeSide
    price: float
    amount_eth: float
    notional_usd: float
    pnl: float
    timestamp: int
    execution_prob: float


@dataclass(frozen=True)
class MarketSummary:
    median_bid: float
    median_ask: float
    median_mid: float
    best_bid: float
    best_ask: float
    spread_bps: float


class TradingEngine:
    """Quotes at the median and fills with a model-dependent probability."""

    def __init__(
        self,
        notional_per_trade: float,
        use_advanced_model: bool,
        rng: _RandomSource | None = None,
    ) -> None:
        self.notional_per_trade = notional_per_trade
        self.use_advanced_model = use_advanced_model
        self._rng = rng if rng is not None else random.Random()

    def execution_probability(
        self, our_price: float, median_price: float, best_price: float, side: TradeSide
    ) -> float:
        """Fixed 70% in the basic model; 20%-90% by closeness to the best price otherwise."""
        if not self.use_advanced_model:
            return BASIC_EXECUTION_PROB
        span = MAX_EXECUTION_PROB - MIN_EXECUTION_PROB
        if side is TradeSide.BUY:
            if our_price >= best_price:
                return MAX_EXECUTION_PROB
            if our_price <= median_price:
                return MIN_EXECUTION_PROB
            width = best_price - median_price
            if width > 0:
                return MIN_EXECUTION_PROB + (our_price - median_price) / width * span
            return MIN_EXECUTION_PROB
        if our_price <= best_price:
            return MAX_EXECUTION_PROB
        if our_price >= median_price:
            return MIN_EXECUTION_PROB
        width = median_price - best_price
        if width > 0:
            return MIN_EXECUTION_PROB + (median_price - our_price) / width * span
        return MIN_EXECUTION_PROB

    def calculate_pnl(
        self, side: TradeSide, our_price: float, market_price: float, amount_eth: float
    ) -> float:
        """Mark-to-market PnL of a fill at our_price against market_price."""
        if side is TradeSide.BUY:
            return (market_price - our_price) * amount_eth
        return (our_price - market_price) * amount_eth

    def attempt_trade(self, prices: AggregatedPrices, side: TradeSide) -> Trade | None:
        """Quote at the median; return the trade if it fills, otherwise None."""
        median_quote = prices.median_quote()
        best_quote = prices.best_quote()
        if median_quote is None or best_quote is None:
            return None

        if side is TradeSide.BUY:
            our_price, market_price = median_quote.bid, best_quote.bid
        else:
            our_price, market_price = median_quote.ask, best_quote.ask

        amount_eth = self.notional_per_trade / our_price
        execution_prob = self.execution_probability(our_price, our_price, market_price, side)

        if self._rng.random() >= execution_prob:
            return None
        return Trade(
            side=side,
            price=our_price,
            amount_eth=amount_eth,
            notional_usd=self.notional_per_trade,
            pnl=self.calculate_pnl(side, our_price, market_price, amount_eth),
            timestamp=int(time.time() * 1000),
            execution_prob=execution_prob,
        )

    def get_market_summary(self, prices: AggregatedPrices) -> MarketSummary | None:
        """Median and best prices with the median spread in basis points."""
        median_quote = prices.median_quote()
        best_quote = prices.best_quote()
        median_mid = prices.median_mid()
        if median_quote is None or best_quote is None or median_mid is None:
            return None
        return MarketSummary(
            median_bid=median_quote.bid,
            median_ask=median_quote.ask,
            median_mid=median_mid,
            best_bid=best_quote.bid,
            best_ask=best_quote.ask,
            spread_bps=(median_quote.ask - median_quote.bid) / median_mid * 10000.0,
        )