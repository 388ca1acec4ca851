# mmsim

mmsim is a market maker simulator for ETH/USDC. It takes live quotes from
three venues:

- a Binance book ticker over WebSocket
- the Jupiter price API
- the CowSwap quote API

It aggregates these quotes and simulates quoting on both sides of the market.
Each cycle it tries one buy trade and one sell trade, records the trades that
fill, and tracks the profit and loss.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the simulation

```
market-maker
```

The command runs these steps in order:

1. Prints a session banner.
2. Starts the price feeds.
3. Waits ten seconds for the first price data.
4. Runs a trade cycle every five seconds for ten minutes. Each trade has a notional of $100,000.

Each cycle prints:

- the market summary: median mid, spread in basis points, best bid and best ask
- which price sources have delivered a quote
- each trade that was executed, or a skip line when the fill missed

Running statistics are printed every ten cycles. At the end of the session the
command prints a summary table and the last five trades.

### Execution models

The default model fills with a fixed 70% probability. Pass `--advanced` to use
the advanced model:

```
market-maker --advanced
```

`TradingEngine.execution_probability` gives a probability between 20% and 90%:

- 20% at or behind the median price
- 90% at or through the best price
- a straight-line value between those two points

`attempt_trade` quotes at the median bid or the median ask. Under the advanced
model, its result depends on where that quote sits against the best price in
the market:

- 90% when the quote is at or through the best price
- 20% otherwise

To run a session with another length or cycle interval, call the coroutine
`mmsim.cli.run(use_advanced_model, duration, trade_interval)` yourself. It
returns the `PnLTracker` that holds the session's trades.

## Using it as a library

```python
from mmsim.aggregator import AggregatedPrices, Quote
from mmsim.trader import TradingEngine, TradeSide
from mmsim.pnl_tracker import PnLTracker

prices = AggregatedPrices(
    binance=Quote(bid=3000.0, ask=3001.0, timestamp=1),
    jupiter=Quote(bid=2999.5, ask=3001.5, timestamp=2),
    cowswap=None,
)

engine = TradingEngine(100_000.0, use_advanced_model=True)
summary = engine.get_market_summary(prices)
trade = engine.attempt_trade(prices, TradeSide.BUY)

tracker = PnLTracker()
if trade is not None:
    tracker.record_trade(trade)
print(tracker.format_summary())
```

### AggregatedPrices

`AggregatedPrices` gives three views of the quotes it holds:

- `median_quote()`: the upper median bid and ask
- `best_quote()`: the highest bid and the lowest ask
- `median_mid()`: the upper median of the mid prices

Each one returns `None` when no quote is present.

### TradingEngine

`attempt_trade` returns `None` when the simulated fill misses. It also returns
`None` when there are no quotes. You can pass any object that has a `random()`
method as `rng=` to make fills reproducible.

### PnLTracker

`PnLTracker` is a plain, synchronous object. Its methods are:

- `record_trade` adds a trade.
- `get_stats` returns a `PnLStats` snapshot. The snapshot provides `avg_pnl_per_trade()` and `pnl_per_notional_bps()`.
- `get_recent_trades(n)` returns the last `n` trades, oldest first.
- `format_summary` and `format_trade` build the report text.
- `print_summary` and `print_trade` write that text to standard output.

### PriceAggregator

`PriceAggregator` runs the live feeds as asyncio background tasks. Its
`start()`, `get_prices()` and `stop()` methods are coroutines:

- `start()` launches the feeds.
- `get_prices()` returns a snapshot `AggregatedPrices`.
- `stop()` cancels the feeds.

Three helpers turn raw venue payloads into `Quote` objects:

- `parse_binance_ticker`
- `parse_jupiter_price`
- `parse_cowswap_quote`

Each returns `None` for a payload it cannot use.

## What it does not do

mmsim only simulates fills. It places no orders on any venue. It does not
store trades or statistics beyond the running process.