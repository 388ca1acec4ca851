"""Command-line market-making simulation on live ETH/USDC quotes."""

from __future__ import annotations

import asyncio
import sys
import time
from collections.abc import Sequence
from typing import Any

from mmsim.aggregator import AggregatedPrices, PriceAggregator
from mmsim.pnl_tracker import SIDE_LABELS, PnLTracker
from mmsim.trader import TradeSide, TradingEngine

NOTIONAL_PER_TRADE = 100_000.0
SIMULATION_DURATION_SECS = 600
TRADE_INTERVAL_SECS = 5
INITIAL_WAIT_SECS = 10.0

_BOX_TOP = "╔════════════════════════════════════════════════════════════════════╗"
_BOX_MID = "╠════════════════════════════════════════════════════════════════════╣"
_BOX_BOTTOM = "╚════════════════════════════════════════════════════════════════════╝"
_HEAVY_RULE = "━" * 66
_LIGHT_RULE = "─" * 69


def separated_string(value: float) -> str:
    """Round to a whole number and group its digits in threes with commas."""
    digits = f"{value:.0f}"
    out: list[str] = []
    for i, ch in enumerate(digits):
        if i > 0 and (len(digits) - i) % 3 == 0:
            out.append(",")
        out.append(ch)
    return "".join(out)


def _print_header(use_advanced_model: bool, duration: float, trade_interval: float) -> None:
    model = "ADVANCED (20%-90%)" if use_advanced_model else "BASIC (70% fixed) "
    print()
    print(_BOX_TOP)
    print("║              MARKET MAKER SIMULATOR - ETH/USDC                     ║")
    print(_BOX_MID)
    print(f"║ Notional per Trade:    ${separated_string(NOTIONAL_PER_TRADE)}                                  ║")
    print(f"║ Simulation Duration:   {int(duration) // 60} minutes                                 ║")
    print(f"║ Trade Interval:        {trade_interval} seconds                                 ║")
    print(f"║ Execution Model:       {model}                              ║")
    print(_BOX_BOTTOM)
    print()


def _sources_line(prices: AggregatedPrices) -> str:
    def mark(quote: Any) -> str:
        return "✓" if quote is not None else "✗"

    return (
        f"[SOURCES] Binance {mark(prices.binance)} │ "
        f"Jupiter {mark(prices.jupiter)} │ CowSwap {mark(prices.cowswap)}"
    )


def _run_cycle(
    cycle: int,
    elapsed: int,
    remaining: float,
    prices: AggregatedPrices,
    engine: TradingEngine,
    tracker: PnLTracker,
) -> None:
    print()
    print(_HEAVY_RULE)
    print(f"Cycle #{cycle} │ Elapsed: {elapsed}s │ Remaining: {remaining}s")
    print(_HEAVY_RULE)

    summary = engine.get_market_summary(prices)
    if summary is not None:
        print(
            f"[MARKET] Median: ${summary.median_mid:.2f} │ Spread: {summary.spread_bps:.1f} bps │ "
            f"Best Bid: ${summary.best_bid:.2f} │ Best Ask: ${summary.best_ask:.2f}"
        )
    print(_sources_line(prices))

    for side, name in ((TradeSide.BUY, "Buy"), (TradeSide.SELL, "Sell")):
        trade = engine.attempt_trade(prices, side)
        if trade is None:
            print(f"[SKIP] {name} trade not executed (probability miss)")
            continue
        tracker.print_trade(trade)
        tracker.record_trade(trade)

    if cycle % 10 == 0:
        stats = tracker.get_stats()
        print()
        print(
            f"[STATS] Running Total: {stats.total_trades} trades │ PnL: ${stats.total_pnl:.2f} │ "
            f"Avg per trade: ${stats.avg_pnl_per_trade():.2f}"
        )


def _print_final(tracker: PnLTracker) -> None:
    print("\n")
    print(_BOX_TOP)
    print("║                     SIMULATION COMPLETE                            ║")
    print(_BOX_BOTTOM)
    tracker.print_summary()

    print("Last 5 Trades:")
    print(_LIGHT_RULE)
    for trade in reversed(tracker.get_recent_trades(5)):
        print(
            f"  {SIDE_LABELS[trade.side]} │ ${trade.price:.2f} │ {trade.amount_eth:.4f} ETH │ "
            f"PnL: ${trade.pnl:.2f}"
        )
    print(_LIGHT_RULE)
    print()


async def run(
    use_advanced_model: bool = False,
    duration: float = SIMULATION_DURATION_SECS,
    trade_interval: float = TRADE_INTERVAL_SECS,
) -> PnLTracker:
    """Run the simulation and return the tracker holding its trades."""
    _print_header(use_advanced_model, duration, trade_interval)

    print("[INIT] Starting price aggregator...")
    feed = PriceAggregator()
    await feed.start()
    try:
        print(f"[INIT] Waiting {INITIAL_WAIT_SECS:g} seconds for initial price data...")
        await asyncio.sleep(INITIAL_WAIT_SECS)

        print("[INIT] Initializing trading engine and PnL tracker...")
        trading_engine = TradingEngine(NOTIONAL_PER_TRADE, use_advanced_model)
        tracker = PnLTracker()

        print("[START] Beginning market making session...\n")

        loop = asyncio.get_running_loop()
        started = time.monotonic()
        next_tick = loop.time()
        cycle = 0
        while True:
            delay = next_tick - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            next_tick += trade_interval

            elapsed = int(time.monotonic() - started)
            if elapsed >= duration:
                break
            cycle += 1
            prices = await feed.get_prices()
            _run_cycle(cycle, elapsed, duration - elapsed, prices, trading_engine, tracker)
    finally:
        await feed.stop()

    _print_final(tracker)
    return tracker


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: pass --advanced for the 20%-90% execution model."""
    args = list(sys.argv[1:] if argv is None else argv)
    use_advanced_model = "--advanced" in args
    asyncio.run(run(use_advanced_model, SIMULATION_DURATION_SECS, TRADE_INTERVAL_SECS))
    return 0


if __name__ == "__main__":
    sys.exit(main())