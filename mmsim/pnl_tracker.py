"""Running profit-and-loss statistics for simulated trades."""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace

from mmsim.trader import Trade, TradeSide

_BOX_TOP = "╔════════════════════════════════════════════════════════════════════╗"
_BOX_MID = "╠════════════════════════════════════════════════════════════════════╣"
_BOX_BOTTOM = "╚════════════════════════════════════════════════════════════════════╝"
_BOX_BLANK = "║                                                                    ║"

SIDE_LABELS: dict[TradeSide, str] = {TradeSide.BUY: "BUY ", TradeSide.SELL: "SELL"}


@dataclass
class PnLStats:
    """Totals over all recorded trades."""

    total_pnl: float = 0.0
    total_trades: int = 0
    buy_trades: int = 0
    sell_trades: int = 0
    buy_pnl: float = 0.0
    sell_pnl: float = 0.0
    total_notional: float = 0.0
    avg_execution_prob: float = 0.0

    def avg_pnl_per_trade(self) -> float:
        """Mean PnL per trade, 0 when there are no trades."""
        if self.total_trades > 0:
            return self.total_pnl / self.total_trades
        return 0.0

    def pnl_per_notional_bps(self) -> float:
        """Total PnL relative to total notional, in basis points."""
        if self.total_notional > 0.0:
            return self.total_pnl / self.total_notional * 10000.0
        return 0.0


class PnLTracker:
    """Records trades and keeps their statistics."""

    def __init__(self) -> None:
        self._stats = PnLStats()
        self._trades: list[Trade] = []

    def record_trade(self, trade: Trade) -> None:
        """Add a trade to the history and the statistics."""
        stats = self._stats
        stats.total_pnl += trade.pnl
        stats.total_trades += 1
        stats.total_notional += trade.notional_usd
        if trade.side is TradeSide.BUY:
            stats.buy_trades += 1
            stats.buy_pnl += trade.pnl
        else:
            stats.sell_trades += 1
            stats.sell_pnl += trade.pnl
        stats.avg_execution_prob = (
            stats.avg_execution_prob * (stats.total_trades - 1) + trade.execution_prob
        ) / stats.total_trades
        self._trades.append(trade)

    def get_stats(self) -> PnLStats:
        """A snapshot of the current statistics."""
        return replace(self._stats)

    def get_recent_trades(self, n: int) -> list[Trade]:
        """The last n trades, oldest first."""
        start = max(len(self._trades) - n, 0)
        return self._trades[start:]

    def format_summary(self) -> str:
        """The session summary box."""
        s = self._stats
        lines = [
            "",
            _BOX_TOP,
            "║                    TRADING SESSION SUMMARY                         ║",
            _BOX_MID,
            f"║ Total Trades:          {s.total_trades:>8}                                    ║",
            f"║   - Buy Trades:        {s.buy_trades:>8}                                    ║",
            f"║   - Sell Trades:       {s.sell_trades:>8}                                    ║",
            _BOX_BLANK,
            f"║ Total PnL:             ${s.total_pnl:>12.2f}                             ║",
            f"║   - Buy PnL:           ${s.buy_pnl:>12.2f}                             ║",
            f"║   - Sell PnL:          ${s.sell_pnl:>12.2f}                             ║",
            _BOX_BLANK,
            f"║ Avg PnL per Trade:     ${s.avg_pnl_per_trade():>12.2f}                             ║",
            f"║ Total Notional:        ${s.total_notional:>12.2f}                             ║",
            f"║ PnL / Notional:        {s.pnl_per_notional_bps():>8.2f} bps                            ║",
            f"║ Avg Execution Prob:    {s.avg_execution_prob * 100.0:>7.1f}%                                 ║",
            _BOX_BOTTOM,
            "",
        ]
        return "\n".join(lines)

    def format_trade(self, trade: Trade) -> str:
        """One line describing a trade and the running total PnL."""
        return (
            f"[TRADE] {SIDE_LABELS[trade.side]} │ Price: ${trade.price:>8.2f} │ "
            f"Amount: {trade.amount_eth:>8.4f} ETH │ Prob: {trade.execution_prob * 100.0:>5.1f}% │ "
            f"PnL: ${trade.pnl:>8.2f} │ Total PnL: ${self._stats.total_pnl:>10.2f}"
        )

    def print_summary(self) -> None:
        """Write the session summary box to standard output."""
        text = self.format_summary()
        sys.stdout.write(text + "\n")
        sys.stdout.flush()

    def print_trade(self, trade: Trade) -> None:
        """Write the line for a trade to standard output."""
        text = self.format_trade(trade)
        sys.stdout.write(text + "\n")
        sys.stdout.flush()