import pytest

from mmsim.pnl_tracker import PnLStats, PnLTracker
from mmsim.trader import Trade, TradeSide


def make_trade(side=TradeSide.BUY, pnl=1.0, prob=0.7, notional=100_000.0, price=2000.0):
    return Trade(
        side=side,
        price=price,
        amount_eth=notional / price,
        notional_usd=notional,
        pnl=pnl,
        timestamp=0,
        execution_prob=prob,
    )


def test_empty_stats_are_zero():
    stats = PnLTracker().get_stats()
    assert stats.total_trades == 0
    assert stats.avg_pnl_per_trade() == 0.0
    assert stats.pnl_per_notional_bps() == 0.0


def test_record_trades_updates_totals():
    tracker = PnLTracker()
    trades = [
        make_trade(TradeSide.BUY, pnl=12.5, prob=0.9),
        make_trade(TradeSide.SELL, pnl=-3.25, prob=0.2),
        make_trade(TradeSide.BUY, pnl=7.0, prob=0.5),
    ]
    for t in trades:
        tracker.record_trade(t)
    stats = tracker.get_stats()
    assert stats.total_trades == len(trades)
    assert stats.buy_trades == 2
    assert stats.sell_trades == 1
    assert stats.total_pnl == pytest.approx(sum(t.pnl for t in trades))
    assert stats.buy_pnl + stats.sell_pnl == pytest.approx(stats.total_pnl)
    assert stats.sell_pnl == pytest.approx(-3.25)
    assert stats.total_notional == pytest.approx(sum(t.notional_usd for t in trades))


def test_rolling_average_matches_mean_probability():
    tracker = PnLTracker()
    probs = [0.2, 0.9, 0.55, 0.7]
    for p in probs:
        tracker.record_trade(make_trade(prob=p))
    assert tracker.get_stats().avg_execution_prob == pytest.approx(sum(probs) / len(probs))


def test_avg_and_bps_consistent_with_totals():
    stats = PnLStats(total_pnl=50.0, total_trades=4, total_notional=400_000.0)
    assert stats.avg_pnl_per_trade() * stats.total_trades == pytest.approx(stats.total_pnl)
    assert stats.pnl_per_notional_bps() * stats.total_notional / 10000.0 == pytest.approx(
        stats.total_pnl
    )


def test_get_stats_is_snapshot():
    tracker = PnLTracker()
    snapshot = tracker.get_stats()
    tracker.record_trade(make_trade())
    assert snapshot.total_trades == 0
    assert tracker.get_stats().total_trades == 1


def test_recent_trades_slicing():
    tracker = PnLTracker()
    trades = [make_trade(pnl=float(i)) for i in range(7)]
    for t in trades:
        tracker.record_trade(t)
    assert tracker.get_recent_trades(3) == trades[-3:]
    assert tracker.get_recent_trades(100) == trades
    assert tracker.get_recent_trades(0) == []


def test_format_trade_contents():
    tracker = PnLTracker()
    trade = make_trade(TradeSide.SELL, pnl=4.5, prob=0.7, price=2000.0)
    tracker.record_trade(trade)
    line = tracker.format_trade(trade)
    assert line.startswith("[TRADE] SELL │ Price: $ 2000.00")
    assert "Prob:  70.0%" in line
    assert line.endswith(f"Total PnL: ${4.5:>10.2f}")


def test_print_trade_buy_label(capsys):
    tracker = PnLTracker()
    trade = make_trade(TradeSide.BUY)
    tracker.print_trade(trade)
    out = capsys.readouterr().out
    assert out.startswith("[TRADE] BUY  │")


def test_summary_reports_counts(capsys):
    tracker = PnLTracker()
    tracker.record_trade(make_trade(TradeSide.BUY, pnl=10.0))
    tracker.record_trade(make_trade(TradeSide.SELL, pnl=10.0))
    summary = tracker.format_summary()
    assert "TRADING SESSION SUMMARY" in summary
    assert f"Total Trades:          {2:>8}" in summary
    tracker.print_summary()
    assert capsys.readouterr().out.strip() == summary.strip()