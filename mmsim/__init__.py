"""Market maker simulator for ETH/USDC built on aggregated venue quotes."""

__version__ = "0.1.0"
__all__ = ["aggregator", "trader", "pnl_tracker", "cli"]