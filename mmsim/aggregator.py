"""Price quotes gathered from several ETH/USDC venues."""

from __future__ import annotations

import asyncio
import json
import sys
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, replace
from statistics import median_high
from typing import Any

import aiohttp

BINANCE_URL = "wss://stream.binance.com:9443/ws/ethusdc@bookTicker"
ETH_TOKEN_ID = "7vfCXTUXx5WJV5JADk17DUJ4ksgau7utNKj4b963voxs"
JUPITER_URL = f"https://lite-api.jup.ag/price/v3?ids={ETH_TOKEN_ID}"
COWSWAP_URL = "https://api.cow.fi/mainnet/api/v1/quote"

ETH_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
USDC_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"

JUPITER_HALF_SPREAD = 0.0005
COWSWAP_HALF_SPREAD = 0.001

BINANCE_RECONNECT_DELAY = 5.0
JUPITER_POLL_INTERVAL = 2.0
COWSWAP_POLL_INTERVAL = 3.0


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Quote:
    """A bid/ask pair with a millisecond timestamp."""

    bid: float
    ask: float
    timestamp: int


@dataclass
class AggregatedPrices:
    """The latest quote from each venue, if any has arrived yet."""

    binance: Quote | None = None
    jupiter: Quote | None = None
    cowswap: Quote | None = None

    def _quotes(self) -> list[Quote]:
        return [q for q in (self.binance, self.jupiter, self.cowswap) if q is not None]

    def median_quote(self) -> Quote | None:
        """Median bid and median ask (upper median), with the latest timestamp."""
        quotes = self._quotes()
        if not quotes:
            return None
        return Quote(
            bid=median_high(q.bid for q in quotes),
            ask=median_high(q.ask for q in quotes),
            timestamp=max(q.timestamp for q in quotes),
        )

    def best_quote(self) -> Quote | None:
        """Highest bid and lowest ask across venues."""
        quotes = self._quotes()
        if not quotes:
            return None
        return Quote(
            bid=max(q.bid for q in quotes),
            ask=min(q.ask for q in quotes),
            timestamp=max(0, *(q.timestamp for q in quotes)),
        )

    def median_mid(self) -> float | None:
        """Upper median of the venues' mid prices."""
        quotes = self._quotes()
        if not quotes:
            return None
        return median_high((q.bid + q.ask) / 2.0 for q in quotes)


def _symmetric_quote(price: float, half_spread: float) -> Quote:
    spread = price * half_spread
    return Quote(bid=price - spread, ask=price + spread, timestamp=_now_ms())


def parse_binance_ticker(text: str) -> Quote | None:
    """Build a quote from a Binance bookTicker message, or None if it is unusable."""
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    bid_text, ask_text = data.get("b"), data.get("a")
    if not isinstance(bid_text, str) or not isinstance(ask_text, str):
        return None
    try:
        bid, ask = float(bid_text), float(ask_text)
    except ValueError:
        return None
    return Quote(bid=bid, ask=ask, timestamp=_now_ms())


def parse_jupiter_price(data: Any) -> Quote | None:
    """Build a quote around the ETH price in a Jupiter price response."""
    if not isinstance(data, dict):
        return None
    entry = data.get(ETH_TOKEN_ID)
    if not isinstance(entry, dict):
        return None
    price = entry.get("usdPrice")
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        return None
    return _symmetric_quote(float(price), JUPITER_HALF_SPREAD)


def parse_cowswap_quote(data: Any) -> Quote | None:
    """Build a quote from a CowSwap USDC-to-ETH quote response."""
    if not isinstance(data, dict):
        return None
    quote = data.get("quote")
    if not isinstance(quote, dict):
        return None
    sell_text, buy_text = quote.get("sellAmount"), quote.get("buyAmount")
    if not isinstance(sell_text, str) or not isinstance(buy_text, str):
        return None
    try:
        sell, buy = float(sell_text), float(buy_text)
    except ValueError:
        return None
    if buy == 0:
        return None
    price = (sell / 1e6) / (buy / 1e18)
    return _symmetric_quote(price, COWSWAP_HALF_SPREAD)


async def _ticks(period: float) -> AsyncIterator[None]:
    """Yield at a fixed rate, the first time immediately; late ticks fire at once."""
    loop = asyncio.get_running_loop()
    deadline = loop.time()
    while True:
        delay = deadline - loop.time()
        if delay > 0:
            await asyncio.sleep(delay)
        yield
        deadline += period


class PriceAggregator:
    """Keeps the latest quotes from Binance, Jupiter and CowSwap up to date."""

    def __init__(
        self,
        binance_url: str = BINANCE_URL,
        jupiter_url: str = JUPITER_URL,
        cowswap_url: str = COWSWAP_URL,
    ) -> None:
        self._binance_url = binance_url
        self._jupiter_url = jupiter_url
        self._cowswap_url = cowswap_url
        self._prices = AggregatedPrices()
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    async def start(self) -> None:
        """Launch the background feeds."""
        feeds: list[tuple[str, Callable[[], Awaitable[None]]]] = [
            ("Binance stream", self._binance_stream),
            ("Jupiter poll", self._jupiter_poll),
            ("Cowswap poll", self._cowswap_poll),
        ]
        for label, feed in feeds:
            self._tasks.append(asyncio.create_task(self._guard(label, feed)))

    async def stop(self) -> None:
        """Cancel the background feeds and wait for them to finish."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def get_prices(self) -> AggregatedPrices:
        """A snapshot of the latest quotes."""
        return replace(self._prices)

    @staticmethod
    async def _guard(label: str, feed: Callable[[], Awaitable[None]]) -> None:
        try:
            await feed()
        except Exception as exc:  # noqa: BLE001 - a feed failure must not stop the others
            print(f"[ERROR] {label} error: {exc}", file=sys.stderr)

    async def _binance_stream(self) -> None:
        async with aiohttp.ClientSession() as session:
            while True:
                try:
                    async with session.ws_connect(self._binance_url) as ws:
                        print("Connected to Binance WebSocket")
                        await self._read_binance(ws)
                except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as exc:
                    print(f"[ERROR] Failed to connect to Binance: {exc}", file=sys.stderr)
                await asyncio.sleep(BINANCE_RECONNECT_DELAY)

    async def _read_binance(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        closing = (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING, aiohttp.WSMsgType.CLOSED)
        while True:
            msg = await ws.receive()
            if msg.type == aiohttp.WSMsgType.TEXT:
                quote = parse_binance_ticker(msg.data)
                if quote is not None:
                    self._prices.binance = quote
            elif msg.type in closing:
                print("[INFO] Binance websocket closed, reconnecting...")
                return
            elif msg.type == aiohttp.WSMsgType.ERROR:
                print(f"[ERROR] Binance WebSocket error: {ws.exception()}", file=sys.stderr)

    async def _jupiter_poll(self) -> None:
        async with aiohttp.ClientSession() as session:
            async for _ in _ticks(JUPITER_POLL_INTERVAL):
                try:
                    async with session.get(self._jupiter_url) as response:
                        data = await response.json(content_type=None)
                except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as exc:
                    print(f"[ERROR] Jupiter fetch error: {exc}", file=sys.stderr)
                    continue
                except ValueError:
                    continue
                quote = parse_jupiter_price(data)
                if quote is not None:
                    self._prices.jupiter = quote

    async def _cowswap_poll(self) -> None:
        body = {
            "sellToken": USDC_ADDRESS,
            "buyToken": ETH_ADDRESS,
            "sellAmountBeforeFee": "1000000000",  # 1000 USDC, 6 decimals
            "kind": "sell",
            "from": "0x0000000000000000000000000000000000000000",
        }
        async with aiohttp.ClientSession() as session:
            async for _ in _ticks(COWSWAP_POLL_INTERVAL):
                try:
                    async with session.post(self._cowswap_url, json=body) as response:
                        data = await response.json(content_type=None)
                except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as exc:
                    print(f"[ERROR] CowSwap fetch error: {exc}", file=sys.stderr)
                    continue
                except ValueError:
                    continue
                quote = parse_cowswap_quote(data)
                if quote is not None:
                    self._prices.cowswap = quote