"""Shared fixtures for the trade-journal test suite."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

import pytest

from trade_journal.core.models import Trade
from trade_journal.filters.codec import FilterCodec
from trade_journal.filters.location import InMemoryLocation
from trade_journal.filters.sync import ManualScheduler


BASE_URL = "http://localhost:3000/trades"


def make_trade(
    trade_id: str = "t1",
    *,
    symbol: str = "AAPL",
    market: str | None = "stock",
    side: str | None = "Buy",
    pnl: float | None = 100.0,
    trade_date: date = date(2024, 1, 2),
    emotional_state: Any = None,
    strategy_id: str | None = None,
    entry_price: float | None = 100.0,
    exit_price: float | None = 110.0,
    quantity: float | None = 1.0,
) -> Trade:
    return Trade(
        id=trade_id,
        symbol=symbol,
        market=market,
        side=side,
        pnl=pnl,
        trade_date=trade_date,
        emotional_state=emotional_state,
        strategy_id=strategy_id,
        entry_price=entry_price,
        exit_price=exit_price,
        quantity=quantity,
    )


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------

@pytest.fixture
def base_date() -> date:
    return date(2024, 1, 1)


@pytest.fixture
def sample_trades(base_date: date) -> list[Trade]:
    """Eight trades spread over markets, sides, strategies and emotions."""
    day = lambda n: base_date + timedelta(days=n)  # noqa: E731
    return [
        make_trade("t1", symbol="AAPL", market="stock", side="Buy", pnl=120.0,
                   trade_date=day(0), emotional_state=["FOMO", "CONFIDENT"],
                   strategy_id="s-trend", entry_price=180.0, quantity=10),
        make_trade("t2", symbol="BTC/USDT", market="crypto", side="Sell", pnl=-80.0,
                   trade_date=day(1), emotional_state='["REVENGE", "TILT"]',
                   strategy_id="s-scalp", entry_price=42000.0, quantity=0.1),
        make_trade("t3", symbol="aapl", market="Stock", side="Sell", pnl=0.0,
                   trade_date=day(2), emotional_state="PATIENCE",
                   strategy_id="s-trend", entry_price=185.0, quantity=5),
        make_trade("t4", symbol="EUR/USD", market="forex", side="Buy", pnl=None,
                   trade_date=day(3), emotional_state=None,
                   strategy_id=None, entry_price=1.09, quantity=1000),
        make_trade("t5", symbol="ES", market="futures", side="Buy", pnl=250.0,
                   trade_date=day(4), emotional_state=["FOMO"],
                   strategy_id="s-scalp", entry_price=4800.0, quantity=2),
        make_trade("t6", symbol="ETH/USDT", market="crypto", side="buy", pnl=-15.5,
                   trade_date=day(5), emotional_state="not json [",
                   strategy_id="s-trend", entry_price=None, quantity=3),
        make_trade("t7", symbol="MSFT", market="stock", side=None, pnl=40.0,
                   trade_date=day(6), emotional_state=["discipline", 42, ""],
                   strategy_id="s-trend", entry_price=400.0, quantity=None),
        make_trade("t8", symbol="TSLA", market="stock", side="Sell", pnl=-300.0,
                   trade_date=day(7), emotional_state=["FOMO", "ANXIOUS"],
                   strategy_id="s-scalp", entry_price=250.0, quantity=4),
    ]


# ---------------------------------------------------------------------------
# Location / codec / scheduler
# ---------------------------------------------------------------------------

@pytest.fixture
def location() -> InMemoryLocation:
    return InMemoryLocation(BASE_URL)


@pytest.fixture
def codec(location: InMemoryLocation) -> FilterCodec:
    return FilterCodec(location)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()
