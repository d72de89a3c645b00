"""Trade sources implementing :class:`~trade_journal.core.interfaces.ITradeProvider`.

Persistence and authentication live outside this package; these
providers cover tests, the CLI and single-user deployments that work
from a JSON export of the journal.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from ..core.errors import TradeSourceError
from ..core.models import Trade

logger = logging.getLogger(__name__)


class InMemoryTradeProvider:
    """Serves a fixed list of trades.  ``user_id`` is ignored."""

    def __init__(self, trades: Iterable[Trade] = ()) -> None:
        self._trades = list(trades)

    async def fetch_trades(self, user_id: str | None = None) -> list[Trade]:
        return list(self._trades)


class JsonFileTradeProvider:
    """Reads trades from a JSON export.

    The file holds either a list of trade objects or an object with a
    ``"trades"`` list.  It is re-read on every fetch so edits show up
    without a restart.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def fetch_trades(self, user_id: str | None = None) -> list[Trade]:
        return self.load()

    def load(self) -> list[Trade]:
        try:
            payload: Any = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise TradeSourceError(f"Trade file not found: {self._path}") from exc
        except ValueError as exc:
            raise TradeSourceError(f"Trade file is not valid JSON: {self._path}: {exc}") from exc

        if isinstance(payload, dict):
            payload = payload.get("trades")
        if not isinstance(payload, list):
            raise TradeSourceError(
                f"Trade file must hold a list of trades: {self._path}"
            )

        try:
            trades = [Trade.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise TradeSourceError(f"Invalid trade in {self._path}: {exc}") from exc

        logger.debug("Loaded %d trades from %s", len(trades), self._path)
        return trades
