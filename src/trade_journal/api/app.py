"""Trade journal read API: FastAPI application.

Serves the analytics read endpoint and its companions.  Every route
takes the ten filter query parameters and runs them through the same
field table as the URL codec, so invalid values are dropped here exactly
as they are in the browser; they never produce a 4xx.

Routes:
  GET /api/emotional-analysis   emotion leaning + coupled psychology
  GET /api/trades               filtered, sorted trades
  GET /api/share-url            shareable link for the given filters
  GET /health

Usage::

    from trade_journal.api.app import create_app

    app = create_app(service=AnalyticsService(JsonFileTradeProvider(path)))
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.config import Settings
from ..core.models import FilterState
from ..filters.codec import FilterCodec
from ..filters.fields import first_values, parse_params
from ..filters.location import InMemoryLocation
from ..journal.analytics import AnalyticsService
from ..journal.providers import InMemoryTradeProvider
from ..observability.logger import new_trace_id

logger = logging.getLogger(__name__)


def filters_from_request(request: Request) -> FilterState:
    """Decode the filter query parameters of ``request``."""
    return parse_params(first_values(request.query_params.multi_items()))


def create_app(
    service: AnalyticsService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create the read API application.

    Both parameters are optional; without a service the API answers from
    an empty trade set.
    """
    settings = settings or Settings()
    service = service or AnalyticsService.from_settings(
        InMemoryTradeProvider(), settings,
    )

    app = FastAPI(title="Trade Journal Analytics", docs_url=None, redoc_url=None)
    app.state.service = service
    app.state.settings = settings

    def _user_id(request: Request) -> str | None:
        return request.headers.get(settings.api.user_header) or None

    @app.middleware("http")
    async def trace_requests(request: Request, call_next: Any) -> Any:
        new_trace_id()
        return await call_next(request)

    # ------------------------------------------------------------------
    # JSON API
    # ------------------------------------------------------------------

    @app.get("/api/emotional-analysis")
    async def emotional_analysis(request: Request) -> JSONResponse:
        filters = filters_from_request(request)
        result = await service.emotional_analysis(filters, user_id=_user_id(request))
        return JSONResponse(result.to_payload())

    @app.get("/api/trades")
    async def trades(request: Request) -> JSONResponse:
        filters = filters_from_request(request)
        rows = await service.filtered_trades(filters, user_id=_user_id(request))
        return JSONResponse({
            "trades": [t.model_dump(mode="json") for t in rows],
            "totalTrades": len(rows),
            "activeFilters": filters.active_count(),
        })

    @app.get("/api/share-url")
    async def share_url(request: Request, base: str) -> dict[str, str]:
        codec = FilterCodec(InMemoryLocation(base))
        return {"url": codec.create_shareable_url(filters_from_request(request))}

    # ------------------------------------------------------------------
    # Health endpoint
    # ------------------------------------------------------------------

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception,
    ) -> JSONResponse:
        logger.exception("Unhandled exception on %s", request.url.path)
        return JSONResponse(
            {"error": type(exc).__name__, "detail": str(exc)},
            status_code=500,
        )

    return app
