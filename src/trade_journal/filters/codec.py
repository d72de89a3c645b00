"""Filter codec: FilterState <-> query string, mirrored into a location.

Converts the canonical :class:`FilterState` to and from a URL query
string and keeps a navigable location in sync with it.  Per-field
validation comes from :mod:`trade_journal.filters.fields`, so anything
dropped here is dropped by the HTTP API as well.

Without a location (server side, batch jobs) every read returns an
empty value and every write is a no-op; nothing raises.

Usage::

    codec = FilterCodec(InMemoryLocation("https://journal.example/trades"))
    codec.update(FilterState(symbol="AAPL", pnl_filter="profitable"))
    codec.parse()                  # FilterState(symbol='AAPL', ...)
    codec.create_shareable_url(FilterState(market="crypto"))
    # 'https://journal.example/trades?market=crypto'
"""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ..core.enums import SortField, SortOrder
from ..core.interfaces import ILocation
from ..core.models import FilterState
from . import fields

logger = logging.getLogger(__name__)


def merge_query(query: str, updates: Mapping[str, str]) -> str:
    """Apply key updates to a query string.

    Keys mapped to ``""`` are deleted.  An existing key is overwritten at
    its first position (later duplicates are dropped); new keys are
    appended in ``updates`` order.  Keys not in ``updates`` are kept
    as they are.
    """
    out: list[tuple[str, str]] = []
    seen: set[str] = set()
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        if key not in updates:
            out.append((key, value))
            continue
        if key in seen:
            continue
        seen.add(key)
        if updates[key]:
            out.append((key, updates[key]))
    for key, value in updates.items():
        if key not in seen and value:
            out.append((key, value))
    return urlencode(out, safe=",")


class FilterCodec:
    """Query-string codec bound to an optional navigable location.

    Parameters
    ----------
    location : ILocation | None
        URL the filters are mirrored into.  ``None`` turns every
        location-dependent operation into a no-op.
    """

    def __init__(self, location: ILocation | None = None) -> None:
        self._location = location

    @property
    def location(self) -> ILocation | None:
        return self._location

    # ------------------------------------------------------------------ #
    # Pure conversions                                                     #
    # ------------------------------------------------------------------ #

    @staticmethod
    def serialize(filters: FilterState, base_query: str = "") -> str:
        """Merge ``filters`` into ``base_query`` (no leading ``?``)."""
        return merge_query(base_query, fields.encode_params(filters))

    @staticmethod
    def validate(key: str, value: str | None) -> bool:
        return fields.validate(key, value)

    def parse(self, query_string: str | None = None) -> FilterState:
        """Decode a query string, or the location's when omitted.

        Never raises: keys with values outside their domain are left out.
        """
        if query_string is None:
            query_string = self.current_query()
        pairs = parse_qsl(query_string.lstrip("?"), keep_blank_values=True)
        return fields.parse_params(fields.first_values(pairs))

    # ------------------------------------------------------------------ #
    # Location reads                                                       #
    # ------------------------------------------------------------------ #

    def current_query(self) -> str:
        if self._location is None:
            return ""
        return urlsplit(self._location.read()).query

    def get_param(self, key: str) -> str | None:
        """Raw value of ``key`` in the location (first occurrence)."""
        for name, value in parse_qsl(self.current_query(), keep_blank_values=True):
            if name == key:
                return value
        return None

    def initialize(self) -> FilterState:
        """Filters from the location merged over the default trade filters."""
        return self.parse().with_defaults()

    def get_sort_params(self) -> tuple[SortField | None, SortOrder | None]:
        state = self.parse()
        return state.sort_by, state.sort_order

    def bookmark(self) -> str:
        """Current query string with its ``?``, or ``""`` when empty."""
        query = self.current_query()
        return f"?{query}" if query else ""

    def apply_bookmark(self, query_string: str) -> FilterState:
        """Decode a bookmarked query string without touching the location."""
        return self.parse(query_string)

    # ------------------------------------------------------------------ #
    # Location writes                                                      #
    # ------------------------------------------------------------------ #

    def update(self, filters: FilterState) -> bool:
        """Rewrite every recognised key from ``filters`` in one write."""
        return self._write(fields.encode_params(filters))

    def set_param(self, key: str, value: Any) -> bool:
        """Write a single key; ``None`` or an empty value deletes it."""
        return self._write({key: fields.encode_value(value)})

    def clear_params(self) -> bool:
        """Delete the recognised filter keys; other parameters are kept."""
        return self._write({key: "" for key in fields.FILTER_KEYS})

    def update_sort_params(
        self, sort_by: SortField | str, sort_order: SortOrder | str,
    ) -> bool:
        return self._write({
            "sortBy": fields.encode_value(sort_by),
            "sortOrder": fields.encode_value(sort_order),
        })

    def clear_sort_params(self) -> bool:
        return self._write({key: "" for key in fields.SORT_KEYS})

    def _write(self, updates: Mapping[str, str]) -> bool:
        if self._location is None:
            return False
        parts = urlsplit(self._location.read())
        url = urlunsplit(parts._replace(query=merge_query(parts.query, updates)))
        self._location.replace(url)
        logger.debug("Location replaced: %s", url)
        return True

    # ------------------------------------------------------------------ #
    # Shareable links                                                      #
    # ------------------------------------------------------------------ #

    def create_shareable_url(self, filters: FilterState) -> str:
        """``origin + path + '?' + serialize(filters)``; ``""`` without a location."""
        if self._location is None:
            return ""
        parts = urlsplit(self._location.read())
        return urlunsplit(
            (parts.scheme, parts.netloc, parts.path, self.serialize(filters), "")
        )

    def create_sortable_url(
        self,
        filters: FilterState,
        sort_by: SortField | str,
        sort_order: SortOrder | str,
    ) -> str:
        return self.create_shareable_url(
            filters.model_copy(update={
                "sort_by": SortField(sort_by),
                "sort_order": SortOrder(sort_order),
            })
        )
