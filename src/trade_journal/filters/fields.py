"""Query-string schema for trade filters.

One :class:`FieldDescriptor` per recognised key.  The same table drives
the URL codec and the HTTP read API, so a value accepted by one is
accepted by the other and a value dropped by one is dropped by both.

Validation never raises: a raw value either passes its domain check and
is decoded, or the key is left out of the resulting :class:`FilterState`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Iterable, Mapping

from ..core.enums import Emotion, Market, PnlFilter, Side, SortField, SortOrder
from ..core.errors import UnknownFilterFieldError
from ..core.models import FilterState

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class FieldDescriptor:
    """Codec entry for one query-string key.

    ``validate`` and ``decode`` receive the trimmed, non-empty raw string;
    ``encode`` receives the :class:`FilterState` attribute value and
    returns ``""`` when the key should be absent.
    """

    name: str  # query-string key / pydantic alias
    attr: str  # FilterState attribute
    validate: Callable[[str], bool]
    decode: Callable[[str], Any]
    encode: Callable[[Any], str]


# ---------------------------------------------------------------------------
# Per-domain helpers
# ---------------------------------------------------------------------------

def _encode_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _text_field(name: str, attr: str) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        attr=attr,
        validate=lambda raw: bool(raw),
        decode=lambda raw: raw,
        encode=_encode_scalar,
    )


def _enum_field(name: str, attr: str, enum_cls: type[Enum]) -> FieldDescriptor:
    allowed = {member.value for member in enum_cls}
    return FieldDescriptor(
        name=name,
        attr=attr,
        validate=lambda raw: raw in allowed,
        decode=enum_cls,
        encode=_encode_scalar,
    )


def _is_iso_date(raw: str) -> bool:
    if not _ISO_DATE.match(raw):
        return False
    try:
        date.fromisoformat(raw)
    except ValueError:
        return False
    return True


def _date_field(name: str, attr: str) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        attr=attr,
        validate=_is_iso_date,
        decode=date.fromisoformat,
        encode=_encode_scalar,
    )


def _decode_emotions(raw: str) -> tuple[Emotion, ...]:
    tags: list[Emotion] = []
    for segment in raw.split(","):
        tag = Emotion.lookup(segment)
        if tag is None:
            if segment.strip():
                logger.debug("Dropping unknown emotion tag %r", segment.strip())
            continue
        if tag not in tags:
            tags.append(tag)
    return tuple(tags)


def encode_value(value: Any) -> str:
    """Encode one value for the query string; sequences are joined by ``,``."""
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(_encode_scalar(item) for item in value)
    return _encode_scalar(value)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

FIELDS: tuple[FieldDescriptor, ...] = (
    _text_field("symbol", "symbol"),
    _enum_field("market", "market", Market),
    _date_field("dateFrom", "date_from"),
    _date_field("dateTo", "date_to"),
    _enum_field("pnlFilter", "pnl_filter", PnlFilter),
    _text_field("strategyId", "strategy_id"),
    _enum_field("side", "side", Side),
    FieldDescriptor(
        name="emotionalStates",
        attr="emotional_states",
        validate=lambda raw: bool(_decode_emotions(raw)),
        decode=_decode_emotions,
        encode=encode_value,
    ),
    _enum_field("sortBy", "sort_by", SortField),
    _enum_field("sortOrder", "sort_order", SortOrder),
)

FIELDS_BY_NAME: dict[str, FieldDescriptor] = {f.name: f for f in FIELDS}
FILTER_KEYS: tuple[str, ...] = tuple(f.name for f in FIELDS)
SORT_KEYS: tuple[str, ...] = ("sortBy", "sortOrder")


def get_field(key: str) -> FieldDescriptor:
    try:
        return FIELDS_BY_NAME[key]
    except KeyError:
        raise UnknownFilterFieldError(key) from None


def validate(key: str, value: str | None) -> bool:
    """Domain check for one raw query-string value.

    An empty (or missing) value is valid: it means "unconstrained".

    Raises:
        UnknownFilterFieldError: ``key`` is not one of :data:`FILTER_KEYS`.
    """
    field = get_field(key)
    if value is None:
        return True
    raw = value.strip()
    if not raw:
        return True
    return field.validate(raw)


def first_values(pairs: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Collapse repeated keys; the first occurrence wins."""
    values: dict[str, str] = {}
    for key, value in pairs:
        values.setdefault(key, value)
    return values


def parse_params(params: Mapping[str, str]) -> FilterState:
    """Build a :class:`FilterState` from raw key/value pairs.

    Unknown keys are ignored; invalid values are dropped silently.
    """
    values: dict[str, Any] = {}
    for field in FIELDS:
        raw = params.get(field.name)
        if raw is None:
            continue
        raw = raw.strip()
        if not raw:
            continue
        if not field.validate(raw):
            logger.debug("Dropping invalid filter value %s=%r", field.name, raw)
            continue
        values[field.attr] = field.decode(raw)
    return FilterState(**values)


def encode_params(filters: FilterState) -> dict[str, str]:
    """Encode every recognised key; ``""`` marks a key to delete."""
    return {
        field.name: field.encode(getattr(filters, field.attr))
        for field in FIELDS
    }
