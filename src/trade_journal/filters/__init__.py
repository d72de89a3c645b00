"""Filter state canonicalisation and URL synchronisation.

FIELDS             Query-string schema shared by the codec and the HTTP API
FilterCodec        FilterState <-> query string, mirrored into a location
DebouncedURLSync   Coalesces rapid edits into one location write
InMemoryLocation   Mutable URL holder for tests, CLI and server side
"""

from .codec import FilterCodec, merge_query
from .fields import FIELDS, FILTER_KEYS, parse_params, validate
from .location import InMemoryLocation
from .sync import (
    AsyncioScheduler,
    DebouncedURLSync,
    ManualScheduler,
    debounced_url_update,
)

__all__ = [
    "FIELDS",
    "FILTER_KEYS",
    "FilterCodec",
    "merge_query",
    "parse_params",
    "validate",
    "InMemoryLocation",
    "AsyncioScheduler",
    "DebouncedURLSync",
    "ManualScheduler",
    "debounced_url_update",
]
