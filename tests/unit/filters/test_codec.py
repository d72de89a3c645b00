"""Tests for FilterCodec: query-string conversion and location writes."""

from datetime import date

from trade_journal.core.enums import Emotion, Market, PnlFilter, Side, SortField, SortOrder
from trade_journal.core.models import FilterState
from trade_journal.filters.codec import FilterCodec, merge_query
from trade_journal.filters.location import InMemoryLocation

from ...conftest import BASE_URL


class TestMergeQuery:
    def test_overwrites_in_place_and_appends_new(self):
        assert merge_query("a=1&symbol=X&b=2", {"symbol": "Y", "side": "Buy"}) == (
            "a=1&symbol=Y&b=2&side=Buy"
        )

    def test_empty_value_deletes(self):
        assert merge_query("symbol=X&page=3", {"symbol": ""}) == "page=3"

    def test_duplicates_of_updated_key_collapse(self):
        assert merge_query("symbol=A&x=1&symbol=B", {"symbol": "C"}) == "symbol=C&x=1"

    def test_leading_question_mark_ignored(self):
        assert merge_query("?page=1", {}) == "page=1"

    def test_commas_not_escaped(self):
        assert merge_query("", {"emotionalStates": "FOMO,TILT"}) == "emotionalStates=FOMO,TILT"


class TestSerialize:
    def test_empty_filters_serialize_to_empty(self):
        assert FilterCodec.serialize(FilterState()) == ""

    def test_key_order_follows_schema(self):
        state = FilterState(side=Side.SELL, symbol="AAPL", pnl_filter=PnlFilter.LOSSABLE)
        assert FilterCodec.serialize(state) == "symbol=AAPL&pnlFilter=lossable&side=Sell"

    def test_unrecognised_keys_in_base_query_preserved(self):
        out = FilterCodec.serialize(FilterState(market=Market.CRYPTO), "page=2&symbol=OLD")
        assert out == "page=2&market=crypto"

    def test_values_are_url_encoded(self):
        assert FilterCodec.serialize(FilterState(symbol="BTC/USDT")) == "symbol=BTC%2FUSDT"

    def test_emotions_comma_joined(self):
        state = FilterState(emotional_states=(Emotion.CONFIDENT, Emotion.ANXIOUS))
        assert FilterCodec.serialize(state) == "emotionalStates=CONFIDENT,ANXIOUS"


class TestParse:
    def test_parse_explicit_query(self):
        codec = FilterCodec()
        state = codec.parse("?symbol=AAPL&market=invalid&pnlFilter=profitable")
        assert state == FilterState(symbol="AAPL", pnl_filter=PnlFilter.PROFITABLE)

    def test_parse_reads_location_when_omitted(self, codec, location):
        location.replace(f"{BASE_URL}?side=Buy&dateFrom=2024-01-01")
        assert codec.parse() == FilterState(side=Side.BUY, date_from=date(2024, 1, 1))

    def test_first_occurrence_wins(self):
        assert FilterCodec().parse("symbol=A&symbol=B").symbol == "A"

    def test_percent_decoding(self):
        assert FilterCodec().parse("symbol=BTC%2FUSDT").symbol == "BTC/USDT"

    def test_no_location_parses_to_empty(self):
        assert FilterCodec().parse() == FilterState()

    def test_roundtrip_through_location(self, codec):
        state = FilterState(
            symbol="ES", market=Market.FUTURES, emotional_states=(Emotion.FOMO,),
            sort_by=SortField.PNL, sort_order=SortOrder.ASC,
        )
        codec.update(state)
        assert codec.parse() == state


class TestLocationReads:
    def test_get_param(self, codec, location):
        location.replace(f"{BASE_URL}?symbol=AAPL&page=2")
        assert codec.get_param("symbol") == "AAPL"
        assert codec.get_param("page") == "2"
        assert codec.get_param("side") is None

    def test_initialize_applies_defaults(self, codec, location):
        location.replace(f"{BASE_URL}?symbol=AAPL&sortOrder=asc")
        state = codec.initialize()
        assert state.symbol == "AAPL"
        assert state.pnl_filter == PnlFilter.ALL
        assert state.sort_by == SortField.TRADE_DATE
        assert state.sort_order == SortOrder.ASC

    def test_get_sort_params(self, codec, location):
        assert codec.get_sort_params() == (None, None)
        location.replace(f"{BASE_URL}?sortBy=symbol&sortOrder=desc")
        assert codec.get_sort_params() == (SortField.SYMBOL, SortOrder.DESC)

    def test_bookmark(self, codec, location):
        assert codec.bookmark() == ""
        location.replace(f"{BASE_URL}?symbol=ES")
        assert codec.bookmark() == "?symbol=ES"

    def test_apply_bookmark_leaves_location_alone(self, codec, location):
        state = codec.apply_bookmark("?side=Sell")
        assert state == FilterState(side=Side.SELL)
        assert location.writes == 0


class TestLocationWrites:
    def test_update_writes_once(self, codec, location):
        assert codec.update(FilterState(symbol="AAPL")) is True
        assert location.writes == 1
        assert location.read() == f"{BASE_URL}?symbol=AAPL"

    def test_update_removes_cleared_keys(self, codec, location):
        location.replace(f"{BASE_URL}?symbol=AAPL&side=Buy&page=4")
        codec.update(FilterState(side=Side.SELL))
        assert location.read() == f"{BASE_URL}?side=Sell&page=4"

    def test_update_keeps_fragment(self):
        location = InMemoryLocation("http://localhost/trades?x=1#top")
        FilterCodec(location).update(FilterState(symbol="ES"))
        assert location.read() == "http://localhost/trades?x=1&symbol=ES#top"

    def test_set_param_and_delete(self, codec, location):
        codec.set_param("symbol", "TSLA")
        codec.set_param("emotionalStates", [Emotion.FOMO, Emotion.TILT])
        assert location.read() == f"{BASE_URL}?symbol=TSLA&emotionalStates=FOMO,TILT"
        codec.set_param("symbol", None)
        assert location.read() == f"{BASE_URL}?emotionalStates=FOMO,TILT"

    def test_clear_params_keeps_foreign_keys(self, codec, location):
        location.replace(f"{BASE_URL}?symbol=A&page=2&sortBy=pnl")
        codec.clear_params()
        assert location.read() == f"{BASE_URL}?page=2"

    def test_sort_params(self, codec, location):
        location.replace(f"{BASE_URL}?symbol=A")
        codec.update_sort_params(SortField.PNL, "asc")
        assert location.read() == f"{BASE_URL}?symbol=A&sortBy=pnl&sortOrder=asc"
        codec.clear_sort_params()
        assert location.read() == f"{BASE_URL}?symbol=A"

    def test_writes_are_noops_without_location(self):
        codec = FilterCodec()
        assert codec.update(FilterState(symbol="A")) is False
        assert codec.set_param("symbol", "A") is False
        assert codec.clear_params() is False
        assert codec.current_query() == ""
        assert codec.get_param("symbol") is None
        assert codec.bookmark() == ""


class TestShareableUrl:
    def test_shareable_url(self, codec):
        url = codec.create_shareable_url(
            FilterState(market=Market.CRYPTO, pnl_filter=PnlFilter.LOSSABLE)
        )
        assert url == f"{BASE_URL}?market=crypto&pnlFilter=lossable"

    def test_shareable_url_drops_existing_query_and_fragment(self):
        codec = FilterCodec(InMemoryLocation("https://j.example/t?page=9#x"))
        assert codec.create_shareable_url(FilterState(symbol="ES")) == (
            "https://j.example/t?symbol=ES"
        )

    def test_empty_filters_have_no_trailing_question_mark(self, codec):
        assert codec.create_shareable_url(FilterState()) == BASE_URL

    def test_shareable_url_without_location(self):
        assert FilterCodec().create_shareable_url(FilterState(symbol="ES")) == ""

    def test_sortable_url(self, codec):
        url = codec.create_sortable_url(FilterState(symbol="ES"), "quantity", SortOrder.ASC)
        assert url == f"{BASE_URL}?symbol=ES&sortBy=quantity&sortOrder=asc"

    def test_shareable_url_does_not_write(self, codec, location):
        codec.create_shareable_url(FilterState(symbol="ES"))
        assert location.writes == 0
