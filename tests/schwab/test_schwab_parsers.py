"""Tests for Schwab response parsers."""

import pytest

from options_scanner.models.chain import OptionType
from options_scanner.schwab.exceptions import SchwabAPIError
from options_scanner.schwab.parsers import (
    parse_option_chain,
    parse_price_history,
)


@pytest.fixture
def chain_response():
    """Chain response shaped like /marketdata/v1/chains."""
    return {
        "symbol": "AAPL",
        "status": "SUCCESS",
        "underlying": {"last": 101.0, "dividendYield": 0.5},
        "underlyingPrice": 100.25,
        "interestRate": 4.5,
        "volatility": 29.0,
        "callExpDateMap": {
            "2026-11-20:32": {
                "105.0": [{
                    "putCall": "CALL",
                    "symbol": "AAPL  261120C00105000",
                    "strikePrice": 105.0,
                    "bid": 2.5,
                    "ask": 2.6,
                    "mark": 2.55,
                    "delta": 0.31,
                    "volatility": 27.5,
                    "openInterest": 1200,
                    "totalVolume": 340,
                    "intrinsicValue": 0.0,
                    "extrinsicValue": 2.55,
                    "daysToExpiration": 31,
                }],
            }
        },
        "putExpDateMap": {
            "2026-11-20:32": {
                "95.0": [{"putCall": "PUT", "bid": 1.2, "ask": 1.3, "delta": -999.0}],
            }
        },
    }


class TestParseOptionChain:
    """Tests for parse_option_chain."""

    def test_underlying_fields(self, chain_response):
        chain = parse_option_chain("AAPL", chain_response)

        assert chain.symbol == "AAPL"
        assert chain.underlying_price == 100.25
        assert chain.dividend_yield == 0.5
        assert chain.interest_rate == 4.5
        assert chain.volatility == 29.0
        assert chain.status == "SUCCESS"

    def test_contract_fields(self, chain_response):
        chain = parse_option_chain("AAPL", chain_response)
        quote = chain.options_for_expiry(OptionType.CALL, "2026-11-20")["105.0"][0]

        assert quote.strike == 105.0
        assert (quote.bid, quote.ask, quote.mark) == (2.5, 2.6, 2.55)
        assert quote.delta == 0.31
        assert quote.open_interest == 1200
        assert quote.volume == 340
        assert quote.extrinsic_value == 2.55
        assert quote.expiration_date == "2026-11-20"
        assert quote.dte == 31
        assert quote.put_call == "CALL"

    def test_key_supplies_missing_fields(self, chain_response):
        """Strike and DTE fall back to the map keys."""
        chain = parse_option_chain("AAPL", chain_response)
        quote = chain.options_for_expiry(OptionType.PUT, "2026-11-20")["95.0"][0]

        assert quote.strike == 95.0
        assert quote.dte == 32

    def test_sentinel_delta_kept_for_scrub(self, chain_response):
        chain = parse_option_chain("AAPL", chain_response)
        assert chain.quote_count == 2
        assert chain.scrub_invalid_quotes() == 1

    def test_null_fields_default(self, chain_response):
        """Explicit nulls are treated like missing fields."""
        contract = chain_response["callExpDateMap"]["2026-11-20:32"]["105.0"][0]
        contract.update(mark=None, delta=None, gamma=None, openInterest=None, symbol=None)

        chain = parse_option_chain("AAPL", chain_response)
        quote = chain.options_for_expiry(OptionType.CALL, "2026-11-20")["105.0"][0]

        assert quote.mark == 0.0
        assert quote.gamma == 0.0
        assert quote.open_interest == 0
        assert quote.symbol == ""
        assert quote.delta == -999.0

    def test_null_delta_scrubbed(self, chain_response):
        contract = chain_response["callExpDateMap"]["2026-11-20:32"]["105.0"][0]
        contract["delta"] = None

        chain = parse_option_chain("AAPL", chain_response)

        assert chain.scrub_invalid_quotes() == 2
        assert chain.quote_count == 0

    def test_null_underlying_last(self, chain_response):
        del chain_response["underlyingPrice"]
        chain_response["underlying"]["last"] = None
        assert parse_option_chain("AAPL", chain_response).underlying_price == 0.0

    def test_underlying_fallback(self, chain_response):
        del chain_response["underlyingPrice"]
        chain = parse_option_chain("AAPL", chain_response)
        assert chain.underlying_price == 101.0

    def test_failed_status(self):
        with pytest.raises(SchwabAPIError, match="request failed for AAPL"):
            parse_option_chain("AAPL", {"status": "FAILED"})

    def test_empty_maps(self):
        chain = parse_option_chain("AAPL", {"underlyingPrice": 50.0})
        assert chain.quote_count == 0
        assert chain.expiry_keys() == []


class TestParsePriceHistory:
    """Tests for parse_price_history."""

    def test_candles(self):
        data = {
            "symbol": "AAPL",
            "candles": [
                {"close": 150.0, "volume": 1000000, "datetime": 1767268800000},
                {"close": 151.5, "volume": 900000, "datetime": 1767355200000},
            ],
        }
        history = parse_price_history("AAPL", data)

        assert history.closes == [150.0, 151.5]
        assert history.volumes == [1000000, 900000]
        assert len(history.dates) == 2
        assert history.dates[0] < history.dates[1]

    def test_null_candle_values(self):
        data = {"candles": [{"close": None, "volume": None, "datetime": 1767268800000}]}
        history = parse_price_history("AAPL", data)
        assert history.closes == [0.0]
        assert history.volumes == [0]

    def test_no_candles(self):
        with pytest.raises(SchwabAPIError, match="No price data returned for AAPL"):
            parse_price_history("AAPL", {"candles": [], "empty": True})
