"""
Tests for the resolution backfill.

Covers:
- A) Event-to-stock pairing drops unmatched events
- B) Price fill counts found prices
- C) Full run writes data/resolutions.json in camelCase
- D) No events means nothing is written

All tests use mocked providers - no live network calls.
"""
import json
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from hedgeboard.config import get_settings
from hedgeboard.models.resolution import ResolvedEvent
from hedgeboard.services.backfill import ResolutionBackfill, build_pairs


NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def _event(event_id, title, topic="other"):
    return ResolvedEvent(
        event_id=event_id,
        title=title,
        slug=f"event-{event_id}",
        description="",
        resolution_date="2025-03-01T00:00:00Z",
        outcome="YES",
        final_probability=0.99,
        topic=topic,
    )


@pytest.fixture
def polymarket():
    svc = MagicMock()
    svc.fetch_resolved_events = AsyncMock(return_value=[
        _event("1", "Will Netflix raise prices?"),
        _event("2", "Who wins?"),
    ])
    return svc


@pytest.fixture
def yahoo():
    svc = MagicMock()
    svc.fetch_stock_price = AsyncMock(return_value=412.5)
    return svc


@pytest.fixture
def backfill(polymarket, yahoo):
    bf = ResolutionBackfill(polymarket=polymarket, yahoo=yahoo)
    bf.settings = get_settings().model_copy(update={"BACKFILL_PRICE_DELAY_SECONDS": 0})
    return bf


class TestBuildPairs:
    def test_unmatched_events_are_dropped(self):
        pairs = build_pairs([_event("1", "Will Netflix raise prices?"), _event("2", "Who wins?")])

        assert len(pairs) == 1
        assert pairs[0].event.event_id == "1"
        assert pairs[0].matched_stocks[0].ticker == "NFLX"
        assert pairs[0].matched_stocks[0].price_on_resolution is None
        assert pairs[0].matched_stocks[0].resolution_date == "2025-03-01T00:00:00Z"

    def test_match_reasons_joined(self):
        pairs = build_pairs([_event("1", "Will Apple release a foldable iPhone?")])
        assert pairs[0].match_reason.startswith('Direct mention: "Apple"; Keyword correlation:')


class TestFillPrices:
    @pytest.mark.asyncio
    async def test_counts_found_prices(self, backfill, yahoo):
        yahoo.fetch_stock_price = AsyncMock(side_effect=[100.0, None, 55.5, 1.0])
        pairs = build_pairs([_event("1", "Will Apple release a foldable iPhone?")])

        found = await backfill.fill_prices(pairs)

        assert found == 3
        assert [s.price_on_resolution for s in pairs[0].matched_stocks] == [100.0, None, 55.5, 1.0]


class TestRun:
    @pytest.mark.asyncio
    async def test_writes_camel_case_document(self, backfill, tmp_path):
        output = tmp_path / "data" / "resolutions.json"

        data = await backfill.run(years_back=3, output_path=str(output), now=NOW)

        assert data.total_events == 2
        assert data.total_matches == 1
        assert data.date_from == "2022-06-01"
        assert data.date_to == "2025-06-01"

        written = json.loads(output.read_text())
        assert set(written) == {"generatedAt", "totalEvents", "totalMatches", "dateRange", "pairs"}
        assert written["dateRange"] == {"from": "2022-06-01", "to": "2025-06-01"}
        stock = written["pairs"][0]["matchedStocks"][0]
        assert stock == {
            "ticker": "NFLX",
            "companyName": "Netflix",
            "priceOnResolution": 412.5,
            "resolutionDate": "2025-03-01T00:00:00Z",
        }

    @pytest.mark.asyncio
    async def test_skip_prices(self, backfill, yahoo, tmp_path):
        data = await backfill.run(output_path=str(tmp_path / "r.json"), skip_prices=True, now=NOW)

        yahoo.fetch_stock_price.assert_not_awaited()
        assert data.pairs[0].matched_stocks[0].price_on_resolution is None

    @pytest.mark.asyncio
    async def test_no_events_writes_nothing(self, backfill, polymarket, tmp_path):
        polymarket.fetch_resolved_events = AsyncMock(return_value=[])
        output = tmp_path / "r.json"

        assert await backfill.run(output_path=str(output), now=NOW) is None
        assert not output.exists()

    @pytest.mark.asyncio
    async def test_zero_years_back_is_kept(self, backfill, polymarket, tmp_path):
        data = await backfill.run(years_back=0, output_path=str(tmp_path / "r.json"), now=NOW)

        polymarket.fetch_resolved_events.assert_awaited_once_with(years_back=0, now=NOW)
        assert data.date_from == "2025-06-01"
