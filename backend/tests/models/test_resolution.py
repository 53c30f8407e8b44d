"""Tests for the resolution backfill records."""
from hedgeboard.models.resolution import BackfillData, ResolvedEvent


class TestResolvedEventFromDict:
    def test_defaults_for_missing_fields(self):
        event = ResolvedEvent.from_dict({"eventId": 7, "title": "T"})

        assert event.event_id == "7"
        assert event.outcome == "UNKNOWN"
        assert event.final_probability is None
        assert event.topic == "other"

    def test_bad_probability_is_none(self):
        assert ResolvedEvent.from_dict({"finalProbability": "n/a"}).final_probability is None


class TestBackfillData:
    def test_from_dict_reads_nested_pairs(self):
        data = BackfillData.from_dict({
            "generatedAt": "2025-06-01T00:00:00+00:00",
            "totalEvents": 10,
            "totalMatches": 1,
            "dateRange": {"from": "2022-06-01", "to": "2025-06-01"},
            "pairs": [{
                "event": {"eventId": "1", "title": "Will Netflix raise prices?", "outcome": "NO"},
                "matchedStocks": [{"ticker": "NFLX", "companyName": "Netflix", "priceOnResolution": 600.1}],
                "matchReason": 'Direct mention: "Netflix"',
            }],
        })

        assert data.total_events == 10
        assert data.date_from == "2022-06-01"
        assert data.pairs[0].event.outcome == "NO"
        assert data.pairs[0].matched_stocks[0].price_on_resolution == 600.1

    def test_empty(self):
        data = BackfillData.empty()
        assert data.pairs == []
        assert data.to_dict()["dateRange"] == {"from": "", "to": ""}
