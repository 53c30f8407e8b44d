"""
Tests for ResolutionStore - read access to data/resolutions.json.

Covers:
- A) Missing and corrupt files load as an empty dataset
- B) Historical bets are deduplicated on title + ticker
- C) Training rows and CSV export
- D) Resolution stats and top companies
"""
import json
import pytest

from hedgeboard.services.correlation.store import ResolutionStore, to_csv


def _pair(title, outcome, stocks, description=""):
    return {
        "event": {
            "eventId": title[:8],
            "title": title,
            "description": description,
            "outcome": outcome,
            "resolutionDate": "2024-05-01T00:00:00Z",
        },
        "matchedStocks": [
            {
                "ticker": ticker,
                "companyName": company,
                "priceOnResolution": price,
                "resolutionDate": "2024-05-01T00:00:00Z",
            }
            for ticker, company, price in stocks
        ],
        "matchReason": "test",
    }


@pytest.fixture
def resolutions_file(tmp_path):
    path = tmp_path / "resolutions.json"
    path.write_text(json.dumps({
        "generatedAt": "2025-06-01T00:00:00+00:00",
        "totalEvents": 120,
        "totalMatches": 3,
        "dateRange": {"from": "2022-06-01", "to": "2025-06-01"},
        "pairs": [
            _pair("Will Tesla recall the Cybertruck?", "YES",
                  [("TSLA", "Tesla", 180.5), ("GM", "safety_incident", None)]),
            _pair("Will Tesla recall the Cybertruck?", "YES",
                  [("TSLA", "Tesla", 180.5)]),
            _pair("Will Tesla launch a robotaxi?", "NO",
                  [("TSLA", "Tesla", None)]),
        ],
    }))
    return path


@pytest.fixture
def store(resolutions_file):
    return ResolutionStore(str(resolutions_file))


# =============================================================================
# A) LOADING
# =============================================================================

class TestLoading:
    def test_missing_file_is_empty(self, tmp_path):
        store = ResolutionStore(str(tmp_path / "nope.json"))
        assert store.data.pairs == []
        assert store.get_all_historical_bets() == []

    def test_corrupt_file_is_empty(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert ResolutionStore(str(path)).data.total_events == 0

    def test_loaded_once(self, store, resolutions_file):
        assert len(store.data.pairs) == 3
        resolutions_file.write_text(json.dumps({"pairs": []}))
        assert len(store.data.pairs) == 3

    def test_reload(self, store, resolutions_file):
        assert len(store.data.pairs) == 3
        resolutions_file.write_text(json.dumps({"pairs": []}))
        assert store.reload().pairs == []


# =============================================================================
# B) HISTORICAL BETS
# =============================================================================

class TestHistoricalBets:
    def test_dedup_on_title_and_ticker(self, store):
        bets = store.get_all_historical_bets()

        assert [(b["title"], b["ticker"]) for b in bets] == [
            ("Will Tesla recall the Cybertruck?", "TSLA"),
            ("Will Tesla recall the Cybertruck?", "GM"),
            ("Will Tesla launch a robotaxi?", "TSLA"),
        ]

    def test_missing_price_is_zero(self, store):
        bets = store.get_all_historical_bets()
        assert bets[0]["price"] == 180.5
        assert bets[1]["price"] == 0
        assert bets[0]["date"] == "2024-05-01T00:00:00Z"
        assert bets[2]["outcome"] == "NO"


# =============================================================================
# C) TRAINING DATA
# =============================================================================

class TestTrainingData:
    def test_rows(self, store):
        rows = store.get_training_data()

        assert len(rows) == 4
        assert rows[0] == {
            "company": "Tesla",
            "ticker": "TSLA",
            "eventCategory": "general",
            "outcome": 1,
            "hadPriceData": 1,
        }
        assert rows[1]["hadPriceData"] == 0
        assert rows[3]["outcome"] == 0
        assert rows[3]["eventCategory"] == "product_launch"

    def test_csv_export(self, store):
        csv = to_csv(store.get_training_data())
        lines = csv.split("\n")

        assert lines[0] == "company,ticker,eventCategory,outcome,hadPriceData"
        assert lines[1] == "Tesla,TSLA,general,1,1"
        assert len(lines) == 5

    def test_csv_quotes_commas(self):
        csv = to_csv([{"company": "Foo, Inc", "note": 'say "hi"'}])
        assert csv.split("\n")[1] == '"Foo, Inc","say ""hi"""'

    def test_csv_empty(self):
        assert to_csv([]) == ""


# =============================================================================
# D) STATS
# =============================================================================

class TestResolutionStats:
    def test_stats(self, store):
        stats = store.get_resolution_stats()

        assert stats["totalEvents"] == 120
        assert stats["totalMatches"] == 3
        assert stats["dateRange"] == {"from": "2022-06-01", "to": "2025-06-01"}
        assert stats["topCompanies"] == [
            {"company": "Tesla", "count": 3},
            {"company": "safety_incident", "count": 1},
        ]

    def test_empty_stats(self, tmp_path):
        stats = ResolutionStore(str(tmp_path / "none.json")).get_resolution_stats()
        assert stats["topCompanies"] == []
        assert stats["totalEvents"] == 0
