"""
Tests for HedgeAnalyzer - Polymarket hedges for a portfolio.

Covers:
- A) Recommendation defaults and coercion
- B) Ordering, dedup and URL enrichment of the model's answer
- C) Candidate market ranking by portfolio overlap
- D) Per-model fallback on unparseable output, caching, total failure

All tests use mocked providers - no live network calls.
"""
import json
import pytest
from unittest.mock import AsyncMock, MagicMock

from hedgeboard.services.ai.groq_service import ResponseParser
from hedgeboard.services.ai.hedge_analysis import (
    HedgeAnalysis,
    HedgeAnalysisError,
    HedgeAnalyzer,
    normalize_analysis,
    normalize_recommendation,
    select_candidate_markets,
)


MARKETS = [
    {
        "id": "1",
        "question": "Will the Fed cut rates in June?",
        "description": "",
        "slug": "fed-june",
        "url": "https://polymarket.com/event/fed-june",
        "outcomes": [{"name": "Yes", "probability": 0.3}, {"name": "No", "probability": 0.7}],
        "volume": 1000000.0,
        "end_date": "2025-06-30T00:00:00Z",
    },
    {
        "id": "2",
        "question": "Will Tesla deliver 2M cars in 2025?",
        "description": "",
        "slug": "tesla-deliveries",
        "url": "https://polymarket.com/event/tesla-deliveries",
        "outcomes": [{"name": "Yes", "probability": 0.2}],
        "volume": 50000.0,
        "end_date": "2025-12-31T00:00:00Z",
    },
    {
        "id": "3",
        "question": "Who wins the Super Bowl?",
        "description": "",
        "slug": "super-bowl",
        "url": "https://polymarket.com/event/super-bowl",
        "outcomes": [],
        "volume": 900000.0,
        "end_date": None,
    },
]


def _answer(recommendations, summary="Found hedges", without=None):
    return json.dumps({
        "summary": summary,
        "recommendations": recommendations,
        "stocksWithoutHedges": without or [],
    })


# =============================================================================
# A) RECOMMENDATION DEFAULTS
# =============================================================================

class TestNormalizeRecommendation:
    def test_defaults(self):
        rec = normalize_recommendation({"market": "Q"})

        assert rec.outcome == "Yes"
        assert rec.probability == 0.5
        assert rec.position == "YES"
        assert rec.suggested_allocation == 100
        assert rec.affected_stocks == []
        assert rec.confidence == "high"

    def test_outcome_falls_back_to_position(self):
        assert normalize_recommendation({"position": "NO"}).outcome == "NO"

    @pytest.mark.parametrize("value", [0, "abc", None, float("nan"), True])
    def test_bad_numbers_use_defaults(self, value):
        rec = normalize_recommendation({"probability": value, "suggestedAllocation": value})
        assert rec.probability == 0.5
        assert rec.suggested_allocation == 100

    def test_string_numbers_coerced(self):
        rec = normalize_recommendation({"probability": "0.42", "suggestedAllocation": "250"})
        assert rec.probability == 0.42
        assert rec.suggested_allocation == 250.0

    def test_out_of_range_numbers_are_kept(self):
        rec = normalize_recommendation({"probability": 1.7, "suggestedAllocation": 50000})
        assert rec.probability == 1.7
        assert rec.suggested_allocation == 50000

    def test_confidence_and_position(self):
        rec = normalize_recommendation({"confidence": "medium", "position": "NO"})
        assert rec.confidence == "medium"
        assert rec.position == "NO"
        assert normalize_recommendation({"confidence": "low", "position": "maybe"}).confidence == "high"

    def test_affected_stocks_not_a_list(self):
        assert normalize_recommendation({"affectedStocks": "AAPL"}).affected_stocks == []


# =============================================================================
# B) ANALYSIS NORMALIZATION
# =============================================================================

class TestNormalizeAnalysis:
    def test_sorted_by_affected_count_and_deduped(self):
        parsed = {
            "summary": "s",
            "recommendations": [
                {"market": "Will Tesla deliver 2M cars in 2025?", "affectedStocks": ["TSLA"]},
                {"market": "Will the Fed cut rates in June?", "affectedStocks": ["AAPL", "MSFT", "JPM"]},
                {"market": "will the fed  cut rates in june?", "affectedStocks": ["AAPL"]},
                "not a dict",
            ],
            "stocksWithoutHedges": ["JNJ"],
        }

        analysis = normalize_analysis(parsed, MARKETS)

        assert [r.market for r in analysis.recommendations] == [
            "Will the Fed cut rates in June?",
            "Will Tesla deliver 2M cars in 2025?",
        ]
        assert analysis.recommendations[0].market_url == "https://polymarket.com/event/fed-june"
        assert analysis.recommendations[0].end_date == "2025-06-30T00:00:00Z"
        assert analysis.stocks_without_hedges == ["JNJ"]

    def test_unknown_market_has_no_url(self):
        analysis = normalize_analysis({"recommendations": [{"market": "Made up"}]}, MARKETS)

        rec = analysis.recommendations[0]
        assert rec.market_url == ""
        assert "endDate" not in rec.to_dict()

    def test_missing_fields(self):
        analysis = normalize_analysis({}, MARKETS)

        assert analysis.summary == "Analysis complete."
        assert analysis.recommendations == []
        assert analysis.stocks_without_hedges == []

    def test_to_dict_camel_case(self):
        analysis = normalize_analysis({"recommendations": [{
            "market": "Will Tesla deliver 2M cars in 2025?",
            "hedgesAgainst": "Delivery miss",
            "affectedStocks": ["TSLA"],
        }]}, MARKETS)

        data = analysis.to_dict()
        rec = data["recommendations"][0]
        assert rec["marketUrl"] == "https://polymarket.com/event/tesla-deliveries"
        assert rec["hedgesAgainst"] == "Delivery miss"
        assert rec["endDate"] == "2025-12-31T00:00:00Z"
        assert set(data) == {"summary", "recommendations", "stocksWithoutHedges"}


# =============================================================================
# C) CANDIDATE MARKETS
# =============================================================================

class TestSelectCandidateMarkets:
    def test_overlap_first_then_volume_order(self):
        selected = select_candidate_markets(MARKETS, ["tsla"])
        assert [m["id"] for m in selected] == ["2", "1", "3"]

    def test_limit(self):
        assert len(select_candidate_markets(MARKETS, ["TSLA"], limit=2)) == 2

    def test_no_overlap_keeps_order(self):
        assert [m["id"] for m in select_candidate_markets(MARKETS, ["ZZZZ"])] == ["1", "2", "3"]


# =============================================================================
# D) ANALYZER
# =============================================================================

@pytest.fixture
def groq():
    svc = MagicMock()
    svc.is_available.return_value = True
    svc.complete = AsyncMock()
    svc.get_cached.return_value = None
    svc.parser = ResponseParser()
    return svc


@pytest.fixture
def polymarket():
    svc = MagicMock()
    svc.fetch_active_markets = AsyncMock(return_value=list(MARKETS))
    return svc


@pytest.fixture
def analyzer(groq, polymarket):
    return HedgeAnalyzer(groq=groq, polymarket=polymarket)


class TestNormalizePortfolio:
    def test_names_from_dictionary(self):
        holdings = HedgeAnalyzer.normalize_portfolio([
            {"ticker": " aapl ", "shares": 10},
            {"ticker": "brk.b", "shares": 1},
            {"ticker": "ZZZZ"},
            {"ticker": ""},
        ])

        assert holdings == [
            {"ticker": "AAPL", "shares": 10, "name": "Apple"},
            {"ticker": "BRK.B", "shares": 1, "name": "Berkshire Hathaway"},
            {"ticker": "ZZZZ", "shares": 0, "name": "ZZZZ"},
        ]


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_unparseable_output_moves_to_next_model(self, analyzer, groq):
        groq.complete.side_effect = [
            ("I cannot answer that", None),
            (None, None),
            (_answer([{"market": "Will Tesla deliver 2M cars in 2025?", "affectedStocks": ["TSLA"]}]), None),
        ]

        analysis = await analyzer.analyze([{"ticker": "TSLA", "shares": 5}])

        assert isinstance(analysis, HedgeAnalysis)
        assert analysis.summary == "Found hedges"
        assert analysis.recommendations[0].market_url == "https://polymarket.com/event/tesla-deliveries"
        models_tried = [c.kwargs["models"] for c in groq.complete.call_args_list]
        assert models_tried == [[m] for m in analyzer.settings.GROQ_MODELS[:3]]
        groq.set_cached.assert_called_once()

    @pytest.mark.asyncio
    async def test_prompt_lists_portfolio_and_markets(self, analyzer, groq):
        groq.complete.return_value = (_answer([]), None)

        await analyzer.analyze([{"ticker": "TSLA", "shares": 5}])

        prompt = groq.complete.call_args.args[0]
        assert "- TSLA (Tesla): 5 shares" in prompt
        assert '1. "Will Tesla deliver 2M cars in 2025?" [Yes: 0.20] (ends 2025-12-31)' in prompt
        assert groq.complete.call_args.kwargs["max_tokens"] == 2500

    @pytest.mark.asyncio
    async def test_all_models_fail(self, analyzer, groq):
        groq.complete.return_value = (None, None)

        with pytest.raises(HedgeAnalysisError, match="All models failed"):
            await analyzer.analyze([{"ticker": "TSLA", "shares": 5}])

        assert groq.complete.await_count == len(analyzer.settings.GROQ_MODELS)

    @pytest.mark.asyncio
    async def test_cached_result(self, analyzer, groq, polymarket):
        cached = HedgeAnalysis(summary="cached")
        groq.get_cached.return_value = cached

        assert await analyzer.analyze([{"ticker": "TSLA", "shares": 5}]) is cached
        polymarket.fetch_active_markets.assert_not_awaited()
        assert groq.get_cached.call_args.args == ("hedge:TSLA=5", "hedge_analysis")
