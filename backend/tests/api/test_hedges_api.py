"""Tests for the /hedges endpoints."""
from unittest.mock import AsyncMock, MagicMock, patch

from hedgeboard.services.ai.hedge_analysis import HedgeAnalysis, HedgeAnalysisError


def _groq(available=True):
    groq = MagicMock()
    groq.is_available.return_value = available
    groq.get_usage_stats.return_value = {"available": available, "requests": {}}
    return groq


class TestAnalyze:
    def test_empty_portfolio(self, client, api_prefix):
        response = client.post(f"{api_prefix}/hedges/analyze", json={"portfolio": []})
        assert response.status_code == 400

    def test_groq_unavailable(self, client, api_prefix):
        with patch("hedgeboard.api.endpoints.hedges.get_groq_service", return_value=_groq(False)):
            response = client.post(f"{api_prefix}/hedges/analyze", json={"portfolio": [{"ticker": "AAPL"}]})
        assert response.status_code == 503

    def test_success(self, client, api_prefix):
        analyzer = MagicMock()
        analyzer.analyze = AsyncMock(return_value=HedgeAnalysis(summary="ok", stocks_without_hedges=["AAPL"]))

        with patch("hedgeboard.api.endpoints.hedges.get_groq_service", return_value=_groq()), \
             patch("hedgeboard.api.endpoints.hedges.get_hedge_analyzer", return_value=analyzer):
            response = client.post(f"{api_prefix}/hedges/analyze", json={
                "portfolio": [{"ticker": "AAPL", "shares": 10}],
            })

        assert response.status_code == 200
        assert response.json() == {"summary": "ok", "recommendations": [], "stocksWithoutHedges": ["AAPL"]}
        analyzer.analyze.assert_awaited_once_with([{"ticker": "AAPL", "shares": 10.0}])

    def test_all_models_failed(self, client, api_prefix):
        analyzer = MagicMock()
        analyzer.analyze = AsyncMock(side_effect=HedgeAnalysisError())

        with patch("hedgeboard.api.endpoints.hedges.get_groq_service", return_value=_groq()), \
             patch("hedgeboard.api.endpoints.hedges.get_hedge_analyzer", return_value=analyzer):
            response = client.post(f"{api_prefix}/hedges/analyze", json={"portfolio": [{"ticker": "AAPL"}]})

        assert response.status_code == 503
        assert response.json()["detail"].startswith("All models failed")


class TestStatus:
    def test_usage_stats(self, client, api_prefix):
        with patch("hedgeboard.api.endpoints.hedges.get_groq_service", return_value=_groq()):
            response = client.get(f"{api_prefix}/hedges/status")
        assert response.json() == {"available": True, "requests": {}}
