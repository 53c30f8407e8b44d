"""Tests for app-level routes: root, health and logs."""
import json
from unittest.mock import MagicMock, patch


class TestRoot:
    def test_root(self, client):
        assert client.get("/").json()["message"] == "Hedgeboard API"


class TestHealth:
    def test_degraded_without_dependencies(self, client):
        deps = {
            "redis": {"status": "down", "latency_ms": 1.0},
            "groq": {"status": "ok"},
            "snaptrade": {"status": "not_configured"},
            "resolutions": {"status": "ok", "pairs": 3, "path": "data/resolutions.json"},
        }
        with patch("hedgeboard.api.endpoints.health.check_dependencies", return_value=deps):
            data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["dependencies"] == deps

    def test_healthy_when_all_ok(self):
        from hedgeboard.api.endpoints.health import overall_status
        assert overall_status({"a": {"status": "ok"}, "b": {"status": "ok"}}) == "healthy"


LOG_ROWS = [
    json.dumps({"level": "INFO", "component": "correlation.store", "msg": "Loaded 12 resolution pairs"}),
    json.dumps({"level": "WARNING", "component": "ai.groq_service", "msg": "Model llama-3.1-8b-instant rate limited"}),
    json.dumps({"level": "ERROR", "component": "polymarket.gamma", "msg": "Gamma API error: 500"}),
    "not json",
]


def _redis_with(rows):
    redis_client = MagicMock()
    redis_client.lrange.return_value = rows
    return redis_client


class TestLogs:
    def test_level_is_a_minimum(self, client, api_prefix):
        with patch("hedgeboard.services.log_sink.cache") as cache:
            cache.redis_client = _redis_with(LOG_ROWS)
            data = client.get(f"{api_prefix}/logs", params={"level": "warning"}).json()

        assert data["total"] == 2
        assert [e["level"] for e in data["logs"]] == ["WARNING", "ERROR"]

    def test_component_prefix_and_search(self, client, api_prefix):
        with patch("hedgeboard.services.log_sink.cache") as cache:
            cache.redis_client = _redis_with(LOG_ROWS)
            by_component = client.get(f"{api_prefix}/logs", params={"component": "AI"}).json()
            by_search = client.get(f"{api_prefix}/logs", params={"search": "gamma"}).json()

        assert [e["component"] for e in by_component["logs"]] == ["ai.groq_service"]
        assert [e["component"] for e in by_search["logs"]] == ["polymarket.gamma"]

    def test_total_counts_before_limit(self, client, api_prefix):
        with patch("hedgeboard.services.log_sink.cache") as cache:
            cache.redis_client = _redis_with(LOG_ROWS)
            data = client.get(f"{api_prefix}/logs", params={"level": "info", "limit": 1}).json()

        assert data["total"] == 3
        assert len(data["logs"]) == 1

    def test_unfiltered_reads_only_limit_rows(self, client, api_prefix):
        with patch("hedgeboard.services.log_sink.cache") as cache:
            cache.redis_client = _redis_with(LOG_ROWS[:1])
            client.get(f"{api_prefix}/logs", params={"limit": 5})

        cache.redis_client.lrange.assert_called_once_with("hedgeboard:logs", 0, 4)

    def test_unknown_level_is_400(self, client, api_prefix):
        assert client.get(f"{api_prefix}/logs", params={"level": "loud"}).status_code == 400

    def test_redis_down_returns_empty(self, client, api_prefix):
        with patch("hedgeboard.services.log_sink.cache") as cache:
            cache.redis_client.lrange.side_effect = ConnectionError("refused")
            data = client.get(f"{api_prefix}/logs").json()

        assert data["logs"] == []
        assert data["total"] == 0
        assert "refused" in data["error"]
