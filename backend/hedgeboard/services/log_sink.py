"""
Loguru sink that mirrors recent log records into Redis so the dashboard can
show backfill, Groq and SnapTrade activity.

Entries are JSON objects in a capped Redis list, newest first. After a Redis
failure the sink stops writing for LOG_SINK_PAUSE_SECONDS.
"""
import json
import time
from typing import Any, Dict, List

from hedgeboard.config import get_settings
from hedgeboard.services.cache import cache

LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]

_paused_until = 0.0


def component_of(module_name: str) -> str:
    """'hedgeboard.services.polymarket.gamma' -> 'polymarket.gamma'"""
    name = module_name or ""
    for prefix in ("hedgeboard.services.", "hedgeboard."):
        if name.startswith(prefix):
            return name[len(prefix):]
    return name


def to_entry(record) -> Dict[str, Any]:
    entry = {
        "ts": record["time"].isoformat(timespec="milliseconds"),
        "level": record["level"].name,
        "component": component_of(record["name"]),
        "func": record["function"],
        "line": record["line"],
        "msg": str(record["message"]),
    }
    if record["exception"] is not None:
        entry["error"] = repr(record["exception"].value)
    return entry


def level_at_least(level: str, minimum: str) -> bool:
    if level not in LEVELS:
        return False
    return LEVELS.index(level) >= LEVELS.index(minimum)


def redis_log_sink(message):
    """Registered in main.py with ``logger.add(redis_log_sink, level="INFO")``."""
    global _paused_until

    if time.monotonic() < _paused_until:
        return

    settings = get_settings()
    payload = json.dumps(to_entry(message.record), default=str)
    try:
        client = cache.redis_client
        client.lpush(settings.LOG_BUFFER_KEY, payload)
        client.ltrim(settings.LOG_BUFFER_KEY, 0, settings.LOG_BUFFER_SIZE - 1)
    except Exception:
        _paused_until = time.monotonic() + settings.LOG_SINK_PAUSE_SECONDS


def read_entries(count: int) -> List[Dict[str, Any]]:
    """
    Up to ``count`` buffered entries, newest first. Rows that are not JSON
    objects are skipped; Redis errors propagate to the caller.
    """
    settings = get_settings()
    raw = cache.redis_client.lrange(settings.LOG_BUFFER_KEY, 0, count - 1)

    entries = []
    for row in raw:
        try:
            entry = json.loads(row)
        except (json.JSONDecodeError, TypeError):
            continue
        if isinstance(entry, dict):
            entries.append(entry)
    return entries
