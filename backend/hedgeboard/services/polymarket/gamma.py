"""
Polymarket Gamma API client - resolved events for the backfill and open
markets for hedge analysis.
"""

import asyncio
import json
import aiohttp
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Tuple
from loguru import logger

from hedgeboard.config import get_settings
from hedgeboard.models.resolution import ResolvedEvent
from hedgeboard.services.cache import cache, cache_key
from hedgeboard.services.matching.topics import extract_topic
from hedgeboard.utils.dates import parse_iso_datetime, years_ago


# Resolution thresholds on the first outcome price
YES_THRESHOLD = 0.95
NO_THRESHOLD = 0.05

EVENT_URL = "https://polymarket.com/event/{slug}"


def parse_outcome_prices(prices: Any) -> List[float]:
    """outcomePrices arrives either as a JSON-encoded string or a list."""
    if not prices:
        return []
    if isinstance(prices, str):
        try:
            prices = json.loads(prices)
        except (json.JSONDecodeError, ValueError):
            return []
    if not isinstance(prices, list):
        return []
    try:
        return [float(p) for p in prices]
    except (TypeError, ValueError):
        return []


def resolve_outcome(event: Dict[str, Any]) -> Tuple[str, Optional[float]]:
    """Derive (outcome, final_probability) from the event's first market."""
    markets = event.get("markets")
    if not isinstance(markets, list) or not markets:
        return "UNKNOWN", None

    prices = parse_outcome_prices(markets[0].get("outcomePrices"))
    if not prices:
        return "UNKNOWN", None

    probability = prices[0]
    if probability > YES_THRESHOLD:
        return "YES", probability
    if probability < NO_THRESHOLD:
        return "NO", probability
    return "UNKNOWN", probability


class PolymarketService:
    """
    Client for Polymarket's Gamma API.
    Closed events feed the resolution backfill; open markets are the hedge
    candidates shown to the LLM.
    """

    def __init__(self):
        self.settings = get_settings()
        self.base_url = self.settings.POLYMARKET_GAMMA_URL
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=15),
                headers={
                    'Accept': 'application/json',
                    'User-Agent': 'Hedgeboard/1.0'
                }
            )
        return self._session

    async def close(self):
        """Close the aiohttp session"""
        if self._session and not self._session.closed:
            await self._session.close()

    # -------------------------------------------------------------------------
    # RESOLVED EVENTS (BACKFILL)
    # -------------------------------------------------------------------------

    async def _fetch_events_page(self, offset: int, limit: int) -> Optional[List[Dict]]:
        """One page of closed events; None on a non-200 response."""
        session = await self._get_session()
        params = {'closed': 'true', 'limit': limit, 'offset': offset}

        async with session.get(f"{self.base_url}/events", params=params) as response:
            if response.status != 200:
                logger.error(f"Gamma API error: {response.status}")
                return None
            data = await response.json()
            return data if isinstance(data, list) else []

    async def fetch_resolved_events(
        self,
        years_back: int = None,
        now: datetime = None,
    ) -> List[ResolvedEvent]:
        """
        Page through closed events and keep those that resolved within the
        last ``years_back`` years.

        Paging stops after BACKFILL_MAX_OFFSET events scanned, more than
        BACKFILL_MAX_EVENTS kept, a short page, or any error.
        """
        if years_back is None:
            years_back = self.settings.BACKFILL_YEARS_BACK
        limit = self.settings.BACKFILL_PAGE_SIZE
        today = now or datetime.now(timezone.utc)
        cutoff = years_ago(today, years_back)

        logger.info(
            f"Fetching events resolved between {cutoff.date().isoformat()} "
            f"and {today.date().isoformat()}"
        )

        events: List[ResolvedEvent] = []
        offset = 0
        skipped_future = 0
        skipped_too_old = 0

        while True:
            try:
                if offset % 500 == 0:
                    logger.info(f"Fetching batch at offset {offset}...")

                page = await self._fetch_events_page(offset, limit)
                if not page:
                    break

                for raw in page:
                    date_str = raw.get('endDate') or raw.get('resolutionDate') or ''
                    event_date = parse_iso_datetime(date_str)
                    if event_date is None:
                        continue
                    if event_date > today:
                        skipped_future += 1
                        continue
                    if event_date < cutoff:
                        skipped_too_old += 1
                        continue

                    outcome, probability = resolve_outcome(raw)
                    title = raw.get('title') or ''
                    description = raw.get('description') or ''

                    events.append(ResolvedEvent(
                        event_id=str(raw.get('id') or ''),
                        title=title,
                        slug=raw.get('slug') or '',
                        description=description,
                        resolution_date=date_str,
                        outcome=outcome,
                        final_probability=probability,
                        topic=extract_topic(title, description).value,
                    ))

                offset += limit
                await asyncio.sleep(self.settings.BACKFILL_PAGE_DELAY_SECONDS)

                if offset % 1000 == 0:
                    logger.info(
                        f"Progress: scanned {offset} events, found {len(events)} valid, "
                        f"skipped {skipped_future} future, {skipped_too_old} too old"
                    )

                if (offset > self.settings.BACKFILL_MAX_OFFSET
                        or len(events) > self.settings.BACKFILL_MAX_EVENTS
                        or len(page) < limit):
                    break

            except Exception as e:
                logger.error(f"Error fetching resolved events: {e}")
                break

        logger.info(
            f"Found {len(events)} events resolved in the last {years_back} years "
            f"(skipped {skipped_future} future, {skipped_too_old} too old)"
        )
        return events

    # -------------------------------------------------------------------------
    # OPEN MARKETS (HEDGE CANDIDATES)
    # -------------------------------------------------------------------------

    @staticmethod
    def _format_market(market: Dict[str, Any]) -> Dict[str, Any]:
        outcomes = market.get('outcomes') or []
        if isinstance(outcomes, str):
            try:
                outcomes = json.loads(outcomes)
            except (json.JSONDecodeError, ValueError):
                outcomes = []
        prices = parse_outcome_prices(market.get('outcomePrices'))

        slug = market.get('slug') or ''
        parent_events = market.get('events') or []
        if isinstance(parent_events, list) and parent_events and isinstance(parent_events[0], dict):
            slug = parent_events[0].get('slug') or slug

        try:
            volume = float(market.get('volume') or 0)
        except (TypeError, ValueError):
            volume = 0.0

        return {
            'id': str(market.get('id') or ''),
            'question': market.get('question') or market.get('title') or '',
            'description': market.get('description') or '',
            'slug': slug,
            'url': EVENT_URL.format(slug=slug) if slug else '',
            'outcomes': [
                {'name': str(name), 'probability': prices[i] if i < len(prices) else None}
                for i, name in enumerate(outcomes)
            ],
            'volume': volume,
            'end_date': market.get('endDate'),
        }

    async def fetch_active_markets(self, limit: int = 100) -> List[Dict[str, Any]]:
        """Open markets ordered by volume, cached for CACHE_TTL_MARKETS."""
        key = cache_key("markets", "active", limit)
        cached = cache.get(key)
        if cached:
            return cached

        try:
            session = await self._get_session()
            params = {
                'limit': limit,
                'active': 'true',
                'closed': 'false',
                'order': 'volume',
                'ascending': 'false',
            }
            async with session.get(f"{self.base_url}/markets", params=params) as response:
                if response.status != 200:
                    logger.warning(f"Polymarket markets returned status {response.status}")
                    return []
                data = await response.json()
        except Exception as e:
            logger.error(f"Error fetching Polymarket markets: {e}")
            return []

        raw_markets = data if isinstance(data, list) else data.get('markets', [])
        markets = [self._format_market(m) for m in raw_markets]
        markets = [m for m in markets if m['question']]
        logger.info(f"Polymarket: fetched {len(markets)} active markets")

        cache.set(key, markets, ttl=self.settings.CACHE_TTL_MARKETS)
        return markets


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_polymarket_service: Optional[PolymarketService] = None


def get_polymarket_service() -> PolymarketService:
    """Get the global Polymarket service instance."""
    global _polymarket_service
    if _polymarket_service is None:
        _polymarket_service = PolymarketService()
    return _polymarket_service
