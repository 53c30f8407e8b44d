"""
Yahoo Finance client - historical closes for the resolution backfill and
ticker/topic news search for the news feed.
"""

import html
import re
import aiohttp
from datetime import timedelta
from typing import Optional, Dict, Any, List
from loguru import logger

from hedgeboard.config import get_settings
from hedgeboard.utils.dates import parse_iso_datetime


# Price window around the target date (weekends and holidays have no bar)
DAYS_BEFORE = 5
DAYS_AFTER = 1


class YahooFinanceService:
    """Thin async wrapper over Yahoo's public chart and search endpoints."""

    def __init__(self):
        self.settings = get_settings()
        self.base_url = self.settings.YAHOO_FINANCE_URL
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=10),
                headers={
                    'Accept': 'application/json',
                    'User-Agent': 'Mozilla/5.0',
                }
            )
        return self._session

    async def close(self):
        """Close the aiohttp session"""
        if self._session and not self._session.closed:
            await self._session.close()

    @staticmethod
    def _clean_html(text: str) -> str:
        """Remove HTML tags and decode entities"""
        if not text:
            return ""
        text = html.unescape(text)
        text = re.sub(r'<[^>]+>', '', text)
        return ' '.join(text.split())

    # -------------------------------------------------------------------------
    # HISTORICAL PRICES
    # -------------------------------------------------------------------------

    @staticmethod
    def _closest_close(result: Dict[str, Any], target_ts: int) -> Optional[float]:
        timestamps = result.get('timestamp') or []
        quotes = (result.get('indicators') or {}).get('quote') or [{}]
        closes = quotes[0].get('close') or []

        if not timestamps:
            return None

        closest_idx = min(range(len(timestamps)), key=lambda i: abs(timestamps[i] - target_ts))
        if closest_idx >= len(closes):
            return None

        price = closes[closest_idx]
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            return None
        return round(float(price), 2)

    async def fetch_stock_price(self, ticker: str, date: str) -> Optional[float]:
        """
        Closing price of ``ticker`` nearest to ``date`` (ISO string), rounded
        to cents. Returns None when Yahoo has no data or the request fails.
        """
        target = parse_iso_datetime(date)
        if target is None:
            logger.warning(f"Unparseable date for {ticker}: {date!r}")
            return None

        period1 = int((target - timedelta(days=DAYS_BEFORE)).timestamp())
        period2 = int((target + timedelta(days=DAYS_AFTER)).timestamp())
        params = {'period1': period1, 'period2': period2, 'interval': '1d'}

        try:
            session = await self._get_session()
            async with session.get(
                f"{self.base_url}/v8/finance/chart/{ticker}", params=params
            ) as response:
                if response.status != 200:
                    logger.error(f"Yahoo Finance error for {ticker}: {response.status}")
                    return None
                data = await response.json()
        except Exception as e:
            logger.error(f"Error fetching price for {ticker}: {e}")
            return None

        results = (data.get('chart') or {}).get('result') or []
        if not results:
            return None

        return self._closest_close(results[0], int(target.timestamp()))

    # -------------------------------------------------------------------------
    # NEWS SEARCH
    # -------------------------------------------------------------------------

    def _format_article(self, item: Dict[str, Any]) -> Dict[str, Any]:
        summary = (
            item.get('summary') or item.get('description') or item.get('excerpt')
            or item.get('snippet') or item.get('text') or ''
        )
        publisher = item.get('publisher') or item.get('source') or ''
        return {
            'title': item.get('title') or '',
            'summary': self._clean_html(summary),
            'url': item.get('link') or '',
            'publisher': publisher,
            'publish_time': item.get('providerPublishTime'),
            'uuid': item.get('uuid') or '',
        }

    async def search_news(
        self,
        query: str,
        news_count: int = 10,
        quotes_count: int = 0,
    ) -> List[Dict[str, Any]]:
        """Search Yahoo Finance news for a ticker or free-text query."""
        params = {'q': query, 'quotesCount': quotes_count, 'newsCount': news_count}
        try:
            session = await self._get_session()
            async with session.get(
                f"{self.base_url}/v1/finance/search", params=params
            ) as response:
                if response.status != 200:
                    logger.warning(f"Yahoo news search failed for '{query}': {response.status}")
                    return []
                data = await response.json()
        except Exception as e:
            logger.error(f"Error fetching news for '{query}': {e}")
            return []

        news = data.get('news') if isinstance(data, dict) else None
        if not isinstance(news, list):
            return []
        return [self._format_article(item) for item in news]


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_yahoo_service: Optional[YahooFinanceService] = None


def get_yahoo_service() -> YahooFinanceService:
    """Get the global Yahoo Finance service instance."""
    global _yahoo_service
    if _yahoo_service is None:
        _yahoo_service = YahooFinanceService()
    return _yahoo_service
