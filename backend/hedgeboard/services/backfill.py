"""
Resolution backfill - builds data/resolutions.json.

Steps:
  1. Fetch resolved Polymarket events
  2. Match each event to stocks (unmatched events are dropped)
  3. Look up each matched stock's close on the resolution date
  4. Write the BackfillData document
"""

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from loguru import logger

from hedgeboard.config import get_settings
from hedgeboard.models.resolution import BackfillData, EventStockPair, ResolvedEvent, StockPrice
from hedgeboard.services.market_data.yahoo import YahooFinanceService, get_yahoo_service
from hedgeboard.services.matching.matcher import match_event_to_stocks
from hedgeboard.services.polymarket.gamma import PolymarketService, get_polymarket_service
from hedgeboard.utils.dates import years_ago

MATCH_REASON_SEPARATOR = "; "


def build_pairs(events: List[ResolvedEvent]) -> List[EventStockPair]:
    """Match events to stocks; prices are left empty for the next step."""
    pairs = []
    for event in events:
        matches = match_event_to_stocks(event)
        if not matches:
            continue
        pairs.append(EventStockPair(
            event=event,
            matched_stocks=[
                StockPrice(
                    ticker=m.ticker,
                    company_name=m.company_name,
                    price_on_resolution=None,
                    resolution_date=event.resolution_date,
                )
                for m in matches
            ],
            match_reason=MATCH_REASON_SEPARATOR.join(m.match_reason for m in matches),
        ))
    return pairs


def write_backfill(data: BackfillData, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data.to_dict(), f, indent=2, ensure_ascii=False)
    return output_path


class ResolutionBackfill:
    """Runs the four backfill steps against injected upstream clients."""

    def __init__(
        self,
        polymarket: PolymarketService = None,
        yahoo: YahooFinanceService = None,
    ):
        self.settings = get_settings()
        self.polymarket = polymarket or get_polymarket_service()
        self.yahoo = yahoo or get_yahoo_service()

    async def fill_prices(self, pairs: List[EventStockPair]) -> int:
        """Fill price_on_resolution in place; returns how many prices were found."""
        found = 0
        for pair in pairs:
            for stock in pair.matched_stocks:
                logger.info(f"Fetching {stock.ticker} price for {stock.resolution_date[:10]}...")
                price = await self.yahoo.fetch_stock_price(stock.ticker, stock.resolution_date)
                stock.price_on_resolution = price
                if price is not None:
                    found += 1
                    logger.info(f"  {stock.ticker} -> ${price}")
                else:
                    logger.info(f"  {stock.ticker} -> price not found")
                await asyncio.sleep(self.settings.BACKFILL_PRICE_DELAY_SECONDS)
        return found

    async def run(
        self,
        years_back: int = None,
        output_path: str = None,
        skip_prices: bool = False,
        now: datetime = None,
    ) -> Optional[BackfillData]:
        """Run the backfill. Returns None (and writes nothing) when no events are found."""
        if years_back is None:
            years_back = self.settings.BACKFILL_YEARS_BACK
        output = Path(output_path or self.settings.RESOLUTIONS_PATH)
        now = now or datetime.now(timezone.utc)

        logger.info("[Step 1/4] Fetching resolved Polymarket events...")
        events = await self.polymarket.fetch_resolved_events(years_back=years_back, now=now)
        if not events:
            logger.warning("No events found. Nothing written.")
            return None

        logger.info("[Step 2/4] Matching events to stocks...")
        pairs = build_pairs(events)
        logger.info(f"Matched {len(pairs)} events to stocks out of {len(events)} total")

        prices_found = 0
        if skip_prices:
            logger.info("[Step 3/4] Skipping stock prices")
        else:
            logger.info("[Step 3/4] Fetching stock prices on resolution dates...")
            prices_found = await self.fill_prices(pairs)
            logger.info(f"Fetched {prices_found} stock prices")

        data = BackfillData(
            generated_at=now.isoformat(),
            total_events=len(events),
            total_matches=len(pairs),
            date_from=years_ago(now, years_back).date().isoformat(),
            date_to=now.date().isoformat(),
            pairs=pairs,
        )

        logger.info(f"[Step 4/4] Saving to {output}...")
        write_backfill(data, output)
        logger.info(
            f"Backfill complete: {len(events)} events, {len(pairs)} matched, "
            f"{prices_found} prices -> {output}"
        )
        return data
