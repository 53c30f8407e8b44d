#!/usr/bin/env python3
"""
Polymarket Resolution Backfill - builds data/resolutions.json from closed
Polymarket events, the stocks they mention, and each stock's close on the
resolution date.

Usage:
  cd backend
  source venv/bin/activate
  python3 scripts/backfill_resolutions.py                      # Last 3 years
  python3 scripts/backfill_resolutions.py --years-back 1       # Last year only
  python3 scripts/backfill_resolutions.py --skip-prices        # Matching only, no Yahoo calls
  python3 scripts/backfill_resolutions.py --output /tmp/r.json # Custom output path
"""
import sys
import os
import argparse
import asyncio
from collections import Counter

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from hedgeboard.config import get_settings
from hedgeboard.models.resolution import BackfillData
from hedgeboard.services.backfill import ResolutionBackfill

# ═══════════════════════════════════════════════════════════════════════════════
# ANSI Colors
# ═══════════════════════════════════════════════════════════════════════════════
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"


def header(title: str):
    print(f"\n{BOLD}{'═' * 60}{RESET}")
    print(f"{BOLD}  {title}{RESET}")
    print(f"{BOLD}{'═' * 60}{RESET}\n")


def section(title: str):
    print(f"\n{CYAN}── {title} {'─' * max(1, 50 - len(title))}{RESET}\n")


def print_summary(data: BackfillData, output: str):
    prices = sum(
        1 for pair in data.pairs for stock in pair.matched_stocks
        if stock.price_on_resolution is not None
    )
    tickers = Counter(stock.ticker for pair in data.pairs for stock in pair.matched_stocks)
    topics = Counter(pair.event.topic for pair in data.pairs)

    header("SUMMARY")
    print(f"  Total resolved events fetched: {data.total_events}")
    print(f"  Events matched to stocks:      {data.total_matches}")
    print(f"  Stock prices fetched:          {prices}")
    print(f"  Date range:                    {data.date_from} → {data.date_to}")
    print(f"  Output file:                   {output}")

    if tickers:
        section("Most matched tickers")
        for ticker, count in tickers.most_common(10):
            print(f"  {ticker:<8} {count}")

    if topics:
        section("Topics")
        for topic, count in topics.most_common():
            print(f"  {topic:<16} {count}")


async def run(args) -> int:
    backfill = ResolutionBackfill()
    try:
        data = await backfill.run(
            years_back=args.years_back,
            output_path=args.output,
            skip_prices=args.skip_prices,
        )
    finally:
        await backfill.polymarket.close()
        await backfill.yahoo.close()

    if data is None:
        print(f"{YELLOW}No events found. Nothing written.{RESET}")
        return 1

    print_summary(data, args.output)
    print(f"\n{GREEN}Done.{RESET}")
    return 0


def main():
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Backfill resolved Polymarket events matched to stocks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--years-back", type=int, default=settings.BACKFILL_YEARS_BACK,
                        help=f"How many years of resolutions to fetch (default: {settings.BACKFILL_YEARS_BACK})")
    parser.add_argument("--output", default=settings.RESOLUTIONS_PATH,
                        help=f"Output JSON path (default: {settings.RESOLUTIONS_PATH})")
    parser.add_argument("--skip-prices", action="store_true",
                        help="Skip Yahoo Finance price lookups")
    args = parser.parse_args()

    header("Polymarket Resolution Backfill")
    print(f"  {DIM}Years back: {args.years_back}  Output: {args.output}{RESET}")

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
