"""
Read access to the resolution cache (data/resolutions.json).

The file is produced offline by scripts/backfill_resolutions.py and loaded
once per store; call ``reload()`` after regenerating it.
"""

import json
from collections import Counter
from pathlib import Path
from typing import Optional, Dict, Any, List

import pandas as pd
from loguru import logger

from hedgeboard.config import get_settings
from hedgeboard.models.resolution import BackfillData
from hedgeboard.services.matching.topics import extract_event_category


TOP_COMPANIES_LIMIT = 10


def to_csv(rows: List[Dict[str, Any]]) -> str:
    """
    Serialize flat rows to CSV. Header order follows the first row; values
    containing commas or quotes are quoted. Empty input gives "".
    """
    if not rows:
        return ""
    df = pd.DataFrame(rows, columns=list(rows[0].keys()))
    return df.to_csv(index=False, lineterminator="\n").rstrip("\n")


class ResolutionStore:
    """Historical event/stock pairs loaded from the backfill output."""

    def __init__(self, path: str = None):
        self.path = Path(path or get_settings().RESOLUTIONS_PATH)
        self._data: Optional[BackfillData] = None

    @property
    def data(self) -> BackfillData:
        if self._data is None:
            self._data = self._load()
        return self._data

    def _load(self) -> BackfillData:
        if not self.path.exists():
            logger.warning(f"Resolution cache not found at {self.path}; using empty dataset")
            return BackfillData.empty()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read resolution cache {self.path}: {e}")
            return BackfillData.empty()

        data = BackfillData.from_dict(raw)
        logger.info(f"Loaded {len(data.pairs)} resolution pairs from {self.path}")
        return data

    def reload(self) -> BackfillData:
        self._data = None
        return self.data

    # -------------------------------------------------------------------------
    # VIEWS
    # -------------------------------------------------------------------------

    def get_all_historical_bets(self) -> List[Dict[str, Any]]:
        """
        One row per (event, matched stock), deduplicated on title + ticker.

        Returns:
            List of {title, outcome, ticker, price, date}; price is 0 when
            the backfill found no close for that day.
        """
        bets = []
        seen = set()
        for pair in self.data.pairs:
            for stock in pair.matched_stocks:
                key = f"{pair.event.title}|{stock.ticker}"
                if key in seen:
                    continue
                seen.add(key)
                bets.append({
                    "title": pair.event.title,
                    "outcome": pair.event.outcome,
                    "ticker": stock.ticker,
                    "price": stock.price_on_resolution or 0,
                    "date": stock.resolution_date,
                })
        return bets

    def get_training_data(self) -> List[Dict[str, Any]]:
        """Feature rows for offline modelling: outcome is 1 for YES else 0."""
        rows = []
        for pair in self.data.pairs:
            category = extract_event_category(pair.event.title, pair.event.description)
            for stock in pair.matched_stocks:
                rows.append({
                    "company": stock.company_name,
                    "ticker": stock.ticker,
                    "eventCategory": category,
                    "outcome": 1 if pair.event.outcome == "YES" else 0,
                    "hadPriceData": 1 if stock.price_on_resolution is not None else 0,
                })
        return rows

    def get_resolution_stats(self) -> Dict[str, Any]:
        """Totals from the file header plus the most frequently matched companies."""
        data = self.data
        companies = [
            stock.company_name
            for pair in data.pairs
            for stock in pair.matched_stocks
        ]

        # Ties keep first-seen order
        top_companies = [
            {"company": company, "count": count}
            for company, count in Counter(companies).most_common(TOP_COMPANIES_LIMIT)
        ]

        return {
            "totalEvents": data.total_events,
            "totalMatches": data.total_matches,
            "dateRange": {"from": data.date_from, "to": data.date_to},
            "topCompanies": top_companies,
        }


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_resolution_store: Optional[ResolutionStore] = None


def get_resolution_store() -> ResolutionStore:
    """Get the global resolution store."""
    global _resolution_store
    if _resolution_store is None:
        _resolution_store = ResolutionStore()
    return _resolution_store
