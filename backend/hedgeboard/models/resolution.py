"""
Resolution backfill records.

These mirror the on-disk layout of ``data/resolutions.json``; the dashboard
reads the same file, so ``to_dict``/``from_dict`` use its camelCase keys.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ResolvedEvent:
    """A closed Polymarket event with its resolved outcome."""
    event_id: str
    title: str
    slug: str
    description: str
    resolution_date: str
    outcome: str  # YES / NO / UNKNOWN
    final_probability: Optional[float]
    topic: str = "other"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eventId": self.event_id,
            "title": self.title,
            "slug": self.slug,
            "description": self.description,
            "resolutionDate": self.resolution_date,
            "outcome": self.outcome,
            "finalProbability": self.final_probability,
            "topic": self.topic,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolvedEvent":
        probability = data.get("finalProbability")
        try:
            probability = float(probability) if probability is not None else None
        except (TypeError, ValueError):
            probability = None
        return cls(
            event_id=str(data.get("eventId") or ""),
            title=data.get("title") or "",
            slug=data.get("slug") or "",
            description=data.get("description") or "",
            resolution_date=data.get("resolutionDate") or "",
            outcome=data.get("outcome") or "UNKNOWN",
            final_probability=probability,
            topic=data.get("topic") or "other",
        )


@dataclass
class StockMatch:
    """A stock matched to an event, with the reason it matched."""
    ticker: str
    company_name: str
    match_reason: str


@dataclass
class StockPrice:
    """Closing price of a matched stock on the event's resolution date."""
    ticker: str
    company_name: str
    price_on_resolution: Optional[float]
    resolution_date: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticker": self.ticker,
            "companyName": self.company_name,
            "priceOnResolution": self.price_on_resolution,
            "resolutionDate": self.resolution_date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StockPrice":
        return cls(
            ticker=data.get("ticker") or "",
            company_name=data.get("companyName") or "",
            price_on_resolution=data.get("priceOnResolution"),
            resolution_date=data.get("resolutionDate") or "",
        )


@dataclass
class EventStockPair:
    event: ResolvedEvent
    matched_stocks: List[StockPrice]
    match_reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.event.to_dict(),
            "matchedStocks": [s.to_dict() for s in self.matched_stocks],
            "matchReason": self.match_reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventStockPair":
        return cls(
            event=ResolvedEvent.from_dict(data.get("event") or {}),
            matched_stocks=[StockPrice.from_dict(s) for s in data.get("matchedStocks") or []],
            match_reason=data.get("matchReason") or "",
        )


@dataclass
class BackfillData:
    """Top-level document written to data/resolutions.json."""
    generated_at: str
    total_events: int
    total_matches: int
    date_from: str
    date_to: str
    pairs: List[EventStockPair] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "totalEvents": self.total_events,
            "totalMatches": self.total_matches,
            "dateRange": {"from": self.date_from, "to": self.date_to},
            "pairs": [p.to_dict() for p in self.pairs],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BackfillData":
        date_range = data.get("dateRange") or {}
        return cls(
            generated_at=data.get("generatedAt") or "",
            total_events=int(data.get("totalEvents") or 0),
            total_matches=int(data.get("totalMatches") or 0),
            date_from=date_range.get("from") or "",
            date_to=date_range.get("to") or "",
            pairs=[EventStockPair.from_dict(p) for p in data.get("pairs") or []],
        )

    @classmethod
    def empty(cls) -> "BackfillData":
        return cls(generated_at="", total_events=0, total_matches=0, date_from="", date_to="")
