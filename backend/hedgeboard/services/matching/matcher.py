"""
Event-to-stock matching engine.

Matching runs in three phases, each only adding tickers not already matched:

1. Direct mentions of a company, product or executive from COMPANY_MAPPINGS
   (word-boundary checked, with known false positives suppressed).
2. High-impact keyword baskets (politics, Fed, China, chips, crypto, ...).
3. Sector fill from the event topic when fewer than three stocks matched.
"""
import re
from typing import List, Set

from loguru import logger

from hedgeboard.data.company_mappings import COMPANY_MAPPINGS
from hedgeboard.data.topic_keywords import HIGH_IMPACT_KEYWORDS, TOPIC_STOCK_MAPPINGS
from hedgeboard.models.resolution import ResolvedEvent, StockMatch
from hedgeboard.services.matching.topics import EventTopic, extract_topic


# =============================================================================
# CONFIGURATION
# =============================================================================

MIN_NAME_LENGTH = 3
FALSE_POSITIVE_WINDOW = 20
SECTOR_FILL_THRESHOLD = 3
SECTOR_FILL_MAX = 3

_LETTER = re.compile(r"[a-z]")

# match word -> substrings that mean the hit was part of another word
FALSE_POSITIVE_CONTEXTS = {
    "intel": ("intelligence",),
    "block": ("blocked", "blockchain"),
    "ford": ("afford", "stanford"),
    "meta": ("metadata",),
}


# =============================================================================
# BOUNDARY CHECKS
# =============================================================================

def is_valid_match(text: str, match_word: str, start_index: int) -> bool:
    """
    Check that ``match_word`` found at ``start_index`` of ``text`` is a
    standalone word and not a known false positive.
    """
    text_lower = text.lower()
    match_lower = match_word.lower()
    end_index = start_index + len(match_lower)

    char_before = text_lower[start_index - 1] if start_index > 0 else " "
    char_after = text_lower[end_index] if end_index < len(text_lower) else " "

    if _LETTER.match(char_before) or _LETTER.match(char_after):
        return False

    surrounding = text_lower[
        max(0, start_index - FALSE_POSITIVE_WINDOW):
        min(len(text_lower), end_index + FALSE_POSITIVE_WINDOW)
    ]
    for context in FALSE_POSITIVE_CONTEXTS.get(match_lower, ()):
        if context in surrounding:
            return False

    return True


def _find_mention(title: str, description: str, word: str) -> bool:
    """First occurrence in the title, then the description."""
    word_lower = word.lower()
    for text in (title, description):
        idx = text.lower().find(word_lower)
        if idx != -1 and is_valid_match(text, word, idx):
            return True
    return False


# =============================================================================
# MATCHING PHASES
# =============================================================================

def _match_direct_mentions(title: str, description: str) -> List[StockMatch]:
    matches = []

    for key, mapping in COMPANY_MAPPINGS.items():
        matched_name = None

        for exact_word in mapping.get("exact_only", []):
            if _find_mention(title, description, exact_word):
                matched_name = exact_word
                break

        if matched_name is None:
            for name in mapping["names"]:
                if len(name) < MIN_NAME_LENGTH:
                    continue
                if _find_mention(title, description, name):
                    matched_name = name
                    break

        if matched_name is not None:
            matches.append(StockMatch(
                ticker=key,
                company_name=matched_name,
                match_reason=f'Direct mention: "{matched_name}"',
            ))

    return matches


def _match_high_impact(full_text: str, matched: Set[str]) -> List[StockMatch]:
    matches = []

    for group in HIGH_IMPACT_KEYWORDS:
        keyword = next((k for k in group["keywords"] if k.lower() in full_text), None)
        if keyword is None:
            continue
        for ticker in group["stocks"]:
            if ticker in matched:
                continue
            matches.append(StockMatch(
                ticker=ticker,
                company_name=keyword,
                match_reason=f"Keyword correlation: {group['reason']}",
            ))
            matched.add(ticker)

    return matches


def _match_sector(topic: EventTopic, matched: Set[str]) -> List[StockMatch]:
    mapping = TOPIC_STOCK_MAPPINGS.get(topic.value)
    if not mapping or not mapping["stocks"]:
        return []

    matches = []
    for ticker in mapping["stocks"]:
        if len(matches) >= SECTOR_FILL_MAX:
            break
        if ticker in matched:
            continue
        matches.append(StockMatch(
            ticker=ticker,
            company_name=topic.value,
            match_reason=f"Sector correlation: {mapping['reason']}",
        ))
        matched.add(ticker)

    return matches


def match_event_to_stocks(event: ResolvedEvent) -> List[StockMatch]:
    """Match a resolved event to the stocks it plausibly moves."""
    title = event.title or ""
    description = event.description or ""
    full_text = f"{title.lower()} {description.lower()}"

    matches = _match_direct_mentions(title, description)
    matched = {m.ticker for m in matches}

    matches.extend(_match_high_impact(full_text, matched))

    try:
        topic = EventTopic(event.topic) if event.topic else extract_topic(title, description)
    except ValueError:
        topic = extract_topic(title, description)

    if len(matches) < SECTOR_FILL_THRESHOLD and topic != EventTopic.OTHER:
        matches.extend(_match_sector(topic, matched))

    if matches:
        logger.debug(f"Matched '{title[:50]}' to {[m.ticker for m in matches]}")

    return matches
