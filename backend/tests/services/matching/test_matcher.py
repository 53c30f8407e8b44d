"""
Tests for the event-to-stock matching engine.

Covers:
- A) Word-boundary and false-positive checks
- B) Direct company mentions
- C) High-impact keyword baskets
- D) Sector fill from the event topic
"""
import pytest
from unittest.mock import patch

from hedgeboard.models.resolution import ResolvedEvent
from hedgeboard.services.matching.matcher import (
    SECTOR_FILL_MAX,
    _match_direct_mentions,
    is_valid_match,
    match_event_to_stocks,
)


def _event(title, description="", topic="other"):
    return ResolvedEvent(
        event_id="1",
        title=title,
        slug="slug",
        description=description,
        resolution_date="2024-06-01T00:00:00Z",
        outcome="YES",
        final_probability=0.99,
        topic=topic,
    )


def _tickers(matches):
    return [m.ticker for m in matches]


# =============================================================================
# A) BOUNDARY CHECKS
# =============================================================================

class TestIsValidMatch:
    def test_standalone_word(self):
        assert is_valid_match("Ford recalls trucks", "Ford", 0) is True

    def test_letter_after_rejects(self):
        assert is_valid_match("Intelligence report", "Intel", 0) is False

    def test_letter_before_rejects(self):
        text = "Can you afford it?"
        assert is_valid_match(text, "ford", text.find("ford")) is False

    def test_punctuation_boundaries_accept(self):
        text = "(Tesla) shares"
        assert is_valid_match(text, "Tesla", 1) is True

    def test_false_positive_context_rejects(self):
        """A valid word still fails when a known false positive is nearby."""
        assert is_valid_match("Intel's intelligence unit", "Intel", 0) is False

    def test_block_near_blockchain_rejects(self):
        assert is_valid_match("Block bets on blockchain", "Block", 0) is False

    def test_meta_near_metadata_rejects(self):
        assert is_valid_match("Meta leaks user metadata", "Meta", 0) is False

    def test_block_without_context_accepts(self):
        assert is_valid_match("Block reports earnings", "Block", 0) is True


# =============================================================================
# B + C) DIRECT MENTIONS AND KEYWORDS
# =============================================================================

class TestDirectMentions:
    def test_direct_mention_comes_first(self):
        matches = match_event_to_stocks(_event("Will Apple release a foldable iPhone?"))

        assert matches[0].ticker == "AAPL"
        assert matches[0].company_name == "Apple"
        assert matches[0].match_reason == 'Direct mention: "Apple"'

    def test_keyword_basket_adds_without_duplicates(self):
        matches = match_event_to_stocks(_event("Will Apple release a foldable iPhone?"))
        tickers = _tickers(matches)

        assert tickers == ["AAPL", "QCOM", "TSM", "AVGO"]
        assert len(tickers) == len(set(tickers))
        qcom = next(m for m in matches if m.ticker == "QCOM")
        assert qcom.match_reason.startswith("Keyword correlation:")

    def test_substring_inside_word_is_not_a_mention(self):
        matches = match_event_to_stocks(_event("Will artificial intelligence pass the bar exam?"))
        assert "INTC" not in _tickers(matches)

    def test_names_shorter_than_three_characters_are_skipped(self):
        mappings = {"ABCS": {"ticker": "ABCS", "names": ["AB", "Abacus Systems"]}}

        with patch.dict("hedgeboard.services.matching.matcher.COMPANY_MAPPINGS", mappings, clear=True):
            assert _match_direct_mentions("Will AB ship on time?", "") == []
            matches = _match_direct_mentions("Will Abacus Systems ship on time?", "")

        assert [m.company_name for m in matches] == ["Abacus Systems"]

    def test_exact_only_checked_before_names(self):
        matches = match_event_to_stocks(_event("Will Meta shut down Facebook?"))

        meta = next(m for m in matches if m.ticker == "META")
        assert meta.company_name == "Meta"
        assert meta.match_reason == 'Direct mention: "Meta"'

    def test_mention_in_description(self):
        matches = match_event_to_stocks(_event("Who will win?", "Resolves YES if Netflix announces it"))
        assert "NFLX" in _tickers(matches)


# =============================================================================
# D) SECTOR FILL
# =============================================================================

class TestSectorFill:
    def test_sector_fill_from_topic(self):
        matches = match_event_to_stocks(
            _event("Will there be a plane crash in March?", topic="safety_incident")
        )

        assert _tickers(matches) == ["BA", "LMT", "RTX"]
        assert len(matches) <= SECTOR_FILL_MAX
        assert all(m.match_reason.startswith("Sector correlation:") for m in matches)

    def test_other_topic_gets_no_fill(self):
        assert match_event_to_stocks(_event("Who wins?")) == []

    def test_unknown_topic_is_reclassified(self):
        matches = match_event_to_stocks(
            _event("Will there be a plane crash in March?", topic="not-a-topic")
        )
        assert _tickers(matches) == ["BA", "LMT", "RTX"]

    def test_no_fill_when_enough_matches(self):
        matches = match_event_to_stocks(
            _event("Will Apple release a foldable iPhone?", topic="product_launch")
        )
        assert _tickers(matches) == ["AAPL", "QCOM", "TSM", "AVGO"]
