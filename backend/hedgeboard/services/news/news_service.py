"""
News Service - recent Yahoo Finance news for a portfolio, optionally
focused on one Polymarket bet.

Pipeline:
  1. Ticker news (plus bet-specific search queries when a bet is given)
  2. Dedupe by URL, keep the last 7 days, newest first
  3. LLM relevance scoring (title keyword fallback)
  4. Drop irrelevant articles; never return an empty list when news exists
"""

import re
import time
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from urllib.parse import quote

from loguru import logger

from hedgeboard.config import get_settings
from hedgeboard.data.company_mappings import get_mapping
from hedgeboard.services.ai.groq_service import GroqService, get_groq_service
from hedgeboard.services.ai.prompts import (
    NEWS_SYSTEM_PROMPT,
    NEWS_RELEVANCE_PROMPT,
    BET_QUERY_PROMPT,
    BET_FOCUS_CONTEXT,
    format_articles_list,
)
from hedgeboard.services.market_data.yahoo import YahooFinanceService, get_yahoo_service
from hedgeboard.utils.dates import to_epoch_seconds


ONE_WEEK_SECONDS = 7 * 24 * 60 * 60

TICKER_NEWS_COUNT = 10
BET_NEWS_COUNT = 8
ARTICLE_LIMIT = 15
BET_ARTICLE_LIMIT = 20
FALLBACK_ARTICLE_COUNT = 5
MIN_BET_RELEVANCE = 3
DEFAULT_BET_SCORE = 5

SUBJECT_STOPWORDS = {'will', 'the', 'by', 'end', 'of', 'in', 'for', 'over'}
KEYWORD_STOPWORDS = SUBJECT_STOPWORDS | {'this', 'that', 'with', 'from', 'have', 'been'}

# Phrases in the model's relevance text that mean "drop this article"
STRONG_NEGATIVE_PHRASES = [
    'not really relevant',
    'not relevant',
    'not particularly relevant',
    'not especially relevant',
    'not directly relevant',
    'no clear connection',
    'unrelated',
    'no direct mention',
    'does not discuss',
    "doesn't discuss",
]

_SUBJECT_PATTERNS = [
    re.compile(r'Will\s+(\w+(?:\s+\w+)?)\s+', re.IGNORECASE),  # "Will OpenAI launch..."
    re.compile(r'(\w+(?:\s+\w+)?)\s+to\s+', re.IGNORECASE),    # "Bitcoin to reach..."
    re.compile(r'^(\w+(?:\s+\w+)?)\s+', re.IGNORECASE),
]


# =============================================================================
# HELPERS
# =============================================================================

def _significant_words(text: str, stopwords: set) -> List[str]:
    return [w for w in text.split(' ') if len(w) > 3 and w.lower() not in stopwords]


def extract_bet_subject(bet_market: str) -> str:
    """Main entity of a bet question, e.g. 'OpenAI' from 'Will OpenAI launch ...'."""
    for pattern in _SUBJECT_PATTERNS:
        match = pattern.search(bet_market)
        if match and match.group(1):
            return match.group(1)

    words = _significant_words(re.sub(r'[?\'"]', '', bet_market), SUBJECT_STOPWORDS)
    return ' '.join(words[:2])


def bet_keywords(bet_market: str) -> List[str]:
    """Lowercase title-filter keywords from a bet question."""
    cleaned = re.sub(r'[?\'"<>$]', '', bet_market.lower())
    return [w for w in cleaned.split() if len(w) > 3 and w not in KEYWORD_STOPWORDS]


def fallback_queries(bet_market: str, subject: str) -> List[str]:
    words = _significant_words(re.sub(r'[?\'"]', '', bet_market), SUBJECT_STOPWORDS)
    queries = [
        ' '.join(words[:4]),
        f"{subject} news",
        f"{subject} {datetime.now().year}",
    ]
    return [q for q in queries if q.strip()]


def dedupe_by_url(articles: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """First article per URL wins; articles without a URL are dropped."""
    seen = set()
    unique = []
    for article in articles:
        url = article.get('url')
        if not url or url in seen:
            continue
        seen.add(url)
        unique.append(article)
    return unique


def filter_to_last_week(articles: List[Dict[str, Any]], now: float = None) -> List[Dict[str, Any]]:
    """Keep articles published in the last 7 days; undated articles are kept."""
    cutoff = (now if now is not None else time.time()) - ONE_WEEK_SECONDS
    recent = []
    for article in articles:
        published = to_epoch_seconds(article.get('publish_time'))
        if published is None or published >= cutoff:
            recent.append(article)
    return recent


def _publish_seconds(article: Dict[str, Any], now: float) -> float:
    published = to_epoch_seconds(article.get('publish_time'))
    return published if published is not None else now


def _format_date(seconds: float) -> str:
    return datetime.fromtimestamp(seconds, tz=timezone.utc).date().isoformat()


def _article_url(article: Dict[str, Any]) -> str:
    url = article.get('url')
    if not url:
        if article.get('uuid'):
            url = f"https://finance.yahoo.com/news/{article['uuid']}"
        else:
            url = f"https://finance.yahoo.com/news?q={quote(article.get('title') or '')}"
    if not url.startswith('http'):
        url = f"https://{url}"
    return url


def _bet_score(enhancement: Dict[str, Any]) -> Optional[float]:
    score = enhancement.get('betRelevanceScore')
    if score is None or isinstance(score, bool):
        return None
    try:
        return float(score)
    except (TypeError, ValueError):
        return None


def has_strong_negative(relevance: str) -> bool:
    text = (relevance or '').lower()
    return any(phrase in text for phrase in STRONG_NEGATIVE_PHRASES)


# =============================================================================
# MAIN SERVICE CLASS
# =============================================================================

class NewsService:
    """Portfolio and bet news with LLM relevance filtering."""

    def __init__(self, groq: GroqService = None, yahoo: YahooFinanceService = None):
        self.settings = get_settings()
        self.groq = groq or get_groq_service()
        self.yahoo = yahoo or get_yahoo_service()

    # -------------------------------------------------------------------------
    # FETCHING
    # -------------------------------------------------------------------------

    async def fetch_ticker_news(self, tickers: List[str], now: float = None) -> List[Dict[str, Any]]:
        articles = []
        for ticker in tickers:
            items = await self.yahoo.search_news(ticker, news_count=TICKER_NEWS_COUNT, quotes_count=1)
            for item in items:
                item['related_ticker'] = ticker
            articles.extend(items)
        return filter_to_last_week(dedupe_by_url(articles), now)

    async def extract_search_queries(self, bet_market: str) -> List[str]:
        """2-3 Yahoo search queries for a bet, from the LLM or bet keywords."""
        prompt = BET_QUERY_PROMPT.format(bet_market=bet_market)

        if self.groq.is_available():
            for model in self.settings.GROQ_MODELS:
                content, _ = await self.groq.complete(
                    prompt, models=[model], temperature=0.3, max_tokens=200
                )
                queries = self.groq.parser.extract_json_array(content) if content else None
                if queries:
                    queries = [str(q) for q in queries if isinstance(q, str) and q.strip()]
                    if queries:
                        logger.info(f"Extracted bet search queries: {', '.join(queries)}")
                        return queries

        logger.info("LLM query extraction failed, using keyword fallback")
        return fallback_queries(bet_market, extract_bet_subject(bet_market))

    async def fetch_bet_news(self, bet_market: str, now: float = None) -> List[Dict[str, Any]]:
        subject = extract_bet_subject(bet_market)
        logger.info(f"Bet subject extracted: '{subject}' from '{bet_market}'")

        articles = []
        for query in await self.extract_search_queries(bet_market):
            items = await self.yahoo.search_news(query, news_count=BET_NEWS_COUNT, quotes_count=0)
            logger.debug(f"Found {len(items)} articles for query '{query}'")
            for item in items:
                item['related_ticker'] = ''
                item['bet_subject'] = subject
                item['is_bet_specific'] = True
            articles.extend(items)
        return filter_to_last_week(dedupe_by_url(articles), now)

    # -------------------------------------------------------------------------
    # RELEVANCE
    # -------------------------------------------------------------------------

    async def enhance(self, articles: List[Dict[str, Any]], context: str) -> Optional[List[Any]]:
        """Per-article relevance from the LLM, in article order; None if every model fails."""
        if not articles:
            return []

        prompt = NEWS_RELEVANCE_PROMPT.format(
            context=context,
            articles=format_articles_list(articles),
        )
        for model in self.settings.GROQ_MODELS:
            content, _ = await self.groq.complete(
                prompt,
                system_prompt=NEWS_SYSTEM_PROMPT,
                models=[model],
                temperature=0.5,
                max_tokens=2000,
            )
            if content is None:
                continue

            enhancements = self.groq.parser.extract_json_array(content)
            if enhancements is None:
                logger.warning(f"Could not parse JSON array from {model} response")
                continue

            logger.info(f"Enhanced {len(enhancements)} articles with model: {model}")
            return enhancements

        return None

    @staticmethod
    def keyword_enhancements(
        articles: List[Dict[str, Any]],
        tickers: List[str],
        bet_market: Optional[str],
    ) -> List[Dict[str, Any]]:
        """Relevance from title keywords alone, used when the LLM is unavailable."""
        keywords = bet_keywords(bet_market) if bet_market else []
        bet_subject = extract_bet_subject(bet_market) if bet_market else None

        enhancements = []
        for article in articles:
            if article.get('is_bet_specific'):
                subject = article.get('bet_subject') or bet_subject or 'the bet topic'
            else:
                subject = article.get('related_ticker') or 'the market'

            title = (article.get('title') or '').lower()
            matches_bet = bool(bet_market) and any(k in title for k in keywords)
            matches_ticker = any(t.lower() in title for t in tickers)
            relevant = matches_bet or matches_ticker

            enhancements.append({
                'relevance': (
                    f"News related to {subject}. AI analysis unavailable - relevance based on title keywords."
                    if relevant else
                    f"This article may not be directly related to {subject}."
                ),
                'relatedStocks': [article['related_ticker']] if article.get('related_ticker') else [],
                'keyPoints': [],
                'isRelevant': relevant,
                'betRelevanceScore': 6 if relevant else 1,
            })
        return enhancements

    def _to_output(self, article: Dict[str, Any], enhancement: Dict[str, Any], now: float) -> Dict[str, Any]:
        title = article.get('title') or ''
        summary = (article.get('summary') or '').strip()
        if not summary:
            summary = (
                f"News article about {title.lower()}. Click to read more."
                if title else "Financial news article. Click to read more."
            )

        related = enhancement.get('relatedStocks')
        if not isinstance(related, list) or not related:
            related = [article['related_ticker']] if article.get('related_ticker') else []

        return {
            'title': title or "Untitled Article",
            'summary': summary,
            'source': article.get('publisher') or "Yahoo Finance",
            'url': _article_url(article),
            'publishedAt': _format_date(_publish_seconds(article, now)),
            'relevance': str(enhancement.get('relevance') or ''),
            'relatedStocks': [str(s) for s in related],
        }

    def _fallback_output(self, article: Dict[str, Any], bet_subject: Optional[str], now: float) -> Dict[str, Any]:
        if article.get('is_bet_specific'):
            subject = article.get('bet_subject') or bet_subject or 'the bet topic'
        else:
            subject = article.get('related_ticker') or 'the market'

        return {
            'title': article.get('title') or "Untitled Article",
            'summary': article.get('summary') or f"News article potentially related to {subject}",
            'source': article.get('publisher') or "Yahoo Finance",
            'url': _article_url(article),
            'publishedAt': _format_date(_publish_seconds(article, now)),
            'relevance': (
                f"Recent news potentially related to {subject}. "
                f"Assess relevance by reading the full article."
            ),
            'relatedStocks': [article['related_ticker']] if article.get('related_ticker') else [],
        }

    # -------------------------------------------------------------------------
    # ENTRY POINT
    # -------------------------------------------------------------------------

    @staticmethod
    def build_context(portfolio: List[Dict[str, Any]], bet_market: Optional[str]) -> str:
        lines = []
        for item in portfolio:
            ticker = str(item['ticker']).upper()
            mapping = get_mapping(ticker)
            name = mapping['names'][0] if mapping else ticker
            lines.append(f"- {ticker} ({name}): {item.get('shares', 0)} shares")

        context = "Portfolio stocks:\n" + "\n".join(lines)
        if bet_market:
            context += BET_FOCUS_CONTEXT.format(bet_market=bet_market)
        return context

    async def get_news(
        self,
        portfolio: List[Dict[str, Any]],
        bet_market: Optional[str] = None,
        now: float = None,
    ) -> List[Dict[str, Any]]:
        """
        Relevant recent articles for the portfolio.

        Returns:
            List of {title, summary, source, url, publishedAt, relevance,
            relatedStocks}. When a bet is given, articles are ordered by
            bet relevance.
        """
        now = now if now is not None else time.time()
        tickers = [str(p['ticker']).upper() for p in portfolio]
        context = self.build_context(portfolio, bet_market)

        ticker_news = await self.fetch_ticker_news(tickers, now)

        bet_news = []
        if bet_market:
            logger.info(f"Fetching bet-specific news for: '{bet_market}'")
            bet_news = await self.fetch_bet_news(bet_market, now)
            logger.info(f"Found {len(bet_news)} bet-specific articles")

        # Bet news first so it wins URL ties
        combined = dedupe_by_url(bet_news + ticker_news)
        if not combined:
            logger.info("No news found for portfolio")
            return []

        limit = BET_ARTICLE_LIMIT if bet_market else ARTICLE_LIMIT
        recent = sorted(combined, key=lambda a: _publish_seconds(a, now), reverse=True)[:limit]

        enhancements = await self.enhance(recent, context)
        if enhancements is None:
            logger.warning("News enhancement failed - using title-based filtering fallback")
            enhancements = self.keyword_enhancements(recent, tickers, bet_market)

        kept = []
        for idx, article in enumerate(recent):
            enhancement = enhancements[idx] if idx < len(enhancements) else (enhancements[0] if enhancements else None)
            if not isinstance(enhancement, dict):
                enhancement = {
                    'relevance': "Financial news article",
                    'relatedStocks': [],
                    'keyPoints': [],
                    'isRelevant': True,
                }

            relevant = enhancement.get('isRelevant') is not False
            score = _bet_score(enhancement)
            if bet_market and score is not None and score < MIN_BET_RELEVANCE:
                relevant = False
            if has_strong_negative(enhancement.get('relevance')):
                relevant = False

            if relevant:
                kept.append((score or DEFAULT_BET_SCORE, article, enhancement))

        if bet_market:
            kept.sort(key=lambda item: item[0], reverse=True)

        articles = [self._to_output(article, enh, now) for _, article, enh in kept]

        if not articles:
            logger.warning(f"All articles were filtered out, returning top {FALLBACK_ARTICLE_COUNT} most recent")
            bet_subject = extract_bet_subject(bet_market) if bet_market else None
            articles = [
                self._fallback_output(article, bet_subject, now)
                for article in recent[:FALLBACK_ARTICLE_COUNT]
            ]

        logger.info(f"Returning {len(articles)} news articles")
        return articles


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_news_service: Optional[NewsService] = None


def get_news_service() -> NewsService:
    """Get the global news service instance."""
    global _news_service
    if _news_service is None:
        _news_service = NewsService()
    return _news_service
