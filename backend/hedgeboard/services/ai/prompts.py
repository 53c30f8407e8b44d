"""
Prompt templates for Groq LLM calls

Covers:
- Hedge recommendations over open Polymarket markets
- Semantic matching of a bet against resolved historical bets
- Outcome prediction from historical matches
- News search query extraction and relevance scoring
"""

from typing import Dict, List, Any

# =============================================================================
# SYSTEM PROMPTS
# =============================================================================

HEDGE_SYSTEM_PROMPT = """You are a hedge analyst finding Polymarket bets to hedge stocks.

YOUR TASK:
Find Polymarket events that DIRECTLY affect stocks in the portfolio. Group stocks that share the same hedge.

RULES:
1. Only recommend hedges with DIRECT connections to the companies
2. If one market affects multiple stocks, LIST ALL AFFECTED STOCKS together
3. Quality over quantity - only genuinely relevant hedges
4. Only use markets from the provided list
5. ALWAYS specify the EXACT outcome being bet on

GROUPING EXAMPLE:
If "Will US tariffs exceed $250B?" affects AAPL, TSLA, and NVDA - list them all together, don't create 3 separate entries.

WHAT MAKES A GOOD HEDGE:
HIGH confidence: Directly mentions company, CEO, or core product
   - "Will Elon Musk..." -> TSLA
   - "NVIDIA chip exports" -> NVDA

MEDIUM confidence: Directly affects core business
   - "US tariffs" -> AAPL, TSLA, NVDA (all have China exposure)
   - "AI regulation" -> NVDA, MSFT, GOOGL, META (all have AI products)

SKIP - Too generic:
   - "Recession" - affects everything
   - "Interest rates" - too macro

Respond with JSON:
{
  "summary": "Brief summary of hedges found",
  "recommendations": [
    {
      "market": "EXACT title from the list",
      "outcome": "The specific outcome to bet on (e.g., '$50B-$100B', 'Before Q2 2025', 'Yes it will happen', '<500 layoffs')",
      "probability": 0.52,
      "position": "YES",
      "reasoning": "Why this affects these specific stocks",
      "hedgesAgainst": "The shared risk",
      "suggestedAllocation": 500,
      "affectedStocks": ["AAPL", "TSLA", "NVDA"],
      "confidence": "medium"
    }
  ],
  "stocksWithoutHedges": ["JNJ"]
}

CRITICAL - About "outcome":
- For range markets (e.g., "Tesla market cap?"), specify the EXACT range: "$500B-$750B"
- For date markets (e.g., "When will X launch?"), specify the timeframe: "Q1 2025" or "Before March"
- For yes/no markets, just say "Yes" or "No" matching your position
- This tells users WHAT they're betting on, not just the probability

IMPORTANT:
- Don't repeat the same market multiple times
- Group all affected stocks into one recommendation
- Put hedges that affect MORE stocks first in your list"""

NEWS_SYSTEM_PROMPT = """You are a financial news analyst. Your task is to analyze real news articles and provide relevance context.

Given a list of real news articles with titles, summaries, and URLs, analyze them for relevance to the portfolio stocks.

Return a JSON array with enhanced relevance information:
[
  {
    "relevance": "Why this article is relevant to the portfolio. Provide 2-4 sentences explaining the connection, potential impact on stock prices, and why portfolio holders should care. Be specific and detailed.",
    "relatedStocks": ["TICKER1", "TICKER2"],
    "keyPoints": ["Key point 1", "Key point 2"],
    "isRelevant": true,
    "betRelevanceScore": 0-10
  }
]

RELEVANCE FILTERING RULES:
- Mark articles as relevant (isRelevant: true) if there is a connection to the portfolio stocks
- When a specific Polymarket bet is mentioned in the context, be STRICT about relevance:
  - betRelevanceScore 8-10: Article directly discusses the bet topic (revenue forecasts, specific predictions, etc.)
  - betRelevanceScore 5-7: Article is related to factors that could influence the bet outcome
  - betRelevanceScore 1-4: Article mentions the stock but doesn't relate to the bet topic
  - betRelevanceScore 0: Article is unrelated to both the stock and the bet
- For bet-specific analysis, mark isRelevant: false if betRelevanceScore < 3
- If an article doesn't relate to the specific bet topic, say so clearly in the relevance field

IMPORTANT:
- Return ONLY valid JSON, no markdown or extra text
- Match the order of articles provided exactly
- Focus on how each article affects the specific stocks
- Be specific about why it matters for the portfolio
- Write detailed relevance explanations (2-4 sentences, not truncated)
- When analyzing for a bet, prioritize articles that directly address the bet's subject matter
- DO NOT force connections between unrelated articles and bets - be honest when there's no direct connection"""

# =============================================================================
# HEDGE PROMPTS
# =============================================================================

HEDGE_ANALYSIS_PROMPT = """Find hedges for this portfolio. Group stocks that share the same hedge:

{context}"""

# =============================================================================
# CORRELATION PROMPTS
# =============================================================================

SEMANTIC_MATCH_PROMPT = """You are a semantic similarity analyzer for prediction markets.

CURRENT BET: "{current_bet}"

HISTORICAL BETS (numbered):
{bet_list}

Find bets that are SEMANTICALLY SIMILAR to the current bet. Similar means:
- Same topic/theme (tariffs, AI, elections, company events, etc.)
- Same type of prediction (will X happen, how much will Y be, etc.)
- Related companies or industries

Return ONLY a JSON array of the numbers of similar bets, ordered by relevance.
Example: [3, 7, 12, 1]

If NO bets are similar, return: []

IMPORTANT: Only include bets that are truly similar in meaning. Do NOT include unrelated bets."""

PREDICTION_PROMPT = """You are a prediction market analyst. Analyze this bet using historical data:

BET: "{bet_title}"
AFFECTED STOCKS: {tickers}
TOPIC: {topic}
MATCH TYPE: {match_type}

HISTORICAL DATA:
- {match_count} similar past bets found
- {yes_count} resolved YES, {no_count} resolved NO
- Sample past events:
{event_samples}

Based on this specific bet and the historical patterns, provide a probability estimate.
Consider: the nature of the bet, historical patterns, current market conditions.

Return ONLY a JSON: {{"prediction": <0.0-1.0>, "confidence": <0.5-0.95>}}"""

# =============================================================================
# NEWS PROMPTS
# =============================================================================

BET_QUERY_PROMPT = """Given this Polymarket bet question: "{bet_market}"

Extract 2-3 specific search queries that would find news articles directly related to this bet.
Focus on the core topic, key numbers, dates, and entities mentioned.

Return JSON array of search queries:
["search query 1", "search query 2", "search query 3"]

Examples:
- "Will NVIDIA generate over $250b in 2025?" -> ["NVIDIA revenue 2025", "NVIDIA $250 billion earnings", "NVIDIA financial forecast 2025"]
- "Will Bitcoin reach $100k by end of 2024?" -> ["Bitcoin price prediction 2024", "Bitcoin $100000", "cryptocurrency market 2024"]
- "Will OpenAI launch a consumer hardware product by end of 2025?" -> ["OpenAI hardware product", "OpenAI consumer device 2025", "OpenAI product launch"]

IMPORTANT: Return ONLY the JSON array, no other text."""

NEWS_RELEVANCE_PROMPT = """Analyze these news articles for relevance to this portfolio:

{context}

Articles:
{articles}

Return a JSON array matching the order of articles."""

BET_FOCUS_CONTEXT = """

IMPORTANT: Focus primarily on news directly related to this Polymarket bet: "{bet_market}"

When analyzing articles, prioritize:
1. Articles that directly discuss the specific topic of the bet
2. Articles with data, forecasts, or analysis relevant to the bet outcome
3. Articles that could influence the probability of the bet

Mark articles as NOT relevant if they only tangentially mention the stock but don't relate to the bet topic."""


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def format_portfolio_lines(portfolio: List[Dict[str, Any]]) -> str:
    """One line per holding; company names come from the ticker dictionary when known."""
    lines = []
    for item in portfolio:
        name = item.get('name') or item['ticker']
        lines.append(f"- {item['ticker']} ({name}): {item.get('shares', 0)} shares")
    return "\n".join(lines)


def format_markets_list(markets: List[Dict[str, Any]]) -> str:
    """Numbered market list with current outcome prices."""
    lines = []
    for i, market in enumerate(markets, 1):
        outcomes = ", ".join(
            f"{o['name']}: {o['probability']:.2f}" if o.get('probability') is not None else o['name']
            for o in market.get('outcomes', [])
        )
        line = f"{i}. \"{market['question']}\""
        if outcomes:
            line += f" [{outcomes}]"
        if market.get('end_date'):
            line += f" (ends {str(market['end_date'])[:10]})"
        lines.append(line)
    return "\n".join(lines)


def format_bet_list(bets: List[Dict[str, Any]]) -> str:
    return "\n".join(
        f"{i}. \"{b['title']}\" ({b['outcome']}, {b['ticker']})"
        for i, b in enumerate(bets, 1)
    )


def format_event_samples(matched_events: List[Dict[str, Any]], limit: int = 5) -> str:
    samples = "\n".join(
        f"\"{e['title']}\" -> {e['outcome']} ({e['ticker']} was ${e['priceOnResolution']})"
        for e in matched_events[:limit]
    )
    return samples or "No specific events available"


def format_articles_list(articles: List[Dict[str, Any]]) -> str:
    lines = []
    for i, article in enumerate(articles, 1):
        summary = article.get('summary') or ''
        line = f"{i}. \"{article.get('title', '')}\""
        if summary:
            line += f" - {summary}"
        lines.append(line)
    return "\n\n".join(lines)
