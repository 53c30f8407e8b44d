"""
Keyword tables for topic classification and thematic stock matching.

TOPIC_KEYWORDS is ordered: the first topic with a keyword present in the
event text wins.
"""

TOPIC_KEYWORDS = [
    ("regulatory", [
        "tariff", "ban", "illegal", "regulation", "law", "legislation", "congress",
        "senate", "bill", "act", "antitrust", "ftc", "sec", "doj", "sanction",
        "import", "export", "trade war", "trade deal", "customs", "duty", "quota",
    ]),
    ("safety_incident", [
        "emergency", "crash", "accident", "incident", "disaster", "explosion",
        "fire", "death", "injury", "recall", "defect", "malfunction", "grounded",
        "landing", "collision", "derail",
    ]),
    ("legal", [
        "lawsuit", "sue", "court", "judge", "trial", "verdict", "settlement",
        "indictment", "arrest", "guilty", "convicted", "appeal", "ruling",
        "prison", "jail", "fine", "penalty", "charge", "allegation",
    ]),
    ("geopolitical", [
        "war", "invasion", "military", "ceasefire", "peace", "conflict", "nato",
        "ukraine", "russia", "china", "taiwan", "israel", "iran", "missile",
        "nuclear", "troops", "intervention", "sanctions",
    ]),
    ("election", [
        "election", "vote", "ballot", "poll", "candidate", "president", "governor",
        "senator", "congress", "democrat", "republican", "primary", "nominee",
        "campaign", "electoral",
    ]),
    ("product_launch", [
        "launch", "release", "unveil", "announce", "debut", "rollout", "preview",
        "reveal", "introduce", "ship", "available", "beta", "update", "version",
    ]),
    ("executive", [
        "ceo", "cto", "cfo", "executive", "founder", "chairman", "board",
        "resign", "fired", "hired", "step down", "appointment",
    ]),
    ("social_media", [
        "tweet", "post", "instagram", "tiktok", "youtube", "facebook", "twitter",
        "x.com", "follow", "unfollow", "viral", "trending", "account", "profile",
    ]),
    ("crypto", [
        "bitcoin", "ethereum", "crypto", "blockchain", "token", "nft", "defi",
        "exchange", "wallet", "mining", "halving", "etf", "coinbase", "binance",
        "solana", "dogecoin", "memecoin",
    ]),
    ("ai_tech", [
        "ai", "artificial intelligence", "machine learning", "chatgpt", "gpt",
        "openai", "gemini", "claude", "llm", "neural", "model", "training",
        "inference", "chip", "gpu", "nvidia", "semiconductor",
    ]),
    ("financial", [
        "earnings", "revenue", "profit", "loss", "ipo", "stock", "share",
        "dividend", "buyback", "market cap", "valuation", "funding", "round",
        "investment", "acquisition", "merger", "bankruptcy", "debt",
    ]),
    ("entertainment", [
        "movie", "film", "box office", "album", "song", "concert", "award",
        "grammy", "oscar", "emmy", "celebrity", "star", "actor", "actress",
        "sports", "nba", "nfl", "mlb", "championship", "super bowl",
    ]),
]

# Coarser categories used for training rows, checked in order
EVENT_CATEGORY_KEYWORDS = [
    ("safety_incident", ["emergency", "crash", "incident"]),
    ("product_launch", ["launch", "release", "unveil"]),
    ("regulatory", ["ban", "illegal", "regulation"]),
    ("social_media", ["tweet", "post", "social"]),
    ("market_listing", ["list", "exchange", "trading"]),
    ("business_deal", ["deal", "partnership", "acquisition"]),
    ("legal", ["lawsuit", "court", "legal"]),
]

TOPIC_STOCK_MAPPINGS = {
    "regulatory": {
        "stocks": ["META", "GOOGL", "AMZN", "AAPL", "MSFT", "NVDA", "TSLA"],
        "reason": "Regulatory changes impact large tech and market leaders",
    },
    "safety_incident": {
        "stocks": ["BA", "LMT", "RTX", "GD", "NOC", "AAL", "UAL", "DAL"],
        "reason": "Safety incidents affect aerospace and defense sector",
    },
    "legal": {
        "stocks": ["META", "GOOGL", "AMZN", "AAPL", "MSFT", "TSLA"],
        "reason": "Legal matters frequently involve major tech companies",
    },
    "geopolitical": {
        "stocks": ["LMT", "RTX", "NOC", "GD", "BA", "XOM", "CVX", "OXY", "TSM", "INTC"],
        "reason": "Geopolitical events affect defense, energy, and semiconductor supply chains",
    },
    "election": {
        "stocks": ["SPY", "QQQ", "DIA", "TSLA", "META", "GOOGL", "XOM", "CVX"],
        "reason": "Elections impact market sentiment and specific policy-sensitive sectors",
    },
    "product_launch": {
        "stocks": ["AAPL", "GOOGL", "MSFT", "META", "NVDA", "AMD", "TSLA"],
        "reason": "Product launches drive tech sector movements",
    },
    "executive": {
        "stocks": ["TSLA", "META", "AAPL", "MSFT", "GOOGL", "AMZN"],
        "reason": "Executive changes affect major companies",
    },
    "social_media": {
        "stocks": ["META", "SNAP", "PINS", "RDDT", "GOOGL", "TWTR"],
        "reason": "Social media events impact the sector",
    },
    "crypto": {
        "stocks": ["COIN", "MSTR", "MARA", "RIOT", "SQ", "HOOD", "PYPL"],
        "reason": "Crypto events affect crypto-related equities",
    },
    "ai_tech": {
        "stocks": ["NVDA", "AMD", "GOOGL", "MSFT", "META", "AMZN", "TSM", "AVGO", "INTC"],
        "reason": "AI developments impact the semiconductor and tech sector",
    },
    "financial": {
        "stocks": ["JPM", "BAC", "GS", "MS", "C", "WFC", "BRK.B", "V", "MA"],
        "reason": "Financial events affect banking and payment sectors",
    },
    "entertainment": {
        "stocks": ["DIS", "NFLX", "WBD", "PARA", "CMCSA", "SPOT"],
        "reason": "Entertainment events impact media companies",
    },
    "other": {
        "stocks": [],
        "reason": "General market event",
    },
}

# Keywords that always pull in a fixed basket of stocks
HIGH_IMPACT_KEYWORDS = [
    {
        "keywords": ["trump", "biden", "white house", "president", "potus"],
        "stocks": ["SPY", "QQQ", "TSLA", "META", "XOM", "LMT"],
        "reason": "Presidential politics affects broad market",
    },
    {
        "keywords": ["fed", "interest rate", "powell", "fomc", "federal reserve"],
        "stocks": ["SPY", "QQQ", "JPM", "BAC", "GS", "AAPL", "MSFT"],
        "reason": "Fed policy affects all markets",
    },
    {
        "keywords": ["china", "chinese", "beijing", "ccp"],
        "stocks": ["TSM", "AAPL", "NVDA", "NIO", "BABA", "JD", "PDD"],
        "reason": "China-related events affect supply chains and Chinese equities",
    },
    {
        "keywords": ["tiktok", "bytedance"],
        "stocks": ["META", "SNAP", "GOOGL", "PINS"],
        "reason": "TikTok events benefit competitors",
    },
    {
        "keywords": ["ukraine", "russia", "putin", "zelensky", "nato", "war"],
        "stocks": ["LMT", "RTX", "NOC", "GD", "BA", "XOM", "CVX", "HAL"],
        "reason": "Ukraine conflict affects defense and energy",
    },
    {
        "keywords": ["taiwan", "tsmc", "chip", "semiconductor"],
        "stocks": ["TSM", "NVDA", "AMD", "INTC", "AVGO", "QCOM", "ASML", "MU"],
        "reason": "Taiwan/chip events affect semiconductor sector",
    },
    {
        "keywords": ["bitcoin", "btc", "crypto", "ethereum", "eth"],
        "stocks": ["COIN", "MSTR", "MARA", "RIOT", "SQ", "HOOD"],
        "reason": "Crypto price movements affect crypto stocks",
    },
    {
        "keywords": ["openai", "chatgpt", "gpt-4", "gpt-5", "ai model", "large language"],
        "stocks": ["MSFT", "NVDA", "GOOGL", "META", "AMD"],
        "reason": "AI developments affect tech and chip stocks",
    },
    {
        "keywords": ["apple", "iphone", "ipad", "tim cook", "wwdc"],
        "stocks": ["AAPL", "QCOM", "TSM", "AVGO"],
        "reason": "Apple events affect supply chain",
    },
    {
        "keywords": ["elon", "musk", "spacex", "starlink", "neuralink"],
        "stocks": ["TSLA", "TWTR"],
        "reason": "Musk activities affect his companies",
    },
    {
        "keywords": ["zuckerberg", "meta", "facebook", "instagram", "whatsapp", "threads"],
        "stocks": ["META", "SNAP", "PINS"],
        "reason": "Meta events affect social media sector",
    },
]
