"""
Portfolio and bet news
"""
from hedgeboard.services.news.news_service import (
    NewsService,
    get_news_service,
    extract_bet_subject,
    filter_to_last_week,
)

__all__ = [
    "NewsService",
    "get_news_service",
    "extract_bet_subject",
    "filter_to_last_week",
]
