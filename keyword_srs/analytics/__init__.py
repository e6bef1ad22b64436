"""
Analytics package exports.
"""

from keyword_srs.analytics.metrics import build_keyword_frame
from keyword_srs.analytics.service import build_collection_dashboard, get_keyword_stats
from keyword_srs.analytics.types import CollectionDashboardData, KeywordStats

__all__ = [
    "build_keyword_frame",
    "build_collection_dashboard",
    "get_keyword_stats",
    "CollectionDashboardData",
    "KeywordStats",
]
