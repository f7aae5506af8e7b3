"""Service layer implementations.

Barrel export for business logic services.
"""

from .extract import extract_search_fields
from .query import parse_query
from .search import SearchEngine, ScoredEntry, partial_ratio
from .stats import StatisticsAggregator, analyze_entries
from .display import display_text, entries_usage
from .history import HistoryService

__all__ = [
    "extract_search_fields",
    "parse_query",
    "SearchEngine",
    "ScoredEntry",
    "partial_ratio",
    "StatisticsAggregator",
    "analyze_entries",
    "display_text",
    "entries_usage",
    "HistoryService",
]
