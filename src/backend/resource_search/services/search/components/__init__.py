"""
Search Components

Reusable building blocks for strategy queries: query DSL nodes, the
QueryBuilder and the FilterFactory.
"""

from .filter_factory import FilterFactory
from .query_builder import KEYWORD_SEARCH_FIELDS, QueryBuilder

__all__ = ["FilterFactory", "QueryBuilder", "KEYWORD_SEARCH_FIELDS"]
