"""
Search Strategy Package

Contains all hybrid search strategy implementations.
"""

from .base import SearchStrategy
from .browse_strategy import BrowseStrategy, MatchAllFilteredStrategy
from .intent_strategy import IntentTaxonomyStrategy
from .keyword_strategy import (
    KeywordNounsStrategy,
    KeywordOriginalStrategy,
    KeywordSearchStrategy,
    KeywordStemmedStrategy,
    KeywordSynonymsStrategy,
    KeywordTopicsStrategy,
)
from .semantic_strategy import (
    SemanticOrganizationStrategy,
    SemanticSearchStrategy,
    SemanticServiceStrategy,
    SemanticTaxonomyStrategy,
)

__all__ = [
    "SearchStrategy",
    "BrowseStrategy",
    "MatchAllFilteredStrategy",
    "IntentTaxonomyStrategy",
    "KeywordSearchStrategy",
    "KeywordOriginalStrategy",
    "KeywordNounsStrategy",
    "KeywordStemmedStrategy",
    "KeywordSynonymsStrategy",
    "KeywordTopicsStrategy",
    "SemanticSearchStrategy",
    "SemanticServiceStrategy",
    "SemanticTaxonomyStrategy",
    "SemanticOrganizationStrategy",
]
