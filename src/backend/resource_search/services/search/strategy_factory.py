"""
Strategy Factory

Creates the hybrid search strategies in their fixed execution order and
wires them to a shared QueryBuilder.

Usage:
    from resource_search.services.search.strategy_factory import StrategyFactory

    registry = StrategyFactory().create_registry()
    orchestrator = HybridSearchOrchestrator(registry=registry, ...)
"""

import logging
from typing import List, Optional, Type

from .components.query_builder import QueryBuilder
from .registry import SearchStrategyRegistry
from .strategies.base import SearchStrategy
from .strategies.browse_strategy import BrowseStrategy, MatchAllFilteredStrategy
from .strategies.intent_strategy import IntentTaxonomyStrategy
from .strategies.keyword_strategy import (
    KeywordNounsStrategy,
    KeywordOriginalStrategy,
    KeywordStemmedStrategy,
    KeywordSynonymsStrategy,
    KeywordTopicsStrategy,
)
from .strategies.semantic_strategy import (
    SemanticOrganizationStrategy,
    SemanticServiceStrategy,
    SemanticTaxonomyStrategy,
)

logger = logging.getLogger(__name__)


class StrategyFactory:
    """
    Factory for the hybrid search strategies.

    STRATEGY_CLASSES order is the registry order, and therefore the order of
    multi-search entries and backend responses.
    """

    STRATEGY_CLASSES: List[Type[SearchStrategy]] = [
        BrowseStrategy,
        MatchAllFilteredStrategy,
        SemanticServiceStrategy,
        SemanticTaxonomyStrategy,
        SemanticOrganizationStrategy,
        KeywordOriginalStrategy,
        KeywordNounsStrategy,
        KeywordStemmedStrategy,
        KeywordSynonymsStrategy,
        KeywordTopicsStrategy,
        IntentTaxonomyStrategy,
    ]

    def __init__(self, query_builder: Optional[QueryBuilder] = None):
        """
        Initialize strategy factory.

        Args:
            query_builder: Builder shared by all strategies (created if omitted)
        """
        self.query_builder = query_builder or QueryBuilder()

    def create_all_strategies(self) -> List[SearchStrategy]:
        strategies = [strategy_class(self.query_builder) for strategy_class in self.STRATEGY_CLASSES]
        logger.info(f"StrategyFactory created {len(strategies)} strategies: {[s.get_name() for s in strategies]}")
        return strategies

    def create_registry(self) -> SearchStrategyRegistry:
        """Registry populated with every strategy, in execution order"""
        registry = SearchStrategyRegistry()
        for strategy in self.create_all_strategies():
            registry.register(strategy)
        return registry
