"""
Search Strategy Registry

Ordered collection of strategies. Selects the strategies eligible for a
request and builds their queries into one multi-search batch.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...models.weights import WeightConfig
from .context import SearchContext
from .strategies.base import SearchStrategy

logger = logging.getLogger(__name__)


@dataclass
class MsearchBatch:
    """
    Batched multi-search request.

    Attributes:
        body: Alternating header/body entries ({"index": ...}, search body, ...)
        strategy_names: Strategy name per search body, in body order
    """
    body: List[Dict[str, Any]] = field(default_factory=list)
    strategy_names: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.strategy_names


class SearchStrategyRegistry:
    """
    Registry for search strategies.

    Registration order is preserved; it fixes the order of batch entries and
    therefore of backend responses.
    """

    def __init__(self):
        """Initialize empty registry"""
        self._strategies: List[SearchStrategy] = []
        logger.info("SearchStrategyRegistry initialized")

    def register(self, strategy: SearchStrategy) -> None:
        """
        Register a search strategy.

        Args:
            strategy: SearchStrategy instance; replaces a registered strategy of the same name in place
        """
        for position, existing in enumerate(self._strategies):
            if existing.get_name() == strategy.get_name():
                logger.warning(f"Overwriting existing strategy: {strategy.get_name()}")
                self._strategies[position] = strategy
                return

        self._strategies.append(strategy)
        logger.debug(f"Registered strategy '{strategy.get_name()}'")

    def get(self, name: str) -> Optional[SearchStrategy]:
        """
        Get strategy by name.

        Args:
            name: Strategy name

        Returns:
            SearchStrategy instance or None if not found
        """
        for strategy in self._strategies:
            if strategy.get_name() == name:
                return strategy
        return None

    def list_strategy_names(self) -> List[str]:
        return [strategy.get_name() for strategy in self._strategies]

    def get_eligible(self, context: SearchContext) -> List[SearchStrategy]:
        """
        Strategies whose can_execute() accepts the context, in registry order.

        Args:
            context: Per-request search context

        Returns:
            Eligible strategies (possibly empty)
        """
        eligible = [s for s in self._strategies if s.can_execute(context)]
        logger.info(f"Eligible strategies: {[s.get_name() for s in eligible]}")
        return eligible

    def build_msearch_batch(self, context: SearchContext, index: str) -> MsearchBatch:
        """
        Build the multi-search batch for every eligible strategy.

        Args:
            context: Per-request search context
            index: Target index name

        Returns:
            MsearchBatch with one header/body pair per eligible strategy
        """
        batch = MsearchBatch()
        for strategy in self.get_eligible(context):
            batch.body.append({"index": index})
            batch.body.append(strategy.build_query(context))
            batch.strategy_names.append(strategy.get_name())
        return batch

    def get_weights_by_strategy(self, weights: WeightConfig) -> Dict[str, float]:
        """Weight of every registered strategy under the given weights"""
        return {strategy.get_name(): strategy.get_weight(weights) for strategy in self._strategies}

