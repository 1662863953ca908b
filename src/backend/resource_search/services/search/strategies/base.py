"""
Base Search Strategy Interface

Defines the abstract interface for all hybrid search strategies.
A strategy decides whether it applies to a request, builds its own backend
query and declares its weight in the fused ranking.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from ....models.weights import WeightConfig
from ..components.query_builder import QueryBuilder
from ..context import SearchContext


class SearchStrategy(ABC):
    """
    Abstract base class for all search strategies.

    Strategies are grouped into families:
    - Browse / MatchAllFiltered: no query text
    - Semantic*: vector similarity on one embedded field
    - Keyword*: text match on one keyword variation
    - IntentTaxonomy: classifier-predicted taxonomy codes
    """

    name: str = ""

    def __init__(self, query_builder: QueryBuilder):
        """
        Initialize strategy.

        Args:
            query_builder: Shared builder, reset by the strategy before each build
        """
        self.query_builder = query_builder

    @abstractmethod
    def can_execute(self, context: SearchContext) -> bool:
        """
        Check whether this strategy contributes to the request.

        Args:
            context: Per-request search context

        Returns:
            True if the strategy should run
        """

    @abstractmethod
    def build_query(self, context: SearchContext) -> Dict[str, Any]:
        """
        Build the backend search body for this strategy.

        Args:
            context: Per-request search context

        Returns:
            Search body for one entry of the batched multi-search
        """

    @abstractmethod
    def get_weight(self, weights: WeightConfig) -> float:
        """
        Weight of this strategy in the fused ranking.

        Args:
            weights: Resolved weights for the request

        Returns:
            Non-negative weight, applied as the query boost
        """

    def get_name(self) -> str:
        return self.name
