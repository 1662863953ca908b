"""
Semantic Search Strategies

Nested KNN vector similarity between the query embedding and one embedded
field of the resource document.
"""

from typing import Any, Dict

from ....models.weights import WeightConfig
from ..context import SearchContext
from .base import SearchStrategy


class SemanticSearchStrategy(SearchStrategy):
    """
    KNN on <path>.embedding.

    Weight: semantic.<weight_key> * strategies.semantic_search
    """

    path: str = ""
    weight_key: str = ""

    @property
    def vector_field(self) -> str:
        return f"{self.path}.embedding"

    def can_execute(self, context: SearchContext) -> bool:
        return context.has_embedding

    def build_query(self, context: SearchContext) -> Dict[str, Any]:
        return (
            self.query_builder.reset()
            .with_size(context.k)
            .with_nested_knn(self.path, self.vector_field, context.embedding, context.k)
            .with_filters(context.filters)
            .with_geospatial_scoring(context.request, context.weights)
            .with_weight(self.get_weight(context.weights))
            .with_pagination(context)
            .build()
        )

    def get_weight(self, weights: WeightConfig) -> float:
        return getattr(weights.semantic, self.weight_key) * weights.strategies.semantic_search


class SemanticServiceStrategy(SemanticSearchStrategy):
    name = "semantic_service"
    path = "service"
    weight_key = "service"


class SemanticTaxonomyStrategy(SemanticSearchStrategy):
    name = "semantic_taxonomy"
    path = "taxonomies"
    weight_key = "taxonomy"


class SemanticOrganizationStrategy(SemanticSearchStrategy):
    name = "semantic_organization"
    path = "organization"
    weight_key = "organization"
