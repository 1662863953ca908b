"""
Intent Taxonomy Strategy

Matches documents tagged with the taxonomy codes predicted by the intent
classifier.
"""

from typing import Any, Dict

from ....models.weights import WeightConfig
from ..context import SearchContext
from .base import SearchStrategy


class IntentTaxonomyStrategy(SearchStrategy):
    name = "intent_taxonomy"

    def can_execute(self, context: SearchContext) -> bool:
        classification = context.intent_classification
        if classification is None or classification.is_low_information_query:
            return False
        return len(classification.combined_taxonomy_codes) > 0

    def build_query(self, context: SearchContext) -> Dict[str, Any]:
        return (
            self.query_builder.reset()
            .with_size(context.k)
            .with_taxonomy_terms(context.intent_classification.combined_taxonomy_codes)
            .with_filters(context.filters)
            .with_geospatial_scoring(context.request, context.weights)
            .with_weight(self.get_weight(context.weights))
            .with_pagination(context)
            .build()
        )

    def get_weight(self, weights: WeightConfig) -> float:
        return weights.strategies.intent_driven
