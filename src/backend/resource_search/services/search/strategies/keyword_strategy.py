"""
Keyword Search Strategies

Multi-field text match, one strategy per keyword variation of the query.
The original text is matched with AND; derived variations with OR.
"""

from typing import Any, Dict, List

from ....models.weights import WeightConfig
from ..context import SearchContext
from .base import SearchStrategy


class KeywordSearchStrategy(SearchStrategy):
    """
    best_fields match on one KeywordVariations list.

    Weight: strategies.keyword_search * variation multiplier
    """

    variation: str = ""
    operator: str = "or"

    def get_terms(self, context: SearchContext) -> List[str]:
        if context.keyword_variations is None:
            return []
        return getattr(context.keyword_variations, self.variation)

    def can_execute(self, context: SearchContext) -> bool:
        if context.request.disable_intent_classification:
            return False
        return len(self.get_terms(context)) > 0

    def build_query(self, context: SearchContext) -> Dict[str, Any]:
        text = " ".join(self.get_terms(context))
        return (
            self.query_builder.reset()
            .with_size(context.k)
            .with_multi_match(text, operator=self.operator)
            .with_filters(context.filters)
            .with_geospatial_scoring(context.request, context.weights)
            .with_weight(self.get_weight(context.weights))
            .with_pagination(context)
            .build()
        )

    def get_multiplier(self, weights: WeightConfig) -> float:
        return 1.0

    def get_weight(self, weights: WeightConfig) -> float:
        return weights.strategies.keyword_search * self.get_multiplier(weights)


class KeywordOriginalStrategy(KeywordSearchStrategy):
    name = "keyword_original"
    variation = "original"
    operator = "and"


class KeywordNounsStrategy(KeywordSearchStrategy):
    name = "keyword_nouns"
    variation = "nouns"

    def get_multiplier(self, weights: WeightConfig) -> float:
        return weights.keyword_variations.nouns_multiplier


class KeywordStemmedStrategy(KeywordSearchStrategy):
    name = "keyword_nouns_stemmed"
    variation = "stemmed_nouns"

    def get_multiplier(self, weights: WeightConfig) -> float:
        return weights.keyword_variations.stemmed_nouns_multiplier


class KeywordSynonymsStrategy(KeywordSearchStrategy):
    name = "keyword_synonyms"
    variation = "synonyms"

    def get_multiplier(self, weights: WeightConfig) -> float:
        return weights.keyword_variations.stemmed_nouns_multiplier


class KeywordTopicsStrategy(KeywordSearchStrategy):
    name = "keyword_topics"
    variation = "topics"

    def get_multiplier(self, weights: WeightConfig) -> float:
        return weights.keyword_variations.nouns_multiplier * 1.1
