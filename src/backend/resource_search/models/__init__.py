"""Request, response, weight and query-understanding models."""

from .intent import IntentClassification, IntentScore, KeywordVariations
from .search_request import SearchRequest, TaxonomyNode, validate_taxonomy_tree
from .search_response import (
    HitsEnvelope,
    HitsTotal,
    SearchMetadata,
    SearchResponse,
    SourceContribution,
    TopHitSources,
)
from .weights import (
    DEFAULT_WEIGHTS_CONFIG,
    CustomWeights,
    GeospatialWeights,
    KeywordVariationWeights,
    SemanticWeights,
    StrategyWeights,
    WeightConfig,
    WeightsConfigFile,
)

__all__ = [
    "IntentClassification",
    "IntentScore",
    "KeywordVariations",
    "SearchRequest",
    "TaxonomyNode",
    "validate_taxonomy_tree",
    "HitsEnvelope",
    "HitsTotal",
    "SearchMetadata",
    "SearchResponse",
    "SourceContribution",
    "TopHitSources",
    "DEFAULT_WEIGHTS_CONFIG",
    "CustomWeights",
    "GeospatialWeights",
    "KeywordVariationWeights",
    "SemanticWeights",
    "StrategyWeights",
    "WeightConfig",
    "WeightsConfigFile",
]
