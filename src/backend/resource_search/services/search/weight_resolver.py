"""
Weight Resolver

Merges per-request custom weights over the hot-reloaded file configuration.
"""

import logging
from typing import Any, Optional

from ...models.search_request import SearchRequest
from ...models.weights import (
    GeospatialWeights,
    KeywordVariationWeights,
    SemanticWeights,
    StrategyWeights,
    WeightConfig,
)
from ..config.weights_config_service import WeightsConfigService

logger = logging.getLogger(__name__)


def _pick(override: Any, name: str, fallback: float) -> float:
    value = getattr(override, name, None) if override is not None else None
    return fallback if value is None else value


class WeightResolver:
    """
    Resolves the effective WeightConfig for a request.

    Each leaf is custom_weights.<path> if given, else the file config value.
    geospatial.decay_scale additionally falls back to the request's distance
    before the file config, so the decay curve follows the search radius.
    """

    def __init__(self, weights_service: WeightsConfigService):
        self.weights_service = weights_service

    def resolve(self, request: SearchRequest, config: Optional[WeightConfig] = None) -> WeightConfig:
        """
        Args:
            request: Validated search request
            config: Base weights (defaults to the current file snapshot)

        Returns:
            Fully populated WeightConfig
        """
        base = config or self.weights_service.get_weights()
        custom = request.custom_weights

        semantic = custom.semantic if custom else None
        strategies = custom.strategies if custom else None
        geospatial = custom.geospatial if custom else None
        keyword_variations = custom.keyword_variations if custom else None

        decay_scale_fallback = request.distance if request.distance is not None else base.geospatial.decay_scale

        resolved = WeightConfig(
            semantic=SemanticWeights(
                service=_pick(semantic, "service", base.semantic.service),
                taxonomy=_pick(semantic, "taxonomy", base.semantic.taxonomy),
                organization=_pick(semantic, "organization", base.semantic.organization),
            ),
            strategies=StrategyWeights(
                semantic_search=_pick(strategies, "semantic_search", base.strategies.semantic_search),
                keyword_search=_pick(strategies, "keyword_search", base.strategies.keyword_search),
                intent_driven=_pick(strategies, "intent_driven", base.strategies.intent_driven),
            ),
            # request.distance is unbounded, so decay_scale may exceed the config range
            geospatial=GeospatialWeights.model_construct(
                weight=_pick(geospatial, "weight", base.geospatial.weight),
                decay_scale=_pick(geospatial, "decay_scale", decay_scale_fallback),
                decay_offset=_pick(geospatial, "decay_offset", base.geospatial.decay_offset),
            ),
            keyword_variations=KeywordVariationWeights(
                nouns_multiplier=_pick(
                    keyword_variations, "nouns_multiplier", base.keyword_variations.nouns_multiplier
                ),
                stemmed_nouns_multiplier=_pick(
                    keyword_variations,
                    "stemmed_nouns_multiplier",
                    base.keyword_variations.stemmed_nouns_multiplier,
                ),
            ),
        )

        if custom:
            logger.debug(f"Resolved weights with request overrides: {resolved.model_dump()}")
        return resolved
