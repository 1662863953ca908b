"""
Search Weight Models

Frozen weight snapshots loaded from search_weights.json, plus the optional
per-request override shape. Ranges match the config JSON schema.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class SemanticWeights(BaseModel):
    """Relative weight of each embedded field"""
    model_config = ConfigDict(frozen=True)

    service: float = Field(default=1.0, ge=0, le=10)
    taxonomy: float = Field(default=1.0, ge=0, le=10)
    organization: float = Field(default=1.0, ge=0, le=10)


class StrategyWeights(BaseModel):
    """Weight of each strategy family"""
    model_config = ConfigDict(frozen=True)

    semantic_search: float = Field(default=1.0, ge=0, le=10)
    keyword_search: float = Field(default=1.0, ge=0, le=10)
    intent_driven: float = Field(default=1.0, ge=0, le=10)


class GeospatialWeights(BaseModel):
    """Gaussian distance decay parameters (miles)"""
    model_config = ConfigDict(frozen=True)

    weight: float = Field(default=2.0, ge=0, le=10)
    decay_scale: float = Field(default=50, ge=1, le=200)
    decay_offset: float = Field(default=0, ge=0, le=50)


class KeywordVariationWeights(BaseModel):
    """Multipliers applied to keyword_search for derived variations"""
    model_config = ConfigDict(frozen=True)

    nouns_multiplier: float = Field(default=0.95, ge=0, le=1)
    stemmed_nouns_multiplier: float = Field(default=0.85, ge=0, le=1)


class WeightConfig(BaseModel):
    """
    Fully resolved weights used by one request.

    Every leaf is always present; request overrides and file config are merged
    by WeightResolver before a WeightConfig is built.
    """
    model_config = ConfigDict(frozen=True)

    semantic: SemanticWeights = Field(default_factory=SemanticWeights)
    strategies: StrategyWeights = Field(default_factory=StrategyWeights)
    geospatial: GeospatialWeights = Field(default_factory=GeospatialWeights)
    keyword_variations: KeywordVariationWeights = Field(default_factory=KeywordVariationWeights)


class WeightsConfigFile(WeightConfig):
    """Versioned weight config as stored on disk"""

    version: str
    description: Optional[str] = None
    last_updated: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def to_weights(self) -> WeightConfig:
        """Drop the file bookkeeping fields"""
        return WeightConfig(
            semantic=self.semantic,
            strategies=self.strategies,
            geospatial=self.geospatial,
            keyword_variations=self.keyword_variations,
        )


# Used when no file has ever loaded successfully
DEFAULT_WEIGHTS_CONFIG = WeightsConfigFile(
    version="1.0.0",
    description="Hardcoded fallback configuration",
)


class SemanticWeightsOverride(BaseModel):
    model_config = ConfigDict(extra="forbid")

    service: Optional[float] = Field(default=None, ge=0, le=10)
    taxonomy: Optional[float] = Field(default=None, ge=0, le=10)
    organization: Optional[float] = Field(default=None, ge=0, le=10)


class StrategyWeightsOverride(BaseModel):
    model_config = ConfigDict(extra="forbid")

    semantic_search: Optional[float] = Field(default=None, ge=0, le=10)
    keyword_search: Optional[float] = Field(default=None, ge=0, le=10)
    intent_driven: Optional[float] = Field(default=None, ge=0, le=10)


class GeospatialWeightsOverride(BaseModel):
    model_config = ConfigDict(extra="forbid")

    weight: Optional[float] = Field(default=None, ge=0, le=10)
    decay_scale: Optional[float] = Field(default=None, ge=1, le=200)
    decay_offset: Optional[float] = Field(default=None, ge=0, le=50)


class KeywordVariationWeightsOverride(BaseModel):
    model_config = ConfigDict(extra="forbid")

    nouns_multiplier: Optional[float] = Field(default=None, ge=0, le=1)
    stemmed_nouns_multiplier: Optional[float] = Field(default=None, ge=0, le=1)


class CustomWeights(BaseModel):
    """
    Per-request weight overrides.

    Any leaf left out falls back to the hot-reloaded file config.
    """
    model_config = ConfigDict(extra="forbid")

    semantic: Optional[SemanticWeightsOverride] = None
    strategies: Optional[StrategyWeightsOverride] = None
    geospatial: Optional[GeospatialWeightsOverride] = None
    keyword_variations: Optional[KeywordVariationWeightsOverride] = None
