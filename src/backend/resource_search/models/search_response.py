"""
Search Response Models

Response envelope of the hybrid search endpoint. Hits are passed through as
backend documents; pagination and debug fields are omitted when unused.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .intent import IntentClassification

# Dropped from the payload when unset, so each pagination mode only shows its own fields
OPTIONAL_RESPONSE_FIELDS = (
    "search_after",
    "page",
    "total_pages",
    "has_next_page",
    "has_previous_page",
    "metadata",
)


class HitsTotal(BaseModel):
    value: int
    relation: str = "eq"


class HitsEnvelope(BaseModel):
    total: HitsTotal
    max_score: Optional[float] = None
    hits: List[Dict[str, Any]] = Field(default_factory=list)


class SourceContribution(BaseModel):
    """How one strategy contributed to a fused hit"""
    strategy: str
    pre_weight_score: float
    strategy_weight: float


class TopHitSources(BaseModel):
    """Attribution of one returned hit (debug mode only)"""
    id: str
    organization_name: Optional[str] = None
    service_name: Optional[str] = None
    name: Optional[str] = None
    rank: int
    total_document_relevance_score: Optional[float] = None
    sources: List[SourceContribution] = Field(default_factory=list)


class SearchMetadata(BaseModel):
    search_pipeline: str = "hybrid_semantic"
    granular_phase_timings: Dict[str, Any] = Field(default_factory=dict)
    strategies_executed: List[str] = Field(default_factory=list)
    weights: Dict[str, Any] = Field(default_factory=dict)
    sources_of_top_hits: List[TopHitSources] = Field(default_factory=list)
    strategy_coverage: Dict[str, Any] = Field(default_factory=dict)


class SearchResponse(BaseModel):
    """Hybrid search response"""
    took: int
    timed_out: bool = False
    hits: HitsEnvelope
    total_results: int
    intent_classification: Optional[IntentClassification] = None
    is_low_information_query: bool = False

    # Cursor pagination
    search_after: Optional[List[Any]] = None

    # Offset pagination
    page: Optional[int] = None
    total_pages: Optional[int] = None
    has_next_page: Optional[bool] = None
    has_previous_page: Optional[bool] = None

    metadata: Optional[SearchMetadata] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the API, dropping unset pagination and debug fields"""
        data = self.model_dump()
        for key in OPTIONAL_RESPONSE_FIELDS:
            if data.get(key) is None:
                data.pop(key, None)
        return data
