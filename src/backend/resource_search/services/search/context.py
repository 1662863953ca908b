"""
Search Context

Per-request state handed to every strategy. Built once by the orchestrator
after query understanding and never modified afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...models.intent import IntentClassification, KeywordVariations
from ...models.search_request import SearchRequest
from ...models.weights import WeightConfig

# Candidates fetched per strategy before fusion
DEFAULT_CANDIDATES_PER_STRATEGY = 50


@dataclass(frozen=True)
class SearchContext:
    """
    Attributes:
        request: Validated search request
        weights: Resolved weights (request overrides merged over file config)
        embedding: Query embedding, None or empty when not computed
        filters: Filters applied by every strategy
        k: Candidates per strategy and KNN neighbour count
        search_after: Cursor for cursor pagination
        use_offset_pagination: True for legacy page/offset pagination
        offset: Result offset in offset mode
        intent_classification: Classifier output, None when skipped
        keyword_variations: Lexical variations, None when skipped
    """
    request: SearchRequest
    weights: WeightConfig
    embedding: Optional[List[float]] = None
    filters: List[Dict[str, Any]] = field(default_factory=list)
    k: int = DEFAULT_CANDIDATES_PER_STRATEGY
    search_after: Optional[List[Any]] = None
    use_offset_pagination: bool = False
    offset: int = 0
    intent_classification: Optional[IntentClassification] = None
    keyword_variations: Optional[KeywordVariations] = None

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)
