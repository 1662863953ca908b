"""
OpenSearch Query Builder

Stateful, resettable builder that assembles one strategy query: a primary
clause, shared filters, score functions, strategy weight, pagination and
sort. Strategies call reset() before building.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from ....models.search_request import SearchRequest
from ....models.weights import WeightConfig
from ..context import DEFAULT_CANDIDATES_PER_STRATEGY, SearchContext
from .query_dsl import (
    BoolFilter,
    FunctionScore,
    MatchAll,
    MultiMatch,
    NestedKnn,
    QueryNode,
    TaxonomyTerms,
)

logger = logging.getLogger(__name__)

# Boosted text fields searched by every keyword strategy
KEYWORD_SEARCH_FIELDS = [
    "name^3",
    "description^2",
    "summary",
    "service.name^3",
    "service.description^2",
    "organization.name^2",
    "taxonomies.name",
    "taxonomies.description",
]

DEFAULT_SORT = [{"_score": {"order": "desc"}}, {"_id": {"order": "asc"}}]


def _miles(value: float) -> str:
    if float(value).is_integer():
        value = int(value)
    return f"{value}mi"


class QueryBuilder:
    """
    Builds OpenSearch search bodies for the hybrid strategies.

    Every body has the shape:
        {"size": k, "query": {"function_score": {...}}, "sort": [...], "from"|"search_after"?}

    Example:
        >>> body = (
        ...     builder.reset()
        ...     .with_match_all()
        ...     .with_filters(context.filters)
        ...     .with_pagination(context)
        ...     .build()
        ... )
    """

    def __init__(self):
        self.reset()

    def reset(self) -> "QueryBuilder":
        """Return to the base state: size 50, score/id sort, no clauses"""
        self._size = DEFAULT_CANDIDATES_PER_STRATEGY
        self._sort: List[Dict[str, Any]] = copy.deepcopy(DEFAULT_SORT)
        self._primary: Optional[QueryNode] = None
        self._functions: List[Dict[str, Any]] = []
        self._filters: List[Dict[str, Any]] = []
        self._boost: Optional[float] = None
        self._from: Optional[int] = None
        self._search_after: Optional[List[Any]] = None
        return self

    def with_size(self, size: int) -> "QueryBuilder":
        self._size = size
        return self

    def with_nested_knn(self, path: str, field: str, vector: List[float], k: int) -> "QueryBuilder":
        """Primary clause: nested vector similarity on path.field"""
        self._primary = NestedKnn(path=path, field=field, vector=vector, k=k)
        return self

    def with_multi_match(
        self,
        query: str,
        operator: str = "or",
        fields: Optional[List[str]] = None,
    ) -> "QueryBuilder":
        """Primary clause: best_fields text match"""
        self._primary = MultiMatch(query=query, fields=fields or KEYWORD_SEARCH_FIELDS, operator=operator)
        return self

    def with_taxonomy_terms(self, codes: List[str]) -> "QueryBuilder":
        """Primary clause: any of the given taxonomy codes"""
        self._primary = TaxonomyTerms(codes=list(codes))
        return self

    def with_match_all(self) -> "QueryBuilder":
        self._primary = MatchAll()
        return self

    def with_filters(self, filters: List[Dict[str, Any]]) -> "QueryBuilder":
        """Add non-scoring filters around the primary clause"""
        self._filters.extend(filters)
        return self

    def with_geospatial_scoring(self, request: SearchRequest, weights: WeightConfig) -> "QueryBuilder":
        """
        Add gaussian distance decay from the user's point.

        No-op without a point. Documents at decay_offset + decay_scale miles
        score half of a document at the origin.
        """
        if not request.has_geo_point():
            return self

        self._functions.append(
            {
                "gauss": {
                    "location.point": {
                        "origin": {"lat": request.lat, "lon": request.lon},
                        "scale": _miles(weights.geospatial.decay_scale),
                        "offset": _miles(weights.geospatial.decay_offset),
                        "decay": 0.5,
                    }
                }
            }
        )
        return self

    def with_weight(self, weight: float) -> "QueryBuilder":
        """Strategy weight, applied as the function_score boost"""
        self._boost = weight
        return self

    def with_pagination(self, context: SearchContext) -> "QueryBuilder":
        """Offset mode sets from; cursor mode sets search_after when a cursor exists"""
        self._from = None
        self._search_after = None

        if context.use_offset_pagination:
            self._from = context.offset
        elif context.search_after:
            self._search_after = list(context.search_after)
        return self

    def with_sort(self, sort: List[Dict[str, Any]]) -> "QueryBuilder":
        self._sort = copy.deepcopy(sort)
        return self

    def build(self) -> Dict[str, Any]:
        """
        Render the accumulated state

        Returns:
            Search body for one strategy

        Raises:
            ValueError: If no primary clause was set
        """
        if self._primary is None:
            raise ValueError("QueryBuilder.build() called without a primary query clause")

        query: QueryNode = self._primary
        if self._filters:
            query = BoolFilter(must=query, filters=list(self._filters))

        body: Dict[str, Any] = {
            "size": self._size,
            "query": FunctionScore(query=query, functions=list(self._functions), boost=self._boost).to_dict(),
            "sort": copy.deepcopy(self._sort),
        }

        if self._from is not None:
            body["from"] = self._from
        elif self._search_after:
            body["search_after"] = list(self._search_after)

        return body
