"""
Browse Strategies

Strategies for requests without query text: plain browsing and taxonomy-only
filtering.
"""

from typing import Any, Dict, List

from ....models.weights import WeightConfig
from ..context import SearchContext
from .base import SearchStrategy


class BrowseStrategy(SearchStrategy):
    """
    Match everything that passes the filters, in a stable order.

    Nearest first when the user gave a point, otherwise alphabetical by
    service name. Scores are not meaningful and no weight is applied.
    """

    name = "browse_match_all"

    def can_execute(self, context: SearchContext) -> bool:
        request = context.request
        return request.query_text is None and not request.has_taxonomy_query()

    def _sort(self, context: SearchContext) -> List[Dict[str, Any]]:
        request = context.request
        if request.has_geo_point():
            return [
                {
                    "_geo_distance": {
                        "location.point": {"lat": request.lat, "lon": request.lon},
                        "order": "asc",
                        "unit": "mi",
                        "distance_type": "arc",
                    }
                },
                {"_id": {"order": "asc"}},
            ]
        return [{"service.name.keyword": {"order": "asc"}}, {"_id": {"order": "asc"}}]

    def build_query(self, context: SearchContext) -> Dict[str, Any]:
        return (
            self.query_builder.reset()
            .with_size(context.k)
            .with_match_all()
            .with_filters(context.filters)
            .with_pagination(context)
            .with_sort(self._sort(context))
            .build()
        )

    def get_weight(self, weights: WeightConfig) -> float:
        return 1.0


class MatchAllFilteredStrategy(SearchStrategy):
    """Taxonomy-only search: every document matching the taxonomy filters"""

    name = "match_all_filtered"

    def can_execute(self, context: SearchContext) -> bool:
        request = context.request
        return request.query_text is None and request.has_taxonomy_query()

    def build_query(self, context: SearchContext) -> Dict[str, Any]:
        return (
            self.query_builder.reset()
            .with_size(context.k)
            .with_match_all()
            .with_filters(context.filters)
            .with_geospatial_scoring(context.request, context.weights)
            .with_weight(self.get_weight(context.weights))
            .with_pagination(context)
            .build()
        )

    def get_weight(self, weights: WeightConfig) -> float:
        return 1.0
