"""
Filter Factory

Builds the non-scoring filters shared by every strategy of a request:
hard distance cutoff, service-area coverage, taxonomy AND/OR trees and the
optional "has a location point" restriction.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from ....models.search_request import SearchRequest, TaxonomyNode

logger = logging.getLogger(__name__)

TAXONOMY_PATH = "taxonomies"
TAXONOMY_CODE_FIELD = "taxonomies.code"
LOCATION_FIELD = "location.point"
SERVICE_AREA_FIELD = "serviceArea.extent"


def _taxonomy_term(code: str) -> Dict[str, Any]:
    return {"nested": {"path": TAXONOMY_PATH, "query": {"term": {TAXONOMY_CODE_FIELD: code}}}}


def _taxonomy_terms(codes: List[str]) -> Dict[str, Any]:
    return {"nested": {"path": TAXONOMY_PATH, "query": {"terms": {TAXONOMY_CODE_FIELD: codes}}}}


class FilterFactory:
    """
    Stateless builder for request filters.

    All filters are AND-combined by the QueryBuilder.
    """

    def build_filters(self, request: SearchRequest) -> List[Dict[str, Any]]:
        """
        Build every filter that applies to a request

        Args:
            request: Validated search request

        Returns:
            List of filter clauses (possibly empty)
        """
        filters = []

        geo_filter = self.build_geo_distance_filter(request)
        if geo_filter:
            filters.append(geo_filter)

        service_area_filter = self.build_service_area_filter(request)
        if service_area_filter:
            filters.append(service_area_filter)

        if request.has_taxonomy_query():
            filters.extend(self.build_taxonomy_filters(request.taxonomies))

        location_filter = self.build_location_point_filter(request)
        if location_filter:
            filters.append(location_filter)

        logger.debug(f"Built {len(filters)} filters")
        return filters

    def build_geo_distance_filter(self, request: SearchRequest) -> Optional[Dict[str, Any]]:
        """Hard radius cutoff, only when a point and a distance are both given"""
        if not request.has_geo_point() or request.distance is None:
            return None

        return {
            "geo_distance": {
                "distance": f"{request.distance}mi",
                LOCATION_FIELD: {"lat": request.lat, "lon": request.lon},
            }
        }

    def build_service_area_filter(self, request: SearchRequest) -> Optional[Dict[str, Any]]:
        """
        Keep documents whose service area contains the user's point.

        Documents with no service area at all also pass.
        """
        if not request.has_geo_point():
            return None

        return {
            "bool": {
                "should": [
                    {
                        "geo_shape": {
                            SERVICE_AREA_FIELD: {
                                "shape": {"type": "point", "coordinates": [request.lon, request.lat]},
                                "relation": "contains",
                            }
                        }
                    },
                    {"bool": {"must_not": {"exists": {"field": SERVICE_AREA_FIELD}}}},
                ],
                "minimum_should_match": 1,
            }
        }

    def build_location_point_filter(self, request: SearchRequest) -> Optional[Dict[str, Any]]:
        if not request.location_point_only:
            return None
        return {"exists": {"field": LOCATION_FIELD}}

    def build_taxonomy_filters(self, node: TaxonomyNode) -> List[Dict[str, Any]]:
        """
        Translate the root of a taxonomy tree into filters.

        AND items each become their own filter. OR codes collapse into a
        single terms filter; OR sub-trees join it in a bool.should.

        Example:
            {"AND": ["BD-1800", "BD-1800.2000"]} -> two nested term filters
            {"OR": ["BD-1800", "BM-6500"]} -> one nested terms filter
        """
        filters = []

        for item in node.and_ or []:
            filters.append(self._operand_clause(item))

        if node.or_:
            filters.append(self._or_clause(node.or_))

        return filters

    def _operand_clause(self, item: Union[str, TaxonomyNode]) -> Dict[str, Any]:
        if isinstance(item, str):
            return _taxonomy_term(item)
        return self._node_clause(item)

    def _or_clause(self, operands: List[Union[str, TaxonomyNode]]) -> Dict[str, Any]:
        codes = [item for item in operands if isinstance(item, str)]
        subtrees = [item for item in operands if not isinstance(item, str)]

        if not subtrees:
            return _taxonomy_terms(codes)

        should = [_taxonomy_terms(codes)] if codes else []
        should.extend(self._node_clause(item) for item in subtrees)
        return {"bool": {"should": should, "minimum_should_match": 1}}

    def _node_clause(self, node: TaxonomyNode) -> Dict[str, Any]:
        parts = []
        if node.and_:
            parts.append({"bool": {"must": [self._operand_clause(item) for item in node.and_]}})
        if node.or_:
            parts.append(self._or_clause(node.or_))

        if len(parts) == 1:
            return parts[0]
        return {"bool": {"must": parts}}
