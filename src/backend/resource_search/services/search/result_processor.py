"""
Result Processor

Post-processing of fused hits before they are returned: distance from the
user, relevant text snippets, removal of vector fields and optional
service-area geometry, and pagination metadata.
"""

import copy
import logging
import math
import re
from typing import Any, Dict, List, Optional

from ...models.search_request import SearchRequest
from ..nlp.nlp_utils import NlpUtils, get_nlp_utils

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3959

# (dotted field path, weight) searched for snippets
SNIPPET_FIELDS = [
    ("description", 3),
    ("service.description", 3),
    ("summary", 2),
    ("service.summary", 2),
    ("schedule", 1),
]
MAX_SNIPPETS = 3
MIN_SENTENCE_LENGTH = 20

_SENTENCE_SPLIT = re.compile(r"[.!?]\s+")


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles"""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def strip_embeddings(value: Any) -> None:
    """Recursively delete embedding vectors from a document in place"""
    if isinstance(value, dict):
        for key in [k for k in value if k == "embedding" or k.endswith("_embedding")]:
            del value[key]
        for nested in value.values():
            strip_embeddings(nested)
    elif isinstance(value, list):
        for item in value:
            strip_embeddings(item)


def _get_path(source: Dict[str, Any], path: str) -> Any:
    current: Any = source
    for key in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _location_point(source: Dict[str, Any]) -> Optional[Dict[str, float]]:
    point = _get_path(source, "location.point")
    if isinstance(point, dict) and point.get("lat") is not None and point.get("lon") is not None:
        return {"lat": point["lat"], "lon": point["lon"]}
    # GeoJSON order: [lon, lat]
    if isinstance(point, (list, tuple)) and len(point) == 2:
        return {"lat": point[1], "lon": point[0]}
    return None


class ResultProcessor:
    """
    Post-processes hits.

    post_process() returns new hit dicts; the fused hits passed in are not
    modified.
    """

    def __init__(self, nlp: Optional[NlpUtils] = None):
        self.nlp = nlp or get_nlp_utils()

    def post_process(self, hits: List[Dict[str, Any]], request: SearchRequest) -> List[Dict[str, Any]]:
        """
        Copy hits, strip vectors and drop serviceArea when excluded

        Args:
            hits: Final ranked hits
            request: Validated search request

        Returns:
            New list of hits with cleaned _source documents
        """
        processed = []
        for hit in hits:
            source = copy.deepcopy(hit.get("_source", {}))
            strip_embeddings(source)
            if request.exclude_service_area:
                source.pop("serviceArea", None)
            processed.append({**hit, "_source": source})
        return processed

    def add_distance_info(self, hits: List[Dict[str, Any]], request: SearchRequest) -> List[Dict[str, Any]]:
        """Set _source.distance_from_user (miles, 2 decimals) where both points are known"""
        if not request.has_geo_point():
            return hits

        for hit in hits:
            source = hit.get("_source") or {}
            point = _location_point(source)
            if point is None:
                continue
            distance = haversine_miles(request.lat, request.lon, point["lat"], point["lon"])
            source["distance_from_user"] = round(distance, 2)
        return hits

    def add_relevant_text_snippets(
        self,
        hits: List[Dict[str, Any]],
        query: Optional[str],
        query_nouns: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Attach up to three sentences explaining why each hit matched.

        Args:
            hits: Hits to annotate in place
            query: Query text
            query_nouns: Nouns already extracted from the query (extracted here if omitted)

        Returns:
            The same hits; matching ones gain a relevant_text list
        """
        if not query or not hits:
            return hits

        nouns = query_nouns if query_nouns is not None else self.nlp.extract_nouns(query)
        if not nouns:
            return hits

        terms = [(noun.lower(), self.nlp.stem_word(noun.lower())) for noun in nouns]
        logger.debug(f"Extracting relevant text snippets for nouns: {[noun for noun, _ in terms]}")

        for hit in hits:
            snippets = self._find_relevant_snippets(hit.get("_source") or {}, terms)
            if snippets:
                hit["relevant_text"] = snippets
        return hits

    def _find_relevant_snippets(self, source: Dict[str, Any], terms: List[tuple]) -> List[str]:
        scored = []
        for path, weight in SNIPPET_FIELDS:
            text = _get_path(source, path)
            if not isinstance(text, str):
                continue

            for sentence in _SENTENCE_SPLIT.split(text):
                sentence = sentence.strip()
                if len(sentence) <= MIN_SENTENCE_LENGTH:
                    continue

                lowered = sentence.lower()
                matches = sum(1 for noun, stem in terms if noun in lowered or stem in lowered)
                if matches:
                    scored.append((sentence, matches * weight))

        scored.sort(key=lambda item: item[1], reverse=True)

        snippets: List[str] = []
        for sentence, _ in scored:
            if sentence not in snippets:
                snippets.append(sentence)
            if len(snippets) == MAX_SNIPPETS:
                break
        return snippets

    def build_pagination(
        self,
        request: SearchRequest,
        total_results: int,
        hits: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Pagination fields for the active mode.

        Offset mode returns page, total_pages, has_next_page and
        has_previous_page. Cursor mode returns search_after (the last hit's
        sort values) when there is a last hit.
        """
        if request.legacy_offset_pagination:
            total_pages = math.ceil(total_results / request.limit) if total_results else 0
            return {
                "page": request.page,
                "total_pages": total_pages,
                "has_next_page": request.page < total_pages,
                "has_previous_page": request.page > 1,
            }

        if hits and hits[-1].get("sort"):
            return {"search_after": hits[-1]["sort"]}
        return {}
