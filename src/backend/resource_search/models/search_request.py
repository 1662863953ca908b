"""
Search Request Model

Request body accepted by the hybrid search endpoint, including the recursive
AND/OR taxonomy query tree.
"""

from typing import Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .weights import CustomWeights

MAX_TAXONOMY_DEPTH = 5


class TaxonomyNode(BaseModel):
    """
    One node of a taxonomy query tree.

    Example:
        {"AND": ["BD-1800", {"OR": ["BM-6500", "BM-6500.1500"]}]}
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    and_: Optional[List[Union[str, "TaxonomyNode"]]] = Field(default=None, alias="AND")
    or_: Optional[List[Union[str, "TaxonomyNode"]]] = Field(default=None, alias="OR")

    def is_empty(self) -> bool:
        return not self.and_ and not self.or_


TaxonomyNode.model_rebuild()


def validate_taxonomy_tree(node: TaxonomyNode, depth: int = 1) -> None:
    """
    Check depth, leaf and operand-count rules of a taxonomy tree.

    Root lists may hold a single code. Nested nodes must combine at least two
    operands.

    Raises:
        ValueError: On the first violated rule
    """
    if depth > MAX_TAXONOMY_DEPTH:
        raise ValueError(f"Query nesting depth exceeds maximum allowed ({MAX_TAXONOMY_DEPTH} levels)")

    if depth > 1:
        for operands in (node.and_, node.or_):
            if operands is not None and len(operands) < 2:
                raise ValueError("OR/AND operations must have at least 2 operands")

    for operands in (node.and_ or [], node.or_ or []):
        for item in operands:
            if isinstance(item, str):
                if not item.strip():
                    raise ValueError("Empty string expressions are not allowed")
                if depth + 1 > MAX_TAXONOMY_DEPTH:
                    raise ValueError(f"Query nesting depth exceeds maximum allowed ({MAX_TAXONOMY_DEPTH} levels)")
            else:
                validate_taxonomy_tree(item, depth + 1)


class SearchRequest(BaseModel):
    """Hybrid search request body"""
    model_config = ConfigDict(populate_by_name=True)

    q: Optional[str] = None
    lang: str = "en"
    limit: int = Field(default=10, ge=1, le=100)
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lon: Optional[float] = Field(default=None, ge=-180, le=180)
    distance: Optional[int] = Field(default=None, gt=0)
    search_after: Optional[List[Any]] = None
    page: int = Field(default=1, ge=1)
    legacy_offset_pagination: bool = False

    taxonomies: Optional[TaxonomyNode] = Field(default=None, alias="query")

    location_point_only: bool = False
    keyword_search_only: bool = False
    exclude_service_area: bool = False
    disable_intent_classification: bool = False

    custom_weights: Optional[CustomWeights] = None

    @field_validator("lang")
    @classmethod
    def _normalize_lang(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("lang must not be empty")
        return value

    @field_validator("taxonomies")
    @classmethod
    def _check_taxonomy_tree(cls, value: Optional[TaxonomyNode]) -> Optional[TaxonomyNode]:
        if value is not None:
            validate_taxonomy_tree(value)
        return value

    @model_validator(mode="after")
    def _check_geo(self) -> "SearchRequest":
        if (self.lat is None) != (self.lon is None):
            raise ValueError("lat and lon must be provided together")
        if self.distance is not None and self.lat is None:
            raise ValueError("distance requires lat and lon")
        return self

    @property
    def query_text(self) -> Optional[str]:
        """Query text with surrounding whitespace removed, None when blank"""
        if self.q is None or not self.q.strip():
            return None
        return self.q.strip()

    def has_taxonomy_query(self) -> bool:
        return self.taxonomies is not None and not self.taxonomies.is_empty()

    def has_geo_point(self) -> bool:
        return self.lat is not None and self.lon is not None

    @property
    def offset(self) -> int:
        """Result offset for legacy offset pagination"""
        return (self.page - 1) * self.limit
