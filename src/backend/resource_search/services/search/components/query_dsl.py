"""
Query DSL Nodes

Closed set of query clause types used by the QueryBuilder. Each node renders
itself to OpenSearch query DSL with to_dict().
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class QueryNode(ABC):
    """A renderable query clause"""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Render as backend query DSL"""


@dataclass(frozen=True)
class NestedKnn(QueryNode):
    """k-nearest-neighbour search on a vector inside a nested object"""
    path: str
    field: str
    vector: List[float]
    k: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nested": {
                "path": self.path,
                "query": {"knn": {self.field: {"vector": list(self.vector), "k": self.k}}},
                "score_mode": "max",
            }
        }


@dataclass(frozen=True)
class MultiMatch(QueryNode):
    """best_fields text match across boosted fields"""
    query: str
    fields: List[str]
    operator: str = "or"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bool": {
                "must": [
                    {
                        "multi_match": {
                            "query": self.query,
                            "fields": list(self.fields),
                            "type": "best_fields",
                            "operator": self.operator,
                        }
                    }
                ]
            }
        }


@dataclass(frozen=True)
class TaxonomyTerms(QueryNode):
    """Match any of the given taxonomy codes"""
    codes: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bool": {
                "must": [
                    {
                        "nested": {
                            "path": "taxonomies",
                            "query": {"terms": {"taxonomies.code": list(self.codes)}},
                            "score_mode": "max",
                        }
                    }
                ]
            }
        }


@dataclass(frozen=True)
class MatchAll(QueryNode):
    def to_dict(self) -> Dict[str, Any]:
        return {"match_all": {}}


@dataclass(frozen=True)
class BoolFilter(QueryNode):
    """Scored clause restricted by non-scoring filters"""
    must: QueryNode
    filters: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"bool": {"must": [self.must.to_dict()], "filter": list(self.filters)}}


@dataclass(frozen=True)
class FunctionScore(QueryNode):
    """
    Outer wrapper applying score functions and the strategy weight.

    Functions multiply together and replace the inner score; boost carries
    the strategy weight.
    """
    query: QueryNode
    functions: List[Dict[str, Any]] = field(default_factory=list)
    boost: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "query": self.query.to_dict(),
            "functions": list(self.functions),
            "score_mode": "multiply",
            "boost_mode": "replace",
        }
        if self.boost is not None:
            body["boost"] = self.boost
        return {"function_score": body}
