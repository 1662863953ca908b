"""
Query Understanding Models

Intent classification returned by the AI utils service and keyword variations
derived locally from the query text.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class IntentScore(BaseModel):
    intent: str
    score: float


class IntentClassification(BaseModel):
    """
    Intent classification for a query.

    combined_taxonomy_codes drives the intent_taxonomy strategy unless the
    query is flagged as low-information.
    """
    primary_intent: Optional[str] = None
    top_intents: List[IntentScore] = Field(default_factory=list)
    combined_taxonomy_codes: List[str] = Field(default_factory=list)
    confidence: str = "low"
    is_low_information_query: bool = False
    priority_rule_applied: bool = False
    query_characteristics: Optional[Dict[str, Any]] = None
    request_id: Optional[str] = None

    @classmethod
    def empty(cls, query: str) -> "IntentClassification":
        """Classification used when no classifier is configured"""
        return cls(query_characteristics={"query": query})


class KeywordVariations(BaseModel):
    """Five lexical views of one query"""
    original: List[str] = Field(default_factory=list)
    nouns: List[str] = Field(default_factory=list)
    stemmed_nouns: List[str] = Field(default_factory=list)
    synonyms: List[str] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)
