"""
Pytest configuration and shared fixtures
Provides common test fixtures for all test modules
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add backend directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from resource_search.models.intent import IntentClassification, KeywordVariations
from resource_search.models.search_request import SearchRequest
from resource_search.models.weights import WeightConfig
from resource_search.services.config.config_monitor import clear_config_monitor
from resource_search.services.config.weights_config_service import clear_weights_config_service
from resource_search.services.search.context import SearchContext


VALID_WEIGHTS_DOCUMENT = {
    "version": "2.1.0",
    "description": "Test weights",
    "semantic": {"service": 1.5, "taxonomy": 1.0, "organization": 0.5},
    "strategies": {"semantic_search": 2.0, "keyword_search": 1.0, "intent_driven": 1.2},
    "geospatial": {"weight": 2.0, "decay_scale": 25, "decay_offset": 5},
    "keyword_variations": {"nouns_multiplier": 0.9, "stemmed_nouns_multiplier": 0.8},
}


@pytest.fixture(autouse=True)
def reset_singletons():
    """Clear service singletons between tests"""
    yield
    clear_weights_config_service()
    clear_config_monitor()


@pytest.fixture
def weights() -> WeightConfig:
    """Default weights"""
    return WeightConfig()


@pytest.fixture
def valid_weights_document() -> Dict[str, Any]:
    return json.loads(json.dumps(VALID_WEIGHTS_DOCUMENT))


@pytest.fixture
def weights_file(tmp_path, valid_weights_document) -> Path:
    """Valid weights file in a temporary directory"""
    path = tmp_path / "search_weights.json"
    path.write_text(json.dumps(valid_weights_document))
    return path


@pytest.fixture
def make_request():
    """Factory for validated SearchRequest objects"""
    def _make(**kwargs) -> SearchRequest:
        return SearchRequest.model_validate(kwargs)
    return _make


@pytest.fixture
def make_context(weights):
    """Factory for SearchContext objects with sensible defaults"""
    def _make(
        request: SearchRequest,
        embedding: Optional[List[float]] = None,
        filters: Optional[List[Dict[str, Any]]] = None,
        intent_classification: Optional[IntentClassification] = None,
        keyword_variations: Optional[KeywordVariations] = None,
        context_weights: Optional[WeightConfig] = None,
    ) -> SearchContext:
        return SearchContext(
            request=request,
            weights=context_weights or weights,
            embedding=embedding,
            filters=filters or [],
            search_after=request.search_after,
            use_offset_pagination=request.legacy_offset_pagination,
            offset=request.offset if request.legacy_offset_pagination else 0,
            intent_classification=intent_classification,
            keyword_variations=keyword_variations,
        )
    return _make


@pytest.fixture
def make_hit():
    """Factory for backend hits"""
    def _make(doc_id: str, score: Optional[float] = 1.0, source: Optional[Dict[str, Any]] = None, sort=None):
        hit = {
            "_index": "acme-resources_en",
            "_id": doc_id,
            "_score": score,
            "_source": source if source is not None else {"name": f"Resource {doc_id}"},
        }
        if sort is not None:
            hit["sort"] = sort
        return hit
    return _make


@pytest.fixture
def make_response():
    """Factory for one strategy's backend response"""
    def _make(hits: List[Dict[str, Any]], total: Optional[int] = None, took: int = 5):
        return {
            "took": took,
            "timed_out": False,
            "hits": {
                "total": {"value": total if total is not None else len(hits), "relation": "eq"},
                "max_score": max((h["_score"] for h in hits if h.get("_score") is not None), default=None),
                "hits": hits,
            },
        }
    return _make


@pytest.fixture
def food_variations() -> KeywordVariations:
    return KeywordVariations(
        original=["food assistance"],
        nouns=["food", "foods"],
        stemmed_nouns=["food"],
        synonyms=["nutrient", "solid food"],
        topics=[],
    )
