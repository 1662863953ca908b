"""
Unit test fixtures

Fixtures for unit tests that mock external dependencies.
Unit tests should be fast (< 100ms) and isolated: no OpenSearch, no AI
service, no NLTK corpora.
"""

from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from resource_search.models.intent import IntentClassification
from resource_search.services.nlp.nlp_utils import NlpUtils


# Base forms WordNet gives for the nouns used in tests
WORDNET_LEMMAS = {
    "pantries": "pantry",
    "shelters": "shelter",
    "clinics": "clinic",
    "children": "child",
    "families": "family",
    "classes": "class",
}


class StubNlpUtils(NlpUtils):
    """
    NlpUtils with the corpus-backed primitives replaced by lookups.

    Contractions, plural generation, generic-noun filtering and stemming are
    the real implementations.
    """

    def __init__(
        self,
        nouns: Optional[List[str]] = None,
        synonyms: Optional[Dict[str, List[str]]] = None,
        topics: Optional[List[str]] = None,
        lemmas: Optional[Dict[str, str]] = None,
    ):
        super().__init__()
        self.lemma_table = WORDNET_LEMMAS if lemmas is None else lemmas
        self.known_nouns = set(nouns or [])
        self.synonym_table = synonyms or {}
        self.topic_list = topics or []

    def extract_nouns(self, text: str) -> List[str]:
        words = [word.strip(".,?!").lower() for word in (text or "").split()]
        return [word for word in words if word in self.known_nouns]

    def lemmatize_noun(self, word: str) -> str:
        return self.lemma_table.get(word, word)

    def get_synonyms(self, word: str) -> List[str]:
        return list(self.synonym_table.get(word, []))

    def extract_topics(self, text: str) -> List[str]:
        lowered = (text or "").lower()
        return [topic for topic in self.topic_list if topic in lowered]


@pytest.fixture
def stub_nlp():
    """NLP helper that knows a few nouns, synonyms and topics"""
    return StubNlpUtils(
        nouns=["food", "pantries", "pantry", "shelter", "help", "chicago", "rent", "diabetes", "news", "series"],
        synonyms={
            "food": ["nutrient", "solid food"],
            "pantries": ["larder"],
            "shelter": ["protection", "shelter"],
        },
        topics=["chicago"],
    )


@pytest.fixture
def mock_opensearch_client():
    """Mock AsyncOpenSearch client for unit tests"""
    client = MagicMock()
    client.msearch = AsyncMock(return_value={"took": 12, "responses": []})
    client.cluster.health = AsyncMock(return_value={"status": "green"})
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_ai_client():
    """Mock AiUtilsClient: fixed embedding, empty classification, rerank keeps order"""
    client = MagicMock()
    client.embed_query = AsyncMock(return_value=[0.1, 0.2, 0.3])
    client.classify_query = AsyncMock(
        side_effect=lambda query, request_id=None: IntentClassification.empty(query)
    )
    client.rerank_results = AsyncMock(side_effect=lambda query, hits, limit: hits[:limit])
    client.close = AsyncMock()
    return client
