"""
AI Utils Client

Client for the AI collaborators of the search pipeline:
- Query embeddings from an OpenAI-compatible endpoint (Ollama by default)
- Intent classification from the ai-utils microservice
- Reranking of fused hits from the ai-utils microservice

Errors are logged and re-raised; the search request fails with them.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import httpx
from langsmith import traceable
from openai import AsyncOpenAI

from ...models.intent import IntentClassification

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"
DEFAULT_EMBEDDING_MODEL = "bge-m3:567m"
DEFAULT_TIMEOUT_SECONDS = 5.0

# Source fields concatenated into the text sent to the reranker
RERANK_TEXT_FIELDS = ("name", "description", "service.name", "service.description")


def _rerank_text(source: Dict[str, Any]) -> str:
    parts = []
    for path in RERANK_TEXT_FIELDS:
        value: Any = source
        for key in path.split("."):
            value = value.get(key) if isinstance(value, dict) else None
        if isinstance(value, str) and value:
            parts.append(value)
    return " ".join(parts)


class AiUtilsClient:
    """
    Embedding, classification and rerank calls.

    Classification and rerank are optional: without a configured ai-utils URL
    classify_query() returns an empty low-confidence classification and
    rerank_results() keeps the fused order.
    """

    def __init__(
        self,
        ai_utils_url: Optional[str] = None,
        ollama_base_url: Optional[str] = None,
        embedding_model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        openai_client: Optional[AsyncOpenAI] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the client. Arguments left as None are read from the environment.

        Args:
            ai_utils_url: Base URL of the ai-utils service (AI_UTILS_URL)
            ollama_base_url: Base URL of the embedding server (OLLAMA_BASE_URL)
            embedding_model: Embedding model name (OLLAMA_EMBEDDING_MODEL)
            timeout_seconds: Timeout for ai-utils calls (AI_UTILS_TIMEOUT_SECONDS)
            openai_client: Preconfigured AsyncOpenAI client
            http_client: Preconfigured httpx.AsyncClient
        """
        url = ai_utils_url if ai_utils_url is not None else os.getenv("AI_UTILS_URL", "")
        self.ai_utils_url = url.rstrip("/") or None

        base_url = (ollama_base_url or os.getenv("OLLAMA_BASE_URL", DEFAULT_OLLAMA_BASE_URL)).rstrip("/")
        self.embedding_model = embedding_model or os.getenv("OLLAMA_EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL)
        self.timeout_seconds = timeout_seconds or float(
            os.getenv("AI_UTILS_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        )

        # Ollama ignores the key but the client requires one
        self.openai_client = openai_client or AsyncOpenAI(base_url=f"{base_url}/v1", api_key="ollama")
        self.http_client = http_client or httpx.AsyncClient(timeout=self.timeout_seconds)

        logger.info(
            f"AiUtilsClient initialized (embedding_model={self.embedding_model}, "
            f"ai_utils={'configured' if self.ai_utils_url else 'not configured'})"
        )

    @property
    def is_ai_utils_configured(self) -> bool:
        return self.ai_utils_url is not None

    @traceable(name="embed_query", run_type="embedding")
    async def embed_query(self, query: str) -> List[float]:
        """
        Embed the query text.

        Args:
            query: Query text

        Returns:
            Embedding vector
        """
        logger.debug(f"Embedding query with {self.embedding_model}: '{query}'")
        try:
            response = await self.openai_client.embeddings.create(model=self.embedding_model, input=query)
        except Exception as e:
            logger.error(f"Failed to embed query: {e}")
            raise

        embedding = response.data[0].embedding
        logger.debug(f"Embedded query, dimension: {len(embedding)}")
        return embedding

    @traceable(name="classify_query", run_type="llm")
    async def classify_query(self, query: str, request_id: Optional[str] = None) -> IntentClassification:
        """
        Classify the query intent.

        Args:
            query: Query text
            request_id: Correlation id forwarded to the classifier

        Returns:
            IntentClassification with the original query in query_characteristics
        """
        if not self.is_ai_utils_configured:
            logger.warning("AI_UTILS_URL not configured - skipping intent classification")
            return IntentClassification.empty(query)

        try:
            response = await self.http_client.post(
                f"{self.ai_utils_url}/api/v1/intent-classification",
                json={"query": query, "request_id": request_id},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to classify query via ai-utils: {e}")
            raise

        data = response.json()
        characteristics = data.get("query_characteristics") or {}
        data["query_characteristics"] = {**characteristics, "query": query}
        classification = IntentClassification.model_validate(data)

        logger.info(
            f"Intent classification: {classification.primary_intent or 'low-info'} "
            f"(confidence={classification.confidence}, "
            f"low_info={classification.is_low_information_query}, "
            f"taxonomy_codes={len(classification.combined_taxonomy_codes)})"
        )
        return classification

    @traceable(name="rerank_results", run_type="chain")
    async def rerank_results(self, query: str, hits: List[Dict[str, Any]], limit: int) -> List[Dict[str, Any]]:
        """
        Rerank fused hits.

        Args:
            query: Query text
            hits: Fused hits, best first
            limit: Maximum hits to return

        Returns:
            At most `limit` hits in reranked order; ids unknown to the input are dropped
        """
        if not self.is_ai_utils_configured:
            return hits[:limit]

        documents = [{"id": hit["_id"], "text": _rerank_text(hit.get("_source") or {})} for hit in hits]
        logger.debug(f"Reranking {len(documents)} candidates, returning top {limit}")

        try:
            response = await self.http_client.post(
                f"{self.ai_utils_url}/api/v1/rerank",
                json={"query": query, "documents": documents, "top_k": limit},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to rerank results via ai-utils: {e}")
            raise

        by_id = {hit["_id"]: hit for hit in hits}
        ranked = []
        for result in response.json().get("ranked_results", []):
            hit = by_id.pop(result.get("id"), None)
            if hit is not None:
                ranked.append(hit)
        return ranked[:limit]

    async def close(self):
        await self.http_client.aclose()
        await self.openai_client.close()

