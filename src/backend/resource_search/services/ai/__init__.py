"""AI service clients: embeddings, intent classification and reranking."""

from .ai_utils_client import AiUtilsClient

__all__ = ["AiUtilsClient"]
