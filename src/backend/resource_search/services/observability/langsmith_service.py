"""
LangSmith Observability Service.

Provides:
- Tracing setup for the @traceable decorated pipeline
- Search run summaries
"""

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from langsmith import Client

logger = logging.getLogger(__name__)


class LangSmithService:
    """
    LangSmith integration for search pipeline observability.

    Tracing is enabled when LANGSMITH_API_KEY is set and LANGSMITH_TRACING is
    not "false". The @traceable decorators on the orchestrator, executor and
    AI client read the environment variables set here.
    """

    def __init__(self):
        """Initialize LangSmith client with .env configuration."""
        self.api_key = os.getenv("LANGSMITH_API_KEY")
        self.project = os.getenv("LANGSMITH_PROJECT", "resource-search")
        self.enable_tracing = os.getenv("LANGSMITH_TRACING", "true").lower() == "true"
        self.client: Optional[Client] = None

        if self.api_key and self.enable_tracing:
            try:
                self.client = Client(api_key=self.api_key)

                os.environ["LANGSMITH_TRACING"] = "true"
                os.environ["LANGSMITH_PROJECT"] = self.project

                logger.info(f"LangSmith tracing enabled for project: {self.project}")
            except Exception as e:
                logger.warning(f"LangSmith client initialization failed: {e}")
                self.client = None
        else:
            logger.info("LangSmith tracing disabled")

    def is_enabled(self) -> bool:
        """Check if LangSmith tracing is enabled."""
        return self.client is not None

    def log_search_run(
        self,
        tenant: str,
        query: Optional[str],
        result: Dict[str, Any],
    ):
        """
        Log a summary of one search run.

        Args:
            tenant: Tenant the search ran for
            query: Query text (None for browse)
            result: Serialized SearchResponse
        """
        if not self.is_enabled():
            return

        summary = {
            "tenant": tenant,
            "query": query,
            "took": result.get("took"),
            "returned": len(result.get("hits", {}).get("hits", [])),
            "total_results": result.get("total_results"),
            "is_low_information_query": result.get("is_low_information_query"),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        logger.info(f"LangSmith search run tracked: {summary}")


# Global service instance - initialized lazily after .env is loaded
langsmith_service: Optional[LangSmithService] = None


def get_langsmith_service() -> LangSmithService:
    """Get or create the LangSmith service instance."""
    global langsmith_service
    if langsmith_service is None:
        langsmith_service = LangSmithService()
    return langsmith_service
