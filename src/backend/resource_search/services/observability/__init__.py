"""Observability services for search tracing."""

from .langsmith_service import LangSmithService, get_langsmith_service

__all__ = ["LangSmithService", "get_langsmith_service"]
