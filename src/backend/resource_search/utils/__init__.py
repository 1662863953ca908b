"""Structured logging context helpers."""

from .logging_context import bind_search_context, log_context, log_performance

__all__ = ["bind_search_context", "log_context", "log_performance"]
