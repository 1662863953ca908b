"""
Logging Context Management Utilities

Context bound here automatically appears in all log statements within the
scope of the current request.
"""

import time
from contextlib import contextmanager
from typing import Optional

import structlog
from structlog.contextvars import bind_contextvars, unbind_contextvars


def bind_search_context(
    tenant: Optional[str] = None,
    query: Optional[str] = None,
    lang: Optional[str] = None,
    pagination_mode: Optional[str] = None,
    **kwargs
):
    """
    Bind search request context to all logs.

    Args:
        tenant: Tenant the search runs for
        query: Query text (None for browse and taxonomy-only searches)
        lang: Index language
        pagination_mode: "cursor" or "offset"
        **kwargs: Additional context key-value pairs
    """
    context = {}

    if tenant:
        context["tenant"] = tenant
    if query:
        context["search_query"] = query
    if lang:
        context["lang"] = lang
    if pagination_mode:
        context["pagination_mode"] = pagination_mode

    context.update(kwargs)
    bind_contextvars(**context)


@contextmanager
def log_context(**context_vars):
    """
    Temporary logging context for one pipeline phase.

    Example:
        ```python
        with log_context(phase="retrieval", strategies=5):
            logger.info("executing msearch")
        ```
    """
    bind_contextvars(**context_vars)

    try:
        yield
    finally:
        unbind_contextvars(*context_vars.keys())


@contextmanager
def log_performance(operation_name: str, logger=None):
    """
    Log start, end and duration of an operation.

    Args:
        operation_name: Name of the operation being timed
        logger: structlog logger (defaults to structlog.get_logger())
    """
    if logger is None:
        logger = structlog.get_logger()

    start_time = time.time()
    logger.info(f"{operation_name}_started", operation=operation_name)

    try:
        yield
    finally:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(f"{operation_name}_completed", operation=operation_name, duration_ms=duration_ms)
