"""
Search Exceptions

Errors raised by the search pipeline. Validation errors are user-facing and map
to HTTP 400; backend errors map to HTTP 500. Errors raised by collaborator
client libraries (openai, httpx) propagate unchanged.
"""

from typing import Any, Dict, List, Optional


class SearchError(Exception):
    """Base class for search pipeline errors"""


class SearchValidationError(SearchError):
    """
    Request rejected by a business rule before any external call.

    Attributes:
        errors: Field-level messages, each {"field": ..., "message": ...}
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the 400 response payload"""
        return {"message": "Validation failed", "errors": self.errors or [{"field": "", "message": self.message}]}


class SearchBackendError(SearchError):
    """
    The search backend answered the batched call with a per-query error.

    Attributes:
        strategy_name: Strategy whose query failed
        details: Raw error object returned by the backend
    """

    def __init__(self, strategy_name: str, details: Any):
        super().__init__(f"Search backend error for strategy '{strategy_name}': {details}")
        self.strategy_name = strategy_name
        self.details = details
