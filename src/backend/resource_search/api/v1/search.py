"""
Hybrid Search API
POST /api/v1/hybrid-semantic/search - Hybrid multi-strategy search
"""

import logging
import os
import re
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Request

from ...exceptions import SearchValidationError
from ...models.search_request import SearchRequest
from ...services.observability.langsmith_service import get_langsmith_service
from ...services.search.orchestrator import HybridSearchOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/hybrid-semantic", tags=["Search"])

# Tenant codes become part of the index name
TENANT_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


def get_orchestrator_dep() -> HybridSearchOrchestrator:
    """Placeholder; overridden in main.py at startup"""
    raise RuntimeError("Search orchestrator dependency not initialized")


def resolve_tenant(x_tenant_id: Optional[str]) -> str:
    """
    Tenant from the x-tenant-id header, else DEFAULT_TENANT.

    Raises:
        SearchValidationError: If no tenant is available or it is not a valid index prefix
    """
    tenant = (x_tenant_id or os.getenv("DEFAULT_TENANT", "")).strip().lower()
    if not tenant:
        raise SearchValidationError(
            "Tenant is required",
            [{"field": "x-tenant-id", "message": "x-tenant-id header is required"}],
        )
    if not TENANT_PATTERN.match(tenant):
        raise SearchValidationError(
            "Invalid tenant",
            [{"field": "x-tenant-id", "message": "Tenant may only contain lowercase letters, digits, '-' and '_'"}],
        )
    return tenant


@router.post("/search")
async def hybrid_search(
    search_request: SearchRequest,
    request: Request,
    x_tenant_id: Optional[str] = Header(default=None),
    orchestrator: HybridSearchOrchestrator = Depends(get_orchestrator_dep),
) -> Dict[str, Any]:
    """
    Hybrid semantic search

    Example:
        POST /api/v1/hybrid-semantic/search
        x-tenant-id: acme

        {"q": "food assistance", "lat": 47.6, "lon": -122.3, "distance": 25}

    Returns:
        Search response; cursor mode carries search_after, offset mode carries
        page/total_pages/has_next_page/has_previous_page
    """
    tenant = resolve_tenant(x_tenant_id)
    correlation_id = getattr(request.state, "correlation_id", None)

    response = await orchestrator.search(search_request, tenant, request_id=correlation_id)
    payload = response.to_dict()

    get_langsmith_service().log_search_run(tenant, search_request.query_text, payload)
    return payload
