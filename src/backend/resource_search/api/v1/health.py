"""
Health Check API Endpoints
GET /api/v1/health - Liveness
GET /api/v1/health/opensearch - Search backend round trip
GET /api/v1/health/config - Search weights configuration health
POST /api/v1/health/config/reload - Force a weights configuration reload
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from ... import __version__
from ...services.config.config_monitor import get_config_monitor
from ...services.search.orchestrator import HybridSearchOrchestrator
from .search import get_orchestrator_dep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/health", tags=["Health"])


class LivenessResponse(BaseModel):
    status: str
    version: str
    timestamp: str


class OpenSearchHealthResponse(BaseModel):
    status: str
    rtt_ms: Optional[float]


class ConfigHealthResponse(BaseModel):
    """Response model for config health check"""
    config_name: str
    status: str
    last_validated: str
    active_version: Optional[str]
    using_fallback: bool
    watching: bool
    last_loaded_at: Optional[str]
    last_error: Optional[str]
    validation_errors: List[str]
    validation_warnings: List[str]
    file_path: Optional[str]
    file_size_bytes: Optional[int]
    last_modified: Optional[str]


@router.get("", response_model=LivenessResponse)
async def get_health():
    """Liveness check"""
    return LivenessResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.utcnow().isoformat(),
    )


@router.get("/opensearch", response_model=OpenSearchHealthResponse)
async def get_opensearch_health(
    response: Response,
    orchestrator: HybridSearchOrchestrator = Depends(get_orchestrator_dep),
):
    """Cluster health round trip; 503 when the cluster is unreachable"""
    rtt_ms = await orchestrator.executor.measure_health_check_rtt()
    if rtt_ms is None:
        response.status_code = 503
        return OpenSearchHealthResponse(status="unhealthy", rtt_ms=None)
    return OpenSearchHealthResponse(status="healthy", rtt_ms=rtt_ms)


@router.get("/config", response_model=ConfigHealthResponse)
async def get_config_health():
    """
    Get search weights configuration health

    Example:
        GET /api/v1/health/config

        Response:
        {
            "config_name": "search_weights",
            "status": "healthy",
            "active_version": "1.0.0",
            "using_fallback": false,
            "watching": true,
            "last_error": null,
            ...
        }
    """
    try:
        health = get_config_monitor().check_weights_config()
        return ConfigHealthResponse(**health.to_dict())

    except Exception as e:
        logger.error(f"Config health check failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Health check failed: {str(e)}"
        )


@router.post("/config/reload", response_model=ConfigHealthResponse)
async def reload_config():
    """
    Reload the weights configuration from disk now

    An invalid file is rejected and the active snapshot is kept; the returned
    health reports the rejection.
    """
    try:
        health = get_config_monitor().reload_weights_config()
        return ConfigHealthResponse(**health.to_dict())

    except Exception as e:
        logger.error(f"Config reload failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Config reload failed: {str(e)}"
        )
