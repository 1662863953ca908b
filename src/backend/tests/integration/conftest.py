"""
Integration test fixtures

Runs the FastAPI app in-process over httpx's ASGI transport. The search
orchestrator is replaced through dependency overrides; no OpenSearch or AI
service is required.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from resource_search.api.v1.search import get_orchestrator_dep
from resource_search.main import app, get_orchestrator
from resource_search.models.search_response import HitsEnvelope, HitsTotal, SearchResponse


@pytest.fixture
def search_response():
    return SearchResponse(
        took=4,
        hits=HitsEnvelope(
            total=HitsTotal(value=1),
            max_score=1.0,
            hits=[{"_id": "doc-1", "_score": 1.0, "_source": {"name": "Food Bank"}, "sort": [1.0, "doc-1"]}],
        ),
        total_results=12,
        search_after=[1.0, "doc-1"],
    )


@pytest.fixture
def mock_orchestrator(search_response):
    orchestrator = MagicMock()
    orchestrator.search = AsyncMock(return_value=search_response)
    return orchestrator


@pytest_asyncio.fixture
async def api_client(mock_orchestrator, monkeypatch):
    """HTTP client bound to the app with the orchestrator overridden"""
    monkeypatch.delenv("DEFAULT_TENANT", raising=False)
    app.dependency_overrides[get_orchestrator_dep] = lambda: mock_orchestrator

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides[get_orchestrator_dep] = get_orchestrator
