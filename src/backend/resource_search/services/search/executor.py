"""
Multi-Search Executor

Sends the strategy batch to OpenSearch as one _msearch call and returns the
responses aligned with strategy order, together with a timing profile.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from langsmith import traceable
from opensearchpy import AsyncOpenSearch

from ...exceptions import SearchBackendError
from .registry import MsearchBatch

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float, end: Optional[float] = None) -> float:
    return round(((end if end is not None else time.perf_counter()) - start) * 1000, 2)


@dataclass
class MsearchProfile:
    """Timing breakdown of one _msearch call (milliseconds)"""
    total_time: float = 0.0
    http_round_trip_ms: float = 0.0
    response_deserialize_ms: float = 0.0
    opensearch_reported_took: Optional[int] = None
    subqueries: Dict[str, int] = field(default_factory=dict)
    max_subquery_took: int = 0

    @property
    def network_and_client_overhead_estimate(self) -> float:
        server_time = self.opensearch_reported_took or self.max_subquery_took
        return round(self.total_time - server_time, 2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_time": self.total_time,
            "opensearch_reported_took": self.opensearch_reported_took,
            "client_breakdown": {
                "http_round_trip_ms": self.http_round_trip_ms,
                "response_deserialize_ms": self.response_deserialize_ms,
            },
            "subqueries": {**self.subqueries, "max_subquery_took": self.max_subquery_took},
            "network_and_client_overhead_estimate": self.network_and_client_overhead_estimate,
        }


class MsearchProfiler:
    """
    Stopwatch for one _msearch call.

    Usage:
        profiler.start()
        raw = await client.msearch(...)
        profiler.mark_response_received()
        ... inspect responses ...
        profile = profiler.complete(raw, strategy_names)
    """

    def __init__(self):
        self._start: Optional[float] = None
        self._response_received: Optional[float] = None

    def start(self):
        self._start = time.perf_counter()

    def mark_response_received(self):
        self._response_received = time.perf_counter()

    def complete(self, raw_response: Dict[str, Any], strategy_names: List[str]) -> MsearchProfile:
        now = time.perf_counter()
        received = self._response_received or now

        profile = MsearchProfile(
            total_time=_elapsed_ms(self._start, now),
            http_round_trip_ms=_elapsed_ms(self._start, received),
            response_deserialize_ms=_elapsed_ms(received, now),
            opensearch_reported_took=raw_response.get("took"),
        )

        for name, response in zip(strategy_names, raw_response.get("responses", [])):
            took = response.get("took")
            if took is not None:
                profile.subqueries[name] = took
                profile.max_subquery_took = max(profile.max_subquery_took, took)

        return profile


@dataclass
class BatchResult:
    """Backend responses aligned with the strategies that produced them"""
    responses: List[Dict[str, Any]] = field(default_factory=list)
    strategy_names: List[str] = field(default_factory=list)
    profile: MsearchProfile = field(default_factory=MsearchProfile)


class MsearchExecutor:
    """
    Executes multi-search batches against OpenSearch.

    A per-query error in the batch fails the whole call with
    SearchBackendError; transport errors from opensearch-py propagate as is.
    """

    def __init__(self, client: AsyncOpenSearch):
        self.client = client

    @traceable(name="opensearch_msearch", run_type="retriever")
    async def execute(self, batch: MsearchBatch) -> BatchResult:
        """
        Args:
            batch: Header/body pairs built by the registry

        Returns:
            BatchResult with one response per strategy

        Raises:
            SearchBackendError: If any strategy query failed on the backend
        """
        if batch.is_empty:
            return BatchResult()

        profiler = MsearchProfiler()
        profiler.start()
        raw = await self.client.msearch(body=batch.body)
        profiler.mark_response_received()

        responses = raw.get("responses", [])
        if len(responses) != len(batch.strategy_names):
            raise SearchBackendError(
                "msearch",
                f"expected {len(batch.strategy_names)} responses, got {len(responses)}",
            )

        for name, response in zip(batch.strategy_names, responses):
            if response.get("error"):
                logger.error(f"Strategy {name} failed on the backend: {response['error']}")
                raise SearchBackendError(name, response["error"])

        profile = profiler.complete(raw, batch.strategy_names)
        logger.info(
            f"msearch completed: {len(responses)} queries in {profile.total_time}ms "
            f"(max subquery {profile.max_subquery_took}ms)"
        )

        return BatchResult(responses=responses, strategy_names=list(batch.strategy_names), profile=profile)

    async def measure_health_check_rtt(self) -> Optional[float]:
        """Round trip to the cluster health endpoint, None when unreachable"""
        start = time.perf_counter()
        try:
            await self.client.cluster.health(level="cluster", timeout="5s")
        except Exception as e:
            logger.warning(f"OpenSearch health check failed: {e}")
            return None
        return _elapsed_ms(start)

    async def close(self):
        await self.client.close()


def create_opensearch_client() -> AsyncOpenSearch:
    """
    Build the async OpenSearch client from environment variables

    Environment:
        OPENSEARCH_NODE: Node URL (default http://localhost:9200)
        OPENSEARCH_USERNAME / OPENSEARCH_PASSWORD: Basic auth (optional)
        OPENSEARCH_VERIFY_CERTS: "true" to verify TLS certificates
    """
    node = os.getenv("OPENSEARCH_NODE", "http://localhost:9200")
    username = os.getenv("OPENSEARCH_USERNAME")
    password = os.getenv("OPENSEARCH_PASSWORD")
    verify_certs = os.getenv("OPENSEARCH_VERIFY_CERTS", "false").lower() == "true"

    http_auth = (username, password) if username and password else None

    logger.info(f"Creating OpenSearch client for {node}")
    return AsyncOpenSearch(
        hosts=[node],
        http_auth=http_auth,
        verify_certs=verify_certs,
        ssl_show_warn=False,
    )
