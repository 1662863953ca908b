"""
Hybrid Search Orchestrator

Runs the hybrid search pipeline for one request:
1. Query understanding: embedding and intent classification in parallel,
   keyword variations locally
2. Retrieval: every eligible strategy in one multi-search call
3. Fusion and reranking
4. Post-processing: cleanup, distance, snippets
5. Response assembly with pagination and optional debug metadata

Any collaborator failure aborts the request; the error is logged with the
phase timings gathered so far and re-raised.
"""

import asyncio
import logging
import os
import time
from typing import Any, Awaitable, Dict, List, Optional, Tuple

from langsmith import traceable

from ...models.intent import IntentClassification, KeywordVariations
from ...models.search_request import SearchRequest
from ...models.search_response import (
    HitsEnvelope,
    HitsTotal,
    SearchMetadata,
    SearchResponse,
    SourceContribution,
    TopHitSources,
)
from ...models.weights import WeightConfig
from ...utils.logging_context import bind_search_context, log_context
from ..ai.ai_utils_client import AiUtilsClient
from ..nlp.keyword_variations import KeywordVariationGenerator
from .components.filter_factory import FilterFactory
from .consolidator import ResultConsolidator
from .context import DEFAULT_CANDIDATES_PER_STRATEGY, SearchContext
from .executor import MsearchExecutor
from .registry import SearchStrategyRegistry
from .result_processor import ResultProcessor
from .weight_resolver import WeightResolver

logger = logging.getLogger(__name__)

DEFAULT_INDEX_TEMPLATE = "{tenant}-resources_{lang}"


def _ms_since(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


async def _timed(awaitable: Awaitable[Any]) -> Tuple[Any, int]:
    start = time.perf_counter()
    result = await awaitable
    return result, _ms_since(start)


class HybridSearchOrchestrator:
    """
    Orchestrates the hybrid semantic search pipeline.

    Collaborators are injected; the orchestrator keeps no per-request state on
    the instance, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        registry: SearchStrategyRegistry,
        executor: MsearchExecutor,
        ai_client: AiUtilsClient,
        weight_resolver: WeightResolver,
        keyword_generator: KeywordVariationGenerator,
        result_processor: ResultProcessor,
        filter_factory: Optional[FilterFactory] = None,
        consolidator: Optional[ResultConsolidator] = None,
        index_template: Optional[str] = None,
        candidates_per_strategy: int = DEFAULT_CANDIDATES_PER_STRATEGY,
        dev_mode: Optional[bool] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            registry: Strategies in execution order
            executor: Multi-search executor
            ai_client: Embedding, classification and rerank client
            weight_resolver: Per-request weight resolution
            keyword_generator: Keyword variation generator
            result_processor: Hit post-processing
            filter_factory: Filter builder (created if omitted)
            consolidator: Fusion engine (created if omitted)
            index_template: Index name template with {tenant} and {lang}
                (SEARCH_INDEX_TEMPLATE, default "{tenant}-resources_{lang}")
            candidates_per_strategy: Hits fetched per strategy before fusion
            dev_mode: Include debug metadata; None reads DEV_MODE per request
        """
        self.registry = registry
        self.executor = executor
        self.ai_client = ai_client
        self.weight_resolver = weight_resolver
        self.keyword_generator = keyword_generator
        self.result_processor = result_processor
        self.filter_factory = filter_factory or FilterFactory()
        self.consolidator = consolidator or ResultConsolidator()
        self.index_template = index_template or os.getenv("SEARCH_INDEX_TEMPLATE", DEFAULT_INDEX_TEMPLATE)
        self.candidates_per_strategy = candidates_per_strategy
        self.dev_mode = dev_mode

        logger.info(
            f"HybridSearchOrchestrator initialized with {len(registry.list_strategy_names())} strategies "
            f"(index template: {self.index_template})"
        )

    def get_index_name(self, tenant: str, lang: str) -> str:
        return self.index_template.format(tenant=tenant, lang=lang)

    def is_dev_mode(self) -> bool:
        if self.dev_mode is not None:
            return self.dev_mode
        return os.getenv("DEV_MODE") == "True"

    @traceable(name="hybrid_semantic_search", run_type="chain")
    async def search(
        self,
        request: SearchRequest,
        tenant: str,
        request_id: Optional[str] = None,
    ) -> SearchResponse:
        """
        Execute a hybrid search.

        Args:
            request: Validated search request
            tenant: Tenant short code used in the index name
            request_id: Correlation id forwarded to the classifier

        Returns:
            SearchResponse for the active pagination mode
        """
        start_time = time.perf_counter()
        timings: Dict[str, Any] = {}
        query = request.query_text

        bind_search_context(
            tenant=tenant,
            query=query,
            lang=request.lang,
            pagination_mode="offset" if request.legacy_offset_pagination else "cursor",
        )
        logger.info(f"Starting hybrid semantic search for query: '{query}'")

        try:
            # Phase 1: query understanding
            embedding, classification = await self._understand_query(request, request_id, timings)

            # Phase 2: retrieval
            phase_start = time.perf_counter()
            build_start = phase_start

            weights = self.weight_resolver.resolve(request)
            keyword_variations = await self._generate_keyword_variations(request)
            context = SearchContext(
                request=request,
                weights=weights,
                embedding=embedding,
                filters=self.filter_factory.build_filters(request),
                k=self.candidates_per_strategy,
                search_after=request.search_after,
                use_offset_pagination=request.legacy_offset_pagination,
                offset=request.offset if request.legacy_offset_pagination else 0,
                intent_classification=classification,
                keyword_variations=keyword_variations,
            )

            index = self.get_index_name(tenant, request.lang)
            batch = self.registry.build_msearch_batch(context, index)
            request_build_time = _ms_since(build_start)

            with log_context(phase="retrieval", index=index):
                batch_result = await self.executor.execute(batch)

            timings["phase_2_opensearch"] = {
                "total_time": _ms_since(phase_start),
                "request_build_time": request_build_time,
                "opensearch_call": batch_result.profile.to_dict(),
            }

            # Phase 3: fusion and reranking
            phase_start = time.perf_counter()
            strategy_weights = self.registry.get_weights_by_strategy(weights)

            combine_start = time.perf_counter()
            fusion = self.consolidator.consolidate(
                batch_result.responses, batch_result.strategy_names, strategy_weights
            )
            combine_time = _ms_since(combine_start)

            rerank_start = time.perf_counter()
            if query and fusion.hits:
                ranked_hits = await self.ai_client.rerank_results(query, fusion.hits, request.limit)
            else:
                ranked_hits = fusion.hits[:request.limit]
            rerank_time = _ms_since(rerank_start)

            timings["phase_3_fusion_and_reranking"] = {
                "total_time": _ms_since(phase_start),
                "combine_and_dedupe": combine_time,
                "ai_reranking": rerank_time,
            }

            # Phase 4: post-processing
            phase_start = time.perf_counter()
            hits = self.result_processor.post_process(ranked_hits, request)

            distance_start = time.perf_counter()
            self.result_processor.add_distance_info(hits, request)
            distance_time = _ms_since(distance_start)

            snippet_start = time.perf_counter()
            nouns = keyword_variations.nouns if keyword_variations else None
            self.result_processor.add_relevant_text_snippets(hits, query, nouns)
            snippet_time = _ms_since(snippet_start)

            timings["phase_4_post_processing"] = {
                "total_time": _ms_since(phase_start),
                "distance_calculation": distance_time,
                "snippet_extraction": snippet_time,
            }

            # Response
            took = _ms_since(start_time)
            response = SearchResponse(
                took=took,
                hits=HitsEnvelope(
                    total=HitsTotal(value=len(hits)),
                    max_score=hits[0].get("_score") if hits else None,
                    hits=hits,
                ),
                total_results=fusion.total_results,
                intent_classification=classification,
                is_low_information_query=bool(classification and classification.is_low_information_query),
                **self.result_processor.build_pagination(request, fusion.total_results, hits),
            )

            if self.is_dev_mode():
                response.metadata = self._build_metadata(
                    hits, timings, batch_result.strategy_names, weights, strategy_weights
                )

            logger.info(
                f"Hybrid semantic search completed in {took}ms, returned {len(hits)} results "
                f"from {len(batch_result.strategy_names)} strategies"
            )
            return response

        except Exception as e:
            logger.error(
                f"Hybrid semantic search failed after {_ms_since(start_time)}ms: {e} "
                f"(phase timings so far: {timings})",
                exc_info=True,
            )
            raise

    async def _understand_query(
        self,
        request: SearchRequest,
        request_id: Optional[str],
        timings: Dict[str, Any],
    ) -> Tuple[Optional[List[float]], Optional[IntentClassification]]:
        """
        Phase 1: embedding and classification, concurrently.

        Skipped entirely without query text. Embedding is skipped in
        keyword-only mode, classification when it is disabled.
        """
        query = request.query_text
        if not query:
            return None, None

        run_embedding = not request.keyword_search_only
        run_classification = not request.disable_intent_classification
        if not run_embedding and not run_classification:
            return None, None

        phase_start = time.perf_counter()

        async def _skipped() -> Tuple[None, int]:
            return None, 0

        (embedding, embedding_time), (classification, classification_time) = await asyncio.gather(
            _timed(self.ai_client.embed_query(query)) if run_embedding else _skipped(),
            _timed(self.ai_client.classify_query(query, request_id)) if run_classification else _skipped(),
        )

        timings["phase_1_embedding_and_classification"] = {
            "total_parallel_time": _ms_since(phase_start),
            "embedding": embedding_time,
            "classification": classification_time,
        }
        return embedding, classification

    async def _generate_keyword_variations(self, request: SearchRequest) -> Optional[KeywordVariations]:
        query = request.query_text
        if not query or request.disable_intent_classification:
            return None

        # POS tagging and NE chunking are CPU bound
        variations = await asyncio.to_thread(self.keyword_generator.generate, query)
        logger.debug(
            f"Keyword variations - original: {variations.original}, nouns: {variations.nouns}, "
            f"stemmed: {variations.stemmed_nouns}, synonyms: {variations.synonyms}, topics: {variations.topics}"
        )
        return variations

    def _build_metadata(
        self,
        hits: List[Dict[str, Any]],
        timings: Dict[str, Any],
        strategies_executed: List[str],
        weights: WeightConfig,
        strategy_weights: Dict[str, float],
    ) -> SearchMetadata:
        """Debug metadata: timings, executed strategies, weights and per-hit attribution"""
        sources_of_top_hits = []
        for rank, hit in enumerate(hits, start=1):
            source = hit.get("_source") or {}
            organization = source.get("organization") or {}
            service = source.get("service") or {}
            sources_of_top_hits.append(
                TopHitSources(
                    id=hit["_id"],
                    organization_name=organization.get("name"),
                    service_name=service.get("name"),
                    name=source.get("name"),
                    rank=rank,
                    total_document_relevance_score=hit.get("_score"),
                    sources=[
                        SourceContribution(
                            strategy=contribution["strategy"],
                            pre_weight_score=round(contribution.get("pre_weight_score") or 0, 4),
                            strategy_weight=strategy_weights.get(contribution["strategy"], 1.0),
                        )
                        for contribution in hit.get("_source_contributions", [])
                    ],
                )
            )

        return SearchMetadata(
            granular_phase_timings=timings,
            strategies_executed=list(strategies_executed),
            weights=weights.model_dump(),
            sources_of_top_hits=sources_of_top_hits,
            strategy_coverage=self.consolidator.get_strategy_coverage_report(hits),
        )
