"""
Search Package

Hybrid multi-strategy search:
- Strategies: browse, match-all-filtered, semantic (KNN), keyword variations, intent taxonomy
- Registry builds one multi-search batch from the eligible strategies
- Consolidator normalizes, deduplicates and ranks the strategy hits
- Orchestrator runs the whole pipeline for a request
"""

from .consolidator import FusionResult, ResultConsolidator, normalize_scores
from .context import SearchContext
from .executor import BatchResult, MsearchExecutor, create_opensearch_client
from .orchestrator import HybridSearchOrchestrator
from .registry import MsearchBatch, SearchStrategyRegistry
from .result_processor import ResultProcessor
from .strategies.base import SearchStrategy
from .strategy_factory import StrategyFactory
from .weight_resolver import WeightResolver

__all__ = [
    "FusionResult",
    "ResultConsolidator",
    "normalize_scores",
    "SearchContext",
    "BatchResult",
    "MsearchExecutor",
    "create_opensearch_client",
    "HybridSearchOrchestrator",
    "MsearchBatch",
    "SearchStrategyRegistry",
    "ResultProcessor",
    "SearchStrategy",
    "StrategyFactory",
    "WeightResolver",
]
