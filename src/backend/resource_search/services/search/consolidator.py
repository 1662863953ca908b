"""
Result Consolidator

Fuses the per-strategy responses of one multi-search call:
- Min-max normalizes scores per strategy
- Deduplicates documents by _id
- Records every contributing strategy with its pre-weight score
- Ranks by the backend score of the representative hit
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Strategies whose backend scores carry no relevance information
UNSCORED_STRATEGIES = frozenset({"browse_match_all"})


def normalize_scores(scores: List[float]) -> List[float]:
    """
    Min-max normalize to [0, 1].

    Identical scores (including a single score) all map to 1.0.

    Example:
        >>> normalize_scores([2.0, 4.0, 3.0])
        [0.0, 1.0, 0.5]
    """
    if not scores:
        return []

    min_score = min(scores)
    max_score = max(scores)
    score_range = max_score - min_score

    if score_range == 0:
        return [1.0] * len(scores)
    return [(score - min_score) / score_range for score in scores]


def _total_hits(response: Dict[str, Any]) -> int:
    total = response.get("hits", {}).get("total", 0)
    if isinstance(total, dict):
        return total.get("value", 0)
    return total or 0


@dataclass
class FusionResult:
    """
    Attributes:
        hits: Fused hits, best first; each carries _source_contributions
        total_results: Largest total reported by any strategy
    """
    hits: List[Dict[str, Any]] = field(default_factory=list)
    total_results: int = 0

    @property
    def max_score(self) -> Optional[float]:
        scores = [hit["_score"] for hit in self.hits if hit.get("_score") is not None]
        return max(scores) if scores else None


class ResultConsolidator:
    """
    Deduplicates and ranks hits from multiple strategies.

    The strategy weight is already applied by the backend (function_score
    boost), so ranking uses the representative hit's backend _score. The
    normalized score is kept per contribution as pre_weight_score.
    """

    def __init__(self, unscored_strategies: frozenset = UNSCORED_STRATEGIES):
        self.unscored_strategies = unscored_strategies

    def consolidate(
        self,
        responses: List[Dict[str, Any]],
        strategy_names: List[str],
        strategy_weights: Optional[Dict[str, float]] = None,
    ) -> FusionResult:
        """
        Fuse aligned strategy responses.

        Args:
            responses: Backend responses, one per strategy
            strategy_names: Strategy name per response
            strategy_weights: Weight per strategy, recorded on contributions

        Returns:
            FusionResult with unique hits sorted by _score descending
        """
        strategy_weights = strategy_weights or {}
        fused: Dict[str, Dict[str, Any]] = {}
        order: List[str] = []
        total_results = 0

        for strategy_name, response in zip(strategy_names, responses):
            total_results = max(total_results, _total_hits(response))
            weight = strategy_weights.get(strategy_name, 1.0)

            for hit in self._normalize_strategy_hits(strategy_name, response.get("hits", {}).get("hits", [])):
                contribution = {
                    "strategy": strategy_name,
                    "pre_weight_score": hit["_normalized_score"],
                    "original_score": hit["_original_score"],
                    "strategy_weight": weight,
                    "weighted_score": hit["_normalized_score"] * weight,
                }

                doc_id = hit["_id"]
                existing = fused.get(doc_id)
                if existing is None:
                    hit["_source_contributions"] = [contribution]
                    fused[doc_id] = hit
                    order.append(doc_id)
                    continue

                contributions = existing["_source_contributions"]
                contributions.append(contribution)
                if hit["_score"] > existing["_score"]:
                    hit["_source_contributions"] = contributions
                    fused[doc_id] = hit

        # sorted() is stable: ties keep first-seen order
        hits = sorted((fused[doc_id] for doc_id in order), key=lambda h: h["_score"], reverse=True)

        logger.info(
            f"Consolidated {sum(len(h['_source_contributions']) for h in hits)} strategy hits "
            f"into {len(hits)} unique documents (total_results={total_results})"
        )
        return FusionResult(hits=hits, total_results=total_results)

    def _normalize_strategy_hits(self, strategy_name: str, hits: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Copy hits and annotate _normalized_score and _original_score.

        Unscored strategies, and any strategy returning a null score, get a
        flat 1.0 as both normalized and fused score.
        """
        if not hits:
            return []

        raw_scores = [hit.get("_score") for hit in hits]
        if strategy_name in self.unscored_strategies or any(score is None for score in raw_scores):
            return [
                {
                    **hit,
                    "_score": 1.0,
                    "_normalized_score": 1.0,
                    "_original_score": raw if raw is not None else 1.0,
                }
                for hit, raw in zip(hits, raw_scores)
            ]

        normalized = normalize_scores(raw_scores)
        logger.debug(
            f"Score normalization for {strategy_name}: "
            f"min={min(raw_scores):.4f}, max={max(raw_scores):.4f}"
        )
        return [
            {**hit, "_normalized_score": norm, "_original_score": raw}
            for hit, raw, norm in zip(hits, raw_scores, normalized)
        ]

    def get_strategy_coverage_report(self, hits: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Summarize which strategies found the fused hits

        Returns:
            {"total_documents", "documents_per_strategy", "multi_strategy_documents"}
        """
        per_strategy: Dict[str, int] = defaultdict(int)
        multi_strategy = 0

        for hit in hits:
            strategies = {c["strategy"] for c in hit.get("_source_contributions", [])}
            for strategy in strategies:
                per_strategy[strategy] += 1
            if len(strategies) > 1:
                multi_strategy += 1

        return {
            "total_documents": len(hits),
            "documents_per_strategy": dict(per_strategy),
            "multi_strategy_documents": multi_strategy,
        }
