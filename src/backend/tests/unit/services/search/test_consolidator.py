"""
Unit tests for ResultConsolidator
Tests normalization, deduplication, ranking and coverage reporting
"""

import pytest

from resource_search.services.search.consolidator import FusionResult, ResultConsolidator, normalize_scores


@pytest.fixture
def consolidator():
    return ResultConsolidator()


@pytest.mark.unit
class TestNormalizeScores:
    """Test min-max normalization"""

    def test_min_max(self):
        assert normalize_scores([2.0, 4.0, 3.0]) == [0.0, 1.0, 0.5]

    def test_identical_scores_map_to_one(self):
        assert normalize_scores([0.7, 0.7]) == [1.0, 1.0]
        assert normalize_scores([0.3]) == [1.0]

    def test_empty(self):
        assert normalize_scores([]) == []

    @pytest.mark.parametrize(
        "scores",
        [[2.0, 4.0, 3.0], [1.3, 2.9, 2.1, 2.9], [0.7, 0.7], [5.0], [12.5, 0.02]],
    )
    def test_normalizing_twice_changes_nothing(self, scores):
        once = normalize_scores(scores)

        assert normalize_scores(once) == pytest.approx(once)


@pytest.mark.unit
class TestConsolidate:
    """Test fusion of strategy responses"""

    def test_duplicate_keeps_higher_score_and_all_contributions(self, consolidator, make_hit, make_response):
        semantic = make_response([make_hit("a", 0.8), make_hit("b", 0.4)])
        keyword = make_response([make_hit("a", 0.6), make_hit("c", 0.5)])

        result = consolidator.consolidate(
            [semantic, keyword],
            ["semantic_service", "keyword_original"],
            {"semantic_service": 2.0, "keyword_original": 1.0},
        )

        assert [hit["_id"] for hit in result.hits] == ["a", "c", "b"]
        top = result.hits[0]
        assert top["_score"] == 0.8
        assert [c["strategy"] for c in top["_source_contributions"]] == ["semantic_service", "keyword_original"]
        assert top["_source_contributions"][0]["strategy_weight"] == 2.0
        assert top["_source_contributions"][0]["pre_weight_score"] == 1.0

    def test_later_higher_score_replaces_representative(self, consolidator, make_hit, make_response):
        first = make_response([make_hit("a", 0.3, source={"name": "from first"})])
        second = make_response([make_hit("a", 0.9, source={"name": "from second"})])

        result = consolidator.consolidate([first, second], ["semantic_service", "keyword_original"])

        (hit,) = result.hits
        assert hit["_score"] == 0.9
        assert hit["_source"]["name"] == "from second"
        assert len(hit["_source_contributions"]) == 2

    def test_equal_score_keeps_first_seen(self, consolidator, make_hit, make_response):
        first = make_response([make_hit("a", 0.5, source={"name": "first"})])
        second = make_response([make_hit("a", 0.5, source={"name": "second"})])

        result = consolidator.consolidate([first, second], ["semantic_service", "keyword_original"])

        assert result.hits[0]["_source"]["name"] == "first"

    def test_browse_scores_are_flat(self, consolidator, make_hit, make_response):
        browse = make_response([make_hit("a", None, sort=[1.2, "a"]), make_hit("b", None, sort=[3.4, "b"])])

        result = consolidator.consolidate([browse], ["browse_match_all"])

        assert [hit["_score"] for hit in result.hits] == [1.0, 1.0]
        assert [hit["_id"] for hit in result.hits] == ["a", "b"]
        assert result.hits[0]["sort"] == [1.2, "a"]

    def test_null_scores_from_scored_strategy_are_flat(self, consolidator, make_hit, make_response):
        response = make_response([make_hit("a", None), make_hit("b", 2.0)])

        result = consolidator.consolidate([response], ["semantic_service"])

        assert all(hit["_normalized_score"] == 1.0 for hit in result.hits)

    def test_annotations(self, consolidator, make_hit, make_response):
        response = make_response([make_hit("a", 4.0), make_hit("b", 2.0)])

        result = consolidator.consolidate([response], ["keyword_original"])

        assert result.hits[1]["_original_score"] == 2.0
        assert result.hits[1]["_normalized_score"] == 0.0

    def test_total_is_max_across_strategies(self, consolidator, make_hit, make_response):
        responses = [
            make_response([make_hit("a")], total=120),
            make_response([make_hit("b")], total=45),
        ]

        result = consolidator.consolidate(responses, ["semantic_service", "keyword_original"])

        assert result.total_results == 120

    def test_integer_total(self, consolidator, make_hit):
        response = {"hits": {"total": 7, "hits": [make_hit("a")]}}

        assert consolidator.consolidate([response], ["semantic_service"]).total_results == 7

    def test_input_hits_are_not_mutated(self, consolidator, make_hit, make_response):
        hit = make_hit("a", 0.5)
        response = make_response([hit])

        consolidator.consolidate([response], ["semantic_service"])

        assert "_source_contributions" not in hit
        assert "_normalized_score" not in hit

    def test_no_responses(self, consolidator):
        result = consolidator.consolidate([], [])

        assert result.hits == []
        assert result.total_results == 0
        assert result.max_score is None

    def test_max_score(self):
        result = FusionResult(hits=[{"_score": 0.2}, {"_score": 0.9}, {"_score": None}])

        assert result.max_score == 0.9


@pytest.mark.unit
class TestCoverageReport:
    """Test strategy coverage summary"""

    def test_report(self, consolidator, make_hit, make_response):
        semantic = make_response([make_hit("a", 0.8), make_hit("b", 0.4)])
        keyword = make_response([make_hit("a", 0.6)])
        result = consolidator.consolidate([semantic, keyword], ["semantic_service", "keyword_original"])

        report = consolidator.get_strategy_coverage_report(result.hits)

        assert report == {
            "total_documents": 2,
            "documents_per_strategy": {"semantic_service": 2, "keyword_original": 1},
            "multi_strategy_documents": 1,
        }
