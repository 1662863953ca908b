"""
Unit tests for QueryBuilder
Tests query shapes, geospatial scoring, weights and pagination
"""

import pytest

from resource_search.models.weights import GeospatialWeights, WeightConfig
from resource_search.services.search.components.query_builder import KEYWORD_SEARCH_FIELDS, QueryBuilder


@pytest.fixture
def builder():
    return QueryBuilder()


@pytest.mark.unit
class TestQueryShapes:
    """Test primary clauses and wrappers"""

    def test_build_without_primary_clause_fails(self, builder):
        with pytest.raises(ValueError):
            builder.build()

    def test_match_all_base_shape(self, builder):
        body = builder.with_match_all().build()

        assert body["size"] == 50
        assert body["sort"] == [{"_score": {"order": "desc"}}, {"_id": {"order": "asc"}}]
        function_score = body["query"]["function_score"]
        assert function_score["query"] == {"match_all": {}}
        assert function_score["functions"] == []
        assert function_score["score_mode"] == "multiply"
        assert function_score["boost_mode"] == "replace"
        assert "boost" not in function_score
        assert "from" not in body and "search_after" not in body

    def test_nested_knn(self, builder):
        body = builder.with_nested_knn("service", "service.embedding", [0.1, 0.2], 50).build()

        nested = body["query"]["function_score"]["query"]["nested"]
        assert nested["path"] == "service"
        assert nested["score_mode"] == "max"
        assert nested["query"] == {"knn": {"service.embedding": {"vector": [0.1, 0.2], "k": 50}}}

    def test_multi_match_defaults(self, builder):
        body = builder.with_multi_match("food pantry").build()

        multi_match = body["query"]["function_score"]["query"]["bool"]["must"][0]["multi_match"]
        assert multi_match == {
            "query": "food pantry",
            "fields": KEYWORD_SEARCH_FIELDS,
            "type": "best_fields",
            "operator": "or",
        }

    def test_taxonomy_terms(self, builder):
        body = builder.with_taxonomy_terms(["BD-1800", "BM-6500"]).build()

        nested = body["query"]["function_score"]["query"]["bool"]["must"][0]["nested"]
        assert nested["query"] == {"terms": {"taxonomies.code": ["BD-1800", "BM-6500"]}}

    def test_filters_wrap_primary_clause(self, builder):
        filters = [{"exists": {"field": "location.point"}}]

        body = builder.with_match_all().with_filters(filters).build()

        inner = body["query"]["function_score"]["query"]
        assert inner == {"bool": {"must": [{"match_all": {}}], "filter": filters}}

    def test_weight_is_boost(self, builder):
        body = builder.with_match_all().with_weight(1.5).build()

        assert body["query"]["function_score"]["boost"] == 1.5

    def test_reset_clears_state(self, builder):
        builder.with_match_all().with_weight(3.0).with_filters([{"match_all": {}}]).with_size(5)

        body = builder.reset().with_match_all().build()

        assert body["size"] == 50
        assert "boost" not in body["query"]["function_score"]
        assert body["query"]["function_score"]["query"] == {"match_all": {}}


@pytest.mark.unit
class TestGeospatialScoring:
    """Test gaussian decay function"""

    def test_no_point_no_function(self, builder, make_request, weights):
        body = builder.with_match_all().with_geospatial_scoring(make_request(), weights).build()

        assert body["query"]["function_score"]["functions"] == []

    def test_gauss_function(self, builder, make_request):
        weights = WeightConfig(geospatial=GeospatialWeights(decay_scale=30, decay_offset=2.5))
        request = make_request(lat=47.6, lon=-122.3)

        body = builder.with_match_all().with_geospatial_scoring(request, weights).build()

        (function,) = body["query"]["function_score"]["functions"]
        assert function == {
            "gauss": {
                "location.point": {
                    "origin": {"lat": 47.6, "lon": -122.3},
                    "scale": "30mi",
                    "offset": "2.5mi",
                    "decay": 0.5,
                }
            }
        }

    def test_large_decay_scale_is_not_rounded(self, builder, make_request):
        geospatial = GeospatialWeights.model_construct(weight=1.0, decay_scale=1234567.0, decay_offset=0.125)
        weights = WeightConfig(geospatial=geospatial)
        request = make_request(lat=47.6, lon=-122.3)

        body = builder.with_match_all().with_geospatial_scoring(request, weights).build()

        gauss = body["query"]["function_score"]["functions"][0]["gauss"]["location.point"]
        assert gauss["scale"] == "1234567mi"
        assert gauss["offset"] == "0.125mi"


@pytest.mark.unit
class TestPagination:
    """Test cursor and offset pagination clauses"""

    def test_cursor(self, builder, make_request, make_context):
        context = make_context(make_request(search_after=[1.2, "doc-9"]))

        body = builder.with_match_all().with_pagination(context).build()

        assert body["search_after"] == [1.2, "doc-9"]
        assert "from" not in body

    def test_offset(self, builder, make_request, make_context):
        context = make_context(
            make_request(legacy_offset_pagination=True, page=3, limit=10, search_after=[1.0, "x"])
        )

        body = builder.with_match_all().with_pagination(context).build()

        assert body["from"] == 20
        assert "search_after" not in body

    def test_first_cursor_page_has_neither(self, builder, make_request, make_context):
        body = builder.with_match_all().with_pagination(make_context(make_request())).build()

        assert "from" not in body and "search_after" not in body
