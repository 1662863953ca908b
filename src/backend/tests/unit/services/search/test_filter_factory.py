"""
Unit tests for FilterFactory
Tests geo distance, service area, taxonomy and location filters
"""

import pytest

from resource_search.services.search.components.filter_factory import FilterFactory


@pytest.fixture
def factory():
    return FilterFactory()


@pytest.mark.unit
class TestGeoFilters:
    """Test distance and service-area filters"""

    def test_no_point_no_geo_filters(self, factory, make_request):
        assert factory.build_filters(make_request(q="food")) == []

    def test_geo_distance_filter(self, factory, make_request):
        request = make_request(lat=47.6, lon=-122.3, distance=25)

        geo_filter = factory.build_geo_distance_filter(request)

        assert geo_filter == {
            "geo_distance": {"distance": "25mi", "location.point": {"lat": 47.6, "lon": -122.3}}
        }

    def test_point_without_distance_has_no_cutoff(self, factory, make_request):
        request = make_request(lat=47.6, lon=-122.3)

        assert factory.build_geo_distance_filter(request) is None
        assert len(factory.build_filters(request)) == 1

    def test_service_area_filter_admits_documents_without_area(self, factory, make_request):
        request = make_request(lat=47.6, lon=-122.3)

        service_area = factory.build_service_area_filter(request)["bool"]

        assert service_area["minimum_should_match"] == 1
        contains, missing = service_area["should"]
        assert contains["geo_shape"]["serviceArea.extent"] == {
            "shape": {"type": "point", "coordinates": [-122.3, 47.6]},
            "relation": "contains",
        }
        assert missing == {"bool": {"must_not": {"exists": {"field": "serviceArea.extent"}}}}

    def test_location_point_only(self, factory, make_request):
        filters = factory.build_filters(make_request(location_point_only=True))

        assert filters == [{"exists": {"field": "location.point"}}]


@pytest.mark.unit
class TestTaxonomyFilters:
    """Test taxonomy AND/OR translation"""

    def test_and_codes_each_get_a_filter(self, factory, make_request):
        request = make_request(query={"AND": ["BD-1800", "BD-1800.2000"]})

        filters = factory.build_filters(request)

        assert filters == [
            {"nested": {"path": "taxonomies", "query": {"term": {"taxonomies.code": "BD-1800"}}}},
            {"nested": {"path": "taxonomies", "query": {"term": {"taxonomies.code": "BD-1800.2000"}}}},
        ]

    def test_or_codes_collapse_into_terms(self, factory, make_request):
        request = make_request(query={"OR": ["BD-1800", "BM-6500"]})

        filters = factory.build_filters(request)

        assert filters == [
            {"nested": {"path": "taxonomies", "query": {"terms": {"taxonomies.code": ["BD-1800", "BM-6500"]}}}}
        ]

    def test_and_with_or_both_apply(self, factory, make_request):
        request = make_request(query={"AND": ["BD-1800"], "OR": ["BM-6500", "BM-6500.1500"]})

        filters = factory.build_filters(request)

        assert len(filters) == 2
        assert filters[1]["nested"]["query"]["terms"]["taxonomies.code"] == ["BM-6500", "BM-6500.1500"]

    def test_nested_or_inside_and(self, factory, make_request):
        request = make_request(query={"AND": ["BD-1800", {"OR": ["BM-6500", "BM-6500.1500"]}]})

        filters = factory.build_filters(request)

        assert len(filters) == 2
        assert filters[1] == {
            "nested": {
                "path": "taxonomies",
                "query": {"terms": {"taxonomies.code": ["BM-6500", "BM-6500.1500"]}},
            }
        }

    def test_or_with_subtree_uses_should(self, factory, make_request):
        request = make_request(query={"OR": ["BD-1800", {"AND": ["BM-6500", "LR-8000"]}]})

        (or_filter,) = factory.build_filters(request)

        should = or_filter["bool"]["should"]
        assert or_filter["bool"]["minimum_should_match"] == 1
        assert should[0]["nested"]["query"]["terms"]["taxonomies.code"] == ["BD-1800"]
        assert len(should[1]["bool"]["must"]) == 2

    def test_taxonomy_filters_combine_with_geo(self, factory, make_request):
        request = make_request(lat=47.6, lon=-122.3, distance=10, query={"AND": ["BD-1800"]})

        filters = factory.build_filters(request)

        assert "geo_distance" in filters[0]
        assert "bool" in filters[1]
        assert "nested" in filters[2]
