"""Tests for query DSL and aggregation fragments."""

import pytest

from elasticsearcher.search.aggregations import (
    Aggregations,
    AvgAggregation,
    DateHistogramAggregation,
    StatsAggregation,
    TermsAggregation,
)
from elasticsearcher.search.dsl import (
    Bool,
    Exists,
    Match,
    MatchAll,
    MultiMatch,
    Paginated,
    Prefix,
    Range,
    Sorted,
    Term,
    Terms,
    Wildcard,
)
from elasticsearcher.search.fragments import FragmentParser, FragmentRef, FragmentRegistry


class TestQueryFragments:
    """Test query DSL fragments."""

    def test_match_all(self):
        """Test MatchAll."""
        assert MatchAll().to_dict() == {"match_all": {}}
        assert MatchAll(boost=1.5).to_dict() == {"match_all": {"boost": 1.5}}

    def test_match(self):
        """Test Match with options."""
        result = Match(field="title", query="test", operator="and", fuzziness="AUTO").to_dict()

        assert result["match"]["title"]["query"] == "test"
        assert result["match"]["title"]["operator"] == "and"
        assert result["match"]["title"]["fuzziness"] == "AUTO"

    def test_multi_match(self):
        """Test MultiMatch."""
        result = MultiMatch(query="lamp", fields=["name", "description"]).to_dict()

        assert result == {
            "multi_match": {
                "query": "lamp",
                "fields": ["name", "description"],
                "type": "best_fields",
            }
        }

    def test_term_and_terms(self):
        """Test Term and Terms."""
        assert Term(field="status", value="active").to_dict() == {"term": {"status": "active"}}
        assert Term("status", "active", boost=2.0).to_dict() == {
            "term": {"status": {"value": "active", "boost": 2.0}}
        }
        assert Terms(field="tags", values=["python", "ml"]).to_dict() == {
            "terms": {"tags": ["python", "ml"]}
        }

    def test_range(self):
        """Test Range keeps only the given bounds."""
        result = Range(field="price", gte=10, lt=100).to_dict()

        assert result == {"range": {"price": {"gte": 10, "lt": 100}}}

    def test_exists_prefix_wildcard(self):
        """Test single-field fragments."""
        assert Exists("image").to_dict() == {"exists": {"field": "image"}}
        assert Prefix("name", "des").to_dict() == {"prefix": {"name": "des"}}
        assert Wildcard("name", "d*k").to_dict() == {"wildcard": {"name": "d*k"}}

    def test_bool_keeps_clauses_for_the_parser(self):
        """Bool clauses stay unresolved until the body is parsed."""
        registry = FragmentRegistry().register("published", Term("status", "published"))
        query = (Bool()
            .add_must(Match(field="content", query="python"))
            .add_filter(FragmentRef("published"))
            .add_must_not({"term": {"archived": True}}))
        query.minimum_should_match = 1

        parsed = FragmentParser(registry).parse({"query": query})

        assert parsed == {
            "query": {
                "bool": {
                    "must": [{"match": {"content": {"query": "python"}}}],
                    "must_not": [{"term": {"archived": True}}],
                    "filter": [{"term": {"status": "published"}}],
                    "minimum_should_match": 1,
                }
            }
        }

    def test_empty_bool(self):
        """Test Bool without clauses."""
        assert Bool().to_dict() == {"bool": {}}


class TestParentFragments:
    """Test fragments that merge into their holder."""

    def test_paginated(self):
        """Test Paginated from/size."""
        parsed = FragmentParser().parse({"page": Paginated(page=3, per_page=20)})

        assert parsed == {"from": 40, "size": 20}

    def test_paginated_rejects_page_zero(self):
        """Test page numbers start at 1."""
        with pytest.raises(ValueError):
            Paginated(page=0)

    def test_sorted(self):
        """Test Sorted sort clause."""
        parsed = FragmentParser().parse({
            "query": MatchAll(),
            "sorting": Sorted([("price", "desc"), ("name", "asc")]),
        })

        assert parsed == {
            "query": {"match_all": {}},
            "sort": [{"price": {"order": "desc"}}, {"name": {"order": "asc"}}],
        }


class TestAggregationFragments:
    """Test aggregation fragments."""

    def test_terms_aggregation(self):
        """Test TermsAggregation."""
        result = TermsAggregation(name="categories", field="category", size=20).to_dict()

        assert result == {"categories": {"terms": {"field": "category", "size": 20}}}

    def test_terms_aggregation_with_sub_aggregations(self):
        """Test nested aggregations."""
        agg = TermsAggregation(
            name="brands",
            field="brand",
            sub_aggregations=[AvgAggregation(name="avg_price", field="price")],
        )

        result = agg.to_dict()

        assert result["brands"]["aggs"] == {"avg_price": {"avg": {"field": "price"}}}

    def test_date_histogram(self):
        """Test calendar interval wins over fixed interval."""
        result = DateHistogramAggregation(
            name="per_month",
            field="created_at",
            calendar_interval="month",
            fixed_interval="30d",
        ).to_dict()

        assert result == {
            "per_month": {"date_histogram": {"field": "created_at", "calendar_interval": "month"}}
        }

    def test_stats(self):
        """Test StatsAggregation."""
        result = StatsAggregation(name="price_stats", field="price", missing=0).to_dict()

        assert result == {"price_stats": {"stats": {"field": "price", "missing": 0}}}

    def test_aggregations_parent(self):
        """Test Aggregations placing everything under aggs."""
        aggs = Aggregations(TermsAggregation(name="brands", field="brand"))
        aggs.add(StatsAggregation(name="price_stats", field="price"))

        parsed = FragmentParser().parse({"size": 0, "aggregations": aggs})

        assert parsed == {
            "size": 0,
            "aggs": {
                "brands": {"terms": {"field": "brand", "size": 10}},
                "price_stats": {"stats": {"field": "price"}},
            },
        }
