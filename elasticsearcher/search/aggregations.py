"""Search Aggregations.

Aggregation fragments. Each renders as ``{name: {...}}``; wrap them in
``Aggregations`` to place them under the ``aggs`` key of a body.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from elasticsearcher.search.fragments import Fragment


@dataclass
class Aggregation(Fragment):
    """Base aggregation class."""

    name: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to Elasticsearch aggregation dict."""
        raise NotImplementedError


def _sub_aggs(aggregations: List[Aggregation]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for agg in aggregations:
        merged.update(agg.to_dict())
    return merged


@dataclass
class TermsAggregation(Aggregation):
    """Terms bucket aggregation."""

    field: str
    size: int = 10
    min_doc_count: int = 1
    order: Optional[Dict[str, str]] = None
    missing: Optional[Any] = None
    sub_aggregations: List[Aggregation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        terms_body: Dict[str, Any] = {
            "field": self.field,
            "size": self.size,
        }

        if self.min_doc_count != 1:
            terms_body["min_doc_count"] = self.min_doc_count

        if self.order:
            terms_body["order"] = self.order

        if self.missing is not None:
            terms_body["missing"] = self.missing

        result: Dict[str, Any] = {"terms": terms_body}

        if self.sub_aggregations:
            result["aggs"] = _sub_aggs(self.sub_aggregations)

        return {self.name: result}


@dataclass
class DateHistogramAggregation(Aggregation):
    """Date histogram bucket aggregation."""

    field: str
    calendar_interval: Optional[str] = None  # minute, hour, day, week, month, year
    fixed_interval: Optional[str] = None  # 30m, 1h, 1d
    format: Optional[str] = None
    time_zone: Optional[str] = None
    min_doc_count: int = 0
    sub_aggregations: List[Aggregation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        date_hist_body: Dict[str, Any] = {"field": self.field}

        if self.calendar_interval:
            date_hist_body["calendar_interval"] = self.calendar_interval
        elif self.fixed_interval:
            date_hist_body["fixed_interval"] = self.fixed_interval

        if self.format:
            date_hist_body["format"] = self.format

        if self.time_zone:
            date_hist_body["time_zone"] = self.time_zone

        if self.min_doc_count != 0:
            date_hist_body["min_doc_count"] = self.min_doc_count

        result: Dict[str, Any] = {"date_histogram": date_hist_body}

        if self.sub_aggregations:
            result["aggs"] = _sub_aggs(self.sub_aggregations)

        return {self.name: result}


@dataclass
class AvgAggregation(Aggregation):
    """Average metric aggregation."""

    field: str
    missing: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        avg_body: Dict[str, Any] = {"field": self.field}
        if self.missing is not None:
            avg_body["missing"] = self.missing
        return {self.name: {"avg": avg_body}}


@dataclass
class StatsAggregation(Aggregation):
    """Stats metric aggregation (count, min, max, avg, sum)."""

    field: str
    missing: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        stats_body: Dict[str, Any] = {"field": self.field}
        if self.missing is not None:
            stats_body["missing"] = self.missing
        return {self.name: {"stats": stats_body}}


class Aggregations(Fragment):
    """Places aggregations under ``aggs`` of the body holding it."""

    is_parent = True

    def __init__(self, *aggregations: Aggregation):
        self.aggregations = list(aggregations)

    def add(self, aggregation: Aggregation) -> "Aggregations":
        self.aggregations.append(aggregation)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {"aggs": _sub_aggs(self.aggregations)}
