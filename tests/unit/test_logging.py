"""Tests for structured logging."""

import json
import logging

import pytest

from elasticsearcher.errors import ExecutionError
from elasticsearcher.search.client import InMemorySearchClient
from elasticsearcher.search.indices import Index
from elasticsearcher.search.query import AbstractQuery
from elasticsearcher.searcher import ElasticSearcher
from elasticsearcher.utils.logging import JsonFormatter, setup_logging


class ArticlesQuery(AbstractQuery):
    def setup(self):
        self.search_in("articles")


class GhostQuery(AbstractQuery):
    def setup(self):
        self.search_in("ghost")


class TestJsonFormatter:
    """Test JSON log lines."""

    def test_structured_fields(self):
        """Test extra fields are emitted."""
        record = logging.LogRecord(
            "elasticsearcher.search.query", logging.INFO, __file__, 1, "Ran %s", ("Q",), None
        )
        record.index = "products"
        record.latency_ms = 1.5

        data = json.loads(JsonFormatter().format(record))

        assert data == {
            "level": "INFO",
            "message": "Ran Q",
            "logger": "elasticsearcher.search.query",
            "index": "products",
            "latency_ms": 1.5,
        }

    def test_setup_logging_installs_handler(self):
        """Test root logger gets the JSON handler."""
        root = logging.getLogger()
        backup_handlers, backup_level = root.handlers[:], root.level
        try:
            setup_logging("DEBUG")

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            root.handlers = backup_handlers
            root.setLevel(backup_level)


class TestQueryLogging:
    """Test events logged while running queries."""

    def test_run_logs_latency(self, searcher, caplog):
        """Test the execution event."""
        with caplog.at_level(logging.INFO, logger="elasticsearcher"):
            ArticlesQuery(searcher).run()

        record = next(r for r in caplog.records if r.getMessage() == "Ran ArticlesQuery")
        assert record.index == "articles"
        assert record.latency_ms >= 0

    def test_failure_logged_before_raising(self, caplog):
        """Test the error event on failed searches."""
        searcher = ElasticSearcher(client=InMemorySearchClient())
        searcher.indices_manager.register(Index("ghost"))

        with caplog.at_level(logging.ERROR, logger="elasticsearcher"):
            with pytest.raises(ExecutionError):
                GhostQuery(searcher).run()

        record = next(r for r in caplog.records if r.levelno == logging.ERROR)
        assert record.index == "ghost"
        assert record.exc_info is not None
