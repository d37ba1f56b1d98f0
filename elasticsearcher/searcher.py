"""Searcher facade.

Owns the search client, the index registry and the named fragments that
queries use.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from elasticsearcher.config import SearcherSettings, get_settings
from elasticsearcher.search.client import ElasticsearchClient, SearchClient
from elasticsearcher.search.fragments import FragmentRegistry
from elasticsearcher.search.indices import Index, IndicesManager

logger = logging.getLogger(__name__)


class ElasticSearcher:
    """Entry point for building queries against one cluster.

    Example:
        searcher = ElasticSearcher()
        searcher.indices_manager.register(Index("products"))
        searcher.fragments.register("in_stock", {"term": {"in_stock": True}})
    """

    def __init__(
        self,
        settings: Optional[SearcherSettings] = None,
        client: Optional[SearchClient] = None,
    ):
        # Settings are only read when the client has to be built here
        if client is None:
            settings = settings or get_settings()
            client = ElasticsearchClient(settings)

        self.settings = settings
        self._client = client

        self.indices_manager = IndicesManager()
        self.fragments = FragmentRegistry()

    @property
    def client(self) -> SearchClient:
        return self._client

    def set_client(self, client: SearchClient) -> None:
        self._client = client

    def resolve_index(self, name: str) -> Index:
        """Registered index by name; raises ``UnknownIndexError`` otherwise."""
        return self.indices_manager.get_registered(name)

    def is_healthy(self) -> bool:
        """Single-node clusters may be yellow; larger ones must be green."""
        info = self._client.cluster_health()
        status = info["status"]
        number_of_nodes = info["number_of_nodes"]

        if number_of_nodes == 1:
            healthy = status != "red"
        else:
            healthy = status == "green"

        logger.info(
            "Cluster health %s",
            status,
            extra={"status": status, "number_of_nodes": number_of_nodes},
        )
        return healthy

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ElasticSearcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
