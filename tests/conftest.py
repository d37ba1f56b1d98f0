import os

import pytest

from elasticsearcher.search.client import InMemorySearchClient
from elasticsearcher.search.indices import Index
from elasticsearcher.searcher import ElasticSearcher


# List of environment variables that may be modified by tests
_ENV_VARS_TO_ISOLATE = [
    "ELASTICSEARCH_HOSTS",
    "ELASTICSEARCH_CLOUD_ID",
    "ELASTICSEARCH_API_KEY",
    "ELASTICSEARCH_USERNAME",
    "ELASTICSEARCH_PASSWORD",
    "ELASTICSEARCH_REQUEST_TIMEOUT",
    "ELASTICSEARCH_MAX_RETRIES",
    "ELASTICSEARCH_VERIFY_CERTS",
]


@pytest.fixture(autouse=True)
def env_isolation():
    """Isolate environment variables between tests."""
    backup = {k: os.environ.get(k) for k in _ENV_VARS_TO_ISOLATE}
    try:
        yield
    finally:
        for k, v in backup.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v


@pytest.fixture(autouse=True)
def config_cache_isolation():
    """Reset config settings cache between tests."""
    import elasticsearcher.config as cfg
    backup_cache = cfg._settings_cache
    cfg._settings_cache = None
    yield
    cfg._settings_cache = backup_cache


@pytest.fixture
def memory_client():
    client = InMemorySearchClient()
    client.index("products", "p1", {"name": "Desk Lamp", "price": 25, "brand": "lumen"}, type="lamp")
    client.index("products", "p2", {"name": "Floor Lamp", "price": 80, "brand": "lumen"}, type="lamp")
    client.index("products", "p3", {"name": "Oak Desk", "price": 300, "brand": "woody"}, type="desk")
    client.index("articles", "a1", {"title": "Choosing a lamp", "status": "published"})
    client.index("articles", "a2", {"title": "Desk setups", "status": "draft"})
    return client


@pytest.fixture
def searcher(memory_client):
    searcher = ElasticSearcher(client=memory_client)
    searcher.indices_manager.register_indices([
        Index("products", types=("lamp", "desk")),
        Index("articles"),
    ])
    return searcher
