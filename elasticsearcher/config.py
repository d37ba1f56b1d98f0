"""Connection settings for the Elasticsearch client.

Values come from ``ELASTICSEARCH_*`` environment variables (or an
``.env`` file) and can be overridden by passing keyword arguments.
"""

import json
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode


class SearcherSettings(BaseSettings):
    # Env value is either a JSON list or comma separated hosts
    hosts: Annotated[List[str], NoDecode] = ["http://localhost:9200"]
    cloud_id: Optional[str] = None
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    request_timeout: float = Field(default=10.0, gt=0)
    max_retries: int = Field(default=3, ge=0)
    verify_certs: bool = True

    model_config = {
        "env_prefix": "ELASTICSEARCH_",
        "env_file": ".env",
        "extra": "ignore",
        "case_sensitive": False,
    }

    @field_validator("hosts", mode="before")
    @classmethod
    def split_hosts(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [host.strip() for host in value.split(",") if host.strip()]
        return value

    def client_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``elasticsearch.Elasticsearch``."""
        kwargs: Dict[str, Any] = {
            "request_timeout": self.request_timeout,
            "max_retries": self.max_retries,
            "verify_certs": self.verify_certs,
        }

        if self.cloud_id:
            kwargs["cloud_id"] = self.cloud_id
        else:
            kwargs["hosts"] = self.hosts

        if self.api_key:
            kwargs["api_key"] = self.api_key
        elif self.username and self.password:
            kwargs["basic_auth"] = (self.username, self.password)

        return kwargs


_settings_cache: Optional[SearcherSettings] = None


def get_settings() -> SearcherSettings:
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = SearcherSettings()
    return _settings_cache


def reset_settings() -> None:
    global _settings_cache
    _settings_cache = None
