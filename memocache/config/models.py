"""Config models and loader.

This module defines Pydantic models for file- and environment-based cache
configuration. Config files are JSON and are parsed with `orjson`.
Validation failures surface as :class:`InvalidConfiguration` so callers only
need to handle the package's own error types.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import InvalidConfiguration

DEFAULT_CAPACITY = 100
DEFAULT_TTL_SECONDS = 5 * 60.0


class CacheConfig(BaseModel):
    """Configuration for a single cache instance.

    Attributes
    ----------
    capacity: int
        Maximum number of live entries. When full, the oldest insertion is
        discarded to make room.
    ttl_seconds: float
        Maximum age of an entry, in seconds, before it is treated as absent.
    """

    capacity: int = Field(DEFAULT_CAPACITY, gt=0, description="Max live entries")
    ttl_seconds: float = Field(
        DEFAULT_TTL_SECONDS, gt=0, description="Entry expiry in seconds"
    )

    @classmethod
    def build(cls, **values: Any) -> "CacheConfig":
        """Validate `values`, raising InvalidConfiguration on failure."""
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise InvalidConfiguration(str(exc)) from exc

    @staticmethod
    def load(path: Path) -> "CacheConfig":
        """Load cache config from a JSON file."""
        try:
            data = orjson.loads(path.read_bytes())
        except orjson.JSONDecodeError as exc:
            raise InvalidConfiguration(f"{path}: invalid JSON ({exc})") from exc
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"{path}: expected a JSON object")
        return CacheConfig.build(**data)


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    capacity: int
        Default cache capacity for caches built from settings.
    ttl_seconds: float
        Default entry expiry for caches built from settings.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MEMOCACHE_")

    log_level: str = Field("INFO")
    capacity: int = Field(DEFAULT_CAPACITY)
    ttl_seconds: float = Field(DEFAULT_TTL_SECONDS)

    def cache_config(self) -> CacheConfig:
        return CacheConfig.build(capacity=self.capacity, ttl_seconds=self.ttl_seconds)
