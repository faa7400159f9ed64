"""Serializer settings and their environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_MAX_DEPTH = 2
MAX_DEPTH_ENV = "FLATGRAPH_MAX_DEPTH"


@dataclass(frozen=True)
class Settings:
    """Tunables shared by save and load.

    ``max_depth`` counts relation levels below the root entity. Deeper
    entities are neither written nor reconstructed.
    """

    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build settings from ``FLATGRAPH_*`` environment variables."""
        env = os.environ if environ is None else environ
        raw = env.get(MAX_DEPTH_ENV)
        if raw is None or not raw.strip():
            return cls()
        try:
            max_depth = int(raw.strip())
        except ValueError:
            raise ValueError(f"{MAX_DEPTH_ENV} must be an integer, got {raw!r}") from None
        return cls(max_depth=max_depth)


@lru_cache(maxsize=None)
def default_settings() -> Settings:
    return Settings.from_env()
