"""Engines offered for managed databases and caches.

The catalog is fixed; the control plane has no endpoint for it. Pass an
entry's ``type`` as ``provider`` and its ``version`` as ``version`` when
creating an instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class EngineProvider:
    id: int
    name: str
    type: str
    description: str
    version: str
    default_port: int


DATABASE_PROVIDERS: Final[tuple[EngineProvider, ...]] = (
    EngineProvider(
        id=1,
        name="MySQL",
        type="mysql",
        description="World's most popular open source database with proven reliability and performance.",
        version="8.0",
        default_port=3306,
    ),
    EngineProvider(
        id=2,
        name="PostgreSQL",
        type="postgresql",
        description="Advanced open source relational database with powerful features and reliability.",
        version="16",
        default_port=5432,
    ),
    EngineProvider(
        id=3,
        name="MariaDB",
        type="mariadb",
        description="MySQL-compatible database with enhanced features, performance and modern architecture.",
        version="11.4",
        default_port=3306,
    ),
)

CACHE_PROVIDERS: Final[tuple[EngineProvider, ...]] = (
    EngineProvider(
        id=1,
        name="Redis",
        type="redis",
        description="High-performance in-memory data structure store, used as a database, cache, and message broker.",
        version="7.2",
        default_port=6379,
    ),
    EngineProvider(
        id=2,
        name="Valkey",
        type="valkey",
        description="Open source high-performance data store forked from Redis. Fully compatible with Redis protocol.",
        version="8.0",
        default_port=6379,
    ),
    EngineProvider(
        id=3,
        name="Dragonfly",
        type="dragonfly",
        description="A modern replacement for Redis that is fully compatible with Redis API but built for cloud workloads.",
        version="1.15",
        default_port=6379,
    ),
)


def find_provider(providers: tuple[EngineProvider, ...], key: int | str) -> EngineProvider:
    """Look a provider up by id or by type (``"postgresql"``, ``"redis"``)."""
    for provider in providers:
        if provider.id == key or provider.type == key:
            return provider
    valid = ", ".join(p.type for p in providers)
    raise KeyError(f"Unknown provider {key!r}. Valid: {valid}")
