"""cirrus: async control-plane client with provisioning and teardown waits.

Example:
    from cirrus import Cirrus

    async with Cirrus(api_token="...") as cloud:
        db = await cloud.databases.create({"name": "orders", "engine": "postgres"})
        await cloud.databases.delete(db["id"])
"""

from cirrus.client import Cirrus
from cirrus.config import CirrusConfig, KindTimeouts, resolve_config
from cirrus.errors import (
    APIError,
    CirrusError,
    ConfigurationError,
    ResourceNotFound,
    StateError,
    StatusCheckFailed,
    TeardownError,
    TeardownStep,
    TerminalStatusError,
    TransportError,
    WaitTimeout,
    is_not_found,
)
from cirrus.observability import LogConfig, setup_logging, teardown_logging
from cirrus.types import ResourceHandle, ResourceKind, Status

__version__ = "0.1.0"

__all__ = [
    "APIError",
    "Cirrus",
    "CirrusConfig",
    "CirrusError",
    "ConfigurationError",
    "KindTimeouts",
    "LogConfig",
    "ResourceHandle",
    "ResourceKind",
    "ResourceNotFound",
    "StateError",
    "Status",
    "StatusCheckFailed",
    "TeardownError",
    "TeardownStep",
    "TerminalStatusError",
    "TransportError",
    "WaitTimeout",
    "is_not_found",
    "resolve_config",
    "setup_logging",
    "teardown_logging",
]
