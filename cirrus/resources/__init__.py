from cirrus.resources.base import PowerControlledService, ResourceService, RestService
from cirrus.resources.cache import CacheService
from cirrus.resources.database import DatabaseService
from cirrus.resources.firewalls import FirewallService
from cirrus.resources.providers import (
    CACHE_PROVIDERS,
    DATABASE_PROVIDERS,
    EngineProvider,
    find_provider,
)
from cirrus.resources.registry import RESOURCE_SERVICES, service_for
from cirrus.resources.serverless import ServerlessService
from cirrus.resources.snapshots import (
    CacheSnapshotService,
    DatabaseSnapshotService,
    SnapshotService,
    VpsSnapshotService,
)
from cirrus.resources.ssh_keys import SshKeyService
from cirrus.resources.storage import AccessKeyService, BucketService
from cirrus.resources.vps import VpsService

__all__ = [
    "CACHE_PROVIDERS",
    "DATABASE_PROVIDERS",
    "RESOURCE_SERVICES",
    "AccessKeyService",
    "BucketService",
    "CacheService",
    "CacheSnapshotService",
    "DatabaseService",
    "DatabaseSnapshotService",
    "EngineProvider",
    "FirewallService",
    "PowerControlledService",
    "ResourceService",
    "RestService",
    "ServerlessService",
    "SnapshotService",
    "SshKeyService",
    "VpsService",
    "VpsSnapshotService",
    "find_provider",
    "service_for",
]
