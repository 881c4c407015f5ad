"""Static registration of the resource kinds the client exposes.

Adding a kind means writing its service and listing it here; the client
and the configuration loader both read from this table.
"""

from __future__ import annotations

from cirrus.resources.base import RestService
from cirrus.resources.cache import CacheService
from cirrus.resources.database import DatabaseService
from cirrus.resources.firewalls import FirewallService
from cirrus.resources.serverless import ServerlessService
from cirrus.resources.snapshots import (
    CacheSnapshotService,
    DatabaseSnapshotService,
    VpsSnapshotService,
)
from cirrus.resources.ssh_keys import SshKeyService
from cirrus.resources.storage import AccessKeyService, BucketService
from cirrus.resources.vps import VpsService
from cirrus.types import ResourceKind

RESOURCE_SERVICES: dict[ResourceKind, type[RestService]] = {
    ResourceKind.VPS: VpsService,
    ResourceKind.DATABASE: DatabaseService,
    ResourceKind.CACHE: CacheService,
    ResourceKind.BUCKET: BucketService,
    ResourceKind.SERVERLESS: ServerlessService,
    ResourceKind.VPS_SNAPSHOT: VpsSnapshotService,
    ResourceKind.DATABASE_SNAPSHOT: DatabaseSnapshotService,
    ResourceKind.CACHE_SNAPSHOT: CacheSnapshotService,
    ResourceKind.SSH_KEY: SshKeyService,
    ResourceKind.FIREWALL: FirewallService,
    ResourceKind.ACCESS_KEY: AccessKeyService,
}


def service_for(kind: ResourceKind) -> type[RestService]:
    return RESOURCE_SERVICES[kind]
