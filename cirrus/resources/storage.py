"""Object storage: buckets and the access keys that sign requests to them."""

from __future__ import annotations

from cirrus.config import KindTimeouts
from cirrus.resources.base import ResourceService, RestService
from cirrus.resources.types import (
    CreateAccessKeyParams,
    CreateBucketParams,
    CreatedAccessKey,
    StorageAccessKey,
    StorageBucket,
    UpdateBucketParams,
)
from cirrus.types import ResourceKind, Status


class BucketService(ResourceService[StorageBucket]):
    """Object-storage buckets. Deleted in any state; ready means ``active``."""

    kind = ResourceKind.BUCKET
    path = "/storage/buckets"
    envelope = "bucket"
    ready_status = Status.ACTIVE
    poll_interval = 5.0
    default_timeouts = KindTimeouts(create=10 * 60, update=10 * 60, delete=10 * 60)

    async def create(  # type: ignore[override]
        self, params: CreateBucketParams, *, timeout: float | None = None
    ) -> StorageBucket:
        return await super().create(params, timeout=timeout)

    async def update(  # type: ignore[override]
        self, resource_id: str, params: UpdateBucketParams, *, timeout: float | None = None
    ) -> StorageBucket:
        return await super().update(resource_id, params, timeout=timeout)


class AccessKeyService(RestService[StorageAccessKey]):
    """S3-compatible credentials for object storage.

    The secret is returned once, by ``create``; later reads only carry the
    public ``access_key_id``. Deleting a key revokes it.
    """

    kind = ResourceKind.ACCESS_KEY
    path = "/storage/access-keys"
    envelope = "access_key"

    async def create(self, params: CreateAccessKeyParams) -> CreatedAccessKey:  # type: ignore[override]
        return await super().create(params)  # type: ignore[return-value]

    async def update(self, resource_id: str | int, params: object) -> StorageAccessKey:  # type: ignore[override]
        raise NotImplementedError("Storage access keys cannot be updated, create a new one")

    async def list_all(self) -> list[StorageAccessKey]:
        raise NotImplementedError("The control plane does not list storage access keys")
