"""Control-plane payload types.

TypedDicts for API responses and request bodies - no conversion needed.
Statuses stay strings here; services convert them with ``Status.parse``.
"""

from __future__ import annotations

from typing import NotRequired, TypedDict

# =============================================================================
# VPS
# =============================================================================


class VpsInstance(TypedDict):
    id: str
    name: str
    status: str
    status_label: NotRequired[str]
    resource_profile: NotRequired[str]
    cpu_allocation_type: NotRequired[str]
    cpu_cores: NotRequired[int]
    memory_size_gb: NotRequired[int]
    storage_size_gb: NotRequired[int]
    image: NotRequired[str]
    datacenter: NotRequired[str]
    public_ip: NotRequired[str | None]
    private_ip: NotRequired[str | None]
    ssh_key_id: NotRequired[str | None]
    monthly_cost_cents: NotRequired[int]
    deployed_at: NotRequired[str | None]
    created_at: NotRequired[str]
    updated_at: NotRequired[str]
    can_be_started: NotRequired[bool]
    can_be_stopped: NotRequired[bool]
    can_be_rebooted: NotRequired[bool]
    can_be_destroyed: NotRequired[bool]


class CreateVpsParams(TypedDict, total=False):
    name: str
    image: str
    datacenter: str
    auth_method: str  # ssh_key, password
    resource_profile: str
    cpu_allocation_type: str
    network_stack: str
    ssh_key_id: str
    password: str
    password_confirmation: str
    custom_cloud_init: str
    cpu_cores: int
    memory_size_gb: int
    storage_size_gb: int


class UpdateVpsParams(TypedDict, total=False):
    resource_profile: str
    cpu_allocation_type: str
    cpu_cores: int
    memory_size_gb: int
    storage_size_gb: int
    password: str
    password_confirmation: str


class ReinstallVpsParams(TypedDict, total=False):
    image: str
    custom_cloud_init: str


class VpsImage(TypedDict):
    id: str
    image: str
    label: NotRequired[str]
    description: NotRequired[str]
    distro: NotRequired[str]
    version: NotRequired[str | int | float]  # the API mixes strings and numbers
    family: NotRequired[str | None]
    default_user: NotRequired[str]


# =============================================================================
# Managed database
# =============================================================================


class DatabaseEngine(TypedDict):
    id: int
    name: str


class DatabaseInstance(TypedDict):
    id: str
    name: str
    status: str
    status_label: NotRequired[str]
    resource_profile: NotRequired[str]
    cpu_cores: NotRequired[int]
    memory_size_mb: NotRequired[int]
    storage_size_gb: NotRequired[int]
    database_name: NotRequired[str | None]
    version: NotRequired[str]
    engine: NotRequired[DatabaseEngine]
    datacenter: NotRequired[str]
    endpoint: NotRequired[str | None]
    port: NotRequired[int | None]
    username: NotRequired[str | None]
    parameter_group_id: NotRequired[str | None]
    monthly_cost_cents: NotRequired[int]
    created_at: NotRequired[str]
    updated_at: NotRequired[str]


class CreateDatabaseParams(TypedDict, total=False):
    name: str
    provider: str  # mysql, postgresql, mariadb
    datacenter: str
    resource_profile: str
    database_name: str
    version: str
    parameter_group_id: str


class UpdateDatabaseParams(TypedDict, total=False):
    name: str
    resource_profile: str
    parameter_group_id: str


class DatabaseCredentials(TypedDict):
    connection_info: str
    username: str
    password: str


# =============================================================================
# Managed cache
# =============================================================================


class CacheProvider(TypedDict):
    id: int
    name: str


class CacheInstance(TypedDict):
    id: str
    name: str
    status: str
    status_label: NotRequired[str]
    resource_profile: NotRequired[str]
    cpu_cores: NotRequired[int]
    memory_size_mb: NotRequired[int]
    version: NotRequired[str]
    provider: NotRequired[CacheProvider]
    datacenter: NotRequired[str]
    endpoint: NotRequired[str | None]
    port: NotRequired[int | None]
    parameter_group_id: NotRequired[str | None]
    monthly_cost_cents: NotRequired[int]
    created_at: NotRequired[str]
    updated_at: NotRequired[str]


class CreateCacheParams(TypedDict, total=False):
    name: str
    provider: str  # redis, valkey, dragonfly
    memory_size_mb: int
    cpu_cores: int
    datacenter: str
    resource_profile: str
    version: str
    parameter_group_id: str


class UpdateCacheParams(TypedDict, total=False):
    name: str
    memory_size_mb: int
    cpu_cores: int
    resource_profile: str
    parameter_group_id: str


class CacheConnectionInfo(TypedDict):
    connection_info: str
    password: str


# =============================================================================
# Object storage
# =============================================================================


class StorageBucket(TypedDict):
    id: str
    name: str
    status: str
    status_label: NotRequired[str]
    display_name: NotRequired[str | None]
    region: NotRequired[str]
    endpoint_url: NotRequired[str]
    public_url: NotRequired[str | None]
    public_access: NotRequired[bool]
    versioning_enabled: NotRequired[bool]
    encryption_enabled: NotRequired[bool]
    encryption_type: NotRequired[str | None]
    size_bytes: NotRequired[int]
    size_limit_bytes: NotRequired[int | None]
    object_count: NotRequired[int]
    tags: NotRequired[dict[str, str]]
    created_at: NotRequired[str]
    updated_at: NotRequired[str]


class CreateBucketParams(TypedDict, total=False):
    name: str
    region: str
    display_name: str
    versioning_enabled: bool
    public_access: bool
    encryption_enabled: bool
    encryption_type: str


class UpdateBucketParams(TypedDict, total=False):
    display_name: str
    versioning_enabled: bool
    public_access: bool
    encryption_enabled: bool
    encryption_type: str


# =============================================================================
# Serverless containers
# =============================================================================


class ServerlessContainer(TypedDict):
    id: str
    name: str
    status: str
    resource_profile: NotRequired[str]
    deployment_type: NotRequired[str]  # image, git
    image_url: NotRequired[str]
    git_repository: NotRequired[str]
    git_branch: NotRequired[str]
    port: NotRequired[int]
    min_instances: NotRequired[int]
    max_instances: NotRequired[int]
    environment_variables: NotRequired[dict[str, str]]
    url: NotRequired[str]
    current_month_cost_cents: NotRequired[int]
    created_at: NotRequired[str]
    updated_at: NotRequired[str]


class CreateServerlessParams(TypedDict, total=False):
    name: str
    resource_profile: str
    deployment_type: str
    image_url: str
    git_repository: str
    git_branch: str
    port: int
    min_instances: int
    max_instances: int
    environment_variables: dict[str, str]


class UpdateServerlessParams(TypedDict, total=False):
    resource_profile: str
    image_url: str
    git_branch: str
    port: int
    min_instances: int
    max_instances: int
    environment_variables: dict[str, str]


# =============================================================================
# Snapshots
# =============================================================================


class VpsSnapshot(TypedDict):
    id: str
    name: str
    status: str
    description: NotRequired[str]
    size_gb: NotRequired[float]
    vps_instance_id: NotRequired[str]
    created_at: NotRequired[str]
    updated_at: NotRequired[str]


class DatabaseSnapshot(TypedDict):
    id: str
    name: str
    status: str
    description: NotRequired[str]
    size_gb: NotRequired[float]
    database_instance_id: NotRequired[str]
    created_at: NotRequired[str]
    updated_at: NotRequired[str]


class CacheSnapshot(TypedDict):
    id: str
    name: str
    status: str
    description: NotRequired[str]
    size_mb: NotRequired[float]
    cache_instance_id: NotRequired[str]
    created_at: NotRequired[str]
    updated_at: NotRequired[str]


class CreateVpsSnapshotParams(TypedDict, total=False):
    vps_instance_id: str
    name: str
    description: str


class CreateDatabaseSnapshotParams(TypedDict, total=False):
    database_instance_id: str
    name: str
    description: str


class CreateCacheSnapshotParams(TypedDict, total=False):
    cache_instance_id: str
    name: str
    description: str


# =============================================================================
# SSH keys
# =============================================================================


class SshKey(TypedDict):
    id: int
    name: str
    fingerprint: NotRequired[str]
    public_key: NotRequired[str]
    created_at: NotRequired[str]
    updated_at: NotRequired[str]


class CreateSshKeyParams(TypedDict):
    name: str
    public_key: str


# =============================================================================
# Firewalls
# =============================================================================


class FirewallRule(TypedDict):
    id: str
    action: str  # allow, deny
    direction: str  # inbound, outbound
    protocol: str  # tcp, udp, icmp, all
    name: NotRequired[str]
    port_range_start: NotRequired[int | None]
    port_range_end: NotRequired[int | None]
    source_ips: NotRequired[list[str]]
    priority: NotRequired[int]


class Firewall(TypedDict):
    id: str
    name: str
    status: NotRequired[str]
    description: NotRequired[str]
    is_default: NotRequired[bool]
    default_action: NotRequired[str]
    rules: NotRequired[list[FirewallRule]]
    created_at: NotRequired[str]
    updated_at: NotRequired[str]


class FirewallRuleParams(TypedDict, total=False):
    name: str
    action: str
    direction: str
    protocol: str
    port_range_start: int
    port_range_end: int
    source_ips: list[str]
    priority: int


class CreateFirewallParams(TypedDict, total=False):
    name: str
    description: str
    is_default: bool
    default_action: str
    rules: list[FirewallRuleParams]


class UpdateFirewallParams(TypedDict, total=False):
    name: str
    description: str
    is_default: bool
    default_action: str


# =============================================================================
# Object storage access keys
# =============================================================================


class StorageAccessKey(TypedDict):
    id: str
    name: str
    access_key_id: str
    status: NotRequired[str]
    access_type: NotRequired[str]
    is_prefix_scoped: NotRequired[bool]
    expires_at: NotRequired[str | None]
    last_used_at: NotRequired[str | None]
    revoked_at: NotRequired[str | None]
    is_expired: NotRequired[bool]
    created_at: NotRequired[str]
    updated_at: NotRequired[str]


class CreatedAccessKey(TypedDict):
    """Create response; the only payload that carries the secret."""

    id: str
    name: str
    access_key_id: str
    secret_access_key: str
    expires_at: NotRequired[str | None]
    is_prefix_scoped: NotRequired[bool]


class CreateAccessKeyParams(TypedDict, total=False):
    name: str
    expires_at: str
