"""Core value types: resource kinds, statuses, handles and pagination."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from loguru import logger

log = logger.bind(component="types")

T = TypeVar("T")


# =============================================================================
# Resource kinds
# =============================================================================


class ResourceKind(Enum):
    VPS = "vps"
    DATABASE = "database"
    CACHE = "cache"
    BUCKET = "bucket"
    SERVERLESS = "serverless"
    VPS_SNAPSHOT = "vps_snapshot"
    DATABASE_SNAPSHOT = "database_snapshot"
    CACHE_SNAPSHOT = "cache_snapshot"
    SSH_KEY = "ssh_key"
    FIREWALL = "firewall"
    ACCESS_KEY = "storage_access_key"

    @property
    def label(self) -> str:
        match self:
            case ResourceKind.VPS:
                return "VPS"
            case ResourceKind.DATABASE:
                return "database"
            case ResourceKind.CACHE:
                return "cache"
            case ResourceKind.BUCKET:
                return "storage bucket"
            case ResourceKind.SERVERLESS:
                return "serverless container"
            case ResourceKind.VPS_SNAPSHOT:
                return "VPS snapshot"
            case ResourceKind.DATABASE_SNAPSHOT:
                return "database snapshot"
            case ResourceKind.CACHE_SNAPSHOT:
                return "cache snapshot"
            case ResourceKind.SSH_KEY:
                return "SSH key"
            case ResourceKind.FIREWALL:
                return "firewall"
            case ResourceKind.ACCESS_KEY:
                return "storage access key"


# =============================================================================
# Status
# =============================================================================


class Phase(Enum):
    TRANSITIONAL = "transitional"
    RUNNING = "running"
    STOPPED = "stopped"
    FAILED = "failed"
    DELETED = "deleted"


class Status(Enum):
    """Lifecycle status reported by the control plane.

    The wire format is a free-form string; ``parse`` maps it onto this
    closed set. Strings outside the vocabulary become ``UNKNOWN``, which
    is treated as transitional so that waits keep polling.
    """

    PENDING = "pending"
    CREATING = "creating"
    PROVISIONING = "provisioning"
    RESTORING = "restoring"
    DEPLOYING = "deploying"
    BUILDING = "building"
    STARTING = "starting"
    STOPPING = "stopping"
    REBOOTING = "rebooting"
    UPDATING = "updating"
    DELETING = "deleting"
    RUNNING = "running"
    ACTIVE = "active"
    COMPLETED = "completed"
    STOPPED = "stopped"
    ERROR = "error"
    FAILED = "failed"
    DELETED = "deleted"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: str | None) -> Status:
        value = (raw or "").strip().lower()
        try:
            return cls(value)
        except ValueError:
            log.warning("Unrecognised status {raw!r}, treating as transitional", raw=raw)
            return cls.UNKNOWN

    @property
    def phase(self) -> Phase:
        match self:
            case (
                Status.PENDING
                | Status.CREATING
                | Status.PROVISIONING
                | Status.RESTORING
                | Status.DEPLOYING
                | Status.BUILDING
                | Status.STARTING
                | Status.STOPPING
                | Status.REBOOTING
                | Status.UPDATING
                | Status.DELETING
                | Status.UNKNOWN
            ):
                return Phase.TRANSITIONAL
            case Status.RUNNING | Status.ACTIVE | Status.COMPLETED:
                return Phase.RUNNING
            case Status.STOPPED:
                return Phase.STOPPED
            case Status.ERROR | Status.FAILED:
                return Phase.FAILED
            case Status.DELETED:
                return Phase.DELETED

    @property
    def is_transitional(self) -> bool:
        return self.phase is Phase.TRANSITIONAL


# Statuses the backend refuses stop/delete requests in.
SETTLING_STATUSES = frozenset({Status.PENDING, Status.PROVISIONING, Status.RESTORING})


# =============================================================================
# Handles
# =============================================================================


@dataclass(frozen=True, slots=True)
class ResourceHandle:
    kind: ResourceKind
    id: str
    status: Status


@dataclass(frozen=True, slots=True)
class WaitDescriptor:
    """One poll loop: which resource, which status, until when."""

    id: str
    target: Status
    deadline: float


# =============================================================================
# Pagination
# =============================================================================


@dataclass(frozen=True, slots=True)
class Pagination:
    current_page: int = 1
    last_page: int = 1
    per_page: int = 0
    total: int = 0

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> Pagination:
        raw = raw or {}
        return cls(
            current_page=int(raw.get("current_page") or 1),
            last_page=int(raw.get("last_page") or 1),
            per_page=int(raw.get("per_page") or 0),
            total=int(raw.get("total") or 0),
        )


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    items: list[T]
    pagination: Pagination
