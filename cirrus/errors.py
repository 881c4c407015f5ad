"""Error taxonomy for the control-plane client.

Three families:

- ``TransportError``: the request never produced a usable HTTP response
  (connection refused, DNS failure, request timeout, a 2xx body that is
  not JSON).
- ``APIError``: the control plane answered with a non-2xx status. Use
  ``is_not_found`` to tell "absent" from "rejected".
- ``StateError``: synthesised by the poller and the teardown sequence
  (terminal status, timeout, failure to stabilise). These carry the
  resource id and the last status that was observed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cirrus.types import ResourceKind, Status

UNKNOWN_ERROR = "Unknown error"


class CirrusError(Exception):
    """Base class for every error raised by cirrus."""


class ConfigurationError(CirrusError):
    """Raised when the client cannot be configured (e.g. missing token)."""


# ─── Transport ───────────────────────────────────────────────────────


class TransportError(CirrusError):
    """No usable HTTP response was received (network failure, timeout,
    or a success status carrying a body that is not JSON)."""

    def __init__(self, method: str, path: str, reason: str) -> None:
        super().__init__(f"{method} {path} failed: {reason}")
        self.method = method
        self.path = path
        self.reason = reason


# ─── API ─────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class APIError(CirrusError):
    status_code: int
    message: str = UNKNOWN_ERROR
    field_errors: dict[str, list[str]] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.field_errors:
            detail = "; ".join(
                f"{name}: {', '.join(msgs)}" for name, msgs in self.field_errors.items()
            )
            return f"API error {self.status_code}: {detail}"
        return f"API error {self.status_code}: {self.message}"

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class ResourceNotFound(CirrusError):
    """A single-resource read came back 404."""

    def __init__(self, kind: ResourceKind, resource_id: str) -> None:
        super().__init__(f"{kind.label} with ID {resource_id} not found")
        self.kind = kind
        self.resource_id = resource_id


def parse_api_error(status_code: int, body: str) -> APIError:
    """Convert a non-2xx response body into an ``APIError``."""
    if not body.strip():
        return APIError(status_code=status_code)

    try:
        payload: Any = json.loads(body)
    except ValueError:
        return APIError(status_code=status_code, message=body)

    match payload:
        case dict():
            message = payload.get("message") or payload.get("error") or UNKNOWN_ERROR
            errors = payload.get("errors")
            field_errors = (
                {str(k): _as_messages(v) for k, v in errors.items()}
                if isinstance(errors, dict)
                else {}
            )
            return APIError(
                status_code=status_code,
                message=str(message),
                field_errors=field_errors,
            )
        case _:
            return APIError(status_code=status_code, message=body)


def _as_messages(value: Any) -> list[str]:
    match value:
        case list():
            return [str(v) for v in value]
        case None:
            return []
        case _:
            return [str(value)]


def is_not_found(err: BaseException) -> bool:
    """True when ``err`` means the resource does not exist."""
    match err:
        case APIError() as api_err:
            return api_err.is_not_found
        case ResourceNotFound():
            return True
        case _:
            return False


# ─── State ───────────────────────────────────────────────────────────


class StateError(CirrusError):
    """The resource did not reach the state the caller was waiting for."""

    def __init__(
        self,
        message: str,
        *,
        resource_id: str,
        last_status: Status | None = None,
    ) -> None:
        super().__init__(message)
        self.resource_id = resource_id
        self.last_status = last_status


class TerminalStatusError(StateError):
    """The control plane reported a terminal failure status."""

    def __init__(self, description: str, resource_id: str, status: Status) -> None:
        super().__init__(
            f"{description} {resource_id} entered {status.value} state",
            resource_id=resource_id,
            last_status=status,
        )


class WaitTimeout(StateError):
    """The deadline passed before the target status was observed."""

    def __init__(
        self,
        description: str,
        resource_id: str,
        target: Status,
        last_status: Status | None,
    ) -> None:
        last = last_status.value if last_status else "unknown"
        super().__init__(
            f"timeout waiting for {description} {resource_id} to reach status "
            f"{target.value} (last status: {last})",
            resource_id=resource_id,
            last_status=last_status,
        )
        self.target = target


class StatusCheckFailed(StateError):
    """Fetching the current status failed for a reason other than absence."""

    def __init__(
        self,
        description: str,
        resource_id: str,
        cause: BaseException,
        last_status: Status | None = None,
    ) -> None:
        super().__init__(
            f"error checking {description} {resource_id} status: {cause}",
            resource_id=resource_id,
            last_status=last_status,
        )


class TeardownStep(Enum):
    CHECK = "check status"
    SETTLE = "reach stable state"
    STOP = "stop"
    AWAIT_STOPPED = "wait for stopped"
    DELETE = "delete"
    AWAIT_DELETED = "wait for deletion"


class TeardownError(StateError):
    """A delete sequence failed part-way; the resource may be half torn down."""

    def __init__(
        self,
        kind: ResourceKind,
        resource_id: str,
        step: TeardownStep,
        last_status: Status | None,
        detail: str,
    ) -> None:
        last = last_status.value if last_status else "unknown"
        super().__init__(
            f"{kind.label} {resource_id}: failed to {step.value} "
            f"(last status: {last}): {detail}",
            resource_id=resource_id,
            last_status=last_status,
        )
        self.kind = kind
        self.step = step
