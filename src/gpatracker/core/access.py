from dataclasses import dataclass
from enum import Enum
from typing import Optional

from gpatracker.core.errors import AccessDenied, DenyReason


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    BATCH_ADMIN = "batch_admin"
    STUDENT = "student"


class Operation(str, Enum):
    WRITE_RECORD = "write_record"
    READ_RECORDS = "read_records"
    READ_STATS = "read_stats"


@dataclass(frozen=True)
class Identity:
    identity_id: str
    role: Role = Role.STUDENT
    assigned_batch: Optional[str] = None
    regulation: Optional[str] = None


@dataclass(frozen=True)
class Target:
    student_id: str
    batch: Optional[str] = None


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenyReason] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: DenyReason) -> "Decision":
        return cls(False, reason)


def authorize(caller: Optional[Identity], operation: Operation, target: Target) -> Decision:
    if caller is None or not caller.identity_id:
        return Decision.deny(DenyReason.NOT_AUTHENTICATED)

    is_owner = caller.identity_id == target.student_id

    if operation is Operation.WRITE_RECORD:
        # nobody writes grades on another identity's behalf
        return Decision.allow() if is_owner else Decision.deny(DenyReason.NOT_OWNER)

    if operation is Operation.READ_STATS:
        # store-wide counts span every batch
        if caller.role is Role.SUPER_ADMIN:
            return Decision.allow()
        return Decision.deny(DenyReason.OUT_OF_SCOPE)

    if is_owner or caller.role is Role.SUPER_ADMIN:
        return Decision.allow()
    if caller.role is Role.BATCH_ADMIN:
        if caller.assigned_batch and target.batch == caller.assigned_batch:
            return Decision.allow()
        return Decision.deny(DenyReason.OUT_OF_SCOPE)
    return Decision.deny(DenyReason.NOT_OWNER)


def require(caller: Optional[Identity], operation: Operation, target: Target) -> None:
    decision = authorize(caller, operation, target)
    if decision.allowed:
        return
    reason = decision.reason or DenyReason.NOT_AUTHENTICATED
    raise AccessDenied(reason, f"{operation.value} denied: {reason.value}")
