"""Shared PENDING -> APPROVED | REJECTED state machine."""

from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from app.applications.models.approval import ApprovalStatus
from app.core.exceptions import StateError, ValidationError

ALLOWED_TRANSITIONS: dict[ApprovalStatus, frozenset[ApprovalStatus]] = {
    ApprovalStatus.PENDING: frozenset({ApprovalStatus.APPROVED, ApprovalStatus.REJECTED}),
    ApprovalStatus.APPROVED: frozenset(),
    ApprovalStatus.REJECTED: frozenset(),
}


class Reviewable(Protocol):
    status: ApprovalStatus
    reviewed_by_id: UUID | None
    reviewed_at: datetime | None


def transition(current: ApprovalStatus, target: ApprovalStatus) -> ApprovalStatus:
    """Validate a status change and return the new status."""
    if target is ApprovalStatus.PENDING:
        raise ValidationError("A review decision must be APPROVED or REJECTED", field="status")
    if target not in ALLOWED_TRANSITIONS[current]:
        raise StateError(
            f"Cannot move from {current.value} to {target.value}", state=current.value
        )
    return target


def apply_decision(item: Reviewable, target: ApprovalStatus, reviewer_id: UUID) -> None:
    """Move ``item`` to its terminal status and stamp who decided and when."""
    item.status = transition(item.status, target)
    item.reviewed_by_id = reviewer_id
    item.reviewed_at = datetime.now(UTC)
