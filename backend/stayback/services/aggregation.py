"""Aggregation rule — maps a request's approval statuses to its overall status.

A single REJECTED approval is final. APPROVED requires an APPROVED approval of
every substantive kind; a kind with no approval row keeps the request PENDING.
"""
from typing import Iterable, Tuple

from stayback.models.approval import Approval, ApprovalStatus, ApproverKind
from stayback.models.stayback_request import RequestStatus

REQUIRED_KINDS = frozenset(ApproverKind)

KindStatus = Tuple[ApproverKind, ApprovalStatus]


def _pairs(approvals: Iterable) -> list[KindStatus]:
    pairs = []
    for a in approvals:
        if isinstance(a, Approval):
            pairs.append((ApproverKind(a.approver_kind), ApprovalStatus(a.status)))
        else:
            kind, status = a
            pairs.append((ApproverKind(kind), ApprovalStatus(status)))
    return pairs


def is_fully_approved(approvals: Iterable) -> bool:
    """True when team lead, staff and hostel approvals all exist and are APPROVED."""
    pairs = _pairs(approvals)
    approved_kinds = {kind for kind, status in pairs if status == ApprovalStatus.approved}
    if any(status != ApprovalStatus.approved for _, status in pairs):
        return False
    return approved_kinds >= REQUIRED_KINDS


def aggregate_status(approvals: Iterable) -> RequestStatus:
    """Accepts Approval rows or (kind, status) pairs."""
    pairs = _pairs(approvals)
    if any(status == ApprovalStatus.rejected for _, status in pairs):
        return RequestStatus.rejected
    if is_fully_approved(pairs):
        return RequestStatus.approved
    return RequestStatus.pending
