"""Tests for the aggregation rule — pure function, no database."""
import pytest

from stayback.models.approval import ApprovalStatus as S, ApproverKind as K
from stayback.models.stayback_request import RequestStatus
from stayback.services.aggregation import aggregate_status, is_fully_approved


class TestAggregateStatus:

    def test_rejection_short_circuits(self):
        """One REJECTED is final, whatever the others say."""
        approvals = [(K.team_lead, S.approved), (K.staff, S.rejected), (K.hostel, S.pending)]
        assert aggregate_status(approvals) == RequestStatus.rejected

    def test_full_approval(self):
        approvals = [(K.team_lead, S.approved), (K.staff, S.approved), (K.hostel, S.approved)]
        assert aggregate_status(approvals) == RequestStatus.approved

    def test_missing_kind_stays_pending(self):
        """No hostel approval row → can never become APPROVED."""
        approvals = [(K.team_lead, S.approved), (K.staff, S.approved)]
        assert aggregate_status(approvals) == RequestStatus.pending

    def test_any_pending_stays_pending(self):
        approvals = [(K.team_lead, S.approved), (K.staff, S.pending), (K.hostel, S.approved)]
        assert aggregate_status(approvals) == RequestStatus.pending

    def test_no_approvals_is_pending(self):
        assert aggregate_status([]) == RequestStatus.pending

    def test_rejection_wins_even_when_kinds_missing(self):
        assert aggregate_status([(K.hostel, S.rejected)]) == RequestStatus.rejected

    def test_accepts_raw_string_values(self):
        approvals = [("TEAM_LEAD", "APPROVED"), ("STAFF", "APPROVED"), ("HOSTEL", "APPROVED")]
        assert aggregate_status(approvals) == RequestStatus.approved

    @pytest.mark.parametrize("statuses", [
        (S.approved, S.approved, S.approved),
        (S.approved, S.rejected, S.pending),
        (S.pending, S.pending, S.pending),
        (S.approved, S.approved, S.pending),
    ])
    def test_idempotent(self, statuses):
        """Re-running on unchanged approvals yields the same status."""
        approvals = list(zip((K.team_lead, K.staff, K.hostel), statuses))
        first = aggregate_status(approvals)
        assert aggregate_status(approvals) == first
        assert aggregate_status(list(reversed(approvals))) == first


class TestIsFullyApproved:

    def test_all_three_approved(self):
        assert is_fully_approved([(K.team_lead, S.approved), (K.staff, S.approved), (K.hostel, S.approved)])

    def test_two_of_three(self):
        assert not is_fully_approved([(K.team_lead, S.approved), (K.staff, S.approved)])

    def test_one_pending(self):
        assert not is_fully_approved([(K.team_lead, S.approved), (K.staff, S.approved), (K.hostel, S.pending)])
