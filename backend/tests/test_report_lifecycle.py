"""
Unit tests for the pure report transitions and the authorization policy.
No HTTP and no store involved.
"""

from datetime import datetime, timedelta, timezone

import pytest

from backend.authentication.schemas import TokenData
from backend.core.exceptions import IntegrityError
from backend.reports import lifecycle, schemas
from backend.reports.policy import Operation, can_perform

STUDENT = TokenData(user_id="a" * 24, username="alice", role="student")
OTHER = TokenData(user_id="c" * 24, username="carl", role="student")
TEACHER = TokenData(user_id="b" * 24, username="mr_b", role="teacher")
ADMIN = TokenData(user_id="d" * 24, username="root", role="admin")


@pytest.fixture
def report():
    data = schemas.ReportCreate(
        title="Broken fence", description="Fence near gym damaged",
        location="Gym yard", category="Infrastructure",
    )
    return lifecycle.new_report(data, STUDENT)


def test_new_report_is_pending_and_owned(report):
    assert report.status == schemas.ReportStatus.pending
    assert report.reported_by.id == STUDENT.user_id
    assert report.resolution is None
    assert report.assigned_to is None
    assert report.created_at == report.updated_at


def test_vote_never_in_both_sets(report):
    up = lifecycle.vote(report, OTHER.user_id, schemas.VoteDirection.up)
    up_again = lifecycle.vote(up, OTHER.user_id, schemas.VoteDirection.up)
    down = lifecycle.vote(up_again, OTHER.user_id, schemas.VoteDirection.down)

    assert up_again.upvotes == [OTHER.user_id]
    assert down.upvotes == []
    assert down.downvotes == [OTHER.user_id]
    # the original aggregate is untouched
    assert report.upvotes == []


def test_votes_from_different_users_accumulate(report):
    r = lifecycle.vote(report, STUDENT.user_id, schemas.VoteDirection.up)
    r = lifecycle.vote(r, OTHER.user_id, schemas.VoteDirection.up)
    r = lifecycle.vote(r, TEACHER.user_id, schemas.VoteDirection.down)
    assert r.vote_count == 1


def test_resolve_sets_resolution_once(report):
    first_time = datetime(2026, 1, 1, tzinfo=timezone.utc)
    once = lifecycle.resolve(report, TEACHER, "Fence repaired", now=first_time)
    twice = lifecycle.resolve(once, ADMIN, "Again", now=first_time + timedelta(days=1))

    assert twice.status == schemas.ReportStatus.resolved
    assert twice.resolution.resolved_at == first_time
    assert twice.resolution.resolved_by.id == TEACHER.user_id
    assert twice.resolution.description == "Fence repaired"


def test_invariants_fill_resolved_at_for_plain_status_change(report):
    resolved = lifecycle.set_status(report, schemas.ReportStatus.resolved)
    assert resolved.resolution is None

    saved = lifecycle.enforce_invariants(resolved, TEACHER)
    assert saved.resolution.resolved_at is not None
    assert saved.resolution.resolved_by.id == TEACHER.user_id
    assert saved.resolution.description is None


def test_invariants_keep_existing_resolved_at(report):
    when = datetime(2026, 2, 2, tzinfo=timezone.utc)
    resolved = lifecycle.resolve(report, TEACHER, "Done", now=when)
    saved = lifecycle.enforce_invariants(resolved, ADMIN)
    assert saved.resolution.resolved_at == when
    assert saved.updated_at >= report.updated_at


def test_comments_keep_order(report):
    r = lifecycle.add_comment(report, STUDENT, "one")
    r = lifecycle.add_comment(r, TEACHER, "two")
    assert [c.text for c in r.comments] == ["one", "two"]
    assert r.comment_count == 2


@pytest.mark.parametrize("actor,allowed", [(STUDENT, True), (OTHER, False), (TEACHER, True), (ADMIN, True)])
def test_view_policy(report, actor, allowed):
    assert can_perform(actor, Operation.view, report) is allowed


@pytest.mark.parametrize("operation", [Operation.assign, Operation.resolve, Operation.set_status,
                                       Operation.list_all, Operation.stats])
def test_staff_only_operations(report, operation):
    assert can_perform(STUDENT, operation, report) is False
    assert can_perform(TEACHER, operation, report) is True
    assert can_perform(ADMIN, operation, report) is True


def test_open_operations_and_anonymous_actor(report):
    for operation in (Operation.create, Operation.vote, Operation.comment, Operation.list_own):
        assert can_perform(OTHER, operation, report) is True
        assert can_perform(None, operation, report) is False


def test_report_create_rejects_bad_enums_together():
    with pytest.raises(Exception) as excinfo:
        schemas.ReportCreate(title="t", description="d", location="l", category="Weather", priority="Urgent")
    assert len(excinfo.value.errors()) == 2


def test_report_create_dedupes_tags():
    data = schemas.ReportCreate(
        title="t", description="d", location="l", category="Safety", tags=[" wet floor", "wet floor", ""],
    )
    assert data.tags == ["wet floor"]


def test_invariants_reject_voter_in_both_sets(report):
    broken = report.model_copy(update={"upvotes": [OTHER.user_id], "downvotes": [OTHER.user_id]})
    with pytest.raises(IntegrityError) as excinfo:
        lifecycle.enforce_invariants(broken, TEACHER)
    assert excinfo.value.status_code == 500
    assert OTHER.user_id in excinfo.value.message
