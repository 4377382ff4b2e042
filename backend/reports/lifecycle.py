"""
Pure state transitions over the Report aggregate.

Every function takes a Report and returns an updated copy; nothing here reads
or writes the store. ``backend.reports.utils`` loads the document, applies one
of these, runs ``enforce_invariants`` and persists the result in one step.
"""

from datetime import datetime
from typing import Optional

from backend.authentication.schemas import TokenData
from backend.core.exceptions import IntegrityError
from backend.core.storage import new_object_id, utcnow
from backend.reports import schemas


def user_ref(identity: TokenData) -> schemas.UserRef:
    return schemas.UserRef(id=identity.user_id, username=identity.username)


def new_report(data: schemas.ReportCreate, reporter: TokenData, now: Optional[datetime] = None) -> schemas.Report:
    now = now or utcnow()
    return schemas.Report(
        id=new_object_id(),
        title=data.title,
        description=data.description,
        location=data.location,
        image_url=data.image_url,
        status=schemas.ReportStatus.pending,
        priority=data.priority,
        category=data.category,
        tags=data.tags,
        is_anonymous=data.is_anonymous,
        is_public=data.is_public,
        reported_by=user_ref(reporter),
        created_at=now,
        updated_at=now,
    )


def vote(report: schemas.Report, voter_id: str, direction: schemas.VoteDirection) -> schemas.Report:
    """Move the voter into one direction's set; repeating a vote changes nothing."""
    if direction == schemas.VoteDirection.up:
        same, opposite = list(report.upvotes), report.downvotes
    else:
        same, opposite = list(report.downvotes), report.upvotes

    opposite = [uid for uid in opposite if uid != voter_id]
    if voter_id not in same:
        same.append(voter_id)

    if direction == schemas.VoteDirection.up:
        return report.model_copy(update={"upvotes": same, "downvotes": opposite})
    return report.model_copy(update={"upvotes": opposite, "downvotes": same})


def add_comment(report: schemas.Report, author: TokenData, text: str, now: Optional[datetime] = None) -> schemas.Report:
    comment = schemas.Comment(id=new_object_id(), author=user_ref(author), text=text, created_at=now or utcnow())
    return report.model_copy(update={"comments": [*report.comments, comment]})


def assign(report: schemas.Report, assignee: Optional[TokenData]) -> schemas.Report:
    return report.model_copy(update={"assigned_to": user_ref(assignee) if assignee else None})


def resolve(report: schemas.Report, resolver: TokenData, description: str, now: Optional[datetime] = None) -> schemas.Report:
    """Mark Resolved; the resolution record is written only the first time."""
    update = {"status": schemas.ReportStatus.resolved}
    if report.resolution is None or report.resolution.resolved_at is None:
        update["resolution"] = schemas.Resolution(
            description=description,
            resolved_by=user_ref(resolver),
            resolved_at=now or utcnow(),
        )
    return report.model_copy(update=update)


def set_status(report: schemas.Report, status: schemas.ReportStatus) -> schemas.Report:
    # Any of the three values may follow any other.
    return report.model_copy(update={"status": status})


def enforce_invariants(report: schemas.Report, actor: TokenData, now: Optional[datetime] = None) -> schemas.Report:
    """Checks applied before every save, whichever operation produced the change."""
    now = now or utcnow()
    update = {"updated_at": now}

    if report.status == schemas.ReportStatus.resolved:
        resolution = report.resolution or schemas.Resolution()
        if resolution.resolved_at is None:
            update["resolution"] = resolution.model_copy(update={
                "resolved_at": now,
                "resolved_by": resolution.resolved_by or user_ref(actor),
            })

    overlap = set(report.upvotes) & set(report.downvotes)
    if overlap:
        raise IntegrityError(f"Report {report.id}: voters present in both vote sets: {sorted(overlap)}")

    return report.model_copy(update=update)
