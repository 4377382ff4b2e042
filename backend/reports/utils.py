"""
Report store and query engine, persisted as a JSON collection.

Mutations run as: validate input -> authorize -> load the document under the
collection lock -> apply a pure transition from ``lifecycle`` -> save.
Concurrent writes to the same field are last-write-wins.
"""

import os
import logging
from datetime import timedelta
from typing import Callable, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError as PydanticValidationError

from backend.authentication import utils as auth_utils
from backend.authentication.schemas import TokenData
from backend.core.config import settings
from backend.core.exceptions import NotFoundError, ValidationError
from backend.core.schemas import Pagination, paginate, validation_messages
from backend.core.storage import ensure_object_id, load_json, locked, save_json, utcnow
from backend.reports import lifecycle, schemas
from backend.reports.policy import Operation, authorize

logger = logging.getLogger(__name__)

REPORTS_FILE = os.path.join(settings.DATA_DIR, "reports", "reports.json")

RECENT_WINDOW = timedelta(days=7)


def _load_json() -> List[dict]:
    return load_json(REPORTS_FILE)


def _save_json(data: List[dict]) -> None:
    save_json(REPORTS_FILE, data)


def to_document(report: schemas.Report) -> dict:
    return report.model_dump(mode="json", exclude=schemas.DERIVED_FIELDS)


def load_reports() -> List[schemas.Report]:
    """Return all reports as Pydantic models."""
    return [schemas.Report(**r) for r in _load_json()]


def _validated(model: Type[BaseModel], **values) -> BaseModel:
    try:
        return model(**values)
    except PydanticValidationError as e:
        raise ValidationError(errors=validation_messages(e.errors()))


# ────────────────────────────────
# Mutations
# ────────────────────────────────
def create_report(data, actor: TokenData) -> schemas.Report:
    """Validate and persist a new Pending report owned by ``actor``."""
    if not isinstance(data, schemas.ReportCreate):
        data = _validated(schemas.ReportCreate, **data)
    authorize(actor, Operation.create)

    report = lifecycle.new_report(data, actor)
    with locked(REPORTS_FILE):
        reports = _load_json()
        reports.append(to_document(report))
        _save_json(reports)
    logger.info("Report %s created by %s (%s/%s)", report.id, actor.user_id, report.category.value, report.priority.value)
    return report


def _update_report(
    report_id: str,
    actor: TokenData,
    operation: Operation,
    change: Callable[[schemas.Report], schemas.Report],
) -> schemas.Report:
    ensure_object_id(report_id, "Report")
    with locked(REPORTS_FILE):
        documents = _load_json()
        for index, doc in enumerate(documents):
            if doc["id"] != report_id:
                continue
            report = schemas.Report(**doc)
            authorize(actor, operation, report)
            updated = lifecycle.enforce_invariants(change(report), actor)
            documents[index] = to_document(updated)
            _save_json(documents)
            logger.info("Report %s: %s by %s", report_id, operation.value, actor.user_id)
            return updated
    raise NotFoundError("Report")


def vote(report_id: str, actor: TokenData, direction) -> schemas.Report:
    payload = _validated(schemas.VoteRequest, direction=direction)
    authorize(actor, Operation.vote)
    return _update_report(
        report_id, actor, Operation.vote,
        lambda r: lifecycle.vote(r, actor.user_id, payload.direction),
    )


def comment(report_id: str, actor: TokenData, text: str) -> schemas.Report:
    payload = _validated(schemas.CommentCreate, text=text)
    authorize(actor, Operation.comment)
    return _update_report(
        report_id, actor, Operation.comment,
        lambda r: lifecycle.add_comment(r, actor, payload.text),
    )


def assign(report_id: str, assignee_id: Optional[str], actor: TokenData) -> schemas.Report:
    authorize(actor, Operation.assign)
    ensure_object_id(report_id, "Report")
    assignee = None
    if assignee_id:
        ensure_object_id(assignee_id, "User")
        assignee = auth_utils.get_identity(assignee_id)
    return _update_report(
        report_id, actor, Operation.assign,
        lambda r: lifecycle.assign(r, assignee),
    )


def resolve(report_id: str, actor: TokenData, resolution_text: str) -> schemas.Report:
    payload = _validated(schemas.ResolveRequest, resolution=resolution_text)
    authorize(actor, Operation.resolve)
    return _update_report(
        report_id, actor, Operation.resolve,
        lambda r: lifecycle.resolve(r, actor, payload.resolution),
    )


def update_status(report_id: str, actor: TokenData, status) -> schemas.Report:
    payload = _validated(schemas.StatusUpdate, status=status)
    authorize(actor, Operation.set_status)
    return _update_report(
        report_id, actor, Operation.set_status,
        lambda r: lifecycle.set_status(r, payload.status),
    )


# ────────────────────────────────
# Queries
# ────────────────────────────────
def get_report(report_id: str, actor: TokenData) -> schemas.Report:
    """Fetch one report; only its reporter or staff may see it."""
    ensure_object_id(report_id, "Report")
    doc = next((r for r in _load_json() if r["id"] == report_id), None)
    if doc is None:
        raise NotFoundError("Report")
    report = schemas.Report(**doc)
    authorize(actor, Operation.view, report)
    return report


def matches_search(report: schemas.Report, search: str) -> bool:
    """Any search term found (case-insensitively) in title, description or location."""
    haystack = " ".join((report.title, report.description, report.location)).lower()
    return any(term in haystack for term in search.lower().split())


def filter_reports(reports: List[schemas.Report], filters: schemas.ReportFilter) -> List[schemas.Report]:
    if filters.status:
        reports = [r for r in reports if r.status == filters.status]
    if filters.category:
        reports = [r for r in reports if r.category == filters.category]
    if filters.priority:
        reports = [r for r in reports if r.priority == filters.priority]
    if filters.reported_by:
        reports = [r for r in reports if r.reported_by.id == filters.reported_by]
    if filters.assigned_to:
        reports = [r for r in reports if r.assigned_to and r.assigned_to.id == filters.assigned_to]
    if filters.search and filters.search.strip():
        reports = [r for r in reports if matches_search(r, filters.search)]
    return reports


def _sort_key(sort_by: str) -> Callable[[schemas.Report], tuple]:
    if sort_by == "priority":
        return lambda r: (schemas.PRIORITY_RANK[r.priority], r.id)
    if sort_by == "status":
        return lambda r: (schemas.STATUS_RANK[r.status], r.id)
    if sort_by == "createdAt":
        return lambda r: (r.created_at, r.id)
    if sort_by == "updatedAt":
        return lambda r: (r.updated_at, r.id)
    if sort_by == "category":
        return lambda r: (r.category.value, r.id)
    return lambda r: (getattr(r, sort_by).lower(), r.id)


def sort_reports(reports: List[schemas.Report], sort_by: str = "createdAt", order: str = "desc") -> List[schemas.Report]:
    if sort_by not in schemas.SORTABLE_FIELDS:
        raise ValidationError(errors=[f"sortBy: must be one of {', '.join(schemas.SORTABLE_FIELDS)}"])
    if order not in ("asc", "desc"):
        raise ValidationError(errors=["sortOrder: must be asc or desc"])
    return sorted(reports, key=_sort_key(sort_by), reverse=order == "desc")


def list_reports(
    actor: TokenData,
    filters: Optional[schemas.ReportFilter] = None,
    page: int = 1,
    limit: int = 10,
    sort_by: str = "createdAt",
    order: str = "desc",
    own_only: bool = False,
) -> Tuple[List[schemas.Report], Pagination]:
    """Filtered, sorted, paginated listing; ``own_only`` scopes it to the caller's reports."""
    filters = filters or schemas.ReportFilter()
    if own_only:
        authorize(actor, Operation.list_own)
        filters = filters.model_copy(update={"reported_by": actor.user_id})
    else:
        authorize(actor, Operation.list_all)

    if page < 1 or limit < 1:
        raise ValidationError(errors=["page and limit must be positive integers"])

    reports = filter_reports(load_reports(), filters)
    reports = sort_reports(reports, sort_by, order)
    return paginate(reports, page, limit)


def get_summary(actor: TokenData) -> schemas.ReportSummary:
    """Aggregate counts over a single read of the whole collection."""
    authorize(actor, Operation.stats)
    reports = load_reports()
    since = utcnow() - RECENT_WINDOW

    by_status = {s: 0 for s in schemas.ReportStatus}
    by_category = {c.value: 0 for c in schemas.ReportCategory}
    by_priority = {p.value: 0 for p in schemas.ReportPriority}
    recent = 0
    for r in reports:
        by_status[r.status] += 1
        by_category[r.category.value] += 1
        by_priority[r.priority.value] += 1
        if r.created_at >= since:
            recent += 1

    return schemas.ReportSummary(
        total_reports=len(reports),
        pending_reports=by_status[schemas.ReportStatus.pending],
        investigating_reports=by_status[schemas.ReportStatus.investigating],
        resolved_reports=by_status[schemas.ReportStatus.resolved],
        recent_reports=recent,
        category_breakdown=by_category,
        priority_breakdown=by_priority,
    )
