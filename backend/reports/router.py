"""
Handles report creation, retrieval, voting, comments and moderation actions.
Role checks live in ``backend.reports.policy``; routes only translate HTTP.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from backend.core.config import settings
from backend.reports import utils, schemas
from backend.authentication.schemas import TokenData
from backend.authentication.security import get_current_user

router = APIRouter(prefix="/reports", tags=["Reports"])


def _report_response(report: schemas.Report, message: Optional[str] = None) -> dict:
    return {"success": True, "message": message, "data": {"report": report}}


@router.post("", response_model=schemas.ReportResponse, status_code=status.HTTP_201_CREATED)
def submit_report(report: schemas.ReportCreate, user: TokenData = Depends(get_current_user)):
    """Submit a new report (any authenticated user)."""
    created = utils.create_report(report, user)
    return _report_response(created, "Report created successfully")


@router.get("", response_model=schemas.ReportListResponse)
def get_all_reports(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status: Optional[schemas.ReportStatus] = Query(None),
    category: Optional[schemas.ReportCategory] = Query(None),
    priority: Optional[schemas.ReportPriority] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    assigned_to: Optional[str] = Query(None, alias="assignedTo"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    user: TokenData = Depends(get_current_user),
):
    """Filtered, paginated listing of every report (teacher/admin only)."""
    filters = schemas.ReportFilter(
        status=status, category=category, priority=priority, search=search, assigned_to=assigned_to
    )
    reports, pagination = utils.list_reports(
        user, filters, page=page, limit=limit, sort_by=sort_by, order=sort_order
    )
    return {"success": True, "data": {"reports": reports, "pagination": pagination}}


@router.get("/my-reports", response_model=schemas.ReportListResponse)
def get_my_reports(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status: Optional[schemas.ReportStatus] = Query(None),
    category: Optional[schemas.ReportCategory] = Query(None),
    user: TokenData = Depends(get_current_user),
):
    """Reports filed by the caller, newest first."""
    filters = schemas.ReportFilter(status=status, category=category)
    reports, pagination = utils.list_reports(user, filters, page=page, limit=limit, own_only=True)
    return {"success": True, "data": {"reports": reports, "pagination": pagination}}


@router.get("/stats/summary", response_model=schemas.ReportSummaryResponse)
def get_stats_summary(user: TokenData = Depends(get_current_user)):
    """Dashboard counts (teacher/admin only)."""
    return {"success": True, "data": utils.get_summary(user)}


@router.get("/{report_id}", response_model=schemas.ReportResponse)
def get_report(report_id: str, user: TokenData = Depends(get_current_user)):
    """Retrieve a specific report (its reporter or teacher/admin)."""
    return _report_response(utils.get_report(report_id, user))


@router.post("/{report_id}/vote", response_model=schemas.ReportResponse)
def vote_report(report_id: str, vote: schemas.VoteRequest, user: TokenData = Depends(get_current_user)):
    report = utils.vote(report_id, user, vote.direction)
    return _report_response(report, "Vote recorded")


@router.post("/{report_id}/comments", response_model=schemas.ReportResponse)
def comment_report(report_id: str, body: schemas.CommentCreate, user: TokenData = Depends(get_current_user)):
    report = utils.comment(report_id, user, body.text)
    return _report_response(report, "Comment added")


@router.patch("/{report_id}/assign", response_model=schemas.ReportResponse)
def assign_report(report_id: str, body: schemas.AssignRequest, user: TokenData = Depends(get_current_user)):
    """Assign (or with a null id, unassign) a report (teacher/admin only)."""
    report = utils.assign(report_id, body.assignee_id, user)
    return _report_response(report, "Report assigned")


@router.post("/{report_id}/resolve", response_model=schemas.ReportResponse)
def resolve_report(report_id: str, body: schemas.ResolveRequest, user: TokenData = Depends(get_current_user)):
    """Resolve a report (teacher/admin only)."""
    report = utils.resolve(report_id, user, body.resolution)
    return _report_response(report, "Report resolved")


@router.patch("/{report_id}/status", response_model=schemas.ReportResponse)
def update_report_status(report_id: str, update: schemas.StatusUpdate, user: TokenData = Depends(get_current_user)):
    """Set a report's status (teacher/admin only)."""
    report = utils.update_status(report_id, user, update.status)
    return _report_response(report, f"Report status updated to {update.status.value}")
