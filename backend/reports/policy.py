"""
Single authorization policy for report operations.
"""

from enum import Enum
from typing import Optional

from backend.authentication.schemas import TokenData
from backend.core.exceptions import ForbiddenError
from backend.reports.schemas import Report


class Operation(str, Enum):
    create = "create"
    view = "view"
    list_all = "list_all"
    list_own = "list_own"
    vote = "vote"
    comment = "comment"
    assign = "assign"
    resolve = "resolve"
    set_status = "set_status"
    stats = "stats"


# Operations any authenticated identity may perform on any report
OPEN_OPERATIONS = {Operation.create, Operation.list_own, Operation.vote, Operation.comment}

STAFF_OPERATIONS = {Operation.list_all, Operation.assign, Operation.resolve, Operation.set_status, Operation.stats}

DENIAL_MESSAGES = {
    Operation.view: "Access denied. You can only view your own reports.",
}


def can_perform(actor: Optional[TokenData], operation: Operation, report: Optional[Report] = None) -> bool:
    if actor is None:
        return False
    if operation in OPEN_OPERATIONS:
        return True
    if operation in STAFF_OPERATIONS:
        return actor.is_staff
    if operation == Operation.view:
        return actor.is_staff or (report is not None and report.reported_by.id == actor.user_id)
    return False


def authorize(actor: Optional[TokenData], operation: Operation, report: Optional[Report] = None) -> None:
    if not can_perform(actor, operation, report):
        raise ForbiddenError(DENIAL_MESSAGES.get(operation, "Access denied. Teacher or admin role required."))

