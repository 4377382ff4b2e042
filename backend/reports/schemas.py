"""
Defines the data models and enums for report management.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import ConfigDict, Field, computed_field, field_validator

from backend.core.schemas import CamelModel, Pagination


class ReportStatus(str, Enum):
    pending = "Pending"
    investigating = "Investigating"
    resolved = "Resolved"


class ReportPriority(str, Enum):
    low = "Low"
    medium = "Medium"
    high = "High"
    critical = "Critical"


class ReportCategory(str, Enum):
    safety = "Safety"
    bullying = "Bullying"
    infrastructure = "Infrastructure"
    academic = "Academic"
    behavioral = "Behavioral"
    other = "Other"


class VoteDirection(str, Enum):
    up = "up"
    down = "down"


# Severity order used when sorting by priority/status
PRIORITY_RANK = {p: i for i, p in enumerate(ReportPriority)}
STATUS_RANK = {s: i for i, s in enumerate(ReportStatus)}

SORTABLE_FIELDS = ("createdAt", "updatedAt", "title", "location", "status", "priority", "category")

URL_PATTERN = r"^https?://.+"


def _enum_message(label: str, enum_cls) -> str:
    values = [e.value for e in enum_cls]
    return f"{label} must be {', '.join(values[:-1])}, or {values[-1]}"


# ────────────────────────────────
# Embedded values
# ────────────────────────────────
class UserRef(CamelModel):
    id: str
    username: str


class Comment(CamelModel):
    id: str
    author: UserRef
    text: str = Field(min_length=1, max_length=500)
    created_at: datetime


class Resolution(CamelModel):
    description: Optional[str] = Field(default=None, max_length=1000)
    resolved_by: Optional[UserRef] = None
    resolved_at: Optional[datetime] = None


# ────────────────────────────────
# Aggregate root
# ────────────────────────────────
class Report(CamelModel):
    id: str
    title: str
    description: str
    location: str
    image_url: Optional[str] = None
    status: ReportStatus = ReportStatus.pending
    priority: ReportPriority = ReportPriority.medium
    category: ReportCategory
    tags: List[str] = []
    is_anonymous: bool = False
    is_public: bool = False
    reported_by: UserRef
    assigned_to: Optional[UserRef] = None
    resolution: Optional[Resolution] = None
    comments: List[Comment] = []
    upvotes: List[str] = []
    downvotes: List[str] = []
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="voteCount")
    @property
    def vote_count(self) -> int:
        return len(self.upvotes) - len(self.downvotes)

    @computed_field(alias="commentCount")
    @property
    def comment_count(self) -> int:
        return len(self.comments)

    @computed_field(alias="daysSinceCreation")
    @property
    def days_since_creation(self) -> int:
        created = self.created_at if self.created_at.tzinfo else self.created_at.replace(tzinfo=timezone.utc)
        elapsed = abs((datetime.now(timezone.utc) - created).total_seconds())
        return math.ceil(elapsed / 86400)


DERIVED_FIELDS = {"vote_count", "comment_count", "days_since_creation"}


# ────────────────────────────────
# Request bodies
# ────────────────────────────────
class ReportCreate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    location: str = Field(min_length=1, max_length=200)
    image_url: Optional[str] = Field(default=None, pattern=URL_PATTERN)
    category: ReportCategory
    priority: ReportPriority = ReportPriority.medium
    tags: List[str] = []
    is_anonymous: bool = False
    is_public: bool = False

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, v):
        if v not in [c.value for c in ReportCategory]:
            raise ValueError(_enum_message("Category", ReportCategory))
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def check_priority(cls, v):
        if v is None:
            return ReportPriority.medium
        if v not in [p.value for p in ReportPriority]:
            raise ValueError(_enum_message("Priority", ReportPriority))
        return v

    @field_validator("image_url", mode="before")
    @classmethod
    def blank_image_is_none(cls, v):
        return v or None

    @field_validator("tags")
    @classmethod
    def check_tags(cls, v):
        tags = []
        for tag in v:
            tag = tag.strip()
            if not tag:
                continue
            if len(tag) > 30:
                raise ValueError("Tag cannot exceed 30 characters")
            if tag not in tags:
                tags.append(tag)
        return tags


class CommentCreate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(min_length=1, max_length=500)


class VoteRequest(CamelModel):
    direction: VoteDirection


class AssignRequest(CamelModel):
    assignee_id: Optional[str] = None


class ResolveRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    resolution: str = Field(min_length=1, max_length=1000)


class StatusUpdate(CamelModel):
    status: ReportStatus

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        if v not in [s.value for s in ReportStatus]:
            raise ValueError(_enum_message("Status", ReportStatus))
        return v


class ReportFilter(CamelModel):
    status: Optional[ReportStatus] = None
    category: Optional[ReportCategory] = None
    priority: Optional[ReportPriority] = None
    search: Optional[str] = None
    assigned_to: Optional[str] = None
    reported_by: Optional[str] = None


# ────────────────────────────────
# Response envelopes
# ────────────────────────────────
class ReportData(CamelModel):
    report: Report


class ReportResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    data: ReportData


class ReportListData(CamelModel):
    reports: List[Report]
    pagination: Pagination


class ReportListResponse(CamelModel):
    success: bool = True
    data: ReportListData


class ReportSummary(CamelModel):
    total_reports: int
    pending_reports: int
    investigating_reports: int
    resolved_reports: int
    recent_reports: int
    category_breakdown: Dict[str, int]
    priority_breakdown: Dict[str, int]


class ReportSummaryResponse(CamelModel):
    success: bool = True
    data: ReportSummary
