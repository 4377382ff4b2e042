from typing import List
from backend.authentication.utils import load_all_users
from backend.reports.utils import load_reports
from backend.reports.schemas import ReportStatus
from backend.stories.utils import load_stories

def get_leaderboard(limit: int = 10) -> List[dict]:
    """Top users by points (ties by username), ranked from 1."""
    users = sorted(load_all_users(), key=lambda u: (-u.get("points", 0), u["username"].lower()))
    return [
        {"id": u["id"], "username": u["username"], "role": u["role"], "points": u.get("points", 0), "rank": i + 1}
        for i, u in enumerate(users[:limit])
    ]

def get_rank(user_id: str) -> int:
    users = sorted(load_all_users(), key=lambda u: (-u.get("points", 0), u["username"].lower()))
    return next((i + 1 for i, u in enumerate(users) if u["id"] == user_id), 0)

def get_user_activity(user_id: str) -> dict:
    """Counts of the user's own reports and stories."""
    mine = [r for r in load_reports() if r.reported_by.id == user_id]
    return {
        "reports_filed": len(mine),
        "reports_resolved": len([r for r in mine if r.status == ReportStatus.resolved]),
        "stories_shared": len([s for s in load_stories() if s["author"] == user_id]),
    }
