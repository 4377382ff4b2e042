from fastapi import APIRouter, Depends, Query
from backend.authentication.security import get_current_user
from backend.authentication import utils as auth_utils
from backend.authentication import schemas as auth_schemas
from backend.core.config import settings
from backend.core.exceptions import NotFoundError
from backend.users import schemas, utils

router = APIRouter(prefix="/users", tags=["Users"])

# Public leaderboard
@router.get("/leaderboard", response_model=schemas.LeaderboardResponse)
def get_leaderboard(limit: int = Query(10, ge=1, le=settings.MAX_PAGE_SIZE)):
    """Top users by points."""
    leaderboard = utils.get_leaderboard(limit)
    return {"success": True, "count": len(leaderboard), "data": leaderboard}

# User Dashboard
@router.get("/dashboard", response_model=schemas.DashboardResponse)
def get_dashboard(current_user: auth_schemas.TokenData = Depends(get_current_user)):
    """Get user-specific dashboard data"""
    user_data = auth_utils.get_user_by_id(current_user.user_id)
    if not user_data:
        raise NotFoundError("User")

    activity = utils.get_user_activity(current_user.user_id)
    return {
        "success": True,
        "data": {
            "user": auth_utils.to_public(user_data),
            "stats": {
                "points": user_data.get("points", 0),
                "rank": utils.get_rank(current_user.user_id),
                **activity,
            },
        },
    }
