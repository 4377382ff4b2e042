from pydantic import BaseModel
from typing import List
from backend.authentication.schemas import UserResponse, UserRole
from backend.core.schemas import CamelModel

class LeaderboardEntry(CamelModel):
    id: str
    username: str
    role: UserRole
    points: int
    rank: int

class LeaderboardResponse(BaseModel):
    success: bool = True
    count: int
    data: List[LeaderboardEntry]

class DashboardStats(CamelModel):
    points: int
    rank: int
    reports_filed: int
    reports_resolved: int
    stories_shared: int

class UserDashboard(CamelModel):
    user: UserResponse
    stats: DashboardStats

class DashboardResponse(BaseModel):
    success: bool = True
    data: UserDashboard
