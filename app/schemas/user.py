# app/schemas/user.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    id: int
    email: str
    username: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserProfileResponse(UserResponse):
    """Detailed user profile for current user"""

    external_id: Optional[str] = None
    streak: int
    highest_streak: int
    last_active_date: Optional[datetime] = None
    completed_exercises: List[int] = []
    completed_lessons: List[int] = []
    updated_at: datetime


class SyncUserRequest(BaseModel):
    """Profile fields forwarded by the identity provider after login"""

    username: Optional[str] = None
    avatar: Optional[str] = None


class SyncUserResponse(BaseModel):
    success: bool = True
    created: bool
    user: UserResponse


class UserStatsResponse(BaseModel):
    streak: int
    highest_streak: int
    completed_exercises: int
    completed_lessons: int
