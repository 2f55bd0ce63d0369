import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class AchievementDefinition(BaseSchema):
    id: str
    name: str
    description: str
    points: int
    icon_name: str


class ActivityStats(BaseSchema):
    """Counters the achievement conditions are evaluated against."""

    streak_days: int = 0
    profile_complete: bool = False
    mood_entries: int = 0
    mood_days: int = 0
    journal_entries: int = 0
    chat_exchanges: int = 0
    appointments_booked: int = 0
    therapist_reviews: int = 0


class PointsSnapshot(BaseSchema):
    user_id: Optional[UUID] = None
    total_points: int = 0
    level: int = 1
    streak_days: int = 0
    last_activity_date: Optional[datetime.date] = None


class UnlockedAchievement(BaseSchema):
    achievement_id: str
    achieved_at: datetime.datetime


class GrantResult(BaseSchema):
    action: str
    points_awarded: int
    total_points: int
    level: int
    streak_days: int
    leveled_up: bool
    unlocked: List[AchievementDefinition] = []


class AchievementStatus(AchievementDefinition):
    achieved: bool
    achieved_at: Optional[datetime.datetime] = None


class GamificationSummary(BaseSchema):
    total_points: int
    level: int
    streak_days: int
    points_to_next_level: int
    last_activity_date: Optional[datetime.date] = None
    achievements: List[AchievementStatus]
    achieved_count: int
    completion_percent: int


class PointActivityBase(BaseSchema):
    id: UUID
    action: str
    points: int
    description: Optional[str] = None
    created_at: datetime.datetime
