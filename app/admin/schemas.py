import datetime
from typing import Dict, List, Literal
from pydantic import BaseModel

AnalyticsTimeframe = Literal["day", "week", "month"]


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class OverviewStats(BaseSchema):
    total_users: int
    active_users: int
    total_therapists: int
    pending_therapists: int
    total_appointments: int
    total_mood_entries: int
    total_journal_entries: int
    total_chat_messages: int


class ActivitySlice(BaseSchema):
    name: str
    value: int


class DailyAnalytics(BaseSchema):
    date: datetime.date
    total_users: int
    active_users: int
    new_users: int
    mood_entries: int
    journal_entries: int
    chat_messages: int
    therapist_appointments: int


class AdminDashboard(BaseSchema):
    timeframe: AnalyticsTimeframe
    stats: OverviewStats
    activity: List[ActivitySlice]
    series: List[DailyAnalytics]
    changes: Dict[str, int]


class ApprovalUpdate(BaseSchema):
    approved: bool
