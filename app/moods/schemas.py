from typing import Optional, List, Literal
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field

from app.gamification.schemas import GrantResult

Timeframe = Literal["day", "week", "month", "year"]


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class MoodEntryBase(BaseSchema):
    id: UUID
    user_id: UUID
    mood_value: int
    note: Optional[str] = None
    created_at: datetime


class MoodEntryCreate(BaseSchema):
    mood_value: int = Field(..., ge=1, le=10)
    note: Optional[str] = Field(None, max_length=2000)


class MoodEntryCreated(BaseSchema):
    entry: MoodEntryBase
    points: Optional[GrantResult] = None


class MoodChartPoint(BaseSchema):
    created_at: datetime
    mood_value: int
    label: str


class MoodSummary(BaseSchema):
    timeframe: Timeframe
    entries: List[MoodEntryBase]
    entry_count: int
    average: Optional[float] = None
    average_label: Optional[str] = None
    chart: List[MoodChartPoint]
