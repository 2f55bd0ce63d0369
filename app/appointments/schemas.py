import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.appointments.state import AppointmentStatus
from app.gamification.schemas import GrantResult

SessionType = Literal["online", "in_person"]
UserTab = Literal["upcoming", "past"]
TherapistTab = Literal["upcoming", "pending", "past"]


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class AppointmentBase(BaseSchema):
    id: UUID
    user_id: UUID
    therapist_id: UUID
    appointment_date: datetime.datetime
    status: AppointmentStatus
    type: SessionType
    notes: Optional[str] = None
    created_at: Optional[datetime.datetime] = None


class AppointmentCreate(BaseSchema):
    therapist_id: UUID
    date: datetime.date
    time: str = Field(..., description="One of the bookable slots, e.g. '14:00'")
    type: Optional[SessionType] = None
    notes: Optional[str] = Field(None, max_length=2000)


class AppointmentCreated(BaseSchema):
    appointment: AppointmentBase
    points: Optional[GrantResult] = None


class UserAppointment(AppointmentBase):
    therapist_name: str


class TherapistAppointment(AppointmentBase):
    user_nickname: str


class TherapistStats(BaseSchema):
    total_clients: int
    pending_requests: int
    upcoming_sessions: int


class BookingOptions(BaseSchema):
    time_slots: List[str]
    earliest_date: datetime.date
    latest_date: datetime.date
    session_types: List[SessionType]
