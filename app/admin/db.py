import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.appointments.models import Appointment
from app.gamification.models import PointActivity
from app.journals.models import JournalEntry
from app.moods.models import MoodEntry
from app.profiles.models import Profile
from app.therapists.models import Therapist

Events = List[Tuple[UUID, datetime.datetime]]


def _events(db: Session, user_column, created_column, since: Optional[datetime.datetime], *criteria) -> Events:
    query = db.query(user_column, created_column).filter(*criteria)
    if since is not None:
        query = query.filter(created_column >= since)
    return [(user_id, created_at) for user_id, created_at in query.all()]


def profile_signups(db: Session, since: Optional[datetime.datetime] = None) -> Events:
    return _events(db, Profile.id, Profile.created_at, since)


def therapist_signups(db: Session, since: Optional[datetime.datetime] = None) -> Events:
    return _events(db, Therapist.user_id, Therapist.created_at, since)


def mood_events(db: Session, since: Optional[datetime.datetime] = None) -> Events:
    return _events(db, MoodEntry.user_id, MoodEntry.created_at, since)


def journal_events(db: Session, since: Optional[datetime.datetime] = None) -> Events:
    return _events(db, JournalEntry.user_id, JournalEntry.created_at, since)


def chat_events(db: Session, since: Optional[datetime.datetime] = None) -> Events:
    """Successful assistant exchanges, taken from the points ledger."""
    return _events(
        db, PointActivity.user_id, PointActivity.created_at, since,
        PointActivity.action == "chat_exchange",
    )


def appointment_events(db: Session, since: Optional[datetime.datetime] = None) -> Events:
    return _events(db, Appointment.user_id, Appointment.created_at, since)


def count_rows(db: Session, model) -> int:
    return db.query(model).count()


def count_chat_messages(db: Session) -> int:
    return db.query(PointActivity).filter(PointActivity.action == "chat_exchange").count()
