import datetime
from uuid import UUID, uuid4
from typing import Optional, List

from sqlalchemy.orm import Session
from app.moods.models import MoodEntry
from app.moods.schemas import MoodEntryCreate


def create_mood_entry(db: Session, mood: MoodEntryCreate, user_id: UUID) -> MoodEntry:
    """
    Records a mood sample for a user. Mood entries are never updated afterwards.

    Args:
        db (Session): SQLAlchemy session.
        mood (MoodEntryCreate): Validated mood value and note.
        user_id (UUID): ID of the user.

    Returns:
        MoodEntry: The created entry.
    """
    entry = MoodEntry(
        id=uuid4(),
        user_id=user_id,
        mood_value=mood.mood_value,
        note=mood.note or None,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def get_user_mood_entries(
    db: Session,
    user_id: UUID,
    since: Optional[datetime.datetime] = None,
) -> List[MoodEntry]:
    """
    Retrieves a user's mood entries, newest first, optionally from a start time on.

    Args:
        db (Session): SQLAlchemy session.
        user_id (UUID): ID of the user.
        since (datetime, optional): Inclusive lower bound on created_at.

    Returns:
        List[MoodEntry]: Matching entries.
    """
    query = db.query(MoodEntry).filter(MoodEntry.user_id == user_id)
    if since is not None:
        query = query.filter(MoodEntry.created_at >= since)
    return query.order_by(MoodEntry.created_at.desc()).all()
