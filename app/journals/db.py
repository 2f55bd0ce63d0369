from uuid import UUID
from typing import Optional, List

from sqlalchemy.orm import Session
from app.journals.models import JournalEntry
from app.journals.schemas import JournalEntryCreate


def get_journal(db: Session, journal_id: UUID, user_id: UUID) -> Optional[JournalEntry]:
    """
    Retrieves a journal entry by its ID for a given user.

    Args:
        db (Session): SQLAlchemy session.
        journal_id (UUID): ID of the journal.
        user_id (UUID): ID of the owner.

    Returns:
        Optional[JournalEntry]: The journal if found, else None.
    """
    return db.query(JournalEntry).filter(
        JournalEntry.id == journal_id,
        JournalEntry.user_id == user_id
    ).first()


def get_user_journals(db: Session, user_id: UUID, skip: int = 0, limit: int = 100) -> List[JournalEntry]:
    """
    Retrieves a paginated list of journal entries for a user, newest first.

    Args:
        db (Session): SQLAlchemy session.
        user_id (UUID): ID of the user.
        skip (int): Pagination offset.
        limit (int): Pagination limit.

    Returns:
        List[JournalEntry]: List of journal entries.
    """
    return (
        db.query(JournalEntry)
        .filter(JournalEntry.user_id == user_id)
        .order_by(JournalEntry.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def create_journal(db: Session, journal: JournalEntryCreate, user_id: UUID, audio_url: Optional[str] = None) -> JournalEntry:
    """
    Creates a new journal entry. Entries are immutable once written.

    Args:
        db (Session): SQLAlchemy session.
        journal (JournalEntryCreate): Transcript and notes.
        user_id (UUID): ID of the user.
        audio_url (str, optional): Location of the kept recording.

    Returns:
        JournalEntry: The created journal entry.
    """
    new_journal = JournalEntry(
        user_id=user_id,
        audio_url=audio_url,
        transcript=journal.transcript,
        notes=journal.notes,
    )
    db.add(new_journal)
    db.commit()
    db.refresh(new_journal)
    return new_journal
