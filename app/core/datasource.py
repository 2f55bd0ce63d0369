"""
Read access behind one interface, so view endpoints do not care whether
they are showing the caller's stored rows or sample data.
"""

import datetime
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core import fixtures
from app.core.timeutils import utcnow
from app.gamification.db import get_points, get_recent_activities, get_unlocked_achievements
from app.gamification.schemas import PointsSnapshot
from app.journals.db import get_journal, get_user_journals
from app.moderation.db import get_chat_rules, get_flags
from app.moods.db import get_user_mood_entries
from app.therapists.db import get_therapist, get_therapists


class DataSource(ABC):
    is_live: bool

    @abstractmethod
    def mood_entries(self, user_id: Optional[UUID], since: Optional[datetime.datetime] = None) -> List: ...

    @abstractmethod
    def journals(self, user_id: Optional[UUID], skip: int = 0, limit: int = 100) -> List: ...

    @abstractmethod
    def journal(self, user_id: Optional[UUID], journal_id: UUID): ...

    @abstractmethod
    def points(self, user_id: Optional[UUID]) -> PointsSnapshot: ...

    @abstractmethod
    def unlocked_achievements(self, user_id: Optional[UUID]) -> Dict[str, datetime.datetime]: ...

    @abstractmethod
    def point_activities(self, user_id: Optional[UUID], limit: int = 20) -> List: ...

    @abstractmethod
    def approved_therapists(self) -> List: ...

    @abstractmethod
    def approved_therapist(self, therapist_id: UUID): ...

    @abstractmethod
    def chat_rules(self) -> List: ...

    @abstractmethod
    def flagged_messages(self) -> List: ...


class LiveDataSource(DataSource):
    is_live = True

    def __init__(self, db: Session):
        self.db = db

    def mood_entries(self, user_id, since=None):
        return get_user_mood_entries(self.db, user_id, since)

    def journals(self, user_id, skip=0, limit=100):
        return get_user_journals(self.db, user_id, skip, limit)

    def journal(self, user_id, journal_id):
        return get_journal(self.db, journal_id, user_id)

    def points(self, user_id):
        row = get_points(self.db, user_id)
        if row is None:
            return PointsSnapshot(user_id=user_id)
        return PointsSnapshot.model_validate(row)

    def unlocked_achievements(self, user_id):
        return {u.achievement_id: u.achieved_at for u in get_unlocked_achievements(self.db, user_id)}

    def point_activities(self, user_id, limit=20):
        return get_recent_activities(self.db, user_id, limit)

    def approved_therapists(self):
        return get_therapists(self.db, approved_only=True)

    def approved_therapist(self, therapist_id):
        therapist = get_therapist(self.db, therapist_id)
        if therapist is None or not therapist.approved:
            return None
        return therapist

    def chat_rules(self):
        return get_chat_rules(self.db)

    def flagged_messages(self):
        return get_flags(self.db)


class FixtureDataSource(DataSource):
    """Read-only sample data. The user id argument is ignored."""

    is_live = False

    def __init__(self, now: Optional[datetime.datetime] = None):
        self.now = now or utcnow()

    def mood_entries(self, user_id, since=None):
        entries = fixtures.sample_moods(self.now)
        if since is not None:
            entries = [e for e in entries if e.created_at >= since]
        return entries

    def journals(self, user_id, skip=0, limit=100):
        return fixtures.sample_journals(self.now)[skip:skip + limit]

    def journal(self, user_id, journal_id):
        return next((j for j in fixtures.sample_journals(self.now) if j.id == journal_id), None)

    def points(self, user_id):
        return fixtures.sample_points(self.now.date())

    def unlocked_achievements(self, user_id):
        return fixtures.sample_unlocked(self.now)

    def point_activities(self, user_id, limit=20):
        return []

    def approved_therapists(self):
        return fixtures.sample_therapists(self.now)

    def approved_therapist(self, therapist_id):
        return next((t for t in fixtures.sample_therapists(self.now) if t.id == therapist_id), None)

    def chat_rules(self):
        return fixtures.sample_chat_rules()

    def flagged_messages(self):
        return fixtures.sample_flags(self.now)
