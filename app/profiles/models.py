from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, DateTime, JSON, Uuid
from app.core.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True)  # same as the auth user id
    nickname = Column(String, nullable=False)
    age_range = Column(String, nullable=False)
    primary_concerns = Column(JSON, nullable=False, default=list)
    preferred_therapist_gender = Column(String, nullable=True)
    preferred_language = Column(String, nullable=False, default="Swahili")
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class UserSettings(Base):
    __tablename__ = "user_settings"

    user_id = Column(Uuid(as_uuid=True), primary_key=True)
    theme = Column(String, nullable=False, default="system")  # light | dark | system
    language = Column(String, nullable=False, default="english")
    mood_reminders = Column(Boolean, nullable=False, default=True)
    journal_reminders = Column(Boolean, nullable=False, default=False)
    therapist_updates = Column(Boolean, nullable=False, default=True)
    save_data_locally = Column(Boolean, nullable=False, default=True)
    anonymous_analytics = Column(Boolean, nullable=False, default=False)
