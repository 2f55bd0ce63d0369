import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Boolean, Integer, Float, DateTime, JSON, Uuid, ForeignKey, UniqueConstraint
from app.core.database import Base


class Therapist(Base):
    __tablename__ = "therapists"

    id = Column(Uuid(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), unique=True, index=True, nullable=False)

    name = Column(String, nullable=False)
    title = Column(String, nullable=False)
    specialties = Column(JSON, nullable=False, default=list)
    languages = Column(JSON, nullable=False, default=list)
    location = Column(String, nullable=False)
    bio = Column(Text, nullable=True)
    education = Column(Text, nullable=True)
    price = Column(String, nullable=True)  # free text, e.g. "KSh 3,000 / session"

    online = Column(Boolean, nullable=False, default=True)
    in_person = Column(Boolean, nullable=False, default=False)

    rating = Column(Float, nullable=False, default=0.0)
    reviews = Column(Integer, nullable=False, default=0)
    image_url = Column(String, nullable=True)

    approved = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class TherapistReview(Base):
    __tablename__ = "therapist_reviews"
    __table_args__ = (UniqueConstraint("user_id", "therapist_id", name="uq_review_user_therapist"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), index=True, nullable=False)
    therapist_id = Column(Uuid(as_uuid=True), ForeignKey("therapists.id"), index=True, nullable=False)
    rating = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
