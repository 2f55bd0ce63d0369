import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Uuid(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), index=True, nullable=False)
    therapist_id = Column(Uuid(as_uuid=True), ForeignKey("therapists.id"), index=True, nullable=False)

    appointment_date = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(String, nullable=False, default="pending")  # pending | confirmed | cancelled | completed
    type = Column(String, nullable=False, default="online")  # online | in_person
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    therapist = relationship("Therapist", lazy="joined")
