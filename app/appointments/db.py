import datetime
from uuid import UUID
from typing import List, Optional

from sqlalchemy.orm import Session
from app.appointments.models import Appointment
from app.appointments.schemas import AppointmentCreate


def get_appointment(db: Session, appointment_id: UUID) -> Optional[Appointment]:
    return db.query(Appointment).filter(Appointment.id == appointment_id).first()


def create_appointment(
    db: Session,
    booking: AppointmentCreate,
    user_id: UUID,
    appointment_date: datetime.datetime,
    session_type: str,
) -> Appointment:
    """
    Stores a validated booking request as a pending appointment.

    Args:
        db (Session): SQLAlchemy session.
        booking (AppointmentCreate): The request, for therapist and notes.
        user_id (UUID): ID of the booking user.
        appointment_date (datetime): Slot start in UTC.
        session_type (str): Resolved session type.

    Returns:
        Appointment: The created appointment.
    """
    appointment = Appointment(
        user_id=user_id,
        therapist_id=booking.therapist_id,
        appointment_date=appointment_date,
        status="pending",
        type=session_type,
        notes=booking.notes or None,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


def get_user_appointments(db: Session, user_id: UUID) -> List[Appointment]:
    return db.query(Appointment).filter(Appointment.user_id == user_id).all()


def get_therapist_appointments(db: Session, therapist_id: UUID) -> List[Appointment]:
    return db.query(Appointment).filter(Appointment.therapist_id == therapist_id).all()
