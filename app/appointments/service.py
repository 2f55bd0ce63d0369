import datetime
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from app.appointments.schemas import (
    AppointmentCreate,
    BookingOptions,
    TherapistAppointment,
    TherapistStats,
    UserAppointment,
)
from app.appointments.state import TERMINAL_STATES
from app.core.timeutils import as_aware

TIME_SLOTS = ["09:00", "10:00", "11:00", "12:00", "14:00", "15:00", "16:00", "17:00"]
BOOKING_HORIZON_DAYS = 30

UNKNOWN_THERAPIST = "Unknown Therapist"
ANONYMOUS_USER = "Anonymous User"


class InvalidBooking(ValueError):
    pass


def offered_session_types(therapist) -> List[str]:
    types = []
    if therapist.online:
        types.append("online")
    if therapist.in_person:
        types.append("in_person")
    return types


def booking_options(therapist, today: datetime.date) -> BookingOptions:
    return BookingOptions(
        time_slots=list(TIME_SLOTS),
        earliest_date=today,
        latest_date=today + datetime.timedelta(days=BOOKING_HORIZON_DAYS),
        session_types=offered_session_types(therapist),
    )


def resolve_session_type(therapist, requested: Optional[str]) -> str:
    offered = offered_session_types(therapist)
    if not offered:
        raise InvalidBooking("This therapist is not taking sessions")
    if requested is None:
        return "online" if "online" in offered else offered[0]
    if requested not in offered:
        raise InvalidBooking(f"This therapist does not offer {requested.replace('_', ' ')} sessions")
    return requested


def validate_booking(
    booking: AppointmentCreate,
    therapist,
    now: datetime.datetime,
) -> Dict:
    """
    Checks a booking request against the slot rules and the therapist's modes.

    Args:
        booking (AppointmentCreate): Requested date, slot and type.
        therapist: The therapist being booked (already known to be approved).
        now (datetime): Current aware UTC time.

    Returns:
        dict: `appointment_date` (aware UTC datetime) and resolved `type`.

    Raises:
        InvalidBooking: If the slot has already started, the date is more than
            30 days ahead, the slot is not listed, or the session type is not offered.
    """
    today = now.date()
    if booking.date < today:
        raise InvalidBooking("Appointment date cannot be in the past")
    if booking.date > today + datetime.timedelta(days=BOOKING_HORIZON_DAYS):
        raise InvalidBooking(f"Appointments can be booked at most {BOOKING_HORIZON_DAYS} days ahead")
    if booking.time not in TIME_SLOTS:
        raise InvalidBooking(f"Time must be one of: {', '.join(TIME_SLOTS)}")

    hour, minute = (int(part) for part in booking.time.split(":"))
    appointment_date = datetime.datetime.combine(
        booking.date, datetime.time(hour, minute), tzinfo=datetime.timezone.utc
    )
    if appointment_date <= now:
        raise InvalidBooking("This time slot has already passed")
    return {
        "appointment_date": appointment_date,
        "type": resolve_session_type(therapist, booking.type),
    }


def is_upcoming_for_user(appointment, now: datetime.datetime) -> bool:
    if appointment.status == "pending":
        return True
    return appointment.status == "confirmed" and as_aware(appointment.appointment_date) >= now


def is_past(appointment, now: datetime.datetime) -> bool:
    if appointment.status in TERMINAL_STATES:
        return True
    return appointment.status == "confirmed" and as_aware(appointment.appointment_date) < now


def is_upcoming_for_therapist(appointment, now: datetime.datetime) -> bool:
    return appointment.status == "confirmed" and as_aware(appointment.appointment_date) >= now


def _by_date(appointment):
    return as_aware(appointment.appointment_date)


def user_tab(appointments: Sequence, tab: str, now: datetime.datetime) -> List:
    if tab == "upcoming":
        return sorted((a for a in appointments if is_upcoming_for_user(a, now)), key=_by_date)
    if tab == "past":
        return sorted((a for a in appointments if is_past(a, now)), key=_by_date, reverse=True)
    raise ValueError(f"Unknown tab: {tab}")


def therapist_tab(appointments: Sequence, tab: str, now: datetime.datetime) -> List:
    if tab == "upcoming":
        return sorted((a for a in appointments if is_upcoming_for_therapist(a, now)), key=_by_date)
    if tab == "pending":
        return sorted(
            (a for a in appointments if a.status == "pending"),
            key=lambda a: as_aware(a.created_at),
            reverse=True,
        )
    if tab == "past":
        return sorted((a for a in appointments if is_past(a, now)), key=_by_date, reverse=True)
    raise ValueError(f"Unknown tab: {tab}")


def with_therapist_names(appointments: Sequence, names: Dict[UUID, str]) -> List[UserAppointment]:
    return [
        UserAppointment(
            **_appointment_fields(a),
            therapist_name=names.get(a.therapist_id) or UNKNOWN_THERAPIST,
        )
        for a in appointments
    ]


def with_user_nicknames(appointments: Sequence, nicknames: Dict[UUID, str]) -> List[TherapistAppointment]:
    return [
        TherapistAppointment(
            **_appointment_fields(a),
            user_nickname=nicknames.get(a.user_id) or ANONYMOUS_USER,
        )
        for a in appointments
    ]


def _appointment_fields(appointment) -> Dict:
    return {
        "id": appointment.id,
        "user_id": appointment.user_id,
        "therapist_id": appointment.therapist_id,
        "appointment_date": appointment.appointment_date,
        "status": appointment.status,
        "type": appointment.type,
        "notes": appointment.notes,
        "created_at": appointment.created_at,
    }


def therapist_stats(appointments: Sequence, now: datetime.datetime) -> TherapistStats:
    return TherapistStats(
        total_clients=len({a.user_id for a in appointments}),
        pending_requests=sum(1 for a in appointments if a.status == "pending"),
        upcoming_sessions=sum(1 for a in appointments if is_upcoming_for_therapist(a, now)),
    )
