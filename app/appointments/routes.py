import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.appointments.db import (
    create_appointment,
    get_appointment,
    get_therapist_appointments,
    get_user_appointments,
)
from app.appointments.schemas import (
    AppointmentBase,
    AppointmentCreate,
    AppointmentCreated,
    TherapistAppointment,
    TherapistStats,
    TherapistTab,
    UserAppointment,
    UserTab,
)
from app.appointments.service import (
    InvalidBooking,
    therapist_stats,
    therapist_tab,
    user_tab,
    validate_booking,
    with_therapist_names,
    with_user_nicknames,
)
from app.appointments.state import Actor, InvalidTransition, Transition, can_act, next_status
from app.auth.schemas import RequestContext
from app.auth.service import require_therapist, require_user
from app.core.database import get_db, two_phase_update
from app.core.dependency import require_writable
from app.core.timeutils import as_aware, utcnow
from app.gamification.service import award
from app.profiles.db import get_nicknames
from app.therapists.db import get_therapist, get_therapist_by_user, get_therapists_by_ids

router = APIRouter(prefix="/appointments", tags=["Appointments"])
logger = logging.getLogger(__name__)


def _own_therapist(db: Session, ctx: RequestContext):
    therapist = get_therapist_by_user(db, ctx.user_id)
    if therapist is None:
        raise HTTPException(status_code=404, detail="Therapist profile not found")
    return therapist


@router.post(
    "",
    response_model=AppointmentCreated,
    status_code=201,
    summary="Book an appointment",
    description="""
                Request a session with an approved therapist. The date must be between today and
                30 days ahead and the time one of the listed slots. The request starts as pending
                and earns points.
                """,
    responses={
        201: {"description": "Appointment requested."},
        400: {"description": "Date, time slot or session type not allowed."},
        401: {"description": "Unauthorized."},
        404: {"description": "Therapist not found or not approved."},
        422: {"description": "Missing date or time."},
        500: {"description": "Failed to book appointment."},
    },
    dependencies=[Depends(require_writable)],
)
def book_appointment_route(
    booking: AppointmentCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> AppointmentCreated:
    therapist = get_therapist(db, booking.therapist_id)
    if therapist is None or not therapist.approved:
        raise HTTPException(status_code=404, detail="Therapist not found")

    try:
        slot = validate_booking(booking, therapist, utcnow())
    except InvalidBooking as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        appointment = create_appointment(db, booking, ctx.user_id, slot["appointment_date"], slot["type"])
        logger.info(f"User {ctx.user_id} requested appointment {appointment.id} with therapist {therapist.id}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error booking appointment for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to book appointment")

    points = award(db, ctx.user_id, "appointment_booked")
    return AppointmentCreated(appointment=AppointmentBase.model_validate(appointment), points=points)


@router.get(
    "",
    response_model=List[UserAppointment],
    summary="List own appointments",
    description="`upcoming`: pending, or confirmed and not yet started, soonest first. `past`: the rest, latest first.",
    responses={
        200: {"description": "Appointments returned."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to load appointments."},
    },
)
def list_user_appointments_route(
    tab: UserTab = Query("upcoming"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> List[UserAppointment]:
    try:
        appointments = user_tab(get_user_appointments(db, ctx.user_id), tab, utcnow())
        therapists = get_therapists_by_ids(db, list({a.therapist_id for a in appointments}))
        return with_therapist_names(appointments, {t.id: t.name for t in therapists})
    except Exception as e:
        logger.error(f"Error listing appointments for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load appointments")


@router.get(
    "/therapist",
    response_model=List[TherapistAppointment],
    summary="List the therapist's appointments",
    description="`upcoming`: confirmed, soonest first. `pending`: requests, newest first. `past`: latest first.",
    responses={
        200: {"description": "Appointments returned."},
        403: {"description": "Caller is not a therapist account."},
        404: {"description": "Therapist profile not found."},
        500: {"description": "Failed to load appointments."},
    },
)
def list_therapist_appointments_route(
    tab: TherapistTab = Query("upcoming"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_therapist),
) -> List[TherapistAppointment]:
    therapist = _own_therapist(db, ctx)
    try:
        appointments = therapist_tab(get_therapist_appointments(db, therapist.id), tab, utcnow())
        nicknames = get_nicknames(db, list({a.user_id for a in appointments}))
        return with_user_nicknames(appointments, nicknames)
    except Exception as e:
        logger.error(f"Error listing appointments for therapist {therapist.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load appointments")


@router.get(
    "/therapist/stats",
    response_model=TherapistStats,
    summary="Therapist dashboard counters",
    responses={
        200: {"description": "Stats returned."},
        403: {"description": "Caller is not a therapist account."},
        404: {"description": "Therapist profile not found."},
    },
)
def therapist_stats_route(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_therapist),
) -> TherapistStats:
    therapist = _own_therapist(db, ctx)
    return therapist_stats(get_therapist_appointments(db, therapist.id), utcnow())


def _transition(db: Session, ctx: RequestContext, appointment_id: UUID, transition: Transition) -> AppointmentBase:
    appointment = get_appointment(db, appointment_id)
    if appointment is None:
        raise HTTPException(status_code=404, detail="Appointment not found")

    roles: List[Actor] = []
    if appointment.user_id == ctx.user_id:
        roles.append("user")
    if ctx.user_type == "therapist":
        therapist = get_therapist_by_user(db, ctx.user_id)
        if therapist is not None and therapist.id == appointment.therapist_id:
            roles.append("therapist")
    if not roles:
        raise HTTPException(status_code=404, detail="Appointment not found")

    allowed = [role for role in roles if can_act(transition, role)]
    if not allowed:
        raise HTTPException(status_code=403, detail=f"Only the therapist can {transition} this appointment")

    try:
        status = next_status(appointment.status, transition)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    if transition == "complete" and as_aware(appointment.appointment_date) > utcnow():
        raise HTTPException(status_code=409, detail="Cannot complete an appointment before it has taken place")

    try:
        with two_phase_update(db, appointment):
            appointment.status = status
    except Exception as e:
        logger.error(f"Error applying '{transition}' to appointment {appointment_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update appointment")

    logger.info(f"Appointment {appointment_id} is now {status} ({allowed[0]} {ctx.user_id})")
    return appointment


_TRANSITION_RESPONSES = {
    200: {"description": "Appointment updated."},
    401: {"description": "Unauthorized."},
    403: {"description": "Caller may not perform this change."},
    404: {"description": "Appointment not found."},
    409: {"description": "Appointment is not in a state that allows this change."},
    500: {"description": "Failed to update appointment."},
}


@router.post(
    "/{appointment_id}/confirm",
    response_model=AppointmentBase,
    summary="Confirm a pending request",
    responses=_TRANSITION_RESPONSES,
    dependencies=[Depends(require_writable)],
)
def confirm_appointment_route(
    appointment_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> AppointmentBase:
    return _transition(db, ctx, appointment_id, "confirm")


@router.post(
    "/{appointment_id}/cancel",
    response_model=AppointmentBase,
    summary="Cancel an appointment",
    responses=_TRANSITION_RESPONSES,
    dependencies=[Depends(require_writable)],
)
def cancel_appointment_route(
    appointment_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> AppointmentBase:
    return _transition(db, ctx, appointment_id, "cancel")


@router.post(
    "/{appointment_id}/complete",
    response_model=AppointmentBase,
    summary="Mark a session as completed",
    responses=_TRANSITION_RESPONSES,
    dependencies=[Depends(require_writable)],
)
def complete_appointment_route(
    appointment_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> AppointmentBase:
    return _transition(db, ctx, appointment_id, "complete")
