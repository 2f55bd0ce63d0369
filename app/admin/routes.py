import datetime
import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.admin import db as stats_db
from app.admin.schemas import AdminDashboard, AnalyticsTimeframe, ApprovalUpdate, OverviewStats
from app.admin.service import (
    ACTIVE_WINDOW_DAYS,
    active_user_ids,
    activity_breakdown,
    daily_series,
    period_changes,
    timeframe_days,
)
from app.appointments.models import Appointment
from app.auth.schemas import RequestContext
from app.auth.service import require_admin
from app.core.database import get_db
from app.core.dependency import require_writable
from app.core.timeutils import utcnow
from app.journals.models import JournalEntry
from app.moods.models import MoodEntry
from app.therapists.db import count_therapists, get_therapist, get_therapists, set_approval
from app.therapists.schemas import TherapistBase

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger(__name__)


def build_dashboard(db: Session, timeframe: str, now: datetime.datetime) -> AdminDashboard:
    days = timeframe_days(timeframe)
    # the change figures compare against the window before this one
    lookback = now - datetime.timedelta(days=max(days * 2, ACTIVE_WINDOW_DAYS))

    signups = stats_db.profile_signups(db)
    moods = stats_db.mood_events(db, lookback)
    journals = stats_db.journal_events(db, lookback)
    chats = stats_db.chat_events(db, lookback)
    appointments = stats_db.appointment_events(db, lookback)
    activity = (moods, journals, chats, appointments)

    stats = OverviewStats(
        total_users=len(signups),
        active_users=len(active_user_ids(activity, now - datetime.timedelta(days=ACTIVE_WINDOW_DAYS))),
        total_therapists=count_therapists(db, approved=True),
        pending_therapists=count_therapists(db, approved=False),
        total_appointments=stats_db.count_rows(db, Appointment),
        total_mood_entries=stats_db.count_rows(db, MoodEntry),
        total_journal_entries=stats_db.count_rows(db, JournalEntry),
        total_chat_messages=stats_db.count_chat_messages(db),
    )
    return AdminDashboard(
        timeframe=timeframe,
        stats=stats,
        activity=activity_breakdown(stats),
        series=daily_series(days, now.date(), signups, moods, journals, chats, appointments),
        changes=period_changes(now, days, signups, activity, appointments, stats_db.therapist_signups(db, lookback)),
    )


@router.get(
    "/dashboard",
    response_model=AdminDashboard,
    summary="Platform analytics",
    description="""
                Headline totals, an activity breakdown, a per-day series for the timeframe
                (day = 1, week = 7, month = 30 days) and percent changes against the previous period.
                """,
    responses={
        200: {"description": "Dashboard returned."},
        401: {"description": "Unauthorized."},
        403: {"description": "Admin access required."},
        500: {"description": "Failed to compute analytics."},
    },
)
def dashboard_route(
    timeframe: AnalyticsTimeframe = Query("week"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_admin),
) -> AdminDashboard:
    try:
        return build_dashboard(db, timeframe, utcnow())
    except Exception as e:
        logger.error(f"Error building admin dashboard for {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute analytics")


@router.get(
    "/therapists/pending",
    response_model=List[TherapistBase],
    summary="Therapist applications awaiting approval",
    responses={
        200: {"description": "Unapproved therapist profiles."},
        403: {"description": "Admin access required."},
    },
)
def pending_therapists_route(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_admin),
) -> List[TherapistBase]:
    return [t for t in get_therapists(db, approved_only=False) if not t.approved]


@router.put(
    "/therapists/{therapist_id}/approval",
    response_model=TherapistBase,
    summary="Approve or withdraw a therapist",
    responses={
        200: {"description": "Approval updated."},
        403: {"description": "Admin access required."},
        404: {"description": "Therapist not found."},
        500: {"description": "Failed to update approval."},
    },
    dependencies=[Depends(require_writable)],
)
def set_approval_route(
    therapist_id: UUID,
    update: ApprovalUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_admin),
) -> TherapistBase:
    therapist = get_therapist(db, therapist_id)
    if therapist is None:
        raise HTTPException(status_code=404, detail="Therapist not found")
    try:
        updated = set_approval(db, therapist, update.approved)
        logger.info(f"Admin {ctx.user_id} set therapist {therapist_id} approved={update.approved}")
        return updated
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating approval for therapist {therapist_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update approval")
