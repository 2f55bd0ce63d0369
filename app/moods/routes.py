import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.auth.schemas import RequestContext
from app.auth.service import get_request_context, require_user
from app.core.database import get_db
from app.core.datasource import DataSource
from app.core.dependency import get_data_source, require_writable
from app.core.timeutils import utcnow
from app.gamification.service import award
from app.moods.db import create_mood_entry
from app.moods.schemas import MoodEntryBase, MoodEntryCreate, MoodEntryCreated, MoodSummary, Timeframe
from app.moods.service import summarize, window_start

router = APIRouter(prefix="/moods", tags=["Moods"])
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=MoodEntryCreated,
    status_code=201,
    summary="Log a mood",
    description="Record a 1-10 mood rating with an optional note. Logging earns points.",
    responses={
        201: {"description": "Mood recorded."},
        401: {"description": "Unauthorized."},
        422: {"description": "Mood value outside 1-10."},
        500: {"description": "Failed to record mood."},
    },
    dependencies=[Depends(require_writable)],
)
def create_mood_route(
    mood: MoodEntryCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> MoodEntryCreated:
    try:
        entry = create_mood_entry(db, mood, ctx.user_id)
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving mood for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to record mood")

    points = award(db, ctx.user_id, "mood_entry")
    return MoodEntryCreated(entry=MoodEntryBase.model_validate(entry), points=points)


@router.get(
    "",
    response_model=MoodSummary,
    summary="Mood history and average",
    description="Entries, average and chart points for the chosen timeframe. Anonymous callers see sample data.",
    responses={
        200: {"description": "Summary returned."},
        500: {"description": "Failed to load mood history."},
    },
)
def read_moods_route(
    timeframe: Timeframe = Query("week", description="day | week | month | year"),
    source: DataSource = Depends(get_data_source),
    ctx: RequestContext = Depends(get_request_context),
) -> MoodSummary:
    try:
        now = utcnow()
        entries = source.mood_entries(ctx.user_id, since=window_start(timeframe, now))
        return summarize(entries, timeframe, now)
    except Exception as e:
        logger.error(f"Error loading moods for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load mood history")
