import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from app.auth.schemas import RequestContext
from app.auth.service import get_request_context
from app.core.datasource import DataSource
from app.core.dependency import get_data_source
from app.gamification.rules import ACHIEVEMENTS
from app.gamification.schemas import AchievementDefinition, GamificationSummary, PointActivityBase
from app.gamification.service import build_summary

router = APIRouter(prefix="/gamification", tags=["Gamification"])
logger = logging.getLogger(__name__)


@router.get(
    "/me",
    response_model=GamificationSummary,
    summary="Get points, level, streak and achievements",
    description="Achievements page data. Anonymous callers see sample progress.",
    responses={
        200: {"description": "Summary returned."},
        500: {"description": "Failed to load progress."},
    },
)
def read_summary_route(
    source: DataSource = Depends(get_data_source),
    ctx: RequestContext = Depends(get_request_context),
) -> GamificationSummary:
    try:
        return build_summary(source.points(ctx.user_id), source.unlocked_achievements(ctx.user_id))
    except Exception as e:
        logger.error(f"Error loading gamification summary for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load progress")


@router.get(
    "/activities",
    response_model=List[PointActivityBase],
    summary="Recent point grants",
    responses={
        200: {"description": "Ledger rows returned, newest first."},
        500: {"description": "Failed to load activities."},
    },
)
def read_activities_route(
    limit: int = Query(20, ge=1, le=100),
    source: DataSource = Depends(get_data_source),
    ctx: RequestContext = Depends(get_request_context),
) -> List[PointActivityBase]:
    try:
        return source.point_activities(ctx.user_id, limit)
    except Exception as e:
        logger.error(f"Error loading point activities for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load activities")


@router.get(
    "/achievements",
    response_model=List[AchievementDefinition],
    summary="Achievement catalogue",
)
def list_achievements_route() -> List[AchievementDefinition]:
    return ACHIEVEMENTS
