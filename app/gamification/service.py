import datetime
import logging
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.timeutils import utcnow
from app.gamification import rules
from app.gamification.db import (
    add_activity,
    add_unlocked_achievement,
    count_activities_by_action,
    count_activity_days,
    get_or_create_points,
    get_unlocked_achievements,
    has_profile,
)
from app.gamification.schemas import (
    AchievementDefinition,
    AchievementStatus,
    ActivityStats,
    GamificationSummary,
    GrantResult,
    PointsSnapshot,
)

logger = logging.getLogger(__name__)


def build_stats(db: Session, user_id: UUID, streak_days: int) -> ActivityStats:
    """
    Collects the counters achievement conditions look at. Counts come from the
    point ledger, so every qualifying action is counted once per grant.
    """
    counts = count_activities_by_action(db, user_id)
    return ActivityStats(
        streak_days=streak_days,
        profile_complete=has_profile(db, user_id),
        mood_entries=counts.get("mood_entry", 0),
        mood_days=count_activity_days(db, user_id, "mood_entry"),
        journal_entries=counts.get("journal_entry", 0),
        chat_exchanges=counts.get("chat_exchange", 0),
        appointments_booked=counts.get("appointment_booked", 0),
        therapist_reviews=counts.get("therapist_review", 0),
    )


def _unlock_achievements(db: Session, user_id: UUID, row) -> List[AchievementDefinition]:
    """Stores every achievement whose condition now holds and adds its bonus to `row`."""
    stats = build_stats(db, user_id, row.streak_days)
    unlocked_ids = [u.achievement_id for u in get_unlocked_achievements(db, user_id)]
    newly_unlocked = rules.evaluate_achievements(stats, unlocked_ids)
    for achievement in newly_unlocked:
        add_unlocked_achievement(db, user_id, achievement.id)
        add_activity(db, user_id, "achievement_unlocked", achievement.points, f"Unlocked {achievement.name}")
        row.total_points += achievement.points
    return newly_unlocked


def grant_points(
    db: Session,
    user_id: UUID,
    action: str,
    description: Optional[str] = None,
    today: Optional[datetime.date] = None,
) -> GrantResult:
    """
    Records a qualifying action: adds its fixed grant, advances the streak,
    unlocks any achievements that now hold (adding their bonus), and
    recomputes the level. Everything is committed together.

    Args:
        db (Session): SQLAlchemy session.
        user_id (UUID): ID of the user earning the points.
        action (str): Key of POINT_GRANTS.
        description (str, optional): Ledger text, defaults per action.
        today (date, optional): Calendar day of the activity, defaults to today in UTC.

    Returns:
        GrantResult: Points awarded, new totals, level-up flag and new unlocks.

    Raises:
        ValueError: If the action has no grant.
    """
    if action not in rules.POINT_GRANTS:
        raise ValueError(f"Unknown point action: {action}")
    points = rules.POINT_GRANTS[action]
    today = today or utcnow().date()

    try:
        row = get_or_create_points(db, user_id)
        stored_level = row.level

        row.streak_days = rules.next_streak(row.streak_days, row.last_activity_date, today)
        row.last_activity_date = today
        row.total_points, _, _ = rules.add_points(row.total_points, stored_level, points)
        add_activity(db, user_id, action, points, description or rules.GRANT_DESCRIPTIONS.get(action))
        db.flush()

        newly_unlocked = _unlock_achievements(db, user_id, row)

        row.total_points, row.level, leveled_up = rules.add_points(row.total_points, stored_level, 0)
        db.commit()
        db.refresh(row)
    except Exception:
        db.rollback()
        raise

    if leveled_up:
        logger.info(f"User {user_id} reached level {row.level}")
    for achievement in newly_unlocked:
        logger.info(f"User {user_id} unlocked achievement {achievement.id}")

    return GrantResult(
        action=action,
        points_awarded=points,
        total_points=row.total_points,
        level=row.level,
        streak_days=row.streak_days,
        leveled_up=leveled_up,
        unlocked=newly_unlocked,
    )


def evaluate_and_unlock(db: Session, user_id: UUID) -> List[AchievementDefinition]:
    """
    Re-checks achievements after a change that earns no points itself, such as
    completing onboarding. Unlock bonuses are added and the level recomputed.

    Returns:
        List[AchievementDefinition]: Achievements unlocked by this call.
    """
    try:
        row = get_or_create_points(db, user_id)
        stored_level = row.level
        newly_unlocked = _unlock_achievements(db, user_id, row)
        row.total_points, row.level, leveled_up = rules.add_points(row.total_points, stored_level, 0)
        db.commit()
    except Exception:
        db.rollback()
        raise

    if leveled_up:
        logger.info(f"User {user_id} reached level {row.level}")
    for achievement in newly_unlocked:
        logger.info(f"User {user_id} unlocked achievement {achievement.id}")
    return newly_unlocked


def award(db: Session, user_id: UUID, action: str, description: Optional[str] = None) -> Optional[GrantResult]:
    """
    grant_points for side-effect callers: a failed grant is logged and
    reported as None so the action that earned it still succeeds.
    """
    try:
        return grant_points(db, user_id, action, description)
    except Exception as e:
        logger.error(f"Failed to grant '{action}' points to user {user_id}: {e}")
        return None


def build_summary(
    snapshot: PointsSnapshot,
    unlocked: Dict[str, datetime.datetime],
    today: Optional[datetime.date] = None,
) -> GamificationSummary:
    """
    Shapes the achievements page: points, level, live streak and every
    catalogue achievement marked achieved or not.
    """
    today = today or utcnow().date()
    achievements = [
        AchievementStatus(
            **definition.model_dump(),
            achieved=definition.id in unlocked,
            achieved_at=unlocked.get(definition.id),
        )
        for definition in rules.ACHIEVEMENTS
    ]
    achieved_count = sum(1 for a in achievements if a.achieved)
    return GamificationSummary(
        total_points=snapshot.total_points,
        level=rules.level_for(snapshot.total_points),
        streak_days=rules.effective_streak(snapshot.streak_days, snapshot.last_activity_date, today),
        points_to_next_level=rules.points_to_next_level(snapshot.total_points),
        last_activity_date=snapshot.last_activity_date,
        achievements=achievements,
        achieved_count=achieved_count,
        completion_percent=round(achieved_count / len(achievements) * 100) if achievements else 0,
    )
