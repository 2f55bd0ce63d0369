"""
Points, levels, streaks and achievements.

Everything here is pure: no sessions, no clocks. Callers pass in the stored
state and "today" and persist whatever comes back.
"""

import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from app.gamification.schemas import AchievementDefinition, ActivityStats

POINTS_PER_LEVEL = 100

POINT_GRANTS: Dict[str, int] = {
    "chat_exchange": 10,
    "chat_feedback": 5,
    "mood_entry": 5,
    "journal_entry": 10,
    "appointment_booked": 20,
    "therapist_review": 5,
}

GRANT_DESCRIPTIONS: Dict[str, str] = {
    "chat_exchange": "Engaged in a helpful conversation",
    "chat_feedback": "Provided helpful feedback",
    "mood_entry": "Logged your mood",
    "journal_entry": "Wrote a journal entry",
    "appointment_booked": "Booked a session with a therapist",
    "therapist_review": "Reviewed a therapist",
}

ACHIEVEMENTS: List[AchievementDefinition] = [
    AchievementDefinition(id="first-steps", name="First Steps",
                          description="Complete your profile and first mood entry",
                          points=50, icon_name="award"),
    AchievementDefinition(id="consistent-tracker", name="Consistent Tracker",
                          description="Log your mood for 7 consecutive days",
                          points=100, icon_name="calendar"),
    AchievementDefinition(id="journal-master", name="Journal Master",
                          description="Create 10 journal entries",
                          points=150, icon_name="book"),
    AchievementDefinition(id="mindfulness-explorer", name="Mindfulness Explorer",
                          description="Complete 5 chat sessions with the AI assistant",
                          points=100, icon_name="brain"),
    AchievementDefinition(id="connection-seeker", name="Connection Seeker",
                          description="Book your first appointment with a therapist",
                          points=200, icon_name="users"),
    AchievementDefinition(id="feedback-provider", name="Feedback Provider",
                          description="Leave a review for a therapist",
                          points=75, icon_name="message-square"),
    AchievementDefinition(id="streak-champion", name="Streak Champion",
                          description="Maintain a 30-day streak of app usage",
                          points=300, icon_name="zap"),
    AchievementDefinition(id="reflection-pro", name="Reflection Pro",
                          description="Complete 30 journal entries",
                          points=250, icon_name="pen-tool"),
    AchievementDefinition(id="mood-analyst", name="Mood Analyst",
                          description="Track your mood for 30 days total",
                          points=200, icon_name="bar-chart"),
]

ACHIEVEMENT_CONDITIONS: Dict[str, Callable[[ActivityStats], bool]] = {
    "first-steps": lambda s: s.profile_complete and s.mood_entries >= 1,
    "consistent-tracker": lambda s: s.streak_days >= 7,
    "journal-master": lambda s: s.journal_entries >= 10,
    "mindfulness-explorer": lambda s: s.chat_exchanges >= 5,
    "connection-seeker": lambda s: s.appointments_booked >= 1,
    "feedback-provider": lambda s: s.therapist_reviews >= 1,
    "streak-champion": lambda s: s.streak_days >= 30,
    "reflection-pro": lambda s: s.journal_entries >= 30,
    "mood-analyst": lambda s: s.mood_days >= 30,
}


def level_for(total_points: int) -> int:
    return max(total_points, 0) // POINTS_PER_LEVEL + 1


def points_to_next_level(total_points: int) -> int:
    return POINTS_PER_LEVEL - (max(total_points, 0) % POINTS_PER_LEVEL)


def add_points(total_points: int, stored_level: int, points: int) -> Tuple[int, int, bool]:
    """
    Adds a grant to a running total.

    Returns:
        (new_total, new_level, leveled_up) where leveled_up is True exactly
        when the recomputed level is above the stored one.
    """
    if points < 0:
        raise ValueError("Point grants cannot be negative")
    new_total = total_points + points
    new_level = level_for(new_total)
    return new_total, new_level, new_level > stored_level


def next_streak(
    streak_days: int,
    last_activity: Optional[datetime.date],
    today: datetime.date,
) -> int:
    """Streak after recording an activity on `today`."""
    if last_activity is None:
        return 1
    if last_activity == today:
        return max(streak_days, 1)
    if last_activity == today - datetime.timedelta(days=1):
        return streak_days + 1
    return 1


def effective_streak(
    streak_days: int,
    last_activity: Optional[datetime.date],
    today: datetime.date,
) -> int:
    """Streak as displayed on `today`: a missed day means the streak is gone."""
    if last_activity is None:
        return 0
    if today - last_activity > datetime.timedelta(days=1):
        return 0
    return streak_days


def evaluate_achievements(
    stats: ActivityStats,
    unlocked_ids: Iterable[str],
) -> List[AchievementDefinition]:
    """
    Returns the achievements whose condition now holds and that are not yet
    unlocked, in catalogue order. Already unlocked ones are never returned
    again, whatever the stats say.
    """
    unlocked = set(unlocked_ids)
    return [
        achievement
        for achievement in ACHIEVEMENTS
        if achievement.id not in unlocked and ACHIEVEMENT_CONDITIONS[achievement.id](stats)
    ]
