import datetime
from collections import Counter, defaultdict
from typing import Dict, Iterable, List, Set, Tuple
from uuid import UUID

from app.admin.schemas import ActivitySlice, DailyAnalytics, OverviewStats
from app.core.timeutils import as_aware

ACTIVE_WINDOW_DAYS = 7
TIMEFRAME_DAYS = {"day": 1, "week": 7, "month": 30}

# (user_id, created_at) pairs
Events = List[Tuple[UUID, datetime.datetime]]


def calculate_change(current: int, previous: int) -> int:
    """Whole-percent change from `previous` to `current`; 100 when there is no baseline."""
    if previous == 0:
        return 100
    return round((current - previous) / previous * 100)


def timeframe_days(timeframe: str) -> int:
    if timeframe not in TIMEFRAME_DAYS:
        raise ValueError(f"Unknown timeframe: {timeframe}")
    return TIMEFRAME_DAYS[timeframe]


def active_user_ids(event_groups: Iterable[Events], since: datetime.datetime) -> Set[UUID]:
    return {
        user_id
        for events in event_groups
        for user_id, created_at in events
        if as_aware(created_at) >= since
    }


def activity_breakdown(stats: OverviewStats) -> List[ActivitySlice]:
    return [
        ActivitySlice(name="Mood Tracking", value=stats.total_mood_entries),
        ActivitySlice(name="Journaling", value=stats.total_journal_entries),
        ActivitySlice(name="Chat", value=stats.total_chat_messages),
        ActivitySlice(name="Appointments", value=stats.total_appointments),
    ]


def _per_day(events: Events) -> Counter:
    return Counter(as_aware(created_at).date() for _, created_at in events)


def daily_series(
    days: int,
    today: datetime.date,
    signups: Events,
    moods: Events,
    journals: Events,
    chats: Events,
    appointments: Events,
) -> List[DailyAnalytics]:
    """
    One row per UTC day for the `days` days ending today, oldest first.

    `signups` must hold every profile (not just the window) so the running
    user total is correct; the other event lists only need the window.
    """
    start = today - datetime.timedelta(days=days - 1)
    signups_per_day = _per_day(signups)
    users_before = sum(count for day, count in signups_per_day.items() if day < start)

    active: Dict[datetime.date, Set[UUID]] = defaultdict(set)
    for events in (moods, journals, chats, appointments):
        for user_id, created_at in events:
            active[as_aware(created_at).date()].add(user_id)

    moods_per_day = _per_day(moods)
    journals_per_day = _per_day(journals)
    chats_per_day = _per_day(chats)
    appointments_per_day = _per_day(appointments)

    series = []
    running_total = users_before
    for offset in range(days):
        day = start + datetime.timedelta(days=offset)
        running_total += signups_per_day.get(day, 0)
        series.append(DailyAnalytics(
            date=day,
            total_users=running_total,
            active_users=len(active.get(day, ())),
            new_users=signups_per_day.get(day, 0),
            mood_entries=moods_per_day.get(day, 0),
            journal_entries=journals_per_day.get(day, 0),
            chat_messages=chats_per_day.get(day, 0),
            therapist_appointments=appointments_per_day.get(day, 0),
        ))
    return series


def count_between(events: Events, start: datetime.datetime, end: datetime.datetime) -> int:
    return sum(1 for _, created_at in events if start <= as_aware(created_at) < end)


def period_changes(
    now: datetime.datetime,
    days: int,
    signups: Events,
    activity: Iterable[Events],
    appointments: Events,
    therapist_signups: Events,
) -> Dict[str, int]:
    """Percent change of each headline metric, current window against the one before it."""
    span = datetime.timedelta(days=days)
    current_start, previous_start = now - span, now - 2 * span
    activity = list(activity)

    def active_between(start, end):
        return len({
            user_id for events in activity for user_id, created_at in events
            if start <= as_aware(created_at) < end
        })

    return {
        "users": calculate_change(
            count_between(signups, current_start, now), count_between(signups, previous_start, current_start)
        ),
        "active": calculate_change(active_between(current_start, now), active_between(previous_start, current_start)),
        "therapists": calculate_change(
            count_between(therapist_signups, current_start, now),
            count_between(therapist_signups, previous_start, current_start),
        ),
        "appointments": calculate_change(
            count_between(appointments, current_start, now),
            count_between(appointments, previous_start, current_start),
        ),
    }
