import datetime
from statistics import fmean
from typing import List, Optional, Sequence

from app.core.timeutils import as_aware, shift_months
from app.moods.schemas import MoodChartPoint, MoodEntryBase, MoodSummary, Timeframe

CHART_SIZE = 7


def window_start(timeframe: Timeframe, now: datetime.datetime) -> datetime.datetime:
    """Start of the averaging window ending at `now`."""
    if timeframe == "day":
        return now - datetime.timedelta(days=1)
    if timeframe == "week":
        return now - datetime.timedelta(days=7)
    if timeframe == "month":
        return shift_months(now, -1)
    if timeframe == "year":
        return shift_months(now, -12)
    raise ValueError(f"Unknown timeframe: {timeframe}")


def entries_in_window(entries: Sequence, timeframe: Timeframe, now: datetime.datetime) -> List:
    start = window_start(timeframe, now)
    return [e for e in entries if start <= as_aware(e.created_at) <= now]


def average_mood(entries: Sequence) -> Optional[float]:
    """Arithmetic mean of mood_value, or None when there is nothing to average."""
    if not entries:
        return None
    return fmean(e.mood_value for e in entries)


def mood_label(value: float) -> str:
    if value >= 7:
        return "Good"
    if value >= 4:
        return "Neutral"
    return "Low"


def chart_points(entries: Sequence, size: int = CHART_SIZE) -> List[MoodChartPoint]:
    """The `size` most recent entries, oldest first, whatever the window."""
    recent = sorted(entries, key=lambda e: as_aware(e.created_at), reverse=True)[:size]
    return [
        MoodChartPoint(created_at=e.created_at, mood_value=e.mood_value, label=mood_label(e.mood_value))
        for e in reversed(recent)
    ]


def summarize(entries: Sequence, timeframe: Timeframe, now: datetime.datetime) -> MoodSummary:
    in_window = sorted(
        entries_in_window(entries, timeframe, now),
        key=lambda e: as_aware(e.created_at),
        reverse=True,
    )
    average = average_mood(in_window)
    return MoodSummary(
        timeframe=timeframe,
        entries=[MoodEntryBase.model_validate(e) for e in in_window],
        entry_count=len(in_window),
        average=average,
        average_label=mood_label(average) if average is not None else None,
        chart=chart_points(in_window),
    )
