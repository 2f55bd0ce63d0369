"""
Sample rows served to anonymous callers and in DATA_SOURCE=fixtures mode.

Timestamps are relative to the `now` passed in so the data always looks
recent. IDs are stable across restarts.
"""

import datetime
import uuid
from typing import Dict, List

from app.gamification.schemas import PointsSnapshot
from app.journals.schemas import JournalEntryBase
from app.moderation.schemas import ChatRuleBase, FlaggedMessageBase
from app.moderation.service import DEFAULT_CHAT_RULES
from app.moods.schemas import MoodEntryBase
from app.therapists.schemas import TherapistBase

_NAMESPACE = uuid.UUID("6f1c1a52-4d0e-4b8f-9a56-3f1f7f0b2a11")


def sample_id(name: str) -> uuid.UUID:
    return uuid.uuid5(_NAMESPACE, name)


SAMPLE_USER_ID = sample_id("user")

_MOODS = [
    (7, "Feeling good today!"),
    (5, "Neutral day"),
    (8, "Great progress at work"),
    (4, "Feeling a bit down"),
    (6, "Better than yesterday"),
    (9, "Excellent day!"),
    (7, "Good overall"),
]


def sample_moods(now: datetime.datetime) -> List[MoodEntryBase]:
    """One entry per day for the past week, newest first."""
    return [
        MoodEntryBase(
            id=sample_id(f"mood-{i}"),
            user_id=SAMPLE_USER_ID,
            mood_value=value,
            note=note,
            created_at=now - datetime.timedelta(days=i),
        )
        for i, (value, note) in enumerate(_MOODS)
    ]


def sample_journals(now: datetime.datetime) -> List[JournalEntryBase]:
    return [
        JournalEntryBase(
            id=sample_id("journal-1"),
            user_id=SAMPLE_USER_ID,
            transcript="Today was a challenging day. I felt anxious about my upcoming presentation, "
                       "but I practiced deep breathing which helped calm me down.",
            notes="Remember to continue practicing mindfulness techniques when feeling anxious.",
            created_at=now - datetime.timedelta(days=2),
        ),
        JournalEntryBase(
            id=sample_id("journal-2"),
            user_id=SAMPLE_USER_ID,
            transcript="I had a good conversation with my friend today. It really lifted my spirits "
                       "and reminded me of the importance of social connections.",
            notes="Schedule more regular catch-ups with friends.",
            created_at=now - datetime.timedelta(days=5),
        ),
    ]


def sample_therapists(now: datetime.datetime) -> List[TherapistBase]:
    return [
        TherapistBase(
            id=sample_id("therapist-1"),
            user_id=sample_id("therapist-user-1"),
            name="Dr. Sarah Mwangi",
            title="Clinical Psychologist",
            specialties=["Anxiety", "Depression", "Trauma"],
            languages=["English", "Swahili"],
            location="Dar es Salaam",
            bio="Dr. Mwangi specializes in cognitive behavioral therapy with over 10 years of "
                "experience helping clients overcome anxiety and depression.",
            education="Ph.D. in Clinical Psychology, University of Nairobi",
            price="TSh 50,000 per session",
            online=True,
            in_person=True,
            rating=4.8,
            reviews=24,
            approved=True,
            created_at=now,
        ),
        TherapistBase(
            id=sample_id("therapist-2"),
            user_id=sample_id("therapist-user-2"),
            name="Dr. James Omondi",
            title="Psychiatrist",
            specialties=["Bipolar Disorder", "Anxiety", "PTSD"],
            languages=["English", "Swahili"],
            location="Arusha",
            bio="Dr. Omondi is a board-certified psychiatrist who combines medication management "
                "with therapeutic approaches for comprehensive care.",
            education="M.D., Muhimbili University of Health and Allied Sciences",
            price="TSh 65,000 per session",
            online=True,
            in_person=True,
            rating=4.6,
            reviews=18,
            approved=True,
            created_at=now,
        ),
        TherapistBase(
            id=sample_id("therapist-3"),
            user_id=sample_id("therapist-user-3"),
            name="Fatima Hassan",
            title="Licensed Counselor",
            specialties=["Relationships", "Self-esteem", "Stress"],
            languages=["Swahili", "English", "Arabic"],
            location="Mwanza",
            bio="Fatima creates a warm, supportive environment where clients can explore their "
                "challenges and develop practical coping strategies.",
            education="M.A. in Counseling Psychology, University of Dar es Salaam",
            price="TSh 40,000 per session",
            online=True,
            in_person=False,
            rating=4.9,
            reviews=32,
            approved=True,
            created_at=now,
        ),
    ]


def sample_points(today: datetime.date) -> PointsSnapshot:
    return PointsSnapshot(
        user_id=SAMPLE_USER_ID,
        total_points=320,
        level=4,
        streak_days=7,
        last_activity_date=today,
    )


def sample_unlocked(now: datetime.datetime) -> Dict[str, datetime.datetime]:
    return {
        "first-steps": now - datetime.timedelta(days=10),
        "consistent-tracker": now - datetime.timedelta(days=2),
        "mindfulness-explorer": now - datetime.timedelta(days=5),
    }


def sample_chat_rules() -> List[ChatRuleBase]:
    return [
        ChatRuleBase(id=sample_id(f"rule-{rule['title']}"), **rule)
        for rule in DEFAULT_CHAT_RULES
    ]


def sample_flags(now: datetime.datetime) -> List[FlaggedMessageBase]:
    rows = [
        ("Anonymous User", "This message contains inappropriate content that was flagged by another user.",
         "Inappropriate content"),
        ("User123", "This message contains potentially harmful advice about mental health treatments.",
         "Harmful advice"),
        ("HealthSeeker", "This message contains spam or promotional content unrelated to mental health.",
         "Spam"),
    ]
    return [
        FlaggedMessageBase(
            id=sample_id(f"flag-{i}"),
            message_id=f"msg{i}",
            user_id=sample_id(f"flag-user-{i}"),
            user_name=user_name,
            content=content,
            reason=reason,
            status="pending",
            created_at=now - datetime.timedelta(hours=i),
        )
        for i, (user_name, content, reason) in enumerate(rows, start=1)
    ]
