"""
Moderation queue rules.

A flag starts pending and is resolved exactly once: reviewed (a rule was
applied and a violation recorded) or dismissed. Nothing here touches the
session; callers persist the returned values.
"""

import datetime
from typing import Dict, List, Optional, Sequence

SEVERITY_ACTIONS: Dict[int, str] = {
    1: "warning",
    2: "suspension",
    3: "ban",
}

DEFAULT_CHAT_RULES = [
    {
        "title": "Respectful Communication",
        "description": "Always communicate respectfully with others. Avoid offensive language, "
                       "personal attacks, or disrespectful behavior.",
        "severity": 1,
    },
    {
        "title": "No Harassment",
        "description": "Harassment of any kind is not tolerated. This includes threats, "
                       "intimidation, or persistent unwanted contact.",
        "severity": 3,
    },
    {
        "title": "No Harmful Content",
        "description": "Do not share content that promotes self-harm, suicide, or harmful behaviors.",
        "severity": 3,
    },
    {
        "title": "Privacy Respect",
        "description": "Respect the privacy of others. Do not share personal information without consent.",
        "severity": 2,
    },
    {
        "title": "No Spam",
        "description": "Do not send spam messages or repeatedly post the same content.",
        "severity": 1,
    },
]


class ModerationError(ValueError):
    pass


class FlagAlreadyResolved(ModerationError):
    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Flag is already {status}")


def action_for_severity(severity: int) -> str:
    if severity not in SEVERITY_ACTIONS:
        raise ModerationError(f"Unknown severity: {severity}")
    return SEVERITY_ACTIONS[severity]


def filter_flags(flags: Sequence, term: str) -> List:
    """
    Case-insensitive substring search over content, reporter name and reason.
    Keeps the input order; an empty term returns everything.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return list(flags)
    return [
        f for f in flags
        if needle in (f.content or "").lower()
        or needle in (f.user_name or "").lower()
        or needle in (f.reason or "").lower()
    ]


def filter_by_status(flags: Sequence, status: Optional[str]) -> List:
    if status is None:
        return list(flags)
    return [f for f in flags if f.status == status]


def review_flag(flag, rule, reason: Optional[str], moderator_id, now: datetime.datetime) -> Dict:
    """
    Validates a moderator's review and describes its outcome.

    Args:
        flag: The flagged message.
        rule: The chat rule being applied, or None if none was chosen.
        reason (str): Moderator's justification.
        moderator_id: ID of the reviewing admin.
        now (datetime): Review time.

    Returns:
        dict: `flag` field updates and `violation` field values.

    Raises:
        ModerationError: If no rule or no justification was given.
        FlagAlreadyResolved: If the flag is no longer pending.
    """
    if rule is None:
        raise ModerationError("Select the rule that was violated")
    reason = (reason or "").strip()
    if not reason:
        raise ModerationError("A reason for the action is required")
    if flag.status != "pending":
        raise FlagAlreadyResolved(flag.status)

    return {
        "flag": {"status": "reviewed", "reviewed_at": now, "reviewed_by": moderator_id},
        "violation": {
            "user_id": flag.user_id,
            "flagged_message_id": flag.id,
            "rule_id": rule.id,
            "severity": rule.severity,
            "action": action_for_severity(rule.severity),
            "reason": reason,
            "moderator_id": moderator_id,
        },
    }


def dismiss_flag(flag, moderator_id, now: datetime.datetime) -> Optional[Dict]:
    """
    Field updates that dismiss a pending flag, or None when it is already
    dismissed. A reviewed flag cannot be dismissed.
    """
    if flag.status == "dismissed":
        return None
    if flag.status != "pending":
        raise FlagAlreadyResolved(flag.status)
    return {"status": "dismissed", "reviewed_at": now, "reviewed_by": moderator_id}
