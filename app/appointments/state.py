"""
Appointment lifecycle.

    pending ──confirm──▶ confirmed ──complete──▶ completed
       │                    │
       └──────cancel────────┴──────────────────▶ cancelled

completed and cancelled are terminal.
"""

from typing import Dict, Literal, Set

AppointmentStatus = Literal["pending", "confirmed", "cancelled", "completed"]
Transition = Literal["confirm", "cancel", "complete"]
Actor = Literal["user", "therapist"]

TRANSITIONS: Dict[Transition, Dict[AppointmentStatus, AppointmentStatus]] = {
    "confirm": {"pending": "confirmed"},
    "cancel": {"pending": "cancelled", "confirmed": "cancelled"},
    "complete": {"confirmed": "completed"},
}

ALLOWED_ACTORS: Dict[Transition, Set[Actor]] = {
    "confirm": {"therapist"},
    "cancel": {"user", "therapist"},
    "complete": {"therapist"},
}

TERMINAL_STATES: Set[AppointmentStatus] = {"cancelled", "completed"}


class InvalidTransition(ValueError):
    """The appointment is not in a state the transition can start from."""

    def __init__(self, transition: Transition, status: AppointmentStatus):
        self.transition = transition
        self.status = status
        super().__init__(f"Cannot {transition} an appointment that is {status}")


def next_status(status: AppointmentStatus, transition: Transition) -> AppointmentStatus:
    """
    Returns the status an appointment moves to.

    Raises:
        InvalidTransition: If `transition` is not defined from `status`.
    """
    if transition not in TRANSITIONS:
        raise ValueError(f"Unknown transition: {transition}")
    target = TRANSITIONS[transition].get(status)
    if target is None:
        raise InvalidTransition(transition, status)
    return target


def can_act(transition: Transition, actor: Actor) -> bool:
    return actor in ALLOWED_ACTORS.get(transition, set())
