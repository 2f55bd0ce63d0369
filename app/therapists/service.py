from typing import List, Sequence, Tuple

from app.therapists.schemas import TherapistFacets, TherapistFilter


class InvalidTherapistProfile(ValueError):
    pass


def matches_search(therapist, term: str) -> bool:
    """Case-insensitive substring match over name, title, location and specialties."""
    term = term.strip().lower()
    if not term:
        return True
    haystack = [therapist.name, therapist.title, therapist.location, *(therapist.specialties or [])]
    return any(term in (value or "").lower() for value in haystack)


def _any_selected(selected: Sequence[str], values: Sequence[str]) -> bool:
    if not selected:
        return True
    wanted = {s.lower() for s in selected}
    return any((v or "").lower() in wanted for v in values or [])


def matches_session_type(therapist, session_type: str) -> bool:
    if session_type == "online":
        return bool(therapist.online)
    if session_type == "in_person":
        return bool(therapist.in_person)
    return True


def filter_therapists(therapists: Sequence, criteria: TherapistFilter) -> List:
    """
    Narrows the directory list. Every criterion must hold; within specialties
    and languages any selected value is enough. Input order is kept.
    """
    return [
        t for t in therapists
        if matches_search(t, criteria.search)
        and _any_selected(criteria.specialties, t.specialties)
        and _any_selected(criteria.languages, t.languages)
        and matches_session_type(t, criteria.session_type)
    ]


def collect_facets(therapists: Sequence) -> TherapistFacets:
    specialties = sorted({s for t in therapists for s in (t.specialties or [])})
    languages = sorted({lang for t in therapists for lang in (t.languages or [])})
    return TherapistFacets(specialties=specialties, languages=languages)


def apply_review(rating: float, reviews: int, new_rating: int) -> Tuple[float, int]:
    """
    Folds one rating into a running mean.

    Returns:
        Tuple[float, int]: New mean and new review count.
    """
    if not 1 <= new_rating <= 5:
        raise ValueError("Rating must be between 1 and 5")
    count = reviews + 1
    return (rating * reviews + new_rating) / count, count


def check_session_modes(online: bool, in_person: bool) -> None:
    if not (online or in_person):
        raise InvalidTherapistProfile("Offer at least one session mode (online or in person)")
