from uuid import UUID
from typing import Optional, List

from sqlalchemy.orm import Session
from app.therapists.models import Therapist, TherapistReview
from app.therapists.schemas import TherapistCreate, TherapistUpdate
from app.therapists.service import apply_review


def get_therapist(db: Session, therapist_id: UUID) -> Optional[Therapist]:
    return db.query(Therapist).filter(Therapist.id == therapist_id).first()


def get_therapist_by_user(db: Session, user_id: UUID) -> Optional[Therapist]:
    """
    Retrieves the therapist profile owned by a therapist account.

    Args:
        db (Session): SQLAlchemy session.
        user_id (UUID): Auth user ID of the therapist.

    Returns:
        Optional[Therapist]: The profile if onboarded, else None.
    """
    return db.query(Therapist).filter(Therapist.user_id == user_id).first()


def get_therapists(db: Session, approved_only: bool = True) -> List[Therapist]:
    query = db.query(Therapist)
    if approved_only:
        query = query.filter(Therapist.approved.is_(True))
    return query.order_by(Therapist.rating.desc(), Therapist.name.asc()).all()


def get_therapists_by_ids(db: Session, therapist_ids: List[UUID]) -> List[Therapist]:
    if not therapist_ids:
        return []
    return db.query(Therapist).filter(Therapist.id.in_(therapist_ids)).all()


def create_therapist(db: Session, therapist: TherapistCreate, user_id: UUID) -> Therapist:
    """
    Creates an unapproved therapist profile. Uniqueness per user is checked by the caller.

    Args:
        db (Session): SQLAlchemy session.
        therapist (TherapistCreate): Onboarding form data.
        user_id (UUID): Auth user ID of the therapist.

    Returns:
        Therapist: The created profile.
    """
    data = therapist.model_dump(exclude={"terms_accepted"})
    new_therapist = Therapist(user_id=user_id, approved=False, rating=0.0, reviews=0, **data)
    db.add(new_therapist)
    db.commit()
    db.refresh(new_therapist)
    return new_therapist


def update_therapist(db: Session, therapist: Therapist, updated: TherapistUpdate) -> Therapist:
    for field, value in updated.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(therapist, field, value)
    db.commit()
    db.refresh(therapist)
    return therapist


def set_approval(db: Session, therapist: Therapist, approved: bool) -> Therapist:
    therapist.approved = approved
    db.commit()
    db.refresh(therapist)
    return therapist


def count_therapists(db: Session, approved: Optional[bool] = None) -> int:
    query = db.query(Therapist)
    if approved is not None:
        query = query.filter(Therapist.approved.is_(approved))
    return query.count()


def get_review(db: Session, therapist_id: UUID, user_id: UUID) -> Optional[TherapistReview]:
    return (
        db.query(TherapistReview)
        .filter(TherapistReview.therapist_id == therapist_id, TherapistReview.user_id == user_id)
        .first()
    )


def add_review(db: Session, therapist: Therapist, user_id: UUID, rating: int) -> Therapist:
    """
    Stores a user's single review of a therapist and folds it into the
    therapist's running mean. The unique (user, therapist) constraint makes a
    concurrent repeat fail with IntegrityError.
    """
    db.add(TherapistReview(user_id=user_id, therapist_id=therapist.id, rating=rating))
    therapist.rating, therapist.reviews = apply_review(therapist.rating or 0.0, therapist.reviews or 0, rating)
    db.commit()
    db.refresh(therapist)
    return therapist
