from uuid import UUID
from typing import Dict, List, Optional

from sqlalchemy.orm import Session
from app.profiles.models import Profile, UserSettings
from app.profiles.schemas import ProfileCreate, ProfileUpdate, UserSettingsUpdate


def get_profile(db: Session, user_id: UUID) -> Optional[Profile]:
    """
    Retrieves the profile owned by a user.

    Args:
        db (Session): SQLAlchemy session.
        user_id (UUID): ID of the owner.

    Returns:
        Optional[Profile]: The profile if found, else None.
    """
    return db.query(Profile).filter(Profile.id == user_id).first()


def create_profile(db: Session, profile: ProfileCreate, user_id: UUID) -> Profile:
    """
    Creates the onboarding profile for a user. The caller checks uniqueness first.

    Args:
        db (Session): SQLAlchemy session.
        profile (ProfileCreate): Onboarding answers.
        user_id (UUID): ID of the user, used as the profile's primary key.

    Returns:
        Profile: The created profile.
    """
    new_profile = Profile(
        id=user_id,
        nickname=profile.nickname,
        age_range=profile.age_range,
        primary_concerns=profile.primary_concerns,
        preferred_therapist_gender=profile.preferred_therapist_gender,
        preferred_language=profile.preferred_language,
    )
    db.add(new_profile)
    db.commit()
    db.refresh(new_profile)
    return new_profile


def update_profile(db: Session, user_id: UUID, updated_profile: ProfileUpdate) -> Optional[Profile]:
    profile = get_profile(db, user_id)
    if profile:
        update_data = updated_profile.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(profile, field, value)
        db.commit()
        db.refresh(profile)
        return profile
    return None


def get_or_create_settings(db: Session, user_id: UUID) -> UserSettings:
    """
    Returns the user's settings row, creating it with defaults on first access.
    """
    settings = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
    if settings is None:
        settings = UserSettings(user_id=user_id)
        db.add(settings)
        db.commit()
        db.refresh(settings)
    return settings


def update_settings(db: Session, user_id: UUID, updated: UserSettingsUpdate) -> UserSettings:
    settings = get_or_create_settings(db, user_id)
    for field, value in updated.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(settings, field, value)
    db.commit()
    db.refresh(settings)
    return settings


def get_nicknames(db: Session, user_ids: List[UUID]) -> Dict[UUID, str]:
    if not user_ids:
        return {}
    rows = db.query(Profile.id, Profile.nickname).filter(Profile.id.in_(user_ids)).all()
    return {user_id: nickname for user_id, nickname in rows}
