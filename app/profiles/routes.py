import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth.schemas import RequestContext
from app.auth.service import require_user
from app.core.database import get_db
from app.core.dependency import require_writable
from app.gamification.service import evaluate_and_unlock
from app.profiles.db import (
    create_profile,
    get_or_create_settings,
    get_profile,
    update_profile,
    update_settings,
)
from app.profiles.schemas import (
    ProfileBase,
    ProfileCreate,
    ProfileUpdate,
    UserSettingsBase,
    UserSettingsUpdate,
)

router = APIRouter(prefix="/profiles", tags=["Profiles"])
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=ProfileBase,
    status_code=201,
    summary="Complete onboarding",
    description="Create the caller's profile. Each user can onboard once.",
    responses={
        201: {"description": "Profile created."},
        401: {"description": "Unauthorized."},
        409: {"description": "Profile already exists."},
        422: {"description": "Missing nickname or age range, or terms not accepted."},
        500: {"description": "Failed to create profile."},
    },
    dependencies=[Depends(require_writable)],
)
def create_profile_route(
    profile: ProfileCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> ProfileBase:
    try:
        if get_profile(db, ctx.user_id) is not None:
            raise HTTPException(status_code=409, detail="Profile already exists")
        created = create_profile(db, profile, ctx.user_id)
        logger.info(f"User {ctx.user_id} completed onboarding")
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating profile for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create profile")

    # onboarding can complete First Steps
    try:
        evaluate_and_unlock(db, ctx.user_id)
    except Exception as e:
        logger.error(f"Failed to check achievements for user {ctx.user_id}: {e}")
    return created


@router.get(
    "/me",
    response_model=ProfileBase,
    summary="Get own profile",
    responses={
        200: {"description": "Profile retrieved."},
        401: {"description": "Unauthorized."},
        404: {"description": "User has not onboarded yet."},
    },
)
def read_profile_route(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> ProfileBase:
    profile = get_profile(db, ctx.user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.put(
    "/me",
    response_model=ProfileBase,
    summary="Update own profile",
    responses={
        200: {"description": "Profile updated."},
        401: {"description": "Unauthorized."},
        404: {"description": "Profile not found."},
        500: {"description": "Failed to update profile."},
    },
    dependencies=[Depends(require_writable)],
)
def update_profile_route(
    updated: ProfileUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> ProfileBase:
    try:
        profile = update_profile(db, ctx.user_id, updated)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating profile for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update profile")


@router.get(
    "/me/settings",
    response_model=UserSettingsBase,
    summary="Get own settings",
    description="Returns the caller's preferences, creating the defaults on first access.",
    responses={
        200: {"description": "Settings retrieved."},
        401: {"description": "Unauthorized."},
    },
)
def read_settings_route(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> UserSettingsBase:
    try:
        return get_or_create_settings(db, ctx.user_id)
    except Exception as e:
        db.rollback()
        logger.error(f"Error loading settings for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load settings")


@router.put(
    "/me/settings",
    response_model=UserSettingsBase,
    summary="Update own settings",
    responses={
        200: {"description": "Settings updated."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to update settings."},
    },
    dependencies=[Depends(require_writable)],
)
def update_settings_route(
    updated: UserSettingsUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> UserSettingsBase:
    try:
        return update_settings(db, ctx.user_id, updated)
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating settings for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update settings")
