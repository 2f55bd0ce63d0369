import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.appointments.schemas import BookingOptions
from app.appointments.service import booking_options
from app.auth.schemas import RequestContext
from app.auth.service import require_therapist, require_user
from app.core.database import get_db
from app.core.datasource import DataSource
from app.core.dependency import get_public_data_source, require_writable
from app.core.timeutils import utcnow
from app.gamification.service import award
from app.therapists.db import (
    add_review,
    create_therapist,
    get_review,
    get_therapist,
    get_therapist_by_user,
    update_therapist,
)
from app.therapists.schemas import (
    ReviewCreate,
    ReviewResult,
    SessionFilter,
    TherapistBase,
    TherapistCreate,
    TherapistFacets,
    TherapistFilter,
    TherapistUpdate,
)
from app.therapists.service import (
    InvalidTherapistProfile,
    check_session_modes,
    collect_facets,
    filter_therapists,
)

router = APIRouter(prefix="/therapists", tags=["Therapists"])
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=TherapistBase,
    status_code=201,
    summary="Therapist onboarding",
    description="Create the caller's therapist profile. It stays out of the directory until an admin approves it.",
    responses={
        201: {"description": "Profile submitted for approval."},
        401: {"description": "Unauthorized."},
        403: {"description": "Caller is not a therapist account."},
        409: {"description": "Therapist profile already exists."},
        422: {"description": "Missing required fields, no session mode, or terms not accepted."},
        500: {"description": "Failed to create therapist profile."},
    },
    dependencies=[Depends(require_writable)],
)
def create_therapist_route(
    therapist: TherapistCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_therapist),
) -> TherapistBase:
    try:
        if get_therapist_by_user(db, ctx.user_id) is not None:
            raise HTTPException(status_code=409, detail="Therapist profile already exists")
        created = create_therapist(db, therapist, ctx.user_id)
        logger.info(f"Therapist profile {created.id} submitted by user {ctx.user_id}")
        return created
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating therapist profile for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create therapist profile")


@router.get(
    "/me",
    response_model=TherapistBase,
    summary="Get own therapist profile",
    responses={
        200: {"description": "Profile retrieved."},
        403: {"description": "Caller is not a therapist account."},
        404: {"description": "Therapist has not onboarded yet."},
    },
)
def read_own_therapist_route(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_therapist),
) -> TherapistBase:
    therapist = get_therapist_by_user(db, ctx.user_id)
    if therapist is None:
        raise HTTPException(status_code=404, detail="Therapist profile not found")
    return therapist


@router.put(
    "/me",
    response_model=TherapistBase,
    summary="Update own therapist profile",
    responses={
        200: {"description": "Profile updated."},
        400: {"description": "Update would leave no session mode."},
        403: {"description": "Caller is not a therapist account."},
        404: {"description": "Therapist profile not found."},
        500: {"description": "Failed to update therapist profile."},
    },
    dependencies=[Depends(require_writable)],
)
def update_own_therapist_route(
    updated: TherapistUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_therapist),
) -> TherapistBase:
    therapist = get_therapist_by_user(db, ctx.user_id)
    if therapist is None:
        raise HTTPException(status_code=404, detail="Therapist profile not found")
    try:
        check_session_modes(
            updated.online if updated.online is not None else therapist.online,
            updated.in_person if updated.in_person is not None else therapist.in_person,
        )
        return update_therapist(db, therapist, updated)
    except InvalidTherapistProfile as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating therapist profile for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update therapist profile")


@router.get(
    "",
    response_model=List[TherapistBase],
    summary="Search the therapist directory",
    description="Approved therapists matching every given filter. Repeat `specialties`/`languages` to select several.",
    responses={
        200: {"description": "Matching therapists."},
        500: {"description": "Failed to load therapists."},
    },
)
def list_therapists_route(
    search: str = Query("", description="Matches name, title, location or specialty."),
    specialties: List[str] = Query([]),
    languages: List[str] = Query([]),
    session_type: SessionFilter = Query("all"),
    source: DataSource = Depends(get_public_data_source),
) -> List[TherapistBase]:
    try:
        criteria = TherapistFilter(
            search=search, specialties=specialties, languages=languages, session_type=session_type
        )
        return filter_therapists(source.approved_therapists(), criteria)
    except Exception as e:
        logger.error(f"Error listing therapists: {e}")
        raise HTTPException(status_code=500, detail="Failed to load therapists")


@router.get(
    "/facets",
    response_model=TherapistFacets,
    summary="Directory filter options",
    description="Distinct specialties and languages across approved therapists.",
)
def therapist_facets_route(source: DataSource = Depends(get_public_data_source)) -> TherapistFacets:
    try:
        return collect_facets(source.approved_therapists())
    except Exception as e:
        logger.error(f"Error collecting therapist facets: {e}")
        raise HTTPException(status_code=500, detail="Failed to load filter options")


@router.get(
    "/{therapist_id}",
    response_model=TherapistBase,
    summary="Get a therapist",
    responses={
        200: {"description": "Therapist retrieved."},
        404: {"description": "No approved therapist with that ID."},
    },
)
def read_therapist_route(
    therapist_id: UUID,
    source: DataSource = Depends(get_public_data_source),
) -> TherapistBase:
    therapist = source.approved_therapist(therapist_id)
    if therapist is None:
        raise HTTPException(status_code=404, detail="Therapist not found")
    return therapist


@router.get(
    "/{therapist_id}/booking-options",
    response_model=BookingOptions,
    summary="Bookable slots, dates and session types",
    responses={
        200: {"description": "Options returned."},
        404: {"description": "No approved therapist with that ID."},
    },
)
def booking_options_route(
    therapist_id: UUID,
    source: DataSource = Depends(get_public_data_source),
) -> BookingOptions:
    therapist = source.approved_therapist(therapist_id)
    if therapist is None:
        raise HTTPException(status_code=404, detail="Therapist not found")
    return booking_options(therapist, utcnow().date())


@router.post(
    "/{therapist_id}/reviews",
    response_model=ReviewResult,
    summary="Rate a therapist",
    description="Add a 1-5 star rating, once per therapist. Updates the therapist's average and review count, and earns points.",
    responses={
        200: {"description": "Review recorded."},
        401: {"description": "Unauthorized."},
        403: {"description": "Therapists cannot review their own profile."},
        404: {"description": "No approved therapist with that ID."},
        409: {"description": "Already reviewed by this user."},
        422: {"description": "Rating outside 1-5."},
        500: {"description": "Failed to record review."},
    },
    dependencies=[Depends(require_writable)],
)
def review_therapist_route(
    therapist_id: UUID,
    review: ReviewCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> ReviewResult:
    therapist = get_therapist(db, therapist_id)
    if therapist is None or not therapist.approved:
        raise HTTPException(status_code=404, detail="Therapist not found")
    if therapist.user_id == ctx.user_id:
        raise HTTPException(status_code=403, detail="Therapists cannot review themselves")
    if get_review(db, therapist_id, ctx.user_id) is not None:
        raise HTTPException(status_code=409, detail="You have already reviewed this therapist")
    try:
        therapist = add_review(db, therapist, ctx.user_id, review.rating)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="You have already reviewed this therapist")
    except Exception as e:
        db.rollback()
        logger.error(f"Error recording review of therapist {therapist_id} by user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to record review")

    points = award(db, ctx.user_id, "therapist_review")
    return ReviewResult(therapist=TherapistBase.model_validate(therapist), points=points)
