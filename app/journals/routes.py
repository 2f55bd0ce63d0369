from uuid import UUID
from typing import Dict, List
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth.schemas import RequestContext
from app.auth.service import get_request_context, require_user
from app.core.database import get_db
from app.core.datasource import DataSource
from app.core.dependency import get_data_source, require_writable
from app.gamification.service import award
from app.journals.db import create_journal
from app.journals.recorder import RecordingError, RecordingStore, RecordingTooLarge, get_recording_store
from app.journals.schemas import (
    JournalEntryBase,
    JournalEntryCreate,
    JournalEntryCreated,
    RecordingUpload,
    StagedRecording,
)

router = APIRouter(prefix="/journals", tags=["Journals"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=List[JournalEntryBase],
    summary="Get journal entries",
    description="Retrieve a paginated list of the caller's journal entries, newest first. Anonymous callers see sample entries.",
    responses={
        200: {"description": "Journal entries retrieved successfully."},
        500: {"description": "Failed to retrieve journal entries."},
    },
)
def get_journals_route(
    skip: int = 0,
    limit: int = 100,
    source: DataSource = Depends(get_data_source),
    ctx: RequestContext = Depends(get_request_context),
) -> List[JournalEntryBase]:
    try:
        return source.journals(ctx.user_id, skip, limit)
    except Exception as e:
        logger.error(f"Error fetching journals for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch journal entries")


@router.post(
    "",
    response_model=JournalEntryCreated,
    status_code=201,
    summary="Save a journal entry",
    description="""
                Save a transcript and/or notes. Pass the `recording_id` of a staged recording
                to keep the audio with the entry. Saving earns points.
                """,
    responses={
        201: {"description": "Journal entry saved."},
        400: {"description": "Unknown or expired recording."},
        401: {"description": "Unauthorized."},
        422: {"description": "Neither transcript nor notes given."},
        500: {"description": "Failed to save journal entry."},
    },
    dependencies=[Depends(require_writable)],
)
def create_journal_route(
    journal: JournalEntryCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
    store: RecordingStore = Depends(get_recording_store),
) -> JournalEntryCreated:
    audio_url = None
    if journal.recording_id:
        try:
            audio_url = store.claim(ctx.user_id, journal.recording_id)
        except RecordingError as e:
            raise HTTPException(status_code=400, detail=str(e))

    try:
        entry = create_journal(db, journal, ctx.user_id, audio_url)
    except Exception as e:
        db.rollback()
        if audio_url:
            store.unclaim(ctx.user_id, journal.recording_id)
        logger.error(f"Error creating journal for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save journal entry")

    points = award(db, ctx.user_id, "journal_entry")
    return JournalEntryCreated(entry=JournalEntryBase.model_validate(entry), points=points)


@router.post(
    "/recordings",
    response_model=StagedRecording,
    status_code=201,
    summary="Upload a voice recording",
    description="Stage a base64 recording and get its transcript. Replaces any earlier unsaved recording.",
    responses={
        201: {"description": "Recording staged."},
        400: {"description": "Invalid audio payload."},
        401: {"description": "Unauthorized."},
        413: {"description": "Recording too large."},
        500: {"description": "Failed to store recording."},
    },
    dependencies=[Depends(require_writable)],
)
def stage_recording_route(
    upload: RecordingUpload,
    ctx: RequestContext = Depends(require_user),
    store: RecordingStore = Depends(get_recording_store),
) -> StagedRecording:
    try:
        return store.stage(ctx.user_id, upload.audio_base64, upload.content_type)
    except RecordingTooLarge as e:
        raise HTTPException(status_code=413, detail=str(e))
    except RecordingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OSError as e:
        logger.error(f"Error storing recording for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to store recording")


@router.delete(
    "/recordings",
    response_model=Dict[str, bool],
    summary="Discard the unsaved recording",
    responses={
        200: {"description": "`discarded` tells whether a recording was pending."},
        401: {"description": "Unauthorized."},
    },
)
def discard_recording_route(
    ctx: RequestContext = Depends(require_user),
    store: RecordingStore = Depends(get_recording_store),
) -> Dict[str, bool]:
    return {"discarded": store.discard(ctx.user_id)}


@router.get(
    "/{journal_id}",
    response_model=JournalEntryBase,
    summary="Get a journal by ID",
    description="Retrieve a specific journal entry by its unique identifier.",
    responses={
        200: {"description": "Journal retrieved successfully."},
        404: {"description": "Journal not found."},
        500: {"description": "Failed to retrieve journal."},
    },
)
def read_journal_route(
    journal_id: UUID,
    source: DataSource = Depends(get_data_source),
    ctx: RequestContext = Depends(get_request_context),
) -> JournalEntryBase:
    try:
        journal = source.journal(ctx.user_id, journal_id)
        if journal is None:
            raise HTTPException(status_code=404, detail="Journal not found")
        return journal
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving journal {journal_id} for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve journal")
