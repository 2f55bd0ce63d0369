from typing import Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field, model_validator

from app.gamification.schemas import GrantResult


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class JournalEntryBase(BaseSchema):
    id: UUID
    user_id: UUID
    audio_url: Optional[str] = None
    transcript: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


class JournalEntryCreate(BaseSchema):
    transcript: Optional[str] = None
    notes: Optional[str] = None
    recording_id: Optional[str] = Field(None, description="ID of a staged recording to keep with the entry.")

    @model_validator(mode="after")
    def requires_text(self):
        self.transcript = (self.transcript or "").strip() or None
        self.notes = (self.notes or "").strip() or None
        if self.transcript is None and self.notes is None:
            raise ValueError("A journal entry needs a transcript or notes")
        return self


class JournalEntryCreated(BaseSchema):
    entry: JournalEntryBase
    points: Optional[GrantResult] = None


class RecordingUpload(BaseSchema):
    audio_base64: str = Field(..., min_length=1)
    content_type: str = "audio/wav"


class StagedRecording(BaseSchema):
    recording_id: str
    audio_url: str
    size_bytes: int
    transcript: str
