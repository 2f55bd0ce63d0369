from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class ProfileBase(BaseSchema):
    id: UUID
    nickname: str
    age_range: str
    primary_concerns: List[str] = []
    preferred_therapist_gender: Optional[str] = None
    preferred_language: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileCreate(BaseSchema):
    nickname: str = Field(..., min_length=1, max_length=50)
    age_range: str = Field(..., min_length=1)
    primary_concerns: List[str] = []
    preferred_therapist_gender: Optional[str] = None
    preferred_language: str = "Swahili"
    terms_accepted: bool

    @field_validator("nickname")
    @classmethod
    def strip_nickname(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Nickname is required")
        return value

    @field_validator("terms_accepted")
    @classmethod
    def must_accept_terms(cls, value: bool) -> bool:
        if not value:
            raise ValueError("Terms and privacy policy must be accepted")
        return value


class ProfileUpdate(BaseSchema):
    nickname: Optional[str] = Field(None, min_length=1, max_length=50)
    age_range: Optional[str] = None
    primary_concerns: Optional[List[str]] = None
    preferred_therapist_gender: Optional[str] = None
    preferred_language: Optional[str] = None


class UserSettingsBase(BaseSchema):
    theme: Literal["light", "dark", "system"] = "system"
    language: str = "english"
    mood_reminders: bool = True
    journal_reminders: bool = False
    therapist_updates: bool = True
    save_data_locally: bool = True
    anonymous_analytics: bool = False


class UserSettingsUpdate(BaseSchema):
    theme: Optional[Literal["light", "dark", "system"]] = None
    language: Optional[str] = None
    mood_reminders: Optional[bool] = None
    journal_reminders: Optional[bool] = None
    therapist_updates: Optional[bool] = None
    save_data_locally: Optional[bool] = None
    anonymous_analytics: Optional[bool] = None
