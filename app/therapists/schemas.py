from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from app.gamification.schemas import GrantResult

SessionFilter = Literal["all", "online", "in_person"]


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


def _clean_list(values: List[str]) -> List[str]:
    cleaned = []
    for value in values:
        value = value.strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


class TherapistBase(BaseSchema):
    id: UUID
    user_id: UUID
    name: str
    title: str
    specialties: List[str] = []
    languages: List[str] = []
    location: str
    bio: Optional[str] = None
    education: Optional[str] = None
    price: Optional[str] = None
    online: bool
    in_person: bool
    rating: float = 0.0
    reviews: int = 0
    image_url: Optional[str] = None
    approved: bool = False
    created_at: Optional[datetime] = None


class TherapistCreate(BaseSchema):
    name: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    specialties: List[str] = Field(..., min_length=1)
    languages: List[str] = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    bio: str = Field(..., min_length=1)
    education: str = Field(..., min_length=1)
    price: str = Field(..., min_length=1)
    online: bool = True
    in_person: bool = False
    image_url: Optional[str] = None
    terms_accepted: bool

    @field_validator("specialties", "languages")
    @classmethod
    def non_empty_items(cls, values: List[str]) -> List[str]:
        values = _clean_list(values)
        if not values:
            raise ValueError("At least one value is required")
        return values

    @field_validator("terms_accepted")
    @classmethod
    def must_accept_terms(cls, value: bool) -> bool:
        if not value:
            raise ValueError("Terms and conditions must be accepted")
        return value

    @model_validator(mode="after")
    def requires_session_mode(self):
        if not (self.online or self.in_person):
            raise ValueError("Offer at least one session mode (online or in person)")
        return self


class TherapistUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None, min_length=1)
    specialties: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    location: Optional[str] = Field(None, min_length=1)
    bio: Optional[str] = None
    education: Optional[str] = None
    price: Optional[str] = None
    online: Optional[bool] = None
    in_person: Optional[bool] = None
    image_url: Optional[str] = None

    @field_validator("specialties", "languages")
    @classmethod
    def non_empty_items(cls, values: Optional[List[str]]) -> Optional[List[str]]:
        if values is None:
            return values
        values = _clean_list(values)
        if not values:
            raise ValueError("At least one value is required")
        return values


class TherapistFilter(BaseSchema):
    search: str = ""
    specialties: List[str] = []
    languages: List[str] = []
    session_type: SessionFilter = "all"


class TherapistFacets(BaseSchema):
    specialties: List[str]
    languages: List[str]


class ReviewCreate(BaseSchema):
    rating: int = Field(..., ge=1, le=5)


class ReviewResult(BaseSchema):
    therapist: TherapistBase
    points: Optional[GrantResult] = None
