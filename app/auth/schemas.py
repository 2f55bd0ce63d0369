from pydantic import BaseModel
from typing import Optional, Literal
from uuid import UUID


UserType = Literal["user", "therapist", "admin"]


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class RequestContext(BaseSchema):
    """Identity of the caller for one request. Anonymous when user_id is None."""

    user_id: Optional[UUID] = None
    email: Optional[str] = None
    user_type: UserType = "user"
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


class ContextOut(BaseSchema):
    user_id: Optional[UUID] = None
    email: Optional[str] = None
    user_type: UserType
    is_admin: bool
    is_authenticated: bool
