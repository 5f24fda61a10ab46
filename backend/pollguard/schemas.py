from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterIn(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class VoteIn(BaseModel):
    # Left untyped so malformed values reach the validators instead of a 422
    poll_id: Any = Field(default=None, alias="pollId")
    option_index: Any = Field(default=None, alias="optionIndex")
    model_config = ConfigDict(populate_by_name=True)


class PollOut(BaseModel):
    id: UUID
    user_id: str
    question: str
    options: list[str]
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ActionOut(BaseModel):
    error: Optional[str] = None


class PollResultOut(ActionOut):
    poll: Optional[PollOut] = None


class PollListOut(ActionOut):
    polls: list[PollOut] = Field(default_factory=list)
